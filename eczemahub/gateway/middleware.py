"""
Gateway Middleware: caller identity resolution.
The gateway is the transport that tells the catalog who is calling.
"""

import logging

from fastapi import HTTPException, Request

from eczemahub.catalog.identity import ANONYMOUS, Identity, identity_from
from eczemahub.config.settings import get_settings

logger = logging.getLogger("eczemahub.gateway.middleware")


class CallerIdentity:
    """
    Reads the caller principal from a request header.
    - missing/blank header -> anonymous caller
    - anonymous writes can be switched off with gateway.allow_anonymous
    """

    def __init__(self):
        self.settings = get_settings()
        self.header = self.settings.get("gateway.identity_header", "X-Caller-Id")
        self.allow_anonymous = bool(self.settings.get("gateway.allow_anonymous", True))

    def resolve(self, request: Request) -> Identity:
        return identity_from(request.headers.get(self.header))

    def require(self, request: Request) -> Identity:
        """Identity for a write call. 401 if anonymous callers are not allowed."""
        caller = self.resolve(request)
        if caller == ANONYMOUS and not self.allow_anonymous:
            logger.warning(f"Rejected anonymous write to {request.url.path}")
            raise HTTPException(401, f"Missing {self.header} header")
        return caller
