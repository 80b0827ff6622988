"""
Identity & Time - caller identity and clock values used by the catalog.
The transport decides who is calling; the catalog only compares identities.
"""

import time
from typing import NewType, Optional

Identity = NewType("Identity", str)

ANONYMOUS = Identity("anonymous")


def identity_from(raw: Optional[str]) -> Identity:
    """Wrap a transport-supplied principal. Blank or missing means anonymous."""
    if raw is None:
        return ANONYMOUS
    raw = raw.strip()
    return Identity(raw) if raw else ANONYMOUS


class SystemClock:
    """Wall-clock seconds that never go backwards."""

    def __init__(self):
        self._last = 0

    def now(self) -> int:
        current = int(time.time())
        if current < self._last:
            return self._last
        self._last = current
        return current


class FixedClock:
    """Manually driven clock for tools and tests."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int = 1) -> int:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, value: int):
        if value < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = value
