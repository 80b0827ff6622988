"""
Catalog errors. Every failure surfaces as one of these typed exceptions;
`kind` is the stable name the gateway puts on the wire.
"""


class CatalogError(Exception):
    kind = "InternalError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class NotFound(CatalogError):
    kind = "NotFound"

    def __init__(self, resource_id=None):
        message = f"Resource {resource_id} not found" if resource_id is not None else "Not found"
        super().__init__(message)
        self.resource_id = resource_id


class AlreadyExists(CatalogError):
    """Reserved. No current operation raises it."""
    kind = "AlreadyExists"


class InvalidInput(CatalogError):
    kind = "InvalidInput"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class Unauthorized(CatalogError):
    kind = "Unauthorized"


class InternalError(CatalogError):
    kind = "InternalError"


class SnapshotError(InternalError):
    """Snapshot could not be read or does not have the expected shape."""
