"""Domain exceptions."""

from enum import StrEnum


class RoleGraphError(Exception):
    """Base exception for RoleGraph."""

    pass


class PermissionDenied(RoleGraphError):
    """Caller is not allowed to act on the requested role."""

    pass


class NotFound(RoleGraphError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class Conflict(RoleGraphError):
    """Resource with the same key already exists."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} already exists: {key}")
        self.entity = entity
        self.key = key


class ValidationError(RoleGraphError):
    """Validation failed for input data."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class PersistenceErrorKind(StrEnum):
    """Failure categories of the file persistence layer."""

    PERMISSION_DENIED = "permission_denied"
    SERIALIZATION_ERROR = "serialization_error"
    BACKUP_FAILED = "backup_failed"
    WRITE_FAILED = "write_failed"
    CORRUPTION_DETECTED = "corruption_detected"


class PersistenceError(RoleGraphError):
    """Snapshot could not be written to or read from disk."""

    def __init__(self, kind: PersistenceErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
