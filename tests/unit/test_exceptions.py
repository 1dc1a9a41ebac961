"""Unit tests for domain exceptions."""

import pytest

from rolegraph.domain.exceptions import (
    Conflict,
    NotFound,
    PermissionDenied,
    PersistenceError,
    PersistenceErrorKind,
    RoleGraphError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc_type",
    [Conflict, NotFound, PermissionDenied, PersistenceError, ValidationError],
)
def test_domain_errors_inherit_rolegraph_error(exc_type) -> None:
    """Every domain error is a RoleGraphError."""
    assert issubclass(exc_type, RoleGraphError)


def test_not_found_message_and_fields() -> None:
    """NotFound formats entity and key."""
    exc = NotFound("Role", "manager")
    assert str(exc) == "Role not found: manager"
    assert exc.entity == "Role"
    assert exc.key == "manager"


def test_conflict_message() -> None:
    """Conflict names the duplicate key."""
    with pytest.raises(RoleGraphError, match="Role already exists: admin"):
        raise Conflict("Role", "admin")


def test_validation_error_keeps_error_list() -> None:
    """ValidationError carries individual errors; default is empty."""
    exc = ValidationError("Invalid role inheritance", errors=["a", "b"])
    assert str(exc) == "Invalid role inheritance"
    assert exc.errors == ["a", "b"]
    assert ValidationError("Role name is required").errors == []


def test_persistence_error_kind() -> None:
    """PersistenceError exposes its failure kind."""
    exc = PersistenceError(PersistenceErrorKind.WRITE_FAILED, "disk full")
    assert exc.kind is PersistenceErrorKind.WRITE_FAILED
    assert str(exc.kind) == "write_failed"
    assert str(exc) == "disk full"
