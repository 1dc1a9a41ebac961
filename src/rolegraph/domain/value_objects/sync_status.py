"""Outcome of synchronizing a catalog mutation to the authorization backend."""

from enum import StrEnum


class SyncStatus(StrEnum):
    """Every tuple write succeeded, or at least one failed."""

    SUCCESS = "success"
    PARTIAL = "partial"
