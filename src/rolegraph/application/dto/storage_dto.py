"""Storage DTOs."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass
class SaveResult:
    """Outcome of one snapshot save. ``saved`` is False in memory-only mode."""

    saved: bool
    path: Path | None = None
    backup_created: Path | None = None
    backup_count: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
