"""File persistence for the role catalog.

The storage file is replaced atomically: the snapshot goes to a temporary
file in the same directory, is fsynced, then renamed over the destination.
Before each replace the previous file is copied to the backup directory and
old backups are pruned. All disk work runs in a worker thread behind one
asyncio lock shared by explicit saves and autosave.
"""

import asyncio
import contextlib
import gzip
import logging
import os
import shutil
import tempfile
import zlib
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pydantic

from rolegraph.application.dto.storage_dto import SaveResult
from rolegraph.application.ports import SnapshotSource
from rolegraph.domain.entities import StorageSnapshot
from rolegraph.domain.exceptions import (
    NotFound,
    PersistenceError,
    PersistenceErrorKind,
    ValidationError,
)
from rolegraph.infrastructure.persistence.file.schema import snapshot_from_json, snapshot_to_json

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "storage-backup-"
_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


@dataclass
class PersistenceConfig:
    """File persistence settings. ``autosave_interval`` is in seconds, 0 disables it."""

    data_file_path: Path
    backup_dir: Path
    max_backups: int = 10
    autosave_interval: float = 30.0
    compression: bool = False


class FilePersistenceManager:
    """Atomic snapshot saves with backup rotation and optional autosave.

    Without a config the manager is inert: saves report ``saved=False`` and
    restore returns an empty snapshot.
    """

    def __init__(self, config: PersistenceConfig | None = None) -> None:
        self._config = config
        self._lock = asyncio.Lock()
        self._source: SnapshotSource | None = None
        self._saved_revision: int | None = None
        self._autosave_task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> PersistenceConfig | None:
        return self._config

    # --- public API ---

    async def save(self, snapshot: StorageSnapshot) -> SaveResult:
        """Write snapshot. Concurrent calls queue on the lock."""
        if self._config is None:
            return SaveResult(saved=False)
        async with self._lock:
            result = await asyncio.to_thread(self._save_sync, self._config, snapshot)
            if snapshot.revision is not None:
                self._saved_revision = snapshot.revision
            return result

    async def restore(self) -> StorageSnapshot:
        """Newest valid state: storage file, else newest usable backup, else empty."""
        if self._config is None:
            return StorageSnapshot()
        async with self._lock:
            return await asyncio.to_thread(self._restore_sync, self._config)

    async def restore_from_backup(self) -> StorageSnapshot:
        """Newest usable backup only. Raises if persistence is off or no backup is usable."""
        config = self._config
        if config is None:
            raise ValidationError("Persistence is not enabled")
        async with self._lock:
            snapshot = await asyncio.to_thread(self._latest_backup, config)
        if snapshot is None:
            raise NotFound("Backup", str(config.backup_dir))
        return snapshot

    def start_autosave(self, source: SnapshotSource) -> None:
        """Save ``source`` every interval whenever its revision moved."""
        self._source = source
        self._saved_revision = source.revision
        if self._config is None or self._config.autosave_interval <= 0:
            return
        if self._autosave_task is not None:
            self._autosave_task.cancel()
        interval = self._config.autosave_interval
        self._autosave_task = asyncio.create_task(self._autosave_loop(interval))
        logger.info("Autosave every %.1fs to %s", interval, self._config.data_file_path)

    async def flush(self) -> SaveResult | None:
        """Save the autosave source if it changed since the last save."""
        source = self._source
        if source is None or self._config is None or source.revision == self._saved_revision:
            return None
        try:
            return await self.save(source.snapshot())
        except PersistenceError:
            logger.exception("Autosave of %s failed", self._config.data_file_path)
            return None

    async def close(self) -> None:
        """Stop autosave and write any pending change."""
        task, self._autosave_task = self._autosave_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.flush()

    async def _autosave_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.flush()
            except Exception:
                logger.exception("Autosave tick failed, retrying in %.1fs", interval)

    # --- blocking helpers, run in a worker thread ---

    def _save_sync(self, config: PersistenceConfig, snapshot: StorageSnapshot) -> SaveResult:
        self._ensure_directories(config)
        backup = self._create_backup(config)
        backup_count = self._prune_backups(config)

        now = datetime.now(UTC)
        snapshot = replace(
            snapshot,
            metadata=replace(snapshot.metadata, last_modified=now, backup_count=backup_count),
        )
        try:
            payload = snapshot_to_json(snapshot)
        except (TypeError, ValueError, pydantic.ValidationError) as exc:
            raise PersistenceError(
                PersistenceErrorKind.SERIALIZATION_ERROR,
                f"Failed to serialize storage data: {exc}",
            ) from exc

        self._atomic_write(config.data_file_path, payload)
        logger.info(
            "Saved %d roles to %s (%d backups)",
            snapshot.role_count,
            config.data_file_path,
            backup_count,
        )
        return SaveResult(
            saved=True,
            path=config.data_file_path,
            backup_created=backup,
            backup_count=backup_count,
            timestamp=now,
        )

    def _atomic_write(self, destination: Path, payload: bytes) -> None:
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=destination.parent,
                prefix=f".{destination.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(temp_path, destination)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(
                _kind_for(exc, PersistenceErrorKind.WRITE_FAILED),
                f"Failed to write {destination}: {exc}",
            ) from exc

    def _create_backup(self, config: PersistenceConfig) -> Path | None:
        source = config.data_file_path
        if not source.exists():
            return None
        target = self._next_backup_path(config)
        try:
            if config.compression:
                with source.open("rb") as src, gzip.open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            else:
                shutil.copy2(source, target)
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise PersistenceError(
                _kind_for(exc, PersistenceErrorKind.BACKUP_FAILED),
                f"Failed to back up {source}: {exc}",
            ) from exc
        logger.debug("Backed up %s to %s", source, target)
        return target

    def _next_backup_path(self, config: PersistenceConfig) -> Path:
        suffix = ".json.gz" if config.compression else ".json"
        moment = datetime.now(UTC)
        while True:
            name = f"{BACKUP_PREFIX}{moment.strftime(_TIMESTAMP_FORMAT)}{suffix}"
            path = config.backup_dir / name
            if not path.exists():
                return path
            moment += timedelta(microseconds=1)

    def _prune_backups(self, config: PersistenceConfig) -> int:
        """Delete oldest backups beyond max_backups; return how many remain."""
        backups = list_backups(config.backup_dir)
        excess = backups[: max(len(backups) - config.max_backups, 0)]
        for path in excess:
            try:
                path.unlink()
                logger.debug("Pruned backup %s", path)
            except OSError:
                logger.warning("Failed to prune backup %s", path, exc_info=True)
        return len(list_backups(config.backup_dir))

    def _restore_sync(self, config: PersistenceConfig) -> StorageSnapshot:
        self._remove_stale_temp_files(config)
        path = config.data_file_path
        if path.exists():
            try:
                snapshot = read_snapshot(path)
                logger.info("Restored %d roles from %s", snapshot.role_count, path)
                return snapshot
            except PersistenceError as exc:
                logger.warning("Storage file %s unusable (%s), trying backups", path, exc)
        snapshot = self._latest_backup(config)
        if snapshot is not None:
            return snapshot
        logger.info("No usable storage file or backup in %s, starting empty", path.parent)
        return StorageSnapshot()

    def _latest_backup(self, config: PersistenceConfig) -> StorageSnapshot | None:
        for backup in reversed(list_backups(config.backup_dir)):
            try:
                snapshot = read_snapshot(backup)
            except PersistenceError as exc:
                logger.warning("Skipping unusable backup %s: %s", backup, exc)
                continue
            logger.info("Restored %d roles from backup %s", snapshot.role_count, backup)
            return snapshot
        return None

    def _remove_stale_temp_files(self, config: PersistenceConfig) -> None:
        directory = config.data_file_path.parent
        if not directory.is_dir():
            return
        for leftover in directory.glob(f".{config.data_file_path.name}.*.tmp"):
            logger.warning("Removing leftover temporary file %s", leftover)
            leftover.unlink(missing_ok=True)

    def _ensure_directories(self, config: PersistenceConfig) -> None:
        try:
            config.data_file_path.parent.mkdir(parents=True, exist_ok=True)
            config.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                _kind_for(exc, PersistenceErrorKind.WRITE_FAILED),
                f"Failed to create storage directories: {exc}",
            ) from exc


def list_backups(backup_dir: Path) -> list[Path]:
    """Backup files oldest first (names embed a sortable UTC timestamp)."""
    try:
        if not backup_dir.is_dir():
            return []
        return sorted(
            (p for p in backup_dir.iterdir() if p.is_file() and p.name.startswith(BACKUP_PREFIX)),
            key=lambda p: p.name,
        )
    except OSError as exc:
        raise PersistenceError(
            _kind_for(exc, PersistenceErrorKind.BACKUP_FAILED),
            f"Failed to list backups in {backup_dir}: {exc}",
        ) from exc


def read_snapshot(path: Path) -> StorageSnapshot:
    """Load a storage file or backup (gzip if the name ends in .gz)."""
    try:
        raw = path.read_bytes()
        if path.name.endswith(".gz"):
            raw = gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        raise PersistenceError(
            _kind_for(exc, PersistenceErrorKind.CORRUPTION_DETECTED),
            f"Failed to read {path}: {exc}",
        ) from exc
    try:
        return snapshot_from_json(raw)
    except pydantic.ValidationError as exc:
        raise PersistenceError(
            PersistenceErrorKind.CORRUPTION_DETECTED,
            f"{path} is corrupted or not a storage file: {exc.error_count()} errors",
        ) from exc


def _kind_for(exc: BaseException, default: PersistenceErrorKind) -> PersistenceErrorKind:
    if isinstance(exc, PermissionError):
        return PersistenceErrorKind.PERMISSION_DENIED
    return default
