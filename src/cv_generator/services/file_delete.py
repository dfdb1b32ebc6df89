"""Deleting files from the PII directory with optional backup."""

from __future__ import annotations

import logging
from pathlib import Path

from cv_generator.file_diff import SnapshotWriter
from cv_generator.models.results import FILE_MISSING, DeleteResult, ErrorKind
from cv_generator.services.paths import resolve_path

logger = logging.getLogger(__name__)


def _backup_before_delete(full_path: Path, snapshots: SnapshotWriter) -> bool:
    """Preserve the file's content as a backup record, best effort."""
    try:
        content = full_path.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        logger.warning("Could not create backup for %s: %s", full_path, exc)
        return False
    return snapshots.write_backup(full_path, content) is not None


def delete_file(
    file_path: str,
    base_directory: Path | str,
    create_backup: bool = True,
    snapshots: SnapshotWriter | None = None,
) -> DeleteResult:
    """Delete a file, optionally leaving a backup record first.

    A failed backup never blocks the deletion; it is only reported through
    ``backup_created``.

    Args:
        file_path: Relative path of the file to delete.
        base_directory: Directory the path is resolved against.
        create_backup: Whether to write a backup record before deleting.
        snapshots: Writer for backup records.

    Returns:
        DeleteResult describing the deletion.
    """
    snapshots = snapshots or SnapshotWriter()

    try:
        full_path = resolve_path(base_directory, file_path)

        if not full_path.exists():
            return DeleteResult(
                success=False,
                file_path=str(full_path),
                error=FILE_MISSING,
                error_kind=ErrorKind.NOT_FOUND,
            )

        backup_created = create_backup and _backup_before_delete(full_path, snapshots)
        full_path.unlink()
    except (OSError, ValueError) as exc:
        logger.warning("Failed to delete %s: %s", file_path, exc)
        return DeleteResult(
            success=False,
            file_path=file_path,
            error=str(exc),
            error_kind=ErrorKind.IO_ERROR,
        )

    logger.info("Deleted %s (backup=%s)", full_path, backup_created)
    return DeleteResult(success=True, file_path=str(full_path), backup_created=backup_created)
