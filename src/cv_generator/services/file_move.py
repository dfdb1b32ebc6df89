"""Moving files inside the PII directory.

A move is a copy followed by a delete of the source. The two steps are not
atomic: when the delete fails the destination has already been written and
the source is left in place, which the result flags with a ``note``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cv_generator.models.results import MOVE_PARTIAL_NOTE, SAME_FILE, ErrorKind, MoveResult
from cv_generator.services.file_copy import copy_file
from cv_generator.services.file_delete import delete_file
from cv_generator.services.paths import resolve_path

logger = logging.getLogger(__name__)


def _same_file(first: Path, second: Path) -> bool:
    if first == second:
        return True
    try:
        return first.exists() and second.exists() and first.samefile(second)
    except OSError:
        return False


def move_file(
    source_path: str,
    destination_path: str,
    base_directory: Path | str,
    overwrite: bool = False,
) -> MoveResult:
    """Move a file by copying it and deleting the original.

    Args:
        source_path: Relative path of the file to move.
        destination_path: Relative path to move to.
        base_directory: Directory both paths are resolved against.
        overwrite: Whether an existing destination may be replaced.

    Returns:
        MoveResult describing the move.
    """
    full_source = resolve_path(base_directory, source_path)
    full_destination = resolve_path(base_directory, destination_path)
    if _same_file(full_source, full_destination):
        # Copy then delete would remove the only copy.
        return MoveResult(
            success=False,
            source_path=str(full_source),
            destination_path=str(full_destination),
            error=SAME_FILE,
            error_kind=ErrorKind.VALIDATION,
        )

    copy_result = copy_file(source_path, destination_path, base_directory, overwrite=overwrite)
    if not copy_result.success:
        return MoveResult(
            success=False,
            source_path=copy_result.source_path,
            destination_path=copy_result.destination_path,
            error=f"Copy failed: {copy_result.error}",
            error_kind=copy_result.error_kind,
        )

    # The destination already holds the content, so no backup of the source.
    delete_result = delete_file(source_path, base_directory, create_backup=False)
    if not delete_result.success:
        logger.warning(
            "Moved %s to %s but could not delete the original: %s",
            copy_result.source_path,
            copy_result.destination_path,
            delete_result.error,
        )
        return MoveResult(
            success=False,
            source_path=copy_result.source_path,
            destination_path=copy_result.destination_path,
            error=f"Delete failed: {delete_result.error}",
            error_kind=delete_result.error_kind or ErrorKind.IO_ERROR,
            note=MOVE_PARTIAL_NOTE,
        )

    logger.info("Moved %s to %s", copy_result.source_path, copy_result.destination_path)
    return MoveResult(
        success=True,
        source_path=copy_result.source_path,
        destination_path=copy_result.destination_path,
        overwritten=copy_result.overwritten,
    )
