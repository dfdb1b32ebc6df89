"""Copying files inside the PII directory."""

from __future__ import annotations

import logging
from pathlib import Path

from cv_generator.models.results import (
    DESTINATION_EXISTS,
    SOURCE_MISSING,
    CopyResult,
    ErrorKind,
)
from cv_generator.services.paths import resolve_path

logger = logging.getLogger(__name__)


def copy_file(
    source_path: str,
    destination_path: str,
    base_directory: Path | str,
    overwrite: bool = False,
) -> CopyResult:
    """Copy the text content of one file to another path.

    Args:
        source_path: Relative path of the file to copy.
        destination_path: Relative path to copy to.
        base_directory: Directory both paths are resolved against.
        overwrite: Whether an existing destination may be replaced.

    Returns:
        CopyResult with resolved paths on success.
    """
    try:
        full_source = resolve_path(base_directory, source_path)
        full_destination = resolve_path(base_directory, destination_path)

        if not full_source.exists():
            return CopyResult(
                success=False,
                source_path=str(full_source),
                error=SOURCE_MISSING,
                error_kind=ErrorKind.NOT_FOUND,
            )

        destination_existed = full_destination.exists()
        if destination_existed and not overwrite:
            return CopyResult(
                success=False,
                destination_path=str(full_destination),
                error=DESTINATION_EXISTS,
                error_kind=ErrorKind.CONFLICT,
            )

        full_destination.parent.mkdir(parents=True, exist_ok=True)
        content = full_source.read_text(encoding="utf-8")
        full_destination.write_text(content, encoding="utf-8")
    except (OSError, ValueError) as exc:
        logger.warning("Failed to copy %s to %s: %s", source_path, destination_path, exc)
        return CopyResult(
            success=False,
            source_path=source_path,
            destination_path=destination_path,
            error=str(exc),
            error_kind=ErrorKind.IO_ERROR,
        )

    logger.info("Copied %s to %s", full_source, full_destination)
    return CopyResult(
        success=True,
        source_path=str(full_source),
        destination_path=str(full_destination),
        overwritten=destination_existed,
    )
