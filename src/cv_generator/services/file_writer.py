"""Writing YAML documents into the PII directory.

Both entry points overwrite the target in full and, when asked, leave a
markdown diff record for content that actually changed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from cv_generator.file_diff import SnapshotWriter
from cv_generator.models.results import ErrorKind, WriteResult
from cv_generator.services.paths import resolve_path
from cv_generator.utils.yaml_format import dump_yaml

logger = logging.getLogger(__name__)

__all__ = ["write_file", "write_yaml_file"]


def write_file(
    data: Any,
    file_path: str,
    base_directory: Path | str,
    create_diff: bool = True,
    snapshots: SnapshotWriter | None = None,
) -> WriteResult:
    """Serialize structured data to YAML and write it.

    Args:
        data: Mapping, sequence or scalar to serialize.
        file_path: Destination relative to base_directory.
        base_directory: Directory the path is resolved against.
        create_diff: Whether to record a diff when the content changes.
        snapshots: Writer for diff records.

    Returns:
        WriteResult describing the write.
    """
    try:
        yaml_content = dump_yaml(data)
    except yaml.YAMLError as exc:
        logger.warning("Could not serialize data for %s: %s", file_path, exc)
        return WriteResult(
            success=False,
            file_path=file_path,
            error=str(exc),
            error_kind=ErrorKind.VALIDATION,
        )

    return write_yaml_file(
        yaml_content,
        file_path,
        base_directory,
        create_diff=create_diff,
        snapshots=snapshots,
    )


def write_yaml_file(
    yaml_content: str,
    file_path: str,
    base_directory: Path | str,
    create_diff: bool = True,
    snapshots: SnapshotWriter | None = None,
) -> WriteResult:
    """Write already-rendered YAML text exactly as given.

    Args:
        yaml_content: YAML text to write.
        file_path: Destination relative to base_directory.
        base_directory: Directory the path is resolved against.
        create_diff: Whether to record a diff when the content changes.
        snapshots: Writer for diff records.

    Returns:
        WriteResult describing the write.
    """
    snapshots = snapshots or SnapshotWriter()

    # Encode before the target is opened; a failed encode leaves it untouched.
    try:
        encoded = yaml_content.encode("utf-8")
    except UnicodeEncodeError as exc:
        logger.warning("Refusing to write %s: %s", file_path, exc)
        return WriteResult(
            success=False,
            file_path=file_path,
            error=str(exc),
            error_kind=ErrorKind.VALIDATION,
        )

    try:
        full_path = resolve_path(base_directory, file_path)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        previous_content = ""
        file_existed = False
        if full_path.exists():
            try:
                previous_content = full_path.read_text(encoding="utf-8")
                file_existed = True
            except (OSError, ValueError) as exc:
                logger.warning("Could not read existing file %s: %s", full_path, exc)

        full_path.write_bytes(encoded)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to write %s: %s", file_path, exc)
        return WriteResult(
            success=False,
            file_path=file_path,
            error=str(exc),
            error_kind=ErrorKind.IO_ERROR,
        )

    content_changed = previous_content != yaml_content
    if create_diff and content_changed:
        snapshots.write_diff(full_path, previous_content, yaml_content, file_existed)

    logger.info("Wrote %s (existed=%s, changed=%s)", full_path, file_existed, content_changed)
    return WriteResult(
        success=True,
        file_path=str(full_path),
        yaml_content=yaml_content,
        file_existed=file_existed,
        diff_created=create_diff and content_changed,
    )
