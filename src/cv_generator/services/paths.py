"""Resolution of relative PII paths against a base directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve_path(base_directory: Path | str, relative_path: str) -> Path:
    """Join a relative path onto the base directory.

    The join is lexical: ``..`` segments are collapsed and an absolute
    ``relative_path`` replaces the base. Paths escaping the base directory
    are logged but not rejected.

    Args:
        base_directory: Directory all operations are rooted at.
        relative_path: Caller-supplied path inside the base directory.

    Returns:
        The joined, normalized path.
    """
    joined = Path(os.path.normpath(os.path.join(os.fspath(base_directory), relative_path)))
    if not is_within_base(base_directory, joined):
        logger.warning("Path %s resolves outside base directory %s", relative_path, base_directory)
    return joined


def is_within_base(base_directory: Path | str, path: Path) -> bool:
    """Return True if path is lexically inside base_directory."""
    base = Path(os.path.normpath(os.path.abspath(base_directory)))
    target = Path(os.path.normpath(os.path.abspath(path)))
    return target == base or base in target.parents
