"""Batch reading of PII files into parsed data."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from cv_generator.services.paths import resolve_path
from cv_generator.utils.yaml_format import is_yaml_path, load_yaml

logger = logging.getLogger(__name__)

PARSE_YAML_ERROR = "Failed to parse YAML"
READ_FILE_ERROR = "Failed to read file"


def _parse_content(file_path: str, content: str) -> Any:
    """Parse YAML files strictly and everything else as JSON or raw text."""
    if is_yaml_path(file_path):
        try:
            return load_yaml(content)
        except yaml.YAMLError as exc:
            logger.warning("Could not parse YAML file %s: %s", file_path, exc)
            return {"error": PARSE_YAML_ERROR, "message": str(exc), "rawContent": content}

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return content


def read_files(paths: Iterable[str], base_directory: Path | str) -> dict[str, Any]:
    """Read each file and parse it according to its extension.

    A failure on one file is reported inline under its key and never aborts
    the rest of the batch.

    Args:
        paths: Relative paths to read.
        base_directory: Directory the paths are resolved against.

    Returns:
        Mapping of each relative path to its parsed value or error entry.
    """
    results: dict[str, Any] = {}

    for file_path in paths:
        try:
            content = resolve_path(base_directory, file_path).read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            logger.warning("Could not read file %s: %s", file_path, exc)
            results[file_path] = {"error": READ_FILE_ERROR, "message": str(exc)}
            continue

        results[file_path] = _parse_content(file_path, content)

    return results
