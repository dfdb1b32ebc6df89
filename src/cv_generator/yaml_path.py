"""Dotted-path access into parsed YAML documents.

A YAML path such as ``workExperience.0.bubbles.1`` addresses one nested
location: purely numeric segments index into sequences, every other segment
is a mapping key. Updates always go through the whole document: parse,
set one location, re-serialize. YAML comments are dropped on rewrite.
"""

from __future__ import annotations

from typing import Any

from cv_generator.models.results import YamlPathError
from cv_generator.utils.yaml_format import dump_yaml, load_yaml

__all__ = [
    "get_nested_value",
    "set_nested_value",
    "split_path",
    "update_yaml_document",
]


def _is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit()


def split_path(path: str) -> list[str]:
    """Split a dotted YAML path into segments.

    Raises:
        YamlPathError: If the path is empty or has an empty segment.
    """
    segments = path.split(".")
    if not path or any(segment == "" for segment in segments):
        raise YamlPathError(f"Invalid YAML path: {path!r}")
    return segments


def _lookup_key(mapping: dict[Any, Any], segment: str) -> Any:
    # YAML loads keys such as `2020:` as ints
    if segment in mapping:
        return mapping[segment]
    if _is_index(segment):
        return mapping.get(int(segment))
    return None


def get_nested_value(document: Any, path: str) -> Any:
    """Return the value at a YAML path, or None if any segment is missing.

    Args:
        document: Parsed YAML document.
        path: Dotted path to read.

    Returns:
        The addressed value, or None when the path does not exist or crosses
        a value of the wrong shape.
    """
    current = document
    for segment in path.split("."):
        if current is None:
            return None
        if _is_index(segment) and isinstance(current, list):
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        elif isinstance(current, dict):
            current = _lookup_key(current, segment)
        else:
            return None
    return current


def _ensure_index(sequence: list[Any], index: int, traversed: list[str]) -> None:
    """Make index addressable, appending one slot when it is exactly one past the end.

    Raises:
        YamlPathError: If index would leave a gap in the sequence.
    """
    if index > len(sequence):
        location = ".".join(traversed) or "<root>"
        raise YamlPathError(
            f"Index {index} out of range at path {location}: sequence has {len(sequence)} items"
        )
    if index == len(sequence):
        sequence.append(None)


def _check_shape(container: Any, segment: str, traversed: list[str]) -> None:
    location = ".".join(traversed) or "<root>"
    if _is_index(segment):
        if not isinstance(container, list):
            raise YamlPathError(
                f"Expected array at path {location}, but got {type(container).__name__}"
            )
    elif not isinstance(container, dict):
        raise YamlPathError(
            f"Expected object at path {location}, but got {type(container).__name__}"
        )


def set_nested_value(document: Any, path: str, value: Any) -> None:
    """Set the value at a YAML path, creating missing containers on the way.

    A missing intermediate becomes a list when the following segment is
    numeric and a dict otherwise. A numeric segment may address an existing
    item or append one right after the last; larger indexes are rejected.

    Args:
        document: Parsed YAML document, modified in place.
        path: Dotted path to write.
        value: Value to store.

    Raises:
        YamlPathError: If the path is malformed or a segment meets a value of
            the wrong shape (e.g. a numeric segment on a mapping).
    """
    segments = split_path(path)
    current = document

    for position, segment in enumerate(segments[:-1]):
        _check_shape(current, segment, segments[:position])
        next_segment = segments[position + 1]

        if _is_index(segment):
            index = int(segment)
            _ensure_index(current, index, segments[:position])
            if current[index] is None:
                current[index] = [] if _is_index(next_segment) else {}
            current = current[index]
        else:
            if current.get(segment) is None:
                current[segment] = [] if _is_index(next_segment) else {}
            current = current[segment]

    final_segment = segments[-1]
    _check_shape(current, final_segment, segments[:-1])
    if _is_index(final_segment):
        index = int(final_segment)
        _ensure_index(current, index, segments[:-1])
        current[index] = value
    else:
        current[final_segment] = value


def update_yaml_document(yaml_content: str, path: str, value: Any) -> str:
    """Parse a whole YAML document, set one path and re-serialize it.

    Args:
        yaml_content: Current document text. Empty text counts as an empty mapping.
        path: Dotted path to write.
        value: Value to store.

    Returns:
        The full re-serialized document.

    Raises:
        yaml.YAMLError: If yaml_content is not valid YAML.
        YamlPathError: If the path cannot be set in the document.
    """
    document = load_yaml(yaml_content)
    if document is None:
        document = {}
    set_nested_value(document, path, value)
    return dump_yaml(document)
