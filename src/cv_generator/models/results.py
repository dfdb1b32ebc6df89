"""Result types returned by the PII file services.

Every file operation reports its outcome through one of these dataclasses
instead of raising. ``to_dict`` renders the camelCase keys consumed by the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Messages matched verbatim by API clients
SOURCE_MISSING = "Source file does not exist"
DESTINATION_EXISTS = "Destination file already exists and overwrite is false"
FILE_MISSING = "File does not exist"
MOVE_PARTIAL_NOTE = "File was copied successfully but original could not be deleted"
SAME_FILE = "Source and destination are the same file"


class ErrorKind(StrEnum):
    """Category of a failed file operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    IO_ERROR = "io_error"


class YamlPathError(ValueError):
    """Raised when a YAML path cannot be traversed in the target document."""


@dataclass(slots=True)
class WriteResult:
    """Outcome of writing a YAML document.

    Attributes:
        success: Whether the file was written.
        file_path: Resolved path on success, the caller's relative path on failure.
        yaml_content: Text that was written.
        file_existed: Whether a previous version was read before writing.
        diff_created: Whether a diff record was requested for changed content.
        error: Failure message.
        error_kind: Failure category.
    """

    success: bool
    file_path: str
    yaml_content: str | None = None
    file_existed: bool = False
    diff_created: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error, "filePath": self.file_path}
        return {
            "success": True,
            "filePath": self.file_path,
            "yamlContent": self.yaml_content,
            "fileExisted": self.file_existed,
            "diffCreated": self.diff_created,
        }


@dataclass(slots=True)
class CopyResult:
    """Outcome of copying a file.

    ``overwritten`` is True only when the destination existed before the copy.
    """

    success: bool
    source_path: str | None = None
    destination_path: str | None = None
    overwritten: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.source_path is not None:
            data["sourcePath"] = self.source_path
        if self.destination_path is not None:
            data["destinationPath"] = self.destination_path
        if self.success:
            data["overwritten"] = self.overwritten
        else:
            data["error"] = self.error
        return data


@dataclass(slots=True)
class DeleteResult:
    """Outcome of deleting a file."""

    success: bool
    file_path: str
    backup_created: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error, "filePath": self.file_path}
        return {"success": True, "filePath": self.file_path, "backupCreated": self.backup_created}


@dataclass(slots=True)
class MoveResult:
    """Outcome of moving a file.

    A failed move carrying a ``note`` left the destination written and the
    source in place.
    """

    success: bool
    source_path: str | None = None
    destination_path: str | None = None
    overwritten: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None
    note: str | None = None

    @property
    def is_partial(self) -> bool:
        """Whether the move mutated the filesystem without completing."""
        return not self.success and self.note is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.source_path is not None:
            data["sourcePath"] = self.source_path
        if self.destination_path is not None:
            data["destinationPath"] = self.destination_path
        if self.success:
            data["overwritten"] = self.overwritten
        else:
            data["error"] = self.error
        if self.note is not None:
            data["note"] = self.note
        return data
