"""Types for the managed file library.

The library keeps per-file sidecar metadata (``<file>.meta.json``), timestamped
backup copies under ``backups/`` and a ``changelog.json`` next to the YAML
documents themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from cv_generator.models.results import ErrorKind


class FileType(StrEnum):
    """Kind of document, guessed from the file name."""

    RESUME = "resume"
    LINKEDIN = "linkedin"
    OTHER = "other"


class ChangelogAction(StrEnum):
    SAVE = "save"
    COMMIT = "commit"
    DISCARD = "discard"
    DELETE = "delete"
    DUPLICATE = "duplicate"
    RESTORE = "restore"


class FileManagerError(Exception):
    """Raised when a managed file operation cannot be carried out."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.IO_ERROR) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(slots=True)
class FileSidecar:
    """Contents of a ``.meta.json`` sidecar file."""

    created: str
    tags: list[str] = field(default_factory=list)
    description: str | None = None
    custom_fields: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileSidecar:
        tags = data.get("tags")
        return cls(
            created=str(data.get("created", "")),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            description=data.get("description"),
            custom_fields=data.get("customFields"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"tags": self.tags, "created": self.created}
        if self.description is not None:
            data["description"] = self.description
        if self.custom_fields is not None:
            data["customFields"] = self.custom_fields
        return data


@dataclass(slots=True)
class ChangelogEntry:
    """One line of ``changelog.json``."""

    timestamp: str
    action: ChangelogAction
    file: str
    message: str | None = None
    backup: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "action": str(self.action),
            "file": self.file,
        }
        if self.message is not None:
            data["message"] = self.message
        if self.backup is not None:
            data["backup"] = self.backup
        return data


@dataclass(slots=True)
class FileMetadata:
    """Listing entry for one managed YAML document.

    Attributes:
        path: Posix path relative to the library root.
        name: File name.
        type: Kind guessed from the name.
        size: Size in bytes.
        modified: Last modification time (UTC).
        created: Sidecar creation time, or the file's own creation time.
        has_unsaved_changes: Whether a ``.temp`` draft exists.
        tags: Sidecar tags.
        description: Sidecar description.
        versions: Number of backup copies kept for the file.
        role: ``info.role`` (résumé) or ``role`` (LinkedIn) from the document.
        resume_metadata: The document's ``metadata`` mapping.
    """

    path: str
    name: str
    type: FileType
    size: int
    modified: datetime
    created: datetime
    has_unsaved_changes: bool = False
    tags: list[str] = field(default_factory=list)
    description: str | None = None
    versions: int = 0
    last_edited_by: str = "user"
    role: str | None = None
    resume_metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "type": str(self.type),
            "size": self.size,
            "modified": self.modified,
            "created": self.created,
            "hasUnsavedChanges": self.has_unsaved_changes,
            "tags": self.tags,
            "versions": self.versions,
            "lastEditedBy": self.last_edited_by,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.role is not None:
            data["role"] = self.role
        if self.resume_metadata is not None:
            data["resumeMetadata"] = self.resume_metadata
        return data


@dataclass(slots=True)
class Version:
    """A backup copy of a managed file."""

    timestamp: datetime
    backup_path: str
    file: str
    size: int
    diff_available: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "backupPath": self.backup_path,
            "changelogEntry": ChangelogEntry(
                timestamp=self.timestamp.isoformat(),
                action=ChangelogAction.SAVE,
                file=self.file,
            ).to_dict(),
            "diffAvailable": self.diff_available,
            "size": self.size,
        }


@dataclass(slots=True)
class FileContent:
    """A managed file's current text together with its listing data."""

    content: str
    metadata: FileMetadata
    versions: list[Version]

    @property
    def has_unsaved_changes(self) -> bool:
        return self.metadata.has_unsaved_changes

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "metadata": self.metadata.to_dict(),
            "versions": [version.to_dict() for version in self.versions],
            "hasUnsavedChanges": self.has_unsaved_changes,
        }


@dataclass(slots=True)
class SaveResult:
    changelog_entry: ChangelogEntry
    backup_created: str | None = None
    saved: bool = True

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "saved": self.saved,
            "changelogEntry": self.changelog_entry.to_dict(),
        }
        if self.backup_created is not None:
            data["backupCreated"] = self.backup_created
        return data


@dataclass(slots=True)
class DuplicateResult:
    new_path: str
    suggested_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"newPath": self.new_path, "suggestedName": self.suggested_name}


@dataclass(slots=True)
class DiffResult:
    """Unified diff between two states of a file."""

    diff: str
    additions: int
    deletions: int

    @property
    def changes(self) -> int:
        return self.additions + self.deletions

    def to_dict(self) -> dict[str, Any]:
        return {
            "diff": self.diff,
            "stats": {
                "additions": self.additions,
                "deletions": self.deletions,
                "changes": self.changes,
            },
        }


@dataclass(slots=True)
class FileFilters:
    """Listing filters; every set filter must match."""

    type: FileType | None = None
    tags: list[str] = field(default_factory=list)
    search: str | None = None

    def matches(self, metadata: FileMetadata) -> bool:
        if self.type is not None and metadata.type != self.type:
            return False
        if self.tags and not any(tag in metadata.tags for tag in self.tags):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = [metadata.name, metadata.description or "", *metadata.tags]
            if not any(needle in text.lower() for text in haystack):
                return False
        return True
