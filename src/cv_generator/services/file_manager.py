"""Managed file library over the PII directory.

Alongside each YAML document the library keeps:

- ``<name>.temp<ext>``: an uncommitted draft, preferred when reading.
- ``<file>.meta.json``: sidecar with tags, description and creation time.
- ``backups/<stem>.<timestamp><ext>``: a copy taken before each save,
  delete or restore; these are the file's versions.
- ``changelog.json``: the last 100 actions taken on the library.

Unlike the plain file services, failures here raise ``FileManagerError``
carrying an ``ErrorKind`` that the routes turn into a status code.
"""

from __future__ import annotations

import difflib
import json
import logging
import re
import shutil
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from cv_generator.file_diff import DIFFS_DIR_NAME, format_iso_timestamp
from cv_generator.file_walker import DirectoryScanner
from cv_generator.models.managed_files import (
    ChangelogAction,
    ChangelogEntry,
    DiffResult,
    DuplicateResult,
    FileContent,
    FileFilters,
    FileManagerError,
    FileMetadata,
    FileSidecar,
    FileType,
    SaveResult,
    Version,
)
from cv_generator.models.results import ErrorKind
from cv_generator.services.paths import resolve_path
from cv_generator.utils.yaml_format import load_yaml

logger = logging.getLogger(__name__)

BACKUPS_DIR_NAME = "backups"
CHANGELOG_FILE_NAME = "changelog.json"
CHANGELOG_LIMIT = 100
SIDECAR_SUFFIX = ".meta.json"
TEMP_MARKER = ".temp"
DEFAULT_DUPLICATE_SUFFIX = "_copy"
DEFAULT_KEEP_LAST = 10
CURRENT_VERSION = "current"

_STAMP_PATTERN = r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z"
_STAMP_FORMAT = "%Y-%m-%dT%H-%M-%S-%fZ"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def detect_file_type(file_path: str) -> FileType:
    """Guess a document's kind from its file name."""
    name = PurePosixPath(file_path).name.lower()
    if "linkedin" in name:
        return FileType.LINKEDIN
    if any(marker in name for marker in ("resume", "data", "cv")):
        return FileType.RESUME
    return FileType.OTHER


def format_backup_stamp(moment: datetime) -> str:
    """Render a moment as ``2024-03-05T14-07-09-123Z`` for backup names."""
    return format_iso_timestamp(moment).replace(":", "-").replace(".", "-")


def parse_backup_stamp(stamp: str) -> datetime | None:
    try:
        return datetime.strptime(stamp, _STAMP_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        return None


def _parse_iso(value: str) -> datetime | None:
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


class FileManager:
    """YAML document library with drafts, sidecar metadata and versions."""

    def __init__(self, root: Path | str, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize the library.

        Args:
            root: Existing directory holding the documents.
            clock: Source of the current time. Defaults to UTC now.

        Raises:
            FileManagerError: If root is not a directory.
        """
        self.root = Path(root)
        if not self.root.is_dir():
            raise FileManagerError(f"PII directory not found: {self.root}", ErrorKind.NOT_FOUND)
        self.clock = clock or _utc_now
        self.changelog_path = self.root / CHANGELOG_FILE_NAME

    def _resolve(self, relative_path: str) -> Path:
        return resolve_path(self.root, relative_path)

    @staticmethod
    def temp_path(relative_path: str) -> str:
        """Return the draft path for a document, e.g. ``a/cv.temp.yml``."""
        path = PurePosixPath(relative_path)
        return str(path.parent / f"{path.stem}{TEMP_MARKER}{path.suffix}")

    def _sidecar_path(self, relative_path: str) -> Path:
        return Path(f"{self._resolve(relative_path)}{SIDECAR_SUFFIX}")

    def _require_file(self, relative_path: str) -> Path:
        full_path = self._resolve(relative_path)
        if not full_path.is_file():
            raise FileManagerError(f"File not found: {relative_path}", ErrorKind.NOT_FOUND)
        return full_path

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise FileManagerError(f"Failed to read {path.name}: {exc}") from exc

    def _read_sidecar(self, relative_path: str) -> FileSidecar | None:
        try:
            data = json.loads(self._sidecar_path(relative_path).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return FileSidecar.from_dict(data) if isinstance(data, dict) else None

    def _write_sidecar(self, relative_path: str, sidecar: FileSidecar) -> None:
        self._sidecar_path(relative_path).write_text(
            json.dumps(sidecar.to_dict(), indent=2), encoding="utf-8"
        )

    def _sidecar_or_new(self, relative_path: str) -> FileSidecar:
        return self._read_sidecar(relative_path) or FileSidecar(
            created=format_iso_timestamp(self.clock())
        )

    def read_changelog(self) -> list[dict[str, Any]]:
        """Return the stored changelog entries, oldest first."""
        try:
            data = json.loads(self.changelog_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable changelog %s: %s", self.changelog_path, exc)
            return []
        return data if isinstance(data, list) else []

    def _log(
        self,
        action: ChangelogAction,
        relative_path: str,
        message: str | None = None,
        backup: str | None = None,
    ) -> ChangelogEntry:
        entry = ChangelogEntry(
            timestamp=format_iso_timestamp(self.clock()),
            action=action,
            file=relative_path,
            message=message,
            backup=backup,
        )
        entries = self.read_changelog()
        entries.append(entry.to_dict())
        try:
            self.changelog_path.write_text(
                json.dumps(entries[-CHANGELOG_LIMIT:], indent=2), encoding="utf-8"
            )
        except OSError:
            logger.warning("Failed to update changelog %s", self.changelog_path, exc_info=True)
        return entry

    def _backup(self, relative_path: str) -> str:
        """Copy a document into ``backups/`` and return the backup's relative path."""
        path = PurePosixPath(relative_path)
        moment = self.clock()
        backup = f"{BACKUPS_DIR_NAME}/{path.stem}.{format_backup_stamp(moment)}{path.suffix}"
        while self._resolve(backup).exists():
            moment += timedelta(milliseconds=1)
            backup = f"{BACKUPS_DIR_NAME}/{path.stem}.{format_backup_stamp(moment)}{path.suffix}"

        target = self._resolve(backup)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self._resolve(relative_path), target)
        logger.debug("Backed up %s to %s", relative_path, backup)
        return backup

    def _backups_of(self, relative_path: str) -> list[tuple[Path, str]]:
        """Return each backup file of a document with its timestamp fragment."""
        backups_dir = self.root / BACKUPS_DIR_NAME
        if not backups_dir.is_dir():
            return []
        path = PurePosixPath(relative_path)
        pattern = re.compile(
            rf"{re.escape(path.stem)}\.({_STAMP_PATTERN}){re.escape(path.suffix)}"
        )
        found = []
        for item in backups_dir.iterdir():
            match = pattern.fullmatch(item.name)
            if match and item.is_file():
                found.append((item, match.group(1)))
        return found

    @staticmethod
    def _document_details(full_path: Path) -> tuple[str | None, dict[str, Any] | None]:
        """Pull the role and ``metadata`` mapping out of a document, if it has them."""
        try:
            document = load_yaml(full_path.read_text(encoding="utf-8"))
        except (OSError, ValueError, yaml.YAMLError):
            return None, None
        if not isinstance(document, dict):
            return None, None

        info = document.get("info")
        role = info.get("role") if isinstance(info, dict) else None
        if role is None:
            role = document.get("role")
        metadata = document.get("metadata")
        return (
            str(role) if role is not None else None,
            metadata if isinstance(metadata, dict) else None,
        )

    def _metadata(self, relative_path: str) -> FileMetadata:
        full_path = self._require_file(relative_path)
        stats = full_path.stat()
        sidecar = self._read_sidecar(relative_path)

        created = _parse_iso(sidecar.created) if sidecar else None
        if created is None:
            born = getattr(stats, "st_birthtime", stats.st_ctime)
            created = datetime.fromtimestamp(born, tz=UTC)
        role, resume_metadata = self._document_details(full_path)

        return FileMetadata(
            path=relative_path,
            name=PurePosixPath(relative_path).name,
            type=detect_file_type(relative_path),
            size=stats.st_size,
            modified=datetime.fromtimestamp(stats.st_mtime, tz=UTC),
            created=created,
            has_unsaved_changes=self._resolve(self.temp_path(relative_path)).is_file(),
            tags=sidecar.tags if sidecar else [],
            description=sidecar.description if sidecar else None,
            versions=len(self._backups_of(relative_path)),
            role=role,
            resume_metadata=resume_metadata,
        )

    def list_files(self, filters: FileFilters | None = None) -> list[FileMetadata]:
        """List every document in the library, optionally filtered.

        Args:
            filters: Type, tag and search filters. Tags match when any
                requested tag is present; search looks at name, description
                and tags without regard to case.

        Returns:
            Metadata for each matching document, sorted by path.
        """
        filters = filters or FileFilters()
        entries = [self._metadata(path) for path in DirectoryScanner.list_documents(self.root)]
        return [entry for entry in entries if filters.matches(entry)]

    def search(self, query: str) -> list[FileMetadata]:
        return self.list_files(FileFilters(search=query))

    def set_tags(self, relative_path: str, tags: Iterable[str]) -> FileSidecar:
        self._require_file(relative_path)
        sidecar = self._sidecar_or_new(relative_path)
        sidecar.tags = list(tags)
        self._write_sidecar(relative_path, sidecar)
        return sidecar

    def set_description(self, relative_path: str, description: str) -> FileSidecar:
        self._require_file(relative_path)
        sidecar = self._sidecar_or_new(relative_path)
        sidecar.description = description
        self._write_sidecar(relative_path, sidecar)
        return sidecar

    def read(self, relative_path: str) -> FileContent:
        """Read a document, preferring its draft when one exists."""
        full_path = self._require_file(relative_path)
        temp = self._resolve(self.temp_path(relative_path))
        content = self._read_text(temp if temp.is_file() else full_path)
        return FileContent(
            content=content,
            metadata=self._metadata(relative_path),
            versions=self.get_versions(relative_path),
        )

    def save(
        self,
        relative_path: str,
        content: str,
        commit: bool = False,
        message: str | None = None,
        tags: Iterable[str] | None = None,
        create_backup: bool = True,
    ) -> SaveResult:
        """Save YAML text as a draft, or straight into the document.

        An existing document is backed up first unless ``create_backup`` is
        False; a commit always backs up.

        Args:
            relative_path: Document path relative to the library root.
            content: YAML text; must parse.
            commit: Write the document itself and drop any draft.
            message: Changelog message.
            tags: Replacement sidecar tags.
            create_backup: Whether a draft save backs up the document.

        Raises:
            FileManagerError: VALIDATION for unparsable or unencodable text,
                IO_ERROR when the filesystem refuses the write.
        """
        try:
            load_yaml(content)
            encoded = content.encode("utf-8")
        except yaml.YAMLError as exc:
            raise FileManagerError(f"Invalid YAML: {exc}", ErrorKind.VALIDATION) from exc
        except UnicodeEncodeError as exc:
            raise FileManagerError(f"Invalid content: {exc}", ErrorKind.VALIDATION) from exc

        full_path = self._resolve(relative_path)
        temp = self._resolve(self.temp_path(relative_path))
        backup = None
        try:
            if (commit or create_backup) and full_path.is_file():
                backup = self._backup(relative_path)
            target = full_path if commit else temp
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(encoded)
            if commit:
                temp.unlink(missing_ok=True)
            if tags is not None:
                sidecar = self._sidecar_or_new(relative_path)
                sidecar.tags = list(tags)
                self._write_sidecar(relative_path, sidecar)
        except (OSError, ValueError) as exc:
            raise FileManagerError(f"Failed to save {relative_path}: {exc}") from exc

        action = ChangelogAction.COMMIT if commit else ChangelogAction.SAVE
        logger.info("%s %s (backup=%s)", action.value.capitalize(), relative_path, backup)
        entry = self._log(action, relative_path, message=message, backup=backup)
        return SaveResult(changelog_entry=entry, backup_created=backup)

    def commit(self, relative_path: str, message: str | None = None) -> SaveResult:
        """Promote a document's draft into the document."""
        temp = self._resolve(self.temp_path(relative_path))
        if not temp.is_file():
            raise FileManagerError("No temporary changes to commit", ErrorKind.VALIDATION)
        return self.save(relative_path, self._read_text(temp), commit=True, message=message)

    def discard(self, relative_path: str) -> None:
        temp = self._resolve(self.temp_path(relative_path))
        if not temp.is_file():
            raise FileManagerError("No temporary changes to discard", ErrorKind.VALIDATION)
        try:
            temp.unlink()
        except OSError as exc:
            raise FileManagerError(f"Failed to discard {relative_path}: {exc}") from exc
        self._log(ChangelogAction.DISCARD, relative_path)

    def duplicate(
        self,
        relative_path: str,
        name: str | None = None,
        suffix: str | None = None,
        auto_increment: bool = True,
    ) -> DuplicateResult:
        """Copy a document next to itself under a new name.

        Without an explicit name the copy is ``<stem><suffix><ext>``; with
        ``auto_increment`` a taken name becomes ``<stem><suffix>_2<ext>``,
        ``_3`` and so on. The sidecar travels with the copy.

        Raises:
            FileManagerError: NOT_FOUND for a missing source, CONFLICT when the
                chosen name is already taken.
        """
        source = self._require_file(relative_path)
        path = PurePosixPath(relative_path)
        suffix = suffix or DEFAULT_DUPLICATE_SUFFIX

        if name:
            new_name = name
        else:
            new_name = f"{path.stem}{suffix}{path.suffix}"
            counter = 2
            while auto_increment and self._resolve(str(path.parent / new_name)).exists():
                new_name = f"{path.stem}{suffix}_{counter}{path.suffix}"
                counter += 1

        new_path = str(path.parent / new_name)
        destination = self._resolve(new_path)
        if destination.exists():
            raise FileManagerError(
                f"Destination file already exists: {new_path}", ErrorKind.CONFLICT
            )

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
            sidecar = self._read_sidecar(relative_path)
            if sidecar is not None:
                sidecar.created = format_iso_timestamp(self.clock())
                self._write_sidecar(new_path, sidecar)
        except (OSError, ValueError) as exc:
            raise FileManagerError(f"Failed to duplicate {relative_path}: {exc}") from exc

        logger.info("Duplicated %s to %s", relative_path, new_path)
        self._log(ChangelogAction.DUPLICATE, new_path, message=f"Duplicated from {relative_path}")
        return DuplicateResult(new_path=new_path, suggested_name=new_name)

    def delete(self, relative_path: str, create_backup: bool = True) -> str | None:
        """Delete a document with its draft and sidecar.

        Returns:
            Relative path of the backup taken first, if any.
        """
        full_path = self._require_file(relative_path)
        try:
            backup = self._backup(relative_path) if create_backup else None
            full_path.unlink()
            self._sidecar_path(relative_path).unlink(missing_ok=True)
            self._resolve(self.temp_path(relative_path)).unlink(missing_ok=True)
        except OSError as exc:
            raise FileManagerError(f"Failed to delete {relative_path}: {exc}") from exc

        logger.info("Deleted %s (backup=%s)", relative_path, backup)
        self._log(ChangelogAction.DELETE, relative_path, backup=backup)
        return backup

    def get_versions(self, relative_path: str) -> list[Version]:
        """List a document's backups, newest first."""
        path = PurePosixPath(relative_path)
        versions = []
        for backup_file, stamp in self._backups_of(relative_path):
            stats = backup_file.stat()
            timestamp = parse_backup_stamp(stamp) or datetime.fromtimestamp(stats.st_mtime, tz=UTC)
            diff_file = self.root / DIFFS_DIR_NAME / f"{path.stem}.{stamp}.diff"
            versions.append(
                Version(
                    timestamp=timestamp,
                    backup_path=f"{BACKUPS_DIR_NAME}/{backup_file.name}",
                    file=relative_path,
                    size=stats.st_size,
                    diff_available=diff_file.exists(),
                )
            )
        return sorted(versions, key=lambda version: version.timestamp, reverse=True)

    def _version_text(self, relative_path: str, version: str) -> str:
        target = relative_path if version == CURRENT_VERSION else version
        full_path = self._resolve(target)
        if not full_path.is_file():
            raise FileManagerError(f"Version not found: {version}", ErrorKind.NOT_FOUND)
        return self._read_text(full_path)

    def get_diff(
        self,
        relative_path: str,
        from_version: str = CURRENT_VERSION,
        to_version: str = CURRENT_VERSION,
    ) -> DiffResult:
        """Unified diff between two versions of a document.

        Args:
            relative_path: Document path.
            from_version: Backup path, or ``current`` for the document itself.
            to_version: Backup path, or ``current`` for the document itself.
        """
        before = self._version_text(relative_path, from_version)
        after = self._version_text(relative_path, to_version)
        lines = list(
            difflib.unified_diff(
                before.splitlines(),
                after.splitlines(),
                fromfile=relative_path if from_version == CURRENT_VERSION else from_version,
                tofile=relative_path if to_version == CURRENT_VERSION else to_version,
                lineterm="",
            )
        )
        body = lines[2:]
        return DiffResult(
            diff="\n".join(lines),
            additions=sum(1 for line in body if line.startswith("+")),
            deletions=sum(1 for line in body if line.startswith("-")),
        )

    def restore(self, relative_path: str, version: str) -> str | None:
        """Replace a document with one of its backups.

        The current document is backed up first, so a restore can itself be
        undone.

        Returns:
            Relative path of the backup of the replaced document, if one existed.
        """
        source = self._resolve(version)
        if not source.is_file():
            raise FileManagerError(f"Version not found: {version}", ErrorKind.NOT_FOUND)

        full_path = self._resolve(relative_path)
        try:
            backup = self._backup(relative_path) if full_path.is_file() else None
            full_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, full_path)
        except OSError as exc:
            raise FileManagerError(f"Failed to restore {relative_path}: {exc}") from exc

        logger.info("Restored %s from %s", relative_path, version)
        self._log(
            ChangelogAction.RESTORE,
            relative_path,
            message=f"Restored from {version}",
            backup=backup,
        )
        return backup

    @staticmethod
    def _prune(directory: Path, keep_last: int) -> int:
        if not directory.is_dir():
            return 0
        records = sorted(
            (item for item in directory.iterdir() if item.is_file()),
            key=lambda item: item.stat().st_mtime,
            reverse=True,
        )
        stale = records[max(keep_last, 0) :]
        for item in stale:
            item.unlink()
        logger.info("Removed %d old records from %s", len(stale), directory)
        return len(stale)

    def cleanup_backups(self, keep_last: int = DEFAULT_KEEP_LAST) -> int:
        """Delete all but the newest ``keep_last`` backups; return how many went."""
        return self._prune(self.root / BACKUPS_DIR_NAME, keep_last)

    def cleanup_diffs(self, keep_last: int = DEFAULT_KEEP_LAST) -> int:
        """Delete all but the newest ``keep_last`` records in the root ``diffs/``."""
        return self._prune(self.root / DIFFS_DIR_NAME, keep_last)
