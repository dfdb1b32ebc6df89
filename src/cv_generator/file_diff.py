"""
Markdown diff and backup records for PII file mutations.

Every write that changes a file and every delete that asks for a backup drops
a timestamped markdown document into a ``diffs`` directory next to the file.
The records are write-once: nothing in the service reads them back.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)

DIFFS_DIR_NAME = "diffs"
DIFF_PREFIX = "diff_"
BACKUP_PREFIX = "deleted_"


class ChangeSummary(TypedDict):
    """Line and character counts before and after a write."""

    lines_before: int
    lines_after: int
    size_before: int
    size_after: int


def _utc_now() -> datetime:
    return datetime.now(UTC)


def format_record_timestamp(moment: datetime) -> str:
    """Format a moment as ``YYYY_MM_DD_HH_MM_SS`` for record file names."""
    return moment.strftime("%Y_%m_%d_%H_%M_%S")


def format_iso_timestamp(moment: datetime) -> str:
    """Format a moment as an ISO-8601 UTC string with millisecond precision."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def summarize_change(previous_content: str, new_content: str, file_existed: bool) -> ChangeSummary:
    """Count lines and characters on both sides of a write.

    A file that did not exist counts as zero lines and zero characters.
    """
    return ChangeSummary(
        lines_before=len(previous_content.split("\n")) if file_existed else 0,
        lines_after=len(new_content.split("\n")),
        size_before=len(previous_content) if file_existed else 0,
        size_after=len(new_content),
    )


def render_diff_markdown(
    file_path: Path,
    previous_content: str,
    new_content: str,
    file_existed: bool,
    moment: datetime,
) -> str:
    """Render the before/after markdown document for a write."""
    operation = "MODIFIED" if file_existed else "CREATED"
    summary = summarize_change(previous_content, new_content, file_existed)
    previous_block = f"```yaml\n{previous_content}\n```" if file_existed else "_File did not exist_"

    return (
        f"# File Diff: {operation}\n"
        "\n"
        f"**File:** `{file_path}`  \n"
        f"**Timestamp:** {format_iso_timestamp(moment)}  \n"
        f"**Operation:** {operation}\n"
        "\n"
        "## Previous State\n"
        f"{previous_block}\n"
        "\n"
        "## New State\n"
        f"```yaml\n{new_content}\n```\n"
        "\n"
        "## Summary\n"
        f"- **Lines before:** {summary['lines_before']}\n"
        f"- **Lines after:** {summary['lines_after']}\n"
        f"- **Size before:** {summary['size_before']} characters\n"
        f"- **Size after:** {summary['size_after']} characters\n"
    )


def render_backup_markdown(file_path: Path, content: str, moment: datetime) -> str:
    """Render the markdown document preserving a deleted file."""
    return (
        "# Deleted File Backup\n"
        "\n"
        f"**Original File:** `{file_path}`  \n"
        f"**Deleted At:** {format_iso_timestamp(moment)}\n"
        "\n"
        "## File Content\n"
        f"```\n{content}\n```\n"
    )


class SnapshotWriter:
    """Writes diff and backup records beside the files they describe."""

    def __init__(
        self,
        diffs_dir_name: str = DIFFS_DIR_NAME,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the snapshot writer.

        Args:
            diffs_dir_name: Name of the sibling directory receiving records.
            clock: Source of the current time. Defaults to UTC now.
        """
        self.diffs_dir_name = diffs_dir_name
        self.clock = clock or _utc_now

    def diffs_dir(self, file_path: Path) -> Path:
        """Return the records directory for a file."""
        return file_path.parent / self.diffs_dir_name

    def write_diff(
        self,
        file_path: Path,
        previous_content: str,
        new_content: str,
        file_existed: bool,
    ) -> Path | None:
        """Write a ``diff_<ts>.md`` record for a write.

        Args:
            file_path: Resolved path of the written file.
            previous_content: Text before the write (empty if the file was new).
            new_content: Text after the write.
            file_existed: Whether the file existed before the write.

        Returns:
            Path of the record, or None if it could not be written.
        """
        moment = self.clock()
        record_name = f"{DIFF_PREFIX}{format_record_timestamp(moment)}.md"
        content = render_diff_markdown(
            file_path, previous_content, new_content, file_existed, moment
        )
        record_path = self.diffs_dir(file_path) / record_name
        return self._write_record(record_path, content)

    def write_backup(self, file_path: Path, content: str) -> Path | None:
        """Write a ``deleted_<ts>.backup`` record preserving a file's content.

        Returns:
            Path of the record, or None if it could not be written.
        """
        moment = self.clock()
        record_path = (
            self.diffs_dir(file_path) / f"{BACKUP_PREFIX}{format_record_timestamp(moment)}.backup"
        )
        return self._write_record(record_path, render_backup_markdown(file_path, content, moment))

    @staticmethod
    def _write_record(record_path: Path, content: str) -> Path | None:
        try:
            encoded = content.encode("utf-8")
            record_path.parent.mkdir(parents=True, exist_ok=True)
            record_path.write_bytes(encoded)
        except (OSError, ValueError):
            logger.warning("Failed to write snapshot record %s", record_path, exc_info=True)
            return None
        logger.debug("Wrote snapshot record %s", record_path)
        return record_path
