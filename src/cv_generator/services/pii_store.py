"""File operations bound to one PII base directory.

``PiiFileStore`` is what the API layer talks to: it carries the base
directory and snapshot writer so that no service has to consult the
environment on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from cv_generator.file_diff import SnapshotWriter
from cv_generator.file_walker import DirectoryScanner, YamlInventory
from cv_generator.models.results import CopyResult, DeleteResult, MoveResult, WriteResult
from cv_generator.services.file_copy import copy_file
from cv_generator.services.file_delete import delete_file
from cv_generator.services.file_move import move_file
from cv_generator.services.file_reader import read_files
from cv_generator.services.file_writer import write_file, write_yaml_file
from cv_generator.services.paths import resolve_path
from cv_generator.utils.yaml_format import load_yaml
from cv_generator.yaml_path import get_nested_value, update_yaml_document

logger = logging.getLogger(__name__)


class PiiFileStore:
    """Facade over the PII file services for a single base directory."""

    def __init__(self, base_directory: Path | str, snapshots: SnapshotWriter | None = None) -> None:
        """Initialize the store.

        Args:
            base_directory: Directory every relative path is resolved against.
            snapshots: Writer for diff and backup records.
        """
        self.base_directory = Path(base_directory)
        self.snapshots = snapshots or SnapshotWriter()

    def resolve(self, relative_path: str) -> Path:
        return resolve_path(self.base_directory, relative_path)

    def list_files(self) -> YamlInventory:
        return DirectoryScanner.inventory(self.base_directory)

    def read_files(self, paths: Iterable[str]) -> dict[str, Any]:
        return read_files(paths, self.base_directory)

    def write(self, data: Any, file_path: str, create_diff: bool = True) -> WriteResult:
        return write_file(
            data, file_path, self.base_directory, create_diff=create_diff, snapshots=self.snapshots
        )

    def write_yaml(
        self, yaml_content: str, file_path: str, create_diff: bool = True
    ) -> WriteResult:
        return write_yaml_file(
            yaml_content,
            file_path,
            self.base_directory,
            create_diff=create_diff,
            snapshots=self.snapshots,
        )

    def copy(self, source_path: str, destination_path: str, overwrite: bool = False) -> CopyResult:
        return copy_file(source_path, destination_path, self.base_directory, overwrite=overwrite)

    def move(self, source_path: str, destination_path: str, overwrite: bool = False) -> MoveResult:
        return move_file(source_path, destination_path, self.base_directory, overwrite=overwrite)

    def delete(self, file_path: str, create_backup: bool = True) -> DeleteResult:
        return delete_file(
            file_path, self.base_directory, create_backup=create_backup, snapshots=self.snapshots
        )

    def read_yaml_path(self, file_path: str, path: str) -> Any:
        """Read one value out of a stored YAML document.

        Raises:
            FileNotFoundError: If the document does not exist.
            yaml.YAMLError: If the document is not valid YAML.
        """
        content = self.resolve(file_path).read_text(encoding="utf-8")
        return get_nested_value(load_yaml(content), path)

    def update_yaml_path(
        self,
        file_path: str,
        path: str,
        value: Any,
        create_diff: bool = True,
    ) -> WriteResult:
        """Replace one value in a stored YAML document and write it back.

        The whole document is re-serialized; the write goes through the raw
        YAML writer so a diff record is kept like for any other edit.

        Raises:
            FileNotFoundError: If the document does not exist.
            yaml.YAMLError: If the document is not valid YAML.
            YamlPathError: If the path cannot be set in the document.
        """
        content = self.resolve(file_path).read_text(encoding="utf-8")
        updated = update_yaml_document(content, path, value)
        logger.info("Updating %s at %s", file_path, path)
        return self.write_yaml(updated, file_path, create_diff=create_diff)
