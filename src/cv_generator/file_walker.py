"""YAML file inventory for the PII directory.

This module lists the YAML documents stored directly in the PII root and
anywhere below its ``resumes`` subdirectory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from cv_generator.utils.yaml_format import is_yaml_path

logger = logging.getLogger(__name__)

RESUMES_DIR_NAME = "resumes"
# Directories holding records about documents rather than documents
RECORD_DIR_NAMES = frozenset({"backups", "diffs"})
# Name fragments of drafts and sidecars stored beside documents
AUXILIARY_MARKERS = (".temp", ".backup", ".meta")


@dataclass
class YamlInventory:
    """Result of scanning a PII directory.

    Attributes:
        all_files: Root-level file names followed by ``resumes/``-prefixed paths.
        main_dir_files: Number of YAML files directly in the root.
        resume_files: Number of YAML files under ``resumes``.
    """

    all_files: list[str] = field(default_factory=list)
    main_dir_files: int = 0
    resume_files: int = 0

    @property
    def total_files(self) -> int:
        return self.main_dir_files + self.resume_files

    def to_dict(self) -> dict[str, object]:
        """Convert the inventory to the camelCase shape used by the API."""
        return {
            "allFiles": self.all_files,
            "mainDirFiles": self.main_dir_files,
            "resumeFiles": self.resume_files,
            "totalFiles": self.total_files,
        }


class DirectoryScanner:
    """Collect YAML file names from a PII directory tree."""

    @staticmethod
    def list_flat(directory: Path | str) -> list[str]:
        """List YAML file names directly inside a directory.

        Args:
            directory: Directory to list.

        Returns:
            Sorted file names; empty if the directory is missing or unreadable.
        """
        root = Path(directory)
        try:
            return sorted(
                item.name for item in root.iterdir() if item.is_file() and is_yaml_path(item.name)
            )
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", root, exc)
            return []

    @staticmethod
    def list_recursive(directory: Path | str, base: Path | str | None = None) -> list[str]:
        """List YAML files at any depth below a directory.

        Args:
            directory: Directory to walk.
            base: Directory the returned paths are relative to. Defaults to directory.

        Returns:
            Sorted posix-style relative paths; empty if the directory is missing.
        """
        root = Path(directory)
        base_path = Path(base) if base is not None else root
        found: list[str] = []

        def _scan(current: Path) -> None:
            """Recursively collect YAML files."""
            try:
                items = list(current.iterdir())
            except OSError as exc:
                logger.debug("Skipping unreadable directory %s: %s", current, exc)
                return
            for item in items:
                if item.is_dir():
                    _scan(item)
                elif item.is_file() and is_yaml_path(item.name):
                    found.append(item.relative_to(base_path).as_posix())

        _scan(root)
        return sorted(found)

    @staticmethod
    def list_documents(root: Path | str) -> list[str]:
        """List every YAML document below a library root.

        Hidden directories and the record directories are skipped, as are
        drafts, backups and sidecar files.

        Args:
            root: Library root to walk.

        Returns:
            Sorted posix-style paths relative to root.
        """
        root_path = Path(root)
        found: list[str] = []

        def _scan(current: Path) -> None:
            try:
                items = list(current.iterdir())
            except OSError as exc:
                logger.debug("Skipping unreadable directory %s: %s", current, exc)
                return
            for item in items:
                if item.is_dir():
                    if not item.name.startswith(".") and item.name not in RECORD_DIR_NAMES:
                        _scan(item)
                elif (
                    item.is_file()
                    and is_yaml_path(item.name)
                    and not any(marker in item.name for marker in AUXILIARY_MARKERS)
                ):
                    found.append(item.relative_to(root_path).as_posix())

        _scan(root_path)
        return sorted(found)

    @staticmethod
    def inventory(root: Path | str) -> YamlInventory:
        """Combine the root's own YAML files with everything under ``resumes``.

        Args:
            root: PII directory to scan.

        Returns:
            YamlInventory whose total always equals the sum of both counts.
        """
        root_path = Path(root)
        main_files = DirectoryScanner.list_flat(root_path)
        resumes_path = root_path / RESUMES_DIR_NAME
        resume_files = DirectoryScanner.list_recursive(resumes_path, resumes_path)

        return YamlInventory(
            all_files=main_files + [f"{RESUMES_DIR_NAME}/{name}" for name in resume_files],
            main_dir_files=len(main_files),
            resume_files=len(resume_files),
        )
