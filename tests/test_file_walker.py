"""Tests for the YAML directory inventory."""

from __future__ import annotations

from pathlib import Path

import pytest

from cv_generator.file_walker import DirectoryScanner, YamlInventory


@pytest.fixture
def populated_pii(pii_dir: Path) -> Path:
    """PII directory with mixed files at the root and under resumes/."""
    (pii_dir / "data.yml").write_text("name: John")
    (pii_dir / "config.json").write_text("{}")
    (pii_dir / "readme.txt").write_text("notes")
    resumes = pii_dir / "resumes"
    (resumes / "subfolder").mkdir(parents=True)
    (resumes / "resume.yml").write_text("title: Resume")
    (resumes / "resume1.pdf").write_bytes(b"%PDF")
    (resumes / "subfolder" / "resume2.pdf").write_bytes(b"%PDF")
    (resumes / "subfolder" / "backend.yaml").write_text("title: Backend")
    return pii_dir


class TestListFlat:
    """Test cases for DirectoryScanner.list_flat."""

    def test_lists_only_yaml_files(self, populated_pii: Path) -> None:
        result = DirectoryScanner.list_flat(populated_pii)

        assert result == ["data.yml"]
        assert "resumes" not in result

    def test_extension_match_is_case_sensitive(self, pii_dir: Path) -> None:
        (pii_dir / "Resume.YML").write_text("name: Upper")
        (pii_dir / "resume.yml").write_text("name: Lower")

        assert DirectoryScanner.list_flat(pii_dir) == ["resume.yml"]

    def test_missing_directory_returns_empty(self, tmp_path: Path) -> None:
        """Test that a missing directory is not an error."""
        assert DirectoryScanner.list_flat(tmp_path / "missing") == []


class TestListRecursive:
    """Test cases for DirectoryScanner.list_recursive."""

    def test_collects_nested_yaml_relative_to_base(self, populated_pii: Path) -> None:
        resumes = populated_pii / "resumes"

        result = DirectoryScanner.list_recursive(resumes, resumes)

        assert result == ["resume.yml", "subfolder/backend.yaml"]

    def test_base_defaults_to_directory(self, populated_pii: Path) -> None:
        resumes = populated_pii / "resumes"

        assert DirectoryScanner.list_recursive(resumes) == ["resume.yml", "subfolder/backend.yaml"]

    def test_relative_to_outer_base(self, populated_pii: Path) -> None:
        """Test that paths are computed against the given base, not the walked dir."""
        result = DirectoryScanner.list_recursive(populated_pii / "resumes", populated_pii)

        assert "resumes/resume.yml" in result

    def test_missing_directory_returns_empty(self, tmp_path: Path) -> None:
        assert DirectoryScanner.list_recursive(tmp_path / "missing") == []


class TestInventory:
    """Test cases for DirectoryScanner.inventory."""

    def test_combines_root_and_resume_files(self, populated_pii: Path) -> None:
        inventory = DirectoryScanner.inventory(populated_pii)

        assert inventory.all_files == [
            "data.yml",
            "resumes/resume.yml",
            "resumes/subfolder/backend.yaml",
        ]
        assert inventory.main_dir_files == 1
        assert inventory.resume_files == 2
        assert inventory.total_files == 3

    def test_nonexistent_root_is_all_zero(self, tmp_path: Path) -> None:
        inventory = DirectoryScanner.inventory(tmp_path / "nowhere")

        assert inventory.all_files == []
        assert inventory.total_files == 0
        assert inventory.total_files == inventory.main_dir_files + inventory.resume_files

    def test_root_without_resumes_dir(self, pii_dir: Path) -> None:
        (pii_dir / "data.yaml").write_text("a: 1")

        inventory = DirectoryScanner.inventory(pii_dir)

        assert inventory.main_dir_files == 1
        assert inventory.resume_files == 0
        assert len(inventory.all_files) == inventory.total_files

    def test_to_dict_uses_api_keys(self) -> None:
        inventory = YamlInventory(all_files=["a.yml"], main_dir_files=1, resume_files=0)

        assert inventory.to_dict() == {
            "allFiles": ["a.yml"],
            "mainDirFiles": 1,
            "resumeFiles": 0,
            "totalFiles": 1,
        }


class TestListDocuments:
    """Test cases for DirectoryScanner.list_documents."""

    def test_walks_every_level(self, populated_pii: Path) -> None:
        assert DirectoryScanner.list_documents(populated_pii) == [
            "data.yml",
            "resumes/resume.yml",
            "resumes/subfolder/backend.yaml",
        ]

    def test_skips_drafts_and_record_directories(self, pii_dir: Path) -> None:
        (pii_dir / "cv.yml").write_text("a: 1")
        (pii_dir / "cv.temp.yml").write_text("a: 2")
        (pii_dir / "cv.yml.meta.json").write_text("{}")
        for name in ("backups", "diffs", ".git"):
            (pii_dir / name).mkdir()
            (pii_dir / name / "cv.yml").write_text("a: 0")

        assert DirectoryScanner.list_documents(pii_dir) == ["cv.yml"]

    def test_missing_directory_returns_empty(self, tmp_path: Path) -> None:
        assert DirectoryScanner.list_documents(tmp_path / "nope") == []
