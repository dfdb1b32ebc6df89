"""Tests for the managed file library API endpoints.

Endpoints under test:
- GET    /api/files/list
- GET    /api/files/{path}
- GET    /api/files/{path}/versions
- GET    /api/files/{path}/diff
- POST   /api/files/{path}
- POST   /api/files/{path}/metadata
- POST   /api/files/{path}/tags
- POST   /api/files/{path}/description
- POST   /api/files/{path}/duplicate
- POST   /api/files/{path}/restore
- PUT    /api/files/{path}/commit
- DELETE /api/files/{path}/discard
- DELETE /api/files/{path}

PII_PATH points at a fresh temp directory for every test (see conftest).
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from cv_generator.api.main import app
from cv_generator.config import PII_PATH_ENV
from cv_generator.services.file_manager import FileManager


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def library(api_pii_dir: Path) -> Path:
    (api_pii_dir / "resume.yml").write_text(
        "info:\n  role: Backend Engineer\nmetadata:\n  target: Acme\n", encoding="utf-8"
    )
    (api_pii_dir / "linkedin.yml").write_text("role: Data Engineer\n", encoding="utf-8")
    (api_pii_dir / "resumes").mkdir()
    (api_pii_dir / "resumes" / "backend.yml").write_text("a: 1\n", encoding="utf-8")
    return api_pii_dir


# ------------------------------------------------------------------ #
#  GET /api/files/list                                                #
# ------------------------------------------------------------------ #


class TestListManagedFiles:
    """Tests for GET /api/files/list."""

    def test_lists_every_document(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/list")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        paths = [entry["path"] for entry in data["files"]]
        assert paths == ["linkedin.yml", "resume.yml", "resumes/backend.yml"]
        resume = data["files"][1]
        assert resume["type"] == "resume"
        assert resume["role"] == "Backend Engineer"
        assert resume["resumeMetadata"] == {"target": "Acme"}
        assert resume["hasUnsavedChanges"] is False

    def test_filters_by_type(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/list", params={"type": "linkedin"})

        assert [entry["path"] for entry in response.json()["files"]] == ["linkedin.yml"]

    def test_filters_by_comma_separated_tags(self, client: TestClient, library: Path) -> None:
        client.post("/api/files/resumes/backend.yml/tags", json={"tags": ["final"]})

        response = client.get("/api/files/list", params={"tags": "draft,final"})

        assert [entry["path"] for entry in response.json()["files"]] == ["resumes/backend.yml"]

    def test_search(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/list", params={"search": "BACKEND"})

        assert [entry["path"] for entry in response.json()["files"]] == ["resumes/backend.yml"]

    def test_invalid_type(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/list", params={"type": "pdf"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid file type: pdf"}

    def test_missing_pii_directory(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv(PII_PATH_ENV, str(tmp_path / "missing"))

        response = client.get("/api/files/list")

        assert response.status_code == 404
        assert "PII directory not found" in response.json()["error"]


# ------------------------------------------------------------------ #
#  Drafts: save, read, commit, discard                                #
# ------------------------------------------------------------------ #


class TestDrafts:
    """Tests for saving, reading, committing and discarding drafts."""

    def test_save_draft_then_read(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resumes/backend.yml", json={"content": "a: 2\n"})

        assert response.status_code == 200
        data = response.json()
        assert data["saved"] is True
        assert data["changelogEntry"]["action"] == "save"
        assert data["backupCreated"].startswith("backups/backend.")

        read = client.get("/api/files/resumes/backend.yml").json()
        assert read["content"] == "a: 2\n"
        assert read["hasUnsavedChanges"] is True
        assert read["metadata"]["path"] == "resumes/backend.yml"
        assert len(read["versions"]) == 1
        assert (library / "resumes" / "backend.yml").read_text(encoding="utf-8") == "a: 1\n"

    def test_save_with_commit(self, client: TestClient, library: Path) -> None:
        response = client.post(
            "/api/files/resumes/backend.yml",
            json={"content": "a: 3\n", "commit": True, "message": "final", "tags": ["done"]},
        )

        assert response.status_code == 200
        assert response.json()["changelogEntry"]["message"] == "final"
        assert (library / "resumes" / "backend.yml").read_text(encoding="utf-8") == "a: 3\n"
        listing = client.get("/api/files/list", params={"tags": "done"}).json()
        assert [entry["path"] for entry in listing["files"]] == ["resumes/backend.yml"]

    def test_save_requires_content(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resumes/backend.yml", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "content is required"

    def test_save_rejects_invalid_yaml(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resumes/backend.yml", json={"content": "a: [1"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid YAML")

    def test_commit_promotes_draft(self, client: TestClient, library: Path) -> None:
        client.post(
            "/api/files/resumes/backend.yml", json={"content": "a: 2\n", "createBackup": False}
        )

        response = client.put("/api/files/resumes/backend.yml/commit", json={"message": "go"})

        assert response.status_code == 200
        assert response.json()["changelogEntry"]["action"] == "commit"
        assert (library / "resumes" / "backend.yml").read_text(encoding="utf-8") == "a: 2\n"
        assert not (library / "resumes" / "backend.temp.yml").exists()

    def test_commit_without_draft(self, client: TestClient, library: Path) -> None:
        response = client.put("/api/files/resumes/backend.yml/commit")

        assert response.status_code == 400
        assert response.json()["error"] == "No temporary changes to commit"

    def test_discard(self, client: TestClient, library: Path) -> None:
        client.post("/api/files/resumes/backend.yml", json={"content": "a: 2\n"})

        response = client.delete("/api/files/resumes/backend.yml/discard")

        assert response.status_code == 200
        assert response.json()["message"] == "Changes discarded successfully"
        assert client.get("/api/files/resumes/backend.yml").json()["content"] == "a: 1\n"

    def test_read_missing_file(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/ghost.yml")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "File not found: ghost.yml"}


# ------------------------------------------------------------------ #
#  Metadata, tags and description                                     #
# ------------------------------------------------------------------ #


class TestMetadata:
    """Tests for document metadata and sidecar fields."""

    def test_update_document_metadata(self, client: TestClient, library: Path) -> None:
        response = client.post(
            "/api/files/resume.yml/metadata", json={"metadata": {"target": "Globex"}}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Metadata updated successfully"
        document = yaml.safe_load((library / "resume.yml").read_text(encoding="utf-8"))
        assert document["metadata"] == {"target": "Globex"}
        assert document["info"]["role"] == "Backend Engineer"

    def test_metadata_of_missing_file(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/ghost.yml/metadata", json={"metadata": {}})

        assert response.status_code == 404

    def test_metadata_of_non_mapping_document(self, client: TestClient, library: Path) -> None:
        (library / "list.yml").write_text("- a\n- b\n", encoding="utf-8")

        response = client.post("/api/files/list.yml/metadata", json={"metadata": {}})

        assert response.status_code == 400

    def test_tags_and_description(self, client: TestClient, library: Path) -> None:
        tags = client.post("/api/files/resume.yml/tags", json={"tags": ["final", "2024"]})
        description = client.post(
            "/api/files/resume.yml/description", json={"description": "Sent to Acme"}
        )

        assert tags.json() == {"success": True, "tags": ["final", "2024"]}
        assert description.json() == {"success": True, "description": "Sent to Acme"}
        metadata = client.get("/api/files/resume.yml").json()["metadata"]
        assert metadata["tags"] == ["final", "2024"]
        assert metadata["description"] == "Sent to Acme"

    def test_tags_are_required(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resume.yml/tags", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "tags is required"

    def test_tags_on_missing_file(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/ghost.yml/tags", json={"tags": ["x"]})

        assert response.status_code == 404
        assert not (library / "ghost.yml.meta.json").exists()


# ------------------------------------------------------------------ #
#  POST /api/files/{path}/duplicate                                   #
# ------------------------------------------------------------------ #


class TestDuplicate:
    """Tests for POST /api/files/{path}/duplicate."""

    def test_auto_increments(self, client: TestClient, library: Path) -> None:
        first = client.post("/api/files/resumes/backend.yml/duplicate", json={})
        second = client.post("/api/files/resumes/backend.yml/duplicate", json={})

        assert first.json() == {
            "success": True,
            "newPath": "resumes/backend_copy.yml",
            "suggestedName": "backend_copy.yml",
        }
        assert second.json()["newPath"] == "resumes/backend_copy_2.yml"
        assert (library / "resumes" / "backend_copy_2.yml").is_file()

    def test_custom_suffix(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resume.yml/duplicate", json={"suffix": "_acme"})

        assert response.json()["newPath"] == "resume_acme.yml"

    def test_name_taken(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resume.yml/duplicate", json={"name": "linkedin.yml"})

        assert response.status_code == 409
        assert "role: Data Engineer" in (library / "linkedin.yml").read_text(encoding="utf-8")

    def test_missing_source(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/ghost.yml/duplicate", json={})

        assert response.status_code == 404


# ------------------------------------------------------------------ #
#  Versions, diff and restore                                         #
# ------------------------------------------------------------------ #


class TestVersions:
    """Tests for version listing, diff and restore."""

    def _commit(self, client: TestClient, content: str) -> str:
        response = client.post(
            "/api/files/resumes/backend.yml", json={"content": content, "commit": True}
        )
        return response.json()["backupCreated"]

    def test_lists_versions(self, client: TestClient, library: Path) -> None:
        backup = self._commit(client, "a: 2\n")

        response = client.get("/api/files/resumes/backend.yml/versions")

        assert response.status_code == 200
        versions = response.json()["versions"]
        assert [version["backupPath"] for version in versions] == [backup]
        assert versions[0]["size"] == len("a: 1\n")
        assert versions[0]["changelogEntry"]["file"] == "resumes/backend.yml"

    def test_no_versions(self, client: TestClient, library: Path) -> None:
        response = client.get("/api/files/resume.yml/versions")

        assert response.json() == {"success": True, "versions": []}

    def test_diff_against_backup(self, client: TestClient, library: Path) -> None:
        backup = self._commit(client, "a: 2\nb: 3\n")

        response = client.get(
            "/api/files/resumes/backend.yml/diff", params={"from": backup, "to": "current"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {"additions": 2, "deletions": 1, "changes": 3}
        assert "-a: 1" in data["diff"]

    def test_diff_unknown_version(self, client: TestClient, library: Path) -> None:
        response = client.get(
            "/api/files/resumes/backend.yml/diff", params={"from": "backups/nope.yml"}
        )

        assert response.status_code == 404

    def test_restore(self, client: TestClient, library: Path) -> None:
        backup = self._commit(client, "a: 2\n")

        response = client.post("/api/files/resumes/backend.yml/restore", json={"version": backup})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "File restored successfully"
        assert data["restoredFrom"] == backup
        assert (library / "resumes" / "backend.yml").read_text(encoding="utf-8") == "a: 1\n"
        assert (library / data["backup"]).read_text(encoding="utf-8") == "a: 2\n"

    def test_restore_requires_version(self, client: TestClient, library: Path) -> None:
        response = client.post("/api/files/resumes/backend.yml/restore", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "version is required"

    def test_restore_unknown_version(self, client: TestClient, library: Path) -> None:
        response = client.post(
            "/api/files/resumes/backend.yml/restore", json={"version": "backups/nope.yml"}
        )

        assert response.status_code == 404


# ------------------------------------------------------------------ #
#  DELETE /api/files/{path}                                           #
# ------------------------------------------------------------------ #


class TestDeleteManagedFile:
    """Tests for DELETE /api/files/{path}."""

    def test_delete_keeps_backup(self, client: TestClient, library: Path) -> None:
        response = client.delete("/api/files/resumes/backend.yml")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "File deleted successfully"
        assert not (library / "resumes" / "backend.yml").exists()
        assert (library / data["backup"]).read_text(encoding="utf-8") == "a: 1\n"
        assert FileManager(library).read_changelog()[-1]["action"] == "delete"

    def test_delete_without_backup(self, client: TestClient, library: Path) -> None:
        response = client.delete(
            "/api/files/resumes/backend.yml", params={"createBackup": "false"}
        )

        assert response.json()["backup"] is None
        assert not (library / "backups").exists()

    def test_delete_missing_file(self, client: TestClient, library: Path) -> None:
        response = client.delete("/api/files/ghost.yml")

        assert response.status_code == 404
