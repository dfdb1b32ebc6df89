"""Managed file library routes for the API.

Documents are addressed by their path below the PII directory, e.g.
``/api/files/resumes/backend.yml``. Action routes append a final segment
(``/versions``, ``/duplicate``, ``/commit`` ...), so they are registered
before the plain document routes.
"""

from __future__ import annotations

import logging
from typing import Annotated

import yaml
from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from cv_generator.api.dependencies import SettingsDep
from cv_generator.api.responses import failure, respond, unexpected
from cv_generator.api.schemas.managed_files import (
    CommitRequest,
    DescriptionRequest,
    DocumentMetadataRequest,
    DuplicateRequest,
    RestoreRequest,
    SaveManagedFileRequest,
    TagsRequest,
)
from cv_generator.config import Settings
from cv_generator.models.managed_files import FileFilters, FileManagerError, FileType
from cv_generator.models.results import FILE_MISSING, ErrorKind, YamlPathError
from cv_generator.services.file_manager import CURRENT_VERSION, FileManager
from cv_generator.services.pii_store import PiiFileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["managed files"])

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.IO_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _manager(settings: Settings) -> FileManager:
    return FileManager(settings.pii_root)


def _manager_failure(exc: FileManagerError) -> JSONResponse:
    logger.warning("File library request failed: %s", exc)
    return failure(str(exc), _STATUS_BY_KIND[exc.kind])


@router.get("/list")
def list_managed_files(
    settings: SettingsDep,
    file_type: Annotated[str | None, Query(alias="type")] = None,
    tags: Annotated[str | None, Query(description="Comma-separated tags")] = None,
    search: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """List library documents with their metadata, optionally filtered."""
    try:
        try:
            kind = FileType(file_type) if file_type else None
        except ValueError:
            return failure(f"Invalid file type: {file_type}", status.HTTP_400_BAD_REQUEST)

        filters = FileFilters(
            type=kind,
            tags=[tag for tag in (tags or "").split(",") if tag],
            search=search or None,
        )
        files = _manager(settings).list_files(filters)
        return respond({"success": True, "files": [entry.to_dict() for entry in files]})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("listing library files", exc)


@router.get("/{file_path:path}/versions")
def list_versions(file_path: str, settings: SettingsDep) -> JSONResponse:
    try:
        versions = _manager(settings).get_versions(file_path)
        return respond({"success": True, "versions": [v.to_dict() for v in versions]})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("listing versions", exc)


@router.get("/{file_path:path}/diff")
def diff_versions(
    file_path: str,
    settings: SettingsDep,
    from_version: Annotated[str, Query(alias="from")] = CURRENT_VERSION,
    to_version: Annotated[str, Query(alias="to")] = CURRENT_VERSION,
) -> JSONResponse:
    """Unified diff between two versions; ``current`` is the document itself."""
    try:
        diff = _manager(settings).get_diff(file_path, from_version, to_version)
        return respond({"success": True, **diff.to_dict()})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("diffing versions", exc)


@router.get("/{file_path:path}")
def read_managed_file(file_path: str, settings: SettingsDep) -> JSONResponse:
    """Return a document's text (its draft when one exists) with metadata and versions."""
    try:
        content = _manager(settings).read(file_path)
        return respond({"success": True, **content.to_dict()})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("reading a library file", exc)


@router.post("/{file_path:path}/metadata")
def update_document_metadata(
    file_path: str, data: DocumentMetadataRequest, settings: SettingsDep
) -> JSONResponse:
    """Replace the ``metadata`` mapping stored inside a YAML document."""
    try:
        store = PiiFileStore(settings.pii_root)
        try:
            result = store.update_yaml_path(file_path, "metadata", data.metadata)
        except FileNotFoundError:
            return failure(FILE_MISSING, status.HTTP_404_NOT_FOUND)
        except yaml.YAMLError as exc:
            return failure(f"Failed to parse YAML: {exc}", status.HTTP_400_BAD_REQUEST)
        except YamlPathError as exc:
            return failure(str(exc), status.HTTP_400_BAD_REQUEST)

        if not result.success:
            return failure(result.error or "Unknown error", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return respond({"success": True, "message": "Metadata updated successfully"})
    except Exception as exc:
        return unexpected("updating document metadata", exc)


@router.post("/{file_path:path}/tags")
def set_tags(file_path: str, data: TagsRequest, settings: SettingsDep) -> JSONResponse:
    try:
        if data.tags is None:
            return failure("tags is required", status.HTTP_400_BAD_REQUEST)
        sidecar = _manager(settings).set_tags(file_path, data.tags)
        return respond({"success": True, "tags": sidecar.tags})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("setting tags", exc)


@router.post("/{file_path:path}/description")
def set_description(
    file_path: str, data: DescriptionRequest, settings: SettingsDep
) -> JSONResponse:
    try:
        if data.description is None:
            return failure("description is required", status.HTTP_400_BAD_REQUEST)
        sidecar = _manager(settings).set_description(file_path, data.description)
        return respond({"success": True, "description": sidecar.description})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("setting a description", exc)


@router.post("/{file_path:path}/duplicate")
def duplicate_file(file_path: str, data: DuplicateRequest, settings: SettingsDep) -> JSONResponse:
    """Copy a document beside itself, numbering the copy when its name is taken."""
    try:
        result = _manager(settings).duplicate(
            file_path,
            name=data.name,
            suffix=data.suffix,
            auto_increment=data.auto_increment,
        )
        return respond({"success": True, **result.to_dict()})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("duplicating a file", exc)


@router.post("/{file_path:path}/restore")
def restore_version(file_path: str, data: RestoreRequest, settings: SettingsDep) -> JSONResponse:
    """Replace a document with one of its backups, backing up the current state first."""
    try:
        if not data.version:
            return failure("version is required", status.HTTP_400_BAD_REQUEST)
        backup = _manager(settings).restore(file_path, data.version)
        return respond(
            {
                "success": True,
                "message": "File restored successfully",
                "restoredFrom": data.version,
                "backup": backup,
            }
        )
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("restoring a version", exc)


@router.post("/{file_path:path}")
def save_managed_file(
    file_path: str, data: SaveManagedFileRequest, settings: SettingsDep
) -> JSONResponse:
    """Save YAML text as a draft, or into the document when ``commit`` is set."""
    try:
        if not data.content:
            return failure("content is required", status.HTTP_400_BAD_REQUEST)
        result = _manager(settings).save(
            file_path,
            data.content,
            commit=data.commit,
            message=data.message,
            tags=data.tags,
            create_backup=data.create_backup,
        )
        return respond({"success": True, **result.to_dict()})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("saving a library file", exc)


@router.put("/{file_path:path}/commit")
def commit_draft(
    file_path: str, settings: SettingsDep, data: CommitRequest | None = None
) -> JSONResponse:
    try:
        message = data.message if data else None
        result = _manager(settings).commit(file_path, message)
        return respond({"success": True, **result.to_dict()})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("committing a draft", exc)


@router.delete("/{file_path:path}/discard")
def discard_draft(file_path: str, settings: SettingsDep) -> JSONResponse:
    try:
        _manager(settings).discard(file_path)
        return respond({"success": True, "message": "Changes discarded successfully"})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("discarding a draft", exc)


@router.delete("/{file_path:path}")
def delete_managed_file(
    file_path: str,
    settings: SettingsDep,
    create_backup: Annotated[str | None, Query(alias="createBackup")] = None,
) -> JSONResponse:
    """Delete a document with its draft and sidecar, backing it up unless told not to."""
    try:
        backup = _manager(settings).delete(file_path, create_backup=create_backup != "false")
        return respond({"success": True, "message": "File deleted successfully", "backup": backup})
    except FileManagerError as exc:
        return _manager_failure(exc)
    except Exception as exc:
        return unexpected("deleting a library file", exc)
