"""PII file routes for the API.

Failures answer with ``{"success": false, "error": ...}`` and the status of
the route's contract.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

import yaml
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from cv_generator.api.dependencies import SettingsDep, get_query_store, store_for
from cv_generator.api.responses import failure, respond, unexpected
from cv_generator.api.schemas.files import (
    ReadFilesRequest,
    TransferFileRequest,
    WriteFileRequest,
    YamlPathUpdateRequest,
)
from cv_generator.models.results import FILE_MISSING, WriteResult, YamlPathError
from cv_generator.services.pii_store import PiiFileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fs", tags=["files"])

QueryStoreDep = Annotated[PiiFileStore, Depends(get_query_store)]


def _write_response(result: WriteResult, message: str) -> JSONResponse:
    if not result.success:
        return failure(result.error or "Unknown error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return respond(
        {
            "success": True,
            "message": message,
            "filePath": result.file_path,
            "fileExisted": result.file_existed,
            "diffCreated": result.diff_created,
        }
    )


@router.get("")
def list_files(store: QueryStoreDep) -> JSONResponse:
    """List YAML files in the directory and its ``resumes`` subtree."""
    try:
        inventory = store.list_files()
        return respond(
            {"success": True, "directory": str(store.base_directory), **inventory.to_dict()}
        )
    except Exception as exc:
        return unexpected("listing files", exc)


@router.post("")
def write_file_endpoint(data: WriteFileRequest, settings: SettingsDep) -> JSONResponse:
    """Write a document from structured data or from pre-rendered YAML."""
    try:
        if (data.data is None and not data.yaml_content) or not data.file_path:
            return failure(
                "Either data or yamlContent and filePath are required",
                status.HTTP_400_BAD_REQUEST,
            )

        store = store_for(data.directory, settings)
        logger.info(
            "Writing %s in %s (%s)",
            data.file_path,
            store.base_directory,
            "direct YAML" if data.yaml_content else "data to YAML",
        )
        if data.yaml_content:
            result = store.write_yaml(
                data.yaml_content, data.file_path, create_diff=data.create_diff
            )
        else:
            result = store.write(data.data, data.file_path, create_diff=data.create_diff)
        return _write_response(result, "File written successfully")
    except Exception as exc:
        return unexpected("writing a file", exc)


@router.post("/save-yaml")
def save_yaml_endpoint(data: WriteFileRequest, settings: SettingsDep) -> JSONResponse:
    """Write pre-rendered YAML text exactly as given."""
    try:
        if not data.yaml_content or not data.file_path:
            return failure("YAML content and filePath are required", status.HTTP_400_BAD_REQUEST)

        store = store_for(data.directory, settings)
        result = store.write_yaml(data.yaml_content, data.file_path, create_diff=data.create_diff)
        return _write_response(result, "YAML file written successfully")
    except Exception as exc:
        return unexpected("saving YAML", exc)


@router.post("/get-files")
def read_files_endpoint(data: ReadFilesRequest, settings: SettingsDep) -> JSONResponse:
    """Read and parse several files in one request."""
    try:
        if not isinstance(data.files, list):
            return failure("Files array is required", status.HTTP_400_BAD_REQUEST)

        store = store_for(data.directory, settings)
        logger.info("Reading %d files from %s", len(data.files), store.base_directory)
        contents = store.read_files(str(path) for path in data.files)
        return respond(
            {
                "success": True,
                "directory": str(store.base_directory),
                "files": contents,
                "totalFiles": len(contents),
            }
        )
    except Exception as exc:
        return unexpected("reading files", exc)


@router.post("/copy")
def copy_file_endpoint(data: TransferFileRequest, settings: SettingsDep) -> JSONResponse:
    """Copy a file, refusing to replace an existing one unless asked to."""
    try:
        if not data.source_path or not data.destination_path:
            return failure(
                "sourcePath and destinationPath are required", status.HTTP_400_BAD_REQUEST
            )

        store = store_for(data.directory, settings)
        result = store.copy(data.source_path, data.destination_path, overwrite=data.overwrite)
        if not result.success:
            return failure(result.error or "Unknown error", status.HTTP_400_BAD_REQUEST)
        return respond({"message": "File copied successfully", **result.to_dict()})
    except Exception as exc:
        return unexpected("copying a file", exc)


@router.post("/move")
def move_file_endpoint(data: TransferFileRequest, settings: SettingsDep) -> JSONResponse:
    """Move a file as a copy followed by a delete of the source."""
    try:
        if not data.source_path or not data.destination_path:
            return failure(
                "sourcePath and destinationPath are required", status.HTTP_400_BAD_REQUEST
            )

        store = store_for(data.directory, settings)
        result = store.move(data.source_path, data.destination_path, overwrite=data.overwrite)
        if not result.success:
            payload: dict[str, Any] = {"success": False, "error": result.error}
            if result.note:
                payload["note"] = result.note
            return respond(payload, status.HTTP_400_BAD_REQUEST)
        return respond({"message": "File moved successfully", **result.to_dict()})
    except Exception as exc:
        return unexpected("moving a file", exc)


@router.delete("/delete")
def delete_file_endpoint(
    store: QueryStoreDep,
    file_path: Annotated[str | None, Query(alias="filePath")] = None,
    create_backup: Annotated[str | None, Query(alias="createBackup")] = None,
) -> JSONResponse:
    """Delete a file, keeping a backup record unless ``createBackup=false``."""
    try:
        if not file_path:
            return failure("filePath parameter is required", status.HTTP_400_BAD_REQUEST)

        result = store.delete(file_path, create_backup=create_backup != "false")
        if not result.success:
            return failure(result.error or "Unknown error", status.HTTP_404_NOT_FOUND)
        return respond({"message": "File deleted successfully", **result.to_dict()})
    except Exception as exc:
        return unexpected("deleting a file", exc)


@router.get("/yaml-path")
def read_yaml_path_endpoint(
    store: QueryStoreDep,
    file_path: Annotated[str | None, Query(alias="filePath")] = None,
    path: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """Return the value stored at one dotted path of a YAML document."""
    try:
        if not file_path or not path:
            return failure("filePath and path are required", status.HTTP_400_BAD_REQUEST)

        try:
            value = store.read_yaml_path(file_path, path)
        except FileNotFoundError:
            return failure(FILE_MISSING, status.HTTP_404_NOT_FOUND)
        except yaml.YAMLError as exc:
            return failure(f"Failed to parse YAML: {exc}", status.HTTP_400_BAD_REQUEST)

        return respond({"success": True, "filePath": file_path, "path": path, "value": value})
    except Exception as exc:
        return unexpected("reading a YAML path", exc)


@router.post("/yaml-path")
def update_yaml_path_endpoint(data: YamlPathUpdateRequest, settings: SettingsDep) -> JSONResponse:
    """Replace the value at one dotted path and write the whole document back."""
    try:
        if not data.file_path or not data.path:
            return failure("filePath and path are required", status.HTTP_400_BAD_REQUEST)

        store = store_for(data.directory, settings)
        try:
            result = store.update_yaml_path(
                data.file_path, data.path, data.value, create_diff=data.create_diff
            )
        except FileNotFoundError:
            return failure(FILE_MISSING, status.HTTP_404_NOT_FOUND)
        except yaml.YAMLError as exc:
            return failure(f"Failed to parse YAML: {exc}", status.HTTP_400_BAD_REQUEST)
        except YamlPathError as exc:
            return failure(str(exc), status.HTTP_400_BAD_REQUEST)

        if not result.success:
            return failure(result.error or "Unknown error", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return respond(
            {
                "success": True,
                "message": f'YAML path "{data.path}" updated successfully',
                "filePath": result.file_path,
                "path": data.path,
                "fileExisted": result.file_existed,
                "diffCreated": result.diff_created,
            }
        )
    except Exception as exc:
        return unexpected("updating a YAML path", exc)
