"""Pydantic schemas for PII file API endpoints.

Request bodies use the camelCase keys sent by the UI. Required fields are
declared optional here so the routes can answer with their fixed 400
messages instead of a generic validation error.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WriteFileRequest(CamelModel):
    """Request schema for writing a YAML document."""

    data: Any = Field(None, description="Structured data serialized to YAML")
    yaml_content: str | None = Field(None, description="Pre-rendered YAML written verbatim")
    file_path: str | None = Field(None, description="Path relative to the directory")
    directory: str | None = Field(None, description="Base directory; defaults to PII_PATH")
    create_diff: bool = Field(True, description="Record a diff when the content changes")


class ReadFilesRequest(CamelModel):
    """Request schema for reading several files at once."""

    files: Any = Field(None, description="Relative paths to read")
    directory: str | None = Field(None, description="Base directory; defaults to PII_PATH")


class TransferFileRequest(CamelModel):
    """Request schema shared by copy and move."""

    source_path: str | None = Field(None, description="Path of the file to copy or move")
    destination_path: str | None = Field(None, description="Target path")
    directory: str | None = Field(None, description="Base directory; defaults to PII_PATH")
    overwrite: bool = Field(False, description="Replace an existing destination")


class YamlPathUpdateRequest(CamelModel):
    """Request schema for replacing one value inside a YAML document."""

    file_path: str | None = Field(None, description="Path of the YAML document")
    path: str | None = Field(None, description="Dotted path, e.g. workExperience.0.position")
    value: Any = Field(None, description="New value for the addressed field")
    directory: str | None = Field(None, description="Base directory; defaults to PII_PATH")
    create_diff: bool = Field(True, description="Record a diff when the content changes")


class PiiPathResponse(CamelModel):
    """Response schema for the configured PII directory."""

    pii_path: str
