"""Pydantic schemas for the managed file library endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cv_generator.api.schemas.files import CamelModel


class SaveManagedFileRequest(CamelModel):
    """Request schema for saving a draft or committing a document."""

    content: str | None = Field(None, description="YAML text to save")
    commit: bool = Field(False, description="Write the document itself instead of a draft")
    message: str | None = Field(None, description="Changelog message")
    tags: list[str] | None = Field(None, description="Replacement tags")
    create_backup: bool = Field(True, description="Back up the document before a draft save")


class CommitRequest(CamelModel):
    message: str | None = Field(None, description="Changelog message")


class DuplicateRequest(CamelModel):
    """Request schema for duplicating a document."""

    name: str | None = Field(None, description="Exact name for the copy")
    suffix: str | None = Field(None, description="Suffix appended to the stem, default _copy")
    auto_increment: bool = Field(True, description="Number the copy when the name is taken")


class RestoreRequest(CamelModel):
    version: str | None = Field(None, description="Backup path, e.g. backups/cv.<ts>.yml")


class DocumentMetadataRequest(CamelModel):
    metadata: Any = Field(None, description="Value stored under the document's metadata key")


class TagsRequest(CamelModel):
    tags: list[str] | None = Field(None, description="Replacement tags")


class DescriptionRequest(CamelModel):
    description: str | None = Field(None, description="Free-text description")
