"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from cv_generator.config import Settings
from cv_generator.services.pii_store import PiiFileStore


def get_settings() -> Settings:
    """Read settings from the environment for the current request."""
    return Settings.from_env()


SettingsDep = Annotated[Settings, Depends(get_settings)]


def store_for(directory: str | None, settings: Settings) -> PiiFileStore:
    """Build a file store for an explicit directory or the configured PII root.

    Args:
        directory: Directory supplied by the caller, if any.
        settings: Current settings.

    Returns:
        PiiFileStore rooted at the chosen directory.
    """
    return PiiFileStore(directory or settings.pii_root)


def get_query_store(
    settings: SettingsDep,
    directory: Annotated[
        str | None,
        Query(description="Base directory. Defaults to the PII_PATH directory."),
    ] = None,
) -> PiiFileStore:
    """Build a file store from the ``directory`` query parameter."""
    return store_for(directory, settings)
