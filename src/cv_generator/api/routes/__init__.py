"""Route handlers for the API."""

from cv_generator.api.routes import config, files, health, managed_files

__all__ = [
    "config",
    "files",
    "health",
    "managed_files",
]
