"""Data models and type definitions"""

from cv_generator.models.results import (
    CopyResult,
    DeleteResult,
    ErrorKind,
    MoveResult,
    WriteResult,
    YamlPathError,
)

__all__ = [
    "CopyResult",
    "DeleteResult",
    "ErrorKind",
    "MoveResult",
    "WriteResult",
    "YamlPathError",
]
