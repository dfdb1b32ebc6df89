"""File services for the PII directory.

Reading, writing, copying, moving and deleting résumé YAML documents, plus
``PiiFileStore`` which binds them to one base directory and ``FileManager``
which keeps sidecar metadata, backup versions and a changelog next to them.
"""

from cv_generator.services.file_copy import copy_file
from cv_generator.services.file_delete import delete_file
from cv_generator.services.file_manager import FileManager
from cv_generator.services.file_move import move_file
from cv_generator.services.file_reader import read_files
from cv_generator.services.file_writer import write_file, write_yaml_file
from cv_generator.services.paths import resolve_path
from cv_generator.services.pii_store import PiiFileStore

__all__ = [
    "FileManager",
    "PiiFileStore",
    "copy_file",
    "delete_file",
    "move_file",
    "read_files",
    "resolve_path",
    "write_file",
    "write_yaml_file",
]
