"""Utility functions and helpers"""

from cv_generator.utils.yaml_format import dump_yaml, is_yaml_path, load_yaml

__all__ = [
    "dump_yaml",
    "is_yaml_path",
    "load_yaml",
]
