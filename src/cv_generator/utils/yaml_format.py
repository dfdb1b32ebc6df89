"""YAML load/dump helpers shared by the writer and the path patcher."""

from __future__ import annotations

from typing import Any

import yaml

YAML_EXTENSIONS = (".yml", ".yaml")


class _NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that writes repeated objects in full instead of as anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def is_yaml_path(path: str) -> bool:
    """Return True if the file name carries a YAML extension.

    The check is case-sensitive: ``Resume.YML`` is not treated as YAML.
    """
    return path.endswith(YAML_EXTENSIONS)


def load_yaml(text: str) -> Any:
    """Parse YAML text into plain Python containers and scalars.

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
    """
    return yaml.safe_load(text)


def dump_yaml(data: Any) -> str:
    """Serialize data to block-style YAML.

    Keys keep their insertion order, lines are never folded and unicode is
    written as-is.

    Raises:
        yaml.representer.RepresenterError: If data holds a non-plain object.
    """
    return yaml.dump(
        data,
        Dumper=_NoAliasDumper,
        indent=2,
        width=float("inf"),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
