from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from cv_generator.config import LOG_LEVEL_ENV, PII_PATH_ENV


@pytest.fixture
def pii_dir(tmp_path: Path) -> Path:
    """Create an empty PII directory inside the test's temp directory."""
    directory = tmp_path / "pii"
    directory.mkdir()
    return directory


@pytest.fixture
def api_pii_dir(monkeypatch: pytest.MonkeyPatch, pii_dir: Path) -> Iterator[Path]:
    """Point PII_PATH at a temporary directory for API tests."""
    monkeypatch.setenv(PII_PATH_ENV, pii_dir.as_posix())
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    yield pii_dir


@pytest.fixture(autouse=True)
def _auto_api_pii_dir(request: pytest.FixtureRequest) -> None:
    """Automatically add api_pii_dir fixture to tests in API test files."""
    if "api" in request.path.stem.lower():
        request.getfixturevalue("api_pii_dir")
