"""Shared fixtures for the i18nkit test suite."""

from pathlib import Path

import pytest


@pytest.fixture
def write_source(tmp_path):
    """Write a PHP file below a temporary application root."""

    app = tmp_path / "app"
    app.mkdir()

    def _write(relative: str, content: str) -> Path:
        target = app / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    _write.root = app
    return _write
