"""Shared fixtures for configuration fingerprint tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

type WriteConfig = Callable[[str, str], Path]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide an empty project root.

    Returns
    -------
    Path
        Project root directory.
    """
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def config_dir(project_dir: Path) -> Path:
    """Provide the configuration directory inside the project root.

    Returns
    -------
    Path
        Configuration directory.
    """
    directory = project_dir / ".devcontainer"
    directory.mkdir()
    return directory


@pytest.fixture
def write_config(config_dir: Path) -> WriteConfig:
    """Provide a writer for files relative to the configuration directory.

    Returns
    -------
    WriteConfig
        Callable taking a relative name and text content.
    """

    def _write(name: str, content: str) -> Path:
        path = config_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write
