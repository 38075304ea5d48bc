"""Tests for version utility helpers."""

import tomllib
from pathlib import Path

import pytest

from plexcord import PLEXCORD_HEADER, __version__
from plexcord.utils import version as version_module
from plexcord.utils.version import get_docker_status, get_pyproject_version


def test_get_pyproject_version_matches_pyproject() -> None:
    """Test that get_pyproject_version matches the version in pyproject.toml."""
    with version_module.PYPROJECT_FILE.open("rb") as f:
        pyproject = tomllib.load(f)

    expected_version = pyproject["project"]["version"]

    assert get_pyproject_version() == expected_version
    assert __version__ == expected_version


def test_get_pyproject_version_without_checkout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the fallback when no pyproject.toml sits next to the package."""
    monkeypatch.setattr(version_module, "PYPROJECT_FILE", tmp_path / "missing.toml")

    assert isinstance(get_pyproject_version(), str)


def test_get_docker_status_returns_bool() -> None:
    """Test that get_docker_status reports a boolean."""
    assert isinstance(get_docker_status(), bool)


def test_header_mentions_version() -> None:
    """Test that the startup banner includes the running version."""
    assert __version__ in PLEXCORD_HEADER
