"""Version helpers."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import tomlkit

PYPROJECT_FILE = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"


def get_pyproject_version() -> str:
    """Get PlexCord's version.

    Reads the ``pyproject.toml`` next to the package when running from a checkout
    and falls back to the installed distribution metadata.

    Returns:
        str: PlexCord's version, or "unknown"
    """
    if PYPROJECT_FILE.is_file():
        toml_data = tomlkit.parse(PYPROJECT_FILE.read_text(encoding="utf-8"))
        project = toml_data.get("project", {})
        if "version" in project:
            return str(project["version"])

    try:
        return version("PlexCord")
    except PackageNotFoundError:
        return "unknown"


def get_docker_status() -> bool:
    """Check if PlexCord is running inside a Docker container.

    Returns:
        bool: True if running inside a Docker container, False otherwise
    """
    return Path("/.dockerenv").is_file()
