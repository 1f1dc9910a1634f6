from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

"""Environment helper utilities.

Loads a `.env` file from the project root so that the ``IMS_*`` settings
defined there become available via ``os.getenv`` before
``InventoryConfig.from_env`` reads them. Uses `python-dotenv`.
"""

__all__ = ["load_project_dotenv"]

_MAX_PARENT_LEVELS = 10


def _find_project_root(start: Path | None = None) -> Path:
    """Traverse upwards until we find a directory that contains `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(_MAX_PARENT_LEVELS):
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv(start: Path | None = None) -> bool:
    """
    Load environment variables from the project-level `.env` if present.
    Values already in the environment win. Returns True when a file was loaded.
    """
    dotenv_path = _find_project_root(start) / ".env"
    if not dotenv_path.exists():
        return False
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return True
