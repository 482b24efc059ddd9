"""Version lookup for yamlizer."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"


def get_version() -> str:
    """Return the version of a source checkout, else of the installed distribution."""
    if _PYPROJECT.exists():
        with open(_PYPROJECT, "rb") as f:
            project = tomllib.load(f).get("project", {})
        if project.get("name") == "yamlizer" and "version" in project:
            return str(project["version"])
    try:
        return _metadata_version("yamlizer")
    except PackageNotFoundError:
        return "0.0.0"
