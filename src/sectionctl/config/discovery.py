"""Locating and reading ``sectionctl.toml``.

The file is found the way git finds ``.git/``: from a starting directory
upwards to the filesystem root. ``SECTIONCTL_CONFIG`` short-circuits the
search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from sectionctl.config.models import SectionConfig

CONFIG_FILENAME = "sectionctl.toml"
CONFIG_ENV_VAR = "SECTIONCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``sectionctl.toml`` at or above *start* (default: CWD).

    When ``SECTIONCTL_CONFIG`` is set it is the only candidate: the path
    it names is returned if it is a file, and nothing is returned if not.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> SectionConfig:
    """Parse a config file into a :class:`SectionConfig`.

    Without *path* the file is discovered from *cwd*; with no file at all
    the code defaults are returned.
    """
    path = path or find_config(cwd)
    if path is None:
        return SectionConfig()
    with path.open("rb") as fh:
        return SectionConfig.model_validate(tomllib.load(fh))
