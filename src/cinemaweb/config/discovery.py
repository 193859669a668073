"""Locate and read ``cinemaweb.toml``.

Lookup order: the ``CINEMAWEB_CONFIG`` env var if set (no fallback when it
points nowhere), then the start directory and each of its parents.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from cinemaweb.config.models import CinemaConfig

CONFIG_FILENAME = "cinemaweb.toml"
CONFIG_ENV_VAR = "CINEMAWEB_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), if any."""
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


def load_config(path: Path | None = None, cwd: Path | None = None) -> CinemaConfig:
    """Parse the TOML sections into a :class:`CinemaConfig`.

    Without a file (given or discovered) every section keeps its defaults.
    Unknown keys are ignored.
    """
    path = path or find_config(cwd)
    if path is None:
        return CinemaConfig()
    with path.open("rb") as fh:
        return CinemaConfig.model_validate(tomllib.load(fh))
