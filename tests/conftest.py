"""Shared pytest fixtures for cinemaweb tests."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from cinemaweb.config.settings import CinemaSettings
from cinemaweb.domain.records import Dataset

SAMPLE_DOCUMENT: dict[str, Any] = {
    "projects": [
        {
            "id": "p1",
            "title": "Night Train",
            "year": 2019,
            "genre": "Drama",
            "cast": ["a1", "a2", "a1"],
            "director": "d1",
            "castingDirector": "c1",
        },
        {
            "id": "p2",
            "title": "Harbor Lights",
            "year": 2021,
            "genre": "Thriller",
            "cast": ["a2", "a9"],
            "director": "d1",
            "castingDirector": "c1",
        },
        {
            "id": "p3",
            "title": "Quiet Hours",
            "year": 2023,
            "genre": "Comedy",
            "cast": [],
        },
    ],
    "actors": [
        {"id": "a1", "name": "Ana Lima"},
        {"id": "a2", "name": "Ben Okafor"},
        {"id": "a3", "name": "Cleo Park"},
    ],
    "directors": [{"id": "d1", "name": "Dana Ruiz"}],
    "castingDirectors": [{"id": "c1", "name": "Fay Moreau"}],
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env vars from leaking into settings."""
    monkeypatch.delenv("CINEMAWEB_CONFIG", raising=False)
    monkeypatch.delenv("CINEMAWEB_DATA__SOURCE", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("cinemaweb")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def document() -> dict[str, Any]:
    """A fresh copy of the sample dataset document."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def dataset(document: dict[str, Any]) -> Dataset:
    return Dataset.from_document(document)


@pytest.fixture
def dataset_file(tmp_path: Path, document: dict[str, Any]) -> Path:
    """The sample document written to ``data.json`` in a temp directory."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path) -> CinemaSettings:
    """Default settings with no config file discovered."""
    return CinemaSettings.from_cli(cwd=tmp_path)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run with CWD in a temp directory so no stray cinemaweb.toml is found.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
    yield
