"""CinemaSettings: every knob the CLI and services read, in one frozen object.

Sources, highest priority first:

1. keyword arguments (the CLI's global flags)
2. ``CINEMAWEB_*`` environment variables, ``__`` between section and key
   (``CINEMAWEB_VIEWPORT__WIDTH=1280``)
3. the ``cinemaweb.toml`` found by :func:`~cinemaweb.config.discovery.find_config`
4. defaults in :mod:`cinemaweb.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from cinemaweb.config.discovery import find_config
from cinemaweb.config.models import DataConfig, LayoutConfig, ViewportConfig

# The TOML file for the settings object currently being constructed.
_active_toml: ContextVar[Path | None] = ContextVar("cinemaweb_active_toml", default=None)


class _ConfigFileSource(TomlConfigSettingsSource):
    """The TOML layer. A relative ``[data] source`` is taken relative to the file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path) -> None:
        super().__init__(settings_cls, toml_file=toml_path)
        self._base = toml_path.parent

    def __call__(self) -> dict[str, Any]:
        values = dict(super().__call__())
        data = values.get("data")
        if isinstance(data, dict) and isinstance(data.get("source"), str):
            values["data"] = {**data, "source": self._rooted(data["source"])}
        return values

    def _rooted(self, source: str) -> str:
        if not source or "://" in source or Path(source).is_absolute():
            return source
        return str((self._base / source).resolve())


class CinemaSettings(BaseSettings):
    """Resolved settings.

    Attributes:
        config_path: The TOML file that was read, if any.
        json_output: ``--json``.
        quiet: ``-q``.
        verbose: ``-v``.
        log_json: ``--log-json``.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="CINEMAWEB_",
        env_nested_delimiter="__",
    )

    config_path: Path | None = None
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    data: DataConfig = Field(default_factory=DataConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        toml_path = _active_toml.get()
        if toml_path is not None:
            sources.append(_ConfigFileSource(settings_cls, toml_path))
        return tuple(sources)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        cwd: Path | None = None,
        **flags: Any,
    ) -> CinemaSettings:
        """Build settings for one CLI invocation.

        *config_path* skips discovery; a path that is not a file means "no
        config file". A relative ``[data] source`` in the TOML file is taken
        relative to that file, not to the working directory.

        Raises:
            click.ClickException: If the TOML file does not parse.
        """
        if config_path is not None:
            toml_path = Path(config_path) if Path(config_path).is_file() else None
        else:
            toml_path = find_config(cwd)

        token = _active_toml.set(toml_path)
        try:
            settings = cls(config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _active_toml.reset(token)
        return settings
