"""Unified settings — CLI flags, env vars, and ``sectionctl.toml`` in one object.

Sources, highest priority first:

1. keyword arguments (the global CLI flags)
2. ``SECTIONCTL_*`` environment variables, ``__`` for nesting
   (``SECTIONCTL_SITE__NAME``)
3. the TOML file found by :func:`~sectionctl.config.discovery.find_config`
4. defaults baked into :mod:`sectionctl.config.models`

The TOML layer is pydantic-settings' own ``TomlConfigSettingsSource``;
the file it reads is chosen per call of :meth:`SectionSettings.from_cli`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from sectionctl.config.discovery import find_config
from sectionctl.config.models import AppConfig, SectionsConfig, SiteConfig, UploadsConfig
from sectionctl.domain.locales import LocaleRegistry

# TOML file read by the settings instance currently being built.
_toml_file: ContextVar[Path | None] = ContextVar("_toml_file", default=None)


def _resolve_toml(config_path: str | None, start: Path | None) -> Path | None:
    if config_path is None:
        return find_config(start)
    path = Path(config_path)
    if not path.is_file():
        msg = f"Config file not found: {config_path}"
        raise click.ClickException(msg)
    return path


class SectionSettings(BaseSettings):
    """Resolved settings for one CLI invocation or library session.

    Attributes:
        root: Project directory; the database lives in ``root/.sectionctl``.
            Defaults to the config file's directory, else the CWD.
        config_path: The TOML file that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SECTIONCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    site: SiteConfig = Field(default_factory=SiteConfig)
    app: AppConfig = Field(default_factory=AppConfig)
    uploads: UploadsConfig = Field(default_factory=UploadsConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _toml_file.get()
        if toml_file is None:
            return (init_settings, env_settings)
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls, toml_file))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> SectionSettings:
        """Build settings the way the CLI does.

        An explicit *config_path* must exist; otherwise ``sectionctl.toml``
        is looked up from *root* (or the CWD) upwards.

        Raises:
            click.ClickException: If the config file is missing, is not
                valid TOML, or holds values the models reject.
        """
        toml_file = _resolve_toml(config_path, root)
        if root is None:
            root = toml_file.parent if toml_file is not None else Path.cwd()

        token = _toml_file.set(toml_file)
        try:
            return cls(root=root, config_path=toml_file, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_file}: {exc}"
            raise click.ClickException(msg) from exc
        except ValidationError as exc:
            msg = f"Invalid configuration: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _toml_file.reset(token)

    def locale_registry(self) -> LocaleRegistry:
        """Site locales from ``[site]`` as a :class:`LocaleRegistry`."""
        return LocaleRegistry.from_config(self.site.locales, self.site.primary_locale)
