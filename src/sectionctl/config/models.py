"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sectionctl.toml only contains
overrides. A fresh site needs only ``[site] locales``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from sectionctl.domain.types import SectionType

EditionName = Literal["personal", "client", "pro"]

# --- sectionctl.toml sections ---


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    name: str = "My Site"
    url: str = "http://localhost/"
    uid: str = ""
    locales: list[str] = Field(default_factory=lambda: ["en"], min_length=1)
    primary_locale: str | None = None
    system_on: bool = True


class AppConfig(BaseModel):
    """[app] section."""

    model_config = {"frozen": True}

    edition: EditionName = "pro"
    licensed_edition: EditionName | None = None
    version: str = "3.0.0"
    build: str = "1"
    release_date: str = ""


class UploadsConfig(BaseModel):
    """[uploads] section.

    Size strings use the ``K``/``M``/``G`` suffixes (``"8M"``);
    ``max_upload_file_size`` is plain bytes, ``0`` meaning unset.
    """

    model_config = {"frozen": True}

    upload_max_filesize: str = "2M"
    post_max_size: str = "8M"
    memory_limit: str = "128M"
    max_upload_file_size: int = 16 * 1024 * 1024


class SectionsConfig(BaseModel):
    """[sections] section."""

    model_config = {"frozen": True}

    default_type: SectionType = SectionType.CHANNEL


class SectionConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    site: SiteConfig = Field(default_factory=SiteConfig)
    app: AppConfig = Field(default_factory=AppConfig)
    uploads: UploadsConfig = Field(default_factory=UploadsConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)
