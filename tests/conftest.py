"""Shared pytest fixtures and test helpers for sectionctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sectionctl.config.models import SiteConfig
from sectionctl.config.settings import SectionSettings
from sectionctl.domain.models import EntryType, Section, SectionLocale
from sectionctl.domain.types import SectionType
from sectionctl.infrastructure.store import Store
from sectionctl.services.sections import SectionService


@pytest.fixture(autouse=True)
def _clear_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SECTIONCTL_* environment out of the tests."""
    monkeypatch.delenv("SECTIONCTL_CONFIG", raising=False)
    monkeypatch.delenv("SECTIONCTL_ROOT", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> SectionSettings:
    """Settings rooted at a temp directory with ``en`` and ``de`` site locales."""
    return SectionSettings.from_cli(root=tmp_path, site=SiteConfig(locales=["en", "de"]))


@pytest.fixture
def store(settings: SectionSettings) -> Iterator[Store]:
    """Fully initialized store on a temp directory."""
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def service(store: Store) -> SectionService:
    return SectionService(store)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project with a sectionctl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    (tmp_path / "sectionctl.toml").write_text('[site]\nlocales = ["en"]\n', encoding="utf-8")
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_section(
    name: str = "Blog",
    handle: str = "blog",
    *,
    locales: dict[str, str | None] | None = None,
    **kwargs: Any,
) -> Section:
    """Build a channel section candidate with one URL format per locale."""
    formats = locales if locales is not None else {"en": f"{handle}/{{slug}}"}
    kwargs.setdefault("type", SectionType.CHANNEL)
    kwargs.setdefault("template", f"{handle}/_entry")
    return Section(
        name=name,
        handle=handle,
        locales={
            loc: SectionLocale(locale=loc, url_format=fmt) for loc, fmt in formats.items()
        },
        **kwargs,
    )


def make_homepage(name: str = "Home", handle: str = "home", **kwargs: Any) -> Section:
    """Build a single section flagged as the homepage."""
    return make_section(
        name,
        handle,
        locales={"en": "__home__"},
        type=SectionType.SINGLE,
        template="index",
        **kwargs,
    )


def create_section(
    service: SectionService, name: str = "Blog", handle: str = "blog", **kw: Any
) -> int:
    """Create a section via SectionService, asserting success."""
    result = service.save_section(make_section(name, handle, **kw))
    assert result.ok, result.error
    return int(result.data["id"])


def create_entry_type(
    service: SectionService,
    section_id: int,
    name: str,
    handle: str,
    **kwargs: Any,
) -> int:
    """Create an entry type via SectionService, asserting success."""
    result = service.save_entry_type(
        EntryType(section_id=section_id, name=name, handle=handle, **kwargs)
    )
    assert result.ok, result.error
    return int(result.data["id"])


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``-v`` enables telemetry on a ContextVar; keep it from leaking across tests."""
    from sectionctl.services.telemetry import _active_span, disable_telemetry

    yield
    disable_telemetry()
    _active_span.set(None)
