"""Tests for SystemService — edition, site, and upload metadata."""

from __future__ import annotations

from pathlib import Path

import pytest

from sectionctl.config.models import AppConfig, SiteConfig, UploadsConfig
from sectionctl.config.settings import SectionSettings
from sectionctl.infrastructure.store import Store
from sectionctl.services.system import SystemService, max_upload_size

MB = 1024 * 1024


def _info(tmp_path: Path, **overrides: object) -> dict[str, object]:
    settings = SectionSettings.from_cli(root=tmp_path, **overrides)
    store = Store(settings)
    try:
        result = SystemService(store).info()
    finally:
        store.close()
    assert result.ok
    return result.data


class TestMaxUploadSize:
    def test_smallest_limit_wins(self) -> None:
        uploads = UploadsConfig(
            upload_max_filesize="2M", post_max_size="8M", memory_limit="128M"
        )
        assert max_upload_size(uploads) == 2 * MB

    def test_post_max_size_caps(self) -> None:
        uploads = UploadsConfig(upload_max_filesize="32M", post_max_size="8M")
        assert max_upload_size(uploads) == 8 * MB

    def test_memory_limit_caps(self) -> None:
        uploads = UploadsConfig(
            upload_max_filesize="64M",
            post_max_size="64M",
            memory_limit="32M",
            max_upload_file_size=0,
        )
        assert max_upload_size(uploads) == 32 * MB

    def test_unlimited_memory_ignored(self) -> None:
        uploads = UploadsConfig(
            upload_max_filesize="64M",
            post_max_size="64M",
            memory_limit="-1",
            max_upload_file_size=0,
        )
        assert max_upload_size(uploads) == 64 * MB

    def test_configured_maximum_caps(self) -> None:
        uploads = UploadsConfig(
            upload_max_filesize="64M", post_max_size="64M", max_upload_file_size=MB
        )
        assert max_upload_size(uploads) == MB


class TestInfo:
    def test_defaults(self, tmp_path: Path) -> None:
        data = _info(tmp_path)
        assert data["edition"] == 2
        assert data["edition_name"] == "Pro"
        assert data["licensed_edition"] is None
        assert data["has_wrong_edition"] is False
        assert data["can_upgrade_edition"] is False
        assert data["locale"] == "en"
        assert data["locales"] == ["en"]
        assert data["is_localized"] is False
        assert data["max_upload_size"] == 2 * MB
        assert data["site_uid"] is None
        assert data["release_date"] is None

    def test_wrong_edition(self, tmp_path: Path) -> None:
        data = _info(tmp_path, app=AppConfig(edition="pro", licensed_edition="personal"))
        assert data["has_wrong_edition"] is True
        assert data["licensed_edition_name"] == "Personal"
        assert data["can_upgrade_edition"] is True

    @pytest.mark.parametrize(
        ("edition", "can_upgrade"),
        [("personal", True), ("client", True), ("pro", False)],
    )
    def test_can_upgrade(self, tmp_path: Path, edition: str, can_upgrade: bool) -> None:
        data = _info(tmp_path, app=AppConfig(edition=edition))  # type: ignore[arg-type]
        assert data["can_upgrade_edition"] is can_upgrade

    def test_site_and_locales(self, tmp_path: Path) -> None:
        data = _info(
            tmp_path,
            site=SiteConfig(
                name="Acme", uid="abc", locales=["en", "de"], primary_locale="de"
            ),
        )
        assert data["site_name"] == "Acme"
        assert data["site_uid"] == "abc"
        assert data["locale"] == "de"
        assert data["locales"] == ["en", "de"]
        assert data["is_localized"] is True


class TestFileKinds:
    def test_file_kinds(self, store: Store) -> None:
        result = SystemService(store).file_kinds()
        assert result.ok
        assert "image" in result.data["kinds"]
        assert "jpg" in result.data["kinds"]["image"]["extensions"]
