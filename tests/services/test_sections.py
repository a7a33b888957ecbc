"""Tests for SectionService — section lifecycle, homepage, and conflicts."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from unittest.mock import patch

from sqlalchemy.exc import IntegrityError

from sectionctl.domain.models import Section, SectionLocale
from sectionctl.domain.types import HOMEPAGE_URI, SectionType
from sectionctl.domain.validation import ConfigValidator, ValidationResult
from sectionctl.infrastructure.store import Store
from sectionctl.services.result import NOT_FOUND, VALIDATION_FAILED, ServiceResult
from sectionctl.services.sections import SectionService
from tests.conftest import create_entry_type, create_section, make_homepage, make_section


class TestSaveSection:
    def test_create_returns_id(self, service: SectionService) -> None:
        result = service.save_section(make_section())
        assert result.ok
        assert result.op == "save_section"
        assert result.data["created"] is True
        assert result.data["handle"] == "blog"
        assert result.data["is_homepage"] is False
        assert isinstance(result.data["id"], int)

    def test_round_trip(self, service: SectionService) -> None:
        candidate = make_section(
            "Docs",
            "docs",
            type=SectionType.STRUCTURE,
            max_levels=2,
            enable_versioning=False,
            locales={"en": "docs/{slug}", "de": "doku/{slug}"},
        )
        section_id = service.save_section(candidate).data["id"]

        stored = service.get_section(section_id)
        assert stored.ok
        section = stored.data["section"]
        assert section["id"] == section_id
        assert section["type"] == "structure"
        assert section["max_levels"] == 2
        assert section["enable_versioning"] is False
        assert section["locales"]["de"]["url_format"] == "doku/{slug}"

    def test_update_replaces_record(self, service: SectionService) -> None:
        section_id = create_section(service)
        updated = make_section("News", "news", id=section_id)
        result = service.save_section(updated)
        assert result.ok
        assert result.data["created"] is False

        section = service.get_section(section_id).data["section"]
        assert section["name"] == "News"
        assert list(section["locales"]) == ["en"]

    def test_update_can_drop_a_locale(self, service: SectionService) -> None:
        section_id = create_section(service, locales={"en": "blog/{slug}", "de": "b/{slug}"})
        service.save_section(make_section(id=section_id, locales={"en": "blog/{slug}"}))
        section = service.get_section(section_id).data["section"]
        assert set(section["locales"]) == {"en"}

    def test_update_unknown_id(self, service: SectionService) -> None:
        result = service.save_section(make_section(id=99))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == NOT_FOUND

    def test_duplicate_handle(self, service: SectionService) -> None:
        create_section(service, "Blog", "blog")
        result = service.save_section(make_section("Journal", "blog"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == VALIDATION_FAILED
        assert result.error.message == "Couldn't save section."
        assert result.field_errors["handle"] == ['Handle "blog" has already been taken.']
        assert service.list_sections().data["count"] == 1

    def test_handle_with_trailing_newline(self, service: SectionService) -> None:
        create_section(service, "Blog", "blog")
        result = service.save_section(make_section("Blog 2", "blog\n"))
        assert not result.ok
        assert "handle" in result.field_errors
        assert service.list_sections().data["count"] == 1

    def test_validation_warnings_surface(self, service: SectionService) -> None:
        candidate = make_section().model_copy(
            update={
                "locales": {
                    "en": SectionLocale(
                        locale="en", url_format="blog/{slug}", nested_url_format="x/{slug}"
                    )
                }
            }
        )
        result = service.save_section(candidate)
        assert result.ok
        assert len(result.warnings) == 1

    def test_unknown_locale_rejected(self, service: SectionService) -> None:
        result = service.save_section(make_section(locales={"fr": "blog/{slug}"}))
        assert not result.ok
        assert "locales.fr" in result.field_errors

    def test_commit_conflict_reported_as_validation(self, service: SectionService) -> None:
        exc = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: sections.handle")
        )
        with patch(
            "sectionctl.infrastructure.repositories.sections.SectionRepository.insert_section",
            side_effect=exc,
        ):
            result = service.save_section(make_section())
        assert not result.ok
        assert result.error is not None
        assert result.error.code == VALIDATION_FAILED
        assert result.error.detail["conflict"] is True
        assert "handle" in result.field_errors


class TestHomepage:
    def test_no_homepage_initially(self, service: SectionService) -> None:
        result = service.does_homepage_exist()
        assert result.data == {"exists": False, "section_id": None}
        assert service.can_be_homepage().data["can_be_homepage"] is True

    def test_homepage_saved(self, service: SectionService) -> None:
        result = service.save_section(make_homepage())
        assert result.ok
        assert result.data["is_homepage"] is True

        section = service.get_section(result.data["id"]).data["section"]
        assert section["locales"]["en"]["url_format"] == HOMEPAGE_URI
        assert service.does_homepage_exist().data["section_id"] == result.data["id"]

    def test_second_homepage_rejected(self, service: SectionService) -> None:
        first = service.save_section(make_homepage()).data["id"]
        result = service.save_section(make_homepage("Landing", "landing"))
        assert not result.ok
        assert "homepage" in result.field_errors
        assert service.does_homepage_exist().data["section_id"] == first

    def test_can_be_homepage(self, service: SectionService) -> None:
        home_id = service.save_section(make_homepage()).data["id"]
        other = create_section(service)
        assert service.can_be_homepage(home_id).data["can_be_homepage"] is True
        assert service.can_be_homepage(other).data["can_be_homepage"] is False
        assert service.can_be_homepage().data["can_be_homepage"] is False

    def test_homepage_released_on_update(self, service: SectionService) -> None:
        home_id = service.save_section(make_homepage()).data["id"]
        service.save_section(
            make_section(
                "Home", "home", id=home_id, type=SectionType.SINGLE, locales={"en": "home"}
            )
        )
        assert service.does_homepage_exist().data["exists"] is False
        assert service.save_section(make_homepage("Landing", "landing")).ok

    def test_concurrent_homepage_claims(self, store: Store, service: SectionService) -> None:
        other_id = create_section(
            service, "Other", "other", type=SectionType.SINGLE, locales={"en": "other"}
        )
        validated = threading.Event()
        release = threading.Event()

        class HoldingValidator(ConfigValidator):
            def validate_section(
                self, candidate: Section, existing_sections: Iterable[Section]
            ) -> ValidationResult:
                vr = super().validate_section(candidate, existing_sections)
                validated.set()
                release.wait(timeout=5)
                return vr

        held = SectionService(store, validator=HoldingValidator(store.locales))
        results: dict[str, ServiceResult] = {}

        def save(key: str, section: Section) -> None:
            results[key] = held.save_section(section)

        creator = threading.Thread(target=save, args=("create", make_homepage()))
        creator.start()
        assert validated.wait(timeout=5)
        updater = threading.Thread(
            target=save, args=("update", make_homepage("Other", "other", id=other_id))
        )
        updater.start()
        updater.join(timeout=0.2)
        release.set()
        creator.join(timeout=5)
        updater.join(timeout=5)

        assert results["create"].ok
        assert not results["update"].ok
        assert "homepage" in results["update"].field_errors
        items = service.list_sections().data["items"]
        assert [s["handle"] for s in items if s["is_homepage"]] == ["home"]


class TestDeleteSection:
    def test_cascades_to_entry_types(self, service: SectionService) -> None:
        section_id = create_section(service)
        et_ids = [
            create_entry_type(service, section_id, "Article", "article"),
            create_entry_type(service, section_id, "Link", "link"),
        ]
        result = service.delete_section(section_id)
        assert result.ok
        assert result.data["entry_types_deleted"] == 2

        assert service.get_section(section_id).error.code == NOT_FOUND  # type: ignore[union-attr]
        for et_id in et_ids:
            assert not service.get_entry_type(et_id).ok

    def test_delete_missing(self, service: SectionService) -> None:
        result = service.delete_section(5)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == NOT_FOUND

    def test_handle_reusable_after_delete(self, service: SectionService) -> None:
        section_id = create_section(service)
        service.delete_section(section_id)
        assert service.save_section(make_section()).ok


class TestListSections:
    def test_empty(self, service: SectionService) -> None:
        result = service.list_sections()
        assert result.ok
        assert result.data == {"count": 0, "items": []}

    def test_summaries_in_creation_order(self, service: SectionService) -> None:
        blog = create_section(service, "Blog", "blog")
        news = create_section(service, "News", "news")
        create_entry_type(service, news, "Story", "story")

        items = service.list_sections().data["items"]
        assert [i["id"] for i in items] == [blog, news]
        assert items[0]["entry_types"] == 0
        assert items[1]["entry_types"] == 1
        assert items[1]["locales"] == ["en"]

    def test_get_missing(self, service: SectionService) -> None:
        result = service.get_section(404)
        assert not result.ok
        assert result.error is not None
        assert result.error.message == "No section found with ID: 404"
