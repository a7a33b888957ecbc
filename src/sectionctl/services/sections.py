"""SectionService — transactional CRUD for sections and entry types.

Every mutation follows the same pipeline inside one store transaction:
LOCK → LOAD → VALIDATE → COMMIT → EVENT. A failed check returns before
anything is written, and a constraint violation at commit rolls the
whole unit back, so the store moves from one consistent snapshot to the
next or not at all.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError

from sectionctl.domain.urls import LocaleFormatResolver
from sectionctl.domain.validation import ConfigValidator
from sectionctl.infrastructure.store import HOMEPAGE, NEW_SECTION
from sectionctl.services._helpers import now_iso
from sectionctl.services.base import BaseService
from sectionctl.services.result import (
    NOT_FOUND,
    VALIDATION_FAILED,
    WRONG_SECTION,
    ServiceResult,
)
from sectionctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from sectionctl.domain.models import EntryType, Section
    from sectionctl.infrastructure.store import Store

logger = logging.getLogger(__name__)


def _section_not_found(op: str, section_id: int) -> ServiceResult:
    return ServiceResult.failure(op, NOT_FOUND, f"No section found with ID: {section_id}")


def _entry_type_not_found(op: str, entry_type_id: int) -> ServiceResult:
    return ServiceResult.failure(op, NOT_FOUND, f"No entry type found with ID: {entry_type_id}")


def _conflict(op: str, exc: IntegrityError) -> ServiceResult:
    """Report a unique-constraint race as a validation failure."""
    reason = str(exc.orig)
    field = "handle" if "handle" in reason else "name"
    logger.warning("Commit-time conflict in %s: %s", op, reason)
    return ServiceResult.failure(
        op,
        VALIDATION_FAILED,
        f"The {field} was taken by a concurrent change.",
        detail={"errors": {field: [f"This {field} has already been taken."]}, "conflict": True},
    )


def _section_summary(section: Section, entry_type_count: int) -> dict[str, Any]:
    return {
        "id": section.id,
        "name": section.name,
        "handle": section.handle,
        "type": section.type.value,
        "has_urls": section.has_urls,
        "is_homepage": section.is_homepage,
        "locales": sorted(section.locales),
        "entry_types": entry_type_count,
    }


class SectionService(BaseService):
    """Creates, updates, deletes, and reorders sections and entry types.

    Args:
        store: Transactional store.
        validator: Rule set applied before every commit. Built from the
            store's locale registry when omitted.
        resolver: Locale format resolver, exposed to adapters that
            assemble section candidates from form-style input.
    """

    def __init__(
        self,
        store: Store,
        *,
        validator: ConfigValidator | None = None,
        resolver: LocaleFormatResolver | None = None,
    ) -> None:
        super().__init__(store)
        self._validator = validator or ConfigValidator(store.locales)
        self._resolver = resolver or LocaleFormatResolver(store.locales)

    @property
    def resolver(self) -> LocaleFormatResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    @traced
    def save_section(self, section: Section) -> ServiceResult:
        """Create *section* (no id) or replace the stored record (with id).

        The section row and all of its locale rows are written atomically;
        on update the locale rows are replaced wholesale.
        """
        op = "save_section"
        warnings: list[str] = []
        lock = section.id if section.id is not None else NEW_SECTION
        guard = HOMEPAGE if section.is_homepage else None

        try:
            with self._store.transaction(lock=lock, guard=guard) as txn:
                repo = txn.repo
                with trace_span("validate"):
                    if section.id is not None and not repo.section_exists(section.id):
                        return _section_not_found(op, section.id)
                    vr = self._validator.validate_section(section, repo.list_sections())
                if not vr.valid:
                    return ServiceResult.failure(
                        op,
                        VALIDATION_FAILED,
                        "Couldn't save section.",
                        detail={"errors": vr.errors},
                        warnings=vr.warnings,
                    )
                warnings.extend(vr.warnings)

                now = now_iso()
                with trace_span("commit"):
                    if section.id is None:
                        section_id = repo.insert_section(section, now)
                        created = True
                    else:
                        repo.update_section(section, now)
                        section_id = section.id
                        created = False
        except IntegrityError as exc:
            return _conflict(op, exc)

        logger.info("Saved section %s (id=%s, created=%s)", section.handle, section_id, created)
        self._dispatch_event(
            "post_save_section",
            {"section_id": section_id, "handle": section.handle, "created": created},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": section_id,
                "handle": section.handle,
                "created": created,
                "is_homepage": section.is_homepage,
            },
            warnings=warnings,
        )

    @traced
    def delete_section(self, section_id: int) -> ServiceResult:
        """Delete a section together with its locale rows and entry types."""
        op = "delete_section"
        warnings: list[str] = []

        with self._store.transaction(lock=section_id) as txn:
            repo = txn.repo
            section = repo.get_section(section_id)
            if section is None:
                return _section_not_found(op, section_id)
            entry_type_ids = [et.id for et in repo.list_entry_types(section_id)]
            repo.delete_section(section_id)

        logger.info(
            "Deleted section %s (id=%s) with %d entry types",
            section.handle,
            section_id,
            len(entry_type_ids),
        )
        self._dispatch_event(
            "post_delete_section",
            {"section_id": section_id, "handle": section.handle, "entry_type_ids": entry_type_ids},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": section_id,
                "handle": section.handle,
                "entry_types_deleted": len(entry_type_ids),
            },
            warnings=warnings,
        )

    @traced
    def get_section(self, section_id: int) -> ServiceResult:
        """Fetch one section with its locale rows."""
        op = "get_section"
        with self._store.read() as repo:
            section = repo.get_section(section_id)
        if section is None:
            return _section_not_found(op, section_id)
        return ServiceResult(ok=True, op=op, data={"section": section.model_dump(mode="json")})

    @traced
    def list_sections(self) -> ServiceResult:
        """All sections in creation order, summarized."""
        op = "list_sections"
        with self._store.read() as repo:
            items = [
                _section_summary(s, repo.count_entry_types(s.id or 0))
                for s in repo.list_sections()
            ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def does_homepage_exist(self) -> ServiceResult:
        """Report whether some section is already the homepage."""
        op = "does_homepage_exist"
        with self._store.read() as repo:
            homepage = next((s for s in repo.list_sections() if s.is_homepage), None)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "exists": homepage is not None,
                "section_id": homepage.id if homepage is not None else None,
            },
        )

    def can_be_homepage(self, section_id: int | None = None) -> ServiceResult:
        """Whether the given (or a brand-new) section may be flagged as homepage.

        True when the section already is the homepage or when no
        homepage exists yet.
        """
        op = "can_be_homepage"
        current = self.does_homepage_exist().data
        allowed = not current["exists"] or (
            section_id is not None and current["section_id"] == section_id
        )
        return ServiceResult(ok=True, op=op, data={"can_be_homepage": allowed})

    # ------------------------------------------------------------------
    # Entry types
    # ------------------------------------------------------------------

    @traced
    def save_entry_type(self, entry_type: EntryType) -> ServiceResult:
        """Create or replace an entry type.

        New entry types are appended after the section's last rank;
        updates keep the stored rank.
        """
        op = "save_entry_type"
        warnings: list[str] = []
        section_id = entry_type.section_id

        try:
            with self._store.transaction(lock=section_id) as txn:
                repo = txn.repo
                with trace_span("validate"):
                    if not repo.section_exists(section_id):
                        return _section_not_found(op, section_id)
                    if entry_type.id is not None:
                        stored = repo.get_entry_type(entry_type.id)
                        if stored is None:
                            return _entry_type_not_found(op, entry_type.id)
                        if stored.section_id != section_id:
                            return ServiceResult.failure(
                                op,
                                WRONG_SECTION,
                                f"Entry type {entry_type.id} belongs to section "
                                f"{stored.section_id}, not {section_id}",
                            )
                    vr = self._validator.validate_entry_type(
                        entry_type, repo.list_entry_types(section_id)
                    )
                if not vr.valid:
                    return ServiceResult.failure(
                        op,
                        VALIDATION_FAILED,
                        "Couldn't save entry type.",
                        detail={"errors": vr.errors},
                    )

                now = now_iso()
                with trace_span("commit"):
                    if entry_type.id is None:
                        sort_order = repo.next_sort_order(section_id)
                        entry_type_id = repo.insert_entry_type(entry_type, sort_order, now)
                        created = True
                    else:
                        repo.update_entry_type(entry_type, now)
                        entry_type_id = entry_type.id
                        sort_order = stored.sort_order
                        created = False
        except IntegrityError as exc:
            return _conflict(op, exc)

        logger.info(
            "Saved entry type %s (id=%s) in section %s",
            entry_type.handle,
            entry_type_id,
            section_id,
        )
        self._dispatch_event(
            "post_save_entry_type",
            {
                "entry_type_id": entry_type_id,
                "section_id": section_id,
                "handle": entry_type.handle,
                "created": created,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": entry_type_id,
                "section_id": section_id,
                "handle": entry_type.handle,
                "sort_order": sort_order,
                "created": created,
            },
            warnings=warnings,
        )

    @traced
    def delete_entry_type(self, entry_type_id: int) -> ServiceResult:
        """Delete an entry type and close the gap in its section's ranks."""
        op = "delete_entry_type"
        warnings: list[str] = []

        with self._store.read() as repo:
            found = repo.get_entry_type(entry_type_id)
        if found is None:
            return _entry_type_not_found(op, entry_type_id)

        with self._store.transaction(lock=found.section_id) as txn:
            repo = txn.repo
            # Re-read under the lock; a concurrent delete may have won.
            entry_type = repo.get_entry_type(entry_type_id)
            if entry_type is None:
                return _entry_type_not_found(op, entry_type_id)
            repo.delete_entry_type(entry_type_id)
            repo.compact_sort_orders(entry_type.section_id)

        logger.info("Deleted entry type %s (id=%s)", entry_type.handle, entry_type_id)
        self._dispatch_event(
            "post_delete_entry_type",
            {"entry_type_id": entry_type_id, "section_id": entry_type.section_id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": entry_type_id, "section_id": entry_type.section_id},
            warnings=warnings,
        )

    @traced
    def reorder_entry_types(self, section_id: int, ordered_ids: Sequence[int]) -> ServiceResult:
        """Rank a section's entry types ``1..n`` in the order given.

        *ordered_ids* must be exactly a permutation of the section's entry
        type ids. Missing, extra, or repeated ids are rejected and the
        stored order is left untouched.
        """
        op = "reorder_entry_types"
        warnings: list[str] = []
        ordered = list(ordered_ids)

        with self._store.transaction(lock=section_id) as txn:
            repo = txn.repo
            if not repo.section_exists(section_id):
                return _section_not_found(op, section_id)

            existing = {et.id for et in repo.list_entry_types(section_id)}
            given = set(ordered)
            missing = sorted(existing - given)
            extra = sorted(given - existing)
            duplicates = sorted(i for i, n in Counter(ordered).items() if n > 1)

            if missing or extra or duplicates:
                messages: list[str] = []
                if missing:
                    messages.append(f"Missing entry type IDs: {missing}")
                if extra:
                    messages.append(f"Entry type IDs not in section {section_id}: {extra}")
                if duplicates:
                    messages.append(f"Duplicate entry type IDs: {duplicates}")
                return ServiceResult.failure(
                    op,
                    VALIDATION_FAILED,
                    "Entry type order must list every entry type of the section exactly once.",
                    detail={
                        "errors": {"ids": messages},
                        "missing": missing,
                        "extra": extra,
                        "duplicates": duplicates,
                    },
                )

            repo.set_sort_orders(ordered)

        logger.info("Reordered %d entry types in section %s", len(ordered), section_id)
        self._dispatch_event(
            "post_reorder_entry_types",
            {"section_id": section_id, "entry_type_ids": ordered},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"section_id": section_id, "order": ordered},
            warnings=warnings,
        )

    @traced
    def get_entry_type(
        self,
        entry_type_id: int,
        *,
        section_id: int | None = None,
    ) -> ServiceResult:
        """Fetch one entry type, optionally asserting which section owns it.

        An entry type whose section no longer exists reads as not found.
        """
        op = "get_entry_type"
        with self._store.read() as repo:
            entry_type = repo.get_entry_type(entry_type_id)
            orphaned = entry_type is not None and not repo.section_exists(entry_type.section_id)
        if entry_type is None or orphaned:
            return _entry_type_not_found(op, entry_type_id)
        if section_id is not None and entry_type.section_id != section_id:
            return ServiceResult.failure(
                op,
                WRONG_SECTION,
                f"Entry type {entry_type_id} does not belong to section {section_id}",
            )
        return ServiceResult(
            ok=True, op=op, data={"entry_type": entry_type.model_dump(mode="json")}
        )

    @traced
    def list_entry_types(self, section_id: int) -> ServiceResult:
        """Entry types of a section, by rank."""
        op = "list_entry_types"
        with self._store.read() as repo:
            if not repo.section_exists(section_id):
                return _section_not_found(op, section_id)
            items = [
                {
                    "id": et.id,
                    "name": et.name,
                    "handle": et.handle,
                    "sort_order": et.sort_order,
                    "has_title_field": et.has_title_field,
                }
                for et in repo.list_entry_types(section_id)
            ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"section_id": section_id, "count": len(items), "items": items},
        )
