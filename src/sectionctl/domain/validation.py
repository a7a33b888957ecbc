"""ConfigValidator — business rules for section and entry type candidates.

Validation is aggregated, not fail-fast: every rule runs and each failure
is recorded under the field it concerns, so an adapter can redisplay the
whole form with all problems at once.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sectionctl.domain.types import SectionType, is_valid_handle

if TYPE_CHECKING:
    from sectionctl.domain.locales import LocaleRegistry
    from sectionctl.domain.models import EntryType, Section

_HANDLE_FORMAT_MSG = (
    "Handle must start with a letter and contain only letters, numbers, and underscores."
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass.

    Attributes:
        valid: True when no errors were recorded.
        errors: Field name -> messages. Locale rows use dotted keys
            such as ``locales.en.url_format``.
        warnings: Non-blocking observations about the candidate.
    """

    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def messages(self) -> list[str]:
        """Flatten errors to ``"field: message"`` strings."""
        return [f"{key}: {msg}" for key, msgs in self.errors.items() for msg in msgs]


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _taken(value: str, others: Iterable[str]) -> bool:
    folded = value.casefold()
    return any(o.casefold() == folded for o in others)


class ConfigValidator:
    """Validates candidates against each other and the locale registry.

    Args:
        locales: Registry used to reject unknown locale ids. When ``None``
            any locale id is accepted.
    """

    def __init__(self, locales: LocaleRegistry | None = None) -> None:
        self._locales = locales

    def validate_section(
        self,
        candidate: Section,
        existing_sections: Iterable[Section],
    ) -> ValidationResult:
        """Check a section candidate against all stored sections."""
        errors: defaultdict[str, list[str]] = defaultdict(list)
        warnings: list[str] = []

        others = [s for s in existing_sections if candidate.id is None or s.id != candidate.id]

        self._check_name_and_handle(
            errors,
            candidate.name,
            candidate.handle,
            taken_names=[s.name for s in others],
            taken_handles=[s.handle for s in others],
        )

        if candidate.has_urls and _blank(candidate.template):
            errors["template"].append("Entry template cannot be blank when entries have URLs.")

        if candidate.type == SectionType.STRUCTURE:
            if candidate.max_levels is not None and candidate.max_levels < 1:
                errors["max_levels"].append("Max levels must be a positive integer.")

        self._check_locales(errors, warnings, candidate)
        self._check_homepage(errors, candidate, others)

        return ValidationResult(valid=not errors, errors=dict(errors), warnings=warnings)

    def validate_entry_type(
        self,
        candidate: EntryType,
        existing_entry_types: Iterable[EntryType],
    ) -> ValidationResult:
        """Check an entry type candidate against its section's entry types."""
        errors: defaultdict[str, list[str]] = defaultdict(list)

        others = [
            et
            for et in existing_entry_types
            if et.section_id == candidate.section_id
            and (candidate.id is None or et.id != candidate.id)
        ]

        self._check_name_and_handle(
            errors,
            candidate.name,
            candidate.handle,
            taken_names=[et.name for et in others],
            taken_handles=[et.handle for et in others],
        )

        if candidate.has_title_field:
            if _blank(candidate.title_label):
                errors["title_label"].append("Title field label cannot be blank.")
        elif _blank(candidate.title_format):
            errors["title_format"].append(
                "Title format cannot be blank when entries have no title field."
            )

        return ValidationResult(valid=not errors, errors=dict(errors))

    # ------------------------------------------------------------------
    # Rule groups
    # ------------------------------------------------------------------

    @staticmethod
    def _check_name_and_handle(
        errors: defaultdict[str, list[str]],
        name: str,
        handle: str,
        *,
        taken_names: list[str],
        taken_handles: list[str],
    ) -> None:
        if _blank(name):
            errors["name"].append("Name cannot be blank.")
        elif _taken(name, taken_names):
            errors["name"].append(f'Name "{name}" has already been taken.')

        if _blank(handle):
            errors["handle"].append("Handle cannot be blank.")
        elif not is_valid_handle(handle):
            errors["handle"].append(_HANDLE_FORMAT_MSG)
        elif _taken(handle, taken_handles):
            errors["handle"].append(f'Handle "{handle}" has already been taken.')

    def _check_locales(
        self,
        errors: defaultdict[str, list[str]],
        warnings: list[str],
        candidate: Section,
    ) -> None:
        if not candidate.locales:
            errors["locales"].append("At least one locale must be selected.")
            return

        for key, loc in candidate.locales.items():
            prefix = f"locales.{key}"
            if loc.locale != key:
                errors[prefix].append(f"Locale row {loc.locale!r} is filed under {key!r}.")
            if self._locales is not None and key not in self._locales:
                errors[prefix].append(f"Unknown locale: {key!r}.")
            if candidate.has_urls and _blank(loc.url_format):
                errors[f"{prefix}.url_format"].append("URL format cannot be blank.")
            if loc.nested_url_format and candidate.type != SectionType.STRUCTURE:
                warnings.append(
                    f"Nested URL format for {key!r} is ignored outside structure sections"
                )

    @staticmethod
    def _check_homepage(
        errors: defaultdict[str, list[str]],
        candidate: Section,
        others: list[Section],
    ) -> None:
        if not candidate.is_homepage:
            return

        if candidate.type != SectionType.SINGLE:
            errors["homepage"].append("Only single sections can be the homepage.")
        if not candidate.has_urls:
            errors["homepage"].append("The homepage section must have URLs.")
        if not all(loc.is_homepage for loc in candidate.locales.values()):
            errors["homepage"].append("The homepage must apply to every locale of the section.")
        if any(other.is_homepage for other in others):
            errors["homepage"].append("Another section is already the homepage.")
