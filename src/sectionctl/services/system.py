"""SystemService — read-only system metadata for adapters and templates.

Reports edition, version, site identity, locales, and the effective upload
limit. Everything is derived from settings; nothing touches the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sectionctl.domain.files import FILE_KINDS, parse_size
from sectionctl.domain.types import Edition
from sectionctl.services.base import BaseService
from sectionctl.services.result import ServiceResult

if TYPE_CHECKING:
    from sectionctl.config.models import UploadsConfig


def _edition(name: str | None) -> Edition | None:
    return Edition[name.upper()] if name is not None else None


def max_upload_size(uploads: UploadsConfig) -> int:
    """Effective upload limit in bytes.

    The smaller of the per-file and per-request limits, capped further by
    the memory limit and the configured maximum when those are positive.
    """
    size = min(parse_size(uploads.upload_max_filesize), parse_size(uploads.post_max_size))
    memory_limit = parse_size(uploads.memory_limit)
    if memory_limit > 0:
        size = min(size, memory_limit)
    if uploads.max_upload_file_size > 0:
        size = min(size, uploads.max_upload_file_size)
    return size


class SystemService(BaseService):
    """Exposes edition, version, site, and upload metadata."""

    def info(self) -> ServiceResult:
        op = "info"
        settings = self._store.settings
        locales = self._store.locales

        edition = Edition[settings.app.edition.upper()]
        licensed = _edition(settings.app.licensed_edition)

        data: dict[str, Any] = {
            "edition": int(edition),
            "edition_name": edition.label,
            "licensed_edition": int(licensed) if licensed is not None else None,
            "licensed_edition_name": licensed.label if licensed is not None else None,
            "has_wrong_edition": licensed is not None and licensed != edition,
            "can_upgrade_edition": (licensed if licensed is not None else edition) < Edition.PRO,
            "version": settings.app.version,
            "build": settings.app.build,
            "release_date": settings.app.release_date or None,
            "site_name": settings.site.name,
            "site_url": settings.site.url,
            "site_uid": settings.site.uid or None,
            "locale": locales.primary,
            "locales": list(locales.locales),
            "is_localized": locales.is_localized,
            "system_on": settings.site.system_on,
            "max_upload_size": max_upload_size(settings.uploads),
        }
        return ServiceResult(ok=True, op=op, data=data)

    def file_kinds(self) -> ServiceResult:
        op = "file_kinds"
        return ServiceResult(ok=True, op=op, data={"kinds": FILE_KINDS})
