"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and any other adapter consume this type; none of them needs to
catch domain exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes shared by all services.
VALIDATION_FAILED = "VALIDATION_FAILED"
NOT_FOUND = "NOT_FOUND"
WRONG_SECTION = "WRONG_SECTION"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"save_section"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Field-keyed validation errors, empty unless validation failed."""
        if self.error is None:
            return {}
        return dict(self.error.detail.get("errors", {}))
