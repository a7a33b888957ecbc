"""Service telemetry — timing spans for ``--verbose``.

A ``@traced`` service call opens a root span and ``trace_span`` blocks
inside it open children (``save_section`` > ``validate`` > ``commit``).
The finished tree is attached to ``ServiceResult.meta["telemetry"]`` and
logged at DEBUG. With telemetry off every helper returns after a single
ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar, cast

import structlog

from sectionctl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_active_span: ContextVar[Span | None] = ContextVar("_active_span", default=None)

log = structlog.get_logger("sectionctl.telemetry")


@dataclass
class Span:
    """One timed stage; children are the stages nested inside it."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        """Elapsed time, or 0.0 while the span is still open."""
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active_span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage of the current traced call.

    Yields None when telemetry is off or no traced call is running.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return
    child = Span(name=name)
    parent.children.append(child)
    with _activate(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def _attach(result: Any, span: Span) -> Any:
    if not isinstance(result, ServiceResult):
        return result
    meta = {**(result.meta or {}), "telemetry": span.to_dict()}
    return result.model_copy(update={"meta": meta})


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        with _activate(span):
            result = func(*args, **kwargs)
        log.debug(
            "span.complete",
            span_name=span.name,
            duration_ms=round(span.duration_ms, 2),
            ok=getattr(result, "ok", True),
            stages=[child.name for child in span.children],
        )
        return cast(_R, _attach(result, span))

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, for ad-hoc annotations."""
    if not _enabled.get():
        return None
    return _active_span.get()
