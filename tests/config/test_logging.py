"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from sectionctl.config.logging import bind_log_context, clear_log_context, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("sectionctl")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sectionctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("sectionctl").level == logging.WARNING

    def test_sqlalchemy_kept_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("sectionctl.test").warning("json test", section_id=3)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["section_id"] == 3
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "sectionctl.test"
        assert "timestamp" in parsed

    def test_stdlib_loggers_are_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sectionctl.services.sections").info("Saved section blog")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Saved section blog"
        assert parsed["logger"] == "sectionctl.services.sections"

    def test_bound_context_is_merged(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_log_context(command="section")
        try:
            logging.getLogger("sectionctl.test").warning("with context")
        finally:
            clear_log_context()
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["command"] == "section"

    def test_explicit_stream(self) -> None:
        buffer = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buffer)
        logging.getLogger("sectionctl.test").debug("to buffer")
        assert json.loads(buffer.getvalue())["event"] == "to buffer"
