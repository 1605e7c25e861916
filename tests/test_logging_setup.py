"""Tests for logging configuration (cli/logging_setup.py)."""

from __future__ import annotations

import logging

import pytest

from golem_cli.cli.logging_setup import TRACE, setup_logging
from golem_cli.core.models import Verbosity


class TestSetupLogging:
    def test_default_level_is_error(self) -> None:
        setup_logging(Verbosity.ERROR)
        assert logging.getLogger().level == logging.ERROR

    def test_trace_is_below_debug(self) -> None:
        setup_logging(Verbosity.TRACE)
        assert logging.getLogger().level == TRACE
        assert logging.getLevelName(TRACE) == "TRACE"

    def test_http_libraries_quiet_at_info(self) -> None:
        setup_logging(Verbosity.INFO)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_http_libraries_follow_at_debug(self) -> None:
        setup_logging(Verbosity.DEBUG)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_off_disables_everything(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(Verbosity.OFF)
        logging.getLogger("golem_cli").critical("should not appear")
        assert capsys.readouterr().err == ""

    def test_logs_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(Verbosity.WARN)
        logging.getLogger("golem_cli.test").warning("careful")
        captured = capsys.readouterr()
        assert "careful" in captured.err
        assert captured.out == ""
