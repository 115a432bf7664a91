"""Tests for package logging setup."""

from __future__ import annotations

import logging

import pytest

from heightify.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    yield
    for handler in logging.getLogger("heightify").handlers:
        handler.close()
    logging.getLogger("heightify").handlers.clear()


def test_level_from_string() -> None:
    logger = setup_logging("debug")

    assert logger.name == "heightify"
    assert logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info() -> None:
    assert setup_logging("LOUD").level == logging.INFO


def test_repeated_setup_does_not_duplicate_handlers() -> None:
    setup_logging()
    logger = setup_logging()

    assert len(logger.handlers) == 1


def test_log_file(tmp_path) -> None:
    log_file = tmp_path / "heightify.log"
    setup_logging(logging.INFO, str(log_file))

    logging.getLogger("heightify.measurement").info("hello from the session")
    for handler in logging.getLogger("heightify").handlers:
        handler.flush()

    assert "hello from the session" in log_file.read_text(encoding="utf-8")


def test_numeric_level_and_stderr_only() -> None:
    logger = setup_logging(logging.WARNING)

    assert logger.level == logging.WARNING
    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
