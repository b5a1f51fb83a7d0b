"""Tests for library logging behaviour."""

from __future__ import annotations

import pytest
from loguru import logger as loguru_logger

from tidyconf.config import BaseConfig
from tidyconf.core.logging import AsyncLogger, enable_logging, logging_requested
from tidyconf.storage import MemoryStore


@pytest.fixture
def raw_records():
    """Collect loguru records without enabling tidyconf output."""

    records = []
    handler_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    loguru_logger.remove(handler_id)


def test_library_is_silent_by_default(raw_records, capfd):
    """Declaring, loading and pruning emit nothing unless the host enables logging."""

    config = BaseConfig(MemoryStore({"a": 1, "legacy": 2}))
    config.declare("a", 0)
    config.prune_redundant()

    assert [r for r in raw_records if r["name"].startswith("tidyconf")] == []
    assert capfd.readouterr().err == ""


def test_enable_logging_turns_records_on(raw_records):
    enable_logging()
    try:
        BaseConfig(MemoryStore({"a": 1})).declare("a", 0)
    finally:
        loguru_logger.disable("tidyconf")

    messages = [r["message"] for r in raw_records]
    assert "Binding declared" in messages


def test_logging_requested_follows_environment(monkeypatch):
    monkeypatch.delenv("TIDYCONF_LOG_FILE", raising=False)
    monkeypatch.delenv("TIDYCONF_DEBUG", raising=False)
    assert not logging_requested()

    monkeypatch.setenv("TIDYCONF_DEBUG", "true")
    assert logging_requested()

    monkeypatch.delenv("TIDYCONF_DEBUG")
    monkeypatch.setenv("TIDYCONF_LOG_FILE", "debug.log")
    assert logging_requested()


def test_error_includes_trace_in_debug_mode(log_records):
    component = AsyncLogger("test", debug_mode=True)

    try:
        raise ValueError("boom")
    except ValueError:
        component.error("Failed")

    assert "ValueError: boom" in log_records[-1]["extra"]["stack_trace"]
