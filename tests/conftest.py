"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import pytest
from loguru import logger as loguru_logger

LEGACY_DOCUMENT = """\
active: value
legacy: old-value
section:
  active_in_section: value
  legacy_in_section: old-value
legacy_section:
  key: value
map:
  entry1: value1
  entry2: value2
"""


@pytest.fixture
def legacy_yaml(tmp_path: Path) -> Path:
    """Return a YAML file holding current and legacy keys."""

    config_file = tmp_path / "config.yml"
    config_file.write_text(LEGACY_DOCUMENT, encoding="utf-8")
    return config_file


@pytest.fixture
def legacy_data() -> dict:
    """Return the legacy document as a dict."""

    return {
        "active": "value",
        "legacy": "old-value",
        "section": {"active_in_section": "value", "legacy_in_section": "old-value"},
        "legacy_section": {"key": "value"},
        "map": {"entry1": "value1", "entry2": "value2"},
    }


@pytest.fixture
def log_records():
    """Collect loguru records emitted during the test."""

    records = []
    loguru_logger.enable("tidyconf")
    handler_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    loguru_logger.remove(handler_id)
    loguru_logger.disable("tidyconf")
