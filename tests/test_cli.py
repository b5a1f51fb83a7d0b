"""Tests for the tidyconf command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from tidyconf.cli import cli, read_keep_file


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_keys_lists_leaf_paths(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["keys", str(legacy_yaml), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        "active",
        "legacy",
        "section.active_in_section",
        "section.legacy_in_section",
        "legacy_section.key",
        "map.entry1",
        "map.entry2",
    ]


def test_get_prints_scalar(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["get", str(legacy_yaml), "section.active_in_section"])

    assert result.exit_code == 0
    assert result.output.strip() == "value"


def test_get_prints_subtree_as_yaml(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["get", str(legacy_yaml), "map"])

    assert result.exit_code == 0
    assert yaml.safe_load(result.output) == {"entry1": "value1", "entry2": "value2"}


def test_get_missing_key_fails(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["get", str(legacy_yaml), "nope"])

    assert result.exit_code == 1


def test_prune_rewrites_file(runner, legacy_yaml: Path):
    result = runner.invoke(
        cli,
        ["prune", str(legacy_yaml), "-k", "active", "-k", "section.active_in_section", "-k", "map", "--json"],
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "removed": ["legacy", "section.legacy_in_section", "legacy_section"],
        "saved": True,
    }
    assert yaml.safe_load(legacy_yaml.read_text(encoding="utf-8")) == {
        "active": "value",
        "section": {"active_in_section": "value"},
        "map": {"entry1": "value1", "entry2": "value2"},
    }


def test_prune_dry_run_leaves_file_alone(runner, legacy_yaml: Path):
    before = legacy_yaml.read_text(encoding="utf-8")

    result = runner.invoke(cli, ["prune", str(legacy_yaml), "-k", "active", "--dry-run", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["saved"] is False
    assert legacy_yaml.read_text(encoding="utf-8") == before


def test_prune_reads_keep_file(runner, legacy_yaml: Path, tmp_path: Path):
    keep_file = tmp_path / "keep.txt"
    keep_file.write_text("# declared keys\nactive\n\nmap  # dynamic entries\n", encoding="utf-8")

    result = runner.invoke(cli, ["prune", str(legacy_yaml), "--keep-file", str(keep_file)])

    assert result.exit_code == 0
    assert yaml.safe_load(legacy_yaml.read_text(encoding="utf-8")) == {
        "active": "value",
        "map": {"entry1": "value1", "entry2": "value2"},
    }


def test_prune_requires_kept_keys(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["prune", str(legacy_yaml)])

    assert result.exit_code == 2


def test_prune_reports_malformed_path_as_json(runner, legacy_yaml: Path):
    result = runner.invoke(cli, ["prune", str(legacy_yaml), "-k", "a..b", "--json"])

    assert result.exit_code == 1
    report = json.loads(result.output)
    assert report["error_kind"] == "malformed_path"
    assert report["code"] == "MalformedPathError"


def test_unsupported_format_fails(runner, tmp_path: Path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[a]\n", encoding="utf-8")

    result = runner.invoke(cli, ["keys", str(config_file), "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output)["error_kind"] == "storage_error"


def test_read_keep_file(tmp_path: Path):
    keep_file = tmp_path / "keep.txt"
    keep_file.write_text("a.b\n  # comment\nc # trailing\n", encoding="utf-8")

    assert read_keep_file(keep_file) == ["a.b", "c"]


def test_get_on_malformed_file_exits_with_one_report(runner, tmp_path: Path):
    config_file = tmp_path / "config.yml"
    config_file.write_text("a: [unclosed\n", encoding="utf-8")

    result = runner.invoke(cli, ["get", str(config_file), "a", "--json"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert json.loads(result.output)["error_kind"] == "storage_error"
