"""Tests for the catalog-diff command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from catalog_diff.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Keep real config files out of the way."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")


def _write(path: Path, data: dict) -> str:
    path.write_text(json.dumps(data))
    return str(path)


@pytest.fixture
def breaking_pair(tmp_path: Path) -> tuple[str, str]:
    return (
        _write(tmp_path / "before.json", {"btn": {"required": ["variant"]}}),
        _write(tmp_path / "after.json", {"btn": {"required": ["variant", "size"]}}),
    )


@pytest.fixture
def additive_pair(tmp_path: Path) -> tuple[str, str]:
    return (
        _write(tmp_path / "before.json", {"btn": {"title": "Button"}}),
        _write(tmp_path / "after.json", {"btn": {"title": "Button"}, "toast": {"title": "Toast"}}),
    )


# ── catalog-diff diff ────────────────────────────────────────────────


def test_diff_cli_report(breaking_pair):
    result = runner.invoke(app, ["diff", *breaking_pair])
    assert result.exit_code == 0
    assert "btn" in result.output
    assert "BREAKING" in result.output


def test_diff_json_report(additive_pair):
    result = runner.invoke(app, ["diff", *additive_pair, "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert list(data["added"]) == ["toast"]
    assert data["summary"]["hasBreakingChanges"] is False


def test_diff_writes_output_file(tmp_path: Path, additive_pair):
    target = tmp_path / "report.json"
    result = runner.invoke(app, ["diff", *additive_pair, "-f", "json", "-o", str(target)])
    assert result.exit_code == 0
    assert "Written to" in result.output
    assert json.loads(target.read_text())["summary"]["totalEntities"]["added"] == 1


def test_fail_on_breaking(breaking_pair):
    result = runner.invoke(app, ["diff", *breaking_pair, "--fail-on-breaking"])
    assert result.exit_code == 1


def test_fail_on_breaking_passes_clean_diff(additive_pair):
    result = runner.invoke(app, ["diff", *additive_pair, "--fail-on-breaking"])
    assert result.exit_code == 0


def test_unknown_format(additive_pair):
    result = runner.invoke(app, ["diff", *additive_pair, "--format", "xml"])
    assert result.exit_code == 1
    assert "Unknown report format" in result.output


def test_invalid_snapshot_exits_1(tmp_path: Path):
    before = _write(tmp_path / "before.json", {"red": "#f00"})
    after = _write(tmp_path / "after.json", {})
    result = runner.invoke(app, ["diff", before, after])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_missing_snapshot_file(tmp_path: Path):
    after = _write(tmp_path / "after.json", {})
    result = runner.invoke(app, ["diff", str(tmp_path / "missing.json"), after])
    assert result.exit_code == 1


def test_directory_snapshots(tmp_path: Path):
    (tmp_path / "v1").mkdir()
    (tmp_path / "v2").mkdir()
    _write(tmp_path / "v1" / "color.json", {"red": {"value": "#f00", "uuid": "r"}})
    _write(tmp_path / "v2" / "color.json", {"red-500": {"value": "#f00", "uuid": "r"}})
    result = runner.invoke(app, ["diff", str(tmp_path / "v1"), str(tmp_path / "v2"), "-f", "json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["renamed"]["red-500"]["oldName"] == "red"


def test_config_option_applies(tmp_path: Path):
    before = _write(tmp_path / "before.json", {"s": {"enum": ["a", "b"]}})
    after = _write(tmp_path / "after.json", {"s": {"enum": ["a"]}})
    cfg = tmp_path / "relaxed.yaml"
    cfg.write_text("compatibility:\n  enum_removal_breaking: false\n")

    strict = runner.invoke(app, ["diff", before, after, "--fail-on-breaking"])
    relaxed = runner.invoke(app, ["--config", str(cfg), "diff", before, after, "--fail-on-breaking"])
    assert strict.exit_code == 1
    assert relaxed.exit_code == 0


# ── catalog-diff bump ────────────────────────────────────────────────


def test_bump_major(tmp_path: Path):
    before = _write(tmp_path / "before.json", {"btn": {"title": "Button"}, "tag": {"title": "Tag"}})
    after = _write(tmp_path / "after.json", {"btn": {"title": "Button"}})
    result = runner.invoke(app, ["bump", before, after])
    assert result.exit_code == 0
    assert result.stdout.strip() == "major"


def test_bump_breaking_update_is_patch_by_default(breaking_pair):
    result = runner.invoke(app, ["bump", *breaking_pair])
    assert result.stdout.strip() == "patch"


def test_bump_strict_flag(breaking_pair):
    result = runner.invoke(app, ["bump", *breaking_pair, "--strict"])
    assert result.stdout.strip() == "major"


def test_bump_strict_from_config(tmp_path: Path, breaking_pair):
    (tmp_path / "catalog-diff.yaml").write_text("release:\n  strict_bumps: true\n")
    result = runner.invoke(app, ["bump", *breaking_pair])
    assert result.stdout.strip() == "major"


def test_bump_minor(additive_pair):
    result = runner.invoke(app, ["bump", *additive_pair])
    assert result.stdout.strip() == "minor"


def test_bump_patch(tmp_path: Path):
    snapshot = _write(tmp_path / "same.json", {"a": {"v": 1}})
    result = runner.invoke(app, ["bump", snapshot, snapshot])
    assert result.stdout.strip() == "patch"


# ── catalog-diff config ──────────────────────────────────────────────


def test_config_init_creates_file(tmp_path: Path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "catalog-diff.yaml").is_file()


def test_config_init_refuses_overwrite(tmp_path: Path):
    (tmp_path / "catalog-diff.yaml").write_text("log_level: info\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_config_init_force(tmp_path: Path):
    (tmp_path / "catalog-diff.yaml").write_text("log_level: info\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "identifier_fields" in (tmp_path / "catalog-diff.yaml").read_text()


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "identifier_fields" in result.output


def test_invalid_config_file(tmp_path: Path):
    (tmp_path / "catalog-diff.yaml").write_text("log_level: loud\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_unknown_config_section(tmp_path: Path):
    (tmp_path / "catalog-diff.yaml").write_text("limit:\n  max_nodes: 10\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "limit: Extra inputs" in result.output
