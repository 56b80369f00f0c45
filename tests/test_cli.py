"""Tests for the `cqc` CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from click.testing import CliRunner

from cqc import __version__
from cqc.cli import main

if TYPE_CHECKING:
    from pathlib import Path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clean_project(tmp_path: Path) -> Path:
    project = tmp_path / "clean"
    project.mkdir()
    (project / "site.css").write_text(".card { color: red; }\n", encoding="utf-8")
    return project


def _config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "rules.yml"
    path.write_text(body, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "scan" in result.output
        assert "rules" in result.output


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


class TestScan:
    def test_clean_project_exits_zero(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["scan", str(_clean_project(tmp_path))])
        assert result.exit_code == 0, result.output
        assert "Code Quality Report" in result.output
        assert "No findings." in result.output

    def test_critical_finding_exits_one(self, sample_project: Path) -> None:
        result = CliRunner().invoke(main, ["scan", str(sample_project)])
        assert result.exit_code == 1
        assert "js-innerHTML-xss" in result.output

    def test_json_output(self, sample_project: Path) -> None:
        result = CliRunner().invoke(main, ["scan", str(sample_project), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["summary"]["total_files"] == 3
        assert data["findings"][0]["severity"] == "Critical"

    def test_category_filter(self, sample_project: Path) -> None:
        result = CliRunner().invoke(
            main, ["scan", str(sample_project), "-f", "json", "--rules", "best-practices"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert {f["category"] for f in data["findings"]} == {"best-practices"}

    def test_min_severity(self, sample_project: Path) -> None:
        result = CliRunner().invoke(
            main, ["scan", str(sample_project), "-f", "json", "--min-severity", "CRITICAL"]
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert {f["rule_id"] for f in data["findings"]} == {"js-innerHTML-xss"}

    def test_output_file(self, sample_project: Path, tmp_path: Path) -> None:
        report = tmp_path / "report.html"
        result = CliRunner().invoke(
            main, ["scan", str(sample_project), "-f", "html", "-o", str(report)]
        )
        assert result.exit_code == 1
        assert f"Report written to {report}" in result.output
        assert report.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_single_file(self, sample_project: Path) -> None:
        target = sample_project / "src" / "UserService.java"
        result = CliRunner().invoke(main, ["scan", str(target), "-f", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["summary"]["total_files"] == 1
        assert "java-transactional-missing" in {f["rule_id"] for f in data["findings"]}

    def test_custom_config(self, sample_project: Path, tmp_path: Path) -> None:
        config = _config(
            tmp_path,
            "version: '1.0'\n"
            "languages:\n"
            "  - language: java\n"
            "    rules:\n"
            "      - id: java-system-out\n"
            "        severity: High\n"
            "        category: best-practices\n",
        )
        result = CliRunner().invoke(
            main, ["scan", str(sample_project), "-c", str(config), "-f", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [f["rule_id"] for f in data["findings"]] == ["java-system-out"]

    def test_invalid_config_exits_two(self, sample_project: Path, tmp_path: Path) -> None:
        config = _config(tmp_path, "languages: []\n")
        result = CliRunner().invoke(main, ["scan", str(sample_project), "-c", str(config)])
        assert result.exit_code == 2
        assert "Error:" in result.output
        assert "version" in result.output

    def test_missing_path(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["scan", str(tmp_path / "absent")])
        assert result.exit_code == 2

    def test_invalid_jobs(self, sample_project: Path) -> None:
        result = CliRunner().invoke(main, ["scan", str(sample_project), "--jobs", "0"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# rules
# ---------------------------------------------------------------------------


class TestRulesCommand:
    def test_default_rules(self) -> None:
        result = CliRunner().invoke(main, ["rules"])
        assert result.exit_code == 0
        assert "java:" in result.output
        assert "css:" in result.output
        line = next(
            ln for ln in result.output.splitlines() if "java-transactional-missing" in ln
        )
        assert line.split() == ["java-transactional-missing", "High", "reliability", "enabled"]

    def test_language_filter(self) -> None:
        result = CliRunner().invoke(main, ["rules", "--language", "HTML"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "html:"
        assert "java-system-out" not in result.output

    def test_status_column(self, tmp_path: Path) -> None:
        config = _config(
            tmp_path,
            "version: '1.0'\n"
            "languages:\n"
            "  - language: css\n"
            "    rules:\n"
            "      - id: css-selectors\n"
            "        enabled: false\n"
            "      - id: css-made-up\n",
        )
        result = CliRunner().invoke(main, ["rules", "-c", str(config)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[1].split() == ["css-selectors", "Low", "-", "disabled"]
        assert lines[2].split() == ["css-made-up", "Low", "-", "unknown"]
