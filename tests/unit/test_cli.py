"""Unit tests for the confcheck CLI."""

import json
import textwrap

import pytest
import yaml
from rich.console import Console
from typer.testing import CliRunner

from confcheck import __version__, cli
from confcheck.cli import app

VALID = textwrap.dedent("""\
    apiVersion: networking.confcheck.io/v1
    kind: Gateway
    metadata:
      name: ingress
    spec:
      servers:
      - port: {number: 80, protocol: HTTP, name: http}
        hosts: ["*"]
    """)

INVALID = textwrap.dedent("""\
    apiVersion: networking.confcheck.io/v1
    kind: VirtualService
    metadata:
      name: reviews
    spec:
      hosts: []
      http:
      - route: []
        mirrorPercent: 5
    """)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    # Keep config discovery inside the temporary directory
    monkeypatch.chdir(tmp_path)
    (tmp_path / "valid.yaml").write_text(VALID, encoding="utf-8")
    return tmp_path


class TestAnalyzeCommand:
    def test_clean_resources(self, runner, project):
        result = runner.invoke(app, ["analyze", str(project / "valid.yaml")])
        assert result.exit_code == 0
        assert "No validation issues found" in result.stdout

    def test_errors_fail_run(self, runner, project):
        (project / "invalid.yaml").write_text(INVALID, encoding="utf-8")

        result = runner.invoke(app, ["analyze", str(project), "--format", "json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        codes = [m["code"] for m in data["messages"]]
        assert codes.count("CC0106") == 2
        assert codes.count("CC0153") == 1
        assert data["counts"]["error"] == 2

    def test_yaml_output(self, runner, project):
        result = runner.invoke(app, ["analyze", str(project / "valid.yaml"), "--format", "yaml"])
        assert result.exit_code == 0
        assert yaml.safe_load(result.stdout)["messages"] == []

    def test_table_output(self, runner, project):
        (project / "invalid.yaml").write_text(INVALID, encoding="utf-8")
        result = runner.invoke(app, ["analyze", str(project / "invalid.yaml")])
        assert result.exit_code == 1
        assert "2 errors, 1 warnings, 0 info" in result.stdout

    def test_suppress_option(self, runner, project):
        (project / "invalid.yaml").write_text(INVALID, encoding="utf-8")
        result = runner.invoke(app, [
            "analyze", str(project / "invalid.yaml"), "--format", "json",
            "--suppress", "CC0106",
        ])
        assert result.exit_code == 0
        assert [m["code"] for m in json.loads(result.stdout)["messages"]] == ["CC0153"]

    def test_fail_threshold_option(self, runner, project):
        (project / "invalid.yaml").write_text(INVALID, encoding="utf-8")
        result = runner.invoke(app, [
            "analyze", str(project / "invalid.yaml"), "--format", "json",
            "--suppress", "CC0106", "--fail-threshold", "warning",
        ])
        assert result.exit_code == 1

    def test_config_file(self, runner, project):
        (project / "invalid.yaml").write_text(INVALID, encoding="utf-8")
        (project / ".confcheck.json").write_text(
            json.dumps({"analysis": {"suppress": ["CC0106", "CC0153"]}, "output": {"format": "json"}}),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["analyze", str(project / "invalid.yaml")])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["messages"] == []

    def test_invalid_format(self, runner, project):
        result = runner.invoke(app, ["analyze", str(project), "--format", "xml"])
        assert result.exit_code == 1
        assert "Invalid format 'xml'" in result.stdout

    def test_invalid_fail_threshold(self, runner, project):
        result = runner.invoke(app, ["analyze", str(project), "--fail-threshold", "fatal"])
        assert result.exit_code == 1
        assert "Invalid fail threshold" in result.stdout

    def test_load_error(self, runner, project):
        (project / "broken.yaml").write_text("kind: [unclosed\n", encoding="utf-8")
        result = runner.invoke(app, ["analyze", str(project / "broken.yaml")])
        assert result.exit_code == 1
        assert "Error:" in result.stdout


class TestOtherCommands:
    @pytest.mark.parametrize("width", [80, 160])
    def test_kinds(self, runner, monkeypatch, width):
        monkeypatch.setattr(cli, "console", Console(width=width))
        result = runner.invoke(app, ["kinds"])
        assert result.exit_code == 0
        for kind in ("VirtualService", "DestinationRule", "Gateway", "ServiceEntry"):
            assert kind in result.stdout

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
