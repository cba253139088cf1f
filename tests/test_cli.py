"""Tests for formengine CLI commands."""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from formengine.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def form_file(tmp_path):
    path = tmp_path / "signup.yaml"
    path.write_text(
        textwrap.dedent(
            """
            form:
              fields:
                - name: username
                  required: true
                  rules:
                    - {min: 3, message: "Username must be at least 3 characters"}
                - name: email
                  rules: {type: email, message: "Invalid email format"}
                - name: bio
                  rules: {max: 10, message: "Keep it short", warning_only: true}
            """
        )
    )
    return path


def write_data(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(data))
    return path


class TestLint:
    def test_lint_valid_form(self, runner, form_file):
        result = runner.invoke(cli, ["lint", str(form_file)])
        assert result.exit_code == 0
        assert "username (required)" in result.output
        assert "Form definition is valid" in result.output

    def test_lint_invalid_form(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("form:\n  fields:\n    - label: no name\n")
        result = runner.invoke(cli, ["lint", str(path)])
        assert result.exit_code == 2
        assert "form/fields[0]" in result.output

    def test_lint_invalid_pattern(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("form:\n  fields:\n    - name: zip\n      rules: {pattern: \"(\"}\n")
        result = runner.invoke(cli, ["lint", str(path)])
        assert result.exit_code == 2
        assert "Invalid pattern" in result.output


class TestCheck:
    def test_check_passes(self, runner, form_file, tmp_path):
        data = write_data(tmp_path, {"username": "ada_l", "email": "a@b.com"})
        result = runner.invoke(cli, ["check", str(form_file), str(data)])
        assert result.exit_code == 0
        assert "All fields are valid" in result.output

    def test_check_reports_errors_in_field_order(self, runner, form_file, tmp_path):
        data = write_data(tmp_path, {"username": "ab", "email": "invalid-email"})
        result = runner.invoke(cli, ["check", str(form_file), str(data)])
        assert result.exit_code == 1
        assert result.output.index("username") < result.output.index("email")
        assert "Username must be at least 3 characters" in result.output
        assert "2 error(s) found" in result.output

    def test_check_json_output(self, runner, form_file, tmp_path):
        data = write_data(tmp_path, {"username": "", "email": "a@b.com"})
        result = runner.invoke(cli, ["check", "--json", str(form_file), str(data)])
        assert result.exit_code == 1
        assert json.loads(result.output) == {
            "errors": [{"field": "username", "message": "username is required"}]
        }

    def test_check_single_field(self, runner, form_file, tmp_path):
        data = write_data(tmp_path, {"username": "", "email": "a@b.com"})
        result = runner.invoke(cli, ["check", "--field", "email", str(form_file), str(data)])
        assert result.exit_code == 0

    def test_check_reports_warnings(self, runner, form_file, tmp_path):
        data = write_data(
            tmp_path, {"username": "ada_l", "email": "a@b.com", "bio": "far too long a bio"}
        )
        result = runner.invoke(cli, ["check", "--json", str(form_file), str(data)])
        assert result.exit_code == 0
        assert json.loads(result.output)["warnings"] == [
            {"field": "bio", "message": "Keep it short"}
        ]

    def test_check_rejects_non_mapping_data(self, runner, form_file, tmp_path):
        data = tmp_path / "data.json"
        data.write_text("[1, 2]")
        result = runner.invoke(cli, ["check", str(form_file), str(data)])
        assert result.exit_code == 2

    def test_check_rejects_malformed_data(self, runner, form_file, tmp_path):
        data = tmp_path / "data.yaml"
        data.write_text("a: [1, 2\n")
        result = runner.invoke(cli, ["check", str(form_file), str(data)])
        assert result.exit_code == 2
        assert "parse error" in result.output


class TestLogLevel:
    def test_unknown_log_level(self, runner, form_file):
        result = runner.invoke(cli, ["--log-level", "loud", "lint", str(form_file)])
        assert result.exit_code != 0

    def test_numeric_log_level(self, runner, form_file):
        result = runner.invoke(cli, ["--log-level", "10", "lint", str(form_file)])
        assert result.exit_code == 0

    def test_log_level_from_env(self, runner, form_file, monkeypatch):
        monkeypatch.setenv("FORMENGINE_LOG_LEVEL", "debug")
        result = runner.invoke(cli, ["lint", str(form_file)])
        assert result.exit_code == 0
