"""Tests for opticheck CLI commands."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from opticheck.cli.main import cli
from opticheck.validation.registry import ValidatorRegistry
from opticheck.validation.types import ValidationError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def plan_file(tmp_path) -> Path:
    path = tmp_path / "contact.yaml"
    path.write_text(
        yaml.dump(
            {
                "steps": [
                    {"at": "name", "validators": "required"},
                    {"at": "email", "validators": ["required", "email"]},
                ]
            }
        )
    )
    return path


@pytest.fixture
def good_doc(tmp_path) -> Path:
    path = tmp_path / "alice.yaml"
    path.write_text(yaml.dump({"name": "Alice", "email": "alice@example.com"}))
    return path


@pytest.fixture
def bad_doc(tmp_path) -> Path:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"name": "", "email": "bad"}))
    return path


class TestCheckPlan:
    def test_valid_plan(self, runner, plan_file):
        result = runner.invoke(cli, ["check-plan", str(plan_file)])
        assert result.exit_code == 0
        assert "Plan is valid" in result.output
        assert "2 steps" in result.output

    def test_invalid_plan(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.dump({"steps": [{"at": "name", "validators": "shouty"}]}))
        result = runner.invoke(cli, ["check-plan", str(path)])
        assert result.exit_code == 1
        assert "Validator 'shouty' is not registered" in result.output
        assert "1 issue(s) found" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["check-plan", str(tmp_path / "nope.yaml")])
        assert result.exit_code != 0


class TestRun:
    def test_all_documents_pass(self, runner, plan_file, good_doc):
        result = runner.invoke(cli, ["run", str(plan_file), str(good_doc)])
        assert result.exit_code == 0
        assert f"{good_doc}: OK" in result.output

    def test_failing_document_lists_errors(self, runner, plan_file, good_doc, bad_doc):
        result = runner.invoke(cli, ["run", str(plan_file), str(good_doc), str(bad_doc)])
        assert result.exit_code == 1
        assert f"{bad_doc}: FAILED" in result.output
        assert "  - is required" in result.output
        assert "  - must be a valid email" in result.output
        assert "1 of 2 document(s) failed" in result.output

    def test_parallel_mode(self, runner, plan_file, bad_doc):
        result = runner.invoke(cli, ["run", "--mode", "parallel", str(plan_file), str(bad_doc)])
        assert result.exit_code == 1
        assert result.output.index("is required") < result.output.index("must be a valid email")

    def test_raise_encoding_plan_still_reports(self, runner, tmp_path, bad_doc):
        path = tmp_path / "raising.yaml"
        path.write_text(
            yaml.dump({"encoding": "raise", "steps": [{"at": "name", "validators": "required"}]})
        )
        result = runner.invoke(cli, ["run", str(path), str(bad_doc)])
        assert result.exit_code == 1
        assert "  - is required" in result.output

    def test_lens_structural_error_reported(self, runner, tmp_path, good_doc):
        path = tmp_path / "strict.yaml"
        path.write_text(yaml.dump({"steps": [{"lens": "phone", "validators": "required"}]}))
        result = runner.invoke(cli, ["run", str(path), str(good_doc)])
        assert result.exit_code == 1
        assert "ERROR" in result.output

    def test_nested_error_sets_are_flattened(self, runner, tmp_path, good_doc):
        def team_rules(document):
            return ("error", [ValidationError.new(["needs a lead", "needs a budget"]), "too small"])

        ValidatorRegistry.register("teamRules", team_rules)
        path = tmp_path / "team.yaml"
        path.write_text(yaml.dump({"steps": [{"validators": "teamRules"}]}))
        result = runner.invoke(cli, ["run", str(path), str(good_doc)])
        assert result.exit_code == 1
        assert "  - needs a lead\n  - needs a budget\n  - too small" in result.output
        assert "ValidationError(" not in result.output

    def test_broken_plan(self, runner, tmp_path, good_doc):
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.dump({"steps": "nope"}))
        result = runner.invoke(cli, ["run", str(path), str(good_doc)])
        assert result.exit_code == 1

    def test_invalid_environment(self, runner, plan_file, good_doc, monkeypatch):
        monkeypatch.setenv("OPTICHECK_MAX_WORKERS", "zero")
        result = runner.invoke(cli, ["run", str(plan_file), str(good_doc)])
        assert result.exit_code == 1

    def test_requires_a_document(self, runner, plan_file):
        result = runner.invoke(cli, ["run", str(plan_file)])
        assert result.exit_code != 0


class TestCLIEntryPoint:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check-plan" in result.output
        assert "run" in result.output
