"""
Tests for the command-line interface.

Runs the Typer app in-process with CliRunner.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from json_recovery import main
from json_recovery.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_log_sinks(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from replacing the global Loguru sinks during tests."""
    monkeypatch.setattr(main, "configure_logging", lambda level: None)


class TestRepairCommand:
    """Tests for `json-recovery repair`."""

    def test_repair_file(self, tmp_path: Path) -> None:
        """Test a response file is repaired and printed."""
        source = tmp_path / "response.txt"
        source.write_text('Result:\n{name: "A", marks: [1, 2,],}', encoding="utf-8")

        result = runner.invoke(app, ["repair", str(source)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"name": "A", "marks": [1, 2]}

    def test_repair_stdin(self) -> None:
        """Test the response can be piped in."""
        result = runner.invoke(app, ["repair", "-"], input='```json\n{"a":1}\n```')

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"a": 1}

    def test_repair_to_output_file(self, tmp_path: Path) -> None:
        """Test the repaired JSON is written to --output."""
        target = tmp_path / "repaired.json"

        result = runner.invoke(
            app, ["repair", "-", "--output", str(target)], input='{"note": "a\nb"}'
        )

        assert result.exit_code == 0
        assert json.loads(target.read_text(encoding="utf-8")) == {"note": "a\nb"}

    def test_repair_verbose_shows_steps(self) -> None:
        """Test --verbose lists the repairs applied."""
        result = runner.invoke(app, ["repair", "-", "--verbose"], input='{"a": 1 "b": 2}')

        assert result.exit_code == 0
        assert "Repairs Applied" in result.output
        assert "missing_separator" in result.output

    def test_repair_failure_exits_nonzero(self) -> None:
        """Test an unrecoverable response exits with status 1."""
        result = runner.invoke(app, ["repair", "-"], input="The model refused to answer.")

        assert result.exit_code == 1
        assert "Recovery Failed" in result.output
        assert "NoJSONBoundaryFoundError" in result.output

    def test_nan_is_not_printed(self) -> None:
        """Test a NaN value fails instead of printing non-JSON output."""
        result = runner.invoke(app, ["repair", "-"], input='{"marks": NaN}')

        assert result.exit_code == 1
        assert "UnderlyingSyntaxError" in result.output

    def test_max_attempts_option(self) -> None:
        """Test --max-attempts overrides the configured ceiling."""
        result = runner.invoke(
            app, ["repair", "-", "--max-attempts", "1"], input='{"a": 1 "b": 2 "c": 3}'
        )

        assert result.exit_code == 1
        assert "RepairExhaustedError" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing response file is reported."""
        result = runner.invoke(app, ["repair", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestSettingsCommand:
    """Tests for `json-recovery settings`."""

    def test_shows_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the effective configuration is displayed."""
        monkeypatch.setenv("REPAIR_MAX_ATTEMPTS", "7")

        result = runner.invoke(app, ["settings"])

        assert result.exit_code == 0
        assert "Max attempts" in result.output
        assert "7" in result.output
