"""Tests for ``chainaudit analyze`` command.

Verifies:
    - Clean contracts exit 0, Critical/High findings exit 1.
    - Rejected input and configuration exit 2.
    - JSON output carries the full report.
    - Severity, facet and language options reach the pipeline.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from chainaudit.cli.main import cli

# Keeps the AI step off regardless of the developer's environment.
NO_AI = {"GROQ_API_KEY": ""}


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestExitCodes:
    def test_clean_contract_exits_0(self, runner: CliRunner, contract_file, clean_counter: str) -> None:
        path = contract_file(clean_counter, "Counter.sol")
        result = runner.invoke(cli, ["analyze", str(path)], env=NO_AI)
        assert result.exit_code == 0
        assert "No findings." in result.output
        assert "100/100" in result.output

    def test_critical_finding_exits_1(self, runner: CliRunner, contract_file, reentrant_vault: str) -> None:
        path = contract_file(reentrant_vault, "Vault.sol")
        result = runner.invoke(cli, ["analyze", str(path)], env=NO_AI)
        assert result.exit_code == 1
        assert "Recommendations" in result.output

    def test_blank_file_exits_2(self, runner: CliRunner, contract_file) -> None:
        path = contract_file("   \n", "Empty.sol")
        result = runner.invoke(cli, ["analyze", str(path), "--format", "json"], env=NO_AI)
        assert result.exit_code == 2
        assert json.loads(result.stdout) == {"error": "Contract code is required"}

    def test_missing_file_is_usage_error(self, runner: CliRunner, tmp_path) -> None:
        result = runner.invoke(cli, ["analyze", str(tmp_path / "absent.sol")], env=NO_AI)
        assert result.exit_code == 2

    def test_missing_config_exits_2(self, runner: CliRunner, contract_file, clean_counter: str) -> None:
        path = contract_file(clean_counter)
        result = runner.invoke(
            cli, ["analyze", str(path), "--config", str(path.parent / "nope.yml")], env=NO_AI,
        )
        assert result.exit_code == 2
        assert "Config file not found" in result.output


class TestJsonOutput:
    def test_report_shape(self, runner: CliRunner, contract_file, reentrant_vault: str) -> None:
        path = contract_file(reentrant_vault, "Vault.sol")
        result = runner.invoke(cli, ["analyze", str(path), "--format", "json"], env=NO_AI)
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["fileName"] == "Vault.sol"
        assert data["language"] == "solidity"
        assert data["securityScore"] == 80
        assert data["ethTrustLevel"] == 1
        vuln = data["vulnerabilities"][0]
        assert vuln["swcId"] == "SWC-107"
        assert vuln["lineNumber"] == 13
        assert vuln["detectionMethod"] == "static"
        assert data["scsvCompliance"]["failed"] == 1

    def test_severity_filter(self, runner: CliRunner, contract_file, missing_visibility: str) -> None:
        path = contract_file(missing_visibility)
        result = runner.invoke(
            cli, ["analyze", str(path), "--format", "json", "--severity", "CRITICAL"], env=NO_AI,
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["vulnerabilities"] == []

    def test_unknown_severity_rejected(self, runner: CliRunner, contract_file, clean_counter: str) -> None:
        path = contract_file(clean_counter)
        result = runner.invoke(cli, ["analyze", str(path), "--severity", "urgent"], env=NO_AI)
        assert result.exit_code == 2

    def test_standards_only(self, runner: CliRunner, contract_file, reentrant_vault: str) -> None:
        path = contract_file(reentrant_vault)
        result = runner.invoke(
            cli, ["analyze", str(path), "--format", "json", "--type", "standards"], env=NO_AI,
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["vulnerabilities"] == []
        assert data["scsvCompliance"]["percentage"] == 100

    def test_forced_language(self, runner: CliRunner, contract_file, vyper_vault: str) -> None:
        path = contract_file(vyper_vault, "vault.txt")
        result = runner.invoke(
            cli, ["analyze", str(path), "--format", "json", "--language", "vyper"], env=NO_AI,
        )
        data = json.loads(result.stdout)
        assert data["language"] == "vyper"
        assert data["vulnerabilities"][0]["lineNumber"] == 13


class TestTextOutput:
    def test_checklist_lists_failed_controls(
        self, runner: CliRunner, contract_file, reentrant_vault: str,
    ) -> None:
        path = contract_file(reentrant_vault)
        result = runner.invoke(cli, ["analyze", str(path), "--checklist"], env=NO_AI)
        assert "V6.1" in result.output
        assert "EthTrust Level" in result.output
