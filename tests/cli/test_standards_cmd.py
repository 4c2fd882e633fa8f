"""Tests for ``chainaudit standards`` and ``chainaudit detectors`` commands.

Verifies:
    - Each registry lists in text and JSON form.
    - SCSVS controls can be narrowed to one category.
    - Detector listings follow the selected dialect.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from chainaudit.cli.main import cli
from chainaudit.core.analyzer import CAIRO_PATTERNS, SOLIDITY_PATTERNS


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestStandardsCommand:
    def test_swc_is_default(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["standards", "--format", "json"])
        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert len(entries) == 37
        assert entries[0]["id"] == "SWC-100"
        assert entries[0]["cweIds"] == ["CWE-710"]

    def test_csr_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["standards", "csr", "--format", "json"])
        entries = json.loads(result.output)
        assert entries[0]["id"] == "CSR-001"
        assert all(e["id"].startswith("CSR-") for e in entries)

    def test_scsvs_category(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli, ["standards", "scsvs", "--format", "json", "--category", "Access Control"],
        )
        controls = json.loads(result.output)
        assert len(controls) == 4
        assert {c["category"] for c in controls} == {"Access Control"}
        assert set(controls[0]) >= {"id", "title", "level", "verification"}

    def test_text_output(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["standards", "scsvs"])
        assert result.exit_code == 0
        assert "SCSVS v2 Controls" in result.output

    def test_unknown_registry(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["standards", "owasp"])
        assert result.exit_code == 2


class TestDetectorsCommand:
    def test_solidity_default(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["detectors", "--format", "json"])
        assert result.exit_code == 0
        detectors = json.loads(result.output)
        assert len(detectors) == len(SOLIDITY_PATTERNS)
        assert detectors[0] == {
            "id": "reentrancy",
            "name": "Reentrancy Vulnerability",
            "severity": "Critical",
            "type": "SWC-107",
            "scsvIds": ["V6.1"],
        }

    def test_cairo_types_are_csr(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["detectors", "--dialect", "cairo", "--format", "json"])
        detectors = json.loads(result.output)
        assert len(detectors) == len(CAIRO_PATTERNS)
        assert all(d["type"].startswith("CSR-") for d in detectors)

    def test_text_title(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["detectors", "--dialect", "vyper"])
        assert "Vyper Detectors (10)" in result.output
