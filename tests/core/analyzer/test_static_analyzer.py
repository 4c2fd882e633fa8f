"""Tests for the StaticAnalyzer engine.

Verifies:
- A value call followed by a balance write is reported as Critical reentrancy.
- A function without visibility is reported as High at its declaration line.
- Findings carry registry text, CWE ids, SCSVS ids and a code snippet.
- Noisy detectors are capped at three instances per source.
- Failed structural extraction downgrades confidence to Medium.
- A raising detector is skipped without aborting the run.
- Deduplication keeps the first (weakness id, line) occurrence.
"""

from __future__ import annotations

from unittest.mock import patch

from chainaudit.core.analyzer import (
    Confidence,
    DetectionMethod,
    DetectorDefinition,
    Finding,
    Severity,
    StaticAnalyzer,
    deduplicate,
)
from chainaudit.core.analyzer.detectors import literal
from chainaudit.core.analyzer.engine import MAX_INSTANCES_PER_DETECTOR, code_context
from chainaudit.parsers import ContractStructure, Dialect, StructuralExtractor, default_registry


class _FailingExtractor(StructuralExtractor):
    dialect = Dialect.SOLIDITY

    def _extract(self, code: str, structure: ContractStructure) -> None:
        raise RuntimeError("grammar unavailable")


class _PassingExtractor(StructuralExtractor):
    dialect = Dialect.SOLIDITY

    def _extract(self, code: str, structure: ContractStructure) -> None:
        structure.name = "Stub"


def _analyzer_with(extractor: StructuralExtractor) -> StaticAnalyzer:
    registry = default_registry()
    registry.register(extractor)
    return StaticAnalyzer(extractors=registry)


def _by_detector(findings: list[Finding], detector_id: str) -> list[Finding]:
    return [f for f in findings if f.detector_id == detector_id]


# ---------------------------------------------------------------------------
# Solidity scenarios
# ---------------------------------------------------------------------------


class TestReentrancy:
    """Value transfer before the balance update."""

    def test_reported_at_the_call_line(self, reentrant_vault: str) -> None:
        result = StaticAnalyzer().analyze(reentrant_vault, Dialect.SOLIDITY)
        findings = _by_detector(result.findings, "reentrancy")
        assert len(findings) == 1
        finding = findings[0]
        assert finding.line_number == 13
        assert finding.line_range == (13, 13)
        assert finding.severity == Severity.CRITICAL
        assert finding.swc_id == "SWC-107"
        assert finding.type == "SWC-107"

    def test_enriched_from_registries(self, reentrant_vault: str) -> None:
        result = StaticAnalyzer().analyze(reentrant_vault, Dialect.SOLIDITY)
        finding = _by_detector(result.findings, "reentrancy")[0]
        assert finding.cwe_ids == ["CWE-841"]
        assert finding.scsv_ids == ["V6.1"]
        assert finding.references == ["https://swcregistry.io/docs/SWC-107"]
        assert finding.eth_trust_impact == 1
        assert finding.detection_method is DetectionMethod.STATIC
        assert "malicious contract" in finding.description
        assert finding.exploitation_scenario.startswith("A malicious contract receives")

    def test_snippet_has_two_lines_of_context(self, reentrant_vault: str) -> None:
        result = StaticAnalyzer().analyze(reentrant_vault, Dialect.SOLIDITY)
        snippet = _by_detector(result.findings, "reentrancy")[0].code_snippet
        lines = snippet.split("\n")
        assert len(lines) == 5
        assert "msg.sender.call{value: amount}" in lines[2]
        assert "balances[msg.sender] -= amount" in lines[4]

    def test_guarded_function_not_reported(self, reentrant_vault: str) -> None:
        guarded = reentrant_vault.replace(
            "function withdraw(uint256 amount) external {",
            "function withdraw(uint256 amount) external nonReentrant {",
        )
        result = StaticAnalyzer().analyze(guarded, Dialect.SOLIDITY)
        assert not _by_detector(result.findings, "reentrancy")

    def test_effects_before_interaction_not_reported(self) -> None:
        code = (
            "// SPDX-License-Identifier: MIT\n"
            "pragma solidity 0.8.20;\n"
            "contract Safe {\n"
            "    mapping(address => uint256) public balances;\n"
            "    function withdraw(uint256 amount) external {\n"
            "        balances[msg.sender] -= amount;\n"
            "        (bool ok, ) = msg.sender.call{value: amount}(\"\");\n"
            "        require(ok);\n"
            "    }\n"
            "}\n"
        )
        result = StaticAnalyzer().analyze(code, Dialect.SOLIDITY)
        assert not _by_detector(result.findings, "reentrancy")


class TestMissingVisibility:
    def test_reported_at_declaration(self, missing_visibility: str) -> None:
        result = StaticAnalyzer().analyze(missing_visibility, Dialect.SOLIDITY)
        findings = _by_detector(result.findings, "missing-visibility")
        assert [f.line_number for f in findings] == [7]
        assert findings[0].severity == Severity.HIGH
        assert findings[0].swc_id == "SWC-100"

    def test_explicit_visibility_is_clean(self, clean_counter: str) -> None:
        result = StaticAnalyzer().analyze(clean_counter, Dialect.SOLIDITY)
        assert result.is_clean
        assert result.max_severity is None


class TestInstanceCap:
    def test_at_most_three_lines_per_detector(self, tx_origin_wallet: str) -> None:
        result = StaticAnalyzer().analyze(tx_origin_wallet, Dialect.SOLIDITY)
        findings = _by_detector(result.findings, "tx-origin-auth")
        assert len(findings) == MAX_INSTANCES_PER_DETECTOR
        assert [f.line_number for f in findings] == [7, 8, 9]
        assert all(f.severity == Severity.HIGH for f in findings)

    def test_each_finding_has_a_fresh_id(self, tx_origin_wallet: str) -> None:
        result = StaticAnalyzer().analyze(tx_origin_wallet, Dialect.SOLIDITY)
        ids = [f.id for f in result.findings]
        assert len(ids) == len(set(ids))


class TestUnlocatedFindings:
    def test_missing_license_reported_at_line_zero(self) -> None:
        code = "pragma solidity 0.8.20;\ncontract A {\n}\n"
        result = StaticAnalyzer().analyze(code, Dialect.SOLIDITY)
        finding = _by_detector(result.findings, "missing-license")[0]
        assert finding.line_number == 0
        assert finding.code_snippet == ""
        assert finding.confidence is Confidence.MEDIUM
        assert finding.severity == Severity.INFO


class TestCommentLines:
    def test_commented_out_code_is_ignored(self) -> None:
        code = (
            "// SPDX-License-Identifier: MIT\n"
            "pragma solidity 0.8.20;\n"
            "contract A {\n"
            "    address public owner;\n"
            "    // require(tx.origin == owner);\n"
            "}\n"
        )
        result = StaticAnalyzer().analyze(code, Dialect.SOLIDITY)
        assert not _by_detector(result.findings, "tx-origin-auth")


# ---------------------------------------------------------------------------
# Robustness
# ---------------------------------------------------------------------------


class TestExtractionFallback:
    def test_failed_extraction_downgrades_confidence(self, reentrant_vault: str) -> None:
        result = _analyzer_with(_FailingExtractor()).analyze(reentrant_vault, Dialect.SOLIDITY)
        assert result.structure is not None
        assert not result.structure.extracted
        findings = _by_detector(result.findings, "reentrancy")
        assert len(findings) == 1
        assert findings[0].confidence is Confidence.MEDIUM

    def test_successful_extraction_keeps_high_confidence(self, reentrant_vault: str) -> None:
        result = _analyzer_with(_PassingExtractor()).analyze(reentrant_vault, Dialect.SOLIDITY)
        assert result.structure.name == "Stub"
        finding = _by_detector(result.findings, "reentrancy")[0]
        assert finding.confidence is Confidence.HIGH


class TestFailingDetector:
    def test_raising_trigger_is_skipped(self, tx_origin_wallet: str) -> None:
        def explode(code: str) -> bool:
            raise ValueError("bad regex")

        broken = DetectorDefinition(
            id="broken",
            name="Broken",
            severity=Severity.HIGH,
            description="Always fails.",
            check=explode,
            matcher=literal("x"),
        )
        working = DetectorDefinition(
            id="owner-literal",
            name="Owner Literal",
            severity=Severity.LOW,
            description="Mentions owner.",
            check=lambda code: "owner" in code,
            matcher=literal("address public owner"),
        )
        with patch(
            "chainaudit.core.analyzer.engine.patterns_for",
            return_value=(broken, working),
        ):
            result = StaticAnalyzer().analyze(tx_origin_wallet, Dialect.SOLIDITY)
        assert [f.detector_id for f in result.findings] == ["owner-literal"]
        assert result.findings[0].line_number == 5
        assert result.findings[0].recommendation.startswith("Review the code")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestDeduplicate:
    def test_first_occurrence_wins(self) -> None:
        first = Finding(name="A", type="SWC-104", severity=Severity.HIGH, swc_id="SWC-104",
                        line_number=4, detector_id="first")
        second = Finding(name="B", type="SWC-104", severity=Severity.MEDIUM, swc_id="SWC-104",
                         line_number=4, detector_id="second")
        other_line = Finding(name="C", type="SWC-104", severity=Severity.MEDIUM, swc_id="SWC-104",
                             line_number=5, detector_id="third")
        unique = deduplicate([first, second, other_line])
        assert [f.detector_id for f in unique] == ["first", "third"]

    def test_type_code_used_without_swc_id(self) -> None:
        a = Finding(name="A", type="CSR-004", severity=Severity.CRITICAL, line_number=9)
        b = Finding(name="B", type="CSR-010", severity=Severity.LOW, line_number=9)
        assert len(deduplicate([a, b])) == 2


class TestCodeContext:
    LINES = [f"line {n}" for n in range(1, 11)]

    def test_middle_of_file(self) -> None:
        assert code_context(self.LINES, 5) == "line 3\nline 4\nline 5\nline 6\nline 7"

    def test_clipped_at_start_and_end(self) -> None:
        assert code_context(self.LINES, 1) == "line 1\nline 2\nline 3"
        assert code_context(self.LINES, 10) == "line 8\nline 9\nline 10"

    def test_line_zero_is_empty(self) -> None:
        assert code_context(self.LINES, 0) == ""
