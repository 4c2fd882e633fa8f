"""Tests for the ComplianceEngine against the SCSVS v2 control list.

Validates:
- A control fails as soon as one finding references it.
- Failed controls report the severity of the first matching finding.
- The percentage rounds halves up.
"""

from __future__ import annotations

import pytest

from chainaudit.core.analyzer import Finding, Severity
from chainaudit.core.compliance import ComplianceEngine, compliance_percentage
from chainaudit.standards import SCSVS_V2_CONTROLS
from chainaudit.standards.models import ControlEntry


def _finding(name: str, severity: Severity, *scsv_ids: str) -> Finding:
    return Finding(name=name, type="T", severity=severity, scsv_ids=list(scsv_ids))


class TestEvaluate:
    def test_no_findings_pass_everything(self) -> None:
        summary = ComplianceEngine().evaluate([])
        assert summary.total_controls == len(SCSVS_V2_CONTROLS)
        assert summary.passed == summary.total_controls
        assert summary.failed == 0
        assert summary.percentage == 100
        assert summary.failed_controls == []

    def test_referenced_controls_fail(self) -> None:
        findings = [
            _finding("Reentrancy Vulnerability", Severity.CRITICAL, "V6.1"),
            _finding("Missing Function Visibility", Severity.HIGH, "V2.1"),
        ]
        summary = ComplianceEngine().evaluate(findings)
        failed = {r.control_id: r for r in summary.failed_controls}
        assert set(failed) == {"V6.1", "V2.1"}
        assert failed["V6.1"].findings == ("Reentrancy Vulnerability",)
        assert failed["V6.1"].category == "External Calls"
        assert summary.failed == 2
        assert summary.passed == summary.total_controls - 2

    def test_first_matching_finding_sets_severity(self) -> None:
        findings = [
            _finding("Low first", Severity.LOW, "V2.1"),
            _finding("Critical second", Severity.CRITICAL, "V2.1"),
        ]
        summary = ComplianceEngine().evaluate(findings)
        result = summary.failed_controls[0]
        assert result.severity == Severity.LOW
        assert result.findings == ("Low first", "Critical second")

    def test_passed_controls_are_info(self) -> None:
        summary = ComplianceEngine().evaluate([])
        assert all(result.severity == Severity.INFO for result in summary.checklist)

    def test_checklist_follows_control_order(self) -> None:
        summary = ComplianceEngine().evaluate([])
        assert [r.control_id for r in summary.checklist] == [c.id for c in SCSVS_V2_CONTROLS]

    def test_custom_control_subset(self) -> None:
        controls = [
            ControlEntry(id="X1", category="Custom", title="One", level=1,
                         description="d", verification="v"),
            ControlEntry(id="X2", category="Custom", title="Two", level=1,
                         description="d", verification="v"),
        ]
        summary = ComplianceEngine().evaluate([_finding("f", Severity.HIGH, "X2")], controls)
        assert summary.total_controls == 2
        assert summary.percentage == 50

    def test_to_dict(self) -> None:
        summary = ComplianceEngine().evaluate([_finding("f", Severity.HIGH, "V2.4")])
        data = summary.to_dict()
        assert data["totalControls"] == len(SCSVS_V2_CONTROLS)
        failed = [c for c in data["checklist"] if not c["passed"]]
        assert failed == [{
            "controlId": "V2.4",
            "category": "Access Control",
            "title": "Verify tx.origin Not Used",
            "passed": False,
            "findings": ["f"],
            "severity": "High",
        }]


class TestPercentage:
    @pytest.mark.parametrize(
        ("passed", "total", "expected"),
        [
            (45, 45, 100),
            (0, 45, 0),
            (1, 8, 13),
            (1, 3, 33),
            (2, 3, 67),
            (43, 45, 96),
            (0, 0, 0),
        ],
    )
    def test_rounding(self, passed: int, total: int, expected: int) -> None:
        assert compliance_percentage(passed, total) == expected
