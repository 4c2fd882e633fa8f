"""Compliance data models: ControlResult and ComplianceSummary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chainaudit.core.severity import Severity


@dataclass(frozen=True)
class ControlResult:
    """Verdict for one verification control.

    Attributes:
        control_id: Control identifier (e.g. ``"V6.1"``).
        category: The control's category.
        title: The control's title.
        passed: True when no finding references the control.
        findings: Names of the findings that failed the control, in order.
        severity: Severity of the first failing finding, INFO when passed.
    """

    control_id: str
    category: str
    title: str
    passed: bool
    findings: tuple[str, ...] = ()
    severity: Severity = Severity.INFO

    def to_dict(self) -> dict[str, Any]:
        return {
            "controlId": self.control_id,
            "category": self.category,
            "title": self.title,
            "passed": self.passed,
            "findings": list(self.findings),
            "severity": self.severity.label,
        }


@dataclass(frozen=True)
class ComplianceSummary:
    """Aggregate compliance over a control list.

    Attributes:
        total_controls: Number of controls evaluated.
        passed: Controls with no referencing finding.
        failed: ``total_controls - passed``.
        percentage: ``round(100 * passed / total_controls)``, 0 when empty.
        checklist: One ``ControlResult`` per control, in control-list order.
    """

    total_controls: int
    passed: int
    failed: int
    percentage: int
    checklist: tuple[ControlResult, ...] = field(default_factory=tuple)

    @property
    def failed_controls(self) -> list[ControlResult]:
        return [result for result in self.checklist if not result.passed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalControls": self.total_controls,
            "passed": self.passed,
            "failed": self.failed,
            "percentage": self.percentage,
            "checklist": [result.to_dict() for result in self.checklist],
        }
