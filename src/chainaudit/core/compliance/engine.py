"""Compliance evaluation against the SCSVS v2 control list.

A control fails as soon as one finding lists its identifier in
``scsv_ids``; severity plays no part in the verdict. The reported severity
of a failed control is that of the first matching finding in discovery
order, which need not be the most severe one.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from chainaudit.core.analyzer.models import Finding
from chainaudit.core.compliance.models import ComplianceSummary, ControlResult
from chainaudit.core.severity import Severity
from chainaudit.standards import SCSVS_V2_CONTROLS
from chainaudit.standards.models import ControlEntry


def compliance_percentage(passed: int, total: int) -> int:
    """Return ``passed / total`` as a whole percentage, halves rounding up.

    An empty control list yields 0.
    """
    if total <= 0:
        return 0
    return math.floor(100 * passed / total + 0.5)


class ComplianceEngine:
    """Evaluates findings against a fixed control list.

    The engine is stateless; the control list is passed per call so callers
    can evaluate a subset (e.g. level-1 controls only).
    """

    def evaluate(
        self,
        findings: Iterable[Finding],
        controls: Sequence[ControlEntry] = SCSVS_V2_CONTROLS,
    ) -> ComplianceSummary:
        """Produce a pass/fail verdict for every control.

        Args:
            findings: Findings of one analysis run, in discovery order.
            controls: Controls to evaluate, in report order.

        Returns:
            A ``ComplianceSummary`` whose checklist follows ``controls``.
        """
        findings = list(findings)
        checklist = tuple(self._evaluate_control(control, findings) for control in controls)
        passed = sum(1 for result in checklist if result.passed)
        total = len(checklist)
        return ComplianceSummary(
            total_controls=total,
            passed=passed,
            failed=total - passed,
            percentage=compliance_percentage(passed, total),
            checklist=checklist,
        )

    @staticmethod
    def _evaluate_control(control: ControlEntry, findings: list[Finding]) -> ControlResult:
        related = [f for f in findings if control.id in f.scsv_ids]
        return ControlResult(
            control_id=control.id,
            category=control.category,
            title=control.title,
            passed=not related,
            findings=tuple(f.name for f in related),
            severity=related[0].severity if related else Severity.INFO,
        )
