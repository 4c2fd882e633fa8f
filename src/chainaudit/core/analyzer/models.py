"""Data models for the static analyzer: Confidence, Finding, StaticAnalysisResult.

These are the core data types produced by the analysis engine and consumed
by the scoring engine, the compliance engine and the orchestrator. They are
decoupled from the engine so that downstream modules can import them
without pulling in the pattern libraries or the syntax-tree parser.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chainaudit.core.severity import Severity
from chainaudit.parsers.base import ContractStructure, Dialect


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class Confidence(str, Enum):
    """How sure the engine is that a finding is real and correctly located."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DetectionMethod(str, Enum):
    """Where the finding's descriptive text came from."""

    STATIC = "static"
    AI = "ai"


# ---------------------------------------------------------------------------
# Finding: one reported instance of a potential weakness
# ---------------------------------------------------------------------------


@dataclass
class Finding:
    """A single weakness instance reported by the static analyzer.

    Findings are mutable only through ``apply_enhancement()``, which may
    replace the three descriptive texts once. Severity, identifiers and
    location never change after creation.

    Attributes:
        name: Human-readable detector name.
        type: Dialect-neutral type code: the CSR id, else the SWC id,
            else the detector id.
        severity: Canonical severity level.
        swc_id: Originating SWC identifier; empty when the detector has none.
        cwe_ids: CWE cross-references resolved from the registries.
        scsv_ids: SCSVS v2 control ids this finding violates.
        eth_trust_impact: Trust-impact rank, 1 (worst) through 5.
        line_number: 1-based line, or 0 when the pattern has no location.
        line_range: Inclusive ``(start, end)`` lines covered by the finding.
        code_snippet: The matched line with two lines of context each side.
        description: What the weakness is.
        exploitation_scenario: How an attacker would exploit it.
        recommendation: How to fix it.
        references: Reference URLs.
        detection_method: ``static``, or ``ai`` once enhanced.
        confidence: High when located on a line, Medium otherwise or when
            structural extraction failed.
        detector_id: Identifier of the detector that produced the finding.
        id: Synthetic unique id (UUID4), fresh per finding.
    """

    name: str
    type: str
    severity: Severity
    swc_id: str = ""
    cwe_ids: list[str] = field(default_factory=list)
    scsv_ids: list[str] = field(default_factory=list)
    eth_trust_impact: int = 5
    line_number: int = 0
    line_range: tuple[int, int] = (0, 0)
    code_snippet: str = ""
    description: str = ""
    exploitation_scenario: str = ""
    recommendation: str = ""
    references: list[str] = field(default_factory=list)
    detection_method: DetectionMethod = DetectionMethod.STATIC
    confidence: Confidence = Confidence.HIGH
    detector_id: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def weakness_id(self) -> str:
        """Key used for deduplication: the SWC id, else the type code."""
        return self.swc_id or self.type

    def apply_enhancement(
        self,
        description: str | None = None,
        exploitation_scenario: str | None = None,
        recommendation: str | None = None,
    ) -> None:
        """Replace the descriptive texts with AI-supplied versions.

        A missing (None or empty) value keeps the current text. The
        detection method becomes ``ai`` regardless.
        """
        self.description = description or self.description
        self.exploitation_scenario = exploitation_scenario or self.exploitation_scenario
        self.recommendation = recommendation or self.recommendation
        self.detection_method = DetectionMethod.AI

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape of the report."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "severity": self.severity.label,
            "swcId": self.swc_id,
            "cweIds": list(self.cwe_ids),
            "scsvIds": list(self.scsv_ids),
            "ethTrustImpact": self.eth_trust_impact,
            "lineNumber": self.line_number,
            "lineRange": {"start": self.line_range[0], "end": self.line_range[1]},
            "codeSnippet": self.code_snippet,
            "description": self.description,
            "exploitationScenario": self.exploitation_scenario,
            "recommendation": self.recommendation,
            "references": list(self.references),
            "detectionMethod": self.detection_method.value,
            "confidence": self.confidence.value,
        }


# ---------------------------------------------------------------------------
# StaticAnalysisResult: complete output of one static analysis run
# ---------------------------------------------------------------------------


@dataclass
class StaticAnalysisResult:
    """The result of running one pattern library over one source text.

    Attributes:
        dialect: The dialect whose pattern library was applied.
        findings: Deduplicated findings in discovery order.
        structure: Best-effort structural metadata of the source.
    """

    dialect: Dialect
    findings: list[Finding] = field(default_factory=list)
    structure: ContractStructure | None = None

    @property
    def is_clean(self) -> bool:
        """True if no findings were produced."""
        return not self.findings

    @property
    def max_severity(self) -> Severity | None:
        """Return the highest severity among all findings, or None if clean."""
        if not self.findings:
            return None
        return max(f.severity for f in self.findings)
