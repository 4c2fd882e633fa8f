"""Request and report types at the orchestrator boundary.

``AnalysisRequest`` is validated before any analysis runs; it is the only
place an analysis can be rejected. ``AnalysisReport`` is the aggregate
returned to the caller and serializes to the camelCase JSON wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from chainaudit.core.analyzer.models import Finding
from chainaudit.core.compliance.models import ComplianceSummary
from chainaudit.core.scoring.models import RiskLevel, SeverityCounts, TrustLevel
from chainaudit.core.severity import Severity
from chainaudit.exceptions import InputValidationError
from chainaudit.parsers.base import Dialect

DEFAULT_FILE_NAME = "contract.sol"


class AnalysisType(str, Enum):
    """An analysis facet the caller may request."""

    STATIC = "static"
    AI = "ai"
    STANDARDS = "standards"


ALL_ANALYSIS_TYPES = frozenset(AnalysisType)

# Filter name -> least severe severity kept. "all" keeps everything.
SEVERITY_FILTERS: Mapping[str, Severity] = {
    "critical": Severity.CRITICAL,
    "high": Severity.HIGH,
    "medium": Severity.MEDIUM,
    "low": Severity.LOW,
}
SEVERITY_FILTER_ALL = "all"


def severity_threshold(name: str) -> Severity | None:
    """Return the least severe level kept by filter ``name``; None for "all".

    Raises:
        InputValidationError: If ``name`` is not a known filter.
    """
    key = name.strip().lower()
    if key == SEVERITY_FILTER_ALL:
        return None
    if key not in SEVERITY_FILTERS:
        raise InputValidationError(
            f"Unknown severity filter '{name}'; expected one of "
            f"{', '.join([SEVERITY_FILTER_ALL, *SEVERITY_FILTERS])}"
        )
    return SEVERITY_FILTERS[key]


# ---------------------------------------------------------------------------
# AnalysisRequest
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisRequest:
    """One analysis request.

    Attributes:
        contract_code: Source text. Must not be empty or blank.
        file_name: Name of the submitted file. Its extension, when known,
            decides the dialect.
        analysis_types: Facets to run.
        severity: Severity filter name (``all``, ``critical``, ``high``,
            ``medium`` or ``low``).
        language: Force a dialect instead of detecting it.
    """

    contract_code: str
    file_name: str | None = None
    analysis_types: frozenset[AnalysisType] = ALL_ANALYSIS_TYPES
    severity: str = SEVERITY_FILTER_ALL
    language: Dialect | None = None

    def validate(self) -> None:
        """Reject the request before any analysis runs.

        Raises:
            InputValidationError: For empty source, unknown facets, or an
                unknown severity filter.
        """
        if not isinstance(self.contract_code, str) or not self.contract_code.strip():
            raise InputValidationError("Contract code is required")
        for facet in self.analysis_types:
            if not isinstance(facet, AnalysisType):
                raise InputValidationError(f"Unknown analysis type '{facet}'")
        severity_threshold(self.severity)

    @property
    def display_name(self) -> str:
        return self.file_name or DEFAULT_FILE_NAME

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalysisRequest:
        """Build a request from the camelCase wire shape.

        Recognized keys: ``contractCode``, ``fileName``, ``analysisTypes``,
        ``severity`` and ``language``. A missing ``analysisTypes`` selects
        every facet.

        Raises:
            InputValidationError: For unknown facet or language names.
        """
        raw_types = data.get("analysisTypes")
        if raw_types is None:
            types = ALL_ANALYSIS_TYPES
        else:
            try:
                types = frozenset(AnalysisType(str(t).lower()) for t in raw_types)
            except ValueError as exc:
                raise InputValidationError(f"Unknown analysis type: {exc}") from exc

        raw_language = data.get("language")
        language = None
        if raw_language:
            try:
                language = Dialect(str(raw_language).lower())
            except ValueError as exc:
                raise InputValidationError(f"Unknown language '{raw_language}'") from exc

        return cls(
            contract_code=data.get("contractCode") or "",
            file_name=data.get("fileName") or None,
            analysis_types=types,
            severity=data.get("severity") or SEVERITY_FILTER_ALL,
            language=language,
        )


# ---------------------------------------------------------------------------
# AnalysisReport
# ---------------------------------------------------------------------------


@dataclass
class AnalysisReport:
    """Aggregate result of one analysis.

    ``statistics`` always describes ``findings`` after severity filtering,
    so ``statistics.total == len(findings)``.

    Attributes:
        analysis_id: Unique id of this analysis (UUID4).
        timestamp: When the analysis finished (UTC).
        contract_code: The submitted source, echoed.
        file_name: The submitted file name, or ``contract.sol``.
        dialect: The dialect analyzed.
        security_score: 0-100 health score.
        risk_level: Label derived from the score.
        findings: Findings after severity filtering, in discovery order.
        statistics: Per-severity counts of ``findings``.
        compliance: SCSVS v2 compliance of ``findings``.
        trust_level: EthTrust level, 1 (worst) through 5.
        recommendations: Human-readable next steps.
        analysis_time_ms: Elapsed wall-clock time in milliseconds.
    """

    analysis_id: str
    timestamp: datetime
    contract_code: str
    file_name: str
    dialect: Dialect
    security_score: int
    risk_level: RiskLevel
    findings: list[Finding] = field(default_factory=list)
    statistics: SeverityCounts = field(default_factory=SeverityCounts)
    compliance: ComplianceSummary | None = None
    trust_level: TrustLevel = TrustLevel.SECURE
    recommendations: list[str] = field(default_factory=list)
    analysis_time_ms: int = 0

    @property
    def has_blocking_findings(self) -> bool:
        """True when any Critical or High finding remains."""
        return self.statistics.critical > 0 or self.statistics.high > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape."""
        compliance: dict[str, Any] = {"passed": 0, "failed": 0, "percentage": 0, "checklist": []}
        if self.compliance is not None:
            compliance = self.compliance.to_dict()
            compliance.pop("totalControls")
        return {
            "analysisId": self.analysis_id,
            "timestamp": _iso_timestamp(self.timestamp),
            "contractCode": self.contract_code,
            "fileName": self.file_name,
            "language": self.dialect.value,
            "securityScore": self.security_score,
            "riskLevel": self.risk_level.value,
            "vulnerabilities": [f.to_dict() for f in self.findings],
            "statistics": self.statistics.to_dict(),
            "scsvCompliance": compliance,
            "ethTrustLevel": int(self.trust_level),
            "recommendations": list(self.recommendations),
            "analysisTime": self.analysis_time_ms,
        }


def _iso_timestamp(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix for UTC."""
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
