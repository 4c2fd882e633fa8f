"""Orchestrator: sequences one contract analysis into a report.

Steps of ``ContractAuditor.analyze``:

1. Validate the request (the only step that can reject it).
2. Resolve the dialect: forced by the request, else detected. Unknown
   source is analyzed as Solidity.
3. Static analysis, when the ``static`` facet is requested.
4. AI enhancement of the first few Critical/High findings, one call at a
   time. A failing call leaves its finding untouched.
5. Inclusive severity filter.
6. Statistics, score, risk label and trust level from the filtered list.
7. Compliance of the filtered list.
8. Recommendation strings, then the report with the elapsed time.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from chainaudit.audit.models import AnalysisReport, AnalysisRequest, AnalysisType, severity_threshold
from chainaudit.config import AuditConfig
from chainaudit.core.analyzer import Finding, Severity, StaticAnalyzer
from chainaudit.core.compliance import ComplianceEngine, ComplianceSummary
from chainaudit.core.scoring import Classification, ScoringEngine, SeverityCounts
from chainaudit.enhancement import EnhancementRequest, GroqEnhancer, VulnerabilityEnhancer
from chainaudit.parsers import Dialect, detect_language

logger = logging.getLogger(__name__)

CRITICAL_RECOMMENDATION = "Address critical vulnerabilities immediately before deployment"
HIGH_RECOMMENDATION = "Fix high severity issues to prevent potential exploits"
COMPLIANCE_RECOMMENDATION = "Improve SCSVS v2 compliance to meet security standards"


def filter_by_severity(findings: list[Finding], severity: str) -> list[Finding]:
    """Keep findings at or above the filter's threshold, preserving order."""
    threshold = severity_threshold(severity)
    if threshold is None:
        return list(findings)
    return [f for f in findings if f.severity >= threshold]


def build_recommendations(
    counts: SeverityCounts,
    classification: Classification,
    compliance: ComplianceSummary,
    compliance_threshold: int = 80,
) -> list[str]:
    """Assemble the report's recommendation strings."""
    recommendations: list[str] = []
    if counts.critical > 0:
        recommendations.append(CRITICAL_RECOMMENDATION)
    if counts.high > 0:
        recommendations.append(HIGH_RECOMMENDATION)
    if compliance.percentage < compliance_threshold:
        recommendations.append(COMPLIANCE_RECOMMENDATION)
    recommendations.append(f"Current EthTrust Level: {classification.definition.name}")
    recommendations.append(classification.definition.recommendation)
    return recommendations


def enhancer_from_config(config: AuditConfig) -> VulnerabilityEnhancer | None:
    """Build the configured enhancer, or None when no API key is set."""
    if not config.ai_enabled:
        return None
    return GroqEnhancer(
        api_key=config.api_key,
        model=config.model,
        base_url=config.base_url,
        timeout=config.ai_timeout,
    )


class ContractAuditor:
    """Runs the full analysis pipeline for one request at a time.

    The auditor holds only immutable collaborators, so one instance can
    serve concurrent ``analyze`` calls; each call owns its findings.

    Usage::

        auditor = ContractAuditor(config=load_config())
        report = asyncio.run(auditor.analyze(AnalysisRequest(contract_code=src)))
        print(report.security_score, report.trust_level)

    Args:
        config: Effective configuration. Defaults to ``AuditConfig()``.
        enhancer: AI collaborator. When None, one is built from ``config``;
            without an API key the AI step is skipped.
        analyzer: Static analyzer. Defaults to a new ``StaticAnalyzer``.
    """

    def __init__(
        self,
        config: AuditConfig | None = None,
        enhancer: VulnerabilityEnhancer | None = None,
        analyzer: StaticAnalyzer | None = None,
    ) -> None:
        self._config = config or AuditConfig()
        self._enhancer = enhancer if enhancer is not None else enhancer_from_config(self._config)
        self._analyzer = analyzer or StaticAnalyzer()
        self._scoring = ScoringEngine()
        self._compliance = ComplianceEngine()

    async def analyze(self, request: AnalysisRequest) -> AnalysisReport:
        """Analyze one contract.

        Args:
            request: The analysis request.

        Returns:
            The assembled ``AnalysisReport``.

        Raises:
            InputValidationError: If the request is rejected. No other
                failure escapes; they degrade the report instead.
        """
        request.validate()
        started = time.perf_counter()

        dialect = self.resolve_dialect(request)
        findings: list[Finding] = []
        if AnalysisType.STATIC in request.analysis_types:
            findings = self._analyzer.analyze(request.contract_code, dialect).findings

        if AnalysisType.AI in request.analysis_types and self._enhancer is not None:
            await self._enhance(self._enhancer, findings)

        findings = filter_by_severity(findings, request.severity)
        counts = SeverityCounts.from_findings(findings)
        classification = self._scoring.classify(counts)
        compliance = self._compliance.evaluate(findings)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Analyzed %s as %s: %d findings, score %d, trust level %d",
            request.display_name, dialect.value, counts.total,
            classification.score, classification.trust_level,
        )
        return AnalysisReport(
            analysis_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            contract_code=request.contract_code,
            file_name=request.display_name,
            dialect=dialect,
            security_score=classification.score,
            risk_level=classification.risk_level,
            findings=findings,
            statistics=counts,
            compliance=compliance,
            trust_level=classification.trust_level,
            recommendations=build_recommendations(
                counts, classification, compliance, self._config.compliance_threshold,
            ),
            analysis_time_ms=elapsed_ms,
        )

    @staticmethod
    def resolve_dialect(request: AnalysisRequest) -> Dialect:
        """Return the forced dialect, else the detected one, else Solidity."""
        if request.language is not None:
            return request.language
        detection = detect_language(request.contract_code, request.file_name)
        if detection.dialect is None:
            logger.info("Could not detect the contract language; analyzing as Solidity")
            return Dialect.SOLIDITY
        return detection.dialect

    async def _enhance(self, enhancer: VulnerabilityEnhancer, findings: list[Finding]) -> None:
        """Enhance the first Critical/High findings in discovery order."""
        candidates = [
            f for f in findings if f.severity in (Severity.CRITICAL, Severity.HIGH)
        ][: self._config.ai_max_findings]
        for finding in candidates:
            try:
                response = await enhancer.enhance(EnhancementRequest.from_finding(finding))
            except Exception:
                logger.warning(
                    "AI enhancement failed for %s at line %d; keeping static text",
                    finding.name, finding.line_number, exc_info=True,
                )
                continue
            response.apply_to(finding)
