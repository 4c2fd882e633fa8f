"""Static analysis engine: runs a pattern library over contract source.

This module implements the ``StaticAnalyzer`` class, which executes one
dialect's pattern library against submitted source text in five steps:

1. **Structural extraction** -- syntax-tree walk (Solidity) or line
   scanning (Cairo, Vyper). Failure never aborts the run; it downgrades
   the confidence of every finding to Medium.
2. **Trigger evaluation** -- each detector's predicate over the whole
   source. A predicate that raises is logged and skipped; the remaining
   detectors still run.
3. **Line location** -- the detector's line matcher, applied to every
   non-comment line. At most ``MAX_INSTANCES_PER_DETECTOR`` lines are
   reported with High confidence; when none matches, a single finding at
   line 0 is reported with Medium confidence.
4. **Registry enrichment** -- description, remediation, CWE ids and
   reference URLs, preferring the Cairo Security Registry over the SWC
   registry and both over the detector's inline text.
5. **Deduplication** -- by (weakness id, line); the first occurrence wins.
"""

from __future__ import annotations

import logging

from chainaudit.core.analyzer.detectors import DetectorDefinition
from chainaudit.core.analyzer.models import Confidence, Finding, StaticAnalysisResult
from chainaudit.core.analyzer.patterns import patterns_for
from chainaudit.core.analyzer.patterns._helpers import is_comment_line
from chainaudit.exceptions import DetectorError
from chainaudit.parsers.base import Dialect
from chainaudit.parsers.registry import ExtractorRegistry, extractor_for
from chainaudit.standards import get_csr_by_id, get_swc_by_id, swc_reference_url

logger = logging.getLogger(__name__)

# Bounds the output size of a single noisy detector.
MAX_INSTANCES_PER_DETECTOR = 3

# Lines of context on each side of the reported line.
SNIPPET_CONTEXT_LINES = 2

DEFAULT_RECOMMENDATION = "Review the code and implement appropriate security measures."


def code_context(lines: list[str], line_number: int, context: int = SNIPPET_CONTEXT_LINES) -> str:
    """Return the 1-based ``line_number`` with ``context`` lines on each side.

    Line 0 (not localized) yields an empty snippet.
    """
    if line_number <= 0:
        return ""
    start = max(0, line_number - context - 1)
    end = min(len(lines), line_number + context)
    return "\n".join(lines[start:end])


def deduplicate(findings: list[Finding]) -> list[Finding]:
    """Drop findings repeating an earlier (weakness id, line) pair.

    Order is preserved and the first occurrence wins.
    """
    seen: set[tuple[str, int]] = set()
    unique: list[Finding] = []
    for finding in findings:
        key = (finding.weakness_id, finding.line_number)
        if key in seen:
            logger.debug(
                "Collapsed duplicate %s at line %d (%s)",
                finding.weakness_id, finding.line_number, finding.detector_id,
            )
            continue
        seen.add(key)
        unique.append(finding)
    return unique


class StaticAnalyzer:
    """Pattern-based static analyzer for smart-contract source.

    The analyzer is stateless: each ``analyze()`` call is independent and
    only reads the shared, immutable pattern libraries and registries, so
    one instance can serve concurrent callers.

    Usage::

        analyzer = StaticAnalyzer()
        result = analyzer.analyze(source, Dialect.SOLIDITY)
        for finding in result.findings:
            print(f"[{finding.severity.label}] {finding.name} line {finding.line_number}")

    Args:
        extractors: Optional registry overriding the built-in structural
            extractors.
    """

    def __init__(self, extractors: ExtractorRegistry | None = None) -> None:
        self._extractors = extractors

    def analyze(self, code: str, dialect: Dialect = Dialect.SOLIDITY) -> StaticAnalysisResult:
        """Run ``dialect``'s pattern library over ``code``.

        Args:
            code: Contract source text.
            dialect: Which pattern library and extractor to use.

        Returns:
            A ``StaticAnalysisResult`` with deduplicated findings in
            discovery order and the extracted structure.
        """
        extractor = (
            self._extractors.get(dialect) if self._extractors is not None
            else extractor_for(dialect)
        )
        structure = extractor.extract(code)
        fallback = not structure.extracted
        if fallback:
            logger.info(
                "Running %s detectors in pattern-only mode (%s)",
                dialect.value, structure.error,
            )

        lines = code.split("\n")
        findings: list[Finding] = []
        for detector in patterns_for(dialect):
            try:
                located = self._evaluate(detector, code, lines, dialect)
            except DetectorError as exc:
                logger.warning("%s", exc, exc_info=True)
                continue
            if located is None:
                continue
            findings.extend(self._instances(detector, located, lines, fallback))

        return StaticAnalysisResult(
            dialect=dialect,
            findings=deduplicate(findings),
            structure=structure,
        )

    # -- Trigger and location --

    def _evaluate(
        self,
        detector: DetectorDefinition,
        code: str,
        lines: list[str],
        dialect: Dialect,
    ) -> list[int] | None:
        """Return the matching line numbers, or None if the detector did not fire.

        A detector's own ``locate`` function wins over its line matcher.

        Raises:
            DetectorError: If the trigger predicate or line matcher fails.
        """
        try:
            if not detector.check(code):
                return None
            if detector.locate is not None:
                return detector.locate(code)
            hash_comments = dialect is Dialect.VYPER
            return [
                number
                for number, line in enumerate(lines, start=1)
                if not is_comment_line(line, hash_comments) and detector.matcher.matches(line)
            ]
        except Exception as exc:
            raise DetectorError(f"Detector {detector.id} failed, skipping: {exc}") from exc

    def _instances(
        self,
        detector: DetectorDefinition,
        located: list[int],
        lines: list[str],
        fallback: bool,
    ) -> list[Finding]:
        if located:
            placements = [(n, Confidence.HIGH) for n in located[:MAX_INSTANCES_PER_DETECTOR]]
        else:
            placements = [(0, Confidence.MEDIUM)]
        return [
            self._build_finding(
                detector, line_number, lines,
                Confidence.MEDIUM if fallback else confidence,
            )
            for line_number, confidence in placements
        ]

    # -- Registry enrichment --

    def _build_finding(
        self,
        detector: DetectorDefinition,
        line_number: int,
        lines: list[str],
        confidence: Confidence,
    ) -> Finding:
        """Create one finding, filling text and cross-references from the registries.

        Preference order: CSR entry, then SWC entry, then the detector's
        inline text. A cross-reference that does not resolve is treated as
        absent.
        """
        csr = get_csr_by_id(detector.csr_id) if detector.csr_id else None
        swc = get_swc_by_id(detector.swc_id) if detector.swc_id else None

        description = (csr and csr.description) or (swc and swc.description) or detector.description
        exploitation = (
            detector.exploitation
            or (csr and csr.description)
            or (swc and swc.description)
            or detector.description
        )
        recommendation = (
            (csr and csr.remediation)
            or (swc and swc.remediation)
            or detector.recommendation
            or DEFAULT_RECOMMENDATION
        )
        if csr is not None:
            cwe_ids, references = list(csr.cwe_ids), list(csr.references)
        elif swc is not None:
            cwe_ids, references = list(swc.cwe_ids), list(swc.references)
        else:
            cwe_ids = []
            references = [swc_reference_url(detector.swc_id)] if detector.swc_id else []

        return Finding(
            name=detector.name,
            type=detector.type_code,
            severity=detector.severity,
            swc_id=detector.swc_id or "",
            cwe_ids=cwe_ids,
            scsv_ids=list(detector.scsv_ids),
            eth_trust_impact=detector.severity.impact,
            line_number=line_number,
            line_range=(line_number, line_number),
            code_snippet=code_context(lines, line_number),
            description=description,
            exploitation_scenario=exploitation,
            recommendation=recommendation,
            references=references,
            confidence=confidence,
            detector_id=detector.id,
        )
