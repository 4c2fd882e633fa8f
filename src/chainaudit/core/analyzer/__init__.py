"""Static analyzer for smart-contract source.

Given contract source text and a dialect, the ``StaticAnalyzer`` runs that
dialect's pattern library and returns a ``StaticAnalysisResult`` holding
deduplicated, registry-enriched findings and best-effort structural
metadata.

Submodules
----------
- ``models``: Data types (Confidence, DetectionMethod, Finding,
  StaticAnalysisResult).
- ``detectors``: DetectorDefinition and the line matcher variants.
- ``patterns``: The Solidity, Cairo and Vyper pattern libraries.
- ``engine``: The StaticAnalyzer class.

All public names are re-exported here::

    from chainaudit.core.analyzer import StaticAnalyzer, Finding, Severity
"""

from chainaudit.core.analyzer.detectors import (
    DetectorDefinition,
    LineMatcher,
    LiteralMatcher,
    PatternMatcher,
)
from chainaudit.core.analyzer.engine import StaticAnalyzer, deduplicate
from chainaudit.core.analyzer.models import (
    Confidence,
    DetectionMethod,
    Finding,
    StaticAnalysisResult,
)
from chainaudit.core.analyzer.patterns import (
    CAIRO_PATTERNS,
    SOLIDITY_PATTERNS,
    VYPER_PATTERNS,
    patterns_for,
)
from chainaudit.core.severity import Severity

__all__ = [
    "CAIRO_PATTERNS",
    "Confidence",
    "DetectionMethod",
    "DetectorDefinition",
    "Finding",
    "LineMatcher",
    "LiteralMatcher",
    "PatternMatcher",
    "SOLIDITY_PATTERNS",
    "Severity",
    "StaticAnalysisResult",
    "StaticAnalyzer",
    "VYPER_PATTERNS",
    "deduplicate",
    "patterns_for",
]
