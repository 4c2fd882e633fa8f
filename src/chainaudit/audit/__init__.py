"""Orchestration of a complete contract analysis.

Submodules:
    models        -- AnalysisRequest, AnalysisType, AnalysisReport
    orchestrator  -- ContractAuditor and the report-building helpers
"""

from chainaudit.audit.models import (
    ALL_ANALYSIS_TYPES,
    AnalysisReport,
    AnalysisRequest,
    AnalysisType,
    severity_threshold,
)
from chainaudit.audit.orchestrator import (
    ContractAuditor,
    build_recommendations,
    filter_by_severity,
)

__all__ = [
    "ALL_ANALYSIS_TYPES",
    "AnalysisReport",
    "AnalysisRequest",
    "AnalysisType",
    "ContractAuditor",
    "build_recommendations",
    "filter_by_severity",
    "severity_threshold",
]
