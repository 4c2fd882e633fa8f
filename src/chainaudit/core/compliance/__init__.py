"""Compliance of analysis findings with the SCSVS v2 control list.

Submodules:
    models  -- ControlResult, ComplianceSummary
    engine  -- ComplianceEngine, compliance_percentage
"""

from chainaudit.core.compliance.engine import ComplianceEngine, compliance_percentage
from chainaudit.core.compliance.models import ComplianceSummary, ControlResult

__all__ = [
    "ComplianceEngine",
    "ComplianceSummary",
    "ControlResult",
    "compliance_percentage",
]
