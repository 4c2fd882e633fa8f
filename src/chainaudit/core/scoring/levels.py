"""EthTrust level definitions.

Static descriptive data for the five trust levels. The table is read-only
and shared by every scoring run.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from chainaudit.core.scoring.models import TrustLevel, TrustLevelDefinition

ETHTRUST_LEVELS: Mapping[TrustLevel, TrustLevelDefinition] = MappingProxyType({
    TrustLevel.CRITICAL_UNSAFE: TrustLevelDefinition(
        level=TrustLevel.CRITICAL_UNSAFE,
        name="Critical - Unsafe",
        description=(
            "Contract contains critical vulnerabilities that pose immediate risk "
            "of fund loss or exploitation."
        ),
        criteria=(
            "One or more Critical severity vulnerabilities detected",
            "Reentrancy vulnerabilities present",
            "Unprotected critical functions (selfdestruct, withdrawal)",
            "Significant access control issues",
            "High risk of fund loss",
        ),
        risk="Critical Risk",
        color="#DC2626",
        recommendation=(
            "DO NOT DEPLOY. Critical fixes required immediately. "
            "Complete security audit recommended."
        ),
    ),
    TrustLevel.HIGH_RISK: TrustLevelDefinition(
        level=TrustLevel.HIGH_RISK,
        name="High Risk",
        description=(
            "Contract contains high-severity vulnerabilities that could lead to "
            "significant issues."
        ),
        criteria=(
            "No Critical vulnerabilities",
            "One or more High severity vulnerabilities",
            "Unchecked external calls",
            "Potential for unauthorized access",
            "Integer overflow/underflow risks",
        ),
        risk="High Risk",
        color="#F59E0B",
        recommendation=(
            "Deployment not recommended. Address all high severity issues "
            "before deployment."
        ),
    ),
    TrustLevel.MEDIUM_RISK: TrustLevelDefinition(
        level=TrustLevel.MEDIUM_RISK,
        name="Medium Risk",
        description=(
            "Contract has medium-severity issues that should be addressed but do "
            "not pose immediate critical risk."
        ),
        criteria=(
            "No Critical or High severity vulnerabilities",
            "One or more Medium severity issues",
            "Outdated compiler version",
            "Floating pragma",
            "Minor access control improvements needed",
        ),
        risk="Medium Risk",
        color="#EAB308",
        recommendation=(
            "Address medium severity issues before production deployment. "
            "Recommended for testnet."
        ),
    ),
    TrustLevel.LOW_RISK: TrustLevelDefinition(
        level=TrustLevel.LOW_RISK,
        name="Low Risk",
        description=(
            "Contract follows most best practices with only minor informational "
            "findings."
        ),
        criteria=(
            "No Critical, High, or Medium vulnerabilities",
            "Only Low severity or informational findings",
            "Good security practices followed",
            "Minor code quality improvements possible",
            "Proper access controls in place",
        ),
        risk="Low Risk",
        color="#22C55E",
        recommendation=(
            "Generally safe for deployment. Consider addressing low severity "
            "findings for optimization."
        ),
    ),
    TrustLevel.SECURE: TrustLevelDefinition(
        level=TrustLevel.SECURE,
        name="Secure",
        description=(
            "Contract demonstrates excellent security practices with no "
            "significant vulnerabilities."
        ),
        criteria=(
            "No vulnerabilities detected",
            "Follows all security best practices",
            "Proper access controls implemented",
            "Reentrancy protection in place",
            "Safe arithmetic operations",
            "Modern compiler version",
            "Well-structured and maintainable code",
        ),
        risk="Secure",
        color="#10B981",
        recommendation=(
            "Safe for production deployment. Continue monitoring for new "
            "vulnerability patterns."
        ),
    ),
})
