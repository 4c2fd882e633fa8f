"""Scoring and classification of analysis results.

This package turns per-severity finding counts into a 0-100 security
score, a risk label and a five-level trust classification.

Submodules:
    models  -- SeverityCounts, RiskLevel, TrustLevel, TrustLevelDefinition,
               Classification
    levels  -- ETHTRUST_LEVELS static definitions
    engine  -- ScoringEngine and the standalone scoring functions
"""

from chainaudit.core.scoring.engine import (
    ScoringEngine,
    calculate_security_score,
    calculate_trust_level,
    risk_level,
    trust_level_definition,
)
from chainaudit.core.scoring.levels import ETHTRUST_LEVELS
from chainaudit.core.scoring.models import (
    Classification,
    RiskLevel,
    SeverityCounts,
    TrustLevel,
    TrustLevelDefinition,
)

__all__ = [
    "Classification",
    "ETHTRUST_LEVELS",
    "RiskLevel",
    "ScoringEngine",
    "SeverityCounts",
    "TrustLevel",
    "TrustLevelDefinition",
    "calculate_security_score",
    "calculate_trust_level",
    "risk_level",
    "trust_level_definition",
]
