"""Security score and trust level computation.

Two independent mappings from severity counts:

Security Score:
    S = max(0, 100 - 20c - 10h - 5m - 2l)

    A weighted linear deduction. Info findings cost nothing. The score is
    monotonically non-increasing in each count.

Trust Level:
    A strict severity-presence cascade. The most severe non-empty bucket
    decides the level regardless of how many findings it holds, so one
    Critical finding outweighs any number of High ones.
"""

from __future__ import annotations

from chainaudit.core.scoring.levels import ETHTRUST_LEVELS
from chainaudit.core.scoring.models import (
    RISK_BANDS,
    Classification,
    RiskLevel,
    SeverityCounts,
    TrustLevel,
    TrustLevelDefinition,
)

# Points deducted per finding of each severity.
CRITICAL_WEIGHT = 20
HIGH_WEIGHT = 10
MEDIUM_WEIGHT = 5
LOW_WEIGHT = 2

MAX_SCORE = 100


def calculate_security_score(counts: SeverityCounts) -> int:
    """Compute the 0-100 security score for ``counts``.

    Args:
        counts: Findings per severity.

    Returns:
        ``max(0, 100 - 20c - 10h - 5m - 2l)`` as an integer.

    Raises:
        ValueError: If any count is negative.
    """
    counts.validate()
    deduction = (
        counts.critical * CRITICAL_WEIGHT
        + counts.high * HIGH_WEIGHT
        + counts.medium * MEDIUM_WEIGHT
        + counts.low * LOW_WEIGHT
    )
    return max(0, MAX_SCORE - deduction)


def risk_level(score: int) -> RiskLevel:
    """Map a security score to its risk label."""
    for bound, level in RISK_BANDS:
        if score < bound:
            return level
    return RiskLevel.SECURE


def calculate_trust_level(counts: SeverityCounts) -> TrustLevel:
    """Return the trust level decided by the most severe non-empty bucket."""
    if counts.critical > 0:
        return TrustLevel.CRITICAL_UNSAFE
    if counts.high > 0:
        return TrustLevel.HIGH_RISK
    if counts.medium > 0:
        return TrustLevel.MEDIUM_RISK
    if counts.low > 0 or counts.info > 0:
        return TrustLevel.LOW_RISK
    return TrustLevel.SECURE


def trust_level_definition(level: TrustLevel | int) -> TrustLevelDefinition:
    """Look up the static definition of ``level``.

    Raises:
        ValueError: If ``level`` is not in 1..5.
    """
    return ETHTRUST_LEVELS[TrustLevel(level)]


class ScoringEngine:
    """Derives score, risk label and trust level from severity counts.

    The engine is stateless and has no side effects; ``classify`` is a pure
    function of its input.

    Usage::

        engine = ScoringEngine()
        result = engine.classify(SeverityCounts(critical=1, high=2))
        assert result.score == 60
        assert result.trust_level == TrustLevel.CRITICAL_UNSAFE
    """

    def classify(self, counts: SeverityCounts) -> Classification:
        """Compute the full classification for ``counts``.

        Args:
            counts: Findings per severity.

        Returns:
            A ``Classification`` with score, risk label, trust level and
            the level's static definition.
        """
        score = calculate_security_score(counts)
        level = calculate_trust_level(counts)
        return Classification(
            score=score,
            risk_level=risk_level(score),
            trust_level=level,
            definition=ETHTRUST_LEVELS[level],
        )
