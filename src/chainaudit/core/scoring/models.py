"""Scoring data models: severity counts, risk labels, trust levels.

Defines the data structures consumed and produced by the scoring engine:

- ``SeverityCounts`` -- per-severity finding counts, the engine's only input.
- ``RiskLevel`` -- discrete label derived from the 0-100 security score.
- ``TrustLevel`` -- EthTrust-style five-level classification (1 = worst).
- ``TrustLevelDefinition`` -- static descriptive data attached to a level.
- ``Classification`` -- the combined output of one scoring run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Iterable, Protocol

from chainaudit.core.severity import Severity


class _HasSeverity(Protocol):
    severity: Severity


# ---------------------------------------------------------------------------
# SeverityCounts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeverityCounts:
    """Number of findings at each severity level.

    Attributes:
        critical: Count of CRITICAL findings.
        high: Count of HIGH findings.
        medium: Count of MEDIUM findings.
        low: Count of LOW findings.
        info: Count of INFO findings.
    """

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0

    @property
    def total(self) -> int:
        """Sum of all buckets."""
        return self.critical + self.high + self.medium + self.low + self.info

    @classmethod
    def from_findings(cls, findings: Iterable[_HasSeverity]) -> SeverityCounts:
        """Count ``findings`` by severity."""
        buckets = {severity: 0 for severity in Severity}
        for finding in findings:
            buckets[finding.severity] += 1
        return cls(
            critical=buckets[Severity.CRITICAL],
            high=buckets[Severity.HIGH],
            medium=buckets[Severity.MEDIUM],
            low=buckets[Severity.LOW],
            info=buckets[Severity.INFO],
        )

    def validate(self) -> None:
        """Raise ValueError if any count is negative.

        Raises:
            ValueError: If a bucket holds a negative number.
        """
        for name in ("critical", "high", "medium", "low", "info"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"Count '{name}' must be non-negative, got {value}")

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "info": self.info,
            "total": self.total,
        }


# ---------------------------------------------------------------------------
# RiskLevel and TrustLevel
# ---------------------------------------------------------------------------


class RiskLevel(str, Enum):
    """Risk label derived from the security score."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    SECURE = "Secure"


# Upper bounds (exclusive) of each risk band, checked worst-first.
RISK_BANDS: tuple[tuple[int, RiskLevel], ...] = (
    (30, RiskLevel.CRITICAL),
    (50, RiskLevel.HIGH),
    (70, RiskLevel.MEDIUM),
    (90, RiskLevel.LOW),
)


class TrustLevel(IntEnum):
    """Five-level trust classification, 1 (unsafe) through 5 (secure).

    Unlike the score, the level ignores counts: it is decided by the most
    severe finding present.
    """

    CRITICAL_UNSAFE = 1
    HIGH_RISK = 2
    MEDIUM_RISK = 3
    LOW_RISK = 4
    SECURE = 5


@dataclass(frozen=True)
class TrustLevelDefinition:
    """Static descriptive data for one trust level.

    Attributes:
        level: The level described.
        name: Display name (e.g. ``"Critical - Unsafe"``).
        description: One-sentence summary of the level.
        criteria: Conditions that characterize contracts at this level.
        risk: Risk category label (e.g. ``"Critical Risk"``).
        color: Display color as a hex string.
        recommendation: Deployment guidance for this level.
    """

    level: TrustLevel
    name: str
    description: str
    criteria: tuple[str, ...]
    risk: str
    color: str
    recommendation: str


@dataclass(frozen=True)
class Classification:
    """Result of one scoring run.

    Attributes:
        score: Security score in [0, 100].
        risk_level: Label derived from ``score``.
        trust_level: Level derived from the severities present.
        definition: Static data for ``trust_level``.
    """

    score: int
    risk_level: RiskLevel
    trust_level: TrustLevel
    definition: TrustLevelDefinition

    def to_dict(self) -> dict[str, Any]:
        return {
            "securityScore": self.score,
            "riskLevel": self.risk_level.value,
            "ethTrustLevel": int(self.trust_level),
            "ethTrustName": self.definition.name,
        }
