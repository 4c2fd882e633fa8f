"""Shared severity vocabulary for registries, detectors, findings and scoring.

Kept in its own module (rather than in ``core.analyzer.models``) because the
reference registries in ``chainaudit.standards`` are leaf data and must not
import the analysis engine.
"""

from __future__ import annotations

from enum import IntEnum


class Severity(IntEnum):
    """Five-level severity scale for findings and registry entries.

    The integer encoding enables direct comparison: INFO < LOW < MEDIUM <
    HIGH < CRITICAL. Registry entries only use LOW through CRITICAL; INFO
    exists for informational findings.
    """

    INFO = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Display form used on the wire: ``"Critical"``, ``"High"``, ..."""
        return self.name.capitalize()

    @property
    def impact(self) -> int:
        """Trust-impact rank: 1 for CRITICAL (worst) through 5 for INFO."""
        return 5 - int(self)

    @classmethod
    def from_label(cls, label: str) -> Severity:
        """Parse a severity label case-insensitively.

        Raises:
            ValueError: If the label names no severity.
        """
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {label!r}") from None


# Ordered worst-first, the order used for statistics and display.
SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)
