"""Record types for the reference registries.

``WeaknessEntry`` is one row of a weakness classification table (the SWC
registry for EVM dialects, the Cairo Security Registry for StarkNet).
``ControlEntry`` is one row of the SCSVS v2 verification-standard list.

Both are frozen: the registries are built once at import time and shared
read-only by every analysis run.
"""

from __future__ import annotations

from dataclasses import dataclass

from chainaudit.core.severity import Severity


@dataclass(frozen=True)
class WeaknessEntry:
    """A single weakness class with remediation guidance.

    Attributes:
        id: Globally unique identifier (e.g. ``"SWC-107"``, ``"CSR-001"``).
        title: Short human-readable name of the weakness.
        description: Free-text explanation of the weakness.
        remediation: Free-text guidance on how to fix it.
        severity: Registry-assigned severity (LOW through CRITICAL).
        cwe_ids: Cross-classification identifiers (``"CWE-841"``, ...).
        references: Reference URLs for further reading.
    """

    id: str
    title: str
    description: str
    remediation: str
    severity: Severity
    cwe_ids: tuple[str, ...] = ()
    references: tuple[str, ...] = ()


@dataclass(frozen=True)
class ControlEntry:
    """A single SCSVS v2 verification control.

    Attributes:
        id: Control identifier (e.g. ``"V6.1"``).
        category: Grouping label (e.g. ``"External Calls"``).
        title: Short control title.
        level: Applicability level, 1 (baseline) through 3 (high assurance).
        description: What the control requires.
        verification: How a reviewer verifies the control.
    """

    id: str
    category: str
    title: str
    level: int
    description: str
    verification: str
