"""Tests for the SWC, CSR and SCSVS v2 reference registries.

Verifies:
    - Registry sizes and identifier uniqueness.
    - Lookup by id, severity, CWE, category and level.
    - Every cross-reference made by a detector resolves.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from chainaudit.core.analyzer import CAIRO_PATTERNS, SOLIDITY_PATTERNS, VYPER_PATTERNS
from chainaudit.core.severity import Severity
from chainaudit.standards import (
    CAIRO_SECURITY_REGISTRY,
    SCSVS_V2_CONTROLS,
    SWC_REGISTRY,
    all_categories,
    all_csr_entries,
    all_swc_entries,
    controls_by_category,
    controls_by_level,
    csr_by_severity,
    get_control_by_id,
    get_csr_by_id,
    get_swc_by_id,
    swc_by_cwe,
    swc_by_severity,
    swc_reference_url,
)

ALL_DETECTORS = SOLIDITY_PATTERNS + CAIRO_PATTERNS + VYPER_PATTERNS


class TestSwcRegistry:
    """Tests for the SWC weakness registry."""

    def test_registry_covers_swc_100_to_136(self) -> None:
        """All 37 identifiers SWC-100..SWC-136 are present."""
        ids = [entry.id for entry in all_swc_entries()]
        assert ids == [f"SWC-{n}" for n in range(100, 137)]
        assert len(SWC_REGISTRY) == 37

    def test_lookup_reentrancy(self) -> None:
        """SWC-107 resolves to the reentrancy entry."""
        entry = get_swc_by_id("SWC-107")
        assert entry is not None
        assert entry.title == "Reentrancy"
        assert entry.severity == Severity.CRITICAL
        assert "CWE-841" in entry.cwe_ids

    def test_unknown_id_returns_none(self) -> None:
        """Lookup failure is non-fatal."""
        assert get_swc_by_id("SWC-999") is None
        assert get_swc_by_id("") is None

    def test_every_entry_references_its_page(self) -> None:
        """Each SWC entry links to its registry page."""
        for entry in all_swc_entries():
            assert entry.references == (swc_reference_url(entry.id),)

    def test_reference_url_format(self) -> None:
        assert swc_reference_url("SWC-101") == "https://swcregistry.io/docs/SWC-101"

    def test_filter_by_severity(self) -> None:
        """Severity filter returns only entries at that severity."""
        critical = swc_by_severity(Severity.CRITICAL)
        assert critical
        assert all(entry.severity == Severity.CRITICAL for entry in critical)

    def test_filter_by_cwe(self) -> None:
        assert [e.id for e in swc_by_cwe("CWE-841")] == ["SWC-107"]

    def test_entries_are_frozen(self) -> None:
        entry = get_swc_by_id("SWC-100")
        assert entry is not None
        with pytest.raises(FrozenInstanceError):
            entry.title = "changed"  # type: ignore[misc]


class TestCairoSecurityRegistry:
    """Tests for the Cairo Security Registry."""

    def test_registry_has_twenty_entries(self) -> None:
        ids = [entry.id for entry in all_csr_entries()]
        assert ids == [f"CSR-{n:03d}" for n in range(1, 21)]
        assert len(CAIRO_SECURITY_REGISTRY) == 20

    def test_lookup_access_control(self) -> None:
        entry = get_csr_by_id("CSR-004")
        assert entry is not None
        assert entry.title == "Missing Access Control"
        assert entry.severity == Severity.CRITICAL

    def test_unknown_id_returns_none(self) -> None:
        assert get_csr_by_id("CSR-404") is None

    def test_filter_by_severity(self) -> None:
        for entry in csr_by_severity(Severity.HIGH):
            assert entry.severity == Severity.HIGH


class TestScsvsControls:
    """Tests for the SCSVS v2 control list."""

    def test_control_count(self) -> None:
        assert len(SCSVS_V2_CONTROLS) == 45

    def test_ids_are_unique(self) -> None:
        ids = [control.id for control in SCSVS_V2_CONTROLS]
        assert len(ids) == len(set(ids))

    def test_lookup_by_id(self) -> None:
        control = get_control_by_id("V6.1")
        assert control is not None
        assert control.category == "External Calls"

    def test_unknown_control_returns_none(self) -> None:
        assert get_control_by_id("V99.9") is None

    def test_categories_in_first_seen_order(self) -> None:
        categories = all_categories()
        assert categories[0] == "Architecture"
        assert len(categories) == len(set(categories)) == 15

    def test_controls_by_category(self) -> None:
        controls = controls_by_category("Access Control")
        assert len(controls) == 4
        assert all(c.category == "Access Control" for c in controls)

    def test_controls_by_level(self) -> None:
        for level in (1, 2, 3):
            assert all(c.level == level for c in controls_by_level(level))
        assert sum(len(controls_by_level(level)) for level in (1, 2, 3)) == 45


class TestDetectorCrossReferences:
    """Every registry id a detector names resolves in its registry."""

    @pytest.mark.parametrize("detector", ALL_DETECTORS, ids=lambda d: d.id)
    def test_cross_references_resolve(self, detector) -> None:
        if detector.swc_id:
            assert get_swc_by_id(detector.swc_id) is not None
        if detector.csr_id:
            assert get_csr_by_id(detector.csr_id) is not None
        for control_id in detector.scsv_ids:
            assert get_control_by_id(control_id) is not None
