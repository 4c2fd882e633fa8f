"""Reference registries: weakness classifications and verification controls.

Three read-only tables, constructed once at import time:

- ``swc`` -- the SWC weakness registry for EVM dialects (Solidity, Vyper).
- ``csr`` -- the Cairo Security Registry for StarkNet contracts.
- ``scsvs`` -- the SCSVS v2 control list used for compliance.

Public API::

    from chainaudit.standards import get_swc_by_id, get_csr_by_id, SCSVS_V2_CONTROLS
"""

from __future__ import annotations

from chainaudit.standards.csr import (
    CAIRO_SECURITY_REGISTRY,
    all_csr_entries,
    csr_by_severity,
    get_csr_by_id,
)
from chainaudit.standards.models import ControlEntry, WeaknessEntry
from chainaudit.standards.scsvs import (
    SCSVS_V2_CONTROLS,
    all_categories,
    controls_by_category,
    controls_by_level,
    get_control_by_id,
)
from chainaudit.standards.swc import (
    SWC_REGISTRY,
    all_swc_entries,
    get_swc_by_id,
    swc_by_cwe,
    swc_by_severity,
    swc_reference_url,
)

__all__ = [
    "CAIRO_SECURITY_REGISTRY",
    "ControlEntry",
    "SCSVS_V2_CONTROLS",
    "SWC_REGISTRY",
    "WeaknessEntry",
    "all_categories",
    "all_csr_entries",
    "all_swc_entries",
    "controls_by_category",
    "controls_by_level",
    "csr_by_severity",
    "get_control_by_id",
    "get_csr_by_id",
    "get_swc_by_id",
    "swc_by_cwe",
    "swc_by_severity",
    "swc_reference_url",
]
