"""Pattern libraries: one ordered detector catalog per dialect.

- ``solidity``: the primary library, paired with the syntax-tree extractor.
- ``cairo``: StarkNet heuristics referencing the Cairo Security Registry.
- ``vyper``: the short list of weaknesses Vyper still admits.

The catalogs are module-level tuples built once at import and shared by
every analysis run.
"""

from chainaudit.core.analyzer.detectors import DetectorDefinition
from chainaudit.core.analyzer.patterns.cairo import CAIRO_PATTERNS
from chainaudit.core.analyzer.patterns.solidity import SOLIDITY_PATTERNS
from chainaudit.core.analyzer.patterns.vyper import VYPER_PATTERNS
from chainaudit.parsers.base import Dialect

_LIBRARIES: dict[Dialect, tuple[DetectorDefinition, ...]] = {
    Dialect.SOLIDITY: SOLIDITY_PATTERNS,
    Dialect.CAIRO: CAIRO_PATTERNS,
    Dialect.VYPER: VYPER_PATTERNS,
}


def patterns_for(dialect: Dialect) -> tuple[DetectorDefinition, ...]:
    """Return the ordered detector catalog of ``dialect``."""
    return _LIBRARIES[dialect]


__all__ = [
    "CAIRO_PATTERNS",
    "SOLIDITY_PATTERNS",
    "VYPER_PATTERNS",
    "patterns_for",
]
