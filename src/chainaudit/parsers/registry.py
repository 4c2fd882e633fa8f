"""Extractor registry: selects a structural extractor by dialect.

The ``ExtractorRegistry`` maps each ``Dialect`` to one
``StructuralExtractor`` instance. ``default_registry()`` pre-registers
the built-in extractors; custom extractors can replace them through
``register()``, which is how tests inject a failing extractor.

``extractor_for(dialect)`` is the convenience used by the static
analyzer. It shares one default registry per process, which is safe
because extractors keep no per-call state.
"""

from __future__ import annotations

from functools import lru_cache

from chainaudit.parsers.base import Dialect, StructuralExtractor
from chainaudit.parsers.line_extractor import CairoExtractor, VyperExtractor
from chainaudit.parsers.solidity import SolidityExtractor


class ExtractorRegistry:
    """Registry of structural extractors keyed by dialect.

    Attributes:
        extractors: Mapping of dialect to its registered extractor.
    """

    def __init__(self) -> None:
        self.extractors: dict[Dialect, StructuralExtractor] = {}

    def register(self, extractor: StructuralExtractor) -> None:
        """Register ``extractor`` for its dialect, replacing any previous one."""
        self.extractors[extractor.dialect] = extractor

    def get(self, dialect: Dialect) -> StructuralExtractor:
        """Return the extractor for ``dialect``.

        Raises:
            KeyError: If no extractor is registered for the dialect.
        """
        return self.extractors[dialect]


def default_registry() -> ExtractorRegistry:
    """Create an ExtractorRegistry pre-loaded with the built-in extractors.

    1. ``SolidityExtractor`` -- tree-sitter syntax-tree walk
    2. ``CairoExtractor`` -- line/regex scanning
    3. ``VyperExtractor`` -- line/regex scanning
    """
    registry = ExtractorRegistry()
    registry.register(SolidityExtractor())
    registry.register(CairoExtractor())
    registry.register(VyperExtractor())
    return registry


@lru_cache(maxsize=1)
def _shared_registry() -> ExtractorRegistry:
    return default_registry()


def extractor_for(dialect: Dialect) -> StructuralExtractor:
    """Return the shared built-in extractor for ``dialect``."""
    return _shared_registry().get(dialect)
