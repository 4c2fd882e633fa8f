"""Base interface and data structures for structural extractors.

Every dialect has one ``StructuralExtractor``: a syntax-tree walk for
Solidity, line/regex scanning for Cairo and Vyper. The extractor recovers
best-effort structural metadata (contract name, functions, storage
variables, modifiers, events) that accompanies the findings in a static
analysis result.

The ``ContractStructure`` dataclass is the common representation across
dialects. Its ``extracted`` flag tells the analyzer whether extraction
succeeded; when it did not, the analyzer still runs every detector but
downgrades the confidence of what it reports.

Contract
--------
``StructuralExtractor.extract()`` never raises. Concrete extractors
implement ``_extract()`` and may raise anything; the base class catches,
logs, and returns whatever partial structure was collected.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Dialect(str, Enum):
    """Smart-contract source dialects with a pattern library."""

    SOLIDITY = "solidity"
    CAIRO = "cairo"
    VYPER = "vyper"


@dataclass
class ContractStructure:
    """Best-effort structural metadata for one contract source.

    Attributes:
        dialect: The dialect the source was extracted as.
        name: Contract or module name. ``"Unknown"`` when none was found.
        functions: Function names in source order.
        state_variables: Storage/state variable names in source order.
        modifiers: Modifier names (Solidity only).
        events: Event names in source order.
        extracted: False if extraction failed; the lists may then be
            partial or empty.
        error: Short description of the extraction failure, if any.
    """

    dialect: Dialect
    name: str = "Unknown"
    functions: list[str] = field(default_factory=list)
    state_variables: list[str] = field(default_factory=list)
    modifiers: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    extracted: bool = True
    error: str = ""


class StructuralExtractor(ABC):
    """Abstract base class for dialect-specific structural extractors.

    Subclasses implement ``_extract`` and fill the structure they are
    handed. Filling in place means names recovered before a failure are
    kept in the partial result.
    """

    dialect: Dialect

    def extract(self, code: str) -> ContractStructure:
        """Extract structural metadata from contract source.

        Never raises. On failure the returned structure has
        ``extracted=False`` and ``error`` set.

        Args:
            code: Raw contract source text.

        Returns:
            The (possibly partial) ``ContractStructure``.
        """
        structure = ContractStructure(dialect=self.dialect)
        try:
            self._extract(code, structure)
        except Exception as exc:
            logger.warning(
                "%s structural extraction failed, falling back to "
                "pattern-only detection: %s",
                self.dialect.value, exc,
            )
            structure.extracted = False
            structure.error = str(exc) or type(exc).__name__
        return structure

    @abstractmethod
    def _extract(self, code: str, structure: ContractStructure) -> None:
        """Populate ``structure`` from ``code``.

        May raise on malformed input; ``extract()`` handles recovery.
        """


def append_unique(items: list[str], value: str | None) -> None:
    """Append ``value`` to ``items`` unless it is empty or already present."""
    if value and value not in items:
        items.append(value)
