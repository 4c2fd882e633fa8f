"""Line-scanning structural extractors for Cairo and Vyper.

Neither dialect has a syntax-tree grammar in the dependency stack, so
these extractors recognise declarations one line at a time with regular
expressions. The results are heuristic: a declaration split across lines
or hidden behind a macro is simply not seen.
"""

from __future__ import annotations

import re

from chainaudit.parsers.base import (
    ContractStructure,
    Dialect,
    StructuralExtractor,
    append_unique,
)

# ---------------------------------------------------------------------------
# Cairo
# ---------------------------------------------------------------------------

_CAIRO_MODULE = re.compile(r"\bmod\s+(\w+)|\bcontract\s+(\w+)")
_CAIRO_FN = re.compile(r"\b(?:fn|func)\s+(\w+)\s*[(<{]")
_CAIRO_STORAGE = re.compile(r"(\w+)\s*:\s*(?:LegacyMap|Map)\b")
_CAIRO_EVENT_ATTR = re.compile(r"#\[event\]|@event\b")
_CAIRO_TYPE_DECL = re.compile(r"\b(?:enum|struct|func)\s+(\w+)")
_CAIRO_EVENT_STRUCT = re.compile(r"\bstruct\s+(\w+Event)\b")


class CairoExtractor(StructuralExtractor):
    """Regex extractor for Cairo 0 and Cairo 1 StarkNet contracts."""

    dialect = Dialect.CAIRO

    def _extract(self, code: str, structure: ContractStructure) -> None:
        event_pending = False
        for line in code.splitlines():
            if structure.name == "Unknown":
                module = _CAIRO_MODULE.search(line)
                if module:
                    structure.name = module.group(1) or module.group(2)

            fn = _CAIRO_FN.search(line)
            if fn:
                append_unique(structure.functions, fn.group(1))

            storage = _CAIRO_STORAGE.search(line)
            if storage:
                append_unique(structure.state_variables, storage.group(1))

            # An event attribute applies to the next type declaration.
            if _CAIRO_EVENT_ATTR.search(line):
                event_pending = True
            decl = _CAIRO_TYPE_DECL.search(line)
            if decl and event_pending:
                append_unique(structure.events, decl.group(1))
                event_pending = False
            else:
                named_event = _CAIRO_EVENT_STRUCT.search(line)
                if named_event:
                    append_unique(structure.events, named_event.group(1))


# ---------------------------------------------------------------------------
# Vyper
# ---------------------------------------------------------------------------

_VYPER_TITLE = re.compile(r"@title\s+(\w+)")
_VYPER_DEF = re.compile(r"^\s*def\s+(\w+)\s*\(")
_VYPER_EVENT = re.compile(r"^event\s+(\w+)\s*:")
_VYPER_STORAGE = re.compile(r"^(\w+)\s*:\s*(?!constant\b|immutable\b)\S")
_VYPER_KEYWORDS = frozenset({"implements", "uses", "initializes", "exports"})


class VyperExtractor(StructuralExtractor):
    """Regex extractor for Vyper contracts.

    Storage variables are recognised as unindented ``name: type``
    declarations; constants and immutables are not storage and are
    skipped.
    """

    dialect = Dialect.VYPER

    def _extract(self, code: str, structure: ContractStructure) -> None:
        for line in code.splitlines():
            if structure.name == "Unknown":
                title = _VYPER_TITLE.search(line)
                if title:
                    structure.name = title.group(1)

            fn = _VYPER_DEF.match(line)
            if fn:
                append_unique(structure.functions, fn.group(1))
                continue

            event = _VYPER_EVENT.match(line)
            if event:
                append_unique(structure.events, event.group(1))
                continue

            storage = _VYPER_STORAGE.match(line)
            if storage and storage.group(1) not in _VYPER_KEYWORDS:
                append_unique(structure.state_variables, storage.group(1))
