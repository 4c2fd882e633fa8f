"""Detector definitions and line matchers.

A ``DetectorDefinition`` pairs a trigger predicate over the whole source
("is this weakness present in the contract?") with a ``LineMatcher`` that
locates the lines to report. The matcher is a tagged variant: either a
``LiteralMatcher`` (plain substring) or a ``PatternMatcher`` (compiled
regex). Both expose ``matches(line)`` so the engine evaluates them
uniformly.

Detectors whose trigger reasons about whole blocks or multi-line
declarations also supply a ``locate`` function, which the engine uses in
place of the line matcher.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from chainaudit.core.severity import Severity


@dataclass(frozen=True)
class LiteralMatcher:
    """Matches lines containing ``text`` verbatim."""

    text: str

    def matches(self, line: str) -> bool:
        return self.text in line


@dataclass(frozen=True)
class PatternMatcher:
    """Matches lines on which ``pattern`` is found anywhere."""

    pattern: re.Pattern[str]

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


LineMatcher = Union[LiteralMatcher, PatternMatcher]


def literal(text: str) -> LiteralMatcher:
    """Build a ``LiteralMatcher``."""
    return LiteralMatcher(text)


def pattern(regex: str, flags: int = 0) -> PatternMatcher:
    """Compile ``regex`` into a ``PatternMatcher``."""
    return PatternMatcher(re.compile(regex, flags))


@dataclass(frozen=True)
class DetectorDefinition:
    """One detector of a pattern library.

    Attributes:
        id: Identifier, unique within its library.
        name: Human-readable name, reported as the finding name.
        severity: Severity of every finding this detector emits.
        description: Inline description used when no registry entry resolves.
        check: Trigger predicate over the full source text.
        matcher: Locates the lines to report once triggered.
        locate: Optional source-level locator returning 1-based line
            numbers; takes precedence over ``matcher``.
        swc_id: Optional SWC cross-reference.
        csr_id: Optional Cairo Security Registry cross-reference.
        scsv_ids: SCSVS v2 controls violated when this detector fires.
        exploitation: Inline exploitation narrative.
        recommendation: Inline remediation used when registries are silent.
    """

    id: str
    name: str
    severity: Severity
    description: str
    check: Callable[[str], bool]
    matcher: LineMatcher
    swc_id: str | None = None
    csr_id: str | None = None
    scsv_ids: tuple[str, ...] = ()
    exploitation: str = ""
    recommendation: str = ""
    locate: Callable[[str], list[int]] | None = None

    @property
    def type_code(self) -> str:
        """Dialect-neutral finding type: CSR id, else SWC id, else detector id."""
        return self.csr_id or self.swc_id or self.id
