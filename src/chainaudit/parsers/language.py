"""Source dialect detection.

Decides which pattern library applies to a piece of contract source. A
recognised file extension (``.sol``, ``.vy``, ``.cairo``) is
authoritative. Otherwise each dialect is scored by weighted keyword
evidence and the highest score wins; a score of 30 or less is not enough
evidence and yields ``"unknown"``.

Ties resolve in the order Solidity, Vyper, Cairo.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from chainaudit.parsers.base import Dialect

UNKNOWN = "unknown"

# A dialect is reported only above this score.
_MIN_CONFIDENCE = 30

_EXTENSIONS: dict[str, Dialect] = {
    ".sol": Dialect.SOLIDITY,
    ".vy": Dialect.VYPER,
    ".cairo": Dialect.CAIRO,
}

_DISPLAY_NAMES: dict[str, str] = {
    Dialect.SOLIDITY.value: "Solidity",
    Dialect.VYPER.value: "Vyper",
    Dialect.CAIRO.value: "Cairo",
}


@dataclass(frozen=True)
class LanguageDetection:
    """Outcome of dialect detection.

    Attributes:
        language: ``"solidity"``, ``"vyper"``, ``"cairo"`` or ``"unknown"``.
        confidence: Accumulated evidence score (not capped at 100).
        version: Compiler version or dialect generation, when declared.
    """

    language: str
    confidence: int
    version: str | None = None

    @property
    def dialect(self) -> Dialect | None:
        """The detected ``Dialect``, or None when unknown."""
        if self.language == UNKNOWN:
            return None
        return Dialect(self.language)


# ---------------------------------------------------------------------------
# Evidence tables: (pattern, weight)
# ---------------------------------------------------------------------------

_I = re.IGNORECASE

_SOLIDITY_EVIDENCE: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"pragma\s+solidity", _I), 40),
    (re.compile(r"\bcontract\s+\w+", _I), 20),
    (re.compile(r"\bmapping\s*\(", _I), 10),
    (re.compile(r"\bmodifier\s+\w+", _I), 10),
    (re.compile(r"\bmsg\.sender\b", _I), 5),
    (re.compile(r"\bpayable\b", _I), 5),
    (re.compile(r"\bfunction\s+\w+.*\breturns\b", _I), 10),
)
_SOLIDITY_VERSION = re.compile(r"pragma\s+solidity\s+\^?(\d+\.\d+\.\d+)")

_VYPER_VERSION = re.compile(r"#\s*@version\s+\^?(\d+\.\d+\.\d+)", _I)
_VYPER_EVIDENCE: tuple[tuple[re.Pattern[str], int], ...] = (
    (_VYPER_VERSION, 40),
    (re.compile(r"@external\b", _I), 15),
    (re.compile(r"@internal\b", _I), 10),
    (re.compile(r"@view\b", _I), 10),
    (re.compile(r"@pure\b", _I), 10),
    (re.compile(r"@payable\b", _I), 10),
    (re.compile(r"def\s+\w+\s*\(", _I), 10),
    (re.compile(r":\s*(?:public|private)\(", _I), 10),
    (re.compile(r"event\s+\w+:", _I), 5),
    (re.compile(r"implements:\s*\w+", _I), 10),
    (re.compile(r"^[ \t]+(?:def|if|for|while)\s", re.MULTILINE), 5),
)

_CAIRO_0_MARKER = re.compile(r"%lang\s+starknet", _I)
_CAIRO_1_MARKER = re.compile(r"#\[starknet::contract\]", _I)
_CAIRO_EVIDENCE: tuple[tuple[re.Pattern[str], int], ...] = (
    (_CAIRO_0_MARKER, 40),
    (_CAIRO_1_MARKER, 40),
    (re.compile(r"@external\b", _I), 10),
    (re.compile(r"@view\b", _I), 10),
    (re.compile(r"@storage_var\b", _I), 15),
    (re.compile(r"@constructor\b", _I), 10),
    (re.compile(r"@event\b", _I), 5),
    (re.compile(r"\bfelt\b", _I), 15),
    (re.compile(r"\bu256\b", _I), 10),
    (re.compile(r"\blet\s+\w+\s*=", _I), 5),
    (re.compile(r"\buse\s+\w+", _I), 10),
    (re.compile(r"\bimpl\s+\w+", _I), 10),
    (re.compile(r"\bfn\s+\w+", _I), 10),
)


def _score(code: str, evidence: tuple[tuple[re.Pattern[str], int], ...]) -> int:
    return sum(weight for pattern, weight in evidence if pattern.search(code))


def _detect_solidity(code: str) -> LanguageDetection:
    match = _SOLIDITY_VERSION.search(code)
    return _result(
        Dialect.SOLIDITY, _score(code, _SOLIDITY_EVIDENCE),
        match.group(1) if match else None,
    )


def _detect_vyper(code: str) -> LanguageDetection:
    match = _VYPER_VERSION.search(code)
    return _result(
        Dialect.VYPER, _score(code, _VYPER_EVIDENCE),
        match.group(1) if match else None,
    )


def _detect_cairo(code: str) -> LanguageDetection:
    version = None
    if _CAIRO_1_MARKER.search(code):
        version = "1.x"
    elif _CAIRO_0_MARKER.search(code):
        version = "0.x"
    return _result(Dialect.CAIRO, _score(code, _CAIRO_EVIDENCE), version)


def _result(dialect: Dialect, confidence: int, version: str | None) -> LanguageDetection:
    language = dialect.value if confidence > _MIN_CONFIDENCE else UNKNOWN
    return LanguageDetection(language=language, confidence=confidence, version=version)


_DETECTORS = {
    Dialect.SOLIDITY: _detect_solidity,
    Dialect.VYPER: _detect_vyper,
    Dialect.CAIRO: _detect_cairo,
}


def detect_language(code: str, file_name: str | None = None) -> LanguageDetection:
    """Detect the dialect of ``code``.

    Args:
        code: Contract source text.
        file_name: Optional file name; a known extension decides the
            dialect outright.

    Returns:
        The ``LanguageDetection`` with the highest evidence score.
    """
    if file_name:
        lowered = file_name.lower()
        for extension, dialect in _EXTENSIONS.items():
            if lowered.endswith(extension):
                scored = _DETECTORS[dialect](code)
                return LanguageDetection(
                    language=dialect.value,
                    confidence=scored.confidence,
                    version=scored.version,
                )

    results = [detect(code) for detect in _DETECTORS.values()]
    # max() keeps the first of equal scores.
    return max(results, key=lambda result: result.confidence)


def language_display_name(language: str) -> str:
    """Return the human-readable name of a language code."""
    return _DISPLAY_NAMES.get(language, "Unknown")


def language_file_extension(language: str) -> str:
    """Return the canonical file extension of a language code."""
    for extension, dialect in _EXTENSIONS.items():
        if dialect.value == language:
            return extension
    return ".txt"
