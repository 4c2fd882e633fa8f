"""Cairo pattern library for StarkNet contracts.

Cairo has no syntax-tree parser in the stack, so every detector here is a
line heuristic: it scans a small window of lines after a declaration for
the guard it expects (an assertion, an ownership check, an event
emission). Windows are fixed-size, which keeps the detectors cheap and
predictable at the cost of missing guards placed far from the entry
point.

Each detector references the Cairo Security Registry (CSR) and, where an
EVM equivalent exists, the SWC registry.
"""

from __future__ import annotations

import re
from typing import Iterator

from chainaudit.core.analyzer.detectors import DetectorDefinition, pattern
from chainaudit.core.analyzer.patterns._helpers import searcher, strip_comments
from chainaudit.core.severity import Severity

_EXTERNAL_CALL = re.compile(r"call_contract|library_call")
_SENSITIVE_FN = r"\bfn\s+(?:transfer|withdraw|mint|burn|set_|update_)\w*"
_EXTERNAL_ATTR = re.compile(r"#\[(?:external|abi\(embed_v0\))")


def _lines(code: str) -> list[str]:
    return strip_comments(code).split("\n")


def _window(lines: list[str], start: int, size: int) -> Iterator[str]:
    return iter(lines[start:start + size])


def _external_functions(lines: list[str]) -> Iterator[int]:
    """Yield indexes of externally callable ``fn`` lines.

    Covers functions annotated ``#[external(v0)]`` and functions inside an
    impl block annotated ``#[abi(embed_v0)]``.
    """
    impl_depth = 0
    in_impl = pending_impl = False
    for index, line in enumerate(lines):
        if in_impl:
            impl_depth += line.count("{") - line.count("}")
            if re.search(r"\bfn\s+\w+", line):
                yield index
            if impl_depth <= 0 and "}" in line:
                in_impl = False
            continue
        if pending_impl and re.search(r"\bimpl\b", line):
            in_impl, pending_impl = True, False
            impl_depth = line.count("{") - line.count("}")
            continue
        if not _EXTERNAL_ATTR.search(line):
            continue
        following = index + 1
        while following < len(lines) and not lines[following].strip():
            following += 1
        if following >= len(lines):
            continue
        if re.search(r"\bimpl\b", lines[following]):
            pending_impl = True
        else:
            yield following


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


def _reentrancy(code: str) -> bool:
    """External call followed by a storage write within the same function."""
    in_function = external_call = False
    for line in _lines(code):
        if re.search(r"\bfn\s+\w+", line):
            in_function, external_call = True, False
        if not in_function:
            continue
        if _EXTERNAL_CALL.search(line):
            external_call = True
        if external_call and ".write(" in line:
            return True
    return False


def _unchecked_call(code: str) -> bool:
    lines = _lines(code)
    for index, line in enumerate(lines):
        if _EXTERNAL_CALL.search(line):
            window = lines[max(0, index - 3):index + 4]
            if not any(re.search(r"match\s+|\.unwrap\(|\.expect\(|assert|panic", w) for w in window):
                return True
    return False


def _felt_overflow(code: str) -> bool:
    return any(
        re.search(r":\s*felt252", line)
        and re.search(r"[-+*]", line)
        and not re.search(r"checked_(?:add|sub|mul)", line)
        for line in _lines(code)
    )


def _missing_access_control(code: str) -> bool:
    lines = _lines(code)
    for index in _external_functions(lines):
        if not re.search(_SENSITIVE_FN, lines[index]):
            continue
        if not any(
            re.search(r"only_owner|assert.*==.*get_caller_address|Ownable::|assert_only_\w+", line)
            for line in _window(lines, index, 15)
        ):
            return True
    return False


def _missing_zero_address(code: str) -> bool:
    lines = _lines(code)
    for index, line in enumerate(lines):
        if re.search(r"\bfn\s+\w+.*:\s*ContractAddress", line):
            if not any(
                re.search(r"assert|is_zero\(\)|is_non_zero\(\)|!=.*[Zz]ero", window_line)
                for window_line in _window(lines, index, 10)
            ):
                return True
    return False


def _timestamp_dependency(code: str) -> bool:
    src = strip_comments(code)
    return "get_block_timestamp" in src and re.search(r"(?:if|assert).*get_block_timestamp", src) is not None


def _unused_return(code: str) -> bool:
    return any(
        re.search(r"(?:call_contract|library_call)\w*\(", line)
        and not re.search(r"let\s+(?:mut\s+)?\w+.*=.*(?:call_contract|library_call)", line)
        for line in _lines(code)
    )


def _unsafe_conversion(code: str) -> bool:
    return any(
        ".into()" in line and ".try_into()" not in line and "felt252" in line
        for line in _lines(code)
    )


def _missing_event(code: str) -> bool:
    lines = _lines(code)
    for index in _external_functions(lines):
        if not re.search(r"\bfn\s+(?:transfer|mint|burn|withdraw|set_|update_)", lines[index]):
            continue
        if not any(
            re.search(r"\.emit\(|emit_event", line) for line in _window(lines, index, 25)
        ):
            return True
    return False


_STORAGE_VAR = re.compile(r"(\w+)\s*:\s*(?:LegacyMap|Map)\b")


def _storage_collision(code: str) -> bool:
    seen: set[str] = set()
    for line in _lines(code):
        match = _STORAGE_VAR.search(line)
        if match:
            if match.group(1) in seen:
                return True
            seen.add(match.group(1))
    return False


def _unvalidated_input(code: str) -> bool:
    lines = _lines(code)
    for index in _external_functions(lines):
        if not re.search(r"\bfn\s+\w+\s*\(.*:\s*u256", lines[index]):
            continue
        if not any(
            re.search(r"assert|require|is_zero|[<>]=?", line) and "->" not in line
            for line in _window(lines, index, 8)
        ):
            return True
    return False


def _missing_constructor_validation(code: str) -> bool:
    lines = _lines(code)
    for index, line in enumerate(lines):
        if "#[constructor]" in line:
            if not any(
                re.search(r"assert|is_zero|is_non_zero", window_line)
                for window_line in _window(lines, index, 10)
            ):
                return True
    return False


def _array_out_of_bounds(code: str) -> bool:
    return any(
        ".at(" in line and not re.search(r"(?:assert|if).*<.*\.len\(", line)
        for line in _lines(code)
    )


def _unchecked_math(code: str) -> bool:
    return any(
        re.search(r"let\s+\w+\s*=.*[-+*]", line)
        and re.search(r"felt252|u256", line)
        and not re.search(r"checked_(?:add|sub|mul|div)", line)
        for line in _lines(code)
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

CAIRO_PATTERNS: tuple[DetectorDefinition, ...] = (
    DetectorDefinition(
        id="cairo-reentrancy",
        name="Potential Reentrancy Vulnerability",
        severity=Severity.CRITICAL,
        description=(
            "External call detected before state changes. Follow "
            "checks-effects-interactions pattern."
        ),
        check=_reentrancy,
        matcher=pattern(r"call_contract|library_call"),
        swc_id="SWC-107",
        csr_id="CSR-001",
        scsv_ids=("V6.1",),
        recommendation=(
            "Follow checks-effects-interactions pattern. Update storage before "
            "external calls."
        ),
    ),
    DetectorDefinition(
        id="cairo-unchecked-call",
        name="Unchecked External Call",
        severity=Severity.HIGH,
        description="External contract call should be wrapped in error handling.",
        check=_unchecked_call,
        matcher=pattern(r"call_contract|library_call"),
        csr_id="CSR-002",
        scsv_ids=("V6.2",),
        recommendation=(
            "Wrap external calls in match statements or use .expect() for error "
            "handling."
        ),
    ),
    DetectorDefinition(
        id="cairo-integer-overflow",
        name="Potential Integer Overflow",
        severity=Severity.HIGH,
        description=(
            "Arithmetic operations on felt252 can overflow. Use checked arithmetic "
            "or u256."
        ),
        check=_felt_overflow,
        matcher=pattern(r"felt252.*[-+*]"),
        csr_id="CSR-003",
        scsv_ids=("V3.1",),
        recommendation=(
            "Use checked arithmetic operations or u256 type with proper bounds "
            "checking."
        ),
    ),
    DetectorDefinition(
        id="cairo-missing-access-control",
        name="Missing Access Control",
        severity=Severity.CRITICAL,
        description=(
            "External function lacks access control. Add ownership or permission "
            "checks."
        ),
        check=_missing_access_control,
        matcher=pattern(_SENSITIVE_FN),
        csr_id="CSR-004",
        scsv_ids=("V2.1",),
        recommendation="Implement Ownable pattern or use access control modifiers.",
    ),
    DetectorDefinition(
        id="cairo-zero-address-check",
        name="Missing Zero Address Check",
        severity=Severity.MEDIUM,
        description="ContractAddress parameter should be validated against zero address.",
        check=_missing_zero_address,
        matcher=pattern(r"\bfn\s+\w+.*:\s*ContractAddress"),
        csr_id="CSR-005",
        scsv_ids=("V4.2",),
        recommendation=(
            "Validate ContractAddress parameters using is_non_zero() or assertions."
        ),
    ),
    DetectorDefinition(
        id="cairo-timestamp-dependency",
        name="Timestamp Dependence",
        severity=Severity.MEDIUM,
        description="Using block timestamp for critical logic can be manipulated.",
        check=_timestamp_dependency,
        matcher=pattern(r"get_block_timestamp"),
        swc_id="SWC-116",
        csr_id="CSR-006",
        scsv_ids=("V10.1",),
        recommendation=(
            "Avoid relying on block timestamp for critical logic or add sufficient "
            "tolerance."
        ),
    ),
    DetectorDefinition(
        id="cairo-unused-return",
        name="Unused Return Value",
        severity=Severity.MEDIUM,
        description="Function return value is ignored. This may hide errors.",
        check=_unused_return,
        matcher=pattern(r"(?:call_contract|library_call)\w*\("),
        csr_id="CSR-015",
        scsv_ids=("V6.2",),
        recommendation="Always capture and validate return values from external calls.",
    ),
    DetectorDefinition(
        id="cairo-unsafe-felt-conversion",
        name="Unsafe felt252 Conversion",
        severity=Severity.HIGH,
        description=(
            "Converting between felt252 and other types without validation can be "
            "dangerous."
        ),
        check=_unsafe_conversion,
        matcher=pattern(r"\.into\(\)"),
        csr_id="CSR-008",
        scsv_ids=("V3.3",),
        recommendation="Use try_into() with proper error handling instead of into().",
    ),
    DetectorDefinition(
        id="cairo-missing-event",
        name="Missing Event Emission",
        severity=Severity.LOW,
        description="Critical state changes should emit events for transparency.",
        check=_missing_event,
        matcher=pattern(r"\bfn\s+(?:transfer|mint|burn|withdraw|set_|update_)\w*"),
        csr_id="CSR-010",
        scsv_ids=("V9.1",),
        recommendation="Emit events for all state-changing operations for transparency.",
    ),
    DetectorDefinition(
        id="cairo-storage-collision",
        name="Potential Storage Collision",
        severity=Severity.HIGH,
        description="Storage variables should use unique keys to avoid collisions.",
        check=_storage_collision,
        matcher=pattern(r"\w+\s*:\s*(?:LegacyMap|Map)\b"),
        csr_id="CSR-007",
        scsv_ids=("V5.2",),
        recommendation="Use unique storage variable names and proper namespacing.",
    ),
    DetectorDefinition(
        id="cairo-unvalidated-input",
        name="Unvalidated Input Parameters",
        severity=Severity.MEDIUM,
        description="Input parameters should be validated before use.",
        check=_unvalidated_input,
        matcher=pattern(r"\bfn\s+\w+\s*\(.*:\s*u256"),
        csr_id="CSR-012",
        scsv_ids=("V4.1",),
        recommendation="Validate all input parameters with assertions or require checks.",
    ),
    DetectorDefinition(
        id="cairo-dangerous-delegate-call",
        name="Dangerous Library Call",
        severity=Severity.CRITICAL,
        description="library_call should only be used with trusted contracts.",
        check=searcher(r"library_call"),
        matcher=pattern(r"library_call"),
        swc_id="SWC-112",
        csr_id="CSR-009",
        scsv_ids=("V6.3",),
        recommendation=(
            "Only use library_call with thoroughly audited and trusted contracts."
        ),
    ),
    DetectorDefinition(
        id="cairo-missing-constructor",
        name="Missing Constructor Validation",
        severity=Severity.MEDIUM,
        description="Constructor should validate initial parameters.",
        check=_missing_constructor_validation,
        matcher=pattern(r"#\[constructor\]"),
        csr_id="CSR-013",
        scsv_ids=("V4.1",),
        recommendation="Validate all constructor parameters to ensure safe initialization.",
    ),
    DetectorDefinition(
        id="cairo-array-out-of-bounds",
        name="Potential Array Out of Bounds",
        severity=Severity.HIGH,
        description="Array access should be bounds-checked.",
        check=_array_out_of_bounds,
        matcher=pattern(r"\.at\("),
        csr_id="CSR-011",
        scsv_ids=("V4.3",),
        recommendation="Always check array bounds before accessing elements.",
    ),
    DetectorDefinition(
        id="cairo-unchecked-math",
        name="Unchecked Arithmetic",
        severity=Severity.HIGH,
        description="Use checked arithmetic operations or explicitly handle overflow.",
        check=_unchecked_math,
        matcher=pattern(r"let\s+\w+\s*=.*[-+*]"),
        csr_id="CSR-014",
        scsv_ids=("V3.1",),
        recommendation="Use checked arithmetic or explicitly handle overflow/underflow cases.",
    ),
)
