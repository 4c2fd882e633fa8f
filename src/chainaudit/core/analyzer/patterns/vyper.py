"""Vyper pattern library.

Vyper removes whole classes of Solidity weaknesses (no inline assembly,
checked arithmetic, no function default visibility), so this catalog is
short. It concentrates on what the language still lets
through: unchecked ``raw_call``, reentrancy without ``@nonreentrant``,
block-data dependence, and compiler releases with known reentrancy-lock
bugs.

Function bodies are found by indentation: a ``def`` line opens a body
that lasts until the next line indented at or below the ``def``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from chainaudit.core.analyzer.detectors import DetectorDefinition, pattern
from chainaudit.core.analyzer.patterns._helpers import strip_hash_comments
from chainaudit.core.severity import Severity

# Releases whose @nonreentrant lock was miscompiled.
VULNERABLE_RELEASES = frozenset({"0.2.15", "0.2.16", "0.3.0"})

_VERSION_PRAGMA = re.compile(r"#\s*(?:@version|pragma\s+version)\s+([^\s]+)")
_DEF = re.compile(r"^(\s*)def\s+\w+")


def _vy(regex: str) -> Callable[[str], bool]:
    compiled = re.compile(regex, re.MULTILINE)

    def check(code: str) -> bool:
        return compiled.search(strip_hash_comments(code)) is not None

    return check


@dataclass(frozen=True)
class _Function:
    decorators: tuple[str, ...]
    lines: tuple[str, ...]


def _functions(code: str) -> list[_Function]:
    lines = strip_hash_comments(code).split("\n")
    functions = []
    for index, line in enumerate(lines):
        match = _DEF.match(line)
        if not match:
            continue
        indent = len(match.group(1))
        decorators = []
        back = index - 1
        while back >= 0 and lines[back].strip().startswith("@"):
            decorators.append(lines[back].strip())
            back -= 1
        end = index + 1
        while end < len(lines):
            current = lines[end]
            if current.strip() and len(current) - len(current.lstrip()) <= indent:
                break
            end += 1
        functions.append(_Function(tuple(decorators), tuple(lines[index:end])))
    return functions


def _declared_version(code: str) -> str | None:
    match = _VERSION_PRAGMA.search(code)
    return match.group(1) if match else None


def _vulnerable_compiler(code: str) -> bool:
    version = _declared_version(code)
    if version is None:
        return False
    return version.lstrip("^=~<>") in VULNERABLE_RELEASES


def _floating_version(code: str) -> bool:
    version = _declared_version(code)
    return version is not None and version[:1] in ("^", ">", "<", "~")


_VALUE_TRANSFER = re.compile(r"\braw_call\s*\([^)]*\bvalue\s*=|\bsend\s*\(")
_STORAGE_WRITE = re.compile(r"^\s*self\.\w+(?:\[[^\]]*\])*\s*(?:[-+*/]|<<|>>)?=(?!=)")


def _reentrancy(code: str) -> bool:
    """Value transfer followed by a storage write, without @nonreentrant."""
    for function in _functions(code):
        if any(d.startswith("@nonreentrant") for d in function.decorators):
            continue
        transfer_seen = False
        for line in function.lines[1:]:
            if transfer_seen and _STORAGE_WRITE.search(line):
                return True
            if _VALUE_TRANSFER.search(line):
                transfer_seen = True
    return False


_NON_REVERTING_CALL = re.compile(r"raw_call\s*\([^)]*revert_on_failure\s*=\s*False")
_CALL_TARGET = re.compile(r"^\s*(\w+)(?:\s*:\s*\w+)?\s*(?:,[^=]*)?=\s*$")


def _unchecked_raw_call(code: str) -> bool:
    """A non-reverting raw_call whose success flag is discarded or never checked."""
    src = strip_hash_comments(code)
    for match in _NON_REVERTING_CALL.finditer(src):
        line = src[src.rfind("\n", 0, match.start()) + 1:match.start()]
        target = _CALL_TARGET.match(line)
        if target is None:
            return True
        flag = re.escape(target.group(1))
        if not re.search(rf"\b(?:assert|if)\s+(?:not\s+)?{flag}\b", src):
            return True
    return False


def _unprotected_selfdestruct(code: str) -> bool:
    for function in _functions(code):
        body = "\n".join(function.lines)
        if re.search(r"\bselfdestruct\s*\(", body) and not re.search(
            r"assert\s+msg\.sender\s*==|assert\s+self\.\w+\s*==\s*msg\.sender", body
        ):
            return True
    return False


VYPER_PATTERNS: tuple[DetectorDefinition, ...] = (
    DetectorDefinition(
        id="vyper-reentrancy",
        name="Reentrancy Vulnerability",
        severity=Severity.CRITICAL,
        description=(
            "Ether is sent before storage is updated and the function has no "
            "@nonreentrant decorator."
        ),
        check=_reentrancy,
        matcher=pattern(r"\braw_call\s*\([^)]*\bvalue\s*=|\bsend\s*\("),
        swc_id="SWC-107",
        scsv_ids=("V6.1",),
        exploitation=(
            "The recipient re-enters the function from its default function before "
            "the balance is reduced."
        ),
        recommendation="Update storage before sending Ether and add @nonreentrant.",
    ),
    DetectorDefinition(
        id="vyper-vulnerable-compiler",
        name="Compiler With Broken Reentrancy Lock",
        severity=Severity.CRITICAL,
        description=(
            "Vyper 0.2.15, 0.2.16 and 0.3.0 miscompile @nonreentrant, allowing "
            "cross-function reentrancy."
        ),
        check=_vulnerable_compiler,
        matcher=pattern(r"#\s*(?:@version|pragma\s+version)"),
        swc_id="SWC-102",
        scsv_ids=("V15.1", "V6.1"),
        exploitation=(
            "Functions sharing a lock key can be re-entered, as in the July 2023 "
            "Curve pool exploits."
        ),
        recommendation="Recompile with Vyper 0.3.1 or later.",
    ),
    DetectorDefinition(
        id="vyper-unprotected-selfdestruct",
        name="Unprotected Selfdestruct",
        severity=Severity.CRITICAL,
        description="selfdestruct can be reached without checking msg.sender.",
        check=_unprotected_selfdestruct,
        matcher=pattern(r"\bselfdestruct\s*\("),
        swc_id="SWC-106",
        scsv_ids=("V2.1",),
        exploitation="Any account destroys the contract and collects its balance.",
        recommendation="Assert msg.sender is the owner before selfdestruct.",
    ),
    DetectorDefinition(
        id="vyper-unchecked-raw-call",
        name="Unchecked raw_call",
        severity=Severity.HIGH,
        description="raw_call with revert_on_failure=False whose success flag is not asserted.",
        check=_unchecked_raw_call,
        matcher=pattern(r"raw_call\s*\([^)]*revert_on_failure\s*=\s*False"),
        swc_id="SWC-104",
        scsv_ids=("V6.2",),
        exploitation="A failed call goes unnoticed and the contract proceeds as if it succeeded.",
        recommendation="Assert the success flag returned by raw_call.",
    ),
    DetectorDefinition(
        id="vyper-tx-origin",
        name="Authorization through tx.origin",
        severity=Severity.HIGH,
        description="tx.origin is compared against an address.",
        check=_vy(r"\btx\.origin\s*[!=]=|[!=]=\s*tx\.origin\b"),
        matcher=pattern(r"\btx\.origin\s*[!=]=|[!=]=\s*tx\.origin\b"),
        swc_id="SWC-115",
        scsv_ids=("V2.4",),
        exploitation="A contract the owner interacts with forwards the call and passes the check.",
        recommendation="Use msg.sender for authorization.",
    ),
    DetectorDefinition(
        id="vyper-weak-randomness",
        name="Weak Sources of Randomness",
        severity=Severity.HIGH,
        description="Block data is used as a source of randomness.",
        check=_vy(r"\bblock\.(?:prevrandao|difficulty)\b|keccak256\s*\([^)]*block\.(?:timestamp|number)"),
        matcher=pattern(r"\bblock\.(?:prevrandao|difficulty)\b|keccak256\s*\(.*block\.(?:timestamp|number)"),
        swc_id="SWC-120",
        scsv_ids=("V10.2",),
        exploitation="Validators or same-block contracts predict the value.",
        recommendation="Use a verifiable randomness source.",
    ),
    DetectorDefinition(
        id="vyper-timestamp-dependence",
        name="Block Timestamp Dependence",
        severity=Severity.MEDIUM,
        description="Control flow depends on block.timestamp.",
        check=_vy(r"\bblock\.timestamp\s*(?:[<>]=?|==|%)|(?:[<>]=?|==)\s*block\.timestamp\b"),
        matcher=pattern(r"\bblock\.timestamp\s*(?:[<>]=?|==|%)|(?:[<>]=?|==)\s*block\.timestamp\b"),
        swc_id="SWC-116",
        scsv_ids=("V10.1",),
        exploitation="Validators shift the timestamp to pass a deadline check.",
        recommendation="Tolerate timestamp drift in time comparisons.",
    ),
    DetectorDefinition(
        id="vyper-send",
        name="Message Call with Hardcoded Gas Amount",
        severity=Severity.LOW,
        description="send forwards a fixed 2300 gas stipend.",
        check=_vy(r"\bsend\s*\("),
        matcher=pattern(r"\bsend\s*\("),
        swc_id="SWC-134",
        scsv_ids=("V6.4",),
        exploitation="Recipients whose default function needs more gas cannot be paid.",
        recommendation="Use raw_call with value and check the result.",
    ),
    DetectorDefinition(
        id="vyper-unbounded-loop",
        name="DoS with Block Gas Limit",
        severity=Severity.MEDIUM,
        description="A loop iterates over a storage array whose bound may exceed the block gas limit.",
        check=_vy(r"^\s*for\s+\w+(?:\s*:\s*\w+)?\s+in\s+self\.\w+\s*:"),
        matcher=pattern(r"^\s*for\s+\w+(?:\s*:\s*\w+)?\s+in\s+self\.\w+\s*:"),
        swc_id="SWC-128",
        scsv_ids=("V5.1",),
        exploitation="Growing the array past the gas limit blocks the function.",
        recommendation="Bound the array length or paginate the loop.",
    ),
    DetectorDefinition(
        id="vyper-floating-pragma",
        name="Floating Pragma",
        severity=Severity.LOW,
        description="The version pragma admits several compiler releases.",
        check=_floating_version,
        matcher=pattern(r"#\s*(?:@version|pragma\s+version)\s+[\^><~]"),
        swc_id="SWC-103",
        scsv_ids=("V15.1",),
        exploitation="The contract is compiled with a release other than the tested one.",
        recommendation="Pin the exact compiler version.",
    ),
)
