"""Solidity pattern library.

Ordered detector catalog for the primary dialect. Every detector pairs a
trigger predicate over the whole contract with a line matcher that locates
the lines to report. Triggers look at comment-free text; a few of them
(reentrancy, unprotected selfdestruct, missing zero-address checks) work
per function block so that a guard in one function does not hide a
missing guard in another. Reentrancy and missing visibility also locate
their own lines, so only the offending call or declaration is reported.

Detectors are cross-referenced to the SWC registry where a matching
weakness class exists, and to the SCSVS v2 controls they violate. The
catalog is ordered roughly by severity, which is also the order findings
are discovered and therefore the order the AI enhancement step sees them.

References
----------
.. [SWC] Smart Contract Weakness Classification, https://swcregistry.io
.. [SCSVS] Smart Contract Security Verification Standard v2.
"""

from __future__ import annotations

import re

from chainaudit.core.analyzer.detectors import DetectorDefinition, literal, pattern
from chainaudit.core.analyzer.patterns._helpers import (
    contract_blocks,
    function_blocks,
    is_floating_pragma,
    line_number_at,
    loop_blocks,
    searcher,
    solidity_pragma,
    solidity_version,
    strip_comments,
)
from chainaudit.core.severity import Severity

# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------

_VALUE_CALL = r"\.call\s*\{[^}]*\bvalue\s*:|\.call\.value\s*\("
_VISIBILITY = re.compile(r"\b(?:public|private|internal|external)\b")
_NON_REENTRANT = re.compile(r"\bnonReentrant\b|\bnoReentrancy\b|\block\b")
_STATE_WRITE = re.compile(
    r"^\s*(?:\w+(?:\[[^\]]*\])+(?:\.\w+)*|\w+(?:\.\w+)*)\s*(?:[-+*/%|&^]|<<|>>)?=(?!=)"
    r"|^\s*delete\s+\w+"
    r"|\b\w+(?:\[[^\]]*\])*\s*(?:\+\+|--)"
)
_GUARD_HEADER = re.compile(r"\bonly\w*\b|\bauth\b|\brequiresAuth\b|\bwhenOwner\b")
_GUARD_BODY = re.compile(
    r"msg\.sender\s*[!=]=|[!=]=\s*msg\.sender|_checkOwner\s*\(|_checkRole\s*\("
    r"|hasRole\s*\(|isOwner\s*\(|_onlyOwner\s*\("
)
_PUBLIC_ENTRY = re.compile(r"\b(?:public|external)\b")
_READ_ONLY = re.compile(r"\b(?:view|pure)\b")
_EXTERNAL_TRANSFER = re.compile(r"\.(?:transfer|send)\s*\(|" + _VALUE_CALL)


def _is_guarded(header: str, body: str) -> bool:
    return bool(_GUARD_HEADER.search(header) or _GUARD_BODY.search(body))


# ---------------------------------------------------------------------------
# Block-level triggers
# ---------------------------------------------------------------------------


def _reentrant_calls(code: str) -> list[int]:
    """Lines of value transfers followed by a state write in the same function."""
    located: list[int] = []
    for block in function_blocks(code):
        if _NON_REENTRANT.search(block.header):
            continue
        pending: list[int] = []
        for offset, line in enumerate(block.lines[1:], start=1):
            if pending and _STATE_WRITE.search(line):
                located.extend(pending)
                pending = []
            if _EXTERNAL_TRANSFER.search(line):
                pending.append(block.start + offset)
    return located


def _reentrancy(code: str) -> bool:
    return bool(_reentrant_calls(code))


_SIGNATURE = re.compile(r"\bfunction\s+\w+\s*\([^)]*\)[^{;]*")


def _unscoped_functions(code: str) -> list[int]:
    """Declaration lines of functions whose full header names no visibility."""
    stripped = strip_comments(code)
    return [
        line_number_at(stripped, match.start())
        for match in _SIGNATURE.finditer(stripped)
        if not _VISIBILITY.search(match.group(0))
    ]


def _missing_visibility(code: str) -> bool:
    return bool(_unscoped_functions(code))


def _state_default_visibility(code: str) -> bool:
    for contract in contract_blocks(code):
        for _, _, qualifiers in contract.state_variables():
            if not re.search(r"\b(?:public|private|internal|constant|immutable)\b", qualifiers):
                return True
    return False


_SELFDESTRUCT = re.compile(r"\b(?:selfdestruct|suicide)\s*\(")


def _unprotected_selfdestruct(code: str) -> bool:
    return any(
        _SELFDESTRUCT.search(block.body) and not _is_guarded(block.header, block.body)
        for block in function_blocks(code)
    )


def _unprotected_withdrawal(code: str) -> bool:
    """Public, state-changing function sending the whole balance, unguarded."""
    for block in function_blocks(code):
        if not _PUBLIC_ENTRY.search(block.header) or _READ_ONLY.search(block.header):
            continue
        body = block.body
        if (
            re.search(r"address\s*\(\s*this\s*\)\.balance", body)
            and _EXTERNAL_TRANSFER.search(body)
            and not _is_guarded(block.header, body)
        ):
            return True
    return False


def _pre_080_unchecked_math(code: str) -> bool:
    version = solidity_version(code)
    if version is None or version >= (0, 8, 0) or "SafeMath" in code:
        return False
    return re.search(r"(?:\+=|-=|\*=)|=[^;=]*\b\w+\s*[+*-]\s*\w", strip_comments(code)) is not None


def _outdated_compiler(code: str) -> bool:
    version = solidity_version(code)
    return version is not None and version < (0, 8, 0)


def _floating_pragma(code: str) -> bool:
    constraint = solidity_pragma(code)
    return constraint is not None and is_floating_pragma(constraint)


_MALLEABILITY_BOUND = re.compile(
    r"0x7fffffffffffffffffffffffffffffff5d576e7357a4501ddfe92f46681b20a0", re.IGNORECASE
)
_ECRECOVER = re.compile(r"\becrecover\s*\(")


def _signature_malleability(code: str) -> bool:
    src = strip_comments(code)
    return bool(_ECRECOVER.search(src)) and not _MALLEABILITY_BOUND.search(src)


def _ecrecover_zero_unchecked(code: str) -> bool:
    src = strip_comments(code)
    return bool(_ECRECOVER.search(src)) and not re.search(r"[!=]=\s*address\s*\(\s*0\s*\)", src)


def _missing_replay_protection(code: str) -> bool:
    src = strip_comments(code)
    if not re.search(r"\becrecover\s*\(|\.recover\s*\(", src):
        return False
    return not re.search(r"nonce", src, re.IGNORECASE)


def _hash_collision(code: str) -> bool:
    src = strip_comments(code)
    return bool(
        re.search(r"abi\.encodePacked\s*\([^;)]*,", src)
        and re.search(r"\b(?:string|bytes)\s+(?:memory|calldata)\b|\[\]\s+(?:memory|calldata)\b", src)
    )


_LOOP_CALL = re.compile(r"\.(?:transfer|send|call|delegatecall)\s*[({]")


def _call_in_loop(code: str) -> bool:
    return any(_LOOP_CALL.search(block.body) for block in loop_blocks(code))


def _approve_race(code: str) -> bool:
    src = strip_comments(code)
    return bool(re.search(r"\bfunction\s+approve\s*\(", src)) and "increaseAllowance" not in src


def _shadowed_state_variables(code: str) -> bool:
    contracts = contract_blocks(code)
    declared = {
        contract.name: {name for _, name, _ in contract.state_variables()}
        for contract in contracts
    }
    for contract in contracts:
        own = declared[contract.name]
        for parent in contract.parents:
            if own & declared.get(parent, set()):
                return True
    return False


def _constructor_name(code: str) -> bool:
    for contract in contract_blocks(code):
        own_name = re.compile(rf"\bfunction\s+(?:{re.escape(contract.name)}|constructor)\s*\(")
        if any(own_name.search(line) for _, line in contract.members):
            return True
    return False


def _gas_griefing(code: str) -> bool:
    src = strip_comments(code)
    return bool(
        re.search(r"\.call\s*(?:\{[^}]*\})?\s*\(\s*_?\w*[dD]ata\b", src)
    ) and "gasleft" not in src


def _function_type_jump(code: str) -> bool:
    src = strip_comments(code)
    return bool(
        re.search(r"\bassembly\s*(?:\(\s*\"[^\"]*\"\s*\)\s*)?\{", src)
        and re.search(r"\bfunction\s*\([^)]*\)\s*(?:internal|external)[^;{=]*\s\w+\s*;", src)
    )


_ADDRESS_PARAM = re.compile(r"\baddress(?:\s+payable)?\s+(\w+)")


def _missing_zero_address_check(code: str) -> bool:
    """An address parameter stored in state without an address(0) comparison."""
    for block in function_blocks(code):
        params = _ADDRESS_PARAM.findall(block.header)
        if not params or re.search(r"address\s*\(\s*0\s*\)", block.body):
            continue
        for param in params:
            if re.search(rf"^\s*\w+(?:\[[^\]]*\])*\s*=\s*{re.escape(param)}\s*;", block.body, re.MULTILINE):
                return True
    return False


def _stale_oracle(code: str) -> bool:
    src = strip_comments(code)
    if "latestRoundData" not in src:
        return False
    return not re.search(r"updatedAt\s*[<>]|-\s*updatedAt|answeredInRound\s*>=", src)


def _single_step_ownership(code: str) -> bool:
    src = strip_comments(code)
    return bool(re.search(r"\bfunction\s+transferOwnership\s*\(", src)) and not re.search(
        r"pendingOwner|acceptOwnership|Ownable2Step", src
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

SOLIDITY_PATTERNS: tuple[DetectorDefinition, ...] = (
    DetectorDefinition(
        id="reentrancy",
        name="Reentrancy Vulnerability",
        severity=Severity.CRITICAL,
        description=(
            "An external call transferring Ether is made before the contract "
            "updates its own state."
        ),
        check=_reentrancy,
        matcher=pattern(_EXTERNAL_TRANSFER.pattern),
        locate=_reentrant_calls,
        swc_id="SWC-107",
        scsv_ids=("V6.1",),
        exploitation=(
            "A malicious contract receives the Ether in its fallback function and "
            "re-enters the vulnerable function before the balance is reduced, "
            "draining funds in a loop."
        ),
        recommendation=(
            "Apply the checks-effects-interactions pattern: update balances before "
            "the external call, or protect the function with a reentrancy guard."
        ),
    ),
    DetectorDefinition(
        id="unprotected-selfdestruct",
        name="Unprotected Selfdestruct",
        severity=Severity.CRITICAL,
        description="selfdestruct can be reached without an access control check.",
        check=_unprotected_selfdestruct,
        matcher=pattern(r"\b(?:selfdestruct|suicide)\s*\("),
        swc_id="SWC-106",
        scsv_ids=("V2.1",),
        exploitation=(
            "Any account calls the function, destroys the contract and sends its "
            "Ether balance to an address of its choosing."
        ),
        recommendation="Restrict the function to an authorized role or remove selfdestruct.",
    ),
    DetectorDefinition(
        id="unprotected-ether-withdrawal",
        name="Unprotected Ether Withdrawal",
        severity=Severity.CRITICAL,
        description=(
            "A public function transfers the contract's entire balance without "
            "checking the caller."
        ),
        check=_unprotected_withdrawal,
        matcher=pattern(
            r"\.(?:transfer|send)\s*\(\s*address\s*\(\s*this\s*\)\.balance"
            r"|\.call\s*\{[^}]*value\s*:\s*address\s*\(\s*this\s*\)\.balance"
        ),
        swc_id="SWC-105",
        scsv_ids=("V2.1",),
        exploitation="Any account calls the withdrawal function and receives all funds.",
        recommendation="Guard withdrawal functions with an ownership or role check.",
    ),
    DetectorDefinition(
        id="delegatecall-untrusted",
        name="Delegatecall to Untrusted Callee",
        severity=Severity.CRITICAL,
        description="delegatecall executes foreign code against this contract's storage.",
        check=searcher(r"\.delegatecall\s*\("),
        matcher=pattern(r"\.delegatecall\s*\("),
        swc_id="SWC-112",
        scsv_ids=("V6.3",),
        exploitation=(
            "If the callee address can be influenced, an attacker supplies a "
            "contract that overwrites owner slots or self-destructs the caller."
        ),
        recommendation="Only delegatecall into immutable, audited implementation addresses.",
    ),
    DetectorDefinition(
        id="missing-visibility",
        name="Missing Function Visibility",
        severity=Severity.HIGH,
        description="A function is declared without an explicit visibility specifier.",
        check=_missing_visibility,
        matcher=pattern(
            r"\bfunction\s+\w+\s*\([^)]*\)(?![^{;]*\b(?:public|private|internal|external)\b)"
        ),
        locate=_unscoped_functions,
        swc_id="SWC-100",
        scsv_ids=("V2.1",),
        exploitation=(
            "Older compilers make such functions public; an attacker calls what was "
            "intended to be an internal helper."
        ),
        recommendation="Declare public, external, internal or private on every function.",
    ),
    DetectorDefinition(
        id="tx-origin-auth",
        name="Authorization through tx.origin",
        severity=Severity.HIGH,
        description="tx.origin is compared against an address to authorize a caller.",
        check=searcher(r"\btx\.origin\s*[!=]=|[!=]=\s*tx\.origin\b"),
        matcher=pattern(r"\btx\.origin\s*[!=]=|[!=]=\s*tx\.origin\b"),
        swc_id="SWC-115",
        scsv_ids=("V2.4",),
        exploitation=(
            "The owner is lured into calling a malicious contract, which then calls "
            "this contract; tx.origin still equals the owner and the check passes."
        ),
        recommendation="Use msg.sender for authorization.",
    ),
    DetectorDefinition(
        id="unchecked-call-return",
        name="Unchecked Low-Level Call",
        severity=Severity.HIGH,
        description="The boolean result of a low-level call or send is ignored.",
        check=searcher(
            r"^\s*(?!require\b|if\b|return\b|assert\b)[\w.\[\]()]+"
            r"\.(?:call|send|delegatecall|staticcall)\s*(?:\{[^}]*\})?\s*\("
        ),
        matcher=pattern(
            r"^\s*(?!require\b|if\b|return\b|assert\b)[\w.\[\]()]+"
            r"\.(?:call|send|delegatecall|staticcall)\s*(?:\{[^}]*\})?\s*\("
        ),
        swc_id="SWC-104",
        scsv_ids=("V6.2",),
        exploitation=(
            "The call fails silently and the contract continues as if the payment "
            "or interaction succeeded, leaving accounting inconsistent."
        ),
        recommendation="Check the returned success flag and revert on failure.",
    ),
    DetectorDefinition(
        id="integer-overflow",
        name="Integer Overflow and Underflow",
        severity=Severity.HIGH,
        description=(
            "Arithmetic compiled with a pre-0.8 compiler, without SafeMath, wraps "
            "around silently."
        ),
        check=_pre_080_unchecked_math,
        matcher=pattern(r"(?:\+=|-=|\*=)|=[^;=]*\b\w+\s*[+*-]\s*\w"),
        swc_id="SWC-101",
        scsv_ids=("V3.1",),
        exploitation=(
            "An attacker picks amounts that underflow a balance check, minting a huge "
            "balance out of nothing."
        ),
        recommendation="Compile with Solidity 0.8 or later, or use SafeMath.",
    ),
    DetectorDefinition(
        id="weak-randomness",
        name="Weak Sources of Randomness",
        severity=Severity.HIGH,
        description="Block attributes are used as a source of randomness.",
        check=searcher(
            r"keccak256\s*\([^;]*(?:block\.(?:timestamp|difficulty|prevrandao|coinbase|number)"
            r"|blockhash\s*\()|(?:block\.(?:difficulty|prevrandao)|blockhash\s*\([^;]*\))[^;]*%"
        ),
        matcher=pattern(
            r"keccak256\s*\(.*(?:block\.(?:timestamp|difficulty|prevrandao|coinbase|number)"
            r"|blockhash\s*\()|block\.(?:difficulty|prevrandao)"
        ),
        swc_id="SWC-120",
        scsv_ids=("V10.2",),
        exploitation=(
            "Miners, validators or contracts in the same block compute the same value "
            "and only act when the outcome favours them."
        ),
        recommendation="Use a verifiable randomness source such as Chainlink VRF or commit-reveal.",
    ),
    DetectorDefinition(
        id="missing-replay-protection",
        name="Signature Replay",
        severity=Severity.HIGH,
        description="Signed messages are accepted without a nonce.",
        check=_missing_replay_protection,
        matcher=pattern(r"\becrecover\s*\(|\.recover\s*\("),
        swc_id="SWC-121",
        scsv_ids=("V11.2",),
        exploitation="A previously valid signature is submitted again to repeat the action.",
        recommendation="Include a per-signer nonce, the chain id and the contract address in the signed payload.",
    ),
    DetectorDefinition(
        id="ecrecover-zero-address",
        name="Missing Signature Verification",
        severity=Severity.HIGH,
        description="The address returned by ecrecover is not checked against zero.",
        check=_ecrecover_zero_unchecked,
        matcher=pattern(r"\becrecover\s*\("),
        swc_id="SWC-122",
        scsv_ids=("V11.1",),
        exploitation=(
            "An invalid signature makes ecrecover return address(0), which matches an "
            "uninitialized signer slot."
        ),
        recommendation="Reject a zero recovered address, or use OpenZeppelin ECDSA.recover.",
    ),
    DetectorDefinition(
        id="hash-collision",
        name="Hash Collision with Multiple Variable Length Arguments",
        severity=Severity.HIGH,
        description="abi.encodePacked packs several dynamic arguments into one hash input.",
        check=_hash_collision,
        matcher=pattern(r"abi\.encodePacked\s*\([^;)]*,"),
        swc_id="SWC-133",
        scsv_ids=("V11.3",),
        exploitation=(
            "Moving bytes between adjacent dynamic arguments yields the same packed "
            "encoding, so different inputs share a signature or commitment."
        ),
        recommendation="Use abi.encode, or pack at most one dynamic argument.",
    ),
    DetectorDefinition(
        id="unbounded-loop",
        name="DoS with Block Gas Limit",
        severity=Severity.HIGH,
        description="A loop iterates over an array whose length can grow without bound.",
        check=searcher(r"\bfor\s*\([^;]*;[^;]*<=?\s*\w+(?:\.\w+)*\.length"),
        matcher=pattern(r"\bfor\s*\([^;]*;[^;]*<=?\s*\w+(?:\.\w+)*\.length"),
        swc_id="SWC-128",
        scsv_ids=("V5.1",),
        exploitation=(
            "An attacker grows the array until iterating it exceeds the block gas "
            "limit, permanently blocking the function."
        ),
        recommendation="Bound iterations or process the array in paginated batches.",
    ),
    DetectorDefinition(
        id="call-in-loop",
        name="DoS with Failed Call",
        severity=Severity.HIGH,
        description="External calls are made inside a loop.",
        check=_call_in_loop,
        matcher=pattern(r"^\s*(?:for|while)\s*\("),
        swc_id="SWC-113",
        scsv_ids=("V6.4",),
        exploitation=(
            "A single recipient that always reverts makes the whole loop revert, "
            "blocking payouts for everyone."
        ),
        recommendation="Favour pull over push payments and isolate each external call.",
    ),
    DetectorDefinition(
        id="uninitialized-storage-pointer",
        name="Uninitialized Storage Pointer",
        severity=Severity.HIGH,
        description="A local storage variable is declared without being initialized.",
        check=searcher(r"^\s*\w+(?:\[\])*\s+storage\s+\w+\s*;"),
        matcher=pattern(r"^\s*\w+(?:\[\])*\s+storage\s+\w+\s*;"),
        swc_id="SWC-109",
        scsv_ids=("V9.1",),
        exploitation="Writes through the pointer land in slot 0 and overwrite unrelated state.",
        recommendation="Initialize storage pointers or use memory for local variables.",
    ),
    DetectorDefinition(
        id="private-data-exposure",
        name="Unencrypted Private Data On-Chain",
        severity=Severity.HIGH,
        description="A secret value is stored in a state variable marked private.",
        check=searcher(
            r"\bprivate\s+\w*(?:password|secret|seed|passphrase|privatekey)\w*", re.MULTILINE | re.IGNORECASE
        ),
        matcher=pattern(
            r"\bprivate\s+\w*(?:password|secret|seed|passphrase|privatekey)\w*", re.IGNORECASE
        ),
        swc_id="SWC-136",
        scsv_ids=("V8.1",),
        exploitation="Anyone reads the storage slot directly from the chain.",
        recommendation="Never store secrets on-chain; use commit-reveal with salted hashes.",
    ),
    DetectorDefinition(
        id="rtlo-character",
        name="Right-To-Left-Override Control Character",
        severity=Severity.HIGH,
        description="The source contains the U+202E right-to-left override character.",
        check=lambda code: "\u202e" in code,
        matcher=literal("\u202e"),
        swc_id="SWC-130",
        scsv_ids=("V15.3",),
        exploitation="Reviewers read reordered text while the compiler sees the real order.",
        recommendation="Remove U+202E from the source.",
    ),
    DetectorDefinition(
        id="spot-price-oracle",
        name="Spot Price Oracle",
        severity=Severity.HIGH,
        description="Prices are read from AMM reserves or the current pool tick.",
        check=searcher(r"\bgetReserves\s*\(|\bslot0\s*\("),
        matcher=pattern(r"\bgetReserves\s*\(|\bslot0\s*\("),
        scsv_ids=("V7.2",),
        exploitation="A flash loan skews the reserves within one transaction to move the price.",
        recommendation="Use a time-weighted average price or an external price oracle.",
    ),
    DetectorDefinition(
        id="state-variable-default-visibility",
        name="State Variable Default Visibility",
        severity=Severity.MEDIUM,
        description="A state variable is declared without an explicit visibility.",
        check=_state_default_visibility,
        matcher=pattern(
            r"^(?:\t| {2}| {4})(?:mapping\s*\(.*\)|(?:u?int\d*|address(?:\s+payable)?|bool|bytes\d*"
            r"|string|[A-Z]\w*)(?:\[\w*\])*)\s+(?!(?:public|private|internal|constant|immutable)\b)"
            r"\w+\s*(?:=[^;]*)?;"
        ),
        swc_id="SWC-108",
        scsv_ids=("V8.2",),
        exploitation="Readers assume a visibility the compiler does not apply.",
        recommendation="Declare the visibility of every state variable explicitly.",
    ),
    DetectorDefinition(
        id="unchecked-block",
        name="Unchecked Arithmetic Block",
        severity=Severity.MEDIUM,
        description="Arithmetic inside an unchecked block is not overflow-checked.",
        check=searcher(r"\bunchecked\s*\{"),
        matcher=pattern(r"\bunchecked\s*\{"),
        swc_id="SWC-101",
        scsv_ids=("V3.1",),
        exploitation="Values near the type bounds wrap around silently.",
        recommendation="Only use unchecked for arithmetic whose bounds are proven.",
    ),
    DetectorDefinition(
        id="outdated-compiler",
        name="Outdated Compiler Version",
        severity=Severity.MEDIUM,
        description="The pragma admits a compiler older than 0.8.0.",
        check=_outdated_compiler,
        matcher=pattern(r"pragma\s+solidity"),
        swc_id="SWC-102",
        scsv_ids=("V15.1",),
        exploitation="Known compiler bugs fixed in later releases can affect the bytecode.",
        recommendation="Use a recent 0.8.x compiler release.",
    ),
    DetectorDefinition(
        id="timestamp-dependence",
        name="Block Timestamp Dependence",
        severity=Severity.MEDIUM,
        description="Control flow depends on block.timestamp or now.",
        check=searcher(
            r"\b(?:block\.timestamp|now)\b\s*(?:[<>]=?|==|%)|(?:[<>]=?|==)\s*(?:block\.timestamp|now)\b"
        ),
        matcher=pattern(
            r"\b(?:block\.timestamp|now)\b\s*(?:[<>]=?|==|%)|(?:[<>]=?|==)\s*(?:block\.timestamp|now)\b"
        ),
        swc_id="SWC-116",
        scsv_ids=("V10.1",),
        exploitation="Validators shift the timestamp by several seconds to pass a deadline check.",
        recommendation="Tolerate timestamp drift or use block numbers for coarse timing.",
    ),
    DetectorDefinition(
        id="signature-malleability",
        name="Signature Malleability",
        severity=Severity.MEDIUM,
        description="ecrecover is used without restricting s to the lower half order.",
        check=_signature_malleability,
        matcher=pattern(r"\becrecover\s*\("),
        swc_id="SWC-117",
        scsv_ids=("V11.1",),
        exploitation="A second valid signature is derived from an existing one to bypass used-signature checks.",
        recommendation="Use OpenZeppelin ECDSA, which rejects malleable signatures.",
    ),
    DetectorDefinition(
        id="approve-front-running",
        name="Transaction Order Dependence on approve",
        severity=Severity.MEDIUM,
        description="approve overwrites an allowance that may be spent in the meantime.",
        check=_approve_race,
        matcher=pattern(r"\bfunction\s+approve\s*\("),
        swc_id="SWC-114",
        scsv_ids=("V12.3",),
        exploitation=(
            "The spender front-runs an allowance change, spending the old allowance "
            "and then the new one."
        ),
        recommendation="Provide increaseAllowance/decreaseAllowance or require a zero allowance first.",
    ),
    DetectorDefinition(
        id="shadowing-state-variables",
        name="Shadowing State Variables",
        severity=Severity.MEDIUM,
        description="A contract redeclares a state variable inherited from a parent.",
        check=_shadowed_state_variables,
        matcher=pattern(r"\bcontract\s+\w+\s+is\b"),
        swc_id="SWC-119",
        scsv_ids=("V13.2",),
        exploitation="Parent functions read one variable while the child writes the other.",
        recommendation="Remove the redeclaration and assign the inherited variable instead.",
    ),
    DetectorDefinition(
        id="strict-balance-equality",
        name="Unexpected Ether Balance",
        severity=Severity.MEDIUM,
        description="Logic relies on the contract balance being exactly equal to a value.",
        check=searcher(
            r"(?:address\s*\(\s*this\s*\)|\bthis)\.balance\s*[!=]="
            r"|[!=]=\s*(?:address\s*\(\s*this\s*\)|\bthis)\.balance"
        ),
        matcher=pattern(
            r"(?:address\s*\(\s*this\s*\)|\bthis)\.balance\s*[!=]="
            r"|[!=]=\s*(?:address\s*\(\s*this\s*\)|\bthis)\.balance"
        ),
        swc_id="SWC-132",
        scsv_ids=("V9.1",),
        exploitation="Ether forced in via selfdestruct breaks the equality for good.",
        recommendation="Track deposits in a state variable instead of reading the balance.",
    ),
    DetectorDefinition(
        id="arbitrary-storage-write",
        name="Write to Arbitrary Storage Location",
        severity=Severity.MEDIUM,
        description="Array lengths or raw storage slots are written directly.",
        check=searcher(r"\.length\s*(?:--|-=|\+=|=(?!=))|\bsstore\s*\(\s*(?!0x)[a-z_]\w*\s*,"),
        matcher=pattern(r"\.length\s*(?:--|-=|\+=|=(?!=))|\bsstore\s*\(\s*(?!0x)[a-z_]\w*\s*,"),
        swc_id="SWC-124",
        scsv_ids=("V9.1",),
        exploitation="An attacker-controlled index reaches the slot holding the owner address.",
        recommendation="Never expose raw storage writes or array length manipulation.",
    ),
    DetectorDefinition(
        id="function-type-jump",
        name="Arbitrary Jump with Function Type Variable",
        severity=Severity.MEDIUM,
        description="Inline assembly is used in a contract holding function type variables.",
        check=_function_type_jump,
        matcher=pattern(r"\bassembly\s*(?:\(\s*\"[^\"]*\"\s*\)\s*)?\{"),
        swc_id="SWC-127",
        scsv_ids=("V13.2",),
        exploitation="Assembly overwrites the function pointer to jump to arbitrary code.",
        recommendation="Avoid assembly that can alter function type variables.",
    ),
    DetectorDefinition(
        id="gas-griefing",
        name="Insufficient Gas Griefing",
        severity=Severity.MEDIUM,
        description="Calls forwarding caller-supplied data do not check the remaining gas.",
        check=_gas_griefing,
        matcher=pattern(r"\.call\s*(?:\{[^}]*\})?\s*\(\s*_?\w*[dD]ata\b"),
        swc_id="SWC-126",
        scsv_ids=("V5.3",),
        exploitation="A relayer supplies just enough gas for the outer call but not the inner one.",
        recommendation="Require gasleft() to cover the sub-call, or let the signer fix the gas.",
    ),
    DetectorDefinition(
        id="typographical-error",
        name="Typographical Error",
        severity=Severity.MEDIUM,
        description="An assignment operator looks like a mistyped compound operator.",
        check=searcher(r"\w\s?=[+-](?=\s*\w)"),
        matcher=pattern(r"\w\s?=[+-](?=\s*\w)"),
        swc_id="SWC-129",
        scsv_ids=("V13.2",),
        exploitation="x =+ 1 assigns 1 instead of incrementing, corrupting balances.",
        recommendation="Use += or -= and keep a space around unary operators.",
    ),
    DetectorDefinition(
        id="incorrect-constructor-name",
        name="Incorrect Constructor Name",
        severity=Severity.MEDIUM,
        description="A function named after the contract, or named constructor, acts as a normal function.",
        check=_constructor_name,
        matcher=pattern(r"\bfunction\s+(?:constructor|[A-Z]\w*)\s*\("),
        swc_id="SWC-118",
        scsv_ids=("V2.1",),
        exploitation="Anyone calls the intended constructor later and becomes the owner.",
        recommendation="Use the constructor keyword.",
    ),
    DetectorDefinition(
        id="stale-oracle-price",
        name="Stale Oracle Price",
        severity=Severity.MEDIUM,
        description="latestRoundData is consumed without checking the update time.",
        check=_stale_oracle,
        matcher=pattern(r"\blatestRoundData\s*\("),
        scsv_ids=("V7.1",),
        exploitation="A stale price during feed downtime lets positions be opened at the wrong price.",
        recommendation="Check updatedAt against a heartbeat and validate the answer is positive.",
    ),
    DetectorDefinition(
        id="division-before-multiplication",
        name="Division Before Multiplication",
        severity=Severity.MEDIUM,
        description="A division result is multiplied, losing precision.",
        check=searcher(r"\w\s*/\s*[\w.()]+\s*\*\s*\w"),
        matcher=pattern(r"\w\s*/\s*[\w.()]+\s*\*\s*\w"),
        scsv_ids=("V3.2",),
        exploitation="Truncation rounds small amounts to zero, skewing fees or rewards.",
        recommendation="Multiply before dividing.",
    ),
    DetectorDefinition(
        id="unchecked-erc20-transfer",
        name="Unchecked ERC20 Transfer",
        severity=Severity.MEDIUM,
        description="The boolean returned by an ERC20 transfer is ignored.",
        check=searcher(r"^\s*\w+(?:\([^)]*\))?\.transfer(?:From)?\s*\([^;]*,[^;]*\)\s*;"),
        matcher=pattern(r"^\s*\w+(?:\([^)]*\))?\.transfer(?:From)?\s*\([^;]*,[^;]*\)\s*;"),
        swc_id="SWC-104",
        scsv_ids=("V12.2",),
        exploitation="Tokens that return false instead of reverting leave the transfer undone.",
        recommendation="Use SafeERC20 safeTransfer and safeTransferFrom.",
    ),
    DetectorDefinition(
        id="missing-zero-address-check",
        name="Missing Zero Address Validation",
        severity=Severity.LOW,
        description="An address parameter is stored without rejecting address(0).",
        check=_missing_zero_address_check,
        matcher=pattern(r"^\s*\w*(?:owner|admin|Owner|Admin|treasury|Treasury|recipient|Recipient|Address)\w*\s*=\s*\w+\s*;"),
        scsv_ids=("V4.2",),
        exploitation="A mistaken zero address locks ownership or burns funds sent to it.",
        recommendation="require(addr != address(0)) before storing the address.",
    ),
    DetectorDefinition(
        id="floating-pragma",
        name="Floating Pragma",
        severity=Severity.LOW,
        description="The pragma admits several compiler releases.",
        check=_floating_pragma,
        matcher=pattern(r"pragma\s+solidity\s+[^;]*[\^><~*]"),
        swc_id="SWC-103",
        scsv_ids=("V15.1",),
        exploitation="The contract is deployed with a compiler other than the tested one.",
        recommendation="Lock the pragma to the exact compiler version used in testing.",
    ),
    DetectorDefinition(
        id="deprecated-functions",
        name="Use of Deprecated Solidity Functions",
        severity=Severity.LOW,
        description="Deprecated built-ins such as suicide, sha3, callcode or throw are used.",
        check=searcher(
            r"\bsuicide\s*\(|\bsha3\s*\(|\.callcode\s*\(|\bthrow\s*;|\bblock\.blockhash\s*\("
            r"|\bmsg\.gas\b|\bconstant\s+returns\b"
        ),
        matcher=pattern(
            r"\bsuicide\s*\(|\bsha3\s*\(|\.callcode\s*\(|\bthrow\s*;|\bblock\.blockhash\s*\("
            r"|\bmsg\.gas\b|\bconstant\s+returns\b"
        ),
        swc_id="SWC-111",
        scsv_ids=("V15.2",),
        exploitation="Deprecated constructs behave differently or fail on current compilers.",
        recommendation="Use selfdestruct, keccak256, delegatecall, revert and gasleft().",
    ),
    DetectorDefinition(
        id="assert-violation",
        name="Assert Violation",
        severity=Severity.LOW,
        description="assert is used, possibly for input validation.",
        check=searcher(r"\bassert\s*\("),
        matcher=pattern(r"\bassert\s*\("),
        swc_id="SWC-110",
        scsv_ids=("V4.1",),
        exploitation="A reachable failing assert consumes the caller's gas and signals a logic bug.",
        recommendation="Use require for input validation; keep assert for invariants.",
    ),
    DetectorDefinition(
        id="hardcoded-gas",
        name="Message Call with Hardcoded Gas Amount",
        severity=Severity.LOW,
        description="transfer, send or a fixed gas stipend forwards a hardcoded amount of gas.",
        check=searcher(r"\.call\s*\{[^}]*\bgas\s*:\s*\d|\.gas\s*\(\s*\d+\s*\)|\.(?:transfer|send)\s*\(\s*[^,()]*\)"),
        matcher=pattern(r"\.call\s*\{[^}]*\bgas\s*:\s*\d|\.gas\s*\(\s*\d+\s*\)|\.(?:transfer|send)\s*\(\s*[^,()]*\)"),
        swc_id="SWC-134",
        scsv_ids=("V6.4",),
        exploitation="Gas repricing makes the stipend insufficient and payments start failing.",
        recommendation="Use call with a checked return value instead of transfer or send.",
    ),
    DetectorDefinition(
        id="code-without-effect",
        name="Code With No Effects",
        severity=Severity.LOW,
        description="A statement has no effect, such as a comparison used as a statement.",
        check=searcher(r"^\s*\w+(?:\[[^\]]*\])?\s*==\s*[^;]+;|\.call\.value\s*\([^)]*\)\s*;"),
        matcher=pattern(r"^\s*\w+(?:\[[^\]]*\])?\s*==\s*[^;]+;|\.call\.value\s*\([^)]*\)\s*;"),
        swc_id="SWC-135",
        scsv_ids=("V13.2",),
        exploitation="The intended check or call never happens.",
        recommendation="Replace the statement with the intended require or call.",
    ),
    DetectorDefinition(
        id="single-step-ownership",
        name="Single-Step Ownership Transfer",
        severity=Severity.LOW,
        description="Ownership moves to the new owner without acceptance.",
        check=_single_step_ownership,
        matcher=pattern(r"\bfunction\s+transferOwnership\s*\("),
        scsv_ids=("V2.3",),
        exploitation="A typo in the new owner address locks administration forever.",
        recommendation="Use a two-step transfer where the new owner accepts ownership.",
    ),
    DetectorDefinition(
        id="inline-assembly",
        name="Inline Assembly",
        severity=Severity.INFO,
        description="Inline assembly bypasses the compiler's safety checks.",
        check=searcher(r"\bassembly\s*(?:\(\s*\"[^\"]*\"\s*\)\s*)?\{"),
        matcher=pattern(r"\bassembly\s*(?:\(\s*\"[^\"]*\"\s*\)\s*)?\{"),
        scsv_ids=("V13.2",),
        exploitation="Memory or storage mistakes in assembly are not caught by the compiler.",
        recommendation="Keep assembly minimal and document the invariants it relies on.",
    ),
    DetectorDefinition(
        id="missing-license",
        name="Missing SPDX License Identifier",
        severity=Severity.INFO,
        description="The source carries no SPDX license identifier.",
        check=lambda code: "SPDX-License-Identifier" not in code,
        matcher=literal("SPDX-License-Identifier"),
        scsv_ids=("V13.1",),
        recommendation="Add an SPDX-License-Identifier comment at the top of the file.",
    ),
)
