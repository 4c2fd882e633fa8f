"""Text helpers shared by the pattern libraries.

All helpers operate on raw source text and are heuristic: they count
braces or indentation, they do not parse. Comment stripping preserves line
breaks so that line numbers computed on stripped text match the original.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Iterator

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# String literals are matched first so that "//" inside them is kept.
_STRING_OR_LINE_COMMENT = re.compile(r'"(?:[^"\\\n]|\\.)*"|\'(?:[^\'\\\n]|\\.)*\'|//[^\n]*')
_HASH_COMMENT = re.compile(r"#(?!\[|\s*@version|\s*pragma)[^\n]*")


def _blank_keep_newlines(match: re.Match[str]) -> str:
    return "\n" * match.group(0).count("\n")


def _drop_line_comment(match: re.Match[str]) -> str:
    text = match.group(0)
    return "" if text.startswith("//") else text


@lru_cache(maxsize=16)
def strip_comments(code: str) -> str:
    """Remove ``//`` and ``/* */`` comments, keeping every line break.

    ``//`` inside a string literal such as a URL is not a comment.
    """
    code = _BLOCK_COMMENT.sub(_blank_keep_newlines, code)
    return _STRING_OR_LINE_COMMENT.sub(_drop_line_comment, code)


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line holding character ``offset`` of ``text``."""
    return text.count("\n", 0, offset) + 1


@lru_cache(maxsize=16)
def strip_hash_comments(code: str) -> str:
    """Remove Python-style ``#`` comments (Vyper).

    ``#[...]`` attributes and ``# @version`` pragmas are kept.
    """
    return _HASH_COMMENT.sub("", code)


_VYPER_PRAGMA_LINE = re.compile(r"^#\s*(?:@version|pragma)\b")


def is_comment_line(line: str, hash_comments: bool = False) -> bool:
    """True for lines holding nothing but a comment.

    With ``hash_comments`` (Vyper), ``#`` lines count as comments too,
    except version pragmas, which are written as comments.
    """
    stripped = line.lstrip()
    if stripped.startswith(("//", "/*", "*")):
        return True
    if hash_comments and stripped.startswith("#"):
        return _VYPER_PRAGMA_LINE.match(stripped) is None
    return False


def searcher(regex: str, flags: int = re.MULTILINE) -> Callable[[str], bool]:
    """Build a trigger predicate: ``regex`` found in the comment-free source."""
    compiled = re.compile(regex, flags)

    def check(code: str) -> bool:
        return compiled.search(strip_comments(code)) is not None

    return check


# ---------------------------------------------------------------------------
# Brace-delimited blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Block:
    """A brace-delimited region of source.

    Attributes:
        start: 1-based line of the block header.
        header: Text from the header keyword up to the opening brace.
        lines: Every line of the block, header line included.
    """

    start: int
    header: str
    lines: tuple[str, ...]

    @property
    def body(self) -> str:
        return "\n".join(self.lines)


_FUNCTION_HEADER = re.compile(
    r"^\s*(?:function\s+\w+|function\s*\(|constructor\s*\(|fallback\s*\(|receive\s*\()"
)
_LOOP_HEADER = re.compile(r"^\s*(?:for|while)\s*\(|^\s*do\s*\{")


def _blocks(code: str, header: re.Pattern[str]) -> Iterator[Block]:
    lines = strip_comments(code).split("\n")
    index = 0
    while index < len(lines):
        if not header.search(lines[index]):
            index += 1
            continue
        start = index
        depth = 0
        opened = False
        header_parts: list[str] = []
        end = start
        for end in range(start, len(lines)):
            line = lines[end]
            if not opened:
                header_parts.append(line.split("{", 1)[0])
            depth += line.count("{") - line.count("}")
            if "{" in line:
                opened = True
            if not opened and ";" in line:
                # Declaration without a body (interface or abstract).
                break
            if opened and depth <= 0:
                break
        yield Block(
            start=start + 1,
            header=" ".join(part.strip() for part in header_parts),
            lines=tuple(lines[start:end + 1]),
        )
        # Nested headers (loops within loops) are yielded too.
        index = start + 1


def function_blocks(code: str) -> list[Block]:
    """Split ``code`` into function, constructor, fallback and receive blocks."""
    return list(_blocks(code, _FUNCTION_HEADER))


def loop_blocks(code: str) -> list[Block]:
    """Return every ``for``/``while``/``do`` block, nested ones included."""
    return list(_blocks(code, _LOOP_HEADER))


# ---------------------------------------------------------------------------
# Compiler version
# ---------------------------------------------------------------------------

_PRAGMA = re.compile(r"pragma\s+solidity\s+([^;]+);")
_VERSION = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


def solidity_pragma(code: str) -> str | None:
    """Return the version constraint of the first ``pragma solidity``."""
    match = _PRAGMA.search(strip_comments(code))
    return match.group(1).strip() if match else None


def solidity_version(code: str) -> tuple[int, int, int] | None:
    """Return the first version number named by ``pragma solidity``.

    For ranges such as ``>=0.6.0 <0.8.0`` this is the lower bound, the
    oldest compiler the source admits.
    """
    constraint = solidity_pragma(code)
    if constraint is None:
        return None
    match = _VERSION.search(constraint)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)


def is_floating_pragma(constraint: str) -> bool:
    """True when the constraint admits more than one compiler release."""
    return any(token in constraint for token in ("^", ">", "<", "~", "*", "||"))


# ---------------------------------------------------------------------------
# Contract-level declarations
# ---------------------------------------------------------------------------

_CONTRACT_HEADER = re.compile(
    r"^\s*(?:abstract\s+)?(?:contract|library|interface)\s+(\w+)(?:\s+is\s+([^{]+))?"
)
_PARENT_NAME = re.compile(r"(\w+)\s*(?:\([^)]*\))?")

STATE_DECLARATION = re.compile(
    r"^\s*(?:mapping\s*\(.*\)|(?:u?int\d*|address(?:\s+payable)?|bool|bytes\d*|string|[A-Z]\w*)"
    r"(?:\[\w*\])*)"
    r"((?:\s+(?:public|private|internal|constant|immutable|override|transient))*)"
    r"\s+(\w+)\s*(?:=[^;]*)?;"
)


@dataclass(frozen=True)
class ContractBlock:
    """A top-level contract, library or interface.

    Attributes:
        name: Declared name.
        parents: Names listed after ``is``.
        start: 1-based line of the declaration.
        members: ``(line number, text)`` of every line directly inside
            the contract body, nested blocks excluded.
    """

    name: str
    parents: tuple[str, ...]
    start: int
    members: tuple[tuple[int, str], ...]

    def state_variables(self) -> list[tuple[int, str, str]]:
        """Return ``(line, name, qualifiers)`` of each state variable."""
        found = []
        for number, line in self.members:
            match = STATE_DECLARATION.match(line)
            if match:
                found.append((number, match.group(2), match.group(1)))
        return found


def contract_blocks(code: str) -> list[ContractBlock]:
    """Split ``code`` into its top-level contract declarations."""
    blocks: list[ContractBlock] = []
    name = ""
    parents: tuple[str, ...] = ()
    start = 0
    members: list[tuple[int, str]] = []
    inside = opened = False
    depth = 0
    for number, line in enumerate(strip_comments(code).split("\n"), start=1):
        if not inside:
            header = _CONTRACT_HEADER.match(line)
            if header is None:
                continue
            name = header.group(1)
            parents = tuple(_PARENT_NAME.findall(header.group(2) or ""))
            start = number
            members = []
            inside, opened, depth = True, False, 0
        elif opened and depth == 1:
            members.append((number, line))
        depth += line.count("{") - line.count("}")
        opened = opened or "{" in line
        if opened and depth <= 0:
            blocks.append(ContractBlock(name, parents, start, tuple(members)))
            inside = False
    return blocks
