"""Tests for the text helpers shared by the pattern libraries."""

from __future__ import annotations

import pytest

from chainaudit.core.analyzer.patterns._helpers import (
    contract_blocks,
    function_blocks,
    is_comment_line,
    is_floating_pragma,
    line_number_at,
    loop_blocks,
    solidity_pragma,
    solidity_version,
    strip_comments,
    strip_hash_comments,
)


class TestCommentStripping:
    def test_line_breaks_preserved(self) -> None:
        code = "a; // note\n/* block\n   comment */ b;\nc;"
        stripped = strip_comments(code)
        assert stripped.count("\n") == code.count("\n")
        assert "note" not in stripped
        assert "comment" not in stripped
        assert stripped.split("\n")[2] == " b;"

    def test_slashes_inside_strings_kept(self) -> None:
        code = 'string url = "https://example.org"; // docs\nbytes b = \'//\';'
        assert strip_comments(code) == 'string url = "https://example.org"; \nbytes b = \'//\';'

    def test_url_does_not_hide_closing_brace(self) -> None:
        code = (
            "function a() external {\n"
            "    emit Ping(\"https://a.example\"); }\n"
            "function b() external {\n"
            "}\n"
        )
        blocks = function_blocks(code)
        assert [(b.start, len(b.lines)) for b in blocks] == [(1, 2), (3, 2)]

    def test_line_number_at(self) -> None:
        text = "a\nbb\nccc"
        assert line_number_at(text, 0) == 1
        assert line_number_at(text, text.index("bb")) == 2
        assert line_number_at(text, len(text)) == 3

    def test_hash_comments_keep_version_and_attributes(self) -> None:
        code = "# @version 0.3.10\n# plain comment\n#[external]\nx: uint256  # trailing"
        stripped = strip_hash_comments(code)
        assert "# @version 0.3.10" in stripped
        assert "#[external]" in stripped
        assert "plain comment" not in stripped
        assert "trailing" not in stripped

    @pytest.mark.parametrize(
        ("line", "hash_comments", "expected"),
        [
            ("  // x", False, True),
            ("  /* x", False, True),
            ("   * continued", False, True),
            ("  x = 1; // x", False, False),
            ("  # note", False, False),
            ("  # note", True, True),
            ("# @version 0.3.10", True, False),
            ("# pragma version 0.4.0", True, False),
        ],
    )
    def test_is_comment_line(self, line: str, hash_comments: bool, expected: bool) -> None:
        assert is_comment_line(line, hash_comments) is expected


class TestBlocks:
    CODE = (
        "contract A {\n"
        "    function f() external {\n"
        "        for (uint i = 0; i < 3; i++) {\n"
        "            while (x) { x = false; }\n"
        "        }\n"
        "    }\n"
        "    function g() public;\n"
        "}\n"
    )

    def test_function_blocks(self) -> None:
        blocks = function_blocks(self.CODE)
        assert [b.start for b in blocks] == [2, 7]
        assert blocks[0].header == "function f() external"
        assert len(blocks[0].lines) == 5
        assert blocks[1].lines == ("    function g() public;",)

    def test_nested_loops_are_yielded(self) -> None:
        blocks = loop_blocks(self.CODE)
        assert [b.start for b in blocks] == [3, 4]
        assert "x = false" in blocks[1].body


class TestContractBlocks:
    CODE = (
        "contract Base {\n"
        "    uint256 public fee;\n"
        "}\n"
        "contract Child is Base, Ownable(msg.sender) {\n"
        "    uint256 public fee;\n"
        "    mapping(address => bool) internal seen;\n"
        "    address owner;\n"
        "    function f() external {\n"
        "        uint256 local;\n"
        "    }\n"
        "}\n"
    )

    def test_names_and_parents(self) -> None:
        blocks = contract_blocks(self.CODE)
        assert [b.name for b in blocks] == ["Base", "Child"]
        assert blocks[1].parents == ("Base", "Ownable")
        assert blocks[1].start == 4

    def test_state_variables_skip_nested_blocks(self) -> None:
        child = contract_blocks(self.CODE)[1]
        variables = child.state_variables()
        assert [(line, name) for line, name, _ in variables] == [
            (5, "fee"), (6, "seen"), (7, "owner"),
        ]
        assert variables[2][2] == ""


class TestPragma:
    def test_range_uses_lower_bound(self) -> None:
        code = "pragma solidity >=0.6.0 <0.8.0;\n"
        assert solidity_pragma(code) == ">=0.6.0 <0.8.0"
        assert solidity_version(code) == (0, 6, 0)

    def test_missing_patch_component(self) -> None:
        assert solidity_version("pragma solidity ^0.8;") == (0, 8, 0)

    def test_no_pragma(self) -> None:
        assert solidity_pragma("contract A {}") is None
        assert solidity_version("contract A {}") is None

    def test_commented_pragma_ignored(self) -> None:
        assert solidity_pragma("// pragma solidity 0.4.0;\npragma solidity 0.8.20;") == "0.8.20"

    @pytest.mark.parametrize(
        ("constraint", "floating"),
        [("0.8.20", False), ("^0.8.0", True), (">=0.8.0 <0.9.0", True), ("~0.8.1", True)],
    )
    def test_floating(self, constraint: str, floating: bool) -> None:
        assert is_floating_pragma(constraint) is floating
