"""Solidity structural extractor backed by a tree-sitter syntax tree.

Walks the concrete syntax tree produced by the ``tree-sitter-solidity``
grammar and records the names of contracts, functions, state variables,
modifiers and events. The walk is shallow: it does not resolve types,
inheritance or call targets.

A tree containing ``ERROR`` or ``MISSING`` nodes is reported as a failed
extraction. Names collected before the failure was noticed are kept, so
the caller still gets a partial structure for display.
"""

from __future__ import annotations

import logging

import tree_sitter_solidity
from tree_sitter import Language, Node, Parser

from chainaudit.exceptions import ExtractionError
from chainaudit.parsers.base import (
    ContractStructure,
    Dialect,
    StructuralExtractor,
    append_unique,
)

logger = logging.getLogger(__name__)

_CONTRACT_NODES = frozenset({
    "contract_declaration",
    "interface_declaration",
    "library_declaration",
})

# Node type -> ContractStructure list attribute.
_MEMBER_NODES: dict[str, str] = {
    "function_definition": "functions",
    "state_variable_declaration": "state_variables",
    "modifier_definition": "modifiers",
    "event_definition": "events",
}


def _node_name(node: Node) -> str | None:
    """Return the declared name of ``node``.

    Prefers the grammar's ``name`` field and falls back to the first
    ``identifier`` child for grammar versions that do not label it.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        for child in node.children:
            if child.type == "identifier":
                name_node = child
                break
    if name_node is None or name_node.text is None:
        return None
    return name_node.text.decode("utf-8", errors="replace")


class SolidityExtractor(StructuralExtractor):
    """Syntax-tree extractor for Solidity sources.

    The tree-sitter parser is created once per extractor instance and is
    reused across calls; ``Parser.parse`` holds no state between parses.
    """

    dialect = Dialect.SOLIDITY

    def __init__(self) -> None:
        self._language = Language(tree_sitter_solidity.language())
        self._parser = Parser(self._language)

    def _extract(self, code: str, structure: ContractStructure) -> None:
        tree = self._parser.parse(code.encode("utf-8"))
        root = tree.root_node
        self._walk(root, structure)

        if root.has_error:
            raise ExtractionError("syntax tree contains error nodes")
        logger.debug(
            "Extracted Solidity contract %s: %d functions, %d state variables",
            structure.name, len(structure.functions),
            len(structure.state_variables),
        )

    def _walk(self, root: Node, structure: ContractStructure) -> None:
        """Visit every node depth-first, recording declared names."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in _CONTRACT_NODES:
                name = _node_name(node)
                # The first declared contract names the whole source.
                if name and structure.name == "Unknown":
                    structure.name = name
            elif node.type in _MEMBER_NODES:
                append_unique(
                    getattr(structure, _MEMBER_NODES[node.type]),
                    _node_name(node),
                )
            # Reverse so children are visited in source order.
            stack.extend(reversed(node.children))
