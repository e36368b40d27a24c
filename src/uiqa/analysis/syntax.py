"""TSX syntax trees via tree-sitter, plus the few node helpers the validators share."""

from __future__ import annotations

from typing import Iterator

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

JSX_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
FUNCTION_TYPES = frozenset({"arrow_function", "function_expression", "function"})


def parse_tsx(code: str) -> Tree:
    """Parse TSX source. tree-sitter always returns a tree; syntax errors become ERROR/MISSING nodes."""
    parser = Parser(TSX_LANGUAGE)
    return parser.parse(code.encode("utf-8"))


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text is not None else ""


def position(source: bytes, node: Node) -> tuple[int, int]:
    """0-based (row, character column) of a node's start.

    tree-sitter columns are byte offsets; convert them to characters so
    positions line up with what an editor shows for non-ASCII source.
    """
    row, byte_col = node.start_point[0], node.start_point[1]
    lines = source.split(b"\n")
    line = lines[row] if row < len(lines) else b""
    return row, len(line[:byte_col].decode("utf-8", errors="replace"))


def unwrap_parens(node: Node) -> Node:
    while node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def opening_element(element: Node) -> Node | None:
    """The node that carries the tag name and attributes of a JSX element."""
    if element.type == "jsx_self_closing_element":
        return element
    for child in element.children:
        if child.type == "jsx_opening_element":
            return child
    return None


def jsx_attributes(element: Node) -> dict[str, Node | None]:
    """Attribute name → value node (``None`` for bare boolean attributes)."""
    opening = opening_element(element)
    if opening is None:
        return {}
    attrs: dict[str, Node | None] = {}
    for child in opening.named_children:
        if child.type != "jsx_attribute" or not child.named_children:
            continue
        name = node_text(child.named_children[0])
        value = child.named_children[1] if len(child.named_children) > 1 else None
        attrs[name] = value
    return attrs


def string_literal_values(node: Node) -> list[str]:
    """Text of every string or template literal at or below ``node``.

    Template substitutions are dropped, so ``\\`p-4 ${x}\\``` yields ``"p-4 "``.
    """
    values: list[str] = []
    for child in walk(node):
        if child.type == "string":
            values.append(node_text(child)[1:-1])
        elif child.type == "template_string":
            parts = [
                node_text(part)
                for part in child.children
                if part.type == "string_fragment"
            ]
            values.append(" ".join(parts))
    return values
