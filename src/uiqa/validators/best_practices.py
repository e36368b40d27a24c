"""React best-practice checks feeding the code-quality dimension."""

from __future__ import annotations

import re

from tree_sitter import Node

from uiqa.analysis.syntax import (
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    jsx_attributes,
    node_text,
    parse_tsx,
    position,
    unwrap_parens,
    walk,
)
from uiqa.schemas.quality import ErrorType, Severity, ValidationError

_DIRECT_DOM = re.compile(
    r"\bdocument\.(getElementById|querySelector(?:All)?|getElementsBy\w+)\s*\("
)
_EVENT_ATTRIBUTE = re.compile(r"^on[A-Z]")

MAX_INLINE_HANDLERS = 3


class BestPracticesValidator:
    """Flags direct DOM access, unkeyed list items and inline handler sprawl."""

    def validate(self, code: str) -> list[ValidationError]:
        errors: list[ValidationError] = []

        dom = _DIRECT_DOM.search(code)
        if dom:
            errors.append(
                ValidationError(
                    type=ErrorType.BEST_PRACTICES,
                    severity=Severity.WARNING,
                    message="Avoid direct DOM manipulation in React components. Use refs or state instead.",
                    line=code.count("\n", 0, dom.start()) + 1,
                    rule="no-direct-dom",
                )
            )

        source = code.encode("utf-8")
        root = parse_tsx(code).root_node

        for element in _unkeyed_map_items(root):
            row, column = position(source, element)
            errors.append(
                ValidationError(
                    type=ErrorType.BEST_PRACTICES,
                    severity=Severity.WARNING,
                    message="Elements returned from .map() should have a key prop",
                    line=row + 1,
                    column=column + 1,
                    rule="missing-key-prop",
                )
            )

        handlers = _inline_handler_count(root)
        if handlers > MAX_INLINE_HANDLERS:
            errors.append(
                ValidationError(
                    type=ErrorType.BEST_PRACTICES,
                    severity=Severity.INFO,
                    message=f"{handlers} inline event handlers - consider extracting them",
                    rule="inline-handlers",
                )
            )

        return errors


def _unkeyed_map_items(root: Node) -> list[Node]:
    found: list[Node] = []
    for node in walk(root):
        if node.type != "call_expression" or not _is_map_call(node):
            continue
        arguments = node.child_by_field_name("arguments")
        if arguments is None or not arguments.named_children:
            continue
        callback = arguments.named_children[0]
        if callback.type not in FUNCTION_TYPES:
            continue
        for element in _returned_jsx(callback):
            if "key" not in jsx_attributes(element):
                found.append(element)
    return found


def _is_map_call(call: Node) -> bool:
    function = call.child_by_field_name("function")
    if function is None or function.type != "member_expression":
        return False
    prop = function.child_by_field_name("property")
    return prop is not None and node_text(prop) == "map"


def _returned_jsx(callback: Node) -> list[Node]:
    body = callback.child_by_field_name("body")
    if body is None:
        return []
    if body.type != "statement_block":
        body = unwrap_parens(body)
        return [body] if body.type in JSX_ELEMENT_TYPES else []

    returned: list[Node] = []
    stack = list(body.children)
    while stack:
        node = stack.pop()
        if node.type in FUNCTION_TYPES:
            # Returns inside nested callbacks belong to them.
            continue
        if node.type == "return_statement":
            for child in node.named_children:
                value = unwrap_parens(child)
                if value.type in JSX_ELEMENT_TYPES:
                    returned.append(value)
            continue
        stack.extend(node.children)
    returned.sort(key=lambda n: n.start_byte)
    return returned


def _inline_handler_count(root: Node) -> int:
    count = 0
    for node in walk(root):
        if node.type != "jsx_attribute" or len(node.named_children) < 2:
            continue
        name, value = node.named_children[0], node.named_children[1]
        if not _EVENT_ATTRIBUTE.match(node_text(name)) or value.type != "jsx_expression":
            continue
        if any(unwrap_parens(c).type in FUNCTION_TYPES for c in value.named_children):
            count += 1
    return count
