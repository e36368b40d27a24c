"""TypeScript diagnostics for generated TSX components.

The component is wrapped in a minimal module context and parsed as TSX.
Pre-emit diagnostics come from three passes over the tree:

- syntax: ERROR and MISSING nodes left by the parser's error recovery
- options: JSX without a ``jsx`` mode, syntax newer than ``target``
- semantic: literal initializers of variables, parameters and class fields
  checked against primitive annotations (``const x: string = 123``), with
  ``strict`` controlling whether ``null``/``undefined`` are assignable to
  primitives
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict
from tree_sitter import Node

from uiqa.analysis.syntax import JSX_ELEMENT_TYPES, node_text, parse_tsx, position, unwrap_parens, walk
from uiqa.schemas.quality import ErrorType, Severity, TypeScriptResult, ValidationError

logger = logging.getLogger(__name__)

MODULE_PRELUDE = "import React from 'react';\n"
_PRELUDE_LINES = MODULE_PRELUDE.count("\n")

_PRIMITIVE_TYPES = frozenset({"string", "number", "boolean"})
_SNIPPET_LENGTH = 30

# Annotated bindings that may carry a literal initializer, with the field holding their name.
_INITIALIZED_BINDINGS = {
    "variable_declarator": "name",
    "required_parameter": "pattern",
    "optional_parameter": "pattern",
    "public_field_definition": "name",
}


class DiagnosticCategory(IntEnum):
    # Same numbering as ts.DiagnosticCategory
    WARNING = 0
    ERROR = 1
    SUGGESTION = 2
    MESSAGE = 3


Target = Literal[
    "ES3", "ES5", "ES2015", "ES2016", "ES2017", "ES2018", "ES2019", "ES2020", "ES2021", "ES2022", "ESNext"
]
JsxMode = Literal["preserve", "react", "react-jsx", "react-jsxdev", "react-native"]

TARGET_ORDER: tuple[str, ...] = get_args(Target)


class CompilerOptions(BaseModel):
    """The subset of tsconfig options that change which diagnostics are reported.

    ``jsx=None`` rejects JSX (TS17004). ``target`` gates syntax the compiler
    cannot downlevel: BigInt literals below ES2020 (TS2737) and accessors
    on ES3 (TS1056).
    """

    model_config = ConfigDict(frozen=True)

    target: Target = "ES2020"
    jsx: JsxMode | None = "react-jsx"
    strict: bool = True

    def targets_below(self, target: str) -> bool:
        return TARGET_ORDER.index(self.target) < TARGET_ORDER.index(target)


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    category: DiagnosticCategory
    message: str
    row: int  # 0-based, in the wrapped source
    column: int  # 0-based


class TypeScriptValidator:
    """Collects pre-emit diagnostics and maps them to ``ValidationError`` records."""

    def __init__(self, options: CompilerOptions | None = None) -> None:
        self.options = options or CompilerOptions()

    def validate(self, code: str) -> TypeScriptResult:
        try:
            diagnostics = self.pre_emit_diagnostics(code)
        except Exception as exc:
            logger.warning("TypeScript analysis failed: %s", exc)
            return TypeScriptResult(
                is_valid=False,
                errors=[
                    ValidationError(
                        type=ErrorType.TYPESCRIPT,
                        severity=Severity.ERROR,
                        message=f"Compilation error: {exc}",
                        rule="typescript-compilation",
                    )
                ],
            )

        errors = [self._to_validation_error(d) for d in diagnostics]
        return TypeScriptResult(
            is_valid=not any(e.severity == Severity.ERROR for e in errors),
            errors=errors,
        )

    def pre_emit_diagnostics(self, code: str) -> list[Diagnostic]:
        wrapped = MODULE_PRELUDE + code
        source = wrapped.encode("utf-8")
        root = parse_tsx(wrapped).root_node

        diagnostics = list(_syntax_diagnostics(root, source))
        diagnostics.extend(self._option_diagnostics(root, source))
        diagnostics.extend(self._semantic_diagnostics(root, source))
        diagnostics.sort(key=lambda d: (d.row, d.column))
        return diagnostics

    def _option_diagnostics(self, root: Node, source: bytes) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        bigint_unsupported = self.options.targets_below("ES2020")
        accessors_unsupported = self.options.targets_below("ES5")
        for node in walk(root):
            if node.type in JSX_ELEMENT_TYPES and self.options.jsx is None:
                found.append(
                    _error_at(source, node, 17004, "Cannot use JSX unless the '--jsx' flag is provided.")
                )
            elif node.type == "number" and bigint_unsupported and node_text(node).endswith("n"):
                found.append(
                    _error_at(source, node, 2737, "BigInt literals are not available when targeting lower than ES2020.")
                )
            elif node.type == "method_definition" and accessors_unsupported:
                name = node.child_by_field_name("name")
                if name is not None and any(child.type in ("get", "set") for child in node.children):
                    found.append(
                        _error_at(source, name, 1056, "Accessors are only available when targeting ECMAScript 5 and higher.")
                    )
        return found

    def _semantic_diagnostics(self, root: Node, source: bytes) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        for node in walk(root):
            name_field = _INITIALIZED_BINDINGS.get(node.type)
            if name_field is None:
                continue
            annotation = node.child_by_field_name("type")
            value = node.child_by_field_name("value")
            name = node.child_by_field_name(name_field)
            if annotation is None or value is None or name is None:
                continue

            declared = _annotated_primitive(annotation)
            actual = _literal_type(value)
            if declared is None or actual is None or actual == declared:
                continue
            if actual in ("null", "undefined") and not self.options.strict:
                continue

            found.append(
                _error_at(source, name, 2322, f"Type '{actual}' is not assignable to type '{declared}'.")
            )
        return found

    @staticmethod
    def _to_validation_error(diagnostic: Diagnostic) -> ValidationError:
        severity = (
            Severity.ERROR
            if diagnostic.category == DiagnosticCategory.ERROR
            else Severity.WARNING
        )
        return ValidationError(
            type=ErrorType.TYPESCRIPT,
            severity=severity,
            message=diagnostic.message,
            line=max(1, diagnostic.row - _PRELUDE_LINES + 1),
            column=diagnostic.column + 1,
            rule=f"TS{diagnostic.code}",
        )


def _error_at(source: bytes, node: Node, code: int, message: str) -> Diagnostic:
    row, column = position(source, node)
    return Diagnostic(code=code, category=DiagnosticCategory.ERROR, message=message, row=row, column=column)


def _syntax_diagnostics(root: Node, source: bytes):
    # Only subtrees flagged has_error can contain ERROR or MISSING nodes.
    if not root.has_error:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            row, column = position(source, node)
            yield Diagnostic(
                code=1005,
                category=DiagnosticCategory.ERROR,
                message=f"'{node.type}' expected.",
                row=row,
                column=column,
            )
        elif node.type == "ERROR":
            row, column = position(source, node)
            snippet = " ".join(node_text(node).split())[:_SNIPPET_LENGTH]
            yield Diagnostic(
                code=1128,
                category=DiagnosticCategory.ERROR,
                message=f"Declaration or statement expected near '{snippet}'.",
                row=row,
                column=column,
            )
        elif node.has_error:
            stack.extend(reversed(node.children))


def _annotated_primitive(annotation: Node) -> str | None:
    for child in annotation.named_children:
        if child.type == "predefined_type":
            text = node_text(child)
            return text if text in _PRIMITIVE_TYPES else None
    return None


def _literal_type(value: Node) -> str | None:
    value = unwrap_parens(value)
    match value.type:
        case "string" | "template_string":
            return "string"
        case "number":
            return "bigint" if node_text(value).endswith("n") else "number"
        case "true" | "false":
            return "boolean"
        case "null":
            return "null"
        case "undefined":
            return "undefined"
        case "unary_expression":
            operand = value.child_by_field_name("argument")
            if operand is not None and operand.type == "number":
                return "number"
    return None
