"""Component analyzer: classifies code into a type/complexity profile."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from uiqa.analysis.syntax import JSX_ELEMENT_TYPES, jsx_attributes, parse_tsx, string_literal_values, walk
from uiqa.errors import InvalidInputError
from uiqa.schemas.analysis import ComponentAnalysis, ComponentType

logger = logging.getLogger(__name__)

# Checked in order; the first type with a matching keyword wins.
TYPE_KEYWORDS: list[tuple[ComponentType, tuple[str, ...]]] = [
    (ComponentType.FORM, ("form", "input", "submit")),
    (ComponentType.NAVIGATION, ("nav", "menu", "breadcrumb")),
    (ComponentType.INTERACTIVE, ("button", "onclick", "toggle")),
    (ComponentType.DATA_VISUALIZATION, ("chart", "graph", "data")),
    (ComponentType.LAYOUT, ("grid", "flex", "container")),
]

_EVENT_HANDLER = re.compile(r"on[A-Z]\w+")
_HOOK_CALL = re.compile(r"\buse[A-Z]\w+\s*(?:<[^<>()]*>)?\s*\(")
_STATE_HOOKS = ("useState", "useReducer", "useEffect")
_ACCESSIBILITY_MARKERS = ("aria-", "role=", "alt=", "tabIndex", "htmlFor")
_CLASS_ATTRIBUTE = re.compile(r'className="([^"]*)"')


class MarkupExtractor(ABC):
    """Pulls Tailwind class tokens out of component markup."""

    @abstractmethod
    def class_names(self, code: str) -> list[str]:
        """Class tokens in first-seen order, duplicates included."""


class RegexMarkupExtractor(MarkupExtractor):
    """Scans literal ``className="…"`` attributes."""

    def class_names(self, code: str) -> list[str]:
        tokens: list[str] = []
        for value in _CLASS_ATTRIBUTE.findall(code):
            tokens.extend(value.split())
        return tokens


class SyntaxTreeMarkupExtractor(MarkupExtractor):
    """Walks the TSX tree, so ``className={cn("a", ok && "b")}`` and template literals count too.

    Where the parser had to recover from syntax errors, attributes inside the
    damaged region may be lost; the regex scan is merged in for those trees.
    """

    def __init__(self, fallback: MarkupExtractor | None = None) -> None:
        self._fallback = fallback or RegexMarkupExtractor()

    def class_names(self, code: str) -> list[str]:
        tree = parse_tsx(code)
        tokens: list[str] = []
        for node in walk(tree.root_node):
            if node.type not in JSX_ELEMENT_TYPES:
                continue
            value = jsx_attributes(node).get("className")
            if value is None:
                continue
            for literal in string_literal_values(value):
                tokens.extend(literal.split())

        if tree.root_node.has_error:
            logger.debug("Syntax errors in markup; merging regex class scan")
            tokens.extend(self._fallback.class_names(code))
        return tokens


class ComponentAnalyzer:
    """Builds a :class:`ComponentAnalysis` for a code string."""

    def __init__(self, extractor: MarkupExtractor | None = None) -> None:
        self.extractor = extractor or SyntaxTreeMarkupExtractor()

    def analyze(self, code: str) -> ComponentAnalysis:
        if not isinstance(code, str):
            raise InvalidInputError(f"code must be a string, got {type(code).__name__}")

        has_interactivity = bool(_EVENT_HANDLER.search(code)) or any(
            hook in code for hook in _STATE_HOOKS
        )
        uses_hooks = bool(_HOOK_CALL.search(code))
        has_accessibility_features = any(marker in code for marker in _ACCESSIBILITY_MARKERS)
        tailwind_classes = frozenset(self.extractor.class_names(code))

        complexity_score = min(
            100.0,
            len(code) / 50
            + (20 if has_interactivity else 0)
            + (15 if uses_hooks else 0)
            + len(tailwind_classes) / 2
            + (10 if has_accessibility_features else 0),
        )

        return ComponentAnalysis(
            component_type=classify_component_type(code),
            has_interactivity=has_interactivity,
            uses_hooks=uses_hooks,
            has_accessibility_features=has_accessibility_features,
            tailwind_classes=tailwind_classes,
            complexity_score=complexity_score,
        )


def classify_component_type(code: str) -> ComponentType:
    lowered = code.lower()
    for component_type, keywords in TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return component_type
    return ComponentType.DISPLAY
