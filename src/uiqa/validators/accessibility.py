"""WCAG-oriented accessibility heuristics."""

from __future__ import annotations

import logging
import re

from uiqa.analysis.syntax import JSX_ELEMENT_TYPES, jsx_attributes, node_text, opening_element, parse_tsx, walk
from uiqa.analysis.tailwind import DARK_BACKGROUND, LIGHT_TEXT, base_utilities
from uiqa.schemas.analysis import ComponentAnalysis, ComponentType
from uiqa.schemas.quality import ErrorType, Severity, ValidationError, ValidatorResult

# Used only when the tree has parse errors. Brace values may contain ">".
_IMG_TAG = re.compile(r"<img\b(?:\{(?:[^{}]|\{[^{}]*\})*\}|[^>{])*>")
_ALT_ATTRIBUTE = re.compile(r"(?<![\w-])alt=")
_INPUT_TAG = re.compile(r"<input\b")
_LABEL_TAG = re.compile(r"<label\b")
_LANDMARK = re.compile(r"<(main|section|article|nav|header|footer|aside)\b")

IMG_ALT_PENALTY = 15
ARIA_PENALTY = 20
FORM_LABEL_PENALTY = 10
LANDMARK_PENALTY = 5
LIGHT_TEXT_PENALTY = 5

logger = logging.getLogger(__name__)


class AccessibilityValidator:
    def validate(self, code: str, analysis: ComponentAnalysis) -> ValidatorResult:
        errors: list[ValidationError] = []
        score = 100

        # Every image without alt text costs points; repeated offences are not capped.
        for line in images_without_alt(code):
            errors.append(
                _error(Severity.ERROR, "Images must have alt attributes", "img-alt", line=line)
            )
            score -= IMG_ALT_PENALTY

        if (
            analysis.component_type == ComponentType.INTERACTIVE
            and not analysis.has_accessibility_features
        ):
            errors.append(
                _error(
                    Severity.ERROR,
                    "Interactive components should include ARIA attributes",
                    "aria-attributes",
                )
            )
            score -= ARIA_PENALTY

        if analysis.component_type == ComponentType.FORM:
            inputs = len(_INPUT_TAG.findall(code))
            labels = len(_LABEL_TAG.findall(code))
            if inputs > labels:
                errors.append(
                    _error(
                        Severity.WARNING,
                        f"Form has {inputs} inputs but only {labels} labels",
                        "form-labels",
                    )
                )
                score -= FORM_LABEL_PENALTY

        if analysis.component_type != ComponentType.DISPLAY and not _LANDMARK.search(code):
            errors.append(
                _error(
                    Severity.INFO,
                    "Consider using semantic HTML elements (main, section, nav, etc.)",
                    "semantic-html",
                )
            )
            score -= LANDMARK_PENALTY

        utilities = base_utilities(analysis.tailwind_classes)
        has_light_text = bool(utilities & LIGHT_TEXT)
        has_dark_background = any(DARK_BACKGROUND.match(u) for u in utilities)
        if has_light_text and not has_dark_background:
            errors.append(
                _error(
                    Severity.WARNING,
                    "Light text without a dark background - verify color contrast meets WCAG standards",
                    "color-contrast",
                )
            )
            score -= LIGHT_TEXT_PENALTY

        return ValidatorResult(score=max(0, score), errors=errors)


def images_without_alt(code: str) -> list[int]:
    """1-based lines of ``<img>`` elements that carry no ``alt`` attribute."""
    tree = parse_tsx(code)
    if tree.root_node.has_error:
        logger.debug("Syntax errors in markup; scanning images with regex")
        return [
            code.count("\n", 0, match.start()) + 1
            for match in _IMG_TAG.finditer(code)
            if not _ALT_ATTRIBUTE.search(match.group(0))
        ]

    lines: list[int] = []
    for node in walk(tree.root_node):
        if node.type not in JSX_ELEMENT_TYPES:
            continue
        opening = opening_element(node)
        tag = opening.child_by_field_name("name") if opening is not None else None
        if tag is None or node_text(tag) != "img":
            continue
        if "alt" not in jsx_attributes(node):
            lines.append(opening.start_point[0] + 1)
    return lines


def _error(severity: Severity, message: str, rule: str, line: int | None = None) -> ValidationError:
    return ValidationError(
        type=ErrorType.ACCESSIBILITY,
        severity=severity,
        message=message,
        rule=rule,
        line=line,
    )
