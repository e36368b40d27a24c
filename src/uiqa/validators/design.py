"""Design-system consistency: Tailwind pattern adherence plus visual consistency.

The final score is the half-up rounded mean of two sub-scores:

- pattern adherence: are the expected utility groups (spacing, colour,
  responsive variants, rounded corners on controls) present at all?
- visual consistency: are there too many distinct values within a group
  (spacing scale, radii, colour families, type sizes)?
"""

from __future__ import annotations

import logging
import re

from uiqa.analysis.tailwind import (
    COLOR_UTILITY,
    RADIUS_UTILITY,
    SPACING_UTILITY,
    TEXT_SIZE_UTILITY,
    base_utilities,
    color_families,
    is_responsive,
)
from uiqa.schemas.analysis import ComponentAnalysis, ComponentType
from uiqa.schemas.quality import (
    DesignConsistencyResult,
    ErrorType,
    Severity,
    ValidationError,
    ValidatorResult,
    round_half_up,
)

logger = logging.getLogger(__name__)

MAX_SPACING_VALUES = 8
MAX_RADIUS_VARIANTS = 4
MAX_COLOR_FAMILIES = 4
MAX_TEXT_SIZES = 6

_SEMANTIC_WORD = re.compile(r"\b(header|main|section|article|aside|nav|footer)\b")
_CONTAINER_WORD = re.compile(r"\b(container|wrapper|content)\b", re.IGNORECASE)
_LAYOUT_HINTS = ("flex", "grid", "space-")


class DesignConsistencyValidator:
    def validate(self, code: str, analysis: ComponentAnalysis) -> DesignConsistencyResult:
        pattern = self.pattern_adherence(code, analysis)
        visual = self.visual_consistency(code, analysis)
        score = round_half_up((pattern.score + visual.score) / 2)
        logger.debug("Design sub-scores: pattern=%d visual=%d", pattern.score, visual.score)
        return DesignConsistencyResult(
            score=score,
            errors=pattern.errors + visual.errors,
            pattern_score=pattern.score,
            visual_score=visual.score,
        )

    def pattern_adherence(self, code: str, analysis: ComponentAnalysis) -> ValidatorResult:
        errors: list[ValidationError] = []
        score = 100
        utilities = base_utilities(analysis.tailwind_classes)

        if "className" not in code:
            errors.append(_warning("No className attributes - style the component with Tailwind utilities", "tailwind-usage"))
            score -= 20

        if not any(SPACING_UTILITY.match(u) for u in utilities):
            errors.append(_warning("Consider using Tailwind spacing utilities for consistent spacing", "spacing-utilities"))
            score -= 15

        if not any(COLOR_UTILITY.match(u) for u in utilities):
            errors.append(_warning("No color utilities found - use the Tailwind palette for colors", "color-utilities"))
            score -= 10

        if not any(is_responsive(token) for token in analysis.tailwind_classes):
            errors.append(_warning("No responsive prefixes (sm:, md:, lg:) found", "responsive-utilities"))
            score -= 10

        if analysis.component_type in (ComponentType.INTERACTIVE, ComponentType.FORM) and not any(
            RADIUS_UTILITY.match(u) for u in utilities
        ):
            errors.append(_warning("Interactive components should use rounded corners for modern design", "border-radius"))
            score -= 10

        return ValidatorResult(score=max(0, score), errors=errors)

    def visual_consistency(self, code: str, analysis: ComponentAnalysis) -> ValidatorResult:
        errors: list[ValidationError] = []
        score = 100
        utilities = base_utilities(analysis.tailwind_classes)

        spacing = {u for u in utilities if SPACING_UTILITY.match(u)}
        if len(spacing) > MAX_SPACING_VALUES:
            errors.append(
                _warning(
                    f"{len(spacing)} different spacing values - consider using a consistent spacing scale",
                    "spacing-consistency",
                )
            )
            score -= 10

        radii = {u for u in utilities if RADIUS_UTILITY.match(u)}
        if len(radii) > MAX_RADIUS_VARIANTS:
            errors.append(_warning("Inconsistent border radius usage - stick to 2-3 radius values", "border-radius-consistency"))
            score -= 8

        families = color_families(utilities)
        if len(families) > MAX_COLOR_FAMILIES:
            errors.append(
                _warning(
                    "Too many color schemes - consider limiting to 2-3 primary colors",
                    "color-scheme-consistency",
                )
            )
            score -= 12

        sizes = {u for u in utilities if TEXT_SIZE_UTILITY.match(u)}
        if len(sizes) > MAX_TEXT_SIZES:
            errors.append(_warning("Too many text sizes - consider using a typographic scale", "typography-consistency"))
            score -= 10

        if not has_structure_marker(code, analysis):
            errors.append(
                ValidationError(
                    type=ErrorType.DESIGN,
                    severity=Severity.INFO,
                    message="Consider organizing elements with consistent structure patterns",
                    rule="component-structure",
                )
            )
            score -= 5

        return ValidatorResult(score=max(0, score), errors=errors)


def has_structure_marker(code: str, analysis: ComponentAnalysis) -> bool:
    """Semantic elements, container naming, or layout utilities (flex/grid/space-)."""
    if _SEMANTIC_WORD.search(code) or _CONTAINER_WORD.search(code):
        return True
    return any(hint in cls for cls in analysis.tailwind_classes for hint in _LAYOUT_HINTS)


def _warning(message: str, rule: str) -> ValidationError:
    return ValidationError(type=ErrorType.DESIGN, severity=Severity.WARNING, message=message, rule=rule)
