"""The fixed catalog of prompt strategies and the store that owns it."""

from __future__ import annotations

import copy
import threading
from typing import Callable

from uiqa.schemas.orchestration import GenerationContext, PromptStrategy, StrategyId


def _requirements_enhancer(heading: str, requirements: list[str]) -> Callable[[str, GenerationContext], str]:
    """Build a user-prompt enhancer that appends a requirements block."""
    block = "\n".join(f"- {r}" for r in requirements)

    def enhance(prompt: str, context: GenerationContext) -> str:
        return f"\n{prompt}\n\n{heading}:\n{block}"

    return enhance


def default_strategies() -> list[PromptStrategy]:
    """A fresh copy of the five built-in strategies with zeroed metrics."""
    return [
        PromptStrategy(
            id=StrategyId.QUALITY_FIRST,
            name="Quality-First Strategy",
            description="Emphasizes code quality and best practices above all else",
            system_prompt_modifier="""
**QUALITY-FIRST APPROACH:**
- Prioritize TypeScript best practices and type safety
- Ensure comprehensive error handling and edge cases
- Focus on clean, maintainable code structure
- Implement proper React patterns and hooks usage
- Validate all interactive elements and state management""",
            user_prompt_enhancer=_requirements_enhancer(
                "QUALITY REQUIREMENTS",
                [
                    "Ensure TypeScript compilation without errors",
                    "Implement comprehensive error handling",
                    "Use proper React patterns and best practices",
                    "Add detailed comments for complex logic",
                    "Target quality score: 85+ overall",
                ],
            ),
            target_component_types=frozenset({"interactive", "form", "data-visualization"}),
        ),
        PromptStrategy(
            id=StrategyId.ACCESSIBILITY_FOCUSED,
            name="Accessibility-Focused Strategy",
            description="Prioritizes WCAG compliance and inclusive design",
            system_prompt_modifier="""
**ACCESSIBILITY-FIRST APPROACH:**
- Implement comprehensive ARIA attributes and semantic HTML
- Ensure keyboard navigation and screen reader compatibility
- Validate color contrast ratios (4.5:1 minimum)
- Add proper focus management and visual indicators
- Include alternative content for all media elements""",
            user_prompt_enhancer=_requirements_enhancer(
                "ACCESSIBILITY REQUIREMENTS",
                [
                    "WCAG 2.1 AA compliance mandatory",
                    "Include comprehensive ARIA attributes",
                    "Ensure keyboard navigation support",
                    "Validate color contrast ratios",
                    "Target accessibility score: 90+ (excellent)",
                ],
            ),
            target_component_types=frozenset({"form", "navigation", "interactive"}),
        ),
        PromptStrategy(
            id=StrategyId.DESIGN_CONSISTENCY,
            name="Design Consistency Strategy",
            description="Focuses on visual coherence and design system adherence",
            system_prompt_modifier="""
**DESIGN-FIRST APPROACH:**
- Follow established design system patterns and components
- Use consistent spacing, typography, and color schemes
- Implement responsive design principles across all breakpoints
- Ensure visual hierarchy and information architecture
- Maintain brand consistency and aesthetic cohesion""",
            user_prompt_enhancer=_requirements_enhancer(
                "DESIGN REQUIREMENTS",
                [
                    "Follow shadcn/ui design patterns consistently",
                    "Use systematic spacing and typography scales",
                    "Implement responsive design for all devices",
                    "Maintain visual consistency and hierarchy",
                    "Target design consistency score: 85+",
                ],
            ),
            target_component_types=frozenset({"layout", "navigation", "display"}),
        ),
        PromptStrategy(
            id=StrategyId.PERFORMANCE_OPTIMIZED,
            name="Performance-Optimized Strategy",
            description="Emphasizes rendering performance and optimization",
            system_prompt_modifier="""
**PERFORMANCE-FIRST APPROACH:**
- Optimize component rendering with memoization techniques
- Minimize bundle size and avoid unnecessary dependencies
- Implement efficient state management patterns
- Use lazy loading and code splitting where appropriate
- Ensure minimal re-renders and optimal React patterns""",
            user_prompt_enhancer=_requirements_enhancer(
                "PERFORMANCE REQUIREMENTS",
                [
                    "Implement useMemo and useCallback for optimization",
                    "Minimize component size and complexity",
                    "Avoid unnecessary re-renders and state updates",
                    "Use efficient data structures and algorithms",
                    "Target performance score: 85+",
                ],
            ),
            target_component_types=frozenset({"data-visualization", "interactive", "layout"}),
        ),
        PromptStrategy(
            id=StrategyId.USER_EXPERIENCE,
            name="User Experience Strategy",
            description="Balances all quality aspects for optimal user satisfaction",
            system_prompt_modifier="""
**BALANCED UX APPROACH:**
- Create intuitive and user-friendly interactions
- Balance technical quality with usability
- Implement progressive enhancement and graceful degradation
- Focus on user feedback and iterative improvement
- Ensure cross-browser compatibility and reliability""",
            user_prompt_enhancer=_requirements_enhancer(
                "USER EXPERIENCE REQUIREMENTS",
                [
                    "Prioritize intuitive user interactions",
                    "Balance quality across all dimensions",
                    "Implement user-friendly error states and feedback",
                    "Ensure reliable cross-browser functionality",
                    "Target overall user satisfaction and quality balance",
                ],
            ),
            target_component_types=frozenset({"interactive", "form", "navigation", "display"}),
        ),
    ]


class StrategyCatalog:
    """Owns the strategy list; metrics are mutated in place under ``lock``.

    Readers should use :meth:`snapshot`, which deep-copies the strategies so
    selection never observes a half-applied update.
    """

    def __init__(self, strategies: list[PromptStrategy] | None = None) -> None:
        self._strategies = strategies if strategies is not None else default_strategies()
        self.lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._strategies)

    def get(self, strategy_id: StrategyId) -> PromptStrategy | None:
        for strategy in self._strategies:
            if strategy.id == strategy_id:
                return strategy
        return None

    def snapshot(self) -> list[PromptStrategy]:
        with self.lock:
            # Enhancer callables are shared; deepcopy of a function returns it unchanged.
            return copy.deepcopy(self._strategies)
