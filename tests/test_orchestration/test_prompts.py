"""Tests for request classification and prompt augmentation."""

from __future__ import annotations

import pytest

from uiqa.orchestration.prompts import (
    BASE_SYSTEM_PROMPT,
    COMPLEXITY_GUIDANCE,
    IMAGE_INSTRUCTIONS,
    TYPE_GUIDELINES,
    augment_prompt,
    detect_component_type,
    determine_complexity,
    improvement_areas,
    preference_guidance,
    render_request_message,
)
from uiqa.orchestration.strategies import StrategyCatalog
from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.orchestration import PriorityWeights, QualityPreferences, StrategyId


@pytest.fixture
def quality_first():
    return StrategyCatalog().get(StrategyId.QUALITY_FIRST)


class TestClassification:
    @pytest.mark.parametrize(
        ("prompt", "expected"),
        [
            ("A login form with email and password", ComponentType.FORM),
            ("Sidebar navigation with icons", ComponentType.NAVIGATION),
            ("A modal dialog for confirming deletion", ComponentType.INTERACTIVE),
            ("Sales dashboard chart", ComponentType.DATA_VISUALIZATION),
            ("Two-column card layout", ComponentType.LAYOUT),
            ("A hero banner with a tagline", ComponentType.DISPLAY),
        ],
    )
    def test_detect_component_type(self, prompt: str, expected: ComponentType) -> None:
        assert detect_component_type(prompt) == expected

    def test_whole_words_only(self) -> None:
        # "information" contains "form" but is not a form request.
        assert detect_component_type("An information banner") == ComponentType.DISPLAY

    @pytest.mark.parametrize(
        ("prompt", "expected"),
        [
            ("A simple badge", ComplexityLevel.SIMPLE),
            ("A signup form", ComplexityLevel.MEDIUM),
            ("A responsive card", ComplexityLevel.MEDIUM),
            ("Interactive dashboard with realtime api data", ComplexityLevel.COMPLEX),
        ],
    )
    def test_determine_complexity(self, prompt: str, expected: ComplexityLevel) -> None:
        assert determine_complexity(prompt) == expected


class TestAugmentPrompt:
    def test_system_prompt_layers(self, make_context, quality_first) -> None:
        ctx = make_context(ComponentType.FORM, ComplexityLevel.MEDIUM)
        system = augment_prompt(ctx, quality_first).system_prompt
        assert system.startswith(quality_first.system_prompt_modifier + "\n\n" + BASE_SYSTEM_PROMPT)
        assert TYPE_GUIDELINES[ComponentType.FORM] in system
        assert COMPLEXITY_GUIDANCE[ComplexityLevel.MEDIUM] in system
        assert "USER QUALITY PREFERENCES" in system
        assert IMAGE_INSTRUCTIONS not in system

    def test_image_instructions(self, make_context, quality_first) -> None:
        system = augment_prompt(make_context(has_image=True), quality_first).system_prompt
        assert IMAGE_INSTRUCTIONS in system

    def test_user_prompt_enhanced(self, make_context, quality_first) -> None:
        user = augment_prompt(make_context(prompt="A pricing table"), quality_first).user_prompt
        assert user.startswith("\nA pricing table\n\nQUALITY REQUIREMENTS:\n- ")
        assert "IMPROVEMENT FOCUS" not in user

    def test_improvement_focus_after_weak_attempt(self, make_context, make_attempt, make_score, quality_first) -> None:
        weak = make_score(code_quality=90, accessibility=40, design_consistency=75, performance=60, overall=65)
        ctx = make_context(attempts=[make_attempt(weak)])
        user = augment_prompt(ctx, quality_first).user_prompt
        assert "Previous quality score: 65/100" in user
        assert "accessibility and WCAG compliance, performance optimization" in user

    def test_no_improvement_focus_at_threshold(self, make_context, make_attempt, make_score, quality_first) -> None:
        ctx = make_context(attempts=[make_attempt(make_score(overall=70))])
        assert "IMPROVEMENT FOCUS" not in augment_prompt(ctx, quality_first).user_prompt

    def test_deterministic(self, make_context, quality_first) -> None:
        ctx = make_context(ComponentType.NAVIGATION)
        assert augment_prompt(ctx, quality_first) == augment_prompt(ctx, quality_first)


class TestHelpers:
    def test_improvement_areas(self, make_score) -> None:
        areas = improvement_areas(make_score(code_quality=69, accessibility=70, design_consistency=10, performance=90))
        assert areas == ["code quality and TypeScript best practices", "design consistency and visual patterns"]

    def test_preference_guidance(self) -> None:
        prefs = QualityPreferences(
            priority_weights=PriorityWeights(code_quality=0.1, accessibility=0.2, design_consistency=0.2, performance=0.5),
            min_acceptable_score=80,
        )
        text = preference_guidance(prefs)
        assert "Primary focus: performance (highest priority)" in text
        assert "Secondary focus: accessibility" in text
        assert "80/100" in text


class TestRequestMessage:
    def test_new_component(self) -> None:
        msg = render_request_message("Build a card")
        assert msg.startswith('<request type="new_component">')
        assert "<description_prompt>Build a card</description_prompt>" in msg
        assert "<component><name>" in msg
        assert "image_analysis" not in msg

    def test_edit_component_with_image(self) -> None:
        msg = render_request_message("Make it blue", original_code="<div />", has_image=True)
        assert msg.startswith('<request type="edit_component">')
        assert "<original_code><![CDATA[<div />]]></original_code>" in msg
        assert "<edit_instruction>Make it blue</edit_instruction>" in msg
        assert "<image_analysis>" in msg
        assert "<component_edit><name>" in msg
