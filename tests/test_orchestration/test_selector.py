"""Tests for strategy and provider selection."""

from __future__ import annotations

import pytest

from uiqa.errors import InvalidInputError
from uiqa.orchestration.ledger import PerformanceLedger
from uiqa.orchestration.selector import (
    OrchestrationSelector,
    coerce_context,
    select_provider,
    select_strategy,
    top_priority,
    weakest_dimension,
)
from uiqa.orchestration.strategies import default_strategies
from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.orchestration import (
    AIProviderPerformance,
    FeedbackRecord,
    PriorityWeights,
    ProviderId,
    ProviderQualityMetrics,
    QualityDimension,
    StrategyId,
)


def _provider(
    provider: ProviderId,
    count: int = 10,
    *,
    types: dict[str, float] | None = None,
    complexity: dict[str, float] | None = None,
    overall: float = 0.0,
) -> AIProviderPerformance:
    return AIProviderPerformance(
        provider=provider,
        generation_count=count,
        component_type_performance=types or {},
        complexity_performance=complexity or {},
        quality_metrics=ProviderQualityMetrics(avg_quality_score=overall),
    )


class TestDimensionHelpers:
    def test_weakest_dimension(self, make_score) -> None:
        score = make_score(code_quality=90, accessibility=40, design_consistency=60, performance=50)
        assert weakest_dimension(score) == QualityDimension.ACCESSIBILITY

    def test_weakest_dimension_ties_take_earliest(self, make_score) -> None:
        score = make_score(code_quality=90, accessibility=50, design_consistency=90, performance=50)
        assert weakest_dimension(score) == QualityDimension.ACCESSIBILITY

    def test_top_priority_ties_take_earliest(self, make_context) -> None:
        assert top_priority(make_context()) == QualityDimension.CODE_QUALITY
        weights = PriorityWeights(code_quality=0.1, accessibility=0.1, design_consistency=0.4, performance=0.4)
        assert top_priority(make_context(weights=weights)) == QualityDimension.DESIGN_CONSISTENCY


class TestSelectStrategy:
    def test_accessibility_priority_for_forms(self, make_context) -> None:
        weights = PriorityWeights(code_quality=0.1, accessibility=0.7, design_consistency=0.1, performance=0.1)
        ctx = make_context(ComponentType.FORM, weights=weights)
        assert select_strategy(ctx, default_strategies()).id == StrategyId.ACCESSIBILITY_FOCUSED

    def test_balanced_when_priority_strategy_unsuitable(self, make_context) -> None:
        # Equal weights favour code quality, but quality-first does not target display components.
        assert select_strategy(make_context(), default_strategies()).id == StrategyId.USER_EXPERIENCE

    def test_code_quality_priority_for_interactive(self, make_context) -> None:
        ctx = make_context(ComponentType.INTERACTIVE)
        assert select_strategy(ctx, default_strategies()).id == StrategyId.QUALITY_FIRST

    def test_weak_attempt_switches_to_recovery_strategy(self, make_context, make_attempt, make_score) -> None:
        last = make_attempt(
            make_score(code_quality=80, accessibility=30, design_consistency=70, performance=70, overall=55),
            strategy=StrategyId.QUALITY_FIRST,
        )
        ctx = make_context(ComponentType.FORM, attempts=[last])
        assert select_strategy(ctx, default_strategies()).id == StrategyId.ACCESSIBILITY_FOCUSED

    def test_recovery_never_repeats_last_strategy(self, make_context, make_attempt, make_score) -> None:
        last = make_attempt(
            make_score(code_quality=20, accessibility=70, design_consistency=70, performance=70, overall=45),
            strategy=StrategyId.QUALITY_FIRST,
        )
        ctx = make_context(ComponentType.FORM, attempts=[last])
        chosen = select_strategy(ctx, default_strategies())
        assert chosen.id != StrategyId.QUALITY_FIRST
        assert chosen.id == StrategyId.ACCESSIBILITY_FOCUSED

    def test_acceptable_attempt_keeps_normal_selection(self, make_context, make_attempt, make_score) -> None:
        last = make_attempt(make_score(overall=85), strategy=StrategyId.QUALITY_FIRST)
        ctx = make_context(ComponentType.INTERACTIVE, attempts=[last])
        assert select_strategy(ctx, default_strategies()).id == StrategyId.QUALITY_FIRST

    def test_no_suitable_strategy_falls_back_to_balanced(self, make_context) -> None:
        strategies = [s for s in default_strategies() if s.id in (StrategyId.QUALITY_FIRST, StrategyId.USER_EXPERIENCE)]
        for s in strategies:
            s.target_component_types = frozenset({"form"})
        assert select_strategy(make_context(ComponentType.LAYOUT), strategies).id == StrategyId.USER_EXPERIENCE

    def test_no_suitable_and_no_balanced_takes_first(self, make_context) -> None:
        [quality_first] = [s for s in default_strategies() if s.id == StrategyId.QUALITY_FIRST]
        assert select_strategy(make_context(ComponentType.LAYOUT), [quality_first]) is quality_first

    def test_wildcard_targets_every_type(self, make_context) -> None:
        [performance] = [s for s in default_strategies() if s.id == StrategyId.PERFORMANCE_OPTIMIZED]
        performance.target_component_types = frozenset({"all"})
        weights = PriorityWeights(code_quality=0, accessibility=0, design_consistency=0, performance=1)
        ctx = make_context(ComponentType.FORM, weights=weights)
        assert select_strategy(ctx, [performance]).id == StrategyId.PERFORMANCE_OPTIMIZED

    def test_empty_catalog(self, make_context) -> None:
        with pytest.raises(InvalidInputError):
            select_strategy(make_context(), [])

    def test_deterministic(self, make_context) -> None:
        ctx = make_context(ComponentType.NAVIGATION, ComplexityLevel.COMPLEX)
        picks = {select_strategy(ctx, default_strategies()).id for _ in range(5)}
        assert len(picks) == 1

    def test_accepts_mapping_context(self) -> None:
        ctx = {"user_prompt": "menu", "component_type": "navigation", "complexity_level": "simple"}
        assert select_strategy(ctx, default_strategies()).id == StrategyId.USER_EXPERIENCE


class TestCoerceContext:
    def test_malformed_mapping(self) -> None:
        with pytest.raises(InvalidInputError, match="malformed"):
            coerce_context({"user_prompt": "x", "component_type": "spaceship"})

    def test_wrong_type(self) -> None:
        with pytest.raises(InvalidInputError):
            coerce_context("form please")


class TestSelectProvider:
    def test_best_type_average_wins(self, make_context) -> None:
        ctx = make_context(ComponentType.FORM)
        performances = [
            _provider(ProviderId.OPENAI, types={"form": 70}),
            _provider(ProviderId.ANTHROPIC, types={"form": 90}),
        ]
        assert select_provider(ctx, performances) == ProviderId.ANTHROPIC

    def test_cold_start_uses_default(self, make_context) -> None:
        performances = [_provider(ProviderId.OPENAI, count=5, types={"display": 99})]
        assert select_provider(make_context(), performances) == ProviderId.VERCEL
        assert select_provider(make_context(), [], default=ProviderId.OPENAI) == ProviderId.OPENAI

    def test_min_generations_is_exclusive(self, make_context) -> None:
        performances = [_provider(ProviderId.OPENAI, count=3, overall=80)]
        assert select_provider(make_context(), performances, min_generations=3) == ProviderId.VERCEL
        assert select_provider(make_context(), performances, min_generations=2) == ProviderId.OPENAI

    def test_falls_back_to_complexity_then_overall(self, make_context) -> None:
        ctx = make_context(ComponentType.FORM, ComplexityLevel.COMPLEX)
        performances = [
            _provider(ProviderId.OPENAI, complexity={"complex": 60}, overall=95),
            _provider(ProviderId.ANTHROPIC, overall=70),
        ]
        assert select_provider(ctx, performances) == ProviderId.ANTHROPIC

    def test_ties_broken_by_provider_order(self, make_context) -> None:
        performances = [
            _provider(ProviderId.ANTHROPIC, overall=80),
            _provider(ProviderId.OPENAI, overall=80),
        ]
        assert select_provider(make_context(), performances) == ProviderId.OPENAI


class TestOrchestrationSelector:
    def _feedback(self, provider: ProviderId, overall: int, make_score) -> FeedbackRecord:
        return FeedbackRecord(
            strategy_id=StrategyId.USER_EXPERIENCE,
            provider=provider,
            component_type=ComponentType.DISPLAY,
            complexity_level=ComplexityLevel.SIMPLE,
            quality_score=make_score(overall=overall),
        )

    def test_plan(self, make_context) -> None:
        selector = OrchestrationSelector(PerformanceLedger())
        plan = selector.plan(make_context(prompt="Show a profile"))
        assert plan.strategy_id == StrategyId.USER_EXPERIENCE
        assert plan.provider == ProviderId.VERCEL
        assert "Show a profile" in plan.prompt.user_prompt
        assert "BALANCED UX APPROACH" in plan.prompt.system_prompt

    def test_feedback_steers_provider_choice(self, make_context, make_score) -> None:
        selector = OrchestrationSelector(PerformanceLedger(), min_provider_generations=2)
        for _ in range(3):
            selector.record_feedback(self._feedback(ProviderId.OPENAI, 60, make_score))
            selector.record_feedback(self._feedback(ProviderId.ANTHROPIC, 90, make_score))
        assert selector.select_provider(make_context()) == ProviderId.ANTHROPIC

    def test_unavailable_providers_not_ranked(self, make_context, make_score) -> None:
        selector = OrchestrationSelector(
            PerformanceLedger(),
            min_provider_generations=0,
            available_providers={ProviderId.OPENAI},
        )
        selector.record_feedback(self._feedback(ProviderId.OPENAI, 60, make_score))
        selector.record_feedback(self._feedback(ProviderId.ANTHROPIC, 90, make_score))
        assert selector.select_provider(make_context()) == ProviderId.OPENAI

    def test_feedback_updates_strategy_metrics(self, make_score) -> None:
        ledger = PerformanceLedger()
        OrchestrationSelector(ledger).record_feedback(self._feedback(ProviderId.OPENAI, 80, make_score))
        metrics = ledger.catalog.get(StrategyId.USER_EXPERIENCE).success_metrics
        assert metrics.generation_count == 1
        assert metrics.avg_quality_score == 80
