"""Strategy and provider selection.

:func:`select_strategy` and :func:`select_provider` are pure functions of
their inputs. :class:`OrchestrationSelector` binds them to a ledger: it
reads snapshots, builds the plan, and writes feedback back.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from uiqa.errors import InvalidInputError
from uiqa.orchestration.ledger import PerformanceLedger
from uiqa.orchestration.prompts import augment_prompt
from uiqa.schemas.orchestration import (
    AIProviderPerformance,
    DIMENSION_STRATEGY,
    FeedbackRecord,
    GenerationContext,
    GenerationPlan,
    PromptStrategy,
    ProviderId,
    QualityDimension,
    StrategyId,
)
from uiqa.schemas.quality import ComponentQualityScore

logger = logging.getLogger(__name__)

BALANCED_STRATEGY = StrategyId.USER_EXPERIENCE
DEFAULT_PROVIDER = ProviderId.VERCEL
MIN_PROVIDER_GENERATIONS = 5

_PROVIDER_ORDER = {p: i for i, p in enumerate(ProviderId)}


def coerce_context(context: Any) -> GenerationContext:
    """Accept a context or a mapping; anything else is invalid input."""
    if isinstance(context, GenerationContext):
        return context
    if isinstance(context, dict):
        try:
            return GenerationContext.model_validate(context)
        except PydanticValidationError as exc:
            raise InvalidInputError(f"malformed generation context: {exc}") from exc
    raise InvalidInputError(f"context must be a GenerationContext, got {type(context).__name__}")


def weakest_dimension(score: ComponentQualityScore) -> QualityDimension:
    """Lowest-scoring dimension; the earliest in the fixed order wins ties."""
    weakest = QualityDimension.CODE_QUALITY
    lowest = getattr(score, weakest.value)
    for dimension in QualityDimension:
        value = getattr(score, dimension.value)
        if value < lowest:
            weakest, lowest = dimension, value
    return weakest


def top_priority(context: GenerationContext) -> QualityDimension:
    """Highest-weighted dimension; the earliest in the fixed order wins ties."""
    ordered = context.user_quality_preferences.priority_weights.ordered()
    best, best_weight = ordered[0]
    for dimension, weight in ordered[1:]:
        if weight > best_weight:
            best, best_weight = dimension, weight
    return best


def select_strategy(context: Any, strategies: list[PromptStrategy]) -> PromptStrategy:
    context = coerce_context(context)
    if not strategies:
        raise InvalidInputError("strategy catalog is empty")
    by_id = {s.id: s for s in strategies}
    suitable = [s for s in strategies if s.targets(context.component_type)]

    if not suitable:
        return by_id.get(BALANCED_STRATEGY) or strategies[0]

    last = context.last_attempt
    if last is not None and last.quality_score.overall < context.user_quality_preferences.min_acceptable_score:
        alternatives = [s for s in suitable if s.id != last.prompt_strategy]
        if alternatives:
            target = DIMENSION_STRATEGY[weakest_dimension(last.quality_score)]
            recovery = by_id.get(target)
            if recovery is not None and recovery.id != last.prompt_strategy:
                logger.debug("Last attempt scored %d; switching to %s", last.quality_score.overall, target.value)
                return recovery
            return alternatives[0]

    preferred = DIMENSION_STRATEGY[top_priority(context)]
    for strategy in suitable:
        if strategy.id == preferred:
            return strategy

    return by_id.get(BALANCED_STRATEGY) or suitable[0]


def _provider_score(record: AIProviderPerformance, context: GenerationContext) -> float:
    type_score = record.component_type_performance.get(context.component_type.value)
    if type_score is not None:
        return type_score
    complexity_score = record.complexity_performance.get(context.complexity_level.value)
    if complexity_score is not None:
        return complexity_score
    return record.quality_metrics.avg_quality_score


def select_provider(
    context: Any,
    performances: list[AIProviderPerformance],
    *,
    default: ProviderId = DEFAULT_PROVIDER,
    min_generations: int = MIN_PROVIDER_GENERATIONS,
) -> ProviderId:
    context = coerce_context(context)
    eligible = [p for p in performances if p.generation_count > min_generations]
    if not eligible:
        return default
    ranked = sorted(
        eligible,
        key=lambda p: (-_provider_score(p, context), _PROVIDER_ORDER[p.provider]),
    )
    return ranked[0].provider


class OrchestrationSelector:
    """Plans generations from ledger snapshots and feeds scores back."""

    def __init__(
        self,
        ledger: PerformanceLedger,
        *,
        default_provider: ProviderId = DEFAULT_PROVIDER,
        min_provider_generations: int = MIN_PROVIDER_GENERATIONS,
        available_providers: set[ProviderId] | None = None,
    ) -> None:
        self.ledger = ledger
        self.default_provider = default_provider
        self.min_provider_generations = min_provider_generations
        self.available_providers = available_providers

    def select_strategy(self, context: Any) -> PromptStrategy:
        return select_strategy(context, self.ledger.catalog.snapshot())

    def select_provider(self, context: Any) -> ProviderId:
        performances = self.ledger.provider_snapshot()
        if self.available_providers is not None:
            performances = [p for p in performances if p.provider in self.available_providers]
        return select_provider(
            context,
            performances,
            default=self.default_provider,
            min_generations=self.min_provider_generations,
        )

    def plan(self, context: Any) -> GenerationPlan:
        context = coerce_context(context)
        strategy = self.select_strategy(context)
        provider = self.select_provider(context)
        logger.info(
            "Planned %s generation: strategy=%s provider=%s",
            context.component_type.value, strategy.id.value, provider.value,
        )
        return GenerationPlan(
            strategy_id=strategy.id,
            provider=provider,
            prompt=augment_prompt(context, strategy),
            context=context,
        )

    def record_feedback(self, feedback: FeedbackRecord) -> None:
        self.ledger.update_strategy_performance(
            feedback.strategy_id, feedback.quality_score, feedback.user_rating
        )
        self.ledger.update_provider_performance(
            feedback.provider,
            feedback.component_type,
            feedback.complexity_level,
            feedback.quality_score,
        )
