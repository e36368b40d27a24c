"""Orchestration service: owns the stores and runs plan → generate → score → learn."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from typing import Protocol

from uiqa.errors import GenerationTimeoutError, InvalidInputError
from uiqa.orchestration.ledger import PerformanceLedger
from uiqa.orchestration.prompts import detect_component_type, determine_complexity, render_request_message
from uiqa.orchestration.selector import OrchestrationSelector
from uiqa.orchestration.strategies import StrategyCatalog
from uiqa.schemas.config import QualityConfig
from uiqa.schemas.orchestration import (
    FeedbackRecord,
    GenerationContext,
    GenerationOutcome,
    GenerationPlan,
    GenerationRequest,
)
from uiqa.schemas.quality import QualityReport
from uiqa.scoring.scorer import QualityScorer
from uiqa.shared.generation_client import GenerationClient, parse_component_response

logger = logging.getLogger(__name__)


class ComponentRecordStore(Protocol):
    """Persistence collaborator keyed by component id."""

    def save_quality(
        self,
        component_id: str,
        report: QualityReport,
        user_rating: int | None = None,
    ) -> None: ...


def new_component_id() -> str:
    return f"comp_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class OrchestrationService:
    """Single owner of the strategy catalog, performance ledger and scorer."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        config: QualityConfig | None = None,
        catalog: StrategyCatalog | None = None,
        ledger: PerformanceLedger | None = None,
        scorer: QualityScorer | None = None,
        record_store: ComponentRecordStore | None = None,
    ) -> None:
        self.config = config or QualityConfig()
        self.client = client
        self.catalog = catalog or StrategyCatalog()
        self.ledger = ledger or PerformanceLedger(
            self.catalog, success_threshold=self.config.success_threshold
        )
        self.scorer = scorer or QualityScorer(
            typescript_error_allowance=self.config.typescript_error_allowance
        )
        self.record_store = record_store
        self.selector = OrchestrationSelector(
            self.ledger,
            default_provider=self.config.default_provider,
            min_provider_generations=self.config.min_provider_generations,
            available_providers=getattr(client, "available_providers", None),
        )

    def build_context(self, request: GenerationRequest) -> GenerationContext:
        if not request.prompt.strip():
            raise InvalidInputError("prompt must not be empty")
        return GenerationContext(
            user_prompt=request.prompt,
            component_type=request.component_type or detect_component_type(request.prompt),
            complexity_level=request.complexity_level or determine_complexity(request.prompt),
            previous_attempts=tuple(request.previous_attempts),
            user_quality_preferences=request.preferences or self.config.preferences,
            has_image=request.image is not None,
        )

    def plan(self, context: GenerationContext) -> GenerationPlan:
        return self.selector.plan(context)

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        context = self.build_context(request)
        plan = self.plan(context)
        is_edit = request.original_code is not None
        message = render_request_message(
            plan.prompt.user_prompt,
            original_code=request.original_code,
            has_image=context.has_image,
        )

        try:
            raw = await asyncio.wait_for(
                self.client.generate(
                    provider=plan.provider,
                    system=plan.prompt.system_prompt,
                    user_message=message,
                    image=request.image,
                ),
                timeout=self.config.generation_timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Generation via %s timed out after %.0fs; feedback skipped",
                plan.provider.value, self.config.generation_timeout,
            )
            raise GenerationTimeoutError(
                f"{plan.provider.value} did not respond within {self.config.generation_timeout}s"
            ) from exc

        component = parse_component_response(raw, is_edit=is_edit)
        report = await self.scorer.score_async(component.code)
        logger.info(
            "Generated %s: overall=%d (strategy=%s, provider=%s)",
            component.name, report.quality_score.overall, plan.strategy_id.value, plan.provider.value,
        )

        self.record_feedback(
            FeedbackRecord(
                strategy_id=plan.strategy_id,
                provider=plan.provider,
                component_type=context.component_type,
                complexity_level=context.complexity_level,
                quality_score=report.quality_score,
            )
        )

        component_id = request.target_component_id if is_edit and request.target_component_id else new_component_id()
        if self.record_store is not None:
            self.record_store.save_quality(component_id, report)

        return GenerationOutcome(
            component_id=component_id,
            name=component.name,
            description=component.description,
            code=component.code,
            plan=plan,
            report=report,
        )

    def record_feedback(self, feedback: FeedbackRecord) -> None:
        self.selector.record_feedback(feedback)

    def rate(self, outcome: GenerationOutcome, user_rating: int) -> None:
        """Record a user's 1-5 rating for a previously generated component."""
        if not 1 <= user_rating <= 5:
            raise InvalidInputError(f"rating must be between 1 and 5, got {user_rating}")
        self.ledger.record_strategy_rating(outcome.plan.strategy_id, user_rating)
        if self.record_store is not None:
            self.record_store.save_quality(outcome.component_id, outcome.report, user_rating)
