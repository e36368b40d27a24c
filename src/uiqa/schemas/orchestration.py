"""Pydantic models for strategy selection, provider ranking, and feedback."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.quality import ComponentQualityScore, QualityReport

WILDCARD_TYPE = "all"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StrategyId(str, Enum):
    QUALITY_FIRST = "quality-first"
    ACCESSIBILITY_FOCUSED = "accessibility-focused"
    DESIGN_CONSISTENCY = "design-consistency"
    PERFORMANCE_OPTIMIZED = "performance-optimized"
    USER_EXPERIENCE = "user-experience"


class ProviderId(str, Enum):
    VERCEL = "vercel"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class QualityDimension(str, Enum):
    """Score dimensions, declared in tie-break order."""

    CODE_QUALITY = "code_quality"
    ACCESSIBILITY = "accessibility"
    DESIGN_CONSISTENCY = "design_consistency"
    PERFORMANCE = "performance"


# Which strategy addresses which dimension.
DIMENSION_STRATEGY: dict[QualityDimension, StrategyId] = {
    QualityDimension.CODE_QUALITY: StrategyId.QUALITY_FIRST,
    QualityDimension.ACCESSIBILITY: StrategyId.ACCESSIBILITY_FOCUSED,
    QualityDimension.DESIGN_CONSISTENCY: StrategyId.DESIGN_CONSISTENCY,
    QualityDimension.PERFORMANCE: StrategyId.PERFORMANCE_OPTIMIZED,
}


class PriorityWeights(BaseModel):
    """Relative importance of each dimension; expected to sum to roughly 1."""

    model_config = ConfigDict(frozen=True)

    code_quality: float = Field(default=0.25, ge=0)
    accessibility: float = Field(default=0.25, ge=0)
    design_consistency: float = Field(default=0.25, ge=0)
    performance: float = Field(default=0.25, ge=0)

    def ordered(self) -> list[tuple[QualityDimension, float]]:
        return [(d, getattr(self, d.value)) for d in QualityDimension]


class QualityPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority_weights: PriorityWeights = PriorityWeights()
    min_acceptable_score: int = Field(default=70, ge=0, le=100)


class QualityHistory(BaseModel):
    """One prior generation attempt and how it scored."""

    model_config = ConfigDict(frozen=True)

    quality_score: ComponentQualityScore
    prompt_strategy: StrategyId
    ai_provider: ProviderId
    component_type: ComponentType
    component_id: str = ""
    user_rating: int | None = Field(default=None, ge=1, le=5)
    created_at: datetime = Field(default_factory=_now)


class GenerationContext(BaseModel):
    """Per-request input to the selector. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    user_prompt: str
    component_type: ComponentType
    complexity_level: ComplexityLevel
    previous_attempts: tuple[QualityHistory, ...] = ()
    user_quality_preferences: QualityPreferences = QualityPreferences()
    has_image: bool = False

    @property
    def last_attempt(self) -> QualityHistory | None:
        return self.previous_attempts[-1] if self.previous_attempts else None


class SuccessMetrics(BaseModel):
    """Rolling statistics for one prompt strategy."""

    avg_quality_score: float = 0.0
    avg_user_rating: float = 0.0
    generation_count: int = 0
    success_rate: float = 0.0
    rating_count: int = 0


class PromptStrategy(BaseModel):
    """A named variant of system/user prompt augmentation."""

    id: StrategyId
    name: str
    description: str = ""
    system_prompt_modifier: str
    user_prompt_enhancer: Callable[[str, GenerationContext], str]
    target_component_types: frozenset[str]
    success_metrics: SuccessMetrics = Field(default_factory=SuccessMetrics)

    def targets(self, component_type: ComponentType) -> bool:
        return (
            component_type.value in self.target_component_types
            or WILDCARD_TYPE in self.target_component_types
        )


class ProviderQualityMetrics(BaseModel):
    avg_quality_score: float = 0.0
    avg_code_quality: float = 0.0
    avg_accessibility: float = 0.0
    avg_design_consistency: float = 0.0
    avg_performance: float = 0.0


class AIProviderPerformance(BaseModel):
    """Rolling statistics for one backing model provider."""

    provider: ProviderId
    quality_metrics: ProviderQualityMetrics = Field(default_factory=ProviderQualityMetrics)
    # Keyed by ComponentType / ComplexityLevel values.
    component_type_performance: dict[str, float] = {}
    component_type_counts: dict[str, int] = {}
    complexity_performance: dict[str, float] = {}
    complexity_counts: dict[str, int] = {}
    generation_count: int = 0
    last_updated: datetime = Field(default_factory=_now)


class AugmentedPrompt(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt: str


class GenerationPlan(BaseModel):
    """The selector's decision for one generation request."""

    strategy_id: StrategyId
    provider: ProviderId
    prompt: AugmentedPrompt
    context: GenerationContext


class FeedbackRecord(BaseModel):
    """What the ledger learns from one scored generation."""

    strategy_id: StrategyId
    provider: ProviderId
    component_type: ComponentType
    complexity_level: ComplexityLevel
    quality_score: ComponentQualityScore
    user_rating: int | None = Field(default=None, ge=1, le=5)


class GenerationRequest(BaseModel):
    """Caller input for a full generate → score → learn cycle."""

    prompt: str
    component_type: ComponentType | None = None
    complexity_level: ComplexityLevel | None = None
    image: str | None = None  # base64 image data
    previous_attempts: list[QualityHistory] = []
    preferences: QualityPreferences | None = None
    target_component_id: str | None = None
    original_code: str | None = None


class GenerationOutcome(BaseModel):
    component_id: str
    name: str
    description: str = ""
    code: str
    plan: GenerationPlan
    report: QualityReport
