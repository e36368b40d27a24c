"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from uiqa.schemas.analysis import ComplexityLevel, ComponentAnalysis, ComponentType
from uiqa.schemas.orchestration import (
    GenerationContext,
    PriorityWeights,
    ProviderId,
    QualityHistory,
    QualityPreferences,
    StrategyId,
)
from uiqa.schemas.quality import ComponentQualityScore

# A small, well-formed component used across validator and scorer tests.
CLEAN_COMPONENT = """\
const ProfileCard = ({ name }: { name: string }) => {
  return (
    <section className="flex flex-col p-4 md:p-6 bg-white rounded-lg border border-gray-200">
      <h2 className="text-lg text-gray-900">{name}</h2>
      <img src="/avatar.png" alt="Profile photo" className="rounded-full" />
    </section>
  );
};
"""


@pytest.fixture
def clean_component() -> str:
    return CLEAN_COMPONENT


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "uiqa-config.yml"
    cfg.write_text(
        f"""\
default_provider: openai
min_provider_generations: 3
output_directory: "{tmp_path / 'output'}"
"""
    )
    return cfg


@pytest.fixture
def make_analysis() -> Callable[..., ComponentAnalysis]:
    def _make(
        component_type: ComponentType = ComponentType.DISPLAY,
        *,
        classes: set[str] | None = None,
        has_interactivity: bool = False,
        uses_hooks: bool = False,
        has_accessibility_features: bool = False,
    ) -> ComponentAnalysis:
        return ComponentAnalysis(
            component_type=component_type,
            has_interactivity=has_interactivity,
            uses_hooks=uses_hooks,
            has_accessibility_features=has_accessibility_features,
            tailwind_classes=frozenset(classes or ()),
            complexity_score=0.0,
        )

    return _make


@pytest.fixture
def make_score() -> Callable[..., ComponentQualityScore]:
    def _make(
        code_quality: int = 80,
        accessibility: int = 80,
        design_consistency: int = 80,
        performance: int = 80,
        overall: int | None = None,
    ) -> ComponentQualityScore:
        if overall is None:
            overall = (code_quality + accessibility + design_consistency + performance) // 4
        return ComponentQualityScore(
            code_quality=code_quality,
            accessibility=accessibility,
            design_consistency=design_consistency,
            performance=performance,
            overall=overall,
        )

    return _make


@pytest.fixture
def make_attempt() -> Callable[..., QualityHistory]:
    def _make(
        score: ComponentQualityScore,
        strategy: StrategyId = StrategyId.USER_EXPERIENCE,
        provider: ProviderId = ProviderId.VERCEL,
        component_type: ComponentType = ComponentType.DISPLAY,
    ) -> QualityHistory:
        return QualityHistory(
            quality_score=score,
            prompt_strategy=strategy,
            ai_provider=provider,
            component_type=component_type,
        )

    return _make


@pytest.fixture
def make_context() -> Callable[..., GenerationContext]:
    def _make(
        component_type: ComponentType = ComponentType.DISPLAY,
        complexity: ComplexityLevel = ComplexityLevel.SIMPLE,
        *,
        weights: PriorityWeights | None = None,
        attempts: list[QualityHistory] | None = None,
        min_score: int = 70,
        prompt: str = "Build a component",
        has_image: bool = False,
    ) -> GenerationContext:
        return GenerationContext(
            user_prompt=prompt,
            component_type=component_type,
            complexity_level=complexity,
            previous_attempts=tuple(attempts or ()),
            user_quality_preferences=QualityPreferences(
                priority_weights=weights or PriorityWeights(),
                min_acceptable_score=min_score,
            ),
            has_image=has_image,
        )

    return _make
