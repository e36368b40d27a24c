"""Tests for the strategy catalog."""

from __future__ import annotations

from uiqa.orchestration.strategies import StrategyCatalog, default_strategies
from uiqa.schemas.analysis import ComponentType
from uiqa.schemas.orchestration import StrategyId


class TestDefaultStrategies:
    def test_one_of_each(self) -> None:
        assert [s.id for s in default_strategies()] == list(StrategyId)

    def test_metrics_start_at_zero(self) -> None:
        for strategy in default_strategies():
            assert strategy.success_metrics.generation_count == 0
            assert strategy.success_metrics.avg_quality_score == 0

    def test_fresh_copy_each_call(self) -> None:
        first, second = default_strategies(), default_strategies()
        first[0].success_metrics.generation_count = 9
        assert second[0].success_metrics.generation_count == 0

    def test_targets(self) -> None:
        by_id = {s.id: s for s in default_strategies()}
        assert by_id[StrategyId.DESIGN_CONSISTENCY].targets(ComponentType.DISPLAY)
        assert not by_id[StrategyId.QUALITY_FIRST].targets(ComponentType.DISPLAY)
        assert by_id[StrategyId.PERFORMANCE_OPTIMIZED].targets(ComponentType.DATA_VISUALIZATION)

    def test_enhancer_appends_requirements(self, make_context) -> None:
        [a11y] = [s for s in default_strategies() if s.id == StrategyId.ACCESSIBILITY_FOCUSED]
        text = a11y.user_prompt_enhancer("Build a menu", make_context())
        assert text.startswith("\nBuild a menu\n\nACCESSIBILITY REQUIREMENTS:\n")
        assert text.endswith("- Target accessibility score: 90+ (excellent)")


class TestStrategyCatalog:
    def test_get(self) -> None:
        catalog = StrategyCatalog()
        assert len(catalog) == 5
        assert catalog.get(StrategyId.USER_EXPERIENCE).name == "User Experience Strategy"

    def test_get_missing(self) -> None:
        catalog = StrategyCatalog(default_strategies()[:1])
        assert catalog.get(StrategyId.USER_EXPERIENCE) is None

    def test_snapshot_is_independent(self) -> None:
        catalog = StrategyCatalog()
        snapshot = catalog.snapshot()
        snapshot[0].success_metrics.avg_quality_score = 99
        assert catalog.get(snapshot[0].id).success_metrics.avg_quality_score == 0

    def test_snapshot_keeps_enhancers_callable(self, make_context) -> None:
        [strategy] = StrategyCatalog(default_strategies()[:1]).snapshot()
        assert "QUALITY REQUIREMENTS" in strategy.user_prompt_enhancer("x", make_context())
