"""Rolling performance statistics for strategies and providers.

All averages use the incremental form ``(old * n + value) / (n + 1)`` with
their own observation count, so a per-type or per-complexity average is a
true mean of the scores observed for that key.
"""

from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timezone

from uiqa.orchestration.strategies import StrategyCatalog
from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.orchestration import (
    AIProviderPerformance,
    ProviderId,
    StrategyId,
)
from uiqa.schemas.quality import ComponentQualityScore

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_THRESHOLD = 70


def rolling_average(old_avg: float, count: int, value: float) -> float:
    """Mean after one more observation, given the mean of ``count`` previous ones."""
    return (old_avg * count + value) / (count + 1)


class PerformanceLedger:
    """Explicit store for strategy and provider statistics.

    Strategy metrics live on the catalog's strategies and are written under
    the catalog's lock; provider records live here behind this ledger's lock.
    Readers get deep copies.
    """

    def __init__(
        self,
        catalog: StrategyCatalog | None = None,
        *,
        success_threshold: int = DEFAULT_SUCCESS_THRESHOLD,
    ) -> None:
        self.catalog = catalog or StrategyCatalog()
        self.success_threshold = success_threshold
        self._providers: dict[ProviderId, AIProviderPerformance] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Strategy statistics
    # ------------------------------------------------------------------

    def update_strategy_performance(
        self,
        strategy_id: StrategyId,
        score: ComponentQualityScore,
        user_rating: int | None = None,
    ) -> None:
        with self.catalog.lock:
            strategy = self.catalog.get(strategy_id)
            if strategy is None:
                logger.warning("Ignoring feedback for unknown strategy %s", strategy_id)
                return

            metrics = strategy.success_metrics
            n = metrics.generation_count
            metrics.avg_quality_score = rolling_average(metrics.avg_quality_score, n, score.overall)
            success = 1 if score.overall >= self.success_threshold else 0
            metrics.success_rate = rolling_average(metrics.success_rate, n, success)
            if user_rating is not None:
                metrics.avg_user_rating = rolling_average(
                    metrics.avg_user_rating, metrics.rating_count, user_rating
                )
                metrics.rating_count += 1
            metrics.generation_count = n + 1

    def record_strategy_rating(self, strategy_id: StrategyId, user_rating: int) -> None:
        """Fold in a rating given after the fact, without counting a new generation."""
        with self.catalog.lock:
            strategy = self.catalog.get(strategy_id)
            if strategy is None:
                logger.warning("Ignoring rating for unknown strategy %s", strategy_id)
                return
            metrics = strategy.success_metrics
            metrics.avg_user_rating = rolling_average(
                metrics.avg_user_rating, metrics.rating_count, user_rating
            )
            metrics.rating_count += 1

    # ------------------------------------------------------------------
    # Provider statistics
    # ------------------------------------------------------------------

    def update_provider_performance(
        self,
        provider: ProviderId,
        component_type: ComponentType,
        complexity_level: ComplexityLevel,
        score: ComponentQualityScore,
    ) -> None:
        with self._lock:
            record = self._providers.get(provider)
            if record is None:
                record = AIProviderPerformance(provider=provider)
                self._providers[provider] = record
                logger.debug("First observation for provider %s", provider.value)

            n = record.generation_count
            metrics = record.quality_metrics
            metrics.avg_quality_score = rolling_average(metrics.avg_quality_score, n, score.overall)
            metrics.avg_code_quality = rolling_average(metrics.avg_code_quality, n, score.code_quality)
            metrics.avg_accessibility = rolling_average(metrics.avg_accessibility, n, score.accessibility)
            metrics.avg_design_consistency = rolling_average(
                metrics.avg_design_consistency, n, score.design_consistency
            )
            metrics.avg_performance = rolling_average(metrics.avg_performance, n, score.performance)

            _update_keyed(
                record.component_type_performance, record.component_type_counts,
                component_type.value, score.overall,
            )
            _update_keyed(
                record.complexity_performance, record.complexity_counts,
                complexity_level.value, score.overall,
            )

            record.generation_count = n + 1
            record.last_updated = datetime.now(timezone.utc)

    def provider(self, provider: ProviderId) -> AIProviderPerformance | None:
        with self._lock:
            record = self._providers.get(provider)
            return copy.deepcopy(record) if record is not None else None

    def provider_snapshot(self) -> list[AIProviderPerformance]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._providers.values()]

    def load_providers(self, records: list[AIProviderPerformance]) -> None:
        """Seed provider statistics, e.g. from a persisted history."""
        with self._lock:
            for record in records:
                self._providers[record.provider] = copy.deepcopy(record)


def _update_keyed(averages: dict[str, float], counts: dict[str, int], key: str, value: float) -> None:
    n = counts.get(key, 0)
    averages[key] = rolling_average(averages.get(key, 0.0), n, value)
    counts[key] = n + 1
