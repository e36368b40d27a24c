"""Quality scorer: runs every validator over one code string and combines the results.

A validator that raises never takes the scorer down with it: its dimension
drops to 0 and a ``runtime`` finding records what happened. The only
exception that escapes is :class:`~uiqa.errors.InvalidInputError` for
non-string input, raised before any validator runs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from uiqa.analysis.analyzer import ComponentAnalyzer
from uiqa.errors import InvalidInputError
from uiqa.schemas.analysis import ComponentAnalysis
from uiqa.schemas.quality import (
    ComponentQualityScore,
    ErrorType,
    QualityReport,
    Severity,
    TypeScriptResult,
    ValidationError,
    round_half_up,
)
from uiqa.validators.accessibility import AccessibilityValidator
from uiqa.validators.best_practices import BestPracticesValidator
from uiqa.validators.design import DesignConsistencyValidator
from uiqa.validators.performance import PerformanceValidator
from uiqa.validators.typescript import TypeScriptValidator
from uiqa.validators.visual import (
    ColorContrastValidator,
    ResponsivenessValidator,
    visual_recommendations,
)

logger = logging.getLogger(__name__)

OVERALL_WEIGHTS: dict[str, float] = {
    "code_quality": 0.4,
    "accessibility": 0.3,
    "design_consistency": 0.2,
    "performance": 0.1,
}

LONG_COMPONENT_LINES = 200
LONG_COMPONENT_PENALTY = 15
MEDIUM_COMPONENT_LINES = 100
MEDIUM_COMPONENT_PENALTY = 5

# Order in which findings appear in the merged error list
STEP_ORDER = (
    "typescript",
    "best_practices",
    "accessibility",
    "design",
    "performance",
    "contrast",
    "responsive",
)

_FAILED = object()


class QualityScorer:
    def __init__(
        self,
        *,
        analyzer: ComponentAnalyzer | None = None,
        typescript: TypeScriptValidator | None = None,
        best_practices: BestPracticesValidator | None = None,
        accessibility: AccessibilityValidator | None = None,
        design: DesignConsistencyValidator | None = None,
        performance: PerformanceValidator | None = None,
        contrast: ColorContrastValidator | None = None,
        responsive: ResponsivenessValidator | None = None,
        typescript_error_allowance: int = 1,
    ) -> None:
        self.analyzer = analyzer or ComponentAnalyzer()
        self.typescript = typescript or TypeScriptValidator()
        self.best_practices = best_practices or BestPracticesValidator()
        self.accessibility = accessibility or AccessibilityValidator()
        self.design = design or DesignConsistencyValidator()
        self.performance = performance or PerformanceValidator()
        self.contrast = contrast or ColorContrastValidator()
        self.responsive = responsive or ResponsivenessValidator()
        self.typescript_error_allowance = typescript_error_allowance

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score(self, code: str) -> QualityReport:
        _require_string(code)
        runtime_errors: list[ValidationError] = []
        analysis = self._guarded("analysis", lambda: self.analyzer.analyze(code), runtime_errors)
        results = {
            name: self._guarded(name, step, runtime_errors)
            for name, step in self._steps(code, analysis).items()
        }
        return self._assemble(code, analysis, results, runtime_errors)

    async def score_async(self, code: str) -> QualityReport:
        """Same as :meth:`score`, with the validators running in worker threads."""
        _require_string(code)
        runtime_errors: list[ValidationError] = []
        analysis = await asyncio.to_thread(
            self._guarded, "analysis", lambda: self.analyzer.analyze(code), runtime_errors
        )
        steps = self._steps(code, analysis)
        values = await asyncio.gather(
            *(asyncio.to_thread(self._guarded, name, step, runtime_errors) for name, step in steps.items())
        )
        return self._assemble(code, analysis, dict(zip(steps, values)), runtime_errors)

    def code_quality(self, code: str, ts: TypeScriptResult, best_practices: list[ValidationError]) -> int:
        ts_errors = sum(1 for e in ts.errors if e.severity == Severity.ERROR)
        score = 100 - 10 * max(0, ts_errors - self.typescript_error_allowance)

        lines = len(code.splitlines())
        if lines > LONG_COMPONENT_LINES:
            score -= LONG_COMPONENT_PENALTY
        elif lines > MEDIUM_COMPONENT_LINES:
            score -= MEDIUM_COMPONENT_PENALTY

        for finding in best_practices:
            if finding.severity == Severity.ERROR:
                score -= 10
            elif finding.severity == Severity.WARNING:
                score -= 5
        return max(0, score)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _steps(self, code: str, analysis: Any) -> dict[str, Callable[[], Any]]:
        def needs_analysis(fn: Callable[[str, ComponentAnalysis], Any]) -> Callable[[], Any]:
            def run() -> Any:
                if analysis is _FAILED:
                    raise RuntimeError("component analysis unavailable")
                return fn(code, analysis)
            return run

        return {
            "typescript": lambda: self.typescript.validate(code),
            "best_practices": lambda: self.best_practices.validate(code),
            "accessibility": needs_analysis(self.accessibility.validate),
            "design": needs_analysis(self.design.validate),
            "performance": lambda: self.performance.validate(code),
            "contrast": lambda: self.contrast.validate(code),
            "responsive": lambda: self.responsive.validate(code),
        }

    @staticmethod
    def _guarded(name: str, step: Callable[[], Any], runtime_errors: list[ValidationError]) -> Any:
        try:
            return step()
        except Exception as exc:
            logger.exception("Validator step %s failed", name)
            runtime_errors.append(
                ValidationError(
                    type=ErrorType.RUNTIME,
                    severity=Severity.ERROR,
                    message=f"{name} check failed: {exc}",
                    rule=f"{name.replace('_', '-')}-failure",
                )
            )
            return _FAILED

    def _assemble(
        self,
        code: str,
        analysis: Any,
        results: dict[str, Any],
        runtime_errors: list[ValidationError],
    ) -> QualityReport:
        ts = results["typescript"]
        bp = results["best_practices"]
        a11y = results["accessibility"]
        design = results["design"]
        perf = results["performance"]
        contrast = results["contrast"]
        responsive = results["responsive"]

        if ts is _FAILED or bp is _FAILED:
            code_quality = 0
        else:
            code_quality = self.code_quality(code, ts, bp)

        dimensions = {
            "code_quality": code_quality,
            "accessibility": _score_of(a11y),
            "design_consistency": _score_of(design),
            "performance": _score_of(perf),
        }
        overall = round_half_up(sum(OVERALL_WEIGHTS[k] * v for k, v in dimensions.items()))

        errors: list[ValidationError] = []
        for name in STEP_ORDER:
            value = results[name]
            if value is _FAILED:
                continue
            match name:
                case "typescript":
                    errors.extend(value.errors)
                case "best_practices" | "contrast":
                    errors.extend(value)
                case "responsive":
                    errors.extend(issue for r in value for issue in r.issues)
                case _:
                    errors.extend(value.errors)
        errors.extend(sorted(runtime_errors, key=lambda e: e.rule or ""))

        recommendations: list[str] = []
        if responsive is not _FAILED and contrast is not _FAILED and design is not _FAILED:
            recommendations = visual_recommendations(responsive, contrast, design.visual_score)

        return QualityReport(
            quality_score=ComponentQualityScore(overall=overall, **dimensions),
            errors=errors,
            analysis=None if analysis is _FAILED else analysis,
            compilation_success=ts is not _FAILED and ts.is_valid,
            responsive_validation=[] if responsive is _FAILED else responsive,
            recommendations=recommendations,
        )


def _score_of(result: Any) -> int:
    if result is _FAILED:
        return 0
    return result.score


def _require_string(code: Any) -> None:
    if not isinstance(code, str):
        raise InvalidInputError(f"code must be a string, got {type(code).__name__}")
