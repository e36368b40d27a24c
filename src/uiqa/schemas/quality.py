"""Pydantic models for validator findings and quality scores."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from uiqa.schemas.analysis import ComponentAnalysis


class ErrorType(str, Enum):
    TYPESCRIPT = "typescript"
    ESLINT = "eslint"
    BEST_PRACTICES = "best-practices"
    ACCESSIBILITY = "accessibility"
    DESIGN = "design"
    PERFORMANCE = "performance"
    RUNTIME = "runtime"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationError(BaseModel):
    """A single flagged issue with a type, severity, and optional source position."""

    model_config = ConfigDict(frozen=True)

    type: ErrorType
    message: str
    severity: Severity
    line: int | None = None  # 1-based
    column: int | None = None  # 1-based
    rule: str | None = None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (``Math.round`` semantics)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


class ComponentQualityScore(BaseModel):
    """Four dimension scores plus the weighted overall, each clamped to [0, 100]."""

    model_config = ConfigDict(frozen=True)

    code_quality: int
    accessibility: int
    design_consistency: int
    performance: int
    overall: int

    @field_validator(
        "code_quality", "accessibility", "design_consistency", "performance", "overall",
        mode="before",
    )
    @classmethod
    def clamp(cls, v: object) -> int:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"score must be a number, got {type(v).__name__}")
        return clamp_score(v)

    def dimensions(self) -> dict[str, int]:
        """Dimension scores in the fixed tie-break order."""
        return {
            "code_quality": self.code_quality,
            "accessibility": self.accessibility,
            "design_consistency": self.design_consistency,
            "performance": self.performance,
        }


class ValidatorResult(BaseModel):
    """Score and findings from one scoring validator."""

    score: int
    errors: list[ValidationError] = []


class DesignConsistencyResult(ValidatorResult):
    pattern_score: int
    visual_score: int


class TypeScriptResult(BaseModel):
    is_valid: bool
    errors: list[ValidationError] = []


class DeviceType(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class ResponsiveBreakpoint(BaseModel):
    """A fixed viewport used for responsive-design checks."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: int
    height: int
    device_type: DeviceType


class ResponsiveValidationResult(BaseModel):
    """Findings for one breakpoint."""

    breakpoint: ResponsiveBreakpoint
    is_valid: bool
    issues: list[ValidationError] = []
    recommendations: list[str] = []


class QualityReport(BaseModel):
    """Everything the scorer produces for one code string."""

    quality_score: ComponentQualityScore
    errors: list[ValidationError] = []
    analysis: ComponentAnalysis | None = None
    compilation_success: bool = False
    responsive_validation: list[ResponsiveValidationResult] = []
    recommendations: list[str] = []

    @property
    def is_valid(self) -> bool:
        """Compiles and carries no error-severity findings."""
        return self.compilation_success and not any(
            e.severity == Severity.ERROR for e in self.errors
        )

    def errors_of(self, error_type: ErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.type == error_type]
