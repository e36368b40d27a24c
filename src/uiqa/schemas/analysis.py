"""Pydantic models for the component analyzer's profile."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ComponentType(str, Enum):
    """Coarse classification of a UI component's purpose."""

    FORM = "form"
    NAVIGATION = "navigation"
    INTERACTIVE = "interactive"
    DATA_VISUALIZATION = "data-visualization"
    LAYOUT = "layout"
    DISPLAY = "display"


class ComplexityLevel(str, Enum):
    """Expected generation difficulty."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class ComponentAnalysis(BaseModel):
    """Type and complexity profile of one code string. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    component_type: ComponentType
    has_interactivity: bool
    uses_hooks: bool
    has_accessibility_features: bool
    tailwind_classes: frozenset[str] = frozenset()
    complexity_score: float  # heuristic, soft-capped at 100
