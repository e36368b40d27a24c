"""Responsive-design and colour-contrast checks.

These are static approximations of what a rendered check at each viewport
would catch: the code is never rendered.
"""

from __future__ import annotations

import re

from uiqa.schemas.quality import (
    DeviceType,
    ErrorType,
    ResponsiveBreakpoint,
    ResponsiveValidationResult,
    Severity,
    ValidationError,
)

RESPONSIVE_BREAKPOINTS: tuple[ResponsiveBreakpoint, ...] = (
    ResponsiveBreakpoint(name="mobile-sm", width=320, height=568, device_type=DeviceType.MOBILE),
    ResponsiveBreakpoint(name="mobile-lg", width=414, height=736, device_type=DeviceType.MOBILE),
    ResponsiveBreakpoint(name="tablet", width=768, height=1024, device_type=DeviceType.TABLET),
    ResponsiveBreakpoint(name="desktop-sm", width=1024, height=768, device_type=DeviceType.DESKTOP),
    ResponsiveBreakpoint(name="desktop-lg", width=1440, height=900, device_type=DeviceType.DESKTOP),
)

_RESPONSIVE_PREFIX = re.compile(r"\b(sm|md|lg|xl|2xl):")
_FIXED_PIXEL_WIDTH = re.compile(r"\bw-\[\d+px\]")
_SMALL_TEXT = re.compile(r"\btext-xs\b")
_INTERACTIVE_ELEMENT = re.compile(r"\b(button|btn|onClick)\b", re.IGNORECASE)
_TOUCH_FRIENDLY = re.compile(r"\b(p-[3-9]|py-[3-9]|px-[3-9]|h-\d+|min-h-\d+)\b")
_WIDE_ELEMENT = re.compile(r"\b(w-screen|min-w-\[|\w+-\[\d{4,}px\])")
_NARROW_WIDTH = 768


class ResponsivenessValidator:
    def __init__(self, breakpoints: tuple[ResponsiveBreakpoint, ...] = RESPONSIVE_BREAKPOINTS) -> None:
        self.breakpoints = breakpoints

    def validate(self, code: str) -> list[ResponsiveValidationResult]:
        return [self.validate_breakpoint(code, bp) for bp in self.breakpoints]

    def validate_breakpoint(self, code: str, bp: ResponsiveBreakpoint) -> ResponsiveValidationResult:
        issues: list[ValidationError] = []
        recommendations: list[str] = []
        mobile = bp.device_type == DeviceType.MOBILE

        if bp.device_type != DeviceType.DESKTOP and not _RESPONSIVE_PREFIX.search(code):
            issues.append(
                _warning(
                    ErrorType.DESIGN,
                    f"No responsive classes found for {bp.device_type.value} devices",
                    "responsive-design",
                )
            )
            recommendations.append(
                f"Add responsive prefixed classes for a better {bp.device_type.value} experience at {bp.width}px"
            )

        if mobile and _FIXED_PIXEL_WIDTH.search(code):
            issues.append(
                _warning(
                    ErrorType.DESIGN,
                    "Fixed pixel widths detected - may not work well on mobile",
                    "mobile-friendly-widths",
                )
            )
            recommendations.append(
                "Use relative widths (w-full, w-1/2) or responsive classes instead of fixed pixel widths"
            )

        if mobile and _SMALL_TEXT.search(code):
            issues.append(
                _warning(
                    ErrorType.ACCESSIBILITY,
                    "Very small text detected - may be hard to read on mobile",
                    "mobile-text-size",
                )
            )
            recommendations.append("Consider using sm:text-xs md:text-sm for better mobile readability")

        if mobile and _INTERACTIVE_ELEMENT.search(code) and not _TOUCH_FRIENDLY.search(code):
            issues.append(
                _warning(
                    ErrorType.ACCESSIBILITY,
                    "Interactive elements may be too small for touch devices",
                    "touch-target-size",
                )
            )
            recommendations.append("Ensure interactive elements have minimum 44px touch targets (p-3 or h-11)")

        if bp.width < _NARROW_WIDTH and _WIDE_ELEMENT.search(code):
            issues.append(
                _warning(
                    ErrorType.DESIGN,
                    "Wide elements detected that may cause horizontal scrolling",
                    "horizontal-scroll",
                )
            )
            recommendations.append("Use overflow-x-auto or responsive sizing to prevent horizontal scrolling")

        return ResponsiveValidationResult(
            breakpoint=bp,
            is_valid=not any(i.severity == Severity.ERROR for i in issues),
            issues=issues,
            recommendations=recommendations,
        )


# (background, foreground, precomputed contrast ratio)
CONTRAST_PAIRS: tuple[tuple[str, str, float], ...] = (
    ("bg-gray-100", "text-gray-400", 2.6),
    ("bg-white", "text-gray-300", 2.8),
    ("bg-yellow-100", "text-yellow-400", 3.2),
    ("bg-blue-100", "text-blue-300", 3.1),
    ("bg-gray-900", "text-gray-600", 4.1),
)
AA_RATIO = 4.5
AAA_RATIO = 7.0

_CUSTOM_COLOR = re.compile(r"\[(#[0-9a-fA-F]{3,8}|rgba?\([\d,.\s%]+\))\]")


def _uses_class(code: str, cls: str) -> bool:
    return re.search(rf"(?<![\w-]){re.escape(cls)}(?![\w-])", code) is not None


class ColorContrastValidator:
    def __init__(self, pairs: tuple[tuple[str, str, float], ...] = CONTRAST_PAIRS) -> None:
        self.pairs = pairs

    def validate(self, code: str) -> list[ValidationError]:
        issues: list[ValidationError] = []
        for bg, text, ratio in self.pairs:
            if not (_uses_class(code, bg) and _uses_class(code, text)):
                continue
            if ratio < AA_RATIO:
                issues.append(
                    ValidationError(
                        type=ErrorType.ACCESSIBILITY,
                        severity=Severity.ERROR,
                        message=f"Low contrast ratio ({ratio}:1) between {bg} and {text}",
                        rule="color-contrast",
                    )
                )
            elif ratio < AAA_RATIO:
                issues.append(
                    _warning(
                        ErrorType.ACCESSIBILITY,
                        f"Moderate contrast ratio ({ratio}:1) - consider higher contrast for AAA compliance",
                        "color-contrast",
                    )
                )

        if _CUSTOM_COLOR.search(code):
            issues.append(
                ValidationError(
                    type=ErrorType.ACCESSIBILITY,
                    severity=Severity.INFO,
                    message="Custom colors detected - please verify contrast ratios manually",
                    rule="custom-color-contrast",
                )
            )
        return issues


def visual_recommendations(
    responsive: list[ResponsiveValidationResult],
    contrast_issues: list[ValidationError],
    visual_score: int,
) -> list[str]:
    """Summary advice across breakpoints, contrast and visual consistency."""
    recommendations: list[str] = []
    if any(r.issues for r in responsive):
        recommendations.append("Implement responsive design patterns for all device types")
    if contrast_issues:
        recommendations.append("Review color combinations for WCAG AA compliance (4.5:1 contrast ratio)")
    if visual_score < 80:
        recommendations.append("Establish and follow a consistent design system")
    if any(r.issues for r in responsive if r.breakpoint.device_type == DeviceType.MOBILE):
        recommendations.append("Optimize component for mobile devices with touch-friendly interactions")
    return recommendations


def _warning(error_type: ErrorType, message: str, rule: str) -> ValidationError:
    return ValidationError(type=error_type, severity=Severity.WARNING, message=message, rule=rule)
