"""Tests for Markdown report generation."""

from __future__ import annotations

from uiqa.output.markdown import render_markdown_report, render_scan_summary
from uiqa.schemas.quality import (
    ErrorType,
    QualityReport,
    ResponsiveValidationResult,
    Severity,
    ValidationError,
)
from uiqa.scoring.scorer import QualityScorer
from uiqa.validators.visual import RESPONSIVE_BREAKPOINTS


def _make_report(make_score, overall: int = 72) -> QualityReport:
    """Build a sample QualityReport for testing."""
    return QualityReport(
        quality_score=make_score(code_quality=90, accessibility=55, design_consistency=70, performance=100, overall=overall),
        errors=[
            ValidationError(
                type=ErrorType.ACCESSIBILITY,
                severity=Severity.ERROR,
                message="Images must have alt attributes",
                line=4,
                rule="img-alt",
            ),
            ValidationError(type=ErrorType.DESIGN, severity=Severity.INFO, message="Consider structure"),
        ],
        compilation_success=True,
        responsive_validation=[
            ResponsiveValidationResult(
                breakpoint=RESPONSIVE_BREAKPOINTS[0],
                is_valid=True,
                issues=[
                    ValidationError(
                        type=ErrorType.DESIGN,
                        severity=Severity.WARNING,
                        message="No responsive classes found for mobile devices",
                        rule="responsive-design",
                    )
                ],
                recommendations=["Add responsive prefixed classes"],
            ),
            ResponsiveValidationResult(breakpoint=RESPONSIVE_BREAKPOINTS[4], is_valid=True),
        ],
        recommendations=["Implement responsive design patterns for all device types"],
    )


class TestRenderMarkdownReport:
    def test_contains_all_sections(self, make_score) -> None:
        md = render_markdown_report(_make_report(make_score), title="Gallery.tsx")
        assert md.startswith("# Quality Report: Gallery.tsx")
        assert "**Overall:** 72/100 (❌ not valid, compiles)" in md
        assert "## Scores" in md
        assert "| Accessibility | 55 |" in md
        assert "## Findings" in md
        assert "| 🔴 | accessibility | img-alt | 4 | Images must have alt attributes |" in md
        assert "| 🔵 | design | — | — | Consider structure |" in md
        assert "## Responsive Checks" in md
        assert "### mobile-sm (320×568, mobile)" in md
        assert "desktop-lg" not in md
        assert "## Recommendations" in md

    def test_profile_section_from_real_report(self, clean_component: str) -> None:
        md = render_markdown_report(QualityScorer().score(clean_component))
        assert "## Component Profile" in md
        assert "- **Type:** layout" in md
        assert "✅ valid" in md

    def test_minimal_report(self, make_score) -> None:
        md = render_markdown_report(QualityReport(quality_score=make_score()))
        assert "## Findings" not in md
        assert "## Component Profile" not in md
        assert "## Recommendations" not in md
        assert "does not compile" in md


class TestRenderScanSummary:
    def test_empty(self) -> None:
        assert "No component files found." in render_scan_summary({})

    def test_sorted_lowest_first(self, make_score) -> None:
        results = {
            "Good.tsx": _make_report(make_score, overall=90),
            "Bad.tsx": _make_report(make_score, overall=40),
        }
        md = render_scan_summary(results)
        assert "**Files scored:** 2" in md
        assert "**Average overall:** 65.0" in md
        assert md.index("`Bad.tsx`") < md.index("`Good.tsx`")
        assert "| `Bad.tsx` | 40 | 90 | 55 | 70 | 100 | 1 |" in md
