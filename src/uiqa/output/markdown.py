"""Markdown report builder: renders quality reports and scan summaries."""

from __future__ import annotations

from uiqa.schemas.quality import QualityReport, Severity

_SEVERITY_ICON = {Severity.ERROR: "🔴", Severity.WARNING: "🟡", Severity.INFO: "🔵"}

_DIMENSION_LABELS = {
    "code_quality": "Code quality",
    "accessibility": "Accessibility",
    "design_consistency": "Design consistency",
    "performance": "Performance",
}


def render_markdown_report(report: QualityReport, *, title: str = "Component") -> str:
    """Render one QualityReport into a Markdown string."""
    score = report.quality_score
    sections: list[str] = []

    sections.append(f"# Quality Report: {title}\n")
    status = "✅ valid" if report.is_valid else "❌ not valid"
    compiled = "compiles" if report.compilation_success else "does not compile"
    sections.append(f"**Overall:** {score.overall}/100 ({status}, {compiled})\n")

    # Scores
    sections.append("## Scores\n")
    sections.append("| Dimension | Score |")
    sections.append("|-----------|-------|")
    for key, value in score.dimensions().items():
        sections.append(f"| {_DIMENSION_LABELS[key]} | {value} |")
    sections.append("")

    # Profile
    if report.analysis:
        a = report.analysis
        sections.append("## Component Profile\n")
        sections.append(f"- **Type:** {a.component_type.value}")
        sections.append(f"- **Interactive:** {'yes' if a.has_interactivity else 'no'}")
        sections.append(f"- **Uses hooks:** {'yes' if a.uses_hooks else 'no'}")
        sections.append(f"- **Accessibility features:** {'yes' if a.has_accessibility_features else 'no'}")
        sections.append(f"- **Tailwind classes:** {len(a.tailwind_classes)}")
        sections.append(f"- **Complexity score:** {a.complexity_score:.1f}")
        sections.append("")

    # Findings
    if report.errors:
        sections.append("## Findings\n")
        sections.append("| | Type | Rule | Line | Message |")
        sections.append("|---|------|------|------|---------|")
        for e in report.errors:
            line = str(e.line) if e.line is not None else "—"
            sections.append(
                f"| {_SEVERITY_ICON[e.severity]} | {e.type.value} | {e.rule or '—'} | {line} | {e.message} |"
            )
        sections.append("")

    # Responsive checks
    failing = [r for r in report.responsive_validation if r.issues]
    if failing:
        sections.append("## Responsive Checks\n")
        for r in failing:
            bp = r.breakpoint
            sections.append(f"### {bp.name} ({bp.width}×{bp.height}, {bp.device_type.value})\n")
            for issue in r.issues:
                sections.append(f"- {_SEVERITY_ICON[issue.severity]} {issue.message}")
            for rec in r.recommendations:
                sections.append(f"  - Suggestion: {rec}")
            sections.append("")

    if report.recommendations:
        sections.append("## Recommendations\n")
        for rec in report.recommendations:
            sections.append(f"- {rec}")
        sections.append("")

    return "\n".join(sections)


def render_scan_summary(results: dict[str, QualityReport]) -> str:
    """Render a table of per-file scores, lowest overall first."""
    sections: list[str] = ["# Component Quality Scan\n"]
    if not results:
        sections.append("No component files found.\n")
        return "\n".join(sections)

    overall = [r.quality_score.overall for r in results.values()]
    sections.append(f"**Files scored:** {len(results)}  ")
    sections.append(f"**Average overall:** {sum(overall) / len(overall):.1f}\n")

    sections.append("| File | Overall | Code | A11y | Design | Perf | Errors |")
    sections.append("|------|---------|------|------|--------|------|--------|")
    for name, report in sorted(results.items(), key=lambda item: (item[1].quality_score.overall, item[0])):
        s = report.quality_score
        n_errors = sum(1 for e in report.errors if e.severity == Severity.ERROR)
        sections.append(
            f"| `{name}` | {s.overall} | {s.code_quality} | {s.accessibility} "
            f"| {s.design_consistency} | {s.performance} | {n_errors} |"
        )
    sections.append("")
    return "\n".join(sections)
