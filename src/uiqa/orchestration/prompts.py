"""Prompt engineering: request classification and augmented prompt assembly."""

from __future__ import annotations

import re

from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.orchestration import (
    AugmentedPrompt,
    GenerationContext,
    PromptStrategy,
    QualityPreferences,
)
from uiqa.schemas.quality import ComponentQualityScore

# Below this, the previous attempt's weak dimensions are called out.
IMPROVEMENT_THRESHOLD = 70

BASE_SYSTEM_PROMPT = """\
You are an expert React and Tailwind CSS developer specializing in high-quality, \
accessible component development. Your task is to generate exceptional React \
functional components that meet modern web standards.

**CORE REQUIREMENTS:**
1. Generate a single React functional component with clean, semantic code
2. React hooks (useState, useEffect, useCallback, useMemo, useRef) are available globally
3. Do NOT include import statements - they are provided in the runtime environment
4. Use Tailwind CSS for styling with modern design principles
5. Component must be self-contained and immediately renderable
6. Include a render() call at the end: `render(<ComponentName />);`
7. Use arrow function syntax for event handlers: `(e) => { ... }`

**QUALITY STANDARDS:**
8. **TypeScript Best Practices**: Use proper types, avoid 'any', follow React patterns
9. **Accessibility First**: WCAG 2.1 AA compliance, semantic HTML, ARIA attributes
10. **Performance Optimized**: Efficient renders, proper memoization when needed
11. **Design Consistency**: Follow modern UI patterns, consistent spacing and colors
12. **Light Theme Default**: Use light backgrounds (bg-white, bg-gray-50) unless specified otherwise

**DESIGN SYSTEM:**
- Primary backgrounds: bg-white, bg-gray-50, bg-gray-100
- Text colors: text-gray-900, text-gray-800, text-gray-700
- Accent colors: blue-600, indigo-600, green-600, purple-600 (vibrant colors)
- Borders: border-gray-200, border-gray-300
- Hover states: hover:bg-gray-100, hover:bg-gray-200
- Spacing: Use Tailwind spacing utilities (p-4, m-2, space-y-4, etc.)
- Border radius: rounded-lg, rounded-md for modern look"""

TYPE_GUIDELINES: dict[ComponentType, str] = {
    ComponentType.FORM: """
**FORM COMPONENT GUIDELINES:**
- Use semantic form elements (<form>, <fieldset>, <legend>)
- Include proper form validation with visual feedback
- Add accessible labels (htmlFor attribute) for all inputs
- Implement proper error states and success states
- Use appropriate input types (email, tel, password, etc.)
- Include form submission handling with loading states
- Ensure keyboard navigation works correctly
- Add ARIA attributes for screen readers (aria-describedby, aria-invalid)
- Use consistent spacing and visual hierarchy
- Include helpful placeholder text and validation messages""",
    ComponentType.NAVIGATION: """
**NAVIGATION COMPONENT GUIDELINES:**
- Use semantic navigation elements (<nav>, <ul>, <li>)
- Include proper ARIA landmarks (role="navigation")
- Implement keyboard navigation (Tab, Enter, Arrow keys)
- Add active/current state indicators
- Ensure mobile responsiveness with collapsible menu
- Include skip navigation links for accessibility
- Use consistent styling across navigation items
- Implement proper focus management
- Add breadcrumbs for complex navigation structures
- Consider search functionality for large menus""",
    ComponentType.INTERACTIVE: """
**INTERACTIVE COMPONENT GUIDELINES:**
- Use appropriate ARIA attributes (aria-expanded, aria-pressed)
- Implement proper focus management and visual focus indicators
- Add keyboard event handlers (onKeyDown, onKeyPress)
- Include loading and disabled states
- Provide clear visual feedback for user actions
- Use semantic button elements for clickable items
- Implement proper state management with useState
- Add animation/transitions for smooth interactions
- Ensure touch targets are at least 44x44px for mobile
- Include descriptive aria-label attributes""",
    ComponentType.DATA_VISUALIZATION: """
**DATA VISUALIZATION GUIDELINES:**
- Use semantic table elements for tabular data
- Include proper headers and captions for tables
- Implement responsive design for different screen sizes
- Add ARIA labels for chart elements and data points
- Provide alternative text descriptions for visual data
- Include keyboard navigation for interactive charts
- Use consistent color schemes with sufficient contrast
- Implement data loading and error states
- Add tooltips and legends for complex visualizations
- Consider screen reader accessibility for data representation""",
    ComponentType.LAYOUT: """
**LAYOUT COMPONENT GUIDELINES:**
- Use CSS Grid or Flexbox for responsive layouts
- Implement proper semantic structure (main, section, aside)
- Ensure consistent spacing using Tailwind spacing utilities
- Add responsive breakpoints for mobile, tablet, desktop
- Use landmark roles for better accessibility
- Implement proper heading hierarchy (h1, h2, h3, etc.)
- Ensure content reflows properly on different screen sizes
- Add skip links for keyboard navigation
- Use consistent container max-widths and margins
- Consider dark mode compatibility""",
    ComponentType.DISPLAY: """
**DISPLAY COMPONENT GUIDELINES:**
- Use appropriate semantic HTML elements
- Implement responsive design principles
- Add proper alt text for images and media
- Use consistent typography and spacing
- Ensure adequate color contrast (4.5:1 minimum)
- Include proper heading structure
- Add focus indicators for interactive elements
- Use meaningful link text (avoid "click here")
- Implement proper content hierarchy
- Consider loading states for dynamic content""",
}

COMPLEXITY_GUIDANCE: dict[ComplexityLevel, str] = {
    ComplexityLevel.SIMPLE: """
**SIMPLE COMPONENT FOCUS:**
- Keep the component focused and single-purpose
- Use minimal state management
- Prioritize clarity and readability
- Include basic accessibility features
- Use standard Tailwind utilities""",
    ComplexityLevel.MEDIUM: """
**MEDIUM COMPLEXITY FOCUS:**
- Implement proper state management with useState
- Add interactive features with event handlers
- Include form validation if applicable
- Implement responsive design breakpoints
- Add proper error handling and edge cases
- Use useEffect for side effects when needed""",
    ComplexityLevel.COMPLEX: """
**COMPLEX COMPONENT FOCUS:**
- Use multiple hooks (useState, useEffect, useMemo, useCallback)
- Implement advanced interactivity and state management
- Add comprehensive error handling and loading states
- Include advanced accessibility features (ARIA live regions, focus management)
- Optimize performance with memoization
- Handle complex user interactions and edge cases
- Consider component composition and reusability""",
}

IMAGE_INSTRUCTIONS = """

**IMAGE ANALYSIS INSTRUCTIONS:**
13. **ANALYZE THE PROVIDED IMAGE**: Study layout, colors, typography, spacing, and functionality
14. **RECREATE EXACTLY**: Match the design as closely as possible using Tailwind classes
15. **PRESERVE DESIGN INTENT**: Maintain the color scheme and theme shown in image
16. **EXTRACT TEXT CONTENT**: Use visible text from image in the component
17. **INFER FUNCTIONALITY**: Implement appropriate interactive behavior based on UI elements"""

_DIMENSION_LABELS = {
    "code_quality": "code quality and TypeScript best practices",
    "accessibility": "accessibility and WCAG compliance",
    "design_consistency": "design consistency and visual patterns",
    "performance": "performance optimization",
}

# ---------------------------------------------------------------------------
# Request classification
# ---------------------------------------------------------------------------

_PROMPT_TYPE_PATTERNS: list[tuple[ComponentType, re.Pattern[str]]] = [
    (ComponentType.FORM, re.compile(r"\b(form|input|submit|login|register|contact|signup|field|validation)\b")),
    (ComponentType.NAVIGATION, re.compile(r"\b(nav|navigation|menu|sidebar|breadcrumb|header|footer|tabs)\b")),
    (ComponentType.INTERACTIVE, re.compile(r"\b(button|toggle|switch|modal|dialog|dropdown|accordion|carousel)\b")),
    (
        ComponentType.DATA_VISUALIZATION,
        re.compile(r"\b(chart|graph|table|data|dashboard|analytics|visualization|plot)\b"),
    ),
    (ComponentType.LAYOUT, re.compile(r"\b(layout|grid|container|wrapper|card|section|panel|split)\b")),
]

COMPLEX_KEYWORDS = (
    "dynamic", "interactive", "state", "animation", "realtime", "complex",
    "advanced", "multiple", "integration", "api", "responsive",
)
MEDIUM_KEYWORDS = ("form", "validation", "toggle", "dropdown", "modal", "tabs", "accordion")


def detect_component_type(prompt: str) -> ComponentType:
    """Classify a natural-language request; first matching group wins."""
    lowered = prompt.lower()
    for component_type, pattern in _PROMPT_TYPE_PATTERNS:
        if pattern.search(lowered):
            return component_type
    return ComponentType.DISPLAY


def determine_complexity(prompt: str) -> ComplexityLevel:
    lowered = prompt.lower()
    complex_hits = sum(1 for k in COMPLEX_KEYWORDS if k in lowered)
    medium_hits = sum(1 for k in MEDIUM_KEYWORDS if k in lowered)
    if complex_hits >= 2:
        return ComplexityLevel.COMPLEX
    if medium_hits >= 1 or complex_hits >= 1:
        return ComplexityLevel.MEDIUM
    return ComplexityLevel.SIMPLE


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------


def base_system_prompt(
    component_type: ComponentType,
    complexity: ComplexityLevel,
    has_image: bool = False,
) -> str:
    prompt = (
        BASE_SYSTEM_PROMPT
        + "\n" + TYPE_GUIDELINES[component_type]
        + "\n" + COMPLEXITY_GUIDANCE[complexity]
    )
    if has_image:
        prompt += IMAGE_INSTRUCTIONS
    return prompt


def improvement_areas(score: ComponentQualityScore) -> list[str]:
    return [
        _DIMENSION_LABELS[name]
        for name, value in score.dimensions().items()
        if value < IMPROVEMENT_THRESHOLD
    ]


def preference_guidance(preferences: QualityPreferences) -> str:
    # Stable sort keeps the fixed dimension order among equal weights.
    ranked = sorted(preferences.priority_weights.ordered(), key=lambda item: -item[1])
    primary, secondary = ranked[0][0].value, ranked[1][0].value
    return (
        "\n\nUSER QUALITY PREFERENCES:\n"
        f"- Primary focus: {primary} (highest priority)\n"
        f"- Secondary focus: {secondary}\n"
        f"- Minimum acceptable overall score: {preferences.min_acceptable_score}/100\n"
        "- Ensure all quality dimensions meet user expectations"
    )


def augment_prompt(context: GenerationContext, strategy: PromptStrategy) -> AugmentedPrompt:
    """Combine strategy, type/complexity guidance, history and preferences into a prompt pair."""
    system_prompt = (
        strategy.system_prompt_modifier
        + "\n\n"
        + base_system_prompt(context.component_type, context.complexity_level, context.has_image)
        + preference_guidance(context.user_quality_preferences)
    )

    user_prompt = strategy.user_prompt_enhancer(context.user_prompt, context)
    last = context.last_attempt
    if last is not None and last.quality_score.overall < IMPROVEMENT_THRESHOLD:
        areas = ", ".join(improvement_areas(last.quality_score)) or "overall quality balance"
        user_prompt += (
            "\n\nIMPROVEMENT FOCUS (based on previous attempt):\n"
            f"- Previous quality score: {last.quality_score.overall}/100\n"
            f"- Areas needing improvement: {areas}\n"
            "- Avoid the patterns that led to these issues\n"
            "- Focus on addressing the specific weaknesses identified"
        )

    return AugmentedPrompt(system_prompt=system_prompt, user_prompt=user_prompt)


_EDIT_FORMAT = "<component_edit><name>...</name><description>...</description><code><![CDATA[...]]></code></component_edit>"
_NEW_FORMAT = "<component><name>...</name><description>...</description><code><![CDATA[...]]></code></component>"


def render_request_message(
    user_prompt: str,
    *,
    original_code: str | None = None,
    has_image: bool = False,
) -> str:
    """Wrap the augmented user prompt in the XML request envelope the generator answers to."""
    if original_code is not None:
        image_note = (
            "\n  <image_analysis>Analyze the provided image and incorporate any design elements "
            "or changes shown in the image into the existing component.</image_analysis>"
            if has_image else ""
        )
        return (
            '<request type="edit_component">\n'
            f"  <original_code><![CDATA[{original_code}]]></original_code>\n"
            f"  <edit_instruction>{user_prompt}</edit_instruction>{image_note}\n"
            "  <thinking_process>...</thinking_process>\n"
            "  Your output MUST be in the following XML format:\n"
            f"  {_EDIT_FORMAT}\n"
            "</request>"
        )

    image_note = (
        "\n  <image_analysis>Analyze the provided image and recreate the exact UI/component shown. "
        "Match the design, layout, colors, typography, and functionality as closely as possible."
        "</image_analysis>"
        if has_image else ""
    )
    return (
        '<request type="new_component">\n'
        f"  <description_prompt>{user_prompt}</description_prompt>{image_note}\n"
        "  <thinking_process>...</thinking_process>\n"
        "  Your output MUST be in the following XML format:\n"
        f"  {_NEW_FORMAT}\n"
        "</request>"
    )
