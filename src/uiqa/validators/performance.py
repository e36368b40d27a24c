"""Render-performance heuristics for React components."""

from __future__ import annotations

import re

from uiqa.schemas.quality import ErrorType, Severity, ValidationError, ValidatorResult

_JSON_CALL = re.compile(r"\bJSON\.(parse|stringify)\b")
# prop={{...}} or prop={[...]}
_INLINE_LITERAL_PROP = re.compile(r"\w+=\{\s*[\{\[]")
_ARRAY_PIPELINE = re.compile(r"\.(sort|filter|reduce)\s*\(")
_MEMO_HOOK = re.compile(r"\b(useMemo|useCallback)\b")

MAX_INLINE_LITERALS = 3
MEMO_BONUS = 10


class PerformanceValidator:
    def validate(self, code: str) -> ValidatorResult:
        errors: list[ValidationError] = []
        score = 100
        memoized = bool(_MEMO_HOOK.search(code))

        if _JSON_CALL.search(code):
            errors.append(
                _finding(
                    Severity.WARNING,
                    "JSON.parse/JSON.stringify during render is expensive - memoize or move it out of render",
                    "json-operations",
                )
            )
            score -= 15

        inline_literals = len(_INLINE_LITERAL_PROP.findall(code))
        if inline_literals > MAX_INLINE_LITERALS:
            errors.append(
                _finding(
                    Severity.WARNING,
                    f"{inline_literals} inline object/array props create new references on every render",
                    "inline-objects",
                )
            )
            score -= 10

        if _ARRAY_PIPELINE.search(code) and not memoized:
            errors.append(
                _finding(
                    Severity.INFO,
                    "Consider using useMemo/useCallback for sort/filter/reduce results",
                    "memoization",
                )
            )
            score -= 5

        if memoized:
            score += MEMO_BONUS

        return ValidatorResult(score=max(0, min(100, score)), errors=errors)


def _finding(severity: Severity, message: str, rule: str) -> ValidationError:
    return ValidationError(type=ErrorType.PERFORMANCE, severity=severity, message=message, rule=rule)
