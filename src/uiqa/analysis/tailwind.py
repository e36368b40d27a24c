"""Tailwind class-token helpers shared by the design and accessibility checks."""

from __future__ import annotations

import re
from typing import Iterable

RESPONSIVE_VARIANTS = ("sm", "md", "lg", "xl", "2xl")
COLOR_FAMILIES = ("gray", "blue", "green", "red", "yellow")

SPACING_UTILITY = re.compile(
    r"^(p|px|py|pt|pr|pb|pl|ps|pe|m|mx|my|mt|mr|mb|ml|ms|me"
    r"|space-x|space-y|gap|gap-x|gap-y)-"
)
COLOR_UTILITY = re.compile(r"^(bg|text|border)-")
TEXT_SIZE_UTILITY = re.compile(r"^text-(xs|sm|base|lg|xl|[2-9]xl)$")
RADIUS_UTILITY = re.compile(r"^rounded(-|$)")
DARK_BACKGROUND = re.compile(
    r"^bg-(black|(gray|slate|zinc|neutral|stone|blue|indigo|purple|green|red)-[6-9]\d\d)$"
)
LIGHT_TEXT = frozenset({"text-white", "text-gray-100", "text-gray-200"})


def split_variants(token: str) -> tuple[list[str], str]:
    """Split ``md:hover:bg-blue-500`` into (``["md", "hover"]``, ``"bg-blue-500"``).

    Colons inside arbitrary values (``bg-[url(a:b)]``) are not separators.
    """
    variants: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(token):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth = max(0, depth - 1)
        elif ch == ":" and depth == 0:
            variants.append(token[start:i])
            start = i + 1
    return variants, token[start:]


def base_utility(token: str) -> str:
    return split_variants(token)[1]


def is_responsive(token: str) -> bool:
    return any(v in RESPONSIVE_VARIANTS for v in split_variants(token)[0])


def base_utilities(tokens: Iterable[str]) -> set[str]:
    return {base_utility(t) for t in tokens}


def color_families(utilities: Iterable[str]) -> set[str]:
    """Families from :data:`COLOR_FAMILIES` used by any bg/text/border utility."""
    colored = [u for u in utilities if COLOR_UTILITY.match(u)]
    return {family for family in COLOR_FAMILIES if any(family in u for u in colored)}
