"""Parsing helpers for listing query parameters."""
from __future__ import annotations

from typing import Sequence

PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100)


def parse_positive_int(value: str | None, *, default: int) -> int:
    """Parse a positive integer, falling back to ``default`` on anything else."""

    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def normalize_page_size(
    value: str | None,
    *,
    options: Sequence[int] = PAGE_SIZE_OPTIONS,
) -> int:
    """Return the smallest allowed page size that fits the requested value."""

    try:
        parsed = int(value) if value is not None else options[0]
    except (TypeError, ValueError):
        return options[0]

    for option in options:
        if parsed <= option:
            return option
    return options[-1]


def normalize_sort_order(value: str | None) -> str:
    return "desc" if value and value.strip().lower() == "desc" else "asc"


def clean_search_term(value: str | None) -> str | None:
    if not value:
        return None
    stripped = value.strip()
    return stripped or None
