"""Shared helpers for repositories."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

LIKE_ESCAPE = "\\"


class BaseRepository:
    """Base repository holding the session and value coercion helpers."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if value is None:
            return Decimal(0)
        return Decimal(str(value))

    @staticmethod
    def _search_pattern(value: str | None) -> str | None:
        if not value:
            return None
        escaped = value.lower()
        for char in (LIKE_ESCAPE, "%", "_"):
            escaped = escaped.replace(char, LIKE_ESCAPE + char)
        return f"%{escaped}%"
