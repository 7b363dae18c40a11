"""Database models for salaries, city rules and contribution results."""
from __future__ import annotations

from .base import Base
from .city import City
from .result import Result
from .salary import Salary

__all__ = ["Base", "City", "Result", "Salary"]
