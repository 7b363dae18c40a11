"""ORM model for per-city contribution rules."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class City(Base):
    """Contribution rate and base band a city mandates for a year."""

    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    city_name: Mapped[str] = mapped_column(String(80), nullable=False)
    year: Mapped[str] = mapped_column(String(8), nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(8, 6), nullable=False)
    base_min: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    base_max: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
