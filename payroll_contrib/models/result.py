"""ORM model for computed employer contributions."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class Result(Base):
    """Employer fee owed for one employee under one city rule.

    Rows are replaced wholesale on every calculation run.
    """

    __tablename__ = "results"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    city_name: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    year: Mapped[str] = mapped_column(String(8), nullable=False)
    avg_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    contribution_base: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    company_fee: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
