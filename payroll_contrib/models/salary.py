"""ORM model for ingested monthly salary rows."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class Salary(Base):
    """One salary payment for an employee in a given month."""

    __tablename__ = "salaries"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    employee_name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    month: Mapped[str] = mapped_column(String(16), nullable=False)
    salary_amount: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
