"""Read-side queries over the ``results`` table."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.sql.elements import ColumnElement

from payroll_contrib.models import Result

from .base import LIKE_ESCAPE, BaseRepository

SORTABLE_COLUMNS: dict[str, ColumnElement] = {
    "employee_name": Result.employee_name,
    "city_name": Result.city_name,
    "year": Result.year,
    "avg_salary": Result.avg_salary,
    "contribution_base": Result.contribution_base,
    "company_fee": Result.company_fee,
}
DEFAULT_SORT = "employee_name"


@dataclass(frozen=True)
class ResultRow:
    id: int
    employee_name: str
    city_name: str
    year: str
    avg_salary: Decimal
    contribution_base: Decimal
    company_fee: Decimal


@dataclass(frozen=True)
class ResultTotalsRow:
    total_records: int
    unique_employees: int
    unique_cities: int
    total_company_fee: Decimal


@dataclass(frozen=True)
class FeeGroupRow:
    key: str
    count: int
    total_fee: Decimal


class ResultsRepository(BaseRepository):
    """Filtering, sorting and aggregation over stored contribution results."""

    def _filtered(self, statement: Select, *, employee_name: str | None, city: str | None) -> Select:
        employee_pattern = self._search_pattern(employee_name)
        if employee_pattern:
            statement = statement.where(
                func.lower(Result.employee_name).like(employee_pattern, escape=LIKE_ESCAPE)
            )
        city_pattern = self._search_pattern(city)
        if city_pattern:
            statement = statement.where(
                func.lower(Result.city_name).like(city_pattern, escape=LIKE_ESCAPE)
            )
        return statement

    def count_results(self, *, employee_name: str | None = None, city: str | None = None) -> int:
        statement = self._filtered(
            select(func.count()).select_from(Result), employee_name=employee_name, city=city
        )
        return int(self._session.execute(statement).scalar() or 0)

    def fetch_results(
        self,
        *,
        employee_name: str | None = None,
        city: str | None = None,
        sort_by: str = DEFAULT_SORT,
        descending: bool = False,
        limit: int,
        offset: int,
    ) -> list[ResultRow]:
        column = SORTABLE_COLUMNS.get(sort_by, SORTABLE_COLUMNS[DEFAULT_SORT])
        order = column.desc() if descending else column.asc()
        statement = (
            self._filtered(select(Result), employee_name=employee_name, city=city)
            # id keeps page boundaries stable when the sort column has ties.
            .order_by(order, Result.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [
            ResultRow(
                id=int(result.id),
                employee_name=result.employee_name,
                city_name=result.city_name,
                year=result.year,
                avg_salary=self._to_decimal(result.avg_salary),
                contribution_base=self._to_decimal(result.contribution_base),
                company_fee=self._to_decimal(result.company_fee),
            )
            for result in self._session.scalars(statement)
        ]

    def fetch_totals(self) -> ResultTotalsRow:
        row = self._session.execute(
            select(
                func.count(Result.id),
                func.count(distinct(Result.employee_name)),
                func.count(distinct(Result.city_name)),
                func.sum(Result.company_fee),
            )
        ).one()
        return ResultTotalsRow(
            total_records=int(row[0] or 0),
            unique_employees=int(row[1] or 0),
            unique_cities=int(row[2] or 0),
            total_company_fee=self._to_decimal(row[3]),
        )

    def _fees_grouped_by(self, column: ColumnElement) -> list[FeeGroupRow]:
        total_fee = func.sum(Result.company_fee)
        statement = (
            select(column, func.count(Result.id), total_fee)
            .group_by(column)
            .order_by(total_fee.desc(), column.asc())
        )
        return [
            FeeGroupRow(key=str(key), count=int(count or 0), total_fee=self._to_decimal(fee))
            for key, count, fee in self._session.execute(statement)
        ]

    def fees_by_city(self) -> list[FeeGroupRow]:
        return self._fees_grouped_by(Result.city_name)

    def fees_by_employee(self) -> list[FeeGroupRow]:
        return self._fees_grouped_by(Result.employee_name)
