"""Service logic for listing and summarising stored contribution results."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from math import ceil

from sqlalchemy.orm import Session

from payroll_contrib.core.log import get_logger
from payroll_contrib.domain import round_money
from payroll_contrib.repositories.results_repository import (
    DEFAULT_SORT,
    SORTABLE_COLUMNS,
    ResultRow,
    ResultsRepository,
)

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ResultQuery:
    """Filter, sort and pagination options for a result listing."""

    employee_name: str | None = None
    city: str | None = None
    sort_by: str = DEFAULT_SORT
    sort_order: str = "asc"
    page: int = 1
    page_size: int = 10

    @property
    def descending(self) -> bool:
        return self.sort_order.lower() == "desc"

    @property
    def resolved_sort(self) -> str:
        return self.sort_by if self.sort_by in SORTABLE_COLUMNS else DEFAULT_SORT


@dataclass(frozen=True)
class ResultPage:
    """Paginated collection of ``ResultRow`` items."""

    items: list[ResultRow]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 1
        return ceil(self.total / self.page_size)


@dataclass(frozen=True)
class CityFeeSummary:
    city: str
    count: int
    total_fee: Decimal


@dataclass(frozen=True)
class EmployeeFeeSummary:
    name: str
    cities: int
    total_fee: Decimal


@dataclass(frozen=True)
class ResultStats:
    """Headline aggregates across the whole result set."""

    total_records: int
    unique_employees: int
    unique_cities: int
    total_company_fee: Decimal
    city_stats: list[CityFeeSummary]
    employee_stats: list[EmployeeFeeSummary]


class ResultsService:
    """Facade over ``ResultsRepository`` used by the API routers."""

    def __init__(
        self,
        session: Session,
        repository: ResultsRepository | None = None,
    ) -> None:
        self._repository = repository or ResultsRepository(session)

    def list_results(self, query: ResultQuery) -> ResultPage:
        """Return one page of results; pages past the end collapse to the last one."""

        if query.page_size < 1:
            raise ValueError("page_size must be greater than zero")
        page = max(query.page, 1)

        total = self._repository.count_results(employee_name=query.employee_name, city=query.city)
        max_page = max(1, ceil(total / query.page_size)) if total else 1
        page = min(page, max_page)

        rows = self._repository.fetch_results(
            employee_name=query.employee_name,
            city=query.city,
            sort_by=query.resolved_sort,
            descending=query.descending,
            limit=query.page_size,
            offset=(page - 1) * query.page_size,
        )
        LOGGER.debug("Listing results page=%d size=%d total=%d", page, query.page_size, total)
        return ResultPage(items=rows, total=total, page=page, page_size=query.page_size)

    def get_stats(self) -> ResultStats | None:
        """Return aggregate statistics, or ``None`` when nothing has been calculated."""

        totals = self._repository.fetch_totals()
        if totals.total_records == 0:
            return None

        return ResultStats(
            total_records=totals.total_records,
            unique_employees=totals.unique_employees,
            unique_cities=totals.unique_cities,
            total_company_fee=round_money(totals.total_company_fee),
            city_stats=[
                CityFeeSummary(city=row.key, count=row.count, total_fee=round_money(row.total_fee))
                for row in self._repository.fees_by_city()
            ],
            employee_stats=[
                EmployeeFeeSummary(
                    name=row.key, cities=row.count, total_fee=round_money(row.total_fee)
                )
                for row in self._repository.fees_by_employee()
            ],
        )
