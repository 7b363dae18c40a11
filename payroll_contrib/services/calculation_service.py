"""Orchestrates a full read, compute and replace calculation run."""
from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from uuid import uuid4

from payroll_contrib.core.log import get_logger, log_context, timeit
from payroll_contrib.domain import CityRule, SalaryRecord, compute
from payroll_contrib.repositories.store import CITIES, RESULTS, SALARIES, ContributionStore

LOGGER = get_logger(__name__)

# Concurrent runs would interleave their delete/insert steps.
_RUN_LOCK = Lock()


@dataclass(frozen=True)
class CalculationSummary:
    count: int
    employees: int
    cities: int

    @property
    def message(self) -> str:
        return f"Calculation finished: {self.count} results generated"


class CalculationService:
    """Compute contributions for every stored employee and city rule."""

    def __init__(self, lock: Lock | None = None) -> None:
        self._lock = lock or _RUN_LOCK

    def run(self, store: ContributionStore) -> CalculationSummary:
        """Replace the stored results with a fresh calculation.

        ``NoSalaryData`` and ``NoCityData`` propagate before the results
        table is touched; store failures propagate unchanged.
        """

        with self._lock, log_context.scoped(run=uuid4().hex[:8]):
            salaries = [SalaryRecord.from_row(row) for row in store.read_all(SALARIES)]
            cities = [CityRule.from_row(row) for row in store.read_all(CITIES)]
            LOGGER.info(
                "Starting calculation over %d salary rows and %d city rules",
                len(salaries),
                len(cities),
            )

            with timeit("Contribution calculation", logger=LOGGER, unit="results") as timer:
                results = compute(salaries, cities)
                timer.set_total(len(results))

            store.replace_all(RESULTS, [result.as_row() for result in results])

            employees = len({result.employee_name for result in results})
            summary = CalculationSummary(count=len(results), employees=employees, cities=len(cities))
            LOGGER.info(summary.message)
            return summary
