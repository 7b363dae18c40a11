"""Pure calculation of employer social-insurance and housing-fund contributions.

Every employee's salary records are averaged, the average is clamped into
each city's contribution-base band and multiplied by the city's rate. All
rounding happens on :class:`~decimal.Decimal` values with ``ROUND_HALF_UP``
to two places, once for the average and once for the fee.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Sequence

from .errors import NoCityData, NoSalaryData

CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round ``value`` to cents, halves away from zero."""

    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        raise ValueError("Cannot convert None to Decimal")
    # str() first so binary floats like 0.16 keep their printed value.
    return Decimal(str(value))


@dataclass(frozen=True, slots=True)
class SalaryRecord:
    employee_name: str
    month: str
    amount: Decimal

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SalaryRecord":
        return cls(
            employee_name=str(row["employee_name"]),
            month=str(row["month"]),
            amount=to_decimal(row["salary_amount"]),
        )


@dataclass(frozen=True, slots=True)
class CityRule:
    city_name: str
    year: str
    rate: Decimal
    base_min: Decimal
    base_max: Decimal

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CityRule":
        return cls(
            city_name=str(row["city_name"]),
            year=str(row["year"]),
            rate=to_decimal(row["rate"]),
            base_min=to_decimal(row["base_min"]),
            base_max=to_decimal(row["base_max"]),
        )

    def clamp(self, amount: Decimal) -> Decimal:
        """Return the contribution base for ``amount`` under this rule."""

        if amount < self.base_min:
            return self.base_min
        if amount > self.base_max:
            return self.base_max
        return amount


@dataclass(frozen=True, slots=True)
class ContributionResult:
    employee_name: str
    city_name: str
    year: str
    avg_salary: Decimal
    contribution_base: Decimal
    company_fee: Decimal

    def as_row(self) -> dict[str, Any]:
        return {
            "employee_name": self.employee_name,
            "city_name": self.city_name,
            "year": self.year,
            "avg_salary": self.avg_salary,
            "contribution_base": self.contribution_base,
            "company_fee": self.company_fee,
        }


def average_salaries(salaries: Iterable[SalaryRecord]) -> dict[str, Decimal]:
    """Return each employee's mean monthly salary, in first-seen order."""

    totals: dict[str, list[Decimal]] = {}
    for record in salaries:
        bucket = totals.setdefault(record.employee_name, [Decimal(0), Decimal(0)])
        bucket[0] += record.amount
        bucket[1] += 1
    return {name: round_money(total / count) for name, (total, count) in totals.items()}


def compute(
    salaries: Sequence[SalaryRecord],
    cities: Sequence[CityRule],
) -> list[ContributionResult]:
    """Compute one result per distinct employee and city rule.

    Raises:
        NoSalaryData: ``salaries`` is empty.
        NoCityData: ``cities`` is empty.
    """

    if not salaries:
        raise NoSalaryData()
    if not cities:
        raise NoCityData()

    results: list[ContributionResult] = []
    for employee_name, avg_salary in average_salaries(salaries).items():
        for city in cities:
            base = city.clamp(avg_salary)
            results.append(
                ContributionResult(
                    employee_name=employee_name,
                    city_name=city.city_name,
                    year=city.year,
                    avg_salary=avg_salary,
                    contribution_base=base,
                    company_fee=round_money(base * city.rate),
                )
            )
    return results
