"""Tests for the pure contribution calculation."""
from __future__ import annotations

from decimal import Decimal

import pytest

from payroll_contrib.domain import (
    CityRule,
    ComputationError,
    NoCityData,
    NoSalaryData,
    SalaryRecord,
    average_salaries,
    compute,
)


def _salary(name: str, month: str, amount: str) -> SalaryRecord:
    return SalaryRecord(employee_name=name, month=month, amount=Decimal(amount))


def _city(name: str, rate: str, base_min: str, base_max: str, year: str = "2024") -> CityRule:
    return CityRule(
        city_name=name,
        year=year,
        rate=Decimal(rate),
        base_min=Decimal(base_min),
        base_max=Decimal(base_max),
    )


BEIJING = _city("Beijing", "0.16", "5000", "25000")
SHANGHAI = _city("Shanghai", "0.15", "7000", "35000")


def test_average_within_range_is_used_as_base() -> None:
    salaries = [_salary("Alice", "2024-01", "8000"), _salary("Alice", "2024-02", "9000")]

    [result] = compute(salaries, [BEIJING])

    assert result.employee_name == "Alice"
    assert result.city_name == "Beijing"
    assert result.year == "2024"
    assert result.avg_salary == Decimal("8500.00")
    assert result.contribution_base == Decimal("8500.00")
    assert result.company_fee == Decimal("1360.00")


def test_average_below_minimum_is_raised_to_minimum() -> None:
    [result] = compute([_salary("Bob", "2024-01", "3000")], [BEIJING])

    assert result.avg_salary == Decimal("3000.00")
    assert result.contribution_base == Decimal("5000")
    assert result.company_fee == Decimal("800.00")


def test_average_above_maximum_is_capped() -> None:
    [result] = compute([_salary("Carol", "2024-01", "30000")], [BEIJING])

    assert result.contribution_base == Decimal("25000")
    assert result.company_fee == Decimal("4000.00")


def test_bounds_are_inclusive() -> None:
    salaries = [_salary("Low", "2024-01", "5000"), _salary("High", "2024-01", "25000")]

    results = {r.employee_name: r for r in compute(salaries, [BEIJING])}

    assert results["Low"].contribution_base == Decimal("5000.00")
    assert results["High"].contribution_base == Decimal("25000.00")


def test_result_count_is_employees_times_cities() -> None:
    salaries = [
        _salary("Alice", "2024-01", "8000"),
        _salary("Alice", "2024-02", "9000"),
        _salary("Bob", "2024-01", "3000"),
        _salary("Carol", "2024-01", "40000"),
    ]
    cities = [BEIJING, SHANGHAI]

    results = compute(salaries, cities)

    assert len(results) == 3 * 2
    assert {(r.employee_name, r.city_name) for r in results} == {
        (name, city.city_name) for name in ("Alice", "Bob", "Carol") for city in cities
    }
    by_city = {city.city_name: city for city in cities}
    for result in results:
        rule = by_city[result.city_name]
        assert rule.base_min <= result.contribution_base <= rule.base_max


def test_results_follow_employee_then_city_order() -> None:
    salaries = [_salary("Bob", "2024-01", "1"), _salary("Alice", "2024-01", "1")]

    results = compute(salaries, [BEIJING, SHANGHAI])

    assert [(r.employee_name, r.city_name) for r in results] == [
        ("Bob", "Beijing"),
        ("Bob", "Shanghai"),
        ("Alice", "Beijing"),
        ("Alice", "Shanghai"),
    ]


def test_compute_is_deterministic() -> None:
    salaries = [_salary("Alice", "2024-01", "8123.45"), _salary("Bob", "2024-01", "6000")]
    cities = [BEIJING, SHANGHAI]

    assert compute(salaries, cities) == compute(salaries, cities)


def test_average_rounds_half_up() -> None:
    salaries = [_salary("Alice", "2024-01", "1000.00"), _salary("Alice", "2024-02", "1000.01")]

    assert average_salaries(salaries) == {"Alice": Decimal("1000.01")}


def test_fee_rounds_half_up_to_cents() -> None:
    # 10000.50 * 0.105 = 1050.0525 -> 1050.05; 10000.10 * 0.125 = 1250.0125 -> 1250.01
    city = _city("Shenzhen", "0.105", "0", "50000")
    other = _city("Hangzhou", "0.125", "0", "50000")

    results = compute(
        [_salary("A", "2024-01", "10000.50"), _salary("B", "2024-01", "10000.10")],
        [city, other],
    )

    fees = {(r.employee_name, r.city_name): r.company_fee for r in results}
    assert fees[("A", "Shenzhen")] == Decimal("1050.05")
    assert fees[("B", "Hangzhou")] == Decimal("1250.01")
    assert fees[("A", "Hangzhou")] == Decimal("1250.06")


def test_multiple_rules_for_one_city_each_produce_a_row() -> None:
    rules = [_city("Beijing", "0.16", "5000", "25000", year="2023"), BEIJING]

    results = compute([_salary("Alice", "2024-01", "8000")], rules)

    assert [(r.city_name, r.year) for r in results] == [("Beijing", "2023"), ("Beijing", "2024")]


def test_rows_from_store_accept_floats_and_integers() -> None:
    salary = SalaryRecord.from_row({"employee_name": "Alice", "month": 202401, "salary_amount": 8000})
    city = CityRule.from_row(
        {"city_name": "Beijing", "year": 2024, "rate": 0.16, "base_min": 5000.0, "base_max": 25000}
    )

    [result] = compute([salary], [city])

    assert salary.month == "202401"
    assert city.rate == Decimal("0.16")
    assert result.company_fee == Decimal("1280.00")


def test_empty_salaries_raise_no_salary_data() -> None:
    with pytest.raises(NoSalaryData):
        compute([], [BEIJING])


def test_empty_cities_raise_no_city_data() -> None:
    with pytest.raises(NoCityData) as excinfo:
        compute([_salary("Alice", "2024-01", "8000")], [])

    assert isinstance(excinfo.value, ComputationError)


def test_result_row_matches_store_columns() -> None:
    [result] = compute([_salary("Alice", "2024-01", "8000")], [BEIJING])

    assert result.as_row() == {
        "employee_name": "Alice",
        "city_name": "Beijing",
        "year": "2024",
        "avg_salary": Decimal("8000.00"),
        "contribution_base": Decimal("8000.00"),
        "company_fee": Decimal("1280.00"),
    }
