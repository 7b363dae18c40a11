"""Tests for result listing and aggregate statistics."""
from __future__ import annotations

from decimal import Decimal
from unittest.mock import create_autospec

import pytest
from sqlalchemy.orm import Session

from payroll_contrib.repositories import RESULTS, ResultsRepository, SqlAlchemyContributionStore
from payroll_contrib.services import ResultQuery, ResultsService


def _result(employee: str, city: str, avg: str, base: str, fee: str) -> dict:
    return {
        "employee_name": employee,
        "city_name": city,
        "year": "2024",
        "avg_salary": Decimal(avg),
        "contribution_base": Decimal(base),
        "company_fee": Decimal(fee),
    }


@pytest.fixture()
def populated(session: Session, store: SqlAlchemyContributionStore) -> Session:
    store.insert_many(
        RESULTS,
        [
            _result("Alice", "Beijing", "8500", "8500", "1360"),
            _result("Alice", "Shanghai", "8500", "8500", "1275"),
            _result("Bob", "Beijing", "3000", "5000", "800"),
            _result("Bob", "Shanghai", "3000", "7000", "1050"),
            _result("Carol", "Beijing", "40000", "25000", "4000"),
            _result("Carol", "Shanghai", "40000", "35000", "5250"),
        ],
    )
    return session


def test_list_results_defaults_to_employee_name_order(populated: Session) -> None:
    page = ResultsService(populated).list_results(ResultQuery())

    assert page.total == 6
    assert page.total_pages == 1
    assert [row.employee_name for row in page.items] == ["Alice", "Alice", "Bob", "Bob", "Carol", "Carol"]


def test_filters_are_case_insensitive_substrings(populated: Session) -> None:
    service = ResultsService(populated)

    page = service.list_results(ResultQuery(employee_name="AL", city="shang"))

    assert page.total == 1
    [row] = page.items
    assert (row.employee_name, row.city_name) == ("Alice", "Shanghai")
    assert row.company_fee == Decimal("1275")


def test_wildcard_characters_in_filters_match_literally(
    session: Session, store: SqlAlchemyContributionStore
) -> None:
    store.insert_many(
        RESULTS,
        [
            _result("a_b", "Beijing", "8000", "8000", "1280"),
            _result("axb", "Beijing", "8000", "8000", "1280"),
            _result("50% Li", "Beijing", "8000", "8000", "1280"),
        ],
    )
    service = ResultsService(session)

    assert [r.employee_name for r in service.list_results(ResultQuery(employee_name="_")).items] == ["a_b"]
    assert [r.employee_name for r in service.list_results(ResultQuery(employee_name="%")).items] == ["50% Li"]
    assert service.list_results(ResultQuery(employee_name="a%b")).total == 0
    assert service.list_results(ResultQuery(city="bei_ing")).total == 0


def test_sort_descending_by_fee(populated: Session) -> None:
    page = ResultsService(populated).list_results(
        ResultQuery(sort_by="company_fee", sort_order="desc", page_size=10)
    )

    fees = [row.company_fee for row in page.items]
    assert fees == sorted(fees, reverse=True)
    assert fees[0] == Decimal("5250")


def test_unknown_sort_column_falls_back(populated: Session) -> None:
    page = ResultsService(populated).list_results(ResultQuery(sort_by="id; drop table results"))

    assert page.items[0].employee_name == "Alice"


def test_pagination_offsets(populated: Session) -> None:
    service = ResultsService(populated)

    second = service.list_results(ResultQuery(page=2, page_size=4))

    assert second.page == 2
    assert second.total_pages == 2
    assert [row.employee_name for row in second.items] == ["Carol", "Carol"]


def test_pages_beyond_the_dataset_collapse_to_the_last_page() -> None:
    repository = create_autospec(ResultsRepository, instance=True)
    repository.count_results.return_value = 23
    repository.fetch_results.return_value = []
    service = ResultsService(create_autospec(Session, instance=True), repository=repository)

    page = service.list_results(ResultQuery(city="bei", page=5, page_size=10))

    assert page.page == 3
    repository.count_results.assert_called_once_with(employee_name=None, city="bei")
    repository.fetch_results.assert_called_once_with(
        employee_name=None,
        city="bei",
        sort_by="employee_name",
        descending=False,
        limit=10,
        offset=20,
    )


def test_invalid_page_size_is_rejected() -> None:
    service = ResultsService(
        create_autospec(Session, instance=True),
        repository=create_autospec(ResultsRepository, instance=True),
    )

    with pytest.raises(ValueError):
        service.list_results(ResultQuery(page_size=0))


def test_stats_aggregate_by_city_and_employee(populated: Session) -> None:
    stats = ResultsService(populated).get_stats()

    assert stats is not None
    assert stats.total_records == 6
    assert stats.unique_employees == 3
    assert stats.unique_cities == 2
    assert stats.total_company_fee == Decimal("13735.00")

    assert [(s.city, s.count, s.total_fee) for s in stats.city_stats] == [
        ("Shanghai", 3, Decimal("7575.00")),
        ("Beijing", 3, Decimal("6160.00")),
    ]
    assert [(s.name, s.cities, s.total_fee) for s in stats.employee_stats] == [
        ("Carol", 2, Decimal("9250.00")),
        ("Alice", 2, Decimal("2635.00")),
        ("Bob", 2, Decimal("1850.00")),
    ]


def test_stats_are_none_without_results(session: Session) -> None:
    assert ResultsService(session).get_stats() is None
