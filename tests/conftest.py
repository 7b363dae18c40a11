"""Shared fixtures: in-memory SQLite sessions and workbook builders."""
from __future__ import annotations

import os

# Must be set before the package configures logging or settings.
os.environ.setdefault("LOG_DIR", "off")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Iterator
from io import BytesIO
from typing import Any, Sequence

import pytest
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from payroll_contrib.models import Base
from payroll_contrib.repositories import SqlAlchemyContributionStore


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory: sessionmaker) -> Iterator[Session]:
    """Provide an in-memory database session for each test."""

    with session_factory() as session:
        yield session


@pytest.fixture()
def store(session: Session) -> SqlAlchemyContributionStore:
    return SqlAlchemyContributionStore(session)


def build_workbook(header: Sequence[Any], rows: Sequence[Sequence[Any]]) -> bytes:
    """Serialise a single-sheet workbook with ``header`` as its first row."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.append(list(header))
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


CITY_HEADER = ("city_namte ", "year", "rate", "base_min", "base_max")
SALARY_HEADER = ("employee_id", "employee_name", "month", "salary_amount")


@pytest.fixture()
def cities_xlsx() -> bytes:
    return build_workbook(
        CITY_HEADER,
        [
            ("Beijing", 2024, 0.16, 5000, 25000),
            ("Shanghai", 2024, 0.15, 7000, 35000),
        ],
    )


@pytest.fixture()
def salaries_xlsx() -> bytes:
    return build_workbook(
        SALARY_HEADER,
        [
            (1, "Alice", 202401, 8000),
            (1, "Alice", 202402, 9000),
            (2, "Bob", 202401, 3000),
            (3, "Carol", 202401, 40000),
        ],
    )


@pytest.fixture()
def make_workbook():
    return build_workbook
