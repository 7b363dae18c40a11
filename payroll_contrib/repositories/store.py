"""Table-keyed store used by the calculation and ingestion services.

The services only ever need four things from persistence: read every row of
a table, delete every row, bulk insert, and a delete-then-insert swap. Tables
are addressed by name (``salaries``, ``cities``, ``results``).
"""
from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence

from sqlalchemy import delete, insert, inspect, select
from sqlalchemy.orm import Session

from payroll_contrib.core.log import get_logger
from payroll_contrib.domain.errors import UnknownTableError
from payroll_contrib.models import Base, City, Result, Salary

from .base import BaseRepository

LOGGER = get_logger(__name__)

Row = dict[str, Any]

SALARIES = "salaries"
CITIES = "cities"
RESULTS = "results"

TABLE_MODELS: dict[str, type[Base]] = {
    SALARIES: Salary,
    CITIES: City,
    RESULTS: Result,
}


class ContributionStore(Protocol):
    def read_all(self, table: str) -> list[Row]: ...

    def delete_all(self, table: str) -> int: ...

    def insert_many(self, table: str, rows: Sequence[Row]) -> int: ...

    def replace_all(self, table: str, rows: Sequence[Row]) -> int: ...


class SqlAlchemyContributionStore(BaseRepository):
    """``ContributionStore`` backed by a SQLAlchemy session.

    ``delete_all`` and ``insert_many`` commit individually; ``replace_all``
    commits once so readers never observe the emptied table.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(session)

    @staticmethod
    def _model(table: str) -> type[Base]:
        try:
            return TABLE_MODELS[table]
        except KeyError:
            raise UnknownTableError(table) from None

    @staticmethod
    def _columns(model: type[Base]) -> list[str]:
        return [column.key for column in inspect(model).columns]

    def read_all(self, table: str) -> list[Row]:
        model = self._model(table)
        columns = self._columns(model)
        instances = self._session.scalars(select(model).order_by(model.id)).all()
        rows = [{key: getattr(instance, key) for key in columns} for instance in instances]
        LOGGER.debug("Read %d rows from %s", len(rows), table)
        return rows

    def _delete(self, table: str) -> int:
        result = self._session.execute(delete(self._model(table)))
        return int(result.rowcount or 0)

    def _insert(self, table: str, rows: Iterable[Row]) -> int:
        model = self._model(table)
        allowed = set(self._columns(model)) - {"id"}
        payload = [{k: v for k, v in row.items() if k in allowed} for row in rows]
        if payload:
            self._session.execute(insert(model), payload)
        return len(payload)

    def delete_all(self, table: str) -> int:
        try:
            deleted = self._delete(table)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        LOGGER.debug("Deleted %d rows from %s", deleted, table)
        return deleted

    def insert_many(self, table: str, rows: Sequence[Row]) -> int:
        try:
            inserted = self._insert(table, rows)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        LOGGER.debug("Inserted %d rows into %s", inserted, table)
        return inserted

    def replace_all(self, table: str, rows: Sequence[Row]) -> int:
        try:
            deleted = self._delete(table)
            inserted = self._insert(table, rows)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        LOGGER.info("Replaced %s: %d rows removed, %d inserted", table, deleted, inserted)
        return inserted
