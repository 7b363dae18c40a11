"""Parse uploaded city and salary workbooks and overwrite the stored tables."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Mapping, Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from payroll_contrib.core.log import get_logger, log_context, timeit
from payroll_contrib.domain.errors import IngestError
from payroll_contrib.repositories.store import CITIES, SALARIES, ContributionStore

LOGGER = get_logger(__name__)

WorkbookSource = Union[bytes, str, Path, BinaryIO]

CITY_COLUMNS = ("city_name", "year", "rate", "base_min", "base_max")
SALARY_COLUMNS = ("employee_id", "employee_name", "month", "salary_amount")

# The sample cities sheet ships with a misspelled header.
HEADER_ALIASES = {
    "city_namte": "city_name",
    "city": "city_name",
    "amount": "salary_amount",
    "salary": "salary_amount",
}


@dataclass(frozen=True)
class IngestSummary:
    cities_count: int
    salaries_count: int

    @property
    def message(self) -> str:
        return (
            f"Upload complete: {self.cities_count} city rules and "
            f"{self.salaries_count} salary rows imported"
        )


def _normalize_header(value: Any) -> str:
    if value is None:
        return ""
    key = str(value).strip().lower().replace(" ", "_")
    return HEADER_ALIASES.get(key, key)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str:
    """Render identifiers Excel may have stored as numbers without a trailing ``.0``."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _period_text(value: Any, *, month: bool) -> str:
    if isinstance(value, (datetime, date)):
        return f"{value.year:04d}-{value.month:02d}" if month else f"{value.year:04d}"
    return _text(value)


def _amount(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidOperation(value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        result = Decimal(str(value).strip().replace(",", ""))
    if not result.is_finite():
        raise InvalidOperation(value)
    return result


def _open_rows(source: WorkbookSource, sheet: str) -> Iterator[tuple[int, tuple[Any, ...]]]:
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    elif isinstance(source, Path):
        source = str(source)
    try:
        workbook = load_workbook(source, read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, OSError) as exc:
        raise IngestError(f"Unable to read workbook: {exc}", sheet=sheet) from exc
    try:
        worksheet = workbook.worksheets[0]
        for index, values in enumerate(worksheet.iter_rows(values_only=True), start=1):
            yield index, tuple(values)
    finally:
        workbook.close()


def read_sheet(source: WorkbookSource, *, sheet: str, required: tuple[str, ...]) -> list[dict[str, Any]]:
    """Return the first worksheet as header-keyed dicts, skipping blank rows."""

    rows = _open_rows(source, sheet)
    try:
        _, header_values = next(rows)
    except StopIteration:
        raise IngestError("Workbook is empty", sheet=sheet) from None

    headers = [_normalize_header(value) for value in header_values]
    missing = [column for column in required if column not in headers]
    if missing:
        raise IngestError(f"Missing required columns: {', '.join(missing)}", sheet=sheet)

    positions = {name: headers.index(name) for name in required}
    records: list[dict[str, Any]] = []
    for row_number, values in rows:
        if all(_is_blank(value) for value in values):
            continue
        record = {
            name: values[position] if position < len(values) else None
            for name, position in positions.items()
        }
        record["_row"] = row_number
        records.append(record)
    return records


def _require(record: Mapping[str, Any], column: str, sheet: str) -> Any:
    value = record[column]
    if _is_blank(value):
        raise IngestError("Missing value", sheet=sheet, row=record["_row"], column=column)
    return value


def _require_amount(record: Mapping[str, Any], column: str, sheet: str) -> Decimal:
    value = _require(record, column, sheet)
    try:
        return _amount(value)
    except (InvalidOperation, ValueError):
        raise IngestError(
            f"Not a number: {value!r}", sheet=sheet, row=record["_row"], column=column
        ) from None


def parse_cities(source: WorkbookSource) -> list[dict[str, Any]]:
    sheet = "cities"
    parsed: list[dict[str, Any]] = []
    for record in read_sheet(source, sheet=sheet, required=CITY_COLUMNS):
        rate = _require_amount(record, "rate", sheet)
        base_min = _require_amount(record, "base_min", sheet)
        base_max = _require_amount(record, "base_max", sheet)
        if rate <= 0:
            raise IngestError("Rate must be positive", sheet=sheet, row=record["_row"], column="rate")
        if base_min < 0 or base_max < base_min:
            raise IngestError(
                "Base range must satisfy 0 <= base_min <= base_max",
                sheet=sheet,
                row=record["_row"],
                column="base_max",
            )
        parsed.append(
            {
                "city_name": _text(_require(record, "city_name", sheet)),
                "year": _period_text(_require(record, "year", sheet), month=False),
                "rate": rate,
                "base_min": base_min,
                "base_max": base_max,
            }
        )
    return parsed


def parse_salaries(source: WorkbookSource) -> list[dict[str, Any]]:
    sheet = "salaries"
    parsed: list[dict[str, Any]] = []
    for record in read_sheet(source, sheet=sheet, required=SALARY_COLUMNS):
        employee_id = record["employee_id"]
        parsed.append(
            {
                "employee_id": "" if _is_blank(employee_id) else _text(employee_id),
                "employee_name": _text(_require(record, "employee_name", sheet)),
                "month": _period_text(_require(record, "month", sheet), month=True),
                "salary_amount": _require_amount(record, "salary_amount", sheet),
            }
        )
    return parsed


class IngestService:
    """Overwrite the ``cities`` and ``salaries`` tables from two workbooks."""

    def load_workbooks(
        self,
        store: ContributionStore,
        *,
        cities: WorkbookSource,
        salaries: WorkbookSource,
    ) -> IngestSummary:
        with log_context.scoped(step="ingest"):
            # Parse both before touching the store so a bad file changes nothing.
            with timeit("Workbook parsing", logger=LOGGER) as timer:
                city_rows = parse_cities(cities)
                salary_rows = parse_salaries(salaries)
                timer.add(len(city_rows) + len(salary_rows))

            store.replace_all(CITIES, city_rows)
            store.replace_all(SALARIES, salary_rows)

            summary = IngestSummary(cities_count=len(city_rows), salaries_count=len(salary_rows))
            LOGGER.info(summary.message)
            return summary
