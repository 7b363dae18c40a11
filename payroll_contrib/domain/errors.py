"""Exceptions raised by the calculation and ingestion layers."""
from __future__ import annotations


class ContributionError(Exception):
    """Base class for recoverable, user-facing failures."""


class ComputationError(ContributionError):
    """A calculation run could not start because its inputs are incomplete."""


class NoSalaryData(ComputationError):
    def __init__(self) -> None:
        super().__init__("No salary data available; upload salaries before calculating.")


class NoCityData(ComputationError):
    def __init__(self) -> None:
        super().__init__("No city data available; upload city rules before calculating.")


class IngestError(ContributionError):
    """An uploaded workbook is missing, unreadable or malformed."""

    def __init__(
        self,
        message: str,
        *,
        sheet: str | None = None,
        row: int | None = None,
        column: str | None = None,
    ) -> None:
        self.sheet = sheet
        self.row = row
        self.column = column
        location = []
        if sheet:
            location.append(sheet)
        if row is not None:
            location.append(f"row {row}")
        if column:
            location.append(f"column '{column}'")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class UnknownTableError(KeyError):
    """The store was asked for a table it does not manage."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(table)

    def __str__(self) -> str:
        return f"Unknown table: {self.table!r}"
