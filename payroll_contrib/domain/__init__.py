"""Domain types and the pure contribution calculation."""

from .contributions import (
    CityRule,
    ContributionResult,
    SalaryRecord,
    average_salaries,
    compute,
    round_money,
)
from .errors import (
    ComputationError,
    ContributionError,
    IngestError,
    NoCityData,
    NoSalaryData,
    UnknownTableError,
)

__all__ = [
    "CityRule",
    "ComputationError",
    "ContributionError",
    "ContributionResult",
    "IngestError",
    "NoCityData",
    "NoSalaryData",
    "SalaryRecord",
    "UnknownTableError",
    "average_salaries",
    "compute",
    "round_money",
]
