"""Persistence adapters over the SQLAlchemy session."""

from .results_repository import ResultsRepository
from .store import CITIES, RESULTS, SALARIES, ContributionStore, SqlAlchemyContributionStore

__all__ = [
    "CITIES",
    "RESULTS",
    "SALARIES",
    "ContributionStore",
    "ResultsRepository",
    "SqlAlchemyContributionStore",
]
