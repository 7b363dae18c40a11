"""Service layer entrypoints for domain logic."""

from .calculation_service import CalculationService, CalculationSummary
from .export_service import ExportService
from .ingest_service import IngestService, IngestSummary
from .results_service import ResultPage, ResultQuery, ResultsService, ResultStats

__all__ = [
    "CalculationService",
    "CalculationSummary",
    "ExportService",
    "IngestService",
    "IngestSummary",
    "ResultPage",
    "ResultQuery",
    "ResultStats",
    "ResultsService",
]
