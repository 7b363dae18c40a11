"""Pydantic schemas exposed by the HTTP API."""

from .results import (
    CalculateResponse,
    CityStat,
    ContributionResultOut,
    EmployeeStat,
    MessageResponse,
    ResultListResponse,
    StatsPayload,
    StatsResponse,
    UploadResponse,
)

__all__ = [
    "CalculateResponse",
    "CityStat",
    "ContributionResultOut",
    "EmployeeStat",
    "MessageResponse",
    "ResultListResponse",
    "StatsPayload",
    "StatsResponse",
    "UploadResponse",
]
