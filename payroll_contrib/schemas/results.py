"""Response payloads for the calculation API."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer


class MessageResponse(BaseModel):
    success: bool
    message: str


class UploadResponse(MessageResponse):
    cities_count: int
    salaries_count: int


class CalculateResponse(MessageResponse):
    count: int


class ContributionResultOut(BaseModel):
    """A single stored result row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_name: str
    city_name: str
    year: str
    avg_salary: Decimal
    contribution_base: Decimal
    company_fee: Decimal

    @field_serializer("avg_salary", "contribution_base", "company_fee")
    def _serialize_money(self, value: Decimal) -> float:
        return float(value)


class ResultListResponse(BaseModel):
    success: bool = True
    data: list[ContributionResultOut]
    total: int
    page: int
    page_size: int
    total_pages: int


class CityStat(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    city: str
    count: int
    total_fee: Decimal

    @field_serializer("total_fee")
    def _serialize_fee(self, value: Decimal) -> float:
        return float(value)


class EmployeeStat(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    cities: int
    total_fee: Decimal

    @field_serializer("total_fee")
    def _serialize_fee(self, value: Decimal) -> float:
        return float(value)


class StatsPayload(BaseModel):
    """Aggregate figures shown above the result table."""

    model_config = ConfigDict(from_attributes=True)

    total_records: int
    unique_employees: int
    unique_cities: int
    total_company_fee: Decimal
    city_stats: list[CityStat]
    employee_stats: list[EmployeeStat]

    @field_serializer("total_company_fee")
    def _serialize_total(self, value: Decimal) -> float:
        return float(value)


class StatsResponse(BaseModel):
    success: bool = True
    stats: StatsPayload | None = None
