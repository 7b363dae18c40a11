"""Routes listing, summarising and exporting calculation results."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from payroll_contrib.schemas import (
    ContributionResultOut,
    ResultListResponse,
    StatsPayload,
    StatsResponse,
)
from payroll_contrib.services import ExportService, ResultQuery, ResultsService
from payroll_contrib.services.export_service import XLSX_CONTENT_TYPE
from payroll_contrib.web.dependencies import get_db_session
from payroll_contrib.web.utils.query_params import (
    clean_search_term,
    normalize_page_size,
    normalize_sort_order,
    parse_positive_int,
)

router = APIRouter(prefix="/api", tags=["results"])


def get_results_service(session: Session = Depends(get_db_session)) -> ResultsService:
    return ResultsService(session)


def get_export_service() -> ExportService:
    return ExportService()


def get_result_query(
    employee_name: str | None = Query(default=None),
    city: str | None = Query(default=None),
    sort_by: str | None = Query(default=None),
    sort_order: str | None = Query(default=None),
    page: str | None = Query(default=None),
    page_size: str | None = Query(default=None),
) -> ResultQuery:
    """Lenient parsing: malformed values fall back to defaults instead of 422s."""

    return ResultQuery(
        employee_name=clean_search_term(employee_name),
        city=clean_search_term(city),
        sort_by=sort_by or "employee_name",
        sort_order=normalize_sort_order(sort_order),
        page=parse_positive_int(page, default=1),
        page_size=normalize_page_size(page_size),
    )


@router.get("/results", response_model=ResultListResponse)
def list_results(
    query: ResultQuery = Depends(get_result_query),
    service: ResultsService = Depends(get_results_service),
) -> ResultListResponse:
    page = service.list_results(query)
    return ResultListResponse(
        data=[ContributionResultOut.model_validate(row) for row in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
    )


@router.get("/results/export")
def export_results(
    query: ResultQuery = Depends(get_result_query),
    service: ResultsService = Depends(get_results_service),
    exporter: ExportService = Depends(get_export_service),
) -> Response:
    """Download the requested result page as an Excel workbook."""

    page = service.list_results(query)
    content = exporter.results_workbook(page.items)
    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{exporter.filename()}"'},
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(service: ResultsService = Depends(get_results_service)) -> StatsResponse:
    stats = service.get_stats()
    if stats is None:
        return StatsResponse(stats=None)
    return StatsResponse(stats=StatsPayload.model_validate(stats))
