"""Route accepting the city and salary workbooks."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from payroll_contrib.core.log import get_logger
from payroll_contrib.domain.errors import IngestError
from payroll_contrib.repositories.store import ContributionStore
from payroll_contrib.schemas import MessageResponse, UploadResponse
from payroll_contrib.services import IngestService
from payroll_contrib.web.dependencies import get_store

router = APIRouter(prefix="/api", tags=["upload"])
LOGGER = get_logger(__name__)


def get_ingest_service() -> IngestService:
    return IngestService()


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=MessageResponse(success=False, message=message).model_dump(),
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": MessageResponse}},
)
def upload(
    cities: UploadFile | None = File(default=None),
    salaries: UploadFile | None = File(default=None),
    store: ContributionStore = Depends(get_store),
    service: IngestService = Depends(get_ingest_service),
):
    """Overwrite the ``cities`` and ``salaries`` tables from two ``.xlsx`` files."""

    if cities is None or salaries is None:
        return _bad_request("Both a cities and a salaries workbook are required.")

    cities_data = cities.file.read()
    salaries_data = salaries.file.read()
    LOGGER.info(
        "Received upload cities=%s (%d bytes) salaries=%s (%d bytes)",
        cities.filename,
        len(cities_data),
        salaries.filename,
        len(salaries_data),
    )

    try:
        summary = service.load_workbooks(store, cities=cities_data, salaries=salaries_data)
    except IngestError as exc:
        LOGGER.warning("Upload rejected: %s", exc)
        return _bad_request(str(exc))

    return UploadResponse(
        success=True,
        message=summary.message,
        cities_count=summary.cities_count,
        salaries_count=summary.salaries_count,
    )
