"""Route triggering a contribution calculation run."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from payroll_contrib.core.log import get_logger
from payroll_contrib.domain.errors import ComputationError
from payroll_contrib.repositories.store import ContributionStore
from payroll_contrib.schemas import CalculateResponse, MessageResponse
from payroll_contrib.services import CalculationService
from payroll_contrib.web.dependencies import get_store

router = APIRouter(prefix="/api", tags=["calculate"])
LOGGER = get_logger(__name__)


def get_calculation_service() -> CalculationService:
    return CalculationService()


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    responses={400: {"model": MessageResponse}},
)
def calculate(
    store: ContributionStore = Depends(get_store),
    service: CalculationService = Depends(get_calculation_service),
):
    """Recompute every employee/city result and replace the stored set."""

    try:
        summary = service.run(store)
    except ComputationError as exc:
        LOGGER.warning("Calculation rejected: %s", exc)
        return JSONResponse(
            status_code=400,
            content=MessageResponse(success=False, message=str(exc)).model_dump(),
        )
    return CalculateResponse(success=True, message=summary.message, count=summary.count)
