"""FastAPI routers for the contribution API."""

from .calculate import router as calculate_router
from .results import router as results_router
from .upload import router as upload_router

__all__ = ["calculate_router", "results_router", "upload_router"]
