"""API routes initialization."""

from app.api.routes.history import router as history_router
from app.api.routes.forms import router as forms_router

__all__ = ["history_router", "forms_router"]
