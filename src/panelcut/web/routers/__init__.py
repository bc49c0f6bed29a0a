"""API routers for the REST API."""

from panelcut.web.routers.optimization import router as optimization_router

__all__ = ["optimization_router"]
