"""API routers."""

from adoption_api.routers.cases import router as cases_router

__all__ = ["cases_router"]
