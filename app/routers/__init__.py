"""API routers."""
from app.routers.api_health_router import router as api_health_router
from app.routers.companies_router import router as companies_router

__all__ = [
    "api_health_router",
    "companies_router",
]
