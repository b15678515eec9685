"""Routes package for API endpoints."""

from .aircraft_routes import router as aircraft_router
from .company_routes import router as company_router
from .health_routes import router as health_router

__all__ = ["aircraft_router", "company_router", "health_router"]
