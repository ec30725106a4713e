"""API routes module."""

from src.api.routes.accommodation import router as accommodation_router
from src.api.routes.health import router as health_router
from src.api.routes.transportation import router as transportation_router

__all__ = [
    "accommodation_router",
    "health_router",
    "transportation_router",
]
