"""
Router package for the Rituals API.

Part of RIT-4: Dependency providers

This package contains all API routers organized by domain:
- health: Liveness endpoint
- schedule: Daily schedule (scheduled vs completed)
- rituals: Ritual CRUD, publishing, forking, occurrences, completion
- completions: Completion history
- units: Physical quantity catalog
"""

from api.routers.completions import router as completions_router
from api.routers.health import router as health_router
from api.routers.rituals import router as rituals_router
from api.routers.schedule import router as schedule_router
from api.routers.units import router as units_router

__all__ = [
    "completions_router",
    "health_router",
    "rituals_router",
    "schedule_router",
    "units_router",
]
