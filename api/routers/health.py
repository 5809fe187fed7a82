"""
Health check router.

Part of RIT-4: Dependency providers

Liveness endpoint for monitoring and load balancers.
"""

from fastapi import APIRouter

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint for rituals-api.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}
