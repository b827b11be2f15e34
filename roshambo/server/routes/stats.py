"""
Stats Routes
"""

from fastapi import APIRouter

from ..models import StatsResponse
from ..orchestrator import orchestrator
from ..services import compute_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats() -> StatsResponse:
    """Totals over finished games, overall and per enabled opponent."""
    return StatsResponse(**compute_stats(orchestrator.store, orchestrator.registry))
