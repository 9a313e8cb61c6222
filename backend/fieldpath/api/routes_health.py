from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldpath import __version__
from fieldpath.config import settings
from fieldpath.deps import get_world
from fieldpath.services.world_service import WorldService

router = APIRouter()


@router.get("/health")
def health(world: WorldService = Depends(get_world)):
    """Health check endpoint with planner status."""
    snap = world.snapshot()
    return {
        "status": "ok",
        "environment": settings.environment,
        "field_shape": snap.shape,
        "obstacles": len(snap.obstacles),
        "path_status": snap.report.status.value if snap.report else None,
        "recompute_pending": snap.recompute_pending,
        "version": __version__,
    }
