from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException

from fieldpath.deps import get_world
from fieldpath.domain.errors import DegeneratePath, InvalidParameter
from fieldpath.schemas.converters import path_out, tick_out
from fieldpath.schemas.follow import FollowTickOut, FollowTickRequest
from fieldpath.schemas.path import GeneratePathRequest, OptimizeRequest, OptimizeResponse, PathOut
from fieldpath.services.world_service import WorldService

router = APIRouter()


@router.get("/path", response_model=PathOut)
def get_path(world: WorldService = Depends(get_world)):
    snap = world.snapshot()
    if snap.path is None:
        raise HTTPException(status_code=404, detail="no path; call /path/generate or /path/recompute")
    return path_out(snap.path, snap.report)


@router.post("/path/generate", response_model=PathOut)
def generate_path(payload: GeneratePathRequest, world: WorldService = Depends(get_world)):
    """Seed a straight path from the robot to the target. Not optimized."""
    try:
        path = world.generate_path(payload.segment_count)
    except DegeneratePath as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    return path_out(path)


@router.post("/path/optimize", response_model=OptimizeResponse)
def optimize_path(payload: OptimizeRequest, world: WorldService = Depends(get_world)):
    overrides = payload.params.model_dump(exclude_none=True)
    params = replace(world.optimizer.params, **overrides)
    waypoints = [p.as_tuple() for p in payload.waypoints] if payload.waypoints else None
    try:
        path, converged = world.optimize(waypoints, params)
    except (InvalidParameter, DegeneratePath) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return OptimizeResponse(path=path_out(path, world.report), converged=converged)


@router.post("/path/recompute", response_model=PathOut)
def recompute_path(world: WorldService = Depends(get_world)):
    """Re-seed and re-optimize with the configured parameters."""
    try:
        result = world.recompute()
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    return path_out(result.path, result.report)


@router.post("/follow/tick", response_model=FollowTickOut)
def follow_tick(payload: FollowTickRequest, world: WorldService = Depends(get_world)):
    """Advance the follower by ``dt``; ``cannot_follow`` is a status, not an error."""
    return tick_out(world.follow_tick(payload.dt))
