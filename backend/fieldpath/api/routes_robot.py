from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from fieldpath.deps import get_world
from fieldpath.domain.errors import PlannerError
from fieldpath.schemas.converters import world_out
from fieldpath.schemas.world import PositionUpdate, SpeedUpdate, WorldOut
from fieldpath.services.world_service import WorldService

router = APIRouter()


@router.get("/world", response_model=WorldOut)
def get_world_snapshot(world: WorldService = Depends(get_world)):
    """Everything the presentation layer draws in one frame."""
    return world_out(world.snapshot())


@router.put("/robot/start", response_model=WorldOut)
def set_start(payload: PositionUpdate, world: WorldService = Depends(get_world)):
    try:
        world.set_start(payload.position.as_tuple())
    except PlannerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return world_out(world.snapshot())


@router.put("/robot/target", response_model=WorldOut)
def set_target(payload: PositionUpdate, world: WorldService = Depends(get_world)):
    try:
        world.set_target(payload.position.as_tuple())
    except PlannerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return world_out(world.snapshot())


@router.put("/robot/speed", response_model=WorldOut)
def set_speed(payload: SpeedUpdate, world: WorldService = Depends(get_world)):
    try:
        world.set_target_speed(payload.speed)
    except PlannerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return world_out(world.snapshot())
