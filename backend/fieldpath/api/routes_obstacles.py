from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from fieldpath.deps import get_world
from fieldpath.domain.errors import InvalidObstacle, UnknownObstacle
from fieldpath.schemas.converters import obstacle_out
from fieldpath.schemas.obstacle import ObstacleCreate, ObstacleMove, ObstacleOut, ObstacleResize
from fieldpath.services.world_service import WorldService

router = APIRouter()


@router.get("/obstacles", response_model=List[ObstacleOut])
def list_obstacles(world: WorldService = Depends(get_world)):
    return [obstacle_out(ob) for ob in world.list_obstacles()]


@router.post("/obstacles", response_model=ObstacleOut, status_code=201)
def add_obstacle(payload: ObstacleCreate, world: WorldService = Depends(get_world)):
    try:
        ob = world.add_obstacle(payload.name, payload.position.as_tuple(), payload.radius)
    except InvalidObstacle as e:
        raise HTTPException(status_code=400, detail=str(e))
    return obstacle_out(ob)


@router.get("/obstacles/{obstacle_id}", response_model=ObstacleOut)
def get_obstacle(obstacle_id: str, world: WorldService = Depends(get_world)):
    try:
        return obstacle_out(world.get_obstacle(obstacle_id))
    except UnknownObstacle:
        raise HTTPException(status_code=404, detail="obstacle not found")


@router.patch("/obstacles/{obstacle_id}/position", response_model=ObstacleOut)
def move_obstacle(obstacle_id: str, payload: ObstacleMove, world: WorldService = Depends(get_world)):
    try:
        ob = world.move_obstacle(obstacle_id, payload.position.as_tuple())
    except UnknownObstacle:
        raise HTTPException(status_code=404, detail="obstacle not found")
    return obstacle_out(ob)


@router.patch("/obstacles/{obstacle_id}/radius", response_model=ObstacleOut)
def resize_obstacle(obstacle_id: str, payload: ObstacleResize, world: WorldService = Depends(get_world)):
    try:
        ob = world.resize_obstacle(obstacle_id, payload.radius)
    except UnknownObstacle:
        raise HTTPException(status_code=404, detail="obstacle not found")
    except InvalidObstacle as e:
        raise HTTPException(status_code=400, detail=str(e))
    return obstacle_out(ob)


@router.delete("/obstacles/{obstacle_id}")
def delete_obstacle(obstacle_id: str, world: WorldService = Depends(get_world)):
    try:
        ob = world.delete_obstacle(obstacle_id)
    except UnknownObstacle:
        raise HTTPException(status_code=404, detail="obstacle not found")
    return {"ok": True, "deleted": ob.id}
