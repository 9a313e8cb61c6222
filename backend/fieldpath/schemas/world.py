from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from fieldpath.schemas.common import Point
from fieldpath.schemas.follow import FollowerStateOut
from fieldpath.schemas.obstacle import ObstacleOut
from fieldpath.schemas.path import PathOut


class PositionUpdate(BaseModel):
    position: Point


class SpeedUpdate(BaseModel):
    speed: float = Field(..., gt=0, le=20, description="Target follower speed (m/s)")


class WorldOut(BaseModel):
    obstacles: List[ObstacleOut]
    start: Point
    target: Point
    target_speed: float
    segment_count: int
    shape: str
    path: Optional[PathOut] = None
    follower: Optional[FollowerStateOut] = None
    recompute_pending: bool = False


class WsMessage(BaseModel):
    kind: str  # world|tick|error
    data: dict
