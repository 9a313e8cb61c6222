from __future__ import annotations

from pydantic import BaseModel, Field

from fieldpath.schemas.common import Point


class ObstacleCreate(BaseModel):
    name: str = Field("obstacle", min_length=1, max_length=100)
    position: Point
    radius: float = Field(..., gt=0, description="Physical obstacle radius (m)")


class ObstacleMove(BaseModel):
    position: Point


class ObstacleResize(BaseModel):
    radius: float = Field(..., gt=0)


class ObstacleOut(BaseModel):
    id: str
    name: str
    position: Point
    radius: float
    clearance_radius: float
