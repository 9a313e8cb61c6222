from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from fieldpath.schemas.common import Point


class FollowTickRequest(BaseModel):
    dt: float = Field(..., ge=0, le=10, description="Elapsed time since the last tick (s)")


class FollowTickOut(BaseModel):
    status: Literal["moving", "complete", "cannot_follow"]
    progress: float
    position: Optional[Point] = None
    velocity: Point
    heading: Point
    distance: float
    reason: Optional[str] = None


class FollowerStateOut(BaseModel):
    progress: float
    speed: float
    position: Optional[Point] = None
    heading: Point
    complete: bool
