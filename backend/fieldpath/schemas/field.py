from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class Bounds(BaseModel):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @model_validator(mode="after")
    def _non_empty(self) -> "Bounds":
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise ValueError("bounds must have max > min on both axes")
        return self


class FieldSampleRequest(BaseModel):
    bounds: Optional[Bounds] = None
    x_resolution: Optional[float] = Field(None, gt=0, le=50)
    y_resolution: Optional[float] = Field(None, gt=0, le=50)


class FieldGridOut(BaseModel):
    shape: str
    bounds: Bounds
    xs: List[float]
    ys: List[float]
    # heights[j][i] and gradients[j][i] belong to (xs[i], ys[j])
    heights: List[List[float]]
    gradients: List[List[List[float]]]
    max_height: float


class FieldShapeInfo(BaseModel):
    shape_id: str
    name: str
    description: str
    default: bool = False
    active: bool = False
