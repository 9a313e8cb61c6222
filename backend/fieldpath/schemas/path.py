from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from fieldpath.schemas.common import Point


class GeneratePathRequest(BaseModel):
    segment_count: Optional[int] = Field(None, ge=1, le=1000)


class OptimizerOverrides(BaseModel):
    descent_rate: Optional[float] = Field(None, gt=0)
    height_threshold: Optional[float] = Field(None, gt=0)
    max_iterations: Optional[int] = Field(None, ge=1, le=100_000)
    min_step: Optional[float] = Field(None, ge=0)
    min_spacing: Optional[float] = Field(None, ge=0)


class OptimizeRequest(BaseModel):
    # Optimize these waypoints instead of the current path
    waypoints: Optional[List[Point]] = Field(None, min_length=2)
    params: OptimizerOverrides = Field(default_factory=OptimizerOverrides)


class OptimizationReportOut(BaseModel):
    status: Literal["converged", "capped", "endpoint_blocked"]
    converged: bool
    iterations: int
    max_height: float
    clearance_violations: List[str] = Field(default_factory=list)
    endpoint_conflicts: List[str] = Field(default_factory=list)
    elapsed_ms: float = 0.0
    computed_at: Optional[dt.datetime] = None


class PathOut(BaseModel):
    revision: int
    waypoints: List[Point]
    length: float
    followable: bool
    fingerprint: str
    report: Optional[OptimizationReportOut] = None


class OptimizeResponse(BaseModel):
    path: PathOut
    converged: bool
