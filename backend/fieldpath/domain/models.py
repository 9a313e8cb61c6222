from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from fieldpath.domain.errors import InvalidObstacle
from fieldpath.utils.hashing import fingerprint_points
from fieldpath.utils.vec import Vec2

MIN_SPLINE_POINTS = 4


@dataclass(frozen=True)
class Obstacle:
    """A circular obstacle and the clearance disk the robot must stay out of."""

    id: str
    name: str
    center: Vec2
    radius: float
    robot_radius: float = 0.0
    buffer_radius: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise InvalidObstacle(f"obstacle radius must be > 0, got {self.radius}")
        if self.clearance_radius <= 0:
            raise InvalidObstacle(f"clearance radius must be > 0, got {self.clearance_radius}")

    @property
    def clearance_radius(self) -> float:
        return self.radius + self.robot_radius + self.buffer_radius

    @property
    def shape_parameter(self) -> float:
        """Half-period ``b`` of the cosine field, equal to the clearance radius.

        This is ``R`` and not ``pi * R``: only with ``b = R`` does the
        raised cosine reach zero exactly at the clearance boundary.
        """
        return self.clearance_radius

    def moved_to(self, center: Vec2) -> "Obstacle":
        return replace(self, center=(float(center[0]), float(center[1])))

    def resized(self, radius: float) -> "Obstacle":
        return replace(self, radius=float(radius))


@dataclass(frozen=True)
class Path:
    """Immutable waypoint sequence. Replaced as a whole, never edited."""

    waypoints: Tuple[Vec2, ...]
    revision: int = 0

    @property
    def start(self) -> Vec2:
        return self.waypoints[0]

    @property
    def target(self) -> Vec2:
        return self.waypoints[-1]

    @property
    def followable(self) -> bool:
        return len(self.waypoints) >= MIN_SPLINE_POINTS

    @property
    def fingerprint(self) -> str:
        return fingerprint_points(self.waypoints)

    def length(self) -> float:
        total = 0.0
        for a, b in zip(self.waypoints, self.waypoints[1:]):
            total += math.hypot(b[0] - a[0], b[1] - a[1])
        return total

    def __len__(self) -> int:
        return len(self.waypoints)


class OptimizationStatus(str, Enum):
    CONVERGED = "converged"
    CAPPED = "capped"
    ENDPOINT_BLOCKED = "endpoint_blocked"


@dataclass(frozen=True)
class OptimizationReport:
    status: OptimizationStatus
    iterations: int
    max_height: float
    clearance_violations: Tuple[str, ...] = ()
    endpoint_conflicts: Tuple[str, ...] = ()
    elapsed_ms: float = 0.0
    computed_at: Optional[dt.datetime] = None

    @property
    def converged(self) -> bool:
        return self.status is OptimizationStatus.CONVERGED


@dataclass(frozen=True)
class OptimizationResult:
    path: Path
    report: OptimizationReport

    @property
    def converged(self) -> bool:
        return self.report.converged


class FollowStatus(str, Enum):
    MOVING = "moving"
    COMPLETE = "complete"
    CANNOT_FOLLOW = "cannot_follow"


@dataclass(frozen=True)
class FollowTick:
    status: FollowStatus
    progress: float = 0.0
    position: Optional[Vec2] = None
    velocity: Vec2 = (0.0, 0.0)
    heading: Vec2 = (0.0, 0.0)
    distance: float = 0.0
    reason: Optional[str] = None


@dataclass(frozen=True)
class FieldGrid:
    """Immutable overlay snapshot. ``heights[j][i]`` is the sample at ``(xs[i], ys[j])``."""

    bounds: Tuple[float, float, float, float]
    xs: Tuple[float, ...]
    ys: Tuple[float, ...]
    heights: Tuple[Tuple[float, ...], ...]
    gradients: Tuple[Tuple[Vec2, ...], ...]
    shape: str = "cosine"
    max_height: float = 0.0


@dataclass(frozen=True)
class FollowerState:
    progress: float
    speed: float
    position: Optional[Vec2]
    heading: Vec2
    complete: bool
