from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from fieldpath.domain.errors import DegeneratePath, InvalidParameter
from fieldpath.domain.models import (
    FieldGrid,
    FollowerState,
    FollowStatus,
    FollowTick,
    Obstacle,
    OptimizationReport,
    OptimizationResult,
    Path,
)
from fieldpath.fields.shapes import get_shape
from fieldpath.services.composite_field import CompositeField
from fieldpath.services.field_sampler import sample_grid
from fieldpath.services.obstacle_registry import ObstacleRegistry
from fieldpath.services.path_optimizer import OptimizationRun, OptimizerParams, PathOptimizer
from fieldpath.services.path_seeder import seed_path
from fieldpath.services.spline_follower import SplineFollower
from fieldpath.utils.vec import Vec2, ZERO, as_vec

logger = logging.getLogger("fieldpath.world")


@dataclass(frozen=True)
class WorldSnapshot:
    obstacles: Tuple[Obstacle, ...]
    start: Vec2
    target: Vec2
    target_speed: float
    segment_count: int
    shape: str
    path: Optional[Path]
    report: Optional[OptimizationReport]
    follower: Optional[FollowerState]
    recompute_pending: bool = False


class WorldService:
    """Owns the planning state and applies user intents to it.

    Holds the obstacle registry, robot start, target, target speed, the
    current path and its follower. The path and follower are replaced
    together under the lock, so a tick never sees a half-built path.
    With ``auto_replan`` every obstacle, start or target edit re-seeds and
    re-optimizes before the call returns.

    The follower always runs with reflected endpoints, so its curve starts
    on ``start`` and the first tick leaves from where the robot is drawn.
    """

    def __init__(
        self,
        *,
        start: Vec2 = (0.0, 0.0),
        target: Vec2 = (1.0, 1.0),
        target_speed: float = 1.0,
        robot_radius: float = 0.0,
        clearance_buffer: float = 0.0,
        shape: str = "cosine",
        segment_count: int = 20,
        optimizer_params: Optional[OptimizerParams] = None,
        auto_replan: bool = True,
        field_bounds: Tuple[float, float, float, float] = (0.0, 0.0, 16.46, 8.23),
        grid_resolution: Tuple[float, float] = (2.0, 2.0),
    ):
        if not math.isfinite(target_speed) or target_speed <= 0:
            raise InvalidParameter(f"target speed must be > 0, got {target_speed}")
        self._lock = threading.RLock()
        self.registry = ObstacleRegistry(robot_radius=robot_radius, buffer_radius=clearance_buffer)
        self.field = CompositeField(self.registry, get_shape(shape))
        self.optimizer = PathOptimizer(optimizer_params or OptimizerParams())
        self.start: Vec2 = as_vec(start)
        self.target: Vec2 = as_vec(target)
        self.target_speed = float(target_speed)
        self.segment_count = int(segment_count)
        self.auto_replan = auto_replan
        self.field_bounds = field_bounds
        self.grid_resolution = grid_resolution

        self.path: Optional[Path] = None
        self.report: Optional[OptimizationReport] = None
        self.follower: Optional[SplineFollower] = None
        self._revision = 0
        self._run: Optional[OptimizationRun] = None

    @classmethod
    def from_settings(cls, s) -> "WorldService":
        return cls(
            start=s.start,
            target=s.target,
            target_speed=s.target_speed,
            robot_radius=s.robot_radius,
            clearance_buffer=s.clearance_buffer,
            shape=s.field_shape,
            segment_count=s.segment_count,
            optimizer_params=OptimizerParams.from_settings(s),
            auto_replan=s.auto_replan,
            field_bounds=(0.0, 0.0, s.field_length, s.field_width),
            grid_resolution=(s.grid_x_resolution, s.grid_y_resolution),
        )

    # ── Obstacles ─────────────────────────────────────────────

    def add_obstacle(self, name: str, position: Vec2, radius: float) -> Obstacle:
        with self._lock:
            ob = self.registry.add(name, position, radius)
            self._world_changed(f"obstacle {ob.id} added")
            return ob

    def move_obstacle(self, obstacle_id: str, position: Vec2) -> Obstacle:
        with self._lock:
            ob = self.registry.move(obstacle_id, position)
            self._world_changed(f"obstacle {ob.id} moved")
            return ob

    def resize_obstacle(self, obstacle_id: str, radius: float) -> Obstacle:
        with self._lock:
            ob = self.registry.resize(obstacle_id, radius)
            self._world_changed(f"obstacle {ob.id} resized")
            return ob

    def delete_obstacle(self, obstacle_id: str) -> Obstacle:
        with self._lock:
            ob = self.registry.delete(obstacle_id)
            self._world_changed(f"obstacle {ob.id} deleted")
            return ob

    def get_obstacle(self, obstacle_id: str) -> Obstacle:
        with self._lock:
            return self.registry.get(obstacle_id)

    def list_obstacles(self) -> Tuple[Obstacle, ...]:
        with self._lock:
            return tuple(self.registry)

    # ── Robot / target ────────────────────────────────────────

    def set_start(self, position: Vec2) -> None:
        with self._lock:
            self.start = as_vec(position)
            self.path = None
            self.follower = None
            self._world_changed("start moved")

    def set_target(self, position: Vec2) -> None:
        with self._lock:
            self.start = self.robot_position()
            self.target = as_vec(position)
            self._world_changed("target moved")

    def set_target_speed(self, speed: float) -> None:
        with self._lock:
            if not math.isfinite(speed) or speed <= 0:
                raise InvalidParameter(f"target speed must be > 0, got {speed}")
            self.target_speed = float(speed)
            if self.follower is not None:
                self.follower.set_speed(speed)

    def robot_position(self) -> Vec2:
        """Where the robot is now: on the followed path once it has moved, else the start."""
        with self._lock:
            if self.follower is not None and self.follower.progress > 0:
                return self.follower.position
            return self.start

    # ── Path control ──────────────────────────────────────────

    def generate_path(self, segment_count: Optional[int] = None) -> Path:
        """Seed a straight path from the robot to the target and make it current."""
        with self._lock:
            count = self.segment_count if segment_count is None else segment_count
            points = seed_path(self.robot_position(), self.target, count)
            if len(points) < 4:
                raise DegeneratePath(len(points))
            self.segment_count = int(count)
            self._cancel_run()
            return self._install(Path(tuple(points)), None)

    def optimize(
        self,
        path: Optional[Path | Sequence[Vec2]] = None,
        params: Optional[OptimizerParams] = None,
    ) -> Tuple[Path, bool]:
        """Optimize ``path`` (default: the current path) and make the result current."""
        with self._lock:
            if path is None:
                path = self.path if self.path is not None else self.generate_path()
            waypoints = path.waypoints if isinstance(path, Path) else tuple(as_vec(p) for p in path)
            result = self._optimize_now(waypoints, params)
            return result.path, result.converged

    def recompute(self) -> OptimizationResult:
        """Re-seed from the robot's position and re-optimize with the configured parameters."""
        with self._lock:
            points = seed_path(self.robot_position(), self.target, self.segment_count)
            return self._optimize_now(tuple(points), None)

    def start_recompute(self, params: Optional[OptimizerParams] = None) -> OptimizationRun:
        """Begin a time-sliced recompute; any unfinished run is discarded."""
        with self._lock:
            self._cancel_run()
            points = seed_path(self.robot_position(), self.target, self.segment_count)
            self._run = self.optimizer.start(points, self.field, params)
            return self._run

    def advance_recompute(self, iterations: int) -> Optional[OptimizationResult]:
        """Advance the pending run; installs and returns its result once finished."""
        with self._lock:
            run = self._run
            if run is None:
                return None
            if not run.step(iterations):
                return None
            self._run = None
            result = run.result()
            self._install(result.path, result.report)
            return result

    @property
    def recompute_pending(self) -> bool:
        return self._run is not None

    def follow_tick(self, dt: float) -> FollowTick:
        with self._lock:
            if self.follower is None:
                n = len(self.path) if self.path is not None else 0
                reason = "no path" if self.path is None else str(DegeneratePath(n))
                return FollowTick(status=FollowStatus.CANNOT_FOLLOW, position=self.start, reason=reason)
            return self.follower.tick(dt)

    # ── Overlay ───────────────────────────────────────────────

    def sample_grid(
        self,
        bounds: Optional[Sequence[float]] = None,
        x_resolution: Optional[float] = None,
        y_resolution: Optional[float] = None,
    ) -> FieldGrid:
        with self._lock:
            return sample_grid(
                self.field,
                bounds or self.field_bounds,
                self.grid_resolution[0] if x_resolution is None else x_resolution,
                self.grid_resolution[1] if y_resolution is None else y_resolution,
            )

    def snapshot(self) -> WorldSnapshot:
        with self._lock:
            follower = None
            if self.follower is not None:
                follower = FollowerState(
                    progress=self.follower.progress,
                    speed=self.follower.speed,
                    position=self.follower.position,
                    heading=self.follower.heading,
                    complete=self.follower.complete,
                )
            return WorldSnapshot(
                obstacles=tuple(self.registry),
                start=self.start,
                target=self.target,
                target_speed=self.target_speed,
                segment_count=self.segment_count,
                shape=self.field.shape.name,
                path=self.path,
                report=self.report,
                follower=follower,
                recompute_pending=self.recompute_pending,
            )

    # ── internals ─────────────────────────────────────────────

    def _world_changed(self, why: str) -> None:
        self._cancel_run()
        if not self.auto_replan:
            logger.debug("World changed (%s); path invalidated, auto replan off", why)
            self.start = self.robot_position()
            self.path = None
            self.report = None
            self.follower = None
            return
        logger.info("World changed (%s); replanning", why)
        self.recompute()

    def _cancel_run(self) -> None:
        if self._run is not None:
            logger.debug("Discarding unfinished optimization after %d iterations", self._run.iterations)
            self._run = None

    def _optimize_now(self, waypoints: Tuple[Vec2, ...], params: Optional[OptimizerParams]) -> OptimizationResult:
        self._cancel_run()
        result = self.optimizer.optimize(waypoints, self.field, params)
        path = self._install(result.path, result.report)
        return replace(result, path=path)

    def _install(self, path: Path, report: Optional[OptimizationReport]) -> Path:
        self._revision += 1
        path = replace(path, revision=self._revision)
        follower = None
        if path.followable:
            follower = SplineFollower(path.waypoints, self.target_speed, extend_endpoints=True)
            if follower.heading == ZERO and self.follower is not None:
                follower.heading = self.follower.heading
        self.path = path
        self.report = report
        self.follower = follower
        return path
