from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fieldpath.domain.errors import InvalidParameter
from fieldpath.domain.models import (
    MIN_SPLINE_POINTS,
    OptimizationReport,
    OptimizationResult,
    OptimizationStatus,
    Path,
)
from fieldpath.services.composite_field import CompositeField
from fieldpath.services.obstacle_field import radial
from fieldpath.utils.time import elapsed_ms, utc_now
from fieldpath.utils.vec import Vec2, ZERO, dist, left_normal, sub, unit

logger = logging.getLogger("fieldpath.optimizer")


@dataclass(frozen=True)
class OptimizerParams:
    descent_rate: float = 0.1
    height_threshold: float = 0.01
    max_iterations: int = 1000
    min_step: float = 0.0001
    clearance_tolerance: float = 1e-9
    min_spacing: float = 0.0

    @classmethod
    def from_settings(cls, s) -> "OptimizerParams":
        return cls(
            descent_rate=s.descent_rate,
            height_threshold=s.height_threshold,
            max_iterations=s.max_iterations,
            min_step=s.min_step,
            min_spacing=s.min_spacing,
        )

    def validate(self) -> None:
        if not self.descent_rate > 0:
            raise InvalidParameter("descent_rate must be > 0")
        if not self.height_threshold > 0:
            raise InvalidParameter("height_threshold must be > 0")
        if self.max_iterations < 1:
            raise InvalidParameter("max_iterations must be >= 1")
        if self.min_step < 0 or self.clearance_tolerance < 0 or self.min_spacing < 0:
            raise InvalidParameter("min_step, clearance_tolerance and min_spacing must be >= 0")


def prune_clumped(points: Sequence[Vec2], min_spacing: float) -> List[Vec2]:
    """Drop interior waypoints closer than ``min_spacing`` to the last kept one.

    Endpoints are always kept and the result never shrinks below the four
    points a spline needs (or below the input length, if that is smaller).
    """
    points = list(points)
    if min_spacing <= 0 or len(points) <= MIN_SPLINE_POINTS:
        return points
    kept = [points[0]]
    remaining = len(points)
    for p in points[1:-1]:
        if dist(p, kept[-1]) < min_spacing and remaining > MIN_SPLINE_POINTS:
            remaining -= 1
            continue
        kept.append(p)
    kept.append(points[-1])
    return kept


class OptimizationRun:
    """One in-flight optimization, advanced in slices with ``step()``.

    The obstacle set is frozen when the run starts. Each iteration builds a
    new waypoint tuple from the previous one, so the result is the same
    whatever slice sizes are used.
    """

    def __init__(
        self,
        seed: Sequence[Vec2],
        field: CompositeField,
        params: OptimizerParams,
        revision: int = 0,
    ):
        params.validate()
        if len(seed) < 2:
            raise InvalidParameter("a path needs at least a start and a target")
        self.params = params
        self.revision = revision
        self.field = field.snapshot()
        self.iterations = 0
        self._points: Tuple[Vec2, ...] = tuple((float(x), float(y)) for x, y in seed)
        self._started = time.perf_counter()

        chord = unit(sub(self._points[-1], self._points[0]))
        self._escape: Vec2 = left_normal(chord) if chord != ZERO else (1.0, 0.0)

        conflicts = []
        for endpoint in (self._points[0], self._points[-1]):
            for ob in self.field.clearance_violations(endpoint, params.clearance_tolerance):
                if ob.id not in conflicts:
                    conflicts.append(ob.id)
        self.endpoint_conflicts: Tuple[str, ...] = tuple(conflicts)
        if conflicts:
            logger.warning("Start/target inside clearance disk of %s; path cannot be fully safe", conflicts)

        self._max_height = 0.0
        self._violations: Tuple[str, ...] = ()
        self._done = self._check_converged()

    @property
    def done(self) -> bool:
        return self._done

    @property
    def waypoints(self) -> Tuple[Vec2, ...]:
        return self._points

    def step(self, iterations: int = 1) -> bool:
        """Run up to ``iterations`` more iterations; return True once finished."""
        for _ in range(max(0, iterations)):
            if self._done:
                break
            self._points = self._iterate(self._points)
            self.iterations += 1
            if self._check_converged() or self.iterations >= self.params.max_iterations:
                self._done = True
        return self._done

    def result(self) -> OptimizationResult:
        if not self._done:
            raise RuntimeError("optimization run is still in progress")
        if self.endpoint_conflicts:
            status = OptimizationStatus.ENDPOINT_BLOCKED
        elif self._converged:
            status = OptimizationStatus.CONVERGED
        else:
            status = OptimizationStatus.CAPPED
        points = prune_clumped(self._points, self.params.min_spacing)
        report = OptimizationReport(
            status=status,
            iterations=self.iterations,
            max_height=self._max_height,
            clearance_violations=self._violations,
            endpoint_conflicts=self.endpoint_conflicts,
            elapsed_ms=elapsed_ms(self._started),
            computed_at=utc_now(),
        )
        return OptimizationResult(path=Path(tuple(points), revision=self.revision), report=report)

    # ----------------------------------------------------------------

    def _iterate(self, points: Tuple[Vec2, ...]) -> Tuple[Vec2, ...]:
        moved = [points[0]]
        for p in points[1:-1]:
            moved.append(self._project(self._descend(p)))
        moved.append(points[-1])
        return tuple(moved)

    def _descend(self, p: Vec2) -> Vec2:
        _, (gx, gy) = self.field.evaluate(p)
        dx = -self.params.descent_rate * gx
        dy = -self.params.descent_rate * gy
        floor = self.params.min_step
        if (dx or dy) and abs(dx) < floor and abs(dy) < floor:
            # keep creeping on a vanishing gradient
            dx = math.copysign(floor, dx) if dx else 0.0
            dy = math.copysign(floor, dy) if dy else 0.0
        return (p[0] + dx, p[1] + dy)

    def _project(self, p: Vec2) -> Vec2:
        for ob in self.field.obstacles:
            r, e_r = radial(ob, p)
            R = ob.clearance_radius
            if r < R:
                if e_r is ZERO:
                    e_r = self._escape
                p = (ob.center[0] + e_r[0] * R, ob.center[1] + e_r[1] * R)
        return p

    def _check_converged(self) -> bool:
        tol = self.params.clearance_tolerance
        max_height = 0.0
        violations: List[str] = []
        for p in self._points[1:-1]:
            max_height = max(max_height, self.field.height(p))
            for ob in self.field.clearance_violations(p, tol):
                if ob.id not in violations:
                    violations.append(ob.id)
        self._max_height = max_height
        self._violations = tuple(violations)
        self._converged = max_height < self.params.height_threshold and not violations
        return self._converged


class PathOptimizer:
    """Relaxes a seed path away from obstacles by gradient descent plus clearance projection."""

    def __init__(self, params: Optional[OptimizerParams] = None):
        self.params = params or OptimizerParams()

    def start(
        self,
        seed: Sequence[Vec2],
        field: CompositeField,
        params: Optional[OptimizerParams] = None,
        revision: int = 0,
    ) -> OptimizationRun:
        return OptimizationRun(seed, field, params or self.params, revision=revision)

    def optimize(
        self,
        seed: Sequence[Vec2],
        field: CompositeField,
        params: Optional[OptimizerParams] = None,
        revision: int = 0,
    ) -> OptimizationResult:
        run = self.start(seed, field, params, revision=revision)
        run.step(run.params.max_iterations)
        result = run.result()
        logger.info(
            "Path optimized in %d iterations: %s (max height %.4f, %d waypoints)",
            result.report.iterations,
            result.report.status.value,
            result.report.max_height,
            len(result.path),
        )
        if not result.converged:
            logger.warning(
                "Optimized path is best-effort (%s); clearance violations: %s",
                result.report.status.value,
                list(result.report.clearance_violations) or "none",
            )
        return result
