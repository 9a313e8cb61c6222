"""Catmull-Rom interpolation over optimized waypoints, followed at constant speed."""
from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from fieldpath.domain.errors import DegeneratePath, InvalidParameter
from fieldpath.domain.models import MIN_SPLINE_POINTS, FollowStatus, FollowTick
from fieldpath.utils.vec import Vec2, ZERO, dist, unit

logger = logging.getLogger("fieldpath.follower")

TANGENT_EPS = 1e-9
BISECT_STEPS = 48
CHORD_RTOL = 1e-6
# minimum forward-scan steps per spline segment
SCAN_PER_SEGMENT = 8


def catmull_rom(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    t2 = t * t
    t3 = t2 * t
    return (
        0.5 * (2 * p1[0] + (-p0[0] + p2[0]) * t
               + (2 * p0[0] - 5 * p1[0] + 4 * p2[0] - p3[0]) * t2
               + (-p0[0] + 3 * p1[0] - 3 * p2[0] + p3[0]) * t3),
        0.5 * (2 * p1[1] + (-p0[1] + p2[1]) * t
               + (2 * p0[1] - 5 * p1[1] + 4 * p2[1] - p3[1]) * t2
               + (-p0[1] + 3 * p1[1] - 3 * p2[1] + p3[1]) * t3),
    )


def catmull_rom_tangent(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    t2 = t * t
    return (
        0.5 * ((-p0[0] + p2[0])
               + 2 * (2 * p0[0] - 5 * p1[0] + 4 * p2[0] - p3[0]) * t
               + 3 * (-p0[0] + 3 * p1[0] - 3 * p2[0] + p3[0]) * t2),
        0.5 * ((-p0[1] + p2[1])
               + 2 * (2 * p0[1] - 5 * p1[1] + 4 * p2[1] - p3[1]) * t
               + 3 * (-p0[1] + 3 * p1[1] - 3 * p2[1] + p3[1]) * t2),
    )


class SplineFollower:
    """Advances a point along a uniform Catmull-Rom spline.

    With ``N`` control points there are ``M = N - 3`` cubic segments and the
    curve runs from ``P1`` to ``P[N-2]``. ``extend_endpoints`` adds reflected
    phantom points at both ends so the curve starts on the first waypoint
    and ends on the last one.

    Progress ``t~`` is global over all segments, in ``[0, 1]``. Each tick
    picks the progress increment whose chord matches ``speed * dt``, so the
    point moves at the target speed whatever the control-point spacing.
    """

    def __init__(self, waypoints: Sequence[Vec2], speed: float = 1.0, extend_endpoints: bool = False):
        if len(waypoints) < MIN_SPLINE_POINTS:
            raise DegeneratePath(len(waypoints))
        points: List[Vec2] = [(float(x), float(y)) for x, y in waypoints]
        if extend_endpoints:
            first, second = points[0], points[1]
            last, before = points[-1], points[-2]
            points = (
                [(2 * first[0] - second[0], 2 * first[1] - second[1])]
                + points
                + [(2 * last[0] - before[0], 2 * last[1] - before[1])]
            )
        self.control_points: Tuple[Vec2, ...] = tuple(points)
        self.segment_count = len(points) - 3
        self.set_speed(speed)

        self.progress = 0.0
        self.heading: Vec2 = ZERO
        self.position: Vec2 = self.evaluate(0.0)
        self.heading = self._heading_at(0.0)

    # -- curve evaluation -------------------------------------------

    def _segment(self, progress: float) -> Tuple[int, float]:
        M = self.segment_count
        k = int(math.floor(progress * M))
        k = min(max(k, 0), M - 1)
        return k, progress * M - k

    def evaluate(self, progress: float) -> Vec2:
        k, t = self._segment(progress)
        P = self.control_points
        return catmull_rom(P[k], P[k + 1], P[k + 2], P[k + 3], t)

    def tangent(self, progress: float) -> Vec2:
        """Derivative with respect to the local segment parameter."""
        k, t = self._segment(progress)
        P = self.control_points
        return catmull_rom_tangent(P[k], P[k + 1], P[k + 2], P[k + 3], t)

    def _heading_at(self, progress: float) -> Vec2:
        direction = unit(self.tangent(progress), TANGENT_EPS)
        if direction == ZERO:
            return self.heading
        return direction

    # -- stepping ---------------------------------------------------

    @property
    def complete(self) -> bool:
        return self.progress >= 1.0

    def set_speed(self, speed: float) -> None:
        if not math.isfinite(speed) or speed <= 0:
            raise InvalidParameter(f"target speed must be > 0, got {speed}")
        self.speed = float(speed)

    def _chord(self, progress: float, delta: float) -> float:
        return dist(self.evaluate(min(1.0, progress + delta)), self.position)

    def _match_increment(self, distance: float) -> float:
        """Smallest progress increment whose chord from the current point is ``distance``.

        Scans forward in short steps until the chord first reaches
        ``distance`` and bisects inside that step, so a hairpin is walked
        around instead of cut across. Returns the remaining progress when
        the end of the path comes first.
        """
        p = self.progress
        room = 1.0 - p
        step = 1.0 / (SCAN_PER_SEGMENT * self.segment_count)
        tangent_speed = math.hypot(*self.tangent(p)) * self.segment_count
        if tangent_speed > TANGENT_EPS:
            step = min(step, distance / tangent_speed)
        step = max(step, 1e-12)

        lo, hi = 0.0, min(step, room)
        while self._chord(p, hi) < distance:
            if hi >= room:
                return room
            lo, hi = hi, min(hi + step, room)

        for _ in range(BISECT_STEPS):
            mid = 0.5 * (lo + hi)
            chord = self._chord(p, mid)
            if abs(chord - distance) <= CHORD_RTOL * distance:
                return mid
            if chord < distance:
                lo = mid
            else:
                hi = mid
        return 0.5 * (lo + hi)

    def tick(self, dt: float) -> FollowTick:
        if not math.isfinite(dt) or dt < 0:
            raise InvalidParameter(f"tick dt must be >= 0, got {dt}")
        if self.complete:
            return self._report(FollowStatus.COMPLETE, ZERO, 0.0)
        if dt == 0:
            return self._report(FollowStatus.MOVING, ZERO, 0.0)

        increment = self._match_increment(self.speed * dt)
        new_progress = min(1.0, self.progress + increment)
        target = self.evaluate(new_progress)
        velocity = ((target[0] - self.position[0]) / dt, (target[1] - self.position[1]) / dt)

        travelled = dist(target, self.position)
        self.position = (self.position[0] + velocity[0] * dt, self.position[1] + velocity[1] * dt)
        self.progress = new_progress
        self.heading = self._heading_at(new_progress)

        status = FollowStatus.COMPLETE if self.complete else FollowStatus.MOVING
        logger.debug("follow t=%.4f pos=(%.3f, %.3f) v=(%.3f, %.3f)", self.progress, *self.position, *velocity)
        return self._report(status, velocity, travelled)

    def _report(self, status: FollowStatus, velocity: Vec2, distance: float) -> FollowTick:
        return FollowTick(
            status=status,
            progress=self.progress,
            position=self.position,
            velocity=velocity,
            heading=self.heading,
            distance=distance,
        )
