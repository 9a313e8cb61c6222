from __future__ import annotations

from typing import Optional

from fieldpath.domain.models import (
    FieldGrid,
    FollowerState,
    FollowTick,
    Obstacle,
    OptimizationReport,
    Path,
)
from fieldpath.schemas.common import Point
from fieldpath.schemas.field import Bounds, FieldGridOut
from fieldpath.schemas.follow import FollowerStateOut, FollowTickOut
from fieldpath.schemas.obstacle import ObstacleOut
from fieldpath.schemas.path import OptimizationReportOut, PathOut
from fieldpath.schemas.world import WorldOut
from fieldpath.services.world_service import WorldSnapshot


def obstacle_out(ob: Obstacle) -> ObstacleOut:
    return ObstacleOut(
        id=ob.id,
        name=ob.name,
        position=Point.of(ob.center),
        radius=ob.radius,
        clearance_radius=ob.clearance_radius,
    )


def report_out(report: Optional[OptimizationReport]) -> Optional[OptimizationReportOut]:
    if report is None:
        return None
    return OptimizationReportOut(
        status=report.status.value,
        converged=report.converged,
        iterations=report.iterations,
        max_height=report.max_height,
        clearance_violations=list(report.clearance_violations),
        endpoint_conflicts=list(report.endpoint_conflicts),
        elapsed_ms=report.elapsed_ms,
        computed_at=report.computed_at,
    )


def path_out(path: Path, report: Optional[OptimizationReport] = None) -> PathOut:
    return PathOut(
        revision=path.revision,
        waypoints=[Point.of(p) for p in path.waypoints],
        length=path.length(),
        followable=path.followable,
        fingerprint=path.fingerprint,
        report=report_out(report),
    )


def tick_out(tick: FollowTick) -> FollowTickOut:
    return FollowTickOut(
        status=tick.status.value,
        progress=tick.progress,
        position=Point.of(tick.position) if tick.position is not None else None,
        velocity=Point.of(tick.velocity),
        heading=Point.of(tick.heading),
        distance=tick.distance,
        reason=tick.reason,
    )


def follower_out(state: Optional[FollowerState]) -> Optional[FollowerStateOut]:
    if state is None:
        return None
    return FollowerStateOut(
        progress=state.progress,
        speed=state.speed,
        position=Point.of(state.position) if state.position is not None else None,
        heading=Point.of(state.heading),
        complete=state.complete,
    )


def grid_out(grid: FieldGrid) -> FieldGridOut:
    min_x, min_y, max_x, max_y = grid.bounds
    return FieldGridOut(
        shape=grid.shape,
        bounds=Bounds(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y),
        xs=list(grid.xs),
        ys=list(grid.ys),
        heights=[list(row) for row in grid.heights],
        gradients=[[[g[0], g[1]] for g in row] for row in grid.gradients],
        max_height=grid.max_height,
    )


def world_out(snap: WorldSnapshot) -> WorldOut:
    return WorldOut(
        obstacles=[obstacle_out(ob) for ob in snap.obstacles],
        start=Point.of(snap.start),
        target=Point.of(snap.target),
        target_speed=snap.target_speed,
        segment_count=snap.segment_count,
        shape=snap.shape,
        path=path_out(snap.path, snap.report) if snap.path is not None else None,
        follower=follower_out(snap.follower),
        recompute_pending=snap.recompute_pending,
    )
