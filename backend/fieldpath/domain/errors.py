from __future__ import annotations


class PlannerError(Exception):
    """Base class for recoverable planner errors.

    Every error here rejects a single request; the world state is left as
    it was before the call.
    """


class InvalidObstacle(PlannerError):
    """Obstacle radius (or derived clearance radius) is not positive."""


class UnknownObstacle(InvalidObstacle):
    def __init__(self, obstacle_id: str):
        super().__init__(f"unknown obstacle: {obstacle_id}")
        self.obstacle_id = obstacle_id


class DegeneratePath(PlannerError):
    """A Catmull-Rom spline needs at least four control points."""

    def __init__(self, point_count: int):
        super().__init__(f"path has {point_count} waypoint(s); at least 4 are required to follow it")
        self.point_count = point_count


class InvalidParameter(PlannerError):
    pass
