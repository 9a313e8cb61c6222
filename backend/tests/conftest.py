"""Test fixtures: a fresh in-memory world per test + FastAPI TestClient."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fieldpath.deps import get_world
from fieldpath.main import app
from fieldpath.services.world_service import WorldService


def make_world(**overrides) -> WorldService:
    """Straight 10 m run along the x axis, nothing in the way yet."""
    kwargs = dict(
        start=(0.0, 0.0),
        target=(10.0, 0.0),
        target_speed=1.0,
        robot_radius=0.5,
        clearance_buffer=0.1,
        segment_count=10,
        auto_replan=True,
    )
    kwargs.update(overrides)
    return WorldService(**kwargs)


@pytest.fixture
def world() -> WorldService:
    w = make_world()
    w.recompute()
    return w


@pytest.fixture
def client(world: WorldService):
    app.dependency_overrides[get_world] = lambda: world
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_world, None)
