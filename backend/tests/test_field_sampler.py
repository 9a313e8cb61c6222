import pytest

from fieldpath.domain.errors import InvalidParameter
from fieldpath.services.composite_field import CompositeField
from fieldpath.services.field_sampler import sample_grid
from fieldpath.services.obstacle_registry import ObstacleRegistry


@pytest.fixture
def field():
    registry = ObstacleRegistry(robot_radius=0.5, buffer_radius=0.1)
    registry.add("crate", (2.0, 1.0), 0.8)
    return CompositeField(registry)


def test_grid_covers_bounds_edge_to_edge(field):
    grid = sample_grid(field, (0.0, 0.0, 4.0, 2.0), 1.0, 1.0)
    assert grid.xs == (0.0, 1.0, 2.0, 3.0, 4.0)
    assert grid.ys == (0.0, 1.0, 2.0)


def test_samples_match_field(field):
    grid = sample_grid(field, (0.0, 0.0, 4.0, 2.0), 2.0, 2.0)
    for j, y in enumerate(grid.ys):
        for i, x in enumerate(grid.xs):
            h, g = field.evaluate((x, y))
            assert grid.heights[j][i] == h
            assert grid.gradients[j][i] == g
    assert grid.max_height == pytest.approx(field.height((2.0, 1.0)))
    assert grid.shape == "cosine"


def test_tiny_resolution_still_samples_the_corners(field):
    grid = sample_grid(field, (0.0, 0.0, 4.0, 2.0), 1e-6, 1e-6)
    assert grid.xs == (0.0, 4.0)
    assert grid.ys == (0.0, 2.0)


def test_grid_is_a_snapshot():
    registry = ObstacleRegistry()
    registry.add("crate", (2.0, 1.0), 0.8)
    grid = sample_grid(CompositeField(registry), (0.0, 0.0, 4.0, 2.0), 1.0, 1.0)
    before = [list(row) for row in grid.heights]

    registry.add("barrel", (0.0, 0.0), 1.0)
    assert [list(row) for row in grid.heights] == before
    assert grid.heights[0][0] == 0.0


@pytest.mark.parametrize("bounds", [(0.0, 0.0, 0.0, 1.0), (1.0, 1.0, 0.5, 2.0), (0.0, 2.0, 1.0, 2.0)])
def test_empty_bounds_rejected(field, bounds):
    with pytest.raises(InvalidParameter):
        sample_grid(field, bounds, 1.0, 1.0)
