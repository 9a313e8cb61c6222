import math

import pytest

from fieldpath.domain.errors import InvalidObstacle
from fieldpath.domain.models import Obstacle
from fieldpath.fields.shapes import SHAPES, CosineShape, GaussianShape, get_shape
from fieldpath.services.obstacle_field import (
    obstacle_gradient,
    obstacle_height,
    obstacle_potential,
)

COSINE = CosineShape()
GAUSSIAN = GaussianShape()


def _obstacle(radius=1.0, center=(0.0, 0.0), robot=0.5, buffer=0.1):
    return Obstacle(id="obs_1", name="crate", center=center, radius=radius, robot_radius=robot, buffer_radius=buffer)


def test_clearance_radius_sums_obstacle_robot_and_buffer():
    ob = _obstacle(radius=1.0, robot=0.5, buffer=0.1)
    assert ob.clearance_radius == pytest.approx(1.6)


def test_shape_parameter_follows_resize():
    ob = _obstacle(radius=1.0)
    # the cosine half-period is R itself, not pi * R
    assert ob.shape_parameter == ob.clearance_radius
    bigger = ob.resized(2.0)
    assert bigger.id == ob.id
    assert bigger.shape_parameter == pytest.approx(bigger.clearance_radius)
    assert bigger.shape_parameter > ob.shape_parameter


@pytest.mark.parametrize("radius", [0.0, -1.0, float("nan")])
def test_non_positive_radius_rejected(radius):
    with pytest.raises(InvalidObstacle):
        _obstacle(radius=radius)


def test_negative_margins_cannot_make_clearance_non_positive():
    with pytest.raises(InvalidObstacle):
        _obstacle(radius=0.2, robot=-0.1, buffer=-0.2)


@pytest.mark.parametrize("shape", [COSINE, GAUSSIAN])
@pytest.mark.parametrize("distance", [1.6001, 2.0, 5.0, 100.0])
def test_field_vanishes_outside_support(shape, distance):
    ob = _obstacle()
    p = (distance / math.sqrt(2), distance / math.sqrt(2))
    height, gradient = obstacle_potential(ob, p, shape)
    assert height == 0.0
    assert gradient == (0.0, 0.0)


@pytest.mark.parametrize("shape", [COSINE, GAUSSIAN])
@pytest.mark.parametrize("radius", [0.05, 0.4, 1.0, 3.7])
def test_height_is_zero_on_the_clearance_boundary(shape, radius):
    ob = _obstacle(radius=radius)
    R = ob.clearance_radius
    assert obstacle_height(ob, (R, 0.0), shape) == 0.0
    # and continuous from inside
    assert obstacle_height(ob, (R * (1 - 1e-9), 0.0), shape) == pytest.approx(0.0, abs=1e-6)


def test_cosine_peaks_at_center_with_clearance_height():
    ob = _obstacle()
    assert obstacle_height(ob, ob.center, COSINE) == pytest.approx(ob.clearance_radius)


@pytest.mark.parametrize("shape", [COSINE, GAUSSIAN])
def test_height_decreases_away_from_center(shape):
    ob = _obstacle()
    heights = [obstacle_height(ob, (r, 0.0), shape) for r in (0.1, 0.5, 1.0, 1.5)]
    assert heights == sorted(heights, reverse=True)


@pytest.mark.parametrize("shape", [COSINE, GAUSSIAN])
@pytest.mark.parametrize("p", [(0.7, 0.3), (-0.2, 1.1), (1.0, -0.9)])
def test_gradient_matches_finite_difference(shape, p):
    ob = _obstacle(center=(0.1, -0.1))
    h = 1e-6
    dx = (obstacle_height(ob, (p[0] + h, p[1]), shape) - obstacle_height(ob, (p[0] - h, p[1]), shape)) / (2 * h)
    dy = (obstacle_height(ob, (p[0], p[1] + h), shape) - obstacle_height(ob, (p[0], p[1] - h), shape)) / (2 * h)
    gx, gy = obstacle_gradient(ob, p, shape)
    assert gx == pytest.approx(dx, abs=1e-5)
    assert gy == pytest.approx(dy, abs=1e-5)


def test_cosine_radial_slope_closed_form():
    ob = _obstacle()
    R = ob.clearance_radius
    r = 0.8
    gx, gy = obstacle_gradient(ob, (r, 0.0), COSINE)
    assert gx == pytest.approx(-math.pi / 2 * math.sin(math.pi * r / R))
    assert gy == 0.0


@pytest.mark.parametrize("shape", [COSINE, GAUSSIAN])
@pytest.mark.parametrize("offset", [0.0, 1e-7, 4e-5])
def test_gradient_at_center_is_finite(shape, offset):
    ob = _obstacle(center=(3.0, 2.0))
    height, (gx, gy) = obstacle_potential(ob, (3.0 + offset, 2.0), shape)
    assert math.isfinite(height)
    assert math.isfinite(gx) and math.isfinite(gy)
    assert math.hypot(gx, gy) <= math.pi / 2


def test_descent_direction_points_away_from_obstacle():
    ob = _obstacle()
    p = (0.5, 0.5)
    gx, gy = obstacle_gradient(ob, p, COSINE)
    # -grad . e_r > 0
    assert -(gx * p[0] + gy * p[1]) > 0


def test_shape_lookup():
    assert set(SHAPES) == {"cosine", "gaussian"}
    assert get_shape("gaussian") is SHAPES["gaussian"]
    with pytest.raises(ValueError):
        get_shape("sawtooth")
