import pytest

from fieldpath.domain.errors import InvalidParameter
from fieldpath.services.path_seeder import seed_path


def test_even_colinear_seed():
    points = seed_path((0.0, 0.0), (10.0, 0.0), 4)
    assert points == [(0.0, 0.0), (2.5, 0.0), (5.0, 0.0), (7.5, 0.0), (10.0, 0.0)]


def test_endpoints_are_exact_inputs():
    start, target = (0.1, 0.7), (3.3, -2.9)
    points = seed_path(start, target, 7)
    assert len(points) == 8
    assert points[0] == start
    assert points[-1] == target


def test_diagonal_seed_is_colinear_and_evenly_spaced():
    points = seed_path((2.0, 2.0), (5.0, 5.0), 6)
    steps = [(b[0] - a[0], b[1] - a[1]) for a, b in zip(points, points[1:])]
    for dx, dy in steps:
        assert dx == pytest.approx(0.5)
        assert dy == pytest.approx(0.5)


def test_single_segment():
    assert seed_path((0.0, 0.0), (1.0, 1.0), 1) == [(0.0, 0.0), (1.0, 1.0)]


@pytest.mark.parametrize("segments", [0, -3, 2.5, True])
def test_invalid_segment_count(segments):
    with pytest.raises(InvalidParameter):
        seed_path((0.0, 0.0), (1.0, 0.0), segments)
