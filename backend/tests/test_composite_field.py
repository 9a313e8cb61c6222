import pytest

from fieldpath.domain.models import Obstacle
from fieldpath.fields.shapes import GaussianShape
from fieldpath.services.composite_field import CompositeField
from fieldpath.services.obstacle_field import obstacle_potential
from fieldpath.services.obstacle_registry import ObstacleRegistry


def _ob(oid, center, radius=1.0):
    return Obstacle(id=oid, name=oid, center=center, radius=radius, robot_radius=0.5, buffer_radius=0.1)


def test_superposition_at_midpoint():
    a = _ob("a", (0.0, 0.0))
    b = _ob("b", (2.0, 0.0), radius=0.8)
    field = CompositeField([a, b])
    mid = (1.0, 0.0)

    ha, ga = obstacle_potential(a, mid, field.shape)
    hb, gb = obstacle_potential(b, mid, field.shape)
    height, gradient = field.evaluate(mid)

    assert ha > 0 and hb > 0
    assert height == pytest.approx(ha + hb)
    assert gradient[0] == pytest.approx(ga[0] + gb[0])
    assert gradient[1] == pytest.approx(ga[1] + gb[1])


def test_symmetric_pair_gradients_cancel():
    field = CompositeField([_ob("a", (0.0, 0.0)), _ob("b", (2.0, 0.0))])
    gx, gy = field.gradient((1.0, 0.0))
    assert gx == pytest.approx(0.0, abs=1e-12)
    assert gy == pytest.approx(0.0, abs=1e-12)


def test_superposition_holds_for_alternate_shape():
    obs = [_ob("a", (0.0, 0.0)), _ob("b", (1.0, 1.0)), _ob("c", (-0.5, 0.8), radius=0.3)]
    field = CompositeField(obs, GaussianShape())
    p = (0.3, 0.4)
    expected = sum(obstacle_potential(ob, p, field.shape)[0] for ob in obs)
    assert field.height(p) == pytest.approx(expected)


def test_empty_field_is_flat():
    field = CompositeField([])
    assert field.evaluate((4.0, 2.0)) == (0.0, (0.0, 0.0))


def test_live_view_tracks_registry_edits():
    registry = ObstacleRegistry(robot_radius=0.5, buffer_radius=0.1)
    field = CompositeField(registry)
    p = (1.0, 1.0)
    assert field.height(p) == 0.0

    ob = registry.add("crate", (1.0, 1.2), 0.5)
    assert field.height(p) > 0.0

    registry.move(ob.id, (8.0, 8.0))
    assert field.height(p) == 0.0


def test_snapshot_ignores_later_edits():
    registry = ObstacleRegistry()
    registry.add("crate", (0.0, 0.0), 1.0)
    frozen = CompositeField(registry).snapshot()
    before = frozen.height((0.5, 0.0))

    registry.add("barrel", (0.5, 0.0), 1.0)
    assert frozen.height((0.5, 0.0)) == before
    assert len(frozen.obstacles) == 1


def test_clearance_violations_lists_containing_disks():
    a = _ob("a", (0.0, 0.0))
    b = _ob("b", (5.0, 0.0))
    field = CompositeField([a, b])
    assert [ob.id for ob in field.clearance_violations((0.5, 0.0))] == ["a"]
    assert field.clearance_violations((2.5, 0.0)) == []
    # exactly on the boundary is not a violation
    assert field.clearance_violations((1.6, 0.0)) == []


def test_height_and_gradient_agree_with_evaluate():
    field = CompositeField([_ob("a", (0.0, 0.0)), _ob("b", (1.2, 0.4), radius=0.7)])
    for p in [(0.3, 0.2), (1.0, 0.0), (5.0, 5.0)]:
        height, (gx, gy) = field.evaluate(p)
        assert field.height(p) == pytest.approx(height)
        assert field.gradient(p) == pytest.approx((gx, gy))
