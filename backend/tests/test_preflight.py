import pytest

from fieldpath import preflight
from fieldpath.config import Settings


def test_preflight_prints_summary(capsys):
    preflight.main()
    out = capsys.readouterr().out
    assert "Preflight OK" in out
    assert "cosine" in out and "gaussian" in out


def test_default_settings_are_valid():
    s = Settings()
    s.validate_runtime()
    assert s.start == (s.start_x, s.start_y)
    assert s.segment_count >= 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"field_shape": "sawtooth"},
        {"robot_radius": -0.1},
        {"segment_count": 2},
        {"descent_rate": 0.0},
        {"target_speed": -1.0},
    ],
)
def test_invalid_settings_fail_validation(overrides):
    with pytest.raises(RuntimeError):
        Settings(**overrides).validate_runtime()


def test_cors_origins_list():
    s = Settings(cors_origins="http://a.test, http://b.test,")
    assert s.cors_origins_list == ["http://a.test", "http://b.test"]
