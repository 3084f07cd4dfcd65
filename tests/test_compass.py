import pytest

from features.forecast.models.compass import COMPASS_POINTS, CompassPoint, direction_for

@pytest.mark.parametrize(
    "angle, expected",
    [
        (0, "N"),
        (22.5, "NNE"),
        (45, "NE"),
        (90, "E"),
        (180, "S"),
        (200, "SSW"),
        (270, "W"),
        (349, "N"),
        (360, "N"),
        (-22.5, "NNW"),
        (-90, "W"),
        (725, "N")
    ]
)
def test_direction_for_known_bearings(angle, expected):
    assert direction_for(angle) == expected

@pytest.mark.parametrize("angle", [0, 10, 45, 100, 200.7, 333, -30])
@pytest.mark.parametrize("turns", [-2, -1, 1, 3])
def test_direction_for_is_periodic(angle, turns):
    assert direction_for(angle + 360 * turns) == direction_for(angle)

@pytest.mark.parametrize("angle", [None, "", "north", float("nan"), float("inf"), object()])
def test_direction_for_defaults_to_north(angle):
    assert direction_for(angle) == "N"

def test_direction_for_accepts_numeric_strings():
    assert direction_for("135") == "SE"

def test_compass_has_sixteen_clockwise_points():
    assert len(COMPASS_POINTS) == 16
    assert COMPASS_POINTS[0] is CompassPoint.N
    assert [direction_for(i * 22.5) for i in range(16)] == [p.value for p in COMPASS_POINTS]
