import pytest

from campusmatch.models import User
from campusmatch.utils.geo import haversine_km, is_unset_location

from conftest import GURGAON, MUMBAI, NEW_DELHI


def test_same_point_is_zero():
    assert haversine_km(0, 0, 0, 0) == 0
    assert haversine_km(*NEW_DELHI, *NEW_DELHI) == 0


def test_new_delhi_to_mumbai():
    distance = haversine_km(*NEW_DELHI, *MUMBAI)
    assert 1140 <= distance <= 1160
    assert distance == round(distance, 1)


def test_distance_is_symmetric():
    assert haversine_km(*NEW_DELHI, *GURGAON) == haversine_km(*GURGAON, *NEW_DELHI)


@pytest.mark.parametrize(
    "latitude, longitude, expected",
    [(0, 0, True), (0.0, 0.0, True), (0, 10.5, False), (-3.2, 0, False), (*NEW_DELHI, False)],
)
def test_unset_location_sentinel(latitude, longitude, expected):
    assert is_unset_location(latitude, longitude) is expected
    assert User(latitude=latitude, longitude=longitude).has_location is not expected


@pytest.mark.parametrize(
    "point, antipode",
    [((82.0, 1.0), (-82.0, -179.0)), ((45.0, 10.0), (-45.0, -170.0)), ((0.0, 90.0), (0.0, -90.0))],
)
def test_antipodal_points_are_half_the_circumference(point, antipode):
    assert haversine_km(*point, *antipode) == pytest.approx(20015.1, abs=0.1)
