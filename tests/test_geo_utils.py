"""
Unit tests for great-circle distance and coordinate checks.
"""

import math

import pytest

from utils.geo_utils import EARTH_RADIUS_KM, haversine_km, is_valid_coordinate


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(12.0, 8.59, 12.0, 8.59) == 0.0

    def test_symmetric(self):
        forward = haversine_km(12.0, 8.59, 12.1, 8.69)
        backward = haversine_km(12.1, 8.69, 12.0, 8.59)
        assert forward == pytest.approx(backward)

    def test_point_045_degrees_north_is_about_5km(self):
        """0.045 degrees of latitude is roughly the SOS radius"""
        distance = haversine_km(12.0, 8.59, 12.045, 8.59)
        assert distance == pytest.approx(5.0, rel=0.01)

    def test_short_hop_inside_town(self):
        distance = haversine_km(12.0, 8.59, 12.001, 8.591)
        assert 0.1 < distance < 0.2

    def test_quarter_of_the_globe(self):
        distance = haversine_km(0.0, 0.0, 0.0, 90.0)
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM / 2)

    def test_not_rounded(self):
        distance = haversine_km(12.0, 8.59, 12.0003, 8.59)
        assert distance != round(distance, 2)


class TestIsValidCoordinate:
    @pytest.mark.parametrize(
        "lat,lng",
        [(12.0, 8.59), (-90, -180), (90, 180), (0, 0)],
    )
    def test_valid(self, lat, lng):
        assert is_valid_coordinate(lat, lng) is True

    @pytest.mark.parametrize(
        "lat,lng",
        [
            (None, 8.59),
            (12.0, None),
            (None, None),
            (91.0, 8.59),
            (12.0, 180.5),
            (float("nan"), 8.59),
        ],
    )
    def test_invalid(self, lat, lng):
        assert is_valid_coordinate(lat, lng) is False
