"""
Unit tests for SOS proximity filtering.
"""

import pytest

from sockets import alert_router
from sockets.alert_router import SOS_RADIUS_KM, should_deliver_sos, within_radius
from sockets.location_store import LocationStore
from utils.geo_utils import haversine_km

SENDER = (12.0, 8.59)
NEAR = (12.001, 8.591)
FAR = (12.1, 8.69)


@pytest.fixture
def store():
    return LocationStore()


class TestDrivers:
    def test_driver_in_range_receives(self, store):
        store.update_driver(201, *NEAR)
        assert should_deliver_sos(*SENDER, 201, "driver", store) is True

    def test_driver_out_of_range_is_skipped(self, store):
        store.update_driver(201, *FAR)
        assert should_deliver_sos(*SENDER, 201, "driver", store) is False

    def test_driver_without_location_receives(self, store):
        assert should_deliver_sos(*SENDER, 201, "driver", store) is True

    def test_missing_sender_coordinates_reach_far_driver(self, store):
        store.update_driver(201, *FAR)
        assert should_deliver_sos(None, None, 201, "driver", store) is True

    def test_invalid_sender_coordinates_treated_as_missing(self, store):
        store.update_driver(201, *FAR)
        assert should_deliver_sos(123.0, 8.59, 201, "driver", store) is True


class TestPassengers:
    def test_passenger_without_active_trip_is_skipped(self, store):
        store.update_passenger(101, *NEAR, is_active_trip=False)
        assert should_deliver_sos(*SENDER, 101, "passenger", store) is False

    def test_passenger_on_active_trip_in_range_receives(self, store):
        store.update_passenger(101, *NEAR, is_active_trip=True)
        assert should_deliver_sos(*SENDER, 101, "passenger", store) is True

    def test_passenger_on_active_trip_out_of_range_is_skipped(self, store):
        store.update_passenger(101, *FAR, is_active_trip=True)
        assert should_deliver_sos(*SENDER, 101, "passenger", store) is False

    def test_passenger_without_location_is_skipped(self, store):
        assert should_deliver_sos(*SENDER, 101, "passenger", store) is False

    def test_missing_sender_coordinates_still_require_active_trip(self, store):
        store.update_passenger(101, *FAR, is_active_trip=False)
        store.update_passenger(102, *FAR, is_active_trip=True)

        assert should_deliver_sos(None, None, 101, "passenger", store) is False
        assert should_deliver_sos(None, None, 102, "passenger", store) is True


class TestOtherRecipients:
    def test_admin_always_receives(self, store):
        assert should_deliver_sos(*SENDER, 1, "admin", store) is True

    def test_unauthenticated_socket_receives(self, store):
        assert should_deliver_sos(*SENDER, None, None, store) is True


class TestRadius:
    def test_radius_is_five_km(self):
        assert SOS_RADIUS_KM == 5.0

    def test_boundary_is_inclusive(self, monkeypatch):
        monkeypatch.setattr(alert_router, "haversine_km", lambda *args: 5.0)
        assert within_radius(*SENDER, *NEAR) is True

    def test_just_past_boundary_is_excluded(self, monkeypatch):
        monkeypatch.setattr(alert_router, "haversine_km", lambda *args: 5.0001)
        assert within_radius(*SENDER, *NEAR) is False

    def test_boundary_uses_real_distance(self):
        distance = haversine_km(*SENDER, *NEAR)

        assert within_radius(*SENDER, *NEAR, radius_km=distance) is True
        assert within_radius(*SENDER, *NEAR, radius_km=distance - 1e-9) is False

    def test_points_either_side_of_five_km(self, store):
        """0.0449 degrees north is about 4.993 km, 0.0451 about 5.015 km"""
        store.update_driver(201, SENDER[0] + 0.0449, SENDER[1])
        store.update_driver(202, SENDER[0] + 0.0451, SENDER[1])

        assert should_deliver_sos(*SENDER, 201, "driver", store) is True
        assert should_deliver_sos(*SENDER, 202, "driver", store) is False
