"""
Unit tests for the in-memory location store.
"""

from sockets.location_store import LocationStore


class TestDriverLocations:
    def test_update_inserts_with_default_status(self):
        store = LocationStore()
        location = store.update_driver(201, 12.0, 8.59, display_name="Ibrahim Kano")

        assert location.status == "Available"
        assert store.get_driver(201) == location
        assert store.driver_count == 1

    def test_update_overwrites_previous_position(self):
        store = LocationStore()
        store.update_driver(201, 12.0, 8.59)
        store.update_driver(201, 12.5, 8.7, vehicle_id="KL-2024-089", status="On Trip")

        snapshot = store.snapshot()
        assert len(snapshot) == 1
        assert (snapshot[0].lat, snapshot[0].lng) == (12.5, 8.7)
        assert snapshot[0].vehicle_id == "KL-2024-089"
        assert snapshot[0].status == "On Trip"

    def test_remove_missing_driver_is_noop(self):
        store = LocationStore()
        assert store.remove_driver(999) is False

        store.update_driver(201, 12.0, 8.59)
        assert store.remove_driver(201) is True
        assert store.remove_driver(201) is False
        assert store.snapshot() == []

    def test_snapshot_is_a_copy(self):
        store = LocationStore()
        store.update_driver(201, 12.0, 8.59)
        snapshot = store.snapshot()

        store.update_driver(202, 12.1, 8.6)

        assert len(snapshot) == 1
        assert len(store.snapshot()) == 2

    def test_wire_format(self):
        store = LocationStore()
        location = store.update_driver(
            201, 12.002, 8.592, display_name="Ibrahim Kano", vehicle_id="KL-2024-089"
        )

        assert location.to_dict() == {
            "driverId": 201,
            "lat": 12.002,
            "lng": 8.592,
            "name": "Ibrahim Kano",
            "kekeId": "KL-2024-089",
            "status": "Available",
        }


class TestPassengerLocations:
    def test_passengers_are_kept_apart_from_drivers(self):
        store = LocationStore()
        store.update_passenger(101, 12.0, 8.59, is_active_trip=True)

        assert store.snapshot() == []
        assert store.passenger_count == 1
        assert store.get_passenger(101).is_active_trip is True

    def test_active_trip_defaults_to_false(self):
        store = LocationStore()
        store.update_passenger(101, 12.0, 8.59)
        assert store.get_passenger(101).is_active_trip is False

    def test_remove(self):
        store = LocationStore()
        store.update_passenger(101, 12.0, 8.59)

        assert store.remove_passenger(101) is True
        assert store.get_passenger(101) is None
        assert store.remove_passenger(101) is False
