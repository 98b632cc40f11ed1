"""
In-memory store of live driver and passenger positions.

Entries are overwritten on every location_update (no history) and removed when
the owning connection closes.
"""

from typing import Dict, List, Optional

from models.location_model import DEFAULT_DRIVER_STATUS, DriverLocation, PassengerLocation


class LocationStore:
    """Two independent maps: driver positions and passenger positions."""

    def __init__(self):
        self._drivers: Dict[int, DriverLocation] = {}
        self._passengers: Dict[int, PassengerLocation] = {}

    # -------------------------------------------------------------------------
    # Drivers
    # -------------------------------------------------------------------------

    def update_driver(
        self,
        driver_id: int,
        lat: float,
        lng: float,
        display_name: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> DriverLocation:
        location = DriverLocation(
            driver_id=driver_id,
            lat=lat,
            lng=lng,
            display_name=display_name,
            vehicle_id=vehicle_id,
            status=status or DEFAULT_DRIVER_STATUS,
        )
        self._drivers[driver_id] = location
        return location

    def remove_driver(self, driver_id: int) -> bool:
        """Returns True if an entry was removed. Removing a missing entry is a no-op."""
        return self._drivers.pop(driver_id, None) is not None

    def get_driver(self, driver_id: int) -> Optional[DriverLocation]:
        return self._drivers.get(driver_id)

    def snapshot(self) -> List[DriverLocation]:
        """Point-in-time copy of all driver positions, in insertion order."""
        return list(self._drivers.values())

    # -------------------------------------------------------------------------
    # Passengers
    # -------------------------------------------------------------------------

    def update_passenger(
        self, passenger_id: int, lat: float, lng: float, is_active_trip: bool = False
    ) -> PassengerLocation:
        location = PassengerLocation(
            passenger_id=passenger_id,
            lat=lat,
            lng=lng,
            is_active_trip=bool(is_active_trip),
        )
        self._passengers[passenger_id] = location
        return location

    def remove_passenger(self, passenger_id: int) -> bool:
        return self._passengers.pop(passenger_id, None) is not None

    def get_passenger(self, passenger_id: int) -> Optional[PassengerLocation]:
        return self._passengers.get(passenger_id)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @property
    def driver_count(self) -> int:
        return len(self._drivers)

    @property
    def passenger_count(self) -> int:
        return len(self._passengers)
