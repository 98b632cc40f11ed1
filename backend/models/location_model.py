"""
Live location entries held in memory by the WebSocket hub
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_DRIVER_STATUS = "Available"


@dataclass(frozen=True)
class DriverLocation:
    """Last known position of a connected driver"""

    driver_id: int
    lat: float
    lng: float
    display_name: Optional[str] = None
    vehicle_id: Optional[str] = None
    status: str = DEFAULT_DRIVER_STATUS

    def to_dict(self) -> dict:
        """Wire format used in nearby_kekes snapshots"""
        return {
            "driverId": self.driver_id,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.display_name,
            "kekeId": self.vehicle_id,
            "status": self.status,
        }


@dataclass(frozen=True)
class PassengerLocation:
    """Last known position of a connected passenger. Never broadcast."""

    passenger_id: int
    lat: float
    lng: float
    is_active_trip: bool = False
