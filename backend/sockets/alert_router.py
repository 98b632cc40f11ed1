"""
Proximity filter for SOS delivery.

Decides, per connected recipient, whether an SOS alert should be delivered,
based on the recipient's role, last known location and trip state.
"""

from typing import Optional

from models.user_model import ROLE_DRIVER, ROLE_PASSENGER
from sockets.location_store import LocationStore
from utils.geo_utils import haversine_km, is_valid_coordinate

# Inclusive delivery radius around the sender
SOS_RADIUS_KM = 5.0

# Missing sender or recipient coordinates never suppress an emergency
FAIL_OPEN_ON_MISSING_LOCATION = True

# Sockets without an identity are treated as operator consoles
DELIVER_TO_UNAUTHENTICATED = True


def within_radius(
    origin_lat: float,
    origin_lng: float,
    lat: float,
    lng: float,
    radius_km: float = SOS_RADIUS_KM,
) -> bool:
    return haversine_km(origin_lat, origin_lng, lat, lng) <= radius_km


def should_deliver_sos(
    sender_lat: Optional[float],
    sender_lng: Optional[float],
    recipient_id: Optional[int],
    recipient_role: Optional[str],
    store: LocationStore,
) -> bool:
    """
    Delivery decision for one recipient.

    Args:
        sender_lat, sender_lng: SOS origin, or None when the client sent none
        recipient_id, recipient_role: identity bound to the recipient socket,
            None for unauthenticated sockets
        store: live location store

    Returns:
        True if the recipient should receive the sos_alert
    """
    if recipient_id is None:
        return DELIVER_TO_UNAUTHENTICATED

    has_origin = is_valid_coordinate(sender_lat, sender_lng)

    if recipient_role == ROLE_DRIVER:
        driver = store.get_driver(recipient_id)
        if driver is None or not has_origin:
            return FAIL_OPEN_ON_MISSING_LOCATION
        return within_radius(sender_lat, sender_lng, driver.lat, driver.lng)

    if recipient_role == ROLE_PASSENGER:
        passenger = store.get_passenger(recipient_id)
        # Passengers only hear about emergencies while riding
        if passenger is None or not passenger.is_active_trip:
            return False
        if not has_origin:
            return FAIL_OPEN_ON_MISSING_LOCATION
        return within_radius(sender_lat, sender_lng, passenger.lat, passenger.lng)

    # admin / operator consoles
    return True
