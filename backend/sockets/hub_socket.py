"""
Real-time location and alert hub for KekeLink.

This module provides:
- A connection registry mapping numeric user ids to live sockets and back
- Live driver/passenger location tracking
- Driver snapshot fan-out (nearby_kekes) to every open socket
- Safety alert broadcast (safety_alert) to every open socket
- Proximity-filtered SOS delivery (sos_alert)

All hub state lives on one ConnectionManager owned by the application
(app.state.manager). Mutations happen synchronously inside message and close
handlers; only socket sends await.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Request, WebSocket, status
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from config import settings
from models.events import (
    AnomalyAlertEvent,
    AuthenticatedEvent,
    AuthEvent,
    ErrorEvent,
    LocationUpdateEvent,
    NearbyKekesEvent,
    PingEvent,
    PongEvent,
    SafetyAlertEvent,
    SOSAlertEvent,
    SOSEvent,
    describe_validation_error,
    parse_inbound,
)
from models.user_model import ROLE_ADMIN, ROLE_DRIVER, ROLE_PASSENGER
from sockets.alert_router import should_deliver_sos
from sockets.location_store import LocationStore
from sockets.ws_auth import WebSocketAuthError, authenticate_event
from utils.geo_utils import is_valid_coordinate

logger = logging.getLogger(__name__)

router = APIRouter()

ANOMALY_CATEGORY = "Trip Anomaly"
ANOMALY_LOCATION = "Active Trip"


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(eq=False)
class ClientConnection:
    """A single WebSocket client connection with its (optional) identity."""

    websocket: WebSocket
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    user_id: Optional[int] = None
    role: Optional[str] = None
    connected_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    write_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    is_alive: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def label(self) -> str:
        if self.is_authenticated:
            return f"user {self.user_id} ({self.role})"
        return f"anonymous {self.connection_id[:8]}"

    def update_activity(self) -> None:
        self.last_activity = time.time()

    def is_open(self) -> bool:
        if not self.is_alive:
            return False
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )


# =============================================================================
# CONNECTION MANAGER
# =============================================================================


class ConnectionManager:
    """Owns the connection registry and location store; performs all fan-out."""

    def __init__(
        self,
        locations: Optional[LocationStore] = None,
        send_timeout: Optional[float] = None,
    ):
        self._connections: Dict[str, ClientConnection] = {}
        self._users: Dict[int, ClientConnection] = {}
        self.locations = locations or LocationStore()
        self.send_timeout = (
            send_timeout if send_timeout is not None else settings.WS_SEND_TIMEOUT_SECONDS
        )

    # -------------------------------------------------------------------------
    # Connection Registry
    # -------------------------------------------------------------------------

    async def connect(self, websocket: WebSocket) -> ClientConnection:
        """Accept a socket and track it as an unauthenticated connection."""
        await websocket.accept()
        connection = ClientConnection(websocket=websocket)
        self._connections[connection.connection_id] = connection
        logger.info(f"WebSocket connected: {connection.label}")
        return connection

    def register(
        self, connection: ClientConnection, user_id: int, role: str
    ) -> Tuple[Optional[ClientConnection], bool]:
        """
        Bind a connection to a user identity.

        A second auth on the same connection overwrites the binding. If another
        connection already holds the same user id it is displaced: it loses its
        identity and is dropped from the registry (the caller closes it).

        Returns:
            (displaced connection or None, whether a driver entry was removed)
        """
        driver_removed = False

        if connection.is_authenticated and (
            connection.user_id != user_id or connection.role != role
        ):
            if self._users.get(connection.user_id) is connection:
                del self._users[connection.user_id]
            driver_removed |= self._purge_locations(connection.user_id)

        displaced = self._users.get(user_id)
        if displaced is connection:
            displaced = None
        elif displaced is not None:
            if displaced.role != role:
                driver_removed |= self._purge_locations(user_id)
            displaced.user_id = None
            displaced.role = None
            self._connections.pop(displaced.connection_id, None)
            logger.info(f"User {user_id} signed in again, displacing {displaced.label}")

        connection.user_id = user_id
        connection.role = role
        self._users[user_id] = connection

        logger.info(f"WebSocket authenticated: {connection.label}")
        return displaced, driver_removed

    def unregister(self, connection: ClientConnection) -> bool:
        """
        Remove a connection and purge its user's location entries.
        Idempotent: an unknown connection is a no-op.

        Returns:
            True if a driver entry was removed (snapshot changed)
        """
        if self._connections.pop(connection.connection_id, None) is None:
            return False

        if connection.user_id is None:
            return False
        if self._users.get(connection.user_id) is not connection:
            return False

        del self._users[connection.user_id]
        return self._purge_locations(connection.user_id)

    def _purge_locations(self, user_id: int) -> bool:
        self.locations.remove_passenger(user_id)
        return self.locations.remove_driver(user_id)

    def lookup_user(self, user_id: int) -> Optional[ClientConnection]:
        """Live connection for a user, or None when the user is offline."""
        return self._users.get(user_id)

    def identify(self, connection: ClientConnection) -> Optional[Tuple[int, str]]:
        """Reverse lookup: (user_id, role) bound to a connection, if any."""
        if connection.connection_id not in self._connections:
            return None
        if not connection.is_authenticated:
            return None
        return connection.user_id, connection.role

    def connections(self) -> List[ClientConnection]:
        return list(self._connections.values())

    async def close_connection(
        self, connection: ClientConnection, reason: str = "Closed by server"
    ) -> None:
        was_open = connection.is_open()
        connection.is_alive = False
        if not was_open:
            return

        try:
            await connection.websocket.close(
                code=status.WS_1000_NORMAL_CLOSURE, reason=reason
            )
        except Exception as e:
            logger.debug(f"Close failed for {connection.label}: {type(e).__name__}: {e}")

    async def disconnect(
        self, connection: ClientConnection, reason: str = "Client disconnected"
    ) -> None:
        """Final cleanup for a socket. Safe to call more than once."""
        driver_removed = self.unregister(connection)
        await self.close_connection(connection, reason=reason)

        logger.info(f"WebSocket disconnected: {connection.label}, reason={reason}")

        if driver_removed:
            await self.broadcast_driver_snapshot()

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def send(self, connection: ClientConnection, message: dict) -> bool:
        """Send to one connection with timeout protection. Never raises."""
        if not connection.is_open():
            return False

        try:
            async with connection.write_lock:
                await asyncio.wait_for(
                    connection.websocket.send_json(message), timeout=self.send_timeout
                )
            connection.update_activity()
            logger.debug(f"Message sent to {connection.label}: {message.get('type')}")
            return True

        except asyncio.TimeoutError:
            logger.warning(f"Send timeout for {connection.label}, marking as stale")
            connection.is_alive = False
            return False

        except Exception as e:
            logger.warning(
                f"Error sending to {connection.label}: {type(e).__name__}: {str(e)}"
            )
            connection.is_alive = False
            return False

    async def _fan_out(self, targets: List[ClientConnection], message: dict) -> int:
        if not targets:
            return 0

        results = await asyncio.gather(
            *(self.send(connection, message) for connection in targets),
            return_exceptions=True,
        )
        success_count = sum(1 for r in results if r is True)

        logger.debug(
            f"Fan-out {message.get('type')}: {success_count}/{len(targets)} delivered"
        )
        return success_count

    async def broadcast(
        self, message: dict, exclude: Optional[ClientConnection] = None
    ) -> int:
        """Send to every open connection, authenticated or not."""
        targets = [c for c in self.connections() if c is not exclude and c.is_open()]
        return await self._fan_out(targets, message)

    def _driver_snapshot(self) -> dict:
        return NearbyKekesEvent(
            locations=[location.to_dict() for location in self.locations.snapshot()]
        ).to_wire()

    async def send_driver_snapshot(self, connection: ClientConnection) -> bool:
        """Bring a single (usually freshly authenticated) socket up to date."""
        return await self.send(connection, self._driver_snapshot())

    async def broadcast_driver_snapshot(self) -> int:
        """Push the full driver snapshot (nearby_kekes) to every open socket."""
        return await self.broadcast(self._driver_snapshot())

    async def broadcast_safety_alert(
        self,
        category: Optional[str],
        location: Optional[str],
        summary: Optional[str],
    ) -> int:
        message = SafetyAlertEvent(
            category=category, location=location, summary=summary
        ).to_wire()
        logger.info(f"Broadcasting safety alert: {category} at {location}")
        return await self.broadcast(message)

    async def route_sos(self, sender: ClientConnection, event: SOSEvent) -> int:
        """Deliver an SOS to every open socket that passes the proximity filter."""
        lat, lng = event.lat, event.lng
        if not is_valid_coordinate(lat, lng):
            if lat is not None or lng is not None:
                logger.warning(
                    f"SOS from {sender.label} has invalid coordinates "
                    f"({lat}, {lng}); delivering without distance filter"
                )
            lat, lng = None, None

        sender_name = event.user_name or f"User {sender.user_id}"
        alert = SOSAlertEvent(
            user_id=sender.user_id,
            user_name=sender_name,
            location=event.location,
            lat=lat,
            lng=lng,
            trip_data=event.trip_data,
        )

        logger.warning(
            f"[EMERGENCY] SOS from {sender_name} (ID: {sender.user_id}) at {alert.timestamp}"
        )

        recipients = [
            connection
            for connection in self.connections()
            if connection is not sender
            and connection.is_open()
            and should_deliver_sos(
                lat, lng, connection.user_id, connection.role, self.locations
            )
        ]

        delivered = await self._fan_out(recipients, alert.to_wire())
        logger.info(
            f"SOS from user {sender.user_id} delivered to {delivered} connection(s)"
        )
        return delivered

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict:
        counts = {ROLE_DRIVER: 0, ROLE_PASSENGER: 0, ROLE_ADMIN: 0, "unauthenticated": 0}
        for conn in self._connections.values():
            key = conn.role if conn.is_authenticated else "unauthenticated"
            counts[key] = counts.get(key, 0) + 1

        return {
            "active_connections": len(self._connections),
            "authenticated_users": len(self._users),
            "connections_by_role": counts,
            "live_drivers": self.locations.driver_count,
            "live_passengers": self.locations.passenger_count,
        }


# =============================================================================
# EVENT HANDLERS
# =============================================================================


def _error(message: str) -> dict:
    return ErrorEvent(message=message).to_wire()


async def handle_auth(
    manager: ConnectionManager, connection: ClientConnection, event: AuthEvent
) -> Optional[dict]:
    """Handle auth event - bind the connection to a user identity."""
    try:
        authenticate_event(event)
    except WebSocketAuthError as e:
        return _error(str(e))

    displaced, driver_removed = manager.register(connection, event.user_id, event.role)

    if displaced:
        await manager.close_connection(displaced, reason="Signed in from another connection")

    if driver_removed:
        await manager.broadcast_driver_snapshot()

    await manager.send(
        connection, AuthenticatedEvent(user_id=event.user_id, role=event.role).to_wire()
    )
    await manager.send_driver_snapshot(connection)
    return None


async def handle_location_update(
    manager: ConnectionManager, connection: ClientConnection, event: LocationUpdateEvent
) -> Optional[dict]:
    """Handle location_update - drivers trigger a snapshot broadcast, passengers don't."""
    if not connection.is_authenticated:
        logger.warning(f"Location update before auth from {connection.label}")
        return _error("Not authenticated")

    if connection.role == ROLE_DRIVER:
        manager.locations.update_driver(
            connection.user_id,
            event.lat,
            event.lng,
            display_name=event.name,
            vehicle_id=event.keke_id,
            status=event.status,
        )
        await manager.broadcast_driver_snapshot()

    elif connection.role == ROLE_PASSENGER:
        manager.locations.update_passenger(
            connection.user_id,
            event.lat,
            event.lng,
            is_active_trip=bool(event.is_active_trip),
        )

    else:
        logger.debug(f"Ignoring location update from {connection.label}")

    return None


async def handle_sos(
    manager: ConnectionManager, connection: ClientConnection, event: SOSEvent
) -> Optional[dict]:
    """Handle sos - proximity-filtered fan-out of an emergency alert."""
    if not connection.is_authenticated:
        logger.warning(f"Rejected SOS from unauthenticated {connection.label}")
        return _error("SOS requires an authenticated connection")

    await manager.route_sos(connection, event)
    return None


async def handle_anomaly_alert(
    manager: ConnectionManager, connection: ClientConnection, event: AnomalyAlertEvent
) -> Optional[dict]:
    """Handle anomaly_alert - broadcast to every socket as a safety_alert."""
    if not connection.is_authenticated:
        return _error("Not authenticated")

    logger.info(f"Anomaly detected for user {connection.user_id}: {event.reason}")

    await manager.broadcast_safety_alert(
        category=ANOMALY_CATEGORY,
        location=ANOMALY_LOCATION,
        summary=f"Driver {connection.user_id}: {event.reason} (Risk: {event.risk_level})",
    )
    return None


async def handle_ping(
    manager: ConnectionManager, connection: ClientConnection, event: PingEvent
) -> Optional[dict]:
    return PongEvent().to_wire()


EVENT_HANDLERS = {
    "auth": handle_auth,
    "location_update": handle_location_update,
    "sos": handle_sos,
    "anomaly_alert": handle_anomaly_alert,
    "ping": handle_ping,
}


async def dispatch_message(
    manager: ConnectionManager, connection: ClientConnection, raw: str
) -> None:
    """Validate one inbound frame and run its handler."""
    try:
        event = parse_inbound(raw)
    except ValidationError as e:
        detail = describe_validation_error(e)
        logger.warning(f"Dropped malformed message from {connection.label}: {detail}")
        await manager.send(connection, _error(f"Invalid message: {detail}"))
        return

    handler = EVENT_HANDLERS[event.type]
    response = await handler(manager, connection, event)
    if response:
        await manager.send(connection, response)


# =============================================================================
# WEBSOCKET ENDPOINT
# =============================================================================


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint for real-time communication."""
    manager: ConnectionManager = websocket.app.state.manager
    connection = await manager.connect(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info(f"WebSocket closed by client: {connection.label}")
                break

            connection.update_activity()

            raw = message.get("text")
            if raw is None and message.get("bytes") is not None:
                raw = message["bytes"].decode("utf-8", errors="replace")
            if raw is None:
                continue

            try:
                await dispatch_message(manager, connection, raw)
            except Exception as e:
                logger.error(
                    f"Message processing error for {connection.label}: "
                    f"{type(e).__name__}: {str(e)}",
                    exc_info=True,
                )

    except Exception as e:
        logger.error(
            f"WebSocket connection error for {connection.label}: {type(e).__name__}: {str(e)}"
        )

    finally:
        # Cleanup must finish even if this task is being cancelled
        await asyncio.shield(manager.disconnect(connection, reason="Connection ended"))


# =============================================================================
# MONITORING ENDPOINT
# =============================================================================


@router.get("/ws/stats")
async def get_websocket_stats(request: Request):
    """Get WebSocket statistics for monitoring."""
    manager: ConnectionManager = request.app.state.manager
    return {"success": True, "data": manager.get_stats()}
