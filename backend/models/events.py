"""
WebSocket Event Models
Defines structured event types for real-time communication

Inbound events form a closed union keyed by "type" and are validated at the
socket boundary before dispatch. Outbound events serialize with the camelCase
field names the web clients read.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

NOTIFIED_AUTHORITIES = ["KAROTA", "Police", "Emergency Response"]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# INBOUND
# =============================================================================


class InboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AuthEvent(InboundEvent):
    """Binds the connection to a user identity"""

    type: Literal["auth"]
    user_id: int = Field(..., alias="userId", gt=0)
    role: str = Field(..., min_length=1)
    token: Optional[str] = None


class LocationUpdateEvent(InboundEvent):
    """Position report from a driver or passenger"""

    type: Literal["location_update"]
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    # Driver-specific fields
    name: Optional[str] = None
    keke_id: Optional[str] = Field(None, alias="kekeId")
    status: Optional[Literal["Available", "On Trip", "Offline"]] = None

    # Passenger-specific fields
    is_active_trip: Optional[bool] = Field(False, alias="isActiveTrip")


class SOSEvent(InboundEvent):
    """Emergency raised by any authenticated user"""

    type: Literal["sos"]
    lat: Optional[float] = None
    lng: Optional[float] = None
    location: Optional[str] = None
    user_name: Optional[str] = Field(None, alias="userName")
    trip_data: Optional[Dict[str, Any]] = Field(None, alias="tripData")

    @field_validator("lat", "lng", "location", "user_name", "trip_data", mode="wrap")
    @classmethod
    def _drop_unreadable(cls, value, handler):
        # An emergency is never rejected over a malformed optional field
        try:
            return handler(value)
        except ValidationError:
            return None


class AnomalyAlertEvent(InboundEvent):
    """Trip anomaly reported by a driver's monitoring client"""

    type: Literal["anomaly_alert"]
    reason: str
    risk_level: str


class PingEvent(InboundEvent):
    type: Literal["ping"]


InboundMessage = Annotated[
    Union[AuthEvent, LocationUpdateEvent, SOSEvent, AnomalyAlertEvent, PingEvent],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_inbound(raw: str) -> InboundEvent:
    """
    Parse and validate a raw text frame

    Raises:
        ValidationError: unparseable JSON, missing/unknown type or bad fields
    """
    return _inbound_adapter.validate_json(raw)


def describe_validation_error(error: ValidationError) -> str:
    """Short human-readable summary of a validation failure"""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid message"


# =============================================================================
# OUTBOUND
# =============================================================================


class OutboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class AuthenticatedEvent(OutboundEvent):
    type: Literal["authenticated"] = "authenticated"
    user_id: int = Field(..., alias="userId")
    role: str


class NearbyKekesEvent(OutboundEvent):
    """Full snapshot of live driver positions"""

    type: Literal["nearby_kekes"] = "nearby_kekes"
    locations: List[Dict[str, Any]]


class SafetyAlertEvent(OutboundEvent):
    type: Literal["safety_alert"] = "safety_alert"
    category: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None


class SOSAlertEvent(OutboundEvent):
    type: Literal["sos_alert"] = "sos_alert"
    user_id: int = Field(..., alias="userId")
    user_name: str = Field(..., alias="userName")
    location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    trip_data: Optional[Dict[str, Any]] = Field(None, alias="tripData")
    timestamp: str = Field(default_factory=utc_timestamp)
    is_sos: bool = Field(True, alias="isSOS")
    priority: Literal["CRITICAL"] = "CRITICAL"
    notified_authorities: List[str] = Field(
        default_factory=lambda: list(NOTIFIED_AUTHORITIES), alias="notifiedAuthorities"
    )


class PongEvent(OutboundEvent):
    type: Literal["pong"] = "pong"
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorEvent(OutboundEvent):
    type: Literal["error"] = "error"
    message: str
