"""
WebSocket Authentication Utility
Checks the identity claimed by an `auth` event

By default the claimed userId/role are trusted (identity is vouched for by the
session layer in front of the hub). With WS_REQUIRE_TOKEN enabled the event
must carry a JWT issued at registration whose claims match.
"""

import logging

from config import settings
from models.events import AuthEvent
from utils.jwt_utils import verify_token

logger = logging.getLogger(__name__)


class WebSocketAuthError(Exception):
    """Raised when an auth event cannot be accepted"""


def authenticate_event(event: AuthEvent) -> None:
    """
    Validate an auth event

    Args:
        event: parsed auth event

    Raises:
        WebSocketAuthError if a token is required and missing, invalid or
        issued for a different identity
    """
    if not settings.WS_REQUIRE_TOKEN:
        return

    if not event.token:
        logger.warning(f"Auth rejected for user {event.user_id}: missing token")
        raise WebSocketAuthError("Missing authentication token")

    payload = verify_token(event.token)
    if payload is None:
        logger.warning(f"Auth rejected for user {event.user_id}: invalid token")
        raise WebSocketAuthError("Invalid or expired token")

    if str(payload.get("user_id")) != str(event.user_id) or payload.get("role") != event.role:
        logger.warning(
            f"Auth rejected: token issued for user_id={payload.get('user_id')}, "
            f"role={payload.get('role')} but event claims user_id={event.user_id}, role={event.role}"
        )
        raise WebSocketAuthError("Token does not match claimed identity")
