"""
Token Utilities
Signed identity tokens handed out at registration and presented to the hub
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import settings

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token carrying the given claims (user_id, role)

    Args:
        data: claims to embed
        expires_delta: lifetime; ACCESS_TOKEN_EXPIRE_HOURS when omitted

    Returns:
        Compact JWS string
    """
    claims = dict(data)
    lifetime = expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    claims["exp"] = datetime.utcnow() + lifetime

    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Claims of a valid, unexpired token; None for anything else"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected token: {str(e)}")
        return None
