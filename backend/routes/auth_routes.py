"""
Authentication Routes
Handles user registration and profile lookup
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from models.user_model import User
from utils.jwt_utils import create_access_token

router = APIRouter()
logger = logging.getLogger(__name__)


# Pydantic models for request validation
class RegisterRequest(BaseModel):
    role: str = Field(..., pattern="^(passenger|driver|admin)$")
    name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=7, max_length=20)

    nin: Optional[str] = None
    address: Optional[str] = None
    dob: Optional[str] = None
    next_of_kin: Optional[str] = None
    photo_url: Optional[str] = None
    student_id: Optional[str] = None
    student_expiry: Optional[str] = None


@router.post("/auth/register")
async def register(data: RegisterRequest):
    """
    Register a new passenger, driver or admin
    Returns the numeric user id and a token for the WebSocket hub
    """
    if User.objects(phone=data.phone).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                "This phone number is already registered. "
                "Please use a different number or log in."
            ),
        )

    try:
        user = User(**data.model_dump())
        user.save()
    except Exception as e:
        logger.error(f"Registration error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Registration failed: {str(e)}",
        )

    logger.info(f"New user registered: {user.id} ({user.role})")

    token = create_access_token({"user_id": user.id, "role": user.role})

    return {"success": True, "id": user.id, "token": token, "user": user.to_dict()}


@router.get("/users/{phone}")
async def get_user_by_phone(phone: str):
    """Look up a user profile by phone number"""
    user = User.objects(phone=phone).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    return user.to_dict()
