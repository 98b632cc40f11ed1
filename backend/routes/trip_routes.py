"""
Trip Management Routes
Handles trip start/completion and fare quotes
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from models.trip_model import Trip
from utils.ai_utils import calculate_dynamic_price

router = APIRouter()
logger = logging.getLogger(__name__)


# Pydantic models for request validation
class TripStartRequest(BaseModel):
    passenger_id: int
    driver_id: int
    keke_id: Optional[int] = None
    start_lat: float = Field(..., ge=-90, le=90)
    start_lng: float = Field(..., ge=-180, le=180)


class TripCompleteRequest(BaseModel):
    trip_id: int
    end_lat: float = Field(..., ge=-90, le=90)
    end_lng: float = Field(..., ge=-180, le=180)
    fare: Optional[float] = Field(default=None, ge=0)
    distance: Optional[str] = None
    safety_score: Optional[int] = Field(default=None, ge=0, le=100)


class PriceRequest(BaseModel):
    origin: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    time_of_day: str = Field(default="now")
    demand_level: str = Field(default="medium", pattern="^(low|medium|high)$")


@router.post("/trips/start")
async def start_trip(data: TripStartRequest):
    """Create an active trip"""
    try:
        trip = Trip(**data.model_dump(), status="active")
        trip.save()
    except Exception as e:
        logger.error(f"Trip start error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    logger.info(
        f"Trip {trip.id} started: passenger {trip.passenger_id}, driver {trip.driver_id}"
    )
    return {"id": trip.id}


@router.post("/trips/complete")
async def complete_trip(data: TripCompleteRequest):
    """Close a trip with its final position, fare and safety score"""
    trip = Trip.objects(id=data.trip_id).first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found"
        )

    try:
        trip.end_lat = data.end_lat
        trip.end_lng = data.end_lng
        trip.fare = data.fare
        trip.distance = data.distance
        trip.safety_score = data.safety_score
        trip.status = "completed"
        trip.completed_at = datetime.utcnow()
        trip.save()
    except Exception as e:
        logger.error(f"Trip complete error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    logger.info(f"Trip {trip.id} completed, fare: {trip.fare}")
    return {"success": True, "trip": trip.to_dict()}


@router.post("/trips/price")
async def quote_price(data: PriceRequest):
    """Dynamic fare quote; falls back to the standard rate when scoring is offline"""
    quote = await calculate_dynamic_price(
        data.origin, data.destination, data.time_of_day, data.demand_level
    )
    return {"success": True, "price": quote}
