"""
Report Routes
Safety reports, hotspot map data and driver route feedback

High-risk safety reports are pushed to every connected client through the
WebSocket hub as a safety_alert.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from models.report_model import Report, RouteFeedback
from utils.ai_utils import classify_safety_report

router = APIRouter()
logger = logging.getLogger(__name__)

HOTSPOT_WINDOW_HOURS = 24
ROUTE_INTELLIGENCE_LIMIT = 100


class SafetyReportRequest(BaseModel):
    user_id: Optional[int] = None
    trip_id: Optional[int] = None
    type: str = Field(
        default="safety_report",
        pattern="^(incident|lost_found|safety_report|route_feedback)$",
    )
    category: Optional[str] = None
    risk_level: Optional[str] = Field(default=None, pattern="^(low|medium|high)$")
    content: Optional[str] = None
    location: Optional[str] = None
    audio_url: Optional[str] = None


class RouteFeedbackRequest(BaseModel):
    driver_id: Optional[int] = None
    route_name: str = Field(..., min_length=1, max_length=200)
    origin: Optional[str] = None
    destination: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comments: Optional[str] = None
    safety_concerns: Optional[str] = None
    traffic_level: Optional[str] = Field(
        default=None, pattern="^(light|moderate|heavy|gridlock)$"
    )


@router.post("/reports/safety")
async def submit_safety_report(data: SafetyReportRequest, request: Request):
    """
    Store a safety report
    Unclassified reports are scored first; high-risk ones are broadcast live
    """
    report_data = data.model_dump()

    if data.content and (not data.category or not data.risk_level):
        classification = await classify_safety_report(data.content)
        report_data["category"] = data.category or classification["category"]
        report_data["risk_level"] = data.risk_level or classification["risk_level"]

    try:
        report = Report(**report_data)
        report.save()
    except Exception as e:
        logger.error(f"Safety report error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if report.risk_level == "high":
        await request.app.state.manager.broadcast_safety_alert(
            category=report.category,
            location=report.location,
            summary=report.content,
        )

    return {"success": True, "id": report.id, "report": report.to_dict()}


@router.get("/reports/hotspots")
async def get_hotspots():
    """Safety reports of the last 24 hours grouped by location, category and risk"""
    since = datetime.utcnow() - timedelta(hours=HOTSPOT_WINDOW_HOURS)
    reports = Report.objects(type="safety_report", created_at__gt=since).only(
        "location", "category", "risk_level"
    )

    counts = Counter((r.location, r.category, r.risk_level) for r in reports)

    return [
        {"location": location, "category": category, "risk_level": risk_level, "count": count}
        for (location, category, risk_level), count in counts.items()
    ]


@router.post("/reports/route-feedback")
async def submit_route_feedback(data: RouteFeedbackRequest):
    """Store a driver's corridor rating"""
    try:
        feedback = RouteFeedback(**data.model_dump())
        feedback.save()
    except Exception as e:
        logger.error(f"Route feedback error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"success": True, "id": feedback.id}


@router.get("/reports/route-intelligence")
async def get_route_intelligence():
    """Latest route feedback, newest first"""
    feedback = RouteFeedback.objects.order_by("-created_at").limit(ROUTE_INTELLIGENCE_LIMIT)
    return [item.to_dict() for item in feedback]
