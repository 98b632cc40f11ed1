"""
Admin Routes
Safety analytics and driver statistics for the admin dashboard
"""
import logging
from collections import Counter, defaultdict

from fastapi import APIRouter, HTTPException, status

from models.report_model import Report, RouteFeedback
from models.trip_model import Trip
from models.user_model import ROLE_DRIVER, User

router = APIRouter()
logger = logging.getLogger(__name__)

RECENT_ANOMALIES_LIMIT = 10


@router.get("/safety-analytics")
async def get_safety_analytics():
    """
    Aggregated incident statistics
    Totals, breakdowns by category and risk, latest high-risk reports and route risk
    """
    try:
        reports = list(Report.objects.only("category", "risk_level"))

        by_category = Counter(r.category for r in reports)
        by_risk = Counter(r.risk_level for r in reports)

        recent_anomalies = Report.objects(
            type="safety_report", risk_level="high"
        ).order_by("-created_at").limit(RECENT_ANOMALIES_LIMIT)

        routes = defaultdict(list)
        for feedback in RouteFeedback.objects:
            routes[feedback.route_name].append(feedback)

        route_risk = []
        for route_name, items in routes.items():
            ratings = [f.rating for f in items if f.rating is not None]
            concerns = [f.safety_concerns for f in items if f.safety_concerns]
            route_risk.append(
                {
                    "route_name": route_name,
                    "avg_rating": round(sum(ratings) / len(ratings), 2) if ratings else None,
                    "feedback_count": len(items),
                    "concerns": ",".join(concerns) if concerns else None,
                }
            )

        return {
            "totalReports": len(reports),
            "reportsByCategory": [
                {"category": category, "count": count}
                for category, count in by_category.items()
            ],
            "reportsByRisk": [
                {"risk_level": risk_level, "count": count}
                for risk_level, count in by_risk.items()
            ],
            "recentAnomalies": [report.to_dict() for report in recent_anomalies],
            "routeRisk": route_risk,
        }

    except Exception as e:
        logger.error(f"Safety analytics error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch safety analytics: {str(e)}",
        )


@router.get("/driver-stats")
async def get_driver_stats():
    """Per-driver trip count, average safety score and high-risk reports filed"""
    try:
        stats = []
        for driver in User.objects(role=ROLE_DRIVER).order_by("id"):
            trips = Trip.objects(driver_id=driver.id)
            scores = [t.safety_score for t in trips if t.safety_score is not None]
            high_risk_reports = Report.objects(user_id=driver.id, risk_level="high").count()

            stats.append(
                {
                    "id": driver.id,
                    "name": driver.name,
                    "phone": driver.phone,
                    "total_trips": trips.count(),
                    "avg_safety_score": (
                        round(sum(scores) / len(scores), 2) if scores else None
                    ),
                    "high_risk_reports": high_risk_reports,
                }
            )

        return stats

    except Exception as e:
        logger.error(f"Driver stats error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch driver statistics: {str(e)}",
        )
