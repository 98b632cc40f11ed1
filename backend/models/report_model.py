"""
Report Models - Incident/safety reports and driver route feedback
Feeds the admin safety analytics and the hotspot map
"""

from datetime import datetime

from mongoengine import (
    DateTimeField,
    Document,
    IntField,
    SequenceField,
    StringField,
)

REPORT_TYPES = ("incident", "lost_found", "safety_report", "route_feedback")
RISK_LEVELS = ("low", "medium", "high")
TRAFFIC_LEVELS = ("light", "moderate", "heavy", "gridlock")


class Report(Document):
    """Safety report submitted by a passenger or driver"""

    meta = {
        "collection": "reports",
        "indexes": ["type", "risk_level", "user_id", "created_at"],
    }

    id = SequenceField(primary_key=True, sequence_name="report_id")

    user_id = IntField()
    trip_id = IntField()
    type = StringField(choices=REPORT_TYPES, default="safety_report")
    category = StringField(max_length=100)
    risk_level = StringField(choices=RISK_LEVELS)
    content = StringField()
    location = StringField(max_length=200)
    audio_url = StringField()

    created_at = DateTimeField(default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "trip_id": self.trip_id,
            "type": self.type,
            "category": self.category,
            "risk_level": self.risk_level,
            "content": self.content,
            "location": self.location,
            "audio_url": self.audio_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class RouteFeedback(Document):
    """A driver's rating of a corridor"""

    meta = {
        "collection": "route_feedback",
        "indexes": ["driver_id", "route_name", "-created_at"],
    }

    id = SequenceField(primary_key=True, sequence_name="route_feedback_id")

    driver_id = IntField()
    route_name = StringField(required=True, max_length=200)
    origin = StringField(max_length=200)
    destination = StringField(max_length=200)
    rating = IntField(min_value=1, max_value=5)
    comments = StringField()
    safety_concerns = StringField()
    traffic_level = StringField(choices=TRAFFIC_LEVELS)

    created_at = DateTimeField(default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "driver_id": self.driver_id,
            "route_name": self.route_name,
            "origin": self.origin,
            "destination": self.destination,
            "rating": self.rating,
            "comments": self.comments,
            "safety_concerns": self.safety_concerns,
            "traffic_level": self.traffic_level,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
