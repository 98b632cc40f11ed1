"""
Trip Model - Represents a keke trip and its lifecycle
Status flow: pending → active → completed/cancelled
"""

from datetime import datetime

from mongoengine import (
    DateTimeField,
    Document,
    FloatField,
    IntField,
    SequenceField,
    StringField,
)

TRIP_STATUSES = ("pending", "active", "completed", "cancelled")


class Trip(Document):
    """
    Trip record written by the HTTP layer
    The hub never reads it; trip state on the socket comes from isActiveTrip
    """

    meta = {
        "collection": "trips",
        "indexes": ["status", "driver_id", "passenger_id", "created_at"],
    }

    id = SequenceField(primary_key=True, sequence_name="trip_id")

    # Participants
    passenger_id = IntField()
    driver_id = IntField()
    keke_id = IntField()

    # Route
    start_lat = FloatField()
    start_lng = FloatField()
    end_lat = FloatField()
    end_lng = FloatField()
    distance = StringField(max_length=50)

    safety_score = IntField(min_value=0, max_value=100)
    fare = FloatField()

    status = StringField(required=True, choices=TRIP_STATUSES, default="pending")

    created_at = DateTimeField(default=datetime.utcnow)
    completed_at = DateTimeField()

    def to_dict(self):
        """Convert trip to dictionary"""
        return {
            "id": self.id,
            "passenger_id": self.passenger_id,
            "driver_id": self.driver_id,
            "keke_id": self.keke_id,
            "start": {"lat": self.start_lat, "lng": self.start_lng},
            "end": (
                {"lat": self.end_lat, "lng": self.end_lng}
                if self.end_lat is not None
                else None
            ),
            "distance": self.distance,
            "safety_score": self.safety_score,
            "fare": self.fare,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
        }

    def __str__(self):
        return f"Trip({self.id}, {self.status})"
