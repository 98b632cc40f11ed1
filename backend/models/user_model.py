"""
User Model - Represents passengers, drivers and admins
Role determines what the real-time hub delivers to the user
"""

from datetime import datetime

from mongoengine import (
    BooleanField,
    DateTimeField,
    Document,
    SequenceField,
    StringField,
)

ROLE_PASSENGER = "passenger"
ROLE_DRIVER = "driver"
ROLE_ADMIN = "admin"
USER_ROLES = (ROLE_PASSENGER, ROLE_DRIVER, ROLE_ADMIN)


class User(Document):
    """
    User model for passengers, drivers and admins
    Numeric ids are shared with the WebSocket hub (auth.userId)
    """

    meta = {
        "collection": "users",
        "indexes": ["phone", "role"],
        "strict": False,
    }

    id = SequenceField(primary_key=True, sequence_name="user_id")

    # Basic Information
    role = StringField(required=True, choices=USER_ROLES, default=ROLE_PASSENGER)
    name = StringField(required=True, max_length=100)
    phone = StringField(required=True, unique=True, max_length=20)
    is_verified = BooleanField(default=False)

    # Identity details collected at onboarding
    nin = StringField(max_length=20)
    address = StringField(max_length=200)
    dob = StringField(max_length=20)
    next_of_kin = StringField(max_length=100)
    photo_url = StringField()

    # Student discount
    student_id = StringField(max_length=50)
    student_expiry = StringField(max_length=20)

    created_at = DateTimeField(default=datetime.utcnow)

    def to_dict(self):
        """Convert user to dictionary"""
        return {
            "id": self.id,
            "role": self.role,
            "name": self.name,
            "phone": self.phone,
            "nin": self.nin,
            "address": self.address,
            "dob": self.dob,
            "next_of_kin": self.next_of_kin,
            "photo_url": self.photo_url,
            "is_verified": self.is_verified,
            "student_id": self.student_id,
            "student_expiry": self.student_expiry,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __str__(self):
        return f"User({self.name}, {self.role})"
