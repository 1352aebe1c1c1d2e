from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRole(str, Enum):
    USER = "user"
    OFFICER = "officer"
    ADMIN = "admin"


class AuthProvider(str, Enum):
    CREDENTIALS = "credentials"
    GOOGLE = "google"


class OrgRole(str, Enum):
    OWNER = "owner"
    OFFICER = "officer"
    MEMBER = "member"


class OrgStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class RoomCategory(str, Enum):
    SMALL = "small"
    LARGE = "large"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"


# Statuses that occupy a room
ACTIVE_BOOKING_STATUSES: tuple[BookingStatus, ...] = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
)


class BookingVisibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
    ORG = "org"


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
