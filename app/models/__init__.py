# SQLModel definitions: imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import OrgMembership  # noqa: F401
from .room import Room  # noqa: F401
from .booking import Booking, BookingParticipant  # noqa: F401
from .issue import Issue  # noqa: F401
