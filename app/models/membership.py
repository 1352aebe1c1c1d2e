"""User-Organization membership."""

from datetime import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, timestamp_field


class OrgMembership(UUIDMixin, SQLModel, table=True):
    __tablename__ = "org_memberships"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "organization_id", name="uq_org_memberships_user_org"),
    )

    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    role: str = Field(nullable=False, default="member")  # owner | officer | member
    created_at: datetime = timestamp_field()
