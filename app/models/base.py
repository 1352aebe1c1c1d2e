"""Shared columns for the table models."""

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field(*, onupdate: bool = False):
    """Timezone-aware timestamp set on insert (and on update if asked)."""
    column_kwargs = {"server_default": sa.func.now()}
    if onupdate:
        column_kwargs["onupdate"] = utcnow
    return Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs=column_kwargs,
    )


class UUIDMixin(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


class TimestampMixin(SQLModel):
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field(onupdate=True)
