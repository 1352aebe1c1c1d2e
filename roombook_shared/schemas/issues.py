"""Issue report schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel, IssueStatus


class IssueCreateRequest(CamelModel):
    email: Optional[EmailStr] = None
    issue_type: str = Field(min_length=1, max_length=50)
    title: Optional[str] = Field(default=None, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    booking_id: Optional[uuid.UUID] = None
    room_id: Optional[uuid.UUID] = None


class IssueCreatedResponse(CamelModel):
    id: uuid.UUID


class IssueResponse(CamelModel):
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    email: Optional[str] = None
    issue_type: str
    description: str
    booking_id: Optional[uuid.UUID] = None
    room_id: Optional[uuid.UUID] = None
    status: IssueStatus
    created_at: datetime


class IssueListResponse(CamelModel):
    data: list[IssueResponse]
