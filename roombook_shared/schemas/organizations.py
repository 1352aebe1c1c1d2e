"""
Organization and membership schemas shared between server and clients.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel, OrgRole, OrgStatus


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="Organization display name")
    slug: str = Field(
        ...,
        min_length=2,
        max_length=50,
        pattern=r"^[a-z0-9][a-z0-9-]*[a-z0-9]$",
        description="URL-safe org identifier",
    )


class OrgUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[OrgStatus] = None


class MemberUpsertRequest(CamelModel):
    email: EmailStr
    role: OrgRole = OrgRole.OFFICER


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    status: OrgStatus
    created_at: datetime
    updated_at: datetime


class OrgListResponse(CamelModel):
    data: list[OrgResponse]


class UserOrgItem(CamelModel):
    """An organization as seen by one of its members."""

    id: uuid.UUID
    name: str
    slug: str
    status: OrgStatus
    role: OrgRole


class UserOrgListResponse(CamelModel):
    data: list[UserOrgItem]


class MemberResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    organization_id: uuid.UUID
    role: OrgRole
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: datetime


class MemberListResponse(CamelModel):
    data: list[MemberResponse]
