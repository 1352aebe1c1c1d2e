"""
Organization API endpoints (admin only).

GET   /                    - List organizations
POST  /                    - Create an organization
PATCH /{org_id}            - Rename / change status
GET   /{org_id}/members    - List members
POST  /{org_id}/members    - Add a member by email, or change their role
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.database import get_session
from app.models.user import User
from app.services import organizations as org_service

from roombook_shared.schemas.organizations import (
    MemberListResponse,
    MemberResponse,
    MemberUpsertRequest,
    OrgCreateRequest,
    OrgListResponse,
    OrgResponse,
    OrgUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=OrgListResponse)
async def list_orgs(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    orgs = await org_service.list_organizations(session)
    return OrgListResponse(data=[OrgResponse.model_validate(org) for org in orgs])


@router.post("", response_model=OrgResponse, status_code=201)
async def create_org(
    body: OrgCreateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.create_organization(body, session)
    return OrgResponse.model_validate(org)


@router.patch("/{org_id}", response_model=OrgResponse)
async def update_org(
    org_id: uuid.UUID,
    body: OrgUpdateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.update_organization(org_id, body, session)
    return OrgResponse.model_validate(org)


@router.get("/{org_id}/members", response_model=MemberListResponse)
async def list_members(
    org_id: uuid.UUID,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    items = await org_service.list_members(org_id, session)
    return MemberListResponse(data=items)


@router.post("/{org_id}/members", response_model=MemberResponse)
async def upsert_member(
    org_id: uuid.UUID,
    body: MemberUpsertRequest,
    response: Response,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """201 when the membership is new, 200 when an existing role changed."""
    member, created = await org_service.upsert_member(org_id, body, session)
    response.status_code = 201 if created else 200
    return MemberResponse(**member)
