"""
Issue report endpoints (mounted under /api/issues).

POST /  - Submit a report; anonymous or signed in
GET  /  - List reports (admin)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_optional_user, require_admin
from app.core.database import get_session
from app.models.user import User
from app.services import issues as issue_service

from roombook_shared.schemas.common import IssueStatus
from roombook_shared.schemas.issues import (
    IssueCreatedResponse,
    IssueCreateRequest,
    IssueListResponse,
    IssueResponse,
)

router = APIRouter()


@router.post("", response_model=IssueCreatedResponse, status_code=201)
async def submit_issue(
    body: IssueCreateRequest,
    user: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
):
    issue = await issue_service.submit_issue(body, user, session)
    return IssueCreatedResponse(id=issue.id)


@router.get("", response_model=IssueListResponse)
async def list_issues(
    status: Optional[IssueStatus] = Query(None),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    issues = await issue_service.list_issues(session, status)
    return IssueListResponse(data=[IssueResponse.model_validate(i) for i in issues])
