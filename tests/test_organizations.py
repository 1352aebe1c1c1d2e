"""
Organization endpoints and membership management.

Tests cover:
- Slug validation
- Org create / list / update (admin only)
- Member upsert by email (create vs. role change)
- The caller's own organizations
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from app.repositories.organizations import MembershipRepository, OrganizationRepository
from roombook_shared.schemas.organizations import MemberUpsertRequest, OrgCreateRequest


# ---------------------------------------------------------------------------
# Schema validation tests (no DB needed)
# ---------------------------------------------------------------------------

class TestOrgCreateRequestValidation:
    """Slug format validation."""

    def test_valid_slug(self):
        req = OrgCreateRequest(name="Chess Club", slug="chess-club")
        assert req.slug == "chess-club"

    def test_invalid_slug_uppercase(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="Chess", slug="Chess-Club")

    def test_invalid_slug_start_with_hyphen(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="Chess", slug="-chess")

    def test_slug_too_short(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="Chess", slug="c")

    def test_member_role_defaults_to_officer(self):
        req = MemberUpsertRequest(email="someone@example.edu")
        assert req.role == "officer"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@pytest.fixture
async def admin(make_user):
    return await make_user(role="admin", name="Admin")


class TestOrganizations:
    async def test_create_and_list(self, client, admin, headers_for):
        resp = await client.post(
            "/api/organizations",
            json={"name": "Robotics Society", "slug": "robotics"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 201
        created = resp.json()
        assert created["slug"] == "robotics"
        assert created["status"] == "active"

        resp = await client.get("/api/organizations", headers=headers_for(admin))
        assert resp.status_code == 200
        assert [o["id"] for o in resp.json()["data"]] == [created["id"]]

    async def test_duplicate_slug(self, client, admin, make_org, headers_for):
        await make_org("Robotics", slug="robotics")
        resp = await client.post(
            "/api/organizations",
            json={"name": "Other Robotics", "slug": "robotics"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 409
        assert resp.json() == {"error": "Organization slug already taken"}

    async def test_duplicate_slug_missed_by_lookup(self, client, admin, make_org, headers_for):
        await make_org("Robotics", slug="robotics")
        with patch.object(OrganizationRepository, "get_by_slug", AsyncMock(return_value=None)):
            resp = await client.post(
                "/api/organizations",
                json={"name": "Other Robotics", "slug": "robotics"},
                headers=headers_for(admin),
            )
        assert resp.status_code == 409
        assert resp.json() == {"error": "Organization slug already taken"}

        resp = await client.get("/api/organizations", headers=headers_for(admin))
        assert [o["name"] for o in resp.json()["data"]] == ["Robotics"]

    async def test_bad_slug_is_rejected(self, client, admin, headers_for):
        resp = await client.post(
            "/api/organizations",
            json={"name": "Robotics", "slug": "Robotics Club"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "slug"

    async def test_update(self, client, admin, make_org, headers_for):
        org = await make_org("Robotics")
        resp = await client.patch(
            f"/api/organizations/{org.id}",
            json={"name": "Robotics Society", "status": "suspended"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Robotics Society"
        assert resp.json()["status"] == "suspended"
        assert resp.json()["slug"] == org.slug

    async def test_update_missing(self, client, admin, headers_for):
        resp = await client.patch(
            f"/api/organizations/{uuid.uuid4()}",
            json={"name": "Nobody"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Organization not found"}

    @pytest.mark.parametrize("role", ["user", "officer"])
    async def test_non_admin_forbidden(self, client, make_user, headers_for, role):
        user = await make_user(role=role)
        resp = await client.get("/api/organizations", headers=headers_for(user))
        assert resp.status_code == 403
        resp = await client.post(
            "/api/organizations",
            json={"name": "Robotics", "slug": "robotics"},
            headers=headers_for(user),
        )
        assert resp.status_code == 403


class TestMembers:
    async def test_add_member(self, client, admin, make_user, make_org, headers_for):
        org = await make_org()
        student = await make_user(email="student@example.edu", name="Student")

        resp = await client.post(
            f"/api/organizations/{org.id}/members",
            json={"email": "student@example.edu"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["userId"] == str(student.id)
        assert body["organizationId"] == str(org.id)
        assert body["role"] == "officer"
        assert body["name"] == "Student"

    async def test_upsert_changes_role(self, client, admin, make_user, make_org, headers_for):
        org = await make_org()
        await make_user(email="student@example.edu")
        url = f"/api/organizations/{org.id}/members"

        first = await client.post(
            url, json={"email": "student@example.edu"}, headers=headers_for(admin)
        )
        second = await client.post(
            url,
            json={"email": "student@example.edu", "role": "owner"},
            headers=headers_for(admin),
        )
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["role"] == "owner"

        resp = await client.get(url, headers=headers_for(admin))
        [member] = resp.json()["data"]
        assert member["role"] == "owner"
        assert member["email"] == "student@example.edu"

    async def test_concurrent_insert_becomes_role_change(
        self, client, admin, make_user, make_org, make_membership, headers_for
    ):
        org = await make_org()
        student = await make_user(email="student@example.edu")
        existing = await make_membership(student, org, role="member")

        real_get_for = MembershipRepository.get_for
        seen = []

        async def stale_first_read(self, user_id, organization_id):
            if user_id == student.id and not seen:
                seen.append(user_id)
                return None
            return await real_get_for(self, user_id, organization_id)

        with patch.object(MembershipRepository, "get_for", stale_first_read):
            resp = await client.post(
                f"/api/organizations/{org.id}/members",
                json={"email": "student@example.edu", "role": "owner"},
                headers=headers_for(admin),
            )
        assert resp.status_code == 200
        assert resp.json()["id"] == str(existing.id)
        assert resp.json()["role"] == "owner"

        resp = await client.get(
            f"/api/organizations/{org.id}/members", headers=headers_for(admin)
        )
        [member] = resp.json()["data"]
        assert member["role"] == "owner"

    async def test_unknown_email(self, client, admin, make_org, headers_for):
        org = await make_org()
        resp = await client.post(
            f"/api/organizations/{org.id}/members",
            json={"email": "ghost@example.edu"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    async def test_unknown_org(self, client, admin, make_user, headers_for):
        await make_user(email="student@example.edu")
        resp = await client.post(
            f"/api/organizations/{uuid.uuid4()}/members",
            json={"email": "student@example.edu"},
            headers=headers_for(admin),
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Organization not found"}

    async def test_list_members_sorted_by_email(
        self, client, admin, make_user, make_org, make_membership, headers_for
    ):
        org = await make_org()
        zed = await make_user(email="zed@example.edu")
        amy = await make_user(email="amy@example.edu")
        await make_membership(zed, org, role="member")
        await make_membership(amy, org, role="owner")

        resp = await client.get(
            f"/api/organizations/{org.id}/members", headers=headers_for(admin)
        )
        assert resp.status_code == 200
        assert [m["email"] for m in resp.json()["data"]] == [
            "amy@example.edu",
            "zed@example.edu",
        ]


class TestUserOrganizations:
    async def test_lists_memberships_with_role(
        self, client, make_user, make_org, make_membership, headers_for
    ):
        user = await make_user()
        chess = await make_org("Chess Club")
        drama = await make_org("Drama Society")
        await make_org("Rowing")
        await make_membership(user, chess, role="officer")
        await make_membership(user, drama, role="member")

        resp = await client.get("/api/user/organizations", headers=headers_for(user))
        assert resp.status_code == 200
        assert [(o["name"], o["role"]) for o in resp.json()["data"]] == [
            ("Chess Club", "officer"),
            ("Drama Society", "member"),
        ]

    async def test_no_memberships(self, client, make_user, headers_for):
        user = await make_user()
        resp = await client.get("/api/user/organizations", headers=headers_for(user))
        assert resp.json() == {"data": []}
