"""
Seed the study rooms and, optionally, a local admin account.

    python -m app.scripts.seed --admin-email admin@example.edu --admin-password secret123

Safe to run repeatedly: existing rooms and users are left as they are,
except that an existing user named as admin is promoted.
"""

import argparse
import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_password
from app.core.database import session_scope
from app.repositories.rooms import RoomRepository
from app.repositories.users import UserRepository

ROOMS = [
    {"name": "Study Room 101", "category": "small", "capacity": 4,
     "description": "Quiet room with whiteboard"},
    {"name": "Study Room 102", "category": "small", "capacity": 4,
     "description": "Quiet room with monitor"},
    {"name": "Study Room 103", "category": "small", "capacity": 4,
     "description": "Quiet room near the windows"},
    {"name": "Study Room 104", "category": "small", "capacity": 4,
     "description": "Quiet room with whiteboard"},
    {"name": "Study Room 201", "category": "large", "capacity": 12,
     "description": "Group room with projector"},
    {"name": "Study Room 202", "category": "large", "capacity": 12,
     "description": "Group room with conference table"},
    {"name": "Study Room 203", "category": "large", "capacity": 10,
     "description": "Group room with whiteboard wall"},
]


async def seed(
    session: AsyncSession,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> dict[str, int]:
    """Insert missing rooms and the admin user. Returns what was created."""
    rooms = RoomRepository(session)
    created_rooms = 0
    for room in ROOMS:
        if await rooms.get_by_name(room["name"]):
            continue
        await rooms.create(**room)
        created_rooms += 1
    print(f"Rooms: {created_rooms} created, {len(ROOMS) - created_rooms} already present.")

    created_users = 0
    if admin_email:
        users = UserRepository(session)
        email = admin_email.strip().lower()
        user = await users.get_by_email(email)
        if user:
            await users.update(user, role="admin")
            print(f"User {email} already exists; ensured admin role.")
        else:
            if not admin_password:
                raise SystemExit("--admin-password is required to create a new admin")
            await users.create(
                email=email,
                name=email.split("@")[0],
                role="admin",
                password_hash=hash_password(admin_password),
                auth_provider="credentials",
            )
            created_users += 1
            print(f"Created admin user: {email}")

    return {"rooms": created_rooms, "users": created_users}


async def main(admin_email: Optional[str], admin_password: Optional[str]) -> None:
    async with session_scope() as session:
        await seed(session, admin_email, admin_password)
    print("Done.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed rooms and a local admin user.")
    parser.add_argument("--admin-email", help="Email address for the admin user")
    parser.add_argument("--admin-password", help="Password for a newly created admin")

    args = parser.parse_args()

    asyncio.run(main(args.admin_email, args.admin_password))
