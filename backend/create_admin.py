"""
Promote an existing user to ADMIN by email.
The user must have signed in once so the identity sync has created them.
Run with: python create_admin.py someone@example.com
"""

import asyncio
import sys

from app.db import session as db_session
from app.db.repositories.user_repository import UserRepository
from app.models.user import UserRole


async def promote(email: str) -> int:
    await db_session.init_db()
    try:
        async with db_session.async_session_maker() as session:
            repo = UserRepository(session)
            user = await repo.get_by_email(email)
            if not user:
                print(f"No user with email {email}. Sign in once, then run this again.")
                return 1
            
            if user.role == UserRole.ADMIN:
                print(f"{email} is already an admin.")
                return 0
            
            await repo.update(user.id, role=UserRole.ADMIN)
            await session.commit()
            print(f"Promoted {email} to ADMIN (user id {user.id}).")
            return 0
    finally:
        await db_session.close_db()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python create_admin.py <email>")
        sys.exit(2)
    sys.exit(asyncio.run(promote(sys.argv[1])))
