import asyncio
import os

from sqlalchemy import select

from warehouse.models.users.user_models import User
from warehouse.models.enums.user_role import UserRole
from warehouse.core.db import session_scope
from warehouse.core.security import hash_password
from warehouse.utils.ids import new_id


async def create_admin():
    email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()

    async with session_scope() as session:
        if await session.scalar(select(User.id).where(User.email == email)):
            print(f"Admin {email} already exists")
            return

        admin = User(
            id=new_id("admin"),
            email=email,
            password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "admin123")),
            role=UserRole.admin.value,
            company_name=os.getenv("ADMIN_COMPANY", "Warehouse"),
            is_active=True,
            token_version=0,
        )
        session.add(admin)
        await session.commit()
        print(f"Admin user {email} created!")


if __name__ == "__main__":
    asyncio.run(create_admin())
