import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from smartauto.api.v1.users.schemas import UserCreate, UserSelfUpdate
from smartauto.core.exceptions import AppException
from smartauto.core.security import get_password_hash, verify_password
from smartauto.models.enums import Role
from smartauto.models.rental import Rental
from smartauto.models.user import User


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).filter(User.username == username))
        return result.scalars().first()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).filter(User.email == email))
        return result.scalars().first()

    async def get_users(self, offset: int = 0, limit: int = 10) -> Tuple[List[User], int]:
        total = (await self.db.execute(select(func.count()).select_from(User))).scalar() or 0
        result = await self.db.execute(select(User).order_by(User.id).offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def search_users_by_name(self, name: str) -> List[User]:
        result = await self.db.execute(
            select(User).where(User.name.ilike(f"%{name}%")).order_by(User.id)
        )
        return list(result.scalars().all())

    async def get_users_by_role(self, role: Role) -> List[User]:
        result = await self.db.execute(select(User).where(User.role == role.value).order_by(User.id))
        return list(result.scalars().all())

    async def _ensure_unique(self, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
        if username is not None:
            existing = await self.get_user_by_username(username)
            if existing and existing.id != exclude_id:
                AppException().raise_400("Username already registered")
        if email is not None:
            existing = await self.get_user_by_email(email)
            if existing and existing.id != exclude_id:
                AppException().raise_400("Email already registered")

    async def create_user(self, user_data: UserCreate) -> User:
        await self._ensure_unique(user_data.username, user_data.email)

        hashed_password = get_password_hash(user_data.password)
        new_user = User(
            **user_data.model_dump(exclude={"password", "role"}),
            password_hash=hashed_password,
            role=user_data.role.value,
        )
        self.db.add(new_user)
        await self.db.commit()
        await self.db.refresh(new_user)
        self.logger.info("User %s created with role %s", new_user.id, new_user.role)
        return new_user

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        user = await self.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    async def update_user(self, user: User, user_data: UserSelfUpdate) -> User:
        """
        Apply a partial update. Whether `role` can be part of it is decided by the schema
        the router accepted (UserSelfUpdate has no role field).
        """
        update_data = user_data.model_dump(exclude_unset=True)
        await self._ensure_unique(update_data.get("username"), update_data.get("email"), exclude_id=user.id)

        password = update_data.pop("password", None)
        if password is not None:
            user.password_hash = get_password_hash(password)
        role = update_data.pop("role", None)
        if role is not None:
            user.role = Role(role).value
        for key, value in update_data.items():
            setattr(user, key, value)

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user_id: int) -> None:
        user = await self.get_user_by_id(user_id)
        if not user:
            AppException().raise_404("User not found")

        rental_result = await self.db.execute(
            select(Rental.id).where(or_(Rental.customer_id == user_id, Rental.owner_id == user_id)).limit(1)
        )
        if rental_result.scalar_one_or_none() is not None:
            AppException().raise_400("Cannot delete user that is referenced by rentals")

        await self.db.delete(user)
        await self.db.commit()
        self.logger.info("User %s deleted", user_id)
