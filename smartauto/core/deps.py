from typing import AsyncGenerator, Iterable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.core.database import async_session_maker
from smartauto.core.security import decode_access_token
from smartauto.core.exceptions import AppException
from smartauto.models.user import User
from smartauto.models.enums import Role


bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the acting user from the bearer token.
    Runs before any role check, so a bad credential is always a 401, never a 403.
    """
    if credentials is None or not credentials.credentials:
        AppException().raise_401("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError:
        AppException().raise_401("Token expired. Please login again.")
    if payload is None:
        AppException().raise_401("Could not validate credentials")

    user_id = payload.get("sub")
    try:
        user_pk = int(user_id)
    except (TypeError, ValueError):
        AppException().raise_401("Could not validate credentials")

    user = await db.get(User, user_pk)
    if user is None:
        AppException().raise_401("Could not validate credentials")
    return user


def role_allowed(role: str, allowed_roles: Iterable[Role]) -> bool:
    """Flat role check: a role passes only if it is listed. Admin is not implied."""
    return role in {r.value for r in allowed_roles}


def require_roles(*allowed_roles: Role):
    """
    Dependency factory gating a route on an explicit role set.

        @router.put("/{id}", dependencies=[Depends(require_roles(Role.owner, Role.admin))])
    """

    async def _check(current_user: User = Depends(get_current_user)) -> User:
        if not role_allowed(current_user.role, allowed_roles):
            AppException().raise_403(
                "Access denied. Allowed roles: " + ", ".join(r.value for r in allowed_roles)
            )
        return current_user

    return _check


require_admin = require_roles(Role.admin)
require_owner_or_admin = require_roles(Role.owner, Role.admin)
