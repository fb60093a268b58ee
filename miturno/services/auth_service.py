from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.core.config import settings
from miturno.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from miturno.models.refresh_token import RefreshToken
from miturno.models.user import Role, User, UserCreate, UserPublic
from miturno.services.business_service import create_business
from miturno.utils import utc_naive_now

HOME_PATHS = {
    Role.ADMIN.value: "/admin/dashboard",
    Role.EMPLOYEE.value: "/employee/dashboard",
}


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession, business_id: int, data: UserCreate, role: Role
) -> User:
    user = User(
        business_id=business_id,
        email=data.email.lower(),
        full_name=data.full_name,
        phone=data.phone,
        role=role.value,
        hashed_password=hash_password(data.password),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        business_id=user.business_id,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        photo_url=user.photo_url,
        role=user.role,
    )


def home_path_for(user: User) -> str:
    return HOME_PATHS.get(user.role, "/auth/register")


def make_token_pair(user_id: int) -> tuple[str, str, int]:
    access = create_access_token(user_id)
    refresh = create_refresh_token(user_id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, refresh, expires_in


async def store_refresh_token(
    session: AsyncSession, user_id: int, refresh_token: str
) -> None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return
    expires_at = utc_naive_now() + timedelta(days=settings.refresh_token_expire_days)
    session.add(RefreshToken(user_id=user_id, jti=jti, expires_at=expires_at))
    await session.flush()


async def _issue_tokens(session: AsyncSession, user: User) -> tuple[User, str, str, int]:
    access, refresh, expires_in = make_token_pair(user.id)
    await store_refresh_token(session, user_id=user.id, refresh_token=refresh)
    return user, access, refresh, expires_in


async def login_user(
    session: AsyncSession, email: str, password: str
) -> tuple[User, str, str, int] | None:
    user = await get_user_by_email(session, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return await _issue_tokens(session, user)


async def register_business_owner(
    session: AsyncSession,
    business_name: str,
    data: UserCreate,
) -> tuple[User, str, str, int] | None:
    """Create a business and its admin account. None if the email is taken."""
    if await get_user_by_email(session, data.email):
        return None
    business = await create_business(session, business_name, phone=data.phone)
    user = await create_user(session, business.id, data, Role.ADMIN)
    return await _issue_tokens(session, user)


async def change_password(
    session: AsyncSession, user: User, current_password: str, new_password: str
) -> bool:
    if not verify_password(current_password, user.hashed_password):
        return False
    user.hashed_password = hash_password(new_password)
    session.add(user)
    await session.flush()
    return True


async def revoke_refresh_token(session: AsyncSession, jti: str) -> None:
    result = await session.execute(select(RefreshToken).where(RefreshToken.jti == jti))
    row = result.scalar_one_or_none()
    if row:
        row.revoked = True
        session.add(row)


async def refresh_tokens(
    session: AsyncSession, refresh_token: str
) -> tuple[User, str, str, int] | None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return None
    result = await session.execute(
        select(RefreshToken).where(RefreshToken.jti == jti)
    )
    token_row = result.scalar_one_or_none()
    if not token_row or not token_row.is_active(utc_naive_now()):
        return None
    user = await get_user_by_id(session, int(user_id_str))
    if not user:
        return None
    token_row.revoked = True
    session.add(token_row)
    return await _issue_tokens(session, user)
