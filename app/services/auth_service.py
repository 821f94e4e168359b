"""Admin accounts and the token lifecycle: login, refresh rotation, logout."""
import logging
from datetime import UTC, datetime, timedelta
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from app.models.refresh_token import RefreshToken
from app.models.user import User, UserCreate, UserPublic, UserRole

logger = logging.getLogger(__name__)


class IssuedTokens(NamedTuple):
    user: User
    access_token: str
    refresh_token: str
    expires_in: int  # seconds


def _utc_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == _normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        email=_normalize_email(data.email),
        full_name=data.full_name,
        hashed_password=hash_password(data.password),
        role=data.role,
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


async def authenticate(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


async def issue_tokens(session: AsyncSession, user: User) -> IssuedTokens:
    """New access/refresh pair; the refresh token's jti is recorded so it can be revoked."""
    refresh = create_refresh_token(user.id)
    _, jti = decode_refresh_token(refresh)
    session.add(
        RefreshToken(
            user_id=user.id,
            jti=jti,
            expires_at=_utc_naive() + timedelta(days=settings.refresh_token_expire_days),
        )
    )
    await session.flush()
    return IssuedTokens(
        user=user,
        access_token=create_access_token(user.id, UserRole(user.role).value),
        refresh_token=refresh,
        expires_in=settings.access_token_expire_minutes * 60,
    )


async def login_user(session: AsyncSession, email: str, password: str) -> IssuedTokens | None:
    user = await authenticate(session, email, password)
    if user is None:
        return None
    logger.info("User %s signed in", user.id)
    return await issue_tokens(session, user)


async def _usable_refresh_token(session: AsyncSession, token: str) -> RefreshToken | None:
    """Stored row for a refresh JWT that is well formed, unexpired and not yet revoked."""
    user_id, jti = decode_refresh_token(token)
    if not user_id or not jti:
        return None
    result = await session.execute(
        select(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.revoked_at.is_(None),
            RefreshToken.expires_at > _utc_naive(),
        )
    )
    row = result.scalar_one_or_none()
    if row is None or str(row.user_id) != user_id:
        return None
    return row


async def refresh_tokens(session: AsyncSession, token: str) -> IssuedTokens | None:
    """Rotate: the presented refresh token is revoked and a new pair issued."""
    row = await _usable_refresh_token(session, token)
    if row is None:
        return None
    user = await session.get(User, row.user_id)
    if user is None:
        return None
    row.revoke()
    session.add(row)
    return await issue_tokens(session, user)


async def revoke_refresh_token(session: AsyncSession, token: str) -> bool:
    row = await _usable_refresh_token(session, token)
    if row is None:
        return False
    row.revoke()
    session.add(row)
    await session.flush()
    return True


async def ensure_admin_user(
    session: AsyncSession, email: str, password: str, full_name: str | None = None
) -> User:
    """Create the bootstrap admin, or promote an existing account with that email.

    The password of an existing account is left untouched.
    """
    user = await get_user_by_email(session, email)
    if user is None:
        logger.info("Creating bootstrap admin %s", email)
        return await create_user(
            session,
            UserCreate(email=email, password=password, full_name=full_name, role=UserRole.admin),
        )
    if user.role != UserRole.admin:
        logger.info("Promoting %s to admin", email)
        user.role = UserRole.admin
        session.add(user)
        await session.flush()
    return user
