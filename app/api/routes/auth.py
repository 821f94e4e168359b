"""Admin dashboard sign-in.

The refresh token may be sent in the X-Refresh-Token header or as
{"refresh_token": ...} in the body; the header wins when both are present.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_session, refresh_header
from app.api.schemas.auth import LoginRequest, LogoutResponse, RefreshRequest, TokenPair
from app.models.user import User, UserPublic
from app.services.auth_service import (
    IssuedTokens,
    login_user,
    refresh_tokens,
    revoke_refresh_token,
    user_to_public,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _token_pair(issued: IssuedTokens) -> TokenPair:
    return TokenPair(
        access_token=issued.access_token,
        refresh_token=issued.refresh_token,
        expires_in=issued.expires_in,
    )


def _presented_refresh_token(header: str | None, body: RefreshRequest | None) -> str | None:
    return header or (body.refresh_token if body else None)


@router.post("/login", response_model=TokenPair)
async def login(body: LoginRequest, session: AsyncSession = Depends(get_session)) -> TokenPair:
    issued = await login_user(session, body.email, body.password)
    if issued is None:
        logger.info("Failed login attempt for %s", body.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return _token_pair(issued)


@router.post("/refresh", response_model=TokenPair)
async def refresh(
    body: RefreshRequest | None = None,
    x_refresh_token: str | None = Depends(refresh_header),
    session: AsyncSession = Depends(get_session),
) -> TokenPair:
    token = _presented_refresh_token(x_refresh_token, body)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")
    issued = await refresh_tokens(session, token)
    if issued is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired refresh token")
    return _token_pair(issued)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    body: RefreshRequest | None = None,
    x_refresh_token: str | None = Depends(refresh_header),
    session: AsyncSession = Depends(get_session),
) -> LogoutResponse:
    """Always succeeds; a missing or already revoked token is ignored."""
    token = _presented_refresh_token(x_refresh_token, body)
    if token and await revoke_refresh_token(session, token):
        logger.debug("Refresh token revoked on logout")
    return LogoutResponse()


@router.get("/me", response_model=UserPublic)
async def me(current_user: User = Depends(get_current_user)) -> UserPublic:
    return user_to_public(current_user)
