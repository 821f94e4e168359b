from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class RefreshToken(SQLModel, table=True):
    """One row per issued refresh token, looked up by its jti claim.

    A token is usable once: refreshing or logging out stamps revoked_at.
    """

    __tablename__ = "refresh_tokens"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    jti: str = Field(unique=True, index=True, max_length=36)
    expires_at: datetime = Field(index=True, sa_type=DateTime())
    revoked_at: datetime | None = Field(default=None, sa_type=DateTime())
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())

    @property
    def revoked(self) -> bool:
        return self.revoked_at is not None

    def revoke(self) -> None:
        if self.revoked_at is None:
            self.revoked_at = _utc_naive_now()
