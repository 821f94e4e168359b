from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Client(SQLModel, table=True):
    __tablename__ = "clients"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True)
    phone: str
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class ClientPublic(SQLModel):
    id: int
    name: str
    email: str
    phone: str
