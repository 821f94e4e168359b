from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.models.patch import PatchModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class ServiceBase(SQLModel):
    name: str
    description: str | None = None
    price: float = Field(ge=0)
    duration_minutes: int = Field(default=60, gt=0)
    category: str | None = None
    active: bool = True


class Service(ServiceBase, table=True):
    __tablename__ = "services"
    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(PatchModel):
    not_null_fields = frozenset({"name", "price", "duration_minutes", "active"})

    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration_minutes: int | None = Field(default=None, gt=0)
    category: str | None = None
    active: bool | None = None


class ServicePublic(ServiceBase):
    id: int
