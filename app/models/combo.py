from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.models.patch import PatchModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class ComboServiceBase(SQLModel):
    name: str
    price: float = Field(ge=0)


class ComboService(ComboServiceBase, table=True):
    __tablename__ = "combo_services"
    id: int | None = Field(default=None, primary_key=True)
    combo_id: int = Field(foreign_key="combos.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class ComboBase(SQLModel):
    title: str
    campaign: str | None = None
    campaign_color: str | None = "pink"
    description: str | None = None
    original_price: float = Field(ge=0)
    combo_price: float = Field(ge=0)
    discount: str | None = None
    ideal: str | None = None
    active: bool = True


class Combo(ComboBase, table=True):
    __tablename__ = "combos"
    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class ComboCreate(ComboBase):
    # Blank rows left over from the admin form are dropped on save
    services: list[ComboServiceBase] = Field(default_factory=list)


class ComboUpdate(PatchModel):
    not_null_fields = frozenset({"title", "original_price", "combo_price", "active"})

    title: str | None = None
    campaign: str | None = None
    campaign_color: str | None = None
    description: str | None = None
    original_price: float | None = Field(default=None, ge=0)
    combo_price: float | None = Field(default=None, ge=0)
    discount: str | None = None
    ideal: str | None = None
    active: bool | None = None
    services: list[ComboServiceBase] | None = None


class ComboPublic(ComboBase):
    id: int
    services: list[ComboServiceBase] = Field(default_factory=list)
