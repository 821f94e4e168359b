from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from app.models.patch import PatchModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class CourseBase(SQLModel):
    title: str
    description: str | None = None
    price: float = Field(ge=0)
    duration: str | None = None  # free text, e.g. "1 dia intensivo"
    category: str | None = None
    image: str | None = None
    features: list[str] = Field(default_factory=list)
    checkout_url: str | None = None
    active: bool = True


class Course(CourseBase, table=True):
    __tablename__ = "courses"
    id: int | None = Field(default=None, primary_key=True)
    features: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class CourseCreate(CourseBase):
    pass


class CourseUpdate(PatchModel):
    not_null_fields = frozenset({"title", "price", "features", "active"})

    title: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: str | None = None
    category: str | None = None
    image: str | None = None
    features: list[str] | None = None
    checkout_url: str | None = None
    active: bool | None = None


class CoursePublic(CourseBase):
    id: int
