from datetime import UTC, datetime, time

from pydantic import model_validator
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.models.patch import PatchModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class AvailabilityBase(SQLModel):
    """Recurring weekly window during which bookings may be taken.

    day_of_week follows the calendar grid convention: 0=Sunday .. 6=Saturday.
    """

    day_of_week: int = Field(ge=0, le=6, index=True)
    start_time: time = time(9, 0)
    end_time: time = time(18, 0)
    active: bool = True


class Availability(AvailabilityBase, table=True):
    __tablename__ = "availability"
    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class AvailabilityCreate(AvailabilityBase):
    @model_validator(mode="after")
    def check_bounds(self) -> "AvailabilityCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityUpdate(PatchModel):
    not_null_fields = frozenset({"day_of_week", "start_time", "end_time", "active"})

    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: time | None = None
    end_time: time | None = None
    active: bool | None = None


class AvailabilityPublic(AvailabilityBase):
    id: int
