from datetime import UTC, date, datetime, time
from enum import Enum

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.models.patch import PatchModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


# Statuses that hold their slot; completed/cancelled bookings free it
OCCUPYING_STATUSES = (AppointmentStatus.pending, AppointmentStatus.confirmed)


class Appointment(SQLModel, table=True):
    """No unique index on (appointment_date, appointment_time): concurrent
    bookings of the same slot are not prevented at the store level."""

    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    service_id: int = Field(foreign_key="services.id", index=True)
    appointment_date: date = Field(index=True)
    appointment_time: time
    status: AppointmentStatus = AppointmentStatus.pending
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class BookedSlot(SQLModel):
    """Existing appointment as seen by the slot resolver."""

    appointment_date: date
    appointment_time: time
    status: AppointmentStatus = AppointmentStatus.pending

    @property
    def occupies_slot(self) -> bool:
        return self.status in OCCUPYING_STATUSES


class AppointmentUpdate(PatchModel):
    not_null_fields = frozenset({"appointment_date", "appointment_time", "status"})

    appointment_date: date | None = None
    appointment_time: time | None = None
    status: AppointmentStatus | None = None
    notes: str | None = None


class AppointmentPublic(SQLModel):
    id: int
    client_id: int
    service_id: int
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    notes: str | None = None
    created_at: datetime
