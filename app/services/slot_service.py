"""Bookable slot calculation.

The resolver functions are pure: they work on already-loaded availability
windows and booked slots and never touch the database. The async loaders at
the bottom fetch those inputs and convert rows into typed records.
"""
import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import OCCUPYING_STATUSES, Appointment, BookedSlot
from app.models.availability import Availability, AvailabilityBase
from app.models.service import Service

SLOT_STEP_MINUTES = 30


def studio_today() -> date:
    return datetime.now(ZoneInfo(settings.studio_timezone)).date()


def day_of_week(d: date) -> int:
    """0=Sunday .. 6=Saturday, the convention stored in availability.day_of_week."""
    return (d.weekday() + 1) % 7


def format_slot(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def parse_slot(value: str) -> time:
    """Parse an "HH:MM" (or "HH:MM:SS") slot string. Raises ValueError on bad input."""
    return time.fromisoformat(value.strip())


def find_window(d: date, windows: Iterable[AvailabilityBase]) -> AvailabilityBase | None:
    """First active window for the weekday of d; later windows for the same day are ignored."""
    dow = day_of_week(d)
    for window in windows:
        if window.active and window.day_of_week == dow:
            return window
    return None


def is_date_available(
    d: date, windows: Iterable[AvailabilityBase], today: date | None = None
) -> bool:
    """Whether d can be picked in the booking calendar.

    Past dates and weekdays without an active window are rejected. Service
    duration and existing bookings are not considered here.
    """
    if today is None:
        today = studio_today()
    if d < today:
        return False
    return find_window(d, windows) is not None


def resolve_slots(
    d: date,
    windows: Sequence[AvailabilityBase],
    appointments: Iterable[BookedSlot],
    service: Service | None,
) -> list[str]:
    """Return the bookable "HH:MM" start times for service on d, ascending.

    Candidates start at the window's start hour and advance in 30-minute
    steps up to (excluding) its end hour. Only the hour part of the window
    bounds counts: 09:15-12:00 behaves like 09:00-12:00 and a 17:30 end
    closes at 17:00. A candidate is dropped when it would run past closing
    or when a pending/confirmed appointment starts at exactly that time.
    Overlap with longer bookings that started earlier is not checked.
    """
    if service is None:
        return []
    window = find_window(d, windows)
    if window is None:
        return []

    start_hour = window.start_time.hour
    end_hour = window.end_time.hour
    closing_minutes = end_hour * 60
    booked_times = {
        a.appointment_time
        for a in appointments
        if a.appointment_date == d and a.occupies_slot
    }

    slots: list[str] = []
    for hour in range(start_hour, end_hour):
        for minute in range(0, 60, SLOT_STEP_MINUTES):
            end_minutes = hour * 60 + minute + service.duration_minutes
            if end_minutes > closing_minutes:
                continue
            if time(hour, minute) in booked_times:
                continue
            slots.append(format_slot(hour, minute))
    return slots


def month_calendar(
    year: int,
    month: int,
    windows: Sequence[AvailabilityBase],
    today: date | None = None,
) -> tuple[int, list[tuple[date, bool]]]:
    """Return (weekday of the 1st, [(day, available), ...]) for a month grid."""
    if today is None:
        today = studio_today()
    _, days_in_month = calendar.monthrange(year, month)
    days = [date(year, month, n) for n in range(1, days_in_month + 1)]
    return day_of_week(days[0]), [(d, is_date_available(d, windows, today)) for d in days]


async def get_active_windows(session: AsyncSession) -> list[Availability]:
    result = await session.execute(
        select(Availability)
        .where(Availability.active == True)  # noqa: E712
        .order_by(Availability.id)
    )
    return list(result.scalars().all())


async def get_occupying_appointments(session: AsyncSession, d: date) -> list[BookedSlot]:
    result = await session.execute(
        select(Appointment.appointment_date, Appointment.appointment_time, Appointment.status).where(
            Appointment.appointment_date == d,
            Appointment.status.in_(OCCUPYING_STATUSES),
        )
    )
    return [
        BookedSlot(appointment_date=row[0], appointment_time=row[1], status=row[2])
        for row in result.all()
    ]


async def get_available_slots_for_date(
    session: AsyncSession, d: date, service: Service | None
) -> list[str]:
    """Slots for d as the booking page shows them; [] when d cannot be picked."""
    if service is None:
        return []
    windows = await get_active_windows(session)
    if not is_date_available(d, windows):
        return []
    booked = await get_occupying_appointments(session, d)
    return resolve_slots(d, windows, booked, service)
