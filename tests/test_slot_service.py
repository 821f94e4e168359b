from datetime import date, time

import pytest

from app.models.appointment import AppointmentStatus, BookedSlot
from app.models.availability import Availability
from app.models.service import Service
from app.services.slot_service import (
    day_of_week,
    is_date_available,
    month_calendar,
    parse_slot,
    resolve_slots,
)

SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
TODAY = date(2030, 1, 1)


def _window(dow: int, start: time, end: time, active: bool = True) -> Availability:
    return Availability(day_of_week=dow, start_time=start, end_time=end, active=active)


def _service(duration: int) -> Service:
    return Service(id=1, name="Design de Sobrancelha", price=90.0, duration_minutes=duration)


def _booked(d: date, t: str, status: AppointmentStatus = AppointmentStatus.confirmed) -> BookedSlot:
    return BookedSlot(appointment_date=d, appointment_time=t, status=status)


MORNING = [_window(1, time(9), time(12))]


def test_day_of_week_counts_from_sunday() -> None:
    assert day_of_week(SUNDAY) == 0
    assert day_of_week(MONDAY) == 1
    assert day_of_week(date(2030, 1, 12)) == 6


def test_slots_fit_inside_window() -> None:
    assert resolve_slots(MONDAY, MORNING, [], _service(60)) == ["09:00", "09:30", "10:00", "10:30", "11:00"]


def test_confirmed_appointment_blocks_only_its_start_time() -> None:
    booked = [_booked(MONDAY, "10:00:00")]

    slots = resolve_slots(MONDAY, MORNING, booked, _service(60))

    assert slots == ["09:00", "09:30", "10:30", "11:00"]


def test_pending_appointment_blocks_slot() -> None:
    booked = [_booked(MONDAY, "09:30:00", AppointmentStatus.pending)]

    assert "09:30" not in resolve_slots(MONDAY, MORNING, booked, _service(60))


@pytest.mark.parametrize("status", [AppointmentStatus.cancelled, AppointmentStatus.completed])
def test_cancelled_and_completed_appointments_free_their_slot(status: AppointmentStatus) -> None:
    booked = [_booked(MONDAY, "10:00:00", status)]

    assert "10:00" in resolve_slots(MONDAY, MORNING, booked, _service(60))


def test_appointment_on_other_date_does_not_block() -> None:
    booked = [_booked(date(2030, 1, 14), "10:00:00")]

    assert "10:00" in resolve_slots(MONDAY, MORNING, booked, _service(60))


def test_overlapping_longer_booking_is_not_detected() -> None:
    # A 90 minute booking at 09:00 runs until 10:30, but only exact start times collide
    booked = [_booked(MONDAY, "09:00:00")]

    assert resolve_slots(MONDAY, MORNING, booked, _service(60))[:2] == ["09:30", "10:00"]


def test_without_service_there_are_no_slots() -> None:
    assert resolve_slots(MONDAY, MORNING, [], None) == []


def test_day_without_window_has_no_slots() -> None:
    assert resolve_slots(TUESDAY, MORNING, [], _service(30)) == []


def test_inactive_window_is_ignored() -> None:
    windows = [_window(1, time(9), time(12), active=False), _window(1, time(14), time(16))]

    assert resolve_slots(MONDAY, windows, [], _service(60)) == ["14:00", "14:30", "15:00"]


def test_first_active_window_of_the_day_wins() -> None:
    windows = [_window(1, time(9), time(11)), _window(1, time(14), time(18))]

    assert resolve_slots(MONDAY, windows, [], _service(30)) == ["09:00", "09:30", "10:00", "10:30"]


def test_long_service_last_start_ends_exactly_at_closing() -> None:
    windows = [_window(1, time(13), time(17))]

    slots = resolve_slots(MONDAY, windows, [], _service(90))

    assert slots == ["13:00", "13:30", "14:00", "14:30", "15:00", "15:30"]
    assert "16:00" not in slots


def test_window_minutes_are_ignored() -> None:
    windows = [_window(1, time(9, 15), time(12, 30))]

    assert resolve_slots(MONDAY, windows, [], _service(60)) == ["09:00", "09:30", "10:00", "10:30", "11:00"]


def test_service_longer_than_window_has_no_slots() -> None:
    assert resolve_slots(MONDAY, MORNING, [], _service(240)) == []


def test_resolver_is_idempotent() -> None:
    booked = [_booked(MONDAY, "10:30:00")]
    service = _service(30)

    first = resolve_slots(MONDAY, MORNING, booked, service)
    second = resolve_slots(MONDAY, MORNING, booked, service)

    assert first == second
    assert first == sorted(set(first))


def test_date_without_window_is_unavailable() -> None:
    assert is_date_available(TUESDAY, MORNING, today=TODAY) is False


def test_past_date_is_unavailable_even_with_window() -> None:
    assert is_date_available(date(2029, 12, 31), [_window(1, time(9), time(12))], today=TODAY) is False


def test_today_and_future_dates_with_window_are_available() -> None:
    windows = [_window(day_of_week(TODAY), time(9), time(12)), _window(1, time(9), time(12))]

    assert is_date_available(TODAY, windows, today=TODAY) is True
    assert is_date_available(MONDAY, windows, today=TODAY) is True


def test_inactive_window_does_not_make_date_available() -> None:
    assert is_date_available(MONDAY, [_window(1, time(9), time(12), active=False)], today=TODAY) is False


def test_month_calendar_marks_window_days() -> None:
    starting_day, days = month_calendar(2030, 1, MORNING, today=TODAY)

    assert starting_day == 2  # 2030-01-01 is a Tuesday
    assert len(days) == 31
    available = [d for d, ok in days if ok]
    assert available == [date(2030, 1, n) for n in (7, 14, 21, 28)]


def test_parse_slot_accepts_short_and_long_forms() -> None:
    assert parse_slot("10:30") == time(10, 30)
    assert parse_slot("10:30:00") == time(10, 30)
    with pytest.raises(ValueError):
        parse_slot("half past ten")
