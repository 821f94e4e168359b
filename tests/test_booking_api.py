from datetime import date, time, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.models.appointment import Appointment, AppointmentStatus
from app.models.availability import Availability
from app.models.client import Client
from app.models.service import Service
from app.services.slot_service import studio_today

BOOKING_URL = "/api/v1/appointments"


def _payload(service_id: int, d: date, slot: str = "10:00", **overrides) -> dict:
    body = {
        "service_id": service_id,
        "appointment_date": d.isoformat(),
        "appointment_time": slot,
        "name": "Fernanda Lima",
        "email": "Fernanda.Lima@Gmail.com",
        "phone": "(11) 98765-4321",
    }
    body.update(overrides)
    return body


def _count(run_db, model) -> int:
    async def _q(session):
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()

    return run_db(_q)


# --- Slot endpoints ---

def test_available_slots_for_open_day(client, open_every_day, facial, booking_date) -> None:
    response = client.get(
        "/api/v1/slots/available",
        params={"date": booking_date.isoformat(), "service_id": facial.id},
    )

    assert response.status_code == 200
    assert response.json() == {
        "date": booking_date.isoformat(),
        "service_id": facial.id,
        "slots": ["09:00", "09:30", "10:00", "10:30", "11:00"],
    }


def test_available_slots_unknown_service_is_empty(client, open_every_day, booking_date) -> None:
    response = client.get(
        "/api/v1/slots/available", params={"date": booking_date.isoformat(), "service_id": 999}
    )

    assert response.status_code == 200
    assert response.json()["slots"] == []


def test_available_slots_inactive_service_is_empty(client, open_every_day, add_rows, booking_date) -> None:
    (service,) = add_rows(Service(name="Peeling", price=200.0, duration_minutes=30, active=False))

    response = client.get(
        "/api/v1/slots/available", params={"date": booking_date.isoformat(), "service_id": service.id}
    )

    assert response.json()["slots"] == []


def test_available_slots_past_date_is_empty(client, open_every_day, facial) -> None:
    yesterday = studio_today() - timedelta(days=1)

    response = client.get(
        "/api/v1/slots/available", params={"date": yesterday.isoformat(), "service_id": facial.id}
    )

    assert response.json()["slots"] == []


def test_available_slots_requires_params(client) -> None:
    assert client.get("/api/v1/slots/available", params={"date": "2030-01-07"}).status_code == 422
    assert client.get("/api/v1/slots/available", params={"date": "07/01/2030", "service_id": 1}).status_code == 422


def test_calendar_marks_open_weekdays(client, add_rows) -> None:
    add_rows(Availability(day_of_week=1, start_time=time(9), end_time=time(18)))
    year = studio_today().year + 1

    response = client.get("/api/v1/slots/calendar", params={"year": year, "month": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["year"] == year and body["month"] == 3
    assert len(body["days"]) == 31
    first = date(year, 3, 1)
    assert body["starting_day"] == (first.weekday() + 1) % 7
    for day in body["days"]:
        d = date.fromisoformat(day["date"])
        assert day["available"] is (d.weekday() == 0)


def test_calendar_rejects_bad_month(client) -> None:
    assert client.get("/api/v1/slots/calendar", params={"year": 2030, "month": 13}).status_code == 422


# --- Booking ---

def test_booking_creates_confirmed_appointment(client, run_db, open_every_day, facial, booking_date) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date))

    assert response.status_code == 201
    body = response.json()
    assert body["appointment_id"] is not None
    assert body["service_name"] == "Limpeza de Pele"
    assert body["appointment_date"] == booking_date.isoformat()
    assert body["appointment_time"] == "10:00"
    assert body["duration_minutes"] == 60
    assert body["price"] == 180.0
    assert body["status"] == "confirmed"

    async def _load(session):
        appointment = await session.get(Appointment, body["appointment_id"])
        client_row = await session.get(Client, appointment.client_id)
        return appointment, client_row

    appointment, client_row = run_db(_load)
    assert appointment.status == AppointmentStatus.confirmed
    assert appointment.appointment_time == time(10)
    assert client_row.name == "Fernanda Lima"
    assert client_row.email == "fernanda.lima@gmail.com"


def test_booked_slot_disappears_and_cannot_be_booked_twice(
    client, run_db, open_every_day, facial, booking_date
) -> None:
    assert client.post(BOOKING_URL, json=_payload(facial.id, booking_date)).status_code == 201

    slots = client.get(
        "/api/v1/slots/available",
        params={"date": booking_date.isoformat(), "service_id": facial.id},
    ).json()["slots"]
    assert "10:00" not in slots

    second = client.post(BOOKING_URL, json=_payload(facial.id, booking_date, email="outra@gmail.com"))
    assert second.status_code == 409
    assert _count(run_db, Appointment) == 1


def test_cancelled_appointment_frees_slot(client, add_rows, open_every_day, facial, booking_date) -> None:
    (other,) = add_rows(Client(name="Ana", email="ana@hotmail.com", phone="11911112222"))
    add_rows(
        Appointment(
            client_id=other.id,
            service_id=facial.id,
            appointment_date=booking_date,
            appointment_time=time(10),
            status=AppointmentStatus.cancelled,
        )
    )

    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date))

    assert response.status_code == 201


def test_booking_unknown_service_is_404(client, open_every_day, booking_date) -> None:
    response = client.post(BOOKING_URL, json=_payload(4242, booking_date))

    assert response.status_code == 404


def test_booking_time_not_offered_is_409(client, run_db, open_every_day, facial, booking_date) -> None:
    # 11:30 + 60 minutes runs past the 12:00 closing
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date, slot="11:30"))

    assert response.status_code == 409
    assert _count(run_db, Client) == 0


def test_booking_on_closed_day_is_409(client, facial, booking_date) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date))

    assert response.status_code == 409


def test_booking_in_the_past_is_409(client, open_every_day, facial) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, studio_today() - timedelta(days=2)))

    assert response.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "M"},
        {"name": "Maria 2"},
        {"name": "x" * 101},
        {"email": "not-an-email"},
        {"phone": "12345"},
        {"phone": "(11) 8765-43210"},
        {"appointment_time": "9:00"},
        {"appointment_date": "amanhã"},
    ],
)
def test_invalid_client_data_is_422(client, run_db, open_every_day, facial, booking_date, overrides) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date, **overrides))

    assert response.status_code == 422
    assert _count(run_db, Appointment) == 0


@pytest.mark.parametrize("phone", ["(11) 98765-4321", "11987654321", "1187654321", "(11)8765-4321"])
def test_accepted_phone_formats(client, open_every_day, facial, booking_date, phone) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date, phone=phone))

    assert response.status_code == 201


def test_accented_names_are_accepted(client, open_every_day, facial, booking_date) -> None:
    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date, name="  Ângela Conceição  "))

    assert response.status_code == 201


def test_honeypot_gets_confirmation_but_nothing_is_stored(
    client, run_db, open_every_day, facial, booking_date
) -> None:
    response = client.post(
        BOOKING_URL, json=_payload(facial.id, booking_date, website="https://spam.example.com")
    )

    assert response.status_code == 201
    body = response.json()
    assert body["appointment_id"] is None
    assert body["service_name"] == "Limpeza de Pele"
    assert body["status"] == "confirmed"
    assert _count(run_db, Appointment) == 0
    assert _count(run_db, Client) == 0


def test_store_failure_is_503(client, monkeypatch, open_every_day, facial, booking_date) -> None:
    async def _broken(*args, **kwargs):
        raise OperationalError("INSERT INTO appointments", {}, Exception("connection reset"))

    monkeypatch.setattr("app.api.routes.appointments.book_appointment", _broken)

    response = client.post(BOOKING_URL, json=_payload(facial.id, booking_date))

    assert response.status_code == 503
    assert "WhatsApp" in response.json()["detail"]
