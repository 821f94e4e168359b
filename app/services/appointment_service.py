from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment, AppointmentStatus, AppointmentUpdate
from app.models.client import Client
from app.models.service import Service
from app.services.catalog_service import apply_update

# Shown in the admin list when the related row has been deleted
MISSING_CLIENT_NAME = "Cliente não encontrado"
MISSING_SERVICE_NAME = "Serviço não encontrado"


def _placeholder_client(client_id: int) -> Client:
    return Client(id=client_id, name=MISSING_CLIENT_NAME, email="", phone="")


def _placeholder_service(service_id: int) -> Service:
    return Service(id=service_id, name=MISSING_SERVICE_NAME, price=0, duration_minutes=0)


async def list_appointments_with_details(
    session: AsyncSession, status: AppointmentStatus | None = None
) -> list[tuple[Appointment, Client, Service]]:
    """Newest dates first, earliest time first within a day."""
    q = (
        select(Appointment, Client, Service)
        .outerjoin(Client, Client.id == Appointment.client_id)
        .outerjoin(Service, Service.id == Appointment.service_id)
        .order_by(Appointment.appointment_date.desc(), Appointment.appointment_time.asc(), Appointment.id)
    )
    if status is not None:
        q = q.where(Appointment.status == status)
    result = await session.execute(q)
    return [
        (a, c or _placeholder_client(a.client_id), s or _placeholder_service(a.service_id))
        for a, c, s in result.all()
    ]


async def get_appointment_with_details(
    session: AsyncSession, appointment_id: int
) -> tuple[Appointment, Client, Service] | None:
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        return None
    client = await session.get(Client, appointment.client_id)
    service = await session.get(Service, appointment.service_id)
    return (
        appointment,
        client or _placeholder_client(appointment.client_id),
        service or _placeholder_service(appointment.service_id),
    )


async def update_appointment(
    session: AsyncSession, appointment_id: int, data: AppointmentUpdate
) -> Appointment | None:
    """Admin edit; no availability check, staff may place bookings anywhere."""
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        return None
    apply_update(appointment, data)
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


async def delete_appointment(session: AsyncSession, appointment_id: int) -> bool:
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        return False
    await session.delete(appointment)
    await session.flush()
    return True
