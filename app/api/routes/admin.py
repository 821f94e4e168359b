"""Admin dashboard endpoints. Every route requires an admin bearer token."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_admin, get_lead_log, get_session
from app.api.schemas.booking import AppointmentAdminPublic, ServiceSummary, WhatsAppLink
from app.models.appointment import Appointment, AppointmentPublic, AppointmentStatus, AppointmentUpdate
from app.models.availability import AvailabilityCreate, AvailabilityPublic, AvailabilityUpdate
from app.models.client import Client, ClientPublic
from app.models.combo import ComboCreate, ComboPublic, ComboUpdate
from app.models.course import CourseCreate, CoursePublic, CourseUpdate
from app.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate
from app.services import appointment_service, availability_service, catalog_service
from app.services.lead_service import EnrollmentLead, LeadLog
from app.services.whatsapp_service import appointment_url

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


# --- Services ---

@router.get("/services", response_model=list[ServicePublic])
async def list_services(session: AsyncSession = Depends(get_session)) -> list[ServicePublic]:
    return [ServicePublic.model_validate(s) for s in await catalog_service.list_services(session)]


@router.post("/services", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def create_service(
    body: ServiceCreate, session: AsyncSession = Depends(get_session)
) -> ServicePublic:
    service = await catalog_service.create_service(session, body)
    logger.info("Service %s created", service.id)
    return ServicePublic.model_validate(service)


@router.patch("/services/{service_id}", response_model=ServicePublic)
async def update_service(
    service_id: int, body: ServiceUpdate, session: AsyncSession = Depends(get_session)
) -> ServicePublic:
    service = await catalog_service.update_service(session, service_id, body)
    if not service:
        raise _not_found("Service")
    return ServicePublic.model_validate(service)


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(service_id: int, session: AsyncSession = Depends(get_session)) -> None:
    try:
        deleted = await catalog_service.delete_service(session, service_id)
    except IntegrityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service has appointments. Deactivate it instead.",
        ) from e
    if not deleted:
        raise _not_found("Service")


# --- Courses ---

@router.get("/courses", response_model=list[CoursePublic])
async def list_courses(session: AsyncSession = Depends(get_session)) -> list[CoursePublic]:
    return [CoursePublic.model_validate(c) for c in await catalog_service.list_courses(session)]


@router.post("/courses", response_model=CoursePublic, status_code=status.HTTP_201_CREATED)
async def create_course(
    body: CourseCreate, session: AsyncSession = Depends(get_session)
) -> CoursePublic:
    course = await catalog_service.create_course(session, body)
    logger.info("Course %s created", course.id)
    return CoursePublic.model_validate(course)


@router.patch("/courses/{course_id}", response_model=CoursePublic)
async def update_course(
    course_id: int, body: CourseUpdate, session: AsyncSession = Depends(get_session)
) -> CoursePublic:
    course = await catalog_service.update_course(session, course_id, body)
    if not course:
        raise _not_found("Course")
    return CoursePublic.model_validate(course)


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: int, session: AsyncSession = Depends(get_session)) -> None:
    if not await catalog_service.delete_course(session, course_id):
        raise _not_found("Course")


# --- Combos ---

@router.get("/combos", response_model=list[ComboPublic])
async def list_combos(session: AsyncSession = Depends(get_session)) -> list[ComboPublic]:
    return await catalog_service.list_combos(session)


@router.post("/combos", response_model=ComboPublic, status_code=status.HTTP_201_CREATED)
async def create_combo(body: ComboCreate, session: AsyncSession = Depends(get_session)) -> ComboPublic:
    combo = await catalog_service.create_combo(session, body)
    logger.info("Combo %s created with %d service(s)", combo.id, len(combo.services))
    return combo


@router.patch("/combos/{combo_id}", response_model=ComboPublic)
async def update_combo(
    combo_id: int, body: ComboUpdate, session: AsyncSession = Depends(get_session)
) -> ComboPublic:
    combo = await catalog_service.update_combo(session, combo_id, body)
    if not combo:
        raise _not_found("Combo")
    return combo


@router.delete("/combos/{combo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_combo(combo_id: int, session: AsyncSession = Depends(get_session)) -> None:
    if not await catalog_service.delete_combo(session, combo_id):
        raise _not_found("Combo")


# --- Availability windows ---

@router.get("/availability", response_model=list[AvailabilityPublic])
async def list_availability(session: AsyncSession = Depends(get_session)) -> list[AvailabilityPublic]:
    return [AvailabilityPublic.model_validate(w) for w in await availability_service.list_windows(session)]


@router.post("/availability", response_model=AvailabilityPublic, status_code=status.HTTP_201_CREATED)
async def create_availability(
    body: AvailabilityCreate, session: AsyncSession = Depends(get_session)
) -> AvailabilityPublic:
    window = await availability_service.create_window(session, body)
    return AvailabilityPublic.model_validate(window)


@router.patch("/availability/{window_id}", response_model=AvailabilityPublic)
async def update_availability(
    window_id: int, body: AvailabilityUpdate, session: AsyncSession = Depends(get_session)
) -> AvailabilityPublic:
    try:
        window = await availability_service.update_window(session, window_id, body)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if not window:
        raise _not_found("Availability window")
    return AvailabilityPublic.model_validate(window)


@router.delete("/availability/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(window_id: int, session: AsyncSession = Depends(get_session)) -> None:
    if not await availability_service.delete_window(session, window_id):
        raise _not_found("Availability window")


# --- Appointments ---

def _to_admin_public(a: Appointment, client: Client, service: Service) -> AppointmentAdminPublic:
    return AppointmentAdminPublic(
        id=a.id,
        appointment_date=a.appointment_date,
        appointment_time=a.appointment_time,
        status=a.status,
        notes=a.notes,
        created_at=a.created_at,
        client=ClientPublic(id=client.id, name=client.name, email=client.email, phone=client.phone),
        service=ServiceSummary(
            id=service.id,
            name=service.name,
            price=service.price,
            duration_minutes=service.duration_minutes,
        ),
    )


@router.get("/appointments", response_model=list[AppointmentAdminPublic])
async def list_appointments(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
) -> list[AppointmentAdminPublic]:
    rows = await appointment_service.list_appointments_with_details(session, status=status_filter)
    return [_to_admin_public(a, c, s) for a, c, s in rows]


@router.patch("/appointments/{appointment_id}", response_model=AppointmentPublic)
async def update_appointment(
    appointment_id: int, body: AppointmentUpdate, session: AsyncSession = Depends(get_session)
) -> AppointmentPublic:
    appointment = await appointment_service.update_appointment(session, appointment_id, body)
    if not appointment:
        raise _not_found("Appointment")
    logger.info("Appointment %s updated (status=%s)", appointment.id, appointment.status)
    return AppointmentPublic.model_validate(appointment)


@router.delete("/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(appointment_id: int, session: AsyncSession = Depends(get_session)) -> None:
    if not await appointment_service.delete_appointment(session, appointment_id):
        raise _not_found("Appointment")


@router.get("/appointments/{appointment_id}/whatsapp", response_model=WhatsAppLink)
async def appointment_whatsapp(
    appointment_id: int, session: AsyncSession = Depends(get_session)
) -> WhatsAppLink:
    """Link that opens a chat with the client, prefilled with the appointment details."""
    row = await appointment_service.get_appointment_with_details(session, appointment_id)
    if not row:
        raise _not_found("Appointment")
    appointment, client, service = row
    if not client.phone:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Client has no phone number")
    url = appointment_url(
        client.phone,
        client.name,
        service.name,
        appointment.appointment_date,
        appointment.appointment_time,
    )
    return WhatsAppLink(url=url)


# --- Leads ---

@router.get("/enrollments", response_model=list[EnrollmentLead])
async def list_enrollments(leads: LeadLog = Depends(get_lead_log)) -> list[EnrollmentLead]:
    """Leads captured since the process started."""
    return leads.all()
