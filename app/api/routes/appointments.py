import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.booking import BookAppointmentRequest, BookingConfirmation
from app.models.appointment import AppointmentStatus
from app.services.booking_flow import (
    BookingFlow,
    BookingFlowError,
    ClientDetails,
    ServiceNotFoundError,
    SlotUnavailableError,
    book_appointment,
)
from app.services.catalog_service import get_service
from app.services.slot_service import format_slot

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

BOOKING_FAILED_DETAIL = "Could not complete the booking. Try again or contact us on WhatsApp."


def _to_confirmation(flow: BookingFlow) -> BookingConfirmation:
    appointment = flow.appointment
    return BookingConfirmation(
        appointment_id=appointment.id,
        service_name=flow.service.name,
        appointment_date=appointment.appointment_date,
        appointment_time=format_slot(appointment.appointment_time.hour, appointment.appointment_time.minute),
        duration_minutes=flow.service.duration_minutes,
        price=flow.service.price,
        status=appointment.status,
    )


@router.post("", response_model=BookingConfirmation, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
) -> BookingConfirmation:
    if body.website:
        # Bots get the same answer as people; nothing is stored
        logger.info("Honeypot filled, discarding booking request")
        service = await get_service(session, body.service_id)
        return BookingConfirmation(
            service_name=service.name if service else "",
            appointment_date=body.appointment_date,
            appointment_time=body.appointment_time,
            duration_minutes=service.duration_minutes if service else 0,
            price=service.price if service else 0,
            status=AppointmentStatus.confirmed,
        )

    client = ClientDetails(name=body.name, email=body.email, phone=body.phone)
    try:
        flow = await book_appointment(
            session, body.service_id, body.appointment_date, body.appointment_time, client
        )
        await session.commit()
    except ServiceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except SlotUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except BookingFlowError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except SQLAlchemyError as e:
        logger.exception("Booking failed: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=BOOKING_FAILED_DETAIL) from e
    return _to_confirmation(flow)
