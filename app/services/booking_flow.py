"""Server-side walk through the booking steps.

SELECTING_SERVICE -> SELECTING_DATE_TIME -> ENTERING_DETAILS -> SUBMITTED

A request to book is replayed through the same steps the booking page
takes, so a date or slot the page would not have offered is refused here
too. SUBMITTED is terminal.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment, AppointmentStatus, BookedSlot
from app.models.availability import AvailabilityBase
from app.models.client import Client
from app.models.service import Service
from app.services.catalog_service import get_service
from app.services.slot_service import (
    format_slot,
    get_active_windows,
    get_occupying_appointments,
    is_date_available,
    parse_slot,
    resolve_slots,
)

logger = logging.getLogger(__name__)


class BookingStep(str, Enum):
    selecting_service = "selecting_service"
    selecting_date_time = "selecting_date_time"
    entering_details = "entering_details"
    submitted = "submitted"


class BookingFlowError(Exception):
    """Transition attempted out of order or with invalid input."""


class ServiceNotFoundError(BookingFlowError):
    pass


class SlotUnavailableError(BookingFlowError):
    """Date cannot be picked or the time is not among the bookable slots."""


@dataclass
class ClientDetails:
    name: str
    email: str
    phone: str


@dataclass
class BookingFlow:
    step: BookingStep = BookingStep.selecting_service
    service: Service | None = None
    appointment_date: date | None = None
    appointment_time: time | None = None
    client: ClientDetails | None = None
    appointment: Appointment | None = field(default=None, repr=False)

    def _ensure_not_submitted(self) -> None:
        if self.step == BookingStep.submitted:
            raise BookingFlowError("Booking already submitted")

    def select_service(self, service: Service) -> None:
        """Choosing a service (again) discards any date, time and details picked so far."""
        self._ensure_not_submitted()
        if not service.active:
            raise ServiceNotFoundError("Service is not available for booking")
        self.service = service
        self.appointment_date = None
        self.appointment_time = None
        self.client = None
        self.step = BookingStep.selecting_date_time

    def select_date_time(
        self,
        d: date,
        slot: str,
        windows: Sequence[AvailabilityBase],
        booked: Sequence[BookedSlot],
        today: date | None = None,
    ) -> None:
        self._ensure_not_submitted()
        if self.service is None:
            raise BookingFlowError("Choose a service first")
        if not is_date_available(d, windows, today):
            raise SlotUnavailableError("Date is not available for booking")
        try:
            slot_time = parse_slot(slot)
        except ValueError as e:
            raise BookingFlowError(f"Invalid time: {slot}") from e
        if slot_time.second or slot_time.microsecond:
            raise SlotUnavailableError("Time slot is not available")
        if format_slot(slot_time.hour, slot_time.minute) not in resolve_slots(d, windows, booked, self.service):
            raise SlotUnavailableError("Time slot is not available")
        self.appointment_date = d
        self.appointment_time = slot_time
        self.step = BookingStep.entering_details

    def enter_details(self, client: ClientDetails) -> None:
        self._ensure_not_submitted()
        if self.step != BookingStep.entering_details:
            raise BookingFlowError("Choose a date and time first")
        self.client = client

    async def submit(self, session: AsyncSession) -> Appointment:
        """Persist client and confirmed appointment, then move to SUBMITTED.

        Store errors propagate and leave the flow in ENTERING_DETAILS. Nothing
        makes a resubmission idempotent, so a retry after a failure that did
        reach the database can create a second row.
        """
        self._ensure_not_submitted()
        if (
            self.step != BookingStep.entering_details
            or self.client is None
            or self.service is None
            or self.appointment_date is None
            or self.appointment_time is None
        ):
            raise BookingFlowError("Booking details are incomplete")

        # The slot may have been taken since the page loaded. Without a lock or
        # unique index two concurrent submits can still both get through.
        booked = await get_occupying_appointments(session, self.appointment_date)
        if any(b.appointment_time == self.appointment_time for b in booked):
            raise SlotUnavailableError("Time slot is no longer available")

        client = Client(
            name=self.client.name,
            email=self.client.email,
            phone=self.client.phone,
        )
        session.add(client)
        await session.flush()
        await session.refresh(client)

        appointment = Appointment(
            client_id=client.id,
            service_id=self.service.id,
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            status=AppointmentStatus.confirmed,
        )
        session.add(appointment)
        await session.flush()
        await session.refresh(appointment)

        self.appointment = appointment
        self.step = BookingStep.submitted
        logger.info(
            "Appointment %s booked: service=%s date=%s time=%s",
            appointment.id,
            self.service.id,
            self.appointment_date.isoformat(),
            format_slot(self.appointment_time.hour, self.appointment_time.minute),
        )
        return appointment


async def book_appointment(
    session: AsyncSession,
    service_id: int,
    d: date,
    slot: str,
    client: ClientDetails,
) -> BookingFlow:
    """Run a complete booking; raises BookingFlowError subclasses on refusal."""
    flow = BookingFlow()
    service = await get_service(session, service_id)
    if service is None:
        raise ServiceNotFoundError("Service not found")
    flow.select_service(service)

    windows = await get_active_windows(session)
    booked = await get_occupying_appointments(session, d)
    flow.select_date_time(d, slot, windows, booked)
    flow.enter_details(client)
    await flow.submit(session)
    return flow
