import re
from datetime import date, datetime, time

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.appointment import AppointmentStatus
from app.models.client import ClientPublic

NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s]+$")
PHONE_PATTERN = re.compile(r"^\(?\d{2}\)?\s?9?\d{4}-?\d{4}$", re.ASCII)
SLOT_PATTERN = r"^\d{2}:\d{2}$"


class ClientData(BaseModel):
    name: str
    email: EmailStr
    phone: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must have at least 2 characters")
        if len(value) > 100:
            raise ValueError("Name must have at most 100 characters")
        if not NAME_PATTERN.match(value):
            raise ValueError("Name must contain only letters")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_length(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if len(value) > 255:
                raise ValueError("Email must have at most 255 characters")
        return value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone. Use the format (XX) 9XXXX-XXXX")
        return value


class BookAppointmentRequest(ClientData):
    service_id: int
    appointment_date: date
    appointment_time: str = Field(pattern=SLOT_PATTERN, examples=["10:30"])
    # Honeypot: hidden from people, filled in by bots
    website: str = ""


class BookingConfirmation(BaseModel):
    appointment_id: int | None = None
    service_name: str
    appointment_date: date
    appointment_time: str
    duration_minutes: int
    price: float
    status: AppointmentStatus


class ServiceSummary(BaseModel):
    id: int
    name: str
    price: float
    duration_minutes: int


class AppointmentAdminPublic(BaseModel):
    id: int
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    notes: str | None = None
    created_at: datetime
    client: ClientPublic
    service: ServiceSummary


class AvailableSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    service_id: int
    slots: list[str]


class CalendarDay(BaseModel):
    date: date
    available: bool


class MonthCalendarResponse(BaseModel):
    year: int
    month: int
    starting_day: int  # weekday of the 1st, 0=Sunday
    days: list[CalendarDay]


class WhatsAppLink(BaseModel):
    url: str
