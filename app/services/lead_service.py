"""Enrollment leads captured by the site's course sign-up form.

Leads are not persisted: they are kept for the lifetime of the process in a
LeadLog owned by the application and forwarded to the studio over WhatsApp.
"""
import logging
from datetime import UTC, datetime
from threading import Lock

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.services.catalog_service import get_course
from app.services.whatsapp_service import build_whatsapp_url, enrollment_message

logger = logging.getLogger(__name__)


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class EnrollmentLead(BaseModel):
    name: str
    email: str
    phone: str
    course_id: int
    course_title: str
    message: str | None = None
    received_at: datetime = Field(default_factory=_utc_naive_now)  # naive UTC, like the table timestamps


class LeadLog:
    """Append-only in-memory record of leads; nothing is ever evicted."""

    def __init__(self) -> None:
        self._leads: list[EnrollmentLead] = []
        self._lock = Lock()

    def append(self, lead: EnrollmentLead) -> None:
        with self._lock:
            self._leads.append(lead)

    def all(self) -> list[EnrollmentLead]:
        with self._lock:
            return list(self._leads)

    def __len__(self) -> int:
        with self._lock:
            return len(self._leads)


async def resolve_course_title(session: AsyncSession, course_id: int) -> str:
    """Course title for the lead message, or the raw id when the course is gone."""
    course = await get_course(session, course_id)
    return course.title if course else str(course_id)


async def capture_lead(
    session: AsyncSession,
    log: LeadLog,
    name: str,
    email: str,
    phone: str,
    course_id: int,
    message: str | None = None,
) -> tuple[EnrollmentLead, str]:
    """Record the lead and return it with the WhatsApp URL that hands it to the studio."""
    course_title = await resolve_course_title(session, course_id)
    lead = EnrollmentLead(
        name=name,
        email=email,
        phone=phone,
        course_id=course_id,
        course_title=course_title,
        message=message or None,
    )
    log.append(lead)
    logger.info("Enrollment lead captured for course %s (%d in log)", course_title, len(log))
    text = enrollment_message(lead.name, lead.email, lead.phone, course_title, lead.message)
    return lead, build_whatsapp_url(settings.whatsapp_phone, text)
