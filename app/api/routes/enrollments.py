from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_lead_log, get_session
from app.api.schemas.enrollment import EnrollmentRequest, EnrollmentResponse
from app.services.lead_service import LeadLog, capture_lead

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll(
    body: EnrollmentRequest,
    session: AsyncSession = Depends(get_session),
    leads: LeadLog = Depends(get_lead_log),
) -> EnrollmentResponse:
    """Record a course lead and return the WhatsApp link that forwards it to the studio."""
    lead, url = await capture_lead(
        session,
        leads,
        name=body.name,
        email=body.email,
        phone=body.phone,
        course_id=body.course_id,
        message=body.message,
    )
    return EnrollmentResponse(whatsapp_url=url, lead=lead)
