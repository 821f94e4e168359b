from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.booking import WhatsAppLink
from app.content import FAQ_ITEMS, TESTIMONIALS, FAQItem, Testimonial
from app.models.combo import ComboPublic
from app.models.course import CoursePublic
from app.models.service import ServicePublic
from app.services.catalog_service import list_combos, list_courses, list_services
from app.services.whatsapp_service import contact_url

router = APIRouter(tags=["catalog"])


@router.get("/services", response_model=list[ServicePublic])
async def public_services(session: AsyncSession = Depends(get_session)) -> list[ServicePublic]:
    """Bookable services, grouped by category."""
    return [ServicePublic.model_validate(s) for s in await list_services(session, active_only=True)]


@router.get("/courses", response_model=list[CoursePublic])
async def public_courses(session: AsyncSession = Depends(get_session)) -> list[CoursePublic]:
    return [CoursePublic.model_validate(c) for c in await list_courses(session, active_only=True)]


@router.get("/combos", response_model=list[ComboPublic])
async def public_combos(session: AsyncSession = Depends(get_session)) -> list[ComboPublic]:
    return await list_combos(session, active_only=True)


@router.get("/content/testimonials", response_model=list[Testimonial])
async def testimonials() -> list[Testimonial]:
    return TESTIMONIALS


@router.get("/content/faq", response_model=list[FAQItem])
async def faq() -> list[FAQItem]:
    return FAQ_ITEMS


@router.get("/contact/whatsapp", response_model=WhatsAppLink)
async def whatsapp_contact() -> WhatsAppLink:
    return WhatsAppLink(url=contact_url())
