from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.booking import AvailableSlotsResponse, CalendarDay, MonthCalendarResponse
from app.services.catalog_service import get_service
from app.services.slot_service import get_active_windows, get_available_slots_for_date, month_calendar

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/calendar", response_model=MonthCalendarResponse)
async def calendar_month(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    session: AsyncSession = Depends(get_session),
) -> MonthCalendarResponse:
    """Days of the month with whether each one can be picked for booking."""
    windows = await get_active_windows(session)
    starting_day, days = month_calendar(year, month, windows)
    return MonthCalendarResponse(
        year=year,
        month=month,
        starting_day=starting_day,
        days=[CalendarDay(date=d, available=available) for d, available in days],
    )


@router.get("/available", response_model=AvailableSlotsResponse)
async def available_slots(
    date_param: date = Query(..., alias="date"),
    service_id: int = Query(...),
    session: AsyncSession = Depends(get_session),
) -> AvailableSlotsResponse:
    """Bookable start times ("HH:MM") for the service on the given date.

    Unknown or inactive services and dates that cannot be picked yield an empty list.
    """
    service = await get_service(session, service_id)
    if service is not None and not service.active:
        service = None
    slots = await get_available_slots_for_date(session, date_param, service)
    return AvailableSlotsResponse(
        date=date_param.isoformat(),
        service_id=service_id,
        slots=slots,
    )
