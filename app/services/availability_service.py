from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.availability import Availability, AvailabilityCreate, AvailabilityUpdate
from app.services.catalog_service import apply_update


async def list_windows(session: AsyncSession) -> list[Availability]:
    result = await session.execute(
        select(Availability).order_by(Availability.day_of_week, Availability.start_time, Availability.id)
    )
    return list(result.scalars().all())


async def create_window(session: AsyncSession, data: AvailabilityCreate) -> Availability:
    window = Availability.model_validate(data)
    session.add(window)
    await session.flush()
    await session.refresh(window)
    return window


async def update_window(
    session: AsyncSession, window_id: int, data: AvailabilityUpdate
) -> Availability | None:
    """Returns None when the window does not exist; raises ValueError on inverted bounds."""
    window = await session.get(Availability, window_id)
    if not window:
        return None
    apply_update(window, data)
    if window.end_time <= window.start_time:
        raise ValueError("end_time must be after start_time")
    session.add(window)
    await session.flush()
    await session.refresh(window)
    return window


async def delete_window(session: AsyncSession, window_id: int) -> bool:
    window = await session.get(Availability, window_id)
    if not window:
        return False
    await session.delete(window)
    await session.flush()
    return True
