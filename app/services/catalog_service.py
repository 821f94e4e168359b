from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.models.combo import (
    Combo,
    ComboCreate,
    ComboPublic,
    ComboService,
    ComboServiceBase,
    ComboUpdate,
)
from app.models.course import Course, CourseCreate, CourseUpdate
from app.models.service import Service, ServiceCreate, ServiceUpdate


def _utc_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def apply_update(row: SQLModel, data: SQLModel, exclude: set[str] | None = None) -> None:
    """Copy only the fields the client actually sent onto row."""
    row.sqlmodel_update(data.model_dump(exclude_unset=True, exclude=exclude))


# --- Services ---

async def list_services(session: AsyncSession, active_only: bool = False) -> list[Service]:
    q = select(Service)
    if active_only:
        q = q.where(Service.active == True).order_by(Service.category, Service.name)  # noqa: E712
    else:
        q = q.order_by(Service.name)
    result = await session.execute(q)
    return list(result.scalars().all())


async def get_service(session: AsyncSession, service_id: int) -> Service | None:
    return await session.get(Service, service_id)


async def create_service(session: AsyncSession, data: ServiceCreate) -> Service:
    service = Service.model_validate(data)
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def update_service(
    session: AsyncSession, service_id: int, data: ServiceUpdate
) -> Service | None:
    service = await session.get(Service, service_id)
    if not service:
        return None
    apply_update(service, data)
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def delete_service(session: AsyncSession, service_id: int) -> bool:
    service = await session.get(Service, service_id)
    if not service:
        return False
    await session.delete(service)
    await session.flush()
    return True


# --- Courses ---

async def list_courses(session: AsyncSession, active_only: bool = False) -> list[Course]:
    q = select(Course).order_by(Course.created_at, Course.id)
    if active_only:
        q = q.where(Course.active == True)  # noqa: E712
    result = await session.execute(q)
    return list(result.scalars().all())


async def get_course(session: AsyncSession, course_id: int) -> Course | None:
    return await session.get(Course, course_id)


async def create_course(session: AsyncSession, data: CourseCreate) -> Course:
    course = Course.model_validate(data)
    session.add(course)
    await session.flush()
    await session.refresh(course)
    return course


async def update_course(
    session: AsyncSession, course_id: int, data: CourseUpdate
) -> Course | None:
    course = await session.get(Course, course_id)
    if not course:
        return None
    apply_update(course, data)
    course.updated_at = _utc_naive()
    session.add(course)
    await session.flush()
    await session.refresh(course)
    return course


async def delete_course(session: AsyncSession, course_id: int) -> bool:
    course = await session.get(Course, course_id)
    if not course:
        return False
    await session.delete(course)
    await session.flush()
    return True


# --- Combos ---

def _clean_services(services: list[ComboServiceBase]) -> list[ComboServiceBase]:
    return [s for s in services if s.name.strip()]


async def _combo_services(session: AsyncSession, combo_id: int) -> list[ComboService]:
    result = await session.execute(
        select(ComboService).where(ComboService.combo_id == combo_id).order_by(ComboService.id)
    )
    return list(result.scalars().all())


async def _replace_combo_services(
    session: AsyncSession, combo_id: int, services: list[ComboServiceBase]
) -> None:
    await session.execute(delete(ComboService).where(ComboService.combo_id == combo_id))
    for item in _clean_services(services):
        session.add(ComboService(combo_id=combo_id, name=item.name.strip(), price=item.price))
    await session.flush()


async def combo_to_public(session: AsyncSession, combo: Combo) -> ComboPublic:
    services = await _combo_services(session, combo.id)
    return ComboPublic(
        **combo.model_dump(exclude={"created_at", "updated_at"}),
        services=[ComboServiceBase(name=s.name, price=s.price) for s in services],
    )


async def list_combos(session: AsyncSession, active_only: bool = False) -> list[ComboPublic]:
    q = select(Combo).order_by(Combo.created_at.desc(), Combo.id.desc())
    if active_only:
        q = q.where(Combo.active == True)  # noqa: E712
    result = await session.execute(q)
    return [await combo_to_public(session, c) for c in result.scalars().all()]


async def create_combo(session: AsyncSession, data: ComboCreate) -> ComboPublic:
    combo = Combo.model_validate(data.model_dump(exclude={"services"}))
    session.add(combo)
    await session.flush()
    await session.refresh(combo)
    await _replace_combo_services(session, combo.id, data.services)
    return await combo_to_public(session, combo)


async def update_combo(
    session: AsyncSession, combo_id: int, data: ComboUpdate
) -> ComboPublic | None:
    combo = await session.get(Combo, combo_id)
    if not combo:
        return None
    apply_update(combo, data, exclude={"services"})
    combo.updated_at = _utc_naive()
    session.add(combo)
    await session.flush()
    if data.services is not None:
        await _replace_combo_services(session, combo.id, data.services)
    await session.refresh(combo)
    return await combo_to_public(session, combo)


async def delete_combo(session: AsyncSession, combo_id: int) -> bool:
    combo = await session.get(Combo, combo_id)
    if not combo:
        return False
    await session.execute(delete(ComboService).where(ComboService.combo_id == combo_id))
    await session.delete(combo)
    await session.flush()
    return True
