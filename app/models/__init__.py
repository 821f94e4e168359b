from app.models.user import User, UserCreate, UserPublic, UserRole
from app.models.refresh_token import RefreshToken
from app.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate
from app.models.availability import (
    Availability,
    AvailabilityCreate,
    AvailabilityPublic,
    AvailabilityUpdate,
)
from app.models.client import Client, ClientPublic
from app.models.appointment import (
    OCCUPYING_STATUSES,
    Appointment,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentUpdate,
    BookedSlot,
)
from app.models.course import Course, CourseCreate, CoursePublic, CourseUpdate
from app.models.combo import (
    Combo,
    ComboCreate,
    ComboPublic,
    ComboService,
    ComboServiceBase,
    ComboUpdate,
)

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "RefreshToken",
    "Service",
    "ServiceCreate",
    "ServicePublic",
    "ServiceUpdate",
    "Availability",
    "AvailabilityCreate",
    "AvailabilityPublic",
    "AvailabilityUpdate",
    "Client",
    "ClientPublic",
    "OCCUPYING_STATUSES",
    "Appointment",
    "AppointmentPublic",
    "AppointmentStatus",
    "AppointmentUpdate",
    "BookedSlot",
    "Course",
    "CourseCreate",
    "CoursePublic",
    "CourseUpdate",
    "Combo",
    "ComboCreate",
    "ComboPublic",
    "ComboService",
    "ComboServiceBase",
    "ComboUpdate",
]
