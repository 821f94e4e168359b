from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.services.lead_service import EnrollmentLead


class EnrollmentRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=20)
    course_id: int
    message: str | None = Field(default=None, max_length=1000)


class EnrollmentResponse(BaseModel):
    whatsapp_url: str
    lead: EnrollmentLead
