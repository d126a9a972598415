import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from .models import ApplicationStatus, ContactStatus, JobStatus, Role

class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON (the wire format the web client uses)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

# Auth / users
class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role

class LoginRequest(CamelModel):
    email: EmailStr
    password: str
    role: Role

class NotificationPrefs(CamelModel):
    new_applications: bool = True
    application_updates: bool = True
    weekly_reports: bool = False

class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    city: str = ""
    pincode: str = ""
    skills: list[str] = []
    profile_photo: str = ""
    resume: str = ""
    company_name: str = ""
    company_description: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    website: str = ""
    address: str = ""
    notification_prefs: NotificationPrefs = Field(default_factory=NotificationPrefs, alias="notifications")
    verified: bool = False
    is_blocked: bool = False
    created_at: datetime | None = None

class AuthResponse(CamelModel):
    user: UserOut
    token: str

class ProfileUpdate(CamelModel):
    # worker
    city: str | None = None
    pincode: str | None = None
    skills: list[str] | None = None
    # employer
    company_name: str | None = None
    company_description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    address: str | None = None
    notification_prefs: NotificationPrefs | None = Field(None, alias="notifications")

class AdminUserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = Role.WORKER
    city: str = ""
    pincode: str = ""
    skills: list[str] = []

class AdminUserUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    role: Role | None = None
    city: str | None = None
    pincode: str | None = None
    skills: list[str] | None = None
    verified: bool | None = None

# Jobs
class JobCreate(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    category: str = Field(min_length=1)
    city: str = Field(min_length=1)
    pincode: str = Field(min_length=1)
    salary: int | None = Field(None, ge=0)
    status: JobStatus = JobStatus.OPEN
    requirements: list[str] = []

class JobStatusUpdate(CamelModel):
    status: JobStatus

class JobOut(CamelModel):
    id: int
    title: str
    description: str
    category: str
    city: str
    pincode: str
    salary: int | None = None
    status: JobStatus
    requirements: list[str] = []
    employer_id: int
    created_at: datetime
    updated_at: datetime

class EmployerJobOut(JobOut):
    application_count: int = 0

class CategoryCount(CamelModel):
    category: str
    count: int

# Applications
class JobSnapshot(CamelModel):
    """Job fields frozen into an application when it is created."""

    title: str
    description: str
    category: str
    city: str
    pincode: str
    salary: int | None = None
    status: JobStatus

class ApplicationCreate(CamelModel):
    job_id: int | None = None
    cover_letter: str = ""

class ApplicationStatusUpdate(CamelModel):
    # validated by the lifecycle service so an unknown value is a 400, not a 422
    status: str

class ApplicantOut(CamelModel):
    id: int
    name: str
    email: str
    city: str = ""
    pincode: str = ""
    skills: list[str] = []
    resume: str = ""
    profile_photo: str = ""
    contact_email: str = ""
    contact_phone: str = ""

class JobSummaryOut(CamelModel):
    id: int
    title: str
    category: str
    city: str
    pincode: str
    salary: int | None = None
    status: JobStatus
    employer_id: int

class ApplicationOut(CamelModel):
    id: int
    user_id: int
    job_id: int
    job_data: JobSnapshot
    applied_date: datetime
    status: ApplicationStatus
    cover_letter: str = ""

class EmployerApplicationOut(ApplicationOut):
    user: ApplicantOut
    job: JobSummaryOut | None = None

# Notifications
class NotificationOut(CamelModel):
    id: int
    type: str
    title: str
    message: str
    recipient: str
    user_id: int | None = None
    is_read: bool
    related_id: int | None = None
    related_model: str | None = None
    priority: str
    created_at: datetime

def page_info(page: int, limit: int, total: int, total_key: str) -> dict:
    """Pagination block in the shape the list endpoints return."""
    return {
        "currentPage": page,
        "totalPages": math.ceil(total / limit) if limit else 0,
        total_key: total,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
    }

# Contacts
class ContactCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=1000)

class ContactUpdate(CamelModel):
    status: ContactStatus | None = None
    admin_reply: str | None = Field(None, max_length=1000)

class ContactOut(CamelModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: ContactStatus
    admin_reply: str = ""
    replied_at: datetime | None = None
    created_at: datetime

# Testimonials
TestimonialIcon = Literal[
    "bi-person-fill", "bi-hammer", "bi-house-heart", "bi-shield-check",
    "bi-tools", "bi-truck", "bi-gear", "bi-shop",
]

class TestimonialCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    role: str = Field(min_length=1, max_length=100)
    rating: int = Field(ge=1, le=5)
    message: str = Field(min_length=50, max_length=1000)
    location: str = ""
    icon: TestimonialIcon = "bi-person-fill"

class TestimonialOut(CamelModel):
    id: int
    name: str
    role: str
    rating: int
    message: str
    date: str
    location: str = ""
    icon: str
    created_at: datetime

# Analytics
class EmployerAnalytics(CamelModel):
    total_jobs: int
    active_jobs: int
    total_applications: int
    new_applications: int
    jobs_this_month: int
    applications_this_month: int
    accepted_applications: int
    response_rate: int
