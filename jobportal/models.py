# jobportal/models.py
from __future__ import annotations
import enum
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    WORKER = "worker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class JobStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"
    REVIEWING = "reviewing"


class ApplicationStatus(str, enum.Enum):
    APPLIED = "applied"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class NotificationType(str, enum.Enum):
    USER_REGISTRATION = "user_registration"
    JOB_APPLICATION = "job_application"
    JOB_POSTED = "job_posted"
    APPLICATION_STATUS_UPDATE = "application_status_update"
    APPLICATION_WITHDRAWN = "application_withdrawn"
    SYSTEM_ALERT = "system_alert"
    ERROR = "error"


class Recipient(str, enum.Enum):
    ADMIN = "admin"
    ALL = "all"
    USER = "user"


class RelatedKind(str, enum.Enum):
    USER = "User"
    JOB = "Job"
    APPLICATION = "Application"


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContactStatus(str, enum.Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"
    SPAM = "spam"


def default_notification_prefs() -> dict:
    return {"newApplications": True, "applicationUpdates": True, "weeklyReports": False}


class User(Base):
    __tablename__ = "users"
    # The same email may hold one account per role
    __table_args__ = (UniqueConstraint("email", "role", name="uq_users_email_role"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), index=True, nullable=False, default=Role.WORKER.value)

    # worker profile
    city: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    pincode: Mapped[str] = mapped_column(String(20), default="", nullable=False)
    skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    availability: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    resume: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    profile_photo: Mapped[str] = mapped_column(String(512), default="", nullable=False)

    # employer profile
    company_name: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    company_description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    contact_email: Mapped[str] = mapped_column(String(320), default="", nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    website: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    address: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    notification_prefs: Mapped[dict] = mapped_column(JSON, default=default_notification_prefs, nullable=False)

    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    jobs: Mapped[list["Job"]] = relationship(back_populates="employer", cascade="all, delete-orphan")
    # removed with the user on every backend, not only where the FK cascade is enforced
    applications: Mapped[list["Application"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    notifications: Mapped[list["Notification"]] = relationship(cascade="all, delete-orphan")


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    category: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    city: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    pincode: Mapped[str] = mapped_column(String(20), nullable=False)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(16), index=True, nullable=False, default=JobStatus.OPEN.value)
    requirements: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    employer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    employer: Mapped[User] = relationship(back_populates="jobs")


class Application(Base):
    __tablename__ = "applications"
    # one application per (user, job); enforced by the store, not only by a lookup
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # plain reference: deleting the job leaves the application and its snapshot in place
    job_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    job_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    applied_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False, default=utcnow)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ApplicationStatus.APPLIED.value)
    cover_letter: Mapped[str] = mapped_column(Text, default="", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user: Mapped[User] = relationship(back_populates="applications")
    job: Mapped[Job | None] = relationship(
        primaryjoin="foreign(Application.job_id) == Job.id", viewonly=True
    )


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    recipient: Mapped[str] = mapped_column(String(8), nullable=False, default=Recipient.ADMIN.value)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    related_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    related_model: Mapped[str | None] = mapped_column(String(16), nullable=True)
    priority: Mapped[str] = mapped_column(String(8), nullable=False, default=Priority.MEDIUM.value)
    # set for fan-out writes so a redelivered event cannot duplicate a notification
    dedupe_key: Mapped[str | None] = mapped_column(String(128), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False, default=utcnow)


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ContactStatus.UNREAD.value)
    admin_reply: Mapped[str] = mapped_column(String(1000), default="", nullable=False)
    replied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class Testimonial(Base):
    __tablename__ = "testimonials"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False, default=lambda: utcnow().date().isoformat())
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    location: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    icon: Mapped[str] = mapped_column(String(32), default="bi-person-fill", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
