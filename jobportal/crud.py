from __future__ import annotations
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query, joinedload

from . import models, security
from .exceptions import DuplicateResourceException

JOB_SORTS = {
    "newest": models.Job.created_at.desc(),
    "oldest": models.Job.created_at.asc(),
    "salary-high": models.Job.salary.desc(),
    "salary-low": models.Job.salary.asc(),
}

def paginate(q: Query, page: int, limit: int) -> tuple[list, int]:
    """Return (rows for the requested 1-based page, total matching rows)."""
    total = q.order_by(None).count()
    rows = q.offset((page - 1) * limit).limit(limit).all()
    return rows, total

def _contains(column, needle: str):
    return column.ilike(f"%{needle}%")

# Users
def get_user(db: Session, user_id: int) -> models.User | None:
    return db.get(models.User, user_id)

def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()

def get_user_by_email_and_role(db: Session, email: str, role: str) -> models.User | None:
    return (
        db.query(models.User)
        .filter(models.User.email == email, models.User.role == role)
        .first()
    )

def create_user(db: Session, name: str, email: str, password: str, role: str, **profile) -> models.User:
    user = models.User(
        name=name,
        email=email,
        hashed_password=security.hash_password(password),
        role=role,
        **profile,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateResourceException(
            f"An account with this email already exists for the '{role}' role.", "User", "email"
        )
    db.refresh(user)
    return user

def update_user(db: Session, user: models.User, **fields) -> models.User:
    for key, value in fields.items():
        setattr(user, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateResourceException(
            "An account with this email already exists for that role.", "User", "email"
        )
    db.refresh(user)
    return user

def list_users(
    db: Session, role: str | None, search: str | None, verified: bool | None, page: int, limit: int
) -> tuple[list[models.User], int]:
    q = db.query(models.User)
    if role:
        q = q.filter(models.User.role == role)
    if verified is not None:
        q = q.filter(models.User.verified.is_(verified))
    if search:
        q = q.filter(or_(_contains(models.User.name, search), _contains(models.User.email, search)))
    return paginate(q.order_by(models.User.created_at.desc(), models.User.id.desc()), page, limit)

def list_worker_ids(db: Session) -> list[int]:
    rows = db.execute(
        select(models.User.id).where(models.User.role == models.Role.WORKER.value).order_by(models.User.id)
    )
    return list(rows.scalars())

def delete_user(db: Session, user: models.User) -> None:
    db.delete(user)
    db.commit()

# Jobs
def create_job(db: Session, employer_id: int, **fields) -> models.Job:
    job = models.Job(employer_id=employer_id, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job

def get_job(db: Session, job_id: int) -> models.Job | None:
    return db.get(models.Job, job_id)

def get_owned_job(db: Session, job_id: int, employer_id: int) -> models.Job | None:
    return (
        db.query(models.Job)
        .filter(models.Job.id == job_id, models.Job.employer_id == employer_id)
        .first()
    )

def search_jobs(
    db: Session,
    *,
    category: str | None = None,
    city: str | None = None,
    pincode: str | None = None,
    status: str | None = None,
    keyword: str | None = None,
    sort: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[models.Job], int]:
    """Public job browse. Only open jobs unless a status is asked for."""
    q = db.query(models.Job).filter(models.Job.status == (status or models.JobStatus.OPEN.value))
    if category:
        q = q.filter(_contains(models.Job.category, category))
    if city:
        q = q.filter(_contains(models.Job.city, city))
    if pincode:
        q = q.filter(models.Job.pincode == pincode)
    if keyword:
        q = q.filter(or_(_contains(models.Job.title, keyword), _contains(models.Job.description, keyword)))
    q = q.order_by(JOB_SORTS.get(sort or "newest", JOB_SORTS["newest"]), models.Job.id.desc())
    return paginate(q, page, limit)

def list_jobs(
    db: Session, status: str | None, category: str | None, search: str | None, page: int, limit: int
) -> tuple[list[models.Job], int]:
    """Every job regardless of owner (admin view)."""
    q = db.query(models.Job)
    if status:
        q = q.filter(models.Job.status == status)
    if category:
        q = q.filter(models.Job.category == category)
    if search:
        q = q.filter(or_(_contains(models.Job.title, search), _contains(models.Job.description, search)))
    return paginate(q.order_by(models.Job.created_at.desc(), models.Job.id.desc()), page, limit)

def count_open_jobs_by_category(db: Session) -> list[tuple[str, int]]:
    count = func.count(models.Job.id)
    rows = db.execute(
        select(models.Job.category, count)
        .where(models.Job.status == models.JobStatus.OPEN.value)
        .group_by(models.Job.category)
        .order_by(count.desc(), models.Job.category)
    )
    return [(category, n) for category, n in rows]

def list_employer_jobs(
    db: Session, employer_id: int, search: str | None, status: str | None, page: int, limit: int
) -> tuple[list[tuple[models.Job, int]], int]:
    """Employer's own jobs, each paired with its application count."""
    app_count = (
        select(func.count(models.Application.id))
        .where(models.Application.job_id == models.Job.id)
        .correlate(models.Job)
        .scalar_subquery()
    )
    q = db.query(models.Job, app_count).filter(models.Job.employer_id == employer_id)
    if status:
        q = q.filter(models.Job.status == status)
    if search:
        q = q.filter(
            or_(
                _contains(models.Job.title, search),
                _contains(models.Job.description, search),
                _contains(models.Job.category, search),
            )
        )
    rows, total = paginate(q.order_by(models.Job.created_at.desc(), models.Job.id.desc()), page, limit)
    return [(job, n) for job, n in rows], total

def set_job_status(db: Session, job: models.Job, status: str) -> models.Job:
    job.status = status
    db.commit()
    db.refresh(job)
    return job

def delete_job(db: Session, job: models.Job) -> None:
    db.delete(job)
    db.commit()

# Applications
def snapshot_job(job: models.Job) -> dict:
    return {
        "title": job.title,
        "description": job.description,
        "category": job.category,
        "city": job.city,
        "pincode": job.pincode,
        "salary": job.salary,
        "status": job.status,
    }

def get_application(db: Session, application_id: int) -> models.Application | None:
    return db.get(models.Application, application_id)

def find_application(db: Session, user_id: int, job_id: int) -> models.Application | None:
    return (
        db.query(models.Application)
        .filter(models.Application.user_id == user_id, models.Application.job_id == job_id)
        .first()
    )

def create_application(db: Session, user_id: int, job: models.Job, cover_letter: str = "") -> models.Application:
    application = models.Application(
        user_id=user_id,
        job_id=job.id,
        job_data=snapshot_job(job),
        cover_letter=cover_letter,
        status=models.ApplicationStatus.APPLIED.value,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        # lost the race against a concurrent apply for the same (user, job)
        db.rollback()
        raise DuplicateResourceException("You have already applied for this job", "Application", "job")
    db.refresh(application)
    return application

def list_user_applications(db: Session, user_id: int) -> list[models.Application]:
    return (
        db.query(models.Application)
        .filter(models.Application.user_id == user_id)
        .order_by(models.Application.applied_date.desc(), models.Application.id.desc())
        .all()
    )

def list_employer_applications(
    db: Session, employer_id: int, page: int, limit: int
) -> tuple[list[models.Application], int]:
    job_ids = select(models.Job.id).where(models.Job.employer_id == employer_id)
    q = (
        db.query(models.Application)
        .options(joinedload(models.Application.user), joinedload(models.Application.job))
        .filter(models.Application.job_id.in_(job_ids))
        .order_by(models.Application.applied_date.desc(), models.Application.id.desc())
    )
    return paginate(q, page, limit)

def list_all_applications(db: Session) -> list[models.Application]:
    return (
        db.query(models.Application)
        .order_by(models.Application.applied_date.desc(), models.Application.id.desc())
        .all()
    )

def set_application_status(db: Session, application: models.Application, status: str) -> models.Application:
    application.status = status
    db.commit()
    db.refresh(application)
    return application

def delete_application(db: Session, application: models.Application) -> None:
    db.delete(application)
    db.commit()

# Notifications
def add_notification(db: Session, **fields) -> models.Notification:
    """Stage a notification row; the caller owns the transaction."""
    notification = models.Notification(**fields)
    db.add(notification)
    db.flush()
    return notification

def list_notifications(
    db: Session, user_id: int, is_read: bool | None, page: int, limit: int
) -> tuple[list[models.Notification], int, int]:
    q = db.query(models.Notification).filter(models.Notification.user_id == user_id)
    if is_read is not None:
        q = q.filter(models.Notification.is_read.is_(is_read))
    rows, total = paginate(
        q.order_by(models.Notification.created_at.desc(), models.Notification.id.desc()), page, limit
    )
    unread = (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id, models.Notification.is_read.is_(False))
        .count()
    )
    return rows, total, unread

def mark_notification_read(db: Session, notification_id: int, user_id: int) -> models.Notification | None:
    notification = (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id, models.Notification.user_id == user_id)
        .first()
    )
    if notification is None:
        return None
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification

def mark_all_notifications_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id, models.Notification.is_read.is_(False))
        .update({models.Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated

# Contacts
def create_contact(db: Session, **fields) -> models.Contact:
    contact = models.Contact(**fields)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact

def list_contacts(db: Session) -> list[models.Contact]:
    return db.query(models.Contact).order_by(models.Contact.created_at.desc(), models.Contact.id.desc()).all()

def get_contact(db: Session, contact_id: int) -> models.Contact | None:
    return db.get(models.Contact, contact_id)

def update_contact(
    db: Session, contact: models.Contact, status: str | None, admin_reply: str | None, now: datetime
) -> models.Contact:
    if status is not None:
        contact.status = status
        if status == models.ContactStatus.REPLIED.value:
            contact.replied_at = now
    if admin_reply is not None:
        contact.admin_reply = admin_reply
    db.commit()
    db.refresh(contact)
    return contact

def delete_contact(db: Session, contact: models.Contact) -> None:
    db.delete(contact)
    db.commit()

# Testimonials
def create_testimonial(db: Session, **fields) -> models.Testimonial:
    testimonial = models.Testimonial(**fields)
    db.add(testimonial)
    db.commit()
    db.refresh(testimonial)
    return testimonial

def list_approved_testimonials(db: Session) -> list[models.Testimonial]:
    return (
        db.query(models.Testimonial)
        .filter(models.Testimonial.is_approved.is_(True))
        .order_by(models.Testimonial.created_at.desc(), models.Testimonial.id.desc())
        .all()
    )

def get_approved_testimonial(db: Session, testimonial_id: int) -> models.Testimonial | None:
    return (
        db.query(models.Testimonial)
        .filter(models.Testimonial.id == testimonial_id, models.Testimonial.is_approved.is_(True))
        .first()
    )

# Analytics
def employer_analytics(db: Session, employer_id: int, since: datetime, month_start: datetime) -> dict:
    jobs = db.query(models.Job).filter(models.Job.employer_id == employer_id)
    job_ids = select(models.Job.id).where(models.Job.employer_id == employer_id)
    apps = db.query(models.Application).filter(models.Application.job_id.in_(job_ids))
    responded = [
        models.ApplicationStatus.REVIEWED.value,
        models.ApplicationStatus.ACCEPTED.value,
        models.ApplicationStatus.REJECTED.value,
    ]
    total_applications = apps.count()
    responded_count = apps.filter(models.Application.status.in_(responded)).count()
    return {
        "total_jobs": jobs.count(),
        "active_jobs": jobs.filter(models.Job.status == models.JobStatus.OPEN.value).count(),
        "jobs_this_month": jobs.filter(models.Job.created_at >= month_start).count(),
        "total_applications": total_applications,
        "new_applications": apps.filter(models.Application.applied_date >= since).count(),
        "applications_this_month": apps.filter(models.Application.applied_date >= month_start).count(),
        "accepted_applications": apps.filter(
            models.Application.status == models.ApplicationStatus.ACCEPTED.value
        ).count(),
        "response_rate": round(responded_count / total_applications * 100) if total_applications else 0,
    }
