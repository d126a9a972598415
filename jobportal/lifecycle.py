"""
Application lifecycle: apply, status changes, withdrawal, and job posting.

Each operation validates against the job/application stores, performs a
single write and then emits at most one notification. Notifications are
best-effort (see ``notifications.emit``) and never change the outcome of the
operation that triggered them.
"""
from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from . import crud, models
from .config import settings
from .events import EventDispatcher, JobPosted
from .exceptions import AuthorizationException, InvalidRequest, ResourceNotFoundException
from .notifications import emit
from .schemas import JobCreate

Status = models.ApplicationStatus

# Forward-only table, consulted only when STRICT_STATUS_TRANSITIONS is enabled
ALLOWED_TRANSITIONS: dict[Status, set[Status]] = {
    Status.APPLIED: {Status.REVIEWED, Status.ACCEPTED, Status.REJECTED},
    Status.REVIEWED: {Status.ACCEPTED, Status.REJECTED},
    Status.ACCEPTED: set(),
    Status.REJECTED: set(),
}

# status -> (title, message template, priority); rejection is worded neutrally
STATUS_NOTIFICATIONS: dict[Status, tuple[str, str, models.Priority]] = {
    Status.ACCEPTED: (
        "Application Accepted",
        'Congratulations! Your application for "{title}" has been accepted.',
        models.Priority.HIGH,
    ),
    Status.REJECTED: (
        "Application Update",
        'Your application for "{title}" has been reviewed.',
        models.Priority.MEDIUM,
    ),
    Status.REVIEWED: (
        "Application Reviewed",
        'Your application for "{title}" is under review.',
        models.Priority.MEDIUM,
    ),
}


def parse_status(value: str) -> Status:
    try:
        return Status(value)
    except ValueError:
        raise InvalidRequest("Invalid status")


def apply_job(db: Session, user_id: int, job_id: int | None, cover_letter: str = "") -> models.Application:
    if not job_id:
        raise InvalidRequest("Job ID is required")

    job = crud.get_job(db, job_id)
    if job is None:
        raise InvalidRequest("Job not found")
    if job.status != models.JobStatus.OPEN.value:
        raise InvalidRequest("This job is no longer accepting applications")
    if crud.find_application(db, user_id, job_id) is not None:
        raise InvalidRequest("You have already applied for this job")

    # the unique (user_id, job_id) constraint catches a concurrent duplicate
    application = crud.create_application(db, user_id, job, cover_letter or "")
    logger.info(f"user {user_id} applied to job {job_id} (application {application.id})")
    return application


def update_application_status(
    db: Session, application_id: int, new_status: str, acting_user_id: int
) -> models.Application:
    status = parse_status(new_status)

    application = crud.get_application(db, application_id)
    if application is None:
        raise ResourceNotFoundException("Application", application_id)

    job = crud.get_job(db, application.job_id)
    if job is None or job.employer_id != acting_user_id:
        raise AuthorizationException("Not authorized to update this application")

    old_status = Status(application.status)
    if old_status == status:
        return application

    if settings.STRICT_STATUS_TRANSITIONS and status not in ALLOWED_TRANSITIONS[old_status]:
        raise InvalidRequest(f"Cannot change application status from {old_status.value} to {status.value}")

    application = crud.set_application_status(db, application, status.value)
    logger.info(
        f"application {application.id}: {old_status.value} -> {status.value} by employer {acting_user_id}"
    )

    if status in STATUS_NOTIFICATIONS:
        title, template, priority = STATUS_NOTIFICATIONS[status]
        emit(
            db,
            models.NotificationType.APPLICATION_STATUS_UPDATE,
            title,
            template.format(title=job.title),
            application.user_id,
            application.id,
            models.RelatedKind.APPLICATION,
            priority,
        )
    return application


def withdraw_application(db: Session, application_id: int, acting_user_id: int) -> None:
    application = crud.get_application(db, application_id)
    if application is None:
        raise ResourceNotFoundException("Application", application_id)
    if application.user_id != acting_user_id:
        raise AuthorizationException("Not authorized to withdraw this application")
    if application.status != Status.APPLIED.value:
        raise InvalidRequest("Cannot withdraw application - already processed")

    job = crud.get_job(db, application.job_id)
    crud.delete_application(db, application)
    logger.info(f"user {acting_user_id} withdrew application {application_id}")

    # the employer is only reachable while the job still exists
    if job is not None:
        emit(
            db,
            models.NotificationType.APPLICATION_WITHDRAWN,
            "Application Withdrawn",
            f'An application for "{job.title}" has been withdrawn.',
            job.employer_id,
            job.id,
            models.RelatedKind.JOB,
            models.Priority.LOW,
        )


def _job_fields(payload: JobCreate) -> dict:
    fields = payload.model_dump()
    fields["status"] = payload.status.value
    return fields


def post_job(db: Session, dispatcher: EventDispatcher, employer_id: int, payload: JobCreate) -> models.Job:
    """Create a job and announce it to every worker."""
    job = crud.create_job(db, employer_id, **_job_fields(payload))
    logger.info(f"employer {employer_id} posted job {job.id}")
    dispatcher.publish(JobPosted(job_id=job.id, employer_id=employer_id, title=job.title, city=job.city))
    return job


def admin_create_job(db: Session, admin_id: int, payload: JobCreate) -> models.Job:
    """Admin-created job, owned by the admin. Workers are not notified."""
    job = crud.create_job(db, admin_id, **_job_fields(payload))
    logger.info(f"admin {admin_id} created job {job.id}")
    return job


def admin_set_status(db: Session, application_id: int, new_status: str) -> models.Application:
    """Admin override: any status, no owner check, no notification."""
    status = parse_status(new_status)
    application = crud.get_application(db, application_id)
    if application is None:
        raise ResourceNotFoundException("Application", application_id)
    return crud.set_application_status(db, application, status.value)


def admin_delete_application(db: Session, application_id: int) -> None:
    application = crud.get_application(db, application_id)
    if application is None:
        raise ResourceNotFoundException("Application", application_id)
    crud.delete_application(db, application)
    logger.info(f"admin deleted application {application_id}")
