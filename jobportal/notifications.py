"""
Notification emission.

``emit`` is best-effort: it writes inside a SAVEPOINT and is wrapped in
``NonCritical``, so a failed write is logged and returns ``None`` without
disturbing the caller's transaction.
"""
from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from . import crud, models
from .config import settings
from .side_effects import non_critical, NonCritical


@non_critical("notification")
def emit(
    db: Session,
    type: models.NotificationType,
    title: str,
    message: str,
    user_id: int,
    related_id: int | None = None,
    related_kind: models.RelatedKind | None = None,
    priority: models.Priority = models.Priority.MEDIUM,
    dedupe_key: str | None = None,
    commit: bool = True,
) -> models.Notification:
    with db.begin_nested():
        notification = crud.add_notification(
            db,
            type=type.value,
            title=title,
            message=message,
            recipient=models.Recipient.USER.value,
            user_id=user_id,
            related_id=related_id,
            related_model=related_kind.value if related_kind else None,
            priority=priority.value,
            dedupe_key=dedupe_key,
        )
    if commit:
        db.commit()
    return notification


def job_posted_key(job_id: int, worker_id: int) -> str:
    return f"job_posted:{job_id}:{worker_id}"


def _delivered_keys(db: Session, job_id: int) -> set[str]:
    rows = db.execute(
        select(models.Notification.dedupe_key).where(
            models.Notification.dedupe_key.like(f"job_posted:{job_id}:%")
        )
    )
    return set(rows.scalars())


def _notify_workers_of_job(session_factory: sessionmaker, event, batch_size: int | None = None) -> int:
    """Write one low-priority ``job_posted`` notification per worker.

    Workers are processed in batches of ``batch_size`` (one commit per batch).
    Each write is independent, so one failure only loses that worker's
    notification. Workers already notified for this job are skipped, which
    makes redelivery of the same event harmless.
    """
    batch_size = batch_size or settings.NOTIFY_BATCH_SIZE
    created = 0
    with session_factory() as db:
        delivered = _delivered_keys(db, event.job_id)
        pending = [
            worker_id
            for worker_id in crud.list_worker_ids(db)
            if job_posted_key(event.job_id, worker_id) not in delivered
        ]
        for start in range(0, len(pending), batch_size):
            for worker_id in pending[start:start + batch_size]:
                notification = emit(
                    db,
                    models.NotificationType.JOB_POSTED,
                    "New Job Posted",
                    f'A new job "{event.title}" has been posted in {event.city}. Check it out!',
                    worker_id,
                    event.job_id,
                    models.RelatedKind.JOB,
                    models.Priority.LOW,
                    dedupe_key=job_posted_key(event.job_id, worker_id),
                    commit=False,
                )
                if notification is not None:
                    created += 1
            db.commit()
    logger.info(
        f"job {event.job_id}: notified {created} of {len(pending)} pending workers "
        f"({len(delivered)} already notified)"
    )
    return created


notify_workers_of_job = NonCritical("job-posted fan-out", _notify_workers_of_job)
