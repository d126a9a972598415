from pathlib import Path

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.orm import Session

from .. import crud, lifecycle, models
from ..auth import require_admin
from ..config import settings
from ..database import get_db
from ..exceptions import ResourceNotFoundException
from ..schemas import (
    AdminUserCreate,
    AdminUserUpdate,
    ApplicationOut,
    ApplicationStatusUpdate,
    JobCreate,
    JobOut,
    JobStatusUpdate,
    UserOut,
    page_info,
)
from ..side_effects import non_critical

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@non_critical("user file cleanup")
def remove_user_files(resume: str, profile_photo: str) -> int:
    """Delete a user's stored resume/photo. Paths are relative to UPLOAD_DIR."""
    removed = 0
    root = Path(settings.UPLOAD_DIR)
    for rel in (resume, profile_photo):
        if not rel:
            continue
        path = root / rel
        if path.is_file():
            path.unlink()
            removed += 1
        else:
            logger.warning(f"stored file missing: {path}")
    return removed


def _user_or_404(db: Session, user_id: int) -> models.User:
    user = crud.get_user(db, user_id)
    if user is None:
        raise ResourceNotFoundException("User", user_id)
    return user


def _job_or_404(db: Session, job_id: int) -> models.Job:
    job = crud.get_job(db, job_id)
    if job is None:
        raise ResourceNotFoundException("Job", job_id)
    return job


# Users
@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    role: str | None = None,
    search: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    verified = {"verified": True, "unverified": False}.get(status or "")
    users, total = crud.list_users(
        db, None if role in (None, "all") else role, search, verified, page, limit
    )
    return {
        "users": [UserOut.model_validate(u) for u in users],
        "pagination": page_info(page, limit, total, "totalUsers"),
    }


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(payload: AdminUserCreate, db: Session = Depends(get_db)):
    user = crud.create_user(
        db,
        payload.name,
        payload.email,
        payload.password,
        payload.role.value,
        city=payload.city,
        pincode=payload.pincode,
        skills=payload.skills,
    )
    return {"user": UserOut.model_validate(user), "msg": "User created successfully"}


@router.put("/users/{user_id}")
def update_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    user = _user_or_404(db, user_id)
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in fields:
        fields["role"] = fields["role"].value
    user = crud.update_user(db, user, **fields)
    return {"user": UserOut.model_validate(user), "msg": "User updated successfully"}


@router.put("/users/{user_id}/block")
def toggle_block(user_id: int, db: Session = Depends(get_db)):
    user = _user_or_404(db, user_id)
    user = crud.update_user(db, user, is_blocked=not user.is_blocked)
    state = "blocked" if user.is_blocked else "unblocked"
    logger.info(f"user {user_id} {state}")
    return {"user": UserOut.model_validate(user), "msg": f"User {state} successfully"}


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _user_or_404(db, user_id)
    resume, photo = user.resume, user.profile_photo
    crud.delete_user(db, user)
    remove_user_files(resume, photo)
    logger.info(f"user {user_id} deleted")
    return {"msg": "User deleted successfully"}


# Jobs
@router.get("/jobs")
def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: str | None = None,
    category: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    jobs, total = crud.list_jobs(
        db,
        None if status in (None, "all") else status,
        None if category in (None, "all") else category,
        search,
        page,
        limit,
    )
    return {
        "jobs": [JobOut.model_validate(j) for j in jobs],
        "pagination": page_info(page, limit, total, "totalJobs"),
    }


@router.post("/jobs", status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    job = lifecycle.admin_create_job(db, admin.id, payload)
    return {"job": JobOut.model_validate(job), "msg": "Job created successfully"}


@router.put("/jobs/{job_id}")
def update_job(job_id: int, payload: JobStatusUpdate, db: Session = Depends(get_db)):
    job = crud.set_job_status(db, _job_or_404(db, job_id), payload.status.value)
    return {"job": JobOut.model_validate(job), "msg": "Job updated successfully"}


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, db: Session = Depends(get_db)):
    crud.delete_job(db, _job_or_404(db, job_id))
    return {"msg": "Job deleted successfully"}


# Applications
@router.get("/applications")
def list_applications(db: Session = Depends(get_db)):
    applications = crud.list_all_applications(db)
    return {
        "applications": [ApplicationOut.model_validate(a) for a in applications],
        "count": len(applications),
    }


@router.put("/applications/{application_id}")
def update_application(application_id: int, payload: ApplicationStatusUpdate, db: Session = Depends(get_db)):
    application = lifecycle.admin_set_status(db, application_id, payload.status)
    return {"application": ApplicationOut.model_validate(application)}


@router.delete("/applications/{application_id}")
def delete_application(application_id: int, db: Session = Depends(get_db)):
    lifecycle.admin_delete_application(db, application_id)
    return {"msg": "Application deleted"}
