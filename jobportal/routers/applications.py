import math

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import crud, lifecycle, models
from ..auth import get_current_user, require_employer
from ..config import settings
from ..database import get_db
from ..schemas import ApplicationCreate, ApplicationOut, ApplicationStatusUpdate, EmployerApplicationOut

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.post("", status_code=status.HTTP_201_CREATED)
def apply(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    application = lifecycle.apply_job(db, current_user.id, payload.job_id, payload.cover_letter)
    return {
        "application": ApplicationOut.model_validate(application),
        "msg": "Application submitted successfully",
    }


@router.get("")
def my_applications(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    applications = crud.list_user_applications(db, current_user.id)
    return {
        "applications": [ApplicationOut.model_validate(a) for a in applications],
        "count": len(applications),
    }


@router.get("/employer")
def employer_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    employer: models.User = Depends(require_employer),
):
    applications, total = crud.list_employer_applications(db, employer.id, page, limit)
    return {
        "applications": [EmployerApplicationOut.model_validate(a) for a in applications],
        "count": total,
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
    }


@router.put("/{application_id}/status")
def update_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    employer: models.User = Depends(require_employer),
):
    application = lifecycle.update_application_status(db, application_id, payload.status, employer.id)
    return {
        "application": ApplicationOut.model_validate(application),
        "msg": "Application status updated successfully",
    }


@router.delete("/{application_id}")
def withdraw(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    lifecycle.withdraw_application(db, application_id, current_user.id)
    return {"success": True, "msg": "Application withdrawn successfully"}
