import math
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import crud, lifecycle, models
from ..auth import get_current_user, require_employer
from ..config import settings
from ..database import get_db
from ..events import EventDispatcher, get_dispatcher
from ..exceptions import ResourceNotFoundException
from ..schemas import CategoryCount, EmployerJobOut, JobCreate, JobOut, JobStatusUpdate

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
    employer: models.User = Depends(require_employer),
):
    job = lifecycle.post_job(db, dispatcher, employer.id, payload)
    return {"job": JobOut.model_validate(job)}


@router.get("")
def browse_jobs(
    category: str | None = None,
    city: str | None = None,
    pincode: str | None = None,
    status: models.JobStatus | None = None,
    keyword: str | None = None,
    sort: Literal["newest", "oldest", "salary-high", "salary-low"] | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    jobs, total = crud.search_jobs(
        db,
        category=category,
        city=city,
        pincode=pincode,
        status=status.value if status else None,
        keyword=keyword,
        sort=sort,
        page=page,
        limit=limit,
    )
    return {
        "jobs": [JobOut.model_validate(j) for j in jobs],
        "count": total,
        "pages": math.ceil(total / limit),
    }


@router.get("/categories/counts")
def category_counts(db: Session = Depends(get_db)):
    rows = crud.count_open_jobs_by_category(db)
    return {"categories": [CategoryCount(category=c, count=n) for c, n in rows]}


@router.get("/employer")
def employer_jobs(
    search: str | None = None,
    status: Literal["all", "open", "closed", "reviewing"] = "all",
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    employer: models.User = Depends(require_employer),
):
    rows, total = crud.list_employer_jobs(
        db, employer.id, search, None if status == "all" else status, page, limit
    )
    jobs = []
    for job, count in rows:
        out = EmployerJobOut.model_validate(job)
        out.application_count = count
        jobs.append(out)
    return {
        "jobs": jobs,
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
        "totalJobs": total,
    }


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    job = crud.get_job(db, job_id)
    if job is None:
        raise ResourceNotFoundException("Job", job_id)
    return {"job": JobOut.model_validate(job)}


@router.put("/{job_id}/status")
def update_job_status(
    job_id: int,
    payload: JobStatusUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    job = crud.get_owned_job(db, job_id, current_user.id)
    if job is None:
        raise ResourceNotFoundException("Job", job_id)
    job = crud.set_job_status(db, job, payload.status.value)
    return {"job": JobOut.model_validate(job)}


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    job = crud.get_owned_job(db, job_id, current_user.id)
    if job is None:
        raise ResourceNotFoundException("Job", job_id)
    crud.delete_job(db, job)
    return {"msg": "Job deleted successfully"}
