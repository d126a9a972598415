from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_employer
from ..database import get_db
from ..schemas import EmployerAnalytics

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/employer")
def employer_analytics(
    db: Session = Depends(get_db),
    employer: models.User = Depends(require_employer),
):
    now = datetime.now(timezone.utc)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    stats = crud.employer_analytics(db, employer.id, since=now - timedelta(days=30), month_start=month_start)
    return {"analytics": EmployerAnalytics(**stats), "msg": "Analytics retrieved successfully"}
