from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import get_current_user
from ..database import get_db
from ..exceptions import InvalidRequest
from ..schemas import ProfileUpdate, UserOut

router = APIRouter(prefix="/api/user", tags=["users"])

EMPLOYER_FIELDS = ("company_name", "company_description", "contact_email", "contact_phone", "website", "address")


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    if current_user.role == models.Role.WORKER.value:
        if not payload.city or not payload.pincode or not payload.skills:
            raise InvalidRequest("Please provide city, pincode, and skills")
        fields = {"city": payload.city, "pincode": payload.pincode, "skills": payload.skills}
    elif current_user.role == models.Role.EMPLOYER.value:
        fields = {name: getattr(payload, name) or "" for name in EMPLOYER_FIELDS}
        if payload.notification_prefs is not None:
            fields["notification_prefs"] = payload.notification_prefs.model_dump(by_alias=True)
    else:
        raise InvalidRequest("Invalid user role")

    user = crud.update_user(db, current_user, **fields)
    return {"user": UserOut.model_validate(user), "msg": "Profile updated successfully"}
