from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_admin
from ..database import get_db
from ..exceptions import ResourceNotFoundException
from ..schemas import ContactCreate, ContactOut, ContactUpdate

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def _get_or_404(db: Session, contact_id: int) -> models.Contact:
    contact = crud.get_contact(db, contact_id)
    if contact is None:
        raise ResourceNotFoundException("Contact", contact_id)
    return contact


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contact(payload: ContactCreate, db: Session = Depends(get_db)):
    contact = crud.create_contact(db, **payload.model_dump())
    return {"msg": "Contact form submitted successfully", "contact": ContactOut.model_validate(contact)}


@router.get("", dependencies=[Depends(require_admin)])
def list_contacts(db: Session = Depends(get_db)):
    contacts = crud.list_contacts(db)
    return {"contacts": [ContactOut.model_validate(c) for c in contacts], "count": len(contacts)}


@router.get("/{contact_id}", dependencies=[Depends(require_admin)])
def get_contact(contact_id: int, db: Session = Depends(get_db)):
    return {"contact": ContactOut.model_validate(_get_or_404(db, contact_id))}


@router.patch("/{contact_id}", dependencies=[Depends(require_admin)])
def update_contact(contact_id: int, payload: ContactUpdate, db: Session = Depends(get_db)):
    contact = _get_or_404(db, contact_id)
    contact = crud.update_contact(
        db,
        contact,
        payload.status.value if payload.status else None,
        payload.admin_reply,
        datetime.now(timezone.utc),
    )
    return {"contact": ContactOut.model_validate(contact)}


@router.delete("/{contact_id}", dependencies=[Depends(require_admin)])
def delete_contact(contact_id: int, db: Session = Depends(get_db)):
    crud.delete_contact(db, _get_or_404(db, contact_id))
    return {"msg": "Contact deleted successfully"}
