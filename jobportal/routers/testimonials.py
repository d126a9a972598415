from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..exceptions import ResourceNotFoundException
from ..schemas import TestimonialCreate, TestimonialOut

router = APIRouter(prefix="/api/testimonials", tags=["testimonials"])


@router.get("")
def list_testimonials(db: Session = Depends(get_db)):
    testimonials = crud.list_approved_testimonials(db)
    return {
        "testimonials": [TestimonialOut.model_validate(t) for t in testimonials],
        "count": len(testimonials),
    }


@router.get("/{testimonial_id}")
def get_testimonial(testimonial_id: int, db: Session = Depends(get_db)):
    testimonial = crud.get_approved_testimonial(db, testimonial_id)
    if testimonial is None:
        raise ResourceNotFoundException("Testimonial", testimonial_id)
    return {"testimonial": TestimonialOut.model_validate(testimonial)}


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_testimonial(payload: TestimonialCreate, db: Session = Depends(get_db)):
    testimonial = crud.create_testimonial(db, **payload.model_dump())
    return {"testimonial": TestimonialOut.model_validate(testimonial), "msg": "Testimonial submitted successfully"}
