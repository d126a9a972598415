from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import authenticate_user, get_current_user
from ..database import get_db
from ..schemas import AuthResponse, LoginRequest, UserCreate, UserOut
from ..token import create_access_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: models.User) -> AuthResponse:
    token = create_access_token(subject=str(user.id), role=user.role, name=user.name)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = crud.create_user(db, payload.name, payload.email, payload.password, payload.role.value)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password, payload.role.value)
    return _auth_response(user)


@router.get("/me", response_model=UserOut)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
