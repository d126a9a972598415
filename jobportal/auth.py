from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request
import jwt
from loguru import logger
from sqlalchemy.orm import Session

from . import crud, models, security
from .config import settings
from .database import get_db
from .exceptions import AuthenticationException, AuthorizationException
from .token import decode_access_token


def authenticate_user(db: Session, email: str, password: str, role: str) -> models.User:
    """
    Authenticates a user by email, password and role.

    An email may own one account per role, so the role picks the account.
    Outside production a role mismatch gets a hint naming the stored role.
    Returns the user; raises ``AuthenticationException`` on bad credentials
    and ``AuthorizationException`` for a blocked account.
    """
    user = crud.get_user_by_email_and_role(db, email, role)
    if user is None:
        other = crud.get_user_by_email(db, email)
        if other is not None and settings.ENVIRONMENT != "production":
            logger.warning(f"Login failed - role mismatch for email={email}: stored={other.role} attempted={role}")
            raise AuthenticationException(
                f"Account exists with role '{other.role}'. Please select that role to login."
            )
        logger.warning(f"Login failed - user not found for email={email} role={role}")
        raise AuthenticationException("Invalid Credentials")

    if not security.verify_password(password, user.hashed_password):
        logger.warning(f"Login failed - wrong password for user_id={user.id}")
        raise AuthenticationException("Invalid Credentials")
    if user.is_blocked:
        raise AuthorizationException("Account is blocked")

    if security.password_needs_rehash(user.hashed_password):
        crud.update_user(db, user, hashed_password=security.hash_password(password))
    return user


def get_token_from_header(request: Request) -> str | None:
    """Extract the bearer token from the Authorization header"""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:]  # Remove "Bearer " prefix
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> models.User:
    token = get_token_from_header(request)
    if not token:
        raise AuthenticationException("Authentication invalid")

    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthenticationException("Authentication invalid")

    user = crud.get_user(db, user_id)
    if user is None:
        raise AuthenticationException("Authentication invalid")
    if user.is_blocked:
        raise AuthorizationException("Account is blocked")
    return user


def require_role(*roles: models.Role) -> Callable[..., models.User]:
    """Dependency factory: the current user, provided they hold one of ``roles``."""
    allowed = {r.value for r in roles}
    label = " or ".join(sorted(allowed))

    def dependency(user: models.User = Depends(get_current_user)) -> models.User:
        if user.role not in allowed:
            raise AuthorizationException(f"Access denied. {label.capitalize()} role required.")
        return user

    return dependency


require_employer = require_role(models.Role.EMPLOYER)
require_admin = require_role(models.Role.ADMIN)
