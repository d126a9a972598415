"""
Password hashing for user credentials.

bcrypt via passlib. The work factor comes from ``BCRYPT_ROUNDS`` so tests
can run with a cheap one; hashes made with an older factor are upgraded on
the next successful login (see ``auth.authenticate_user``).
"""
from __future__ import annotations

from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
    bcrypt__min_rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def password_needs_rehash(hashed_password: str) -> bool:
    return pwd_context.needs_update(hashed_password)
