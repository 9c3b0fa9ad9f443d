# File: fundiflow/services/auth_service.py

"""
Authentication service.

Contains:
  - User lookup
  - Registration (role derived from the email when not given; assemblers
    get a linked worker profile)
  - Password verification
  - Guest identity
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.core.security import hash_password, role_from_email, verify_password
from fundiflow.models.user import User
from fundiflow.models.worker import Worker
from fundiflow.schemas.user import UserCreate
from fundiflow.services.cached_queries import invalidate_worker_cache

GUEST_USER_ID = "guest"


class EmailAlreadyRegisteredError(ValueError):
    pass


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email.lower())).first()


def register_user(db: Session, payload: UserCreate) -> User:
    email = payload.email.lower()
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError(f"Email {email} is already registered")

    user = User(
        email=email,
        name=payload.name,
        role=payload.role or role_from_email(email),
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    db.flush()

    if user.role == "assembler":
        db.add(Worker(
            user_id=user.id,
            name=payload.name or email.split("@")[0],
            email=email,
            skills=["New Recruit"],
            availability="Pending",
            past_performance=0.0,
        ))

    db.commit()
    db.refresh(user)
    if user.role == "assembler":
        invalidate_worker_cache()
    return user


def authenticate_user(
    db: Session,
    *,
    email: str,
    password: str,
) -> Optional[User]:
    """
    Return the user when the credentials match, otherwise None.
    """
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def guest_user() -> User:
    """Transient read-only identity; never persisted."""
    return User(
        id=GUEST_USER_ID,
        email="guest@fundiflow.app",
        name="Guest",
        role="guest",
        hashed_password="",
    )
