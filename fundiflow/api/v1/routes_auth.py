# File: fundiflow/api/v1/routes_auth.py

"""
Auth API routes.

Tokens are bearer JWTs carrying the user id (``sub``) and ``role``.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db
from fundiflow.core.security import create_access_token
from fundiflow.models.user import User
from fundiflow.schemas.user import Token, UserCreate, UserLogin, UserRead
from fundiflow.services.auth_service import (
    GUEST_USER_ID,
    EmailAlreadyRegisteredError,
    authenticate_user,
    register_user,
)

router = APIRouter()


def _token_for(user: User) -> Token:
    access_token = create_access_token({"sub": user.id, "role": user.role})
    return Token(access_token=access_token, role=user.role)


@router.post(
    "/register",
    response_model=Token,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.

    Without an explicit role, ``@admin.com`` addresses become admins and
    everyone else an assembler.
    """
    try:
        user = register_user(db, payload)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _token_for(user)


@router.post("/login", response_model=Token, summary="User login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=payload.email, password=payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_for(user)


@router.post("/token", response_model=Token, include_in_schema=False)
def login_form(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """OAuth2 password form variant used by the interactive docs."""
    return login(UserLogin(email=form.username, password=form.password), db)


@router.post("/guest", response_model=Token, summary="Read-only guest login")
def guest_login():
    access_token = create_access_token({"sub": GUEST_USER_ID, "role": "guest"})
    return Token(access_token=access_token, role="guest")


@router.get("/me", response_model=UserRead, summary="Current user")
def me(user: User = Depends(get_current_user)):
    return user
