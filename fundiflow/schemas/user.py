# File: fundiflow/schemas/user.py

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

UserRole = Literal["admin", "assembler", "guest"]


class UserBase(BaseModel):
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(min_length=6)
    name: Optional[str] = None
    # Guest is a transient identity and cannot be registered.
    role: Optional[Literal["admin", "assembler"]] = None


class UserLogin(UserBase):
    password: str


class UserRead(UserBase):
    id: str
    name: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
