# backend/auth/schemas.py

import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name is required")
    return value


Email = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]
Password = Annotated[str, AfterValidator(_check_password)]
Name = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_check_name)]


class RegisterSchema(BaseModel):
    name: Name
    email: Email
    password: Password


class LoginSchema(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdateSchema(BaseModel):
    name: Optional[Name] = None
    password: Optional[Password] = None
