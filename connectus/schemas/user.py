# user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


BCRYPT_MAX_BYTES = 72


def _validate_email_like(v: str) -> str:
    value = (v or "").strip().lower()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: str
    password: str = Field(min_length=6, max_length=72)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        return _validate_email_like(v)

    @field_validator("password")
    @classmethod
    def _check_password_bytes(cls, v: str) -> str:
        # bcrypt refuses more than 72 bytes, not characters.
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
        return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        return _validate_email_like(v)


class UserRead(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    linkedin: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    public_wallet_address: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


class UserSummary(BaseModel):
    """Applicant details shown to job posters."""

    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    public_wallet_address: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: int
