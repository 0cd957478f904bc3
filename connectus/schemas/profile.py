# profile.py
from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProfileUpdate(BaseModel):
    """Partial profile edit; only fields present in the request are applied."""

    bio: str | None = None
    linkedin: str | None = Field(default=None, validation_alias=AliasChoices("linkedin", "linkedIn"))
    phone: str | None = None
    # List of tokens or a comma-separated string.
    skills: list[str] | str | None = None
    public_wallet_address: str | None = Field(
        default=None,
        max_length=64,
        validation_alias=AliasChoices("public_wallet_address", "publicWalletAddress"),
    )

    @field_validator("bio", "linkedin", "phone", "public_wallet_address", mode="before")
    @classmethod
    def _strip(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class PaymentRead(BaseModel):
    id: int
    job_id: int | None = None
    job_title: str
    amount: float
    tx_signature: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)
