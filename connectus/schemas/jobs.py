from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from connectus.schemas.profile import PaymentRead


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    # List of tokens or a comma-separated string.
    skills: list[str] | str
    budget: str | None = None
    salary: str | None = None
    # Optional here so the service can answer with its own validation codes.
    deadline: datetime | None = None
    tx_signature: str | None = Field(default=None, validation_alias=AliasChoices("tx_signature", "txSignature"))
    # Wallet connected in the browser, checked against the profile wallet.
    wallet_address: str | None = Field(default=None, validation_alias=AliasChoices("wallet_address", "walletAddress"))


class JobRead(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    skills: list[str]
    budget: str | None = None
    salary: str | None = None
    deadline: datetime
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class JobSummary(BaseModel):
    id: int
    title: str
    description: str
    skills: list[str]
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class JobCreateResponse(BaseModel):
    msg: str
    job: JobRead
    payment: PaymentRead | None = None
