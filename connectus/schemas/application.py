from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from connectus.schemas.jobs import JobSummary
from connectus.schemas.user import UserSummary


ApplicationStatus = Literal["submitted", "reviewed", "shortlisted", "rejected"]


class ApplicationRead(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    owner_id: int
    contact_email: str
    contact_phone: str | None = None
    resume_url: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MyApplicationRead(ApplicationRead):
    job: JobSummary | None = None


class ReceivedApplicationRead(ApplicationRead):
    job: JobSummary | None = None
    applicant: UserSummary | None = None


class ApplicationCreateResponse(BaseModel):
    msg: str
    application: ApplicationRead


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
