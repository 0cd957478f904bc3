from __future__ import annotations

import logging
import secrets
import shutil
import time
from pathlib import Path
from typing import BinaryIO

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from connectus.errors import Conflict, Forbidden, NotFound, ValidationFailed
from connectus.models.application import APPLICATION_STATUSES, Application
from connectus.models.jobs import Job
from connectus.models.user import User
from connectus.services.job_service import as_utc, get_job, utc_now


logger = logging.getLogger(__name__)

RESUME_URL_PREFIX = "/uploads/resumes"


def resume_dir(upload_dir: Path) -> Path:
    path = Path(upload_dir) / "resumes"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resume_filename(user_id: int | None, original_name: str | None) -> str:
    """``<user>-<epoch ms>-<random><ext>``: unique per request without locking."""
    ext = Path(original_name or "").suffix.lower() or ".pdf"
    owner = str(user_id) if user_id is not None else "anon"
    return f"{owner}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


def check_resume_extension(original_name: str | None, allowed: list[str]) -> None:
    ext = Path(original_name or "").suffix.lower()
    # No extension is stored as .pdf, matching resume_filename.
    if ext and ext not in allowed:
        raise ValidationFailed(f"Resume must be one of: {', '.join(allowed)}", code="unsupported_resume_type")


def save_resume(stream: BinaryIO, *, user_id: int, original_name: str | None, upload_dir: Path) -> str:
    """Write the upload to disk and return its public URL path."""
    target_dir = resume_dir(upload_dir)
    filename = resume_filename(user_id, original_name)
    target = target_dir / filename
    # "xb" refuses to clobber an existing file.
    with target.open("xb") as out:
        shutil.copyfileobj(stream, out)
    logger.info("resume.saved user_id=%s file=%s", user_id, filename)
    return f"{RESUME_URL_PREFIX}/{filename}"


def delete_resume(resume_url: str, upload_dir: Path) -> None:
    name = resume_url.rsplit("/", 1)[-1]
    path = resume_dir(upload_dir) / name
    path.unlink(missing_ok=True)


def check_can_apply(db: Session, *, job_id: int, applicant: User, contact_email: str | None) -> tuple[Job, str]:
    """Everything that can reject an application before the resume hits disk."""
    job = get_job(db, job_id)

    if job.deadline is not None and as_utc(job.deadline) < utc_now():
        raise ValidationFailed(
            "The deadline for this job has passed. You cannot apply anymore.",
            code="deadline_passed",
        )

    existing = (
        db.query(Application.id)
        .filter(Application.job_id == job.id, Application.applicant_id == applicant.id)
        .first()
    )
    if existing is not None:
        raise Conflict("You have already applied to this job.", code="duplicate_application")

    resolved_email = (contact_email or "").strip() or (applicant.email or "").strip()
    if not resolved_email:
        raise ValidationFailed("Contact email is required")
    return job, resolved_email


def create_application(
    db: Session,
    *,
    job: Job,
    applicant: User,
    contact_email: str,
    contact_phone: str | None,
    resume_url: str,
) -> Application:
    application = Application(
        job_id=job.id,
        applicant_id=applicant.id,
        owner_id=job.user_id,
        contact_email=contact_email,
        contact_phone=(contact_phone or "").strip() or applicant.phone or "",
        resume_url=resume_url,
        status="submitted",
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("You have already applied to this job.", code="duplicate_application") from exc
    db.refresh(application)
    return application


def list_my_applications(db: Session, applicant_id: int) -> list[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.applicant_id == applicant_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def list_applications_for_owner(db: Session, owner_id: int) -> list[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.owner_id == owner_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def list_applications_for_job(db: Session, *, job_id: int, requester: User) -> list[Application]:
    job = get_job(db, job_id)
    if job.user_id != requester.id:
        raise Forbidden("Not authorized to view applications for this job")
    return (
        db.query(Application)
        .options(joinedload(Application.applicant))
        .filter(Application.job_id == job.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def update_application_status(db: Session, *, application_id: int, requester: User, status: str) -> Application:
    if status not in APPLICATION_STATUSES:
        raise ValidationFailed(f"status must be one of: {', '.join(APPLICATION_STATUSES)}")
    application = db.query(Application).filter(Application.id == application_id).first()
    if application is None:
        raise NotFound("Application not found")
    if application.owner_id != requester.id:
        raise Forbidden("Not authorized to update this application")
    application.status = status
    db.commit()
    db.refresh(application)
    return application
