from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from connectus.config import settings
from connectus.database import get_db
from connectus.errors import ServiceError, ValidationFailed, as_http_exception
from connectus.models.user import User
from connectus.routers.dependencies import get_current_user
from connectus.schemas.application import (
    ApplicationCreateResponse,
    ApplicationRead,
    ApplicationStatusUpdate,
    MyApplicationRead,
    ReceivedApplicationRead,
)
from connectus.services import application_service


router = APIRouter()


@router.post("", response_model=ApplicationCreateResponse)
def apply_to_job(
    job_id: int | None = Form(default=None),
    contact_email: str | None = Form(default=None),
    contact_phone: str | None = Form(default=None),
    # camelCase names sent by the web client.
    job_id_camel: int | None = Form(default=None, alias="jobId"),
    contact_email_camel: str | None = Form(default=None, alias="contactEmail"),
    contact_phone_camel: str | None = Form(default=None, alias="contactPhone"),
    resume: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApplicationCreateResponse:
    job_id = job_id if job_id is not None else job_id_camel
    contact_email = contact_email or contact_email_camel
    contact_phone = contact_phone or contact_phone_camel
    try:
        if job_id is None:
            raise ValidationFailed("job_id is required")
        if resume is None or not resume.filename:
            raise ValidationFailed("Resume file is required")
        application_service.check_resume_extension(resume.filename, settings.resume_extensions)

        job, email = application_service.check_can_apply(
            db, job_id=job_id, applicant=current_user, contact_email=contact_email
        )
        resume_url = application_service.save_resume(
            resume.file,
            user_id=current_user.id,
            original_name=resume.filename,
            upload_dir=settings.upload_dir,
        )
        try:
            application = application_service.create_application(
                db,
                job=job,
                applicant=current_user,
                contact_email=email,
                contact_phone=contact_phone,
                resume_url=resume_url,
            )
        except ServiceError:
            application_service.delete_resume(resume_url, settings.upload_dir)
            raise
    except ServiceError as exc:
        raise as_http_exception(exc) from exc

    return ApplicationCreateResponse(msg="Application submitted", application=ApplicationRead.model_validate(application))


@router.get("/mine", response_model=list[MyApplicationRead])
def read_my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[MyApplicationRead]:
    rows = application_service.list_my_applications(db, current_user.id)
    return [MyApplicationRead.model_validate(row) for row in rows]


@router.get("/my-jobs", response_model=list[ReceivedApplicationRead])
def read_applications_to_my_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ReceivedApplicationRead]:
    rows = application_service.list_applications_for_owner(db, current_user.id)
    return [ReceivedApplicationRead.model_validate(row) for row in rows]


@router.get("/job/{job_id}", response_model=list[ReceivedApplicationRead])
def read_applications_for_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ReceivedApplicationRead]:
    try:
        rows = application_service.list_applications_for_job(db, job_id=job_id, requester=current_user)
    except ServiceError as exc:
        raise as_http_exception(exc) from exc
    return [ReceivedApplicationRead.model_validate(row) for row in rows]


@router.patch("/{application_id}/status", response_model=ApplicationRead)
def change_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    try:
        application = application_service.update_application_status(
            db, application_id=application_id, requester=current_user, status=payload.status
        )
    except ServiceError as exc:
        raise as_http_exception(exc) from exc
    return ApplicationRead.model_validate(application)
