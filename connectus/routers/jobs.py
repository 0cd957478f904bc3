from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from connectus.config import settings
from connectus.database import get_db
from connectus.errors import ServiceError, as_http_exception
from connectus.models.user import User
from connectus.routers.dependencies import get_current_user, transfer_verifier
from connectus.schemas.jobs import JobCreate, JobCreateResponse, JobRead
from connectus.schemas.profile import PaymentRead
from connectus.services.job_service import JobDraft, create_job_with_payment, get_job, list_jobs, list_jobs_for_user
from connectus.services.payment_verifier import TransferVerifier


router = APIRouter()


@router.get("", response_model=list[JobRead])
def read_jobs(
    q: str | None = Query(default=None, max_length=200, description="Search title, description and skills"),
    db: Session = Depends(get_db),
) -> list[JobRead]:
    return [JobRead.model_validate(job) for job in list_jobs(db, query=q)]


@router.get("/my-jobs", response_model=list[JobRead])
def read_my_jobs(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> list[JobRead]:
    return [JobRead.model_validate(job) for job in list_jobs_for_user(db, current_user.id)]


@router.get("/{job_id}", response_model=JobRead)
def read_job(job_id: int, db: Session = Depends(get_db)) -> JobRead:
    try:
        job = get_job(db, job_id)
    except ServiceError as exc:
        raise as_http_exception(exc) from exc
    return JobRead.model_validate(job)


@router.post("", response_model=JobCreateResponse)
def post_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    verifier: TransferVerifier = Depends(transfer_verifier),
) -> JobCreateResponse:
    draft = JobDraft(
        title=payload.title,
        description=payload.description,
        skills=payload.skills,
        deadline=payload.deadline,
        tx_signature=payload.tx_signature,
        budget=payload.budget,
        salary=payload.salary,
        wallet_address=payload.wallet_address,
    )
    try:
        result = create_job_with_payment(
            db,
            poster=current_user,
            draft=draft,
            verifier=verifier,
            admin_wallet=settings.admin_wallet_address,
            fee_sol=settings.job_posting_fee_sol,
        )
    except ServiceError as exc:
        raise as_http_exception(exc) from exc

    return JobCreateResponse(
        msg="Job posted successfully!",
        job=JobRead.model_validate(result.job),
        payment=PaymentRead.model_validate(result.payment) if result.payment is not None else None,
    )
