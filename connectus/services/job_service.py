"""Payment-gated job creation.

A posting moves through ``JobPostingState`` in order; any failing check ends it in
one of the ``PaymentFailure`` kinds (or a validation/conflict error) and nothing is
written. The job row is authoritative: once it exists, a failure to write the
payment row is logged for reconciliation and does not undo the posting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import Text, cast, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from connectus.errors import Conflict, NotFound, ServerMisconfigured, ValidationFailed
from connectus.models.jobs import Job
from connectus.models.payment import Payment
from connectus.models.user import User
from connectus.services.payment_verifier import PaymentFailure, PaymentRejected, TransferVerifier, VerifiedTransfer
from connectus.services.skill_normalizer import split_skill_text


logger = logging.getLogger(__name__)


class JobPostingState(str, Enum):
    DRAFTED = "drafted"
    WALLET_CONNECTED = "wallet_connected"
    TRANSACTION_SUBMITTED = "transaction_submitted"
    TRANSACTION_CONFIRMED = "transaction_confirmed"
    JOB_PERSISTED = "job_persisted"


@dataclass
class JobDraft:
    title: str
    description: str
    skills: Any
    deadline: datetime | None
    tx_signature: str | None
    budget: str | None = None
    salary: str | None = None
    wallet_address: str | None = None


@dataclass
class JobPostingResult:
    job: Job
    payment: Payment | None
    transfer: VerifiedTransfer
    state: JobPostingState


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _validate_draft(draft: JobDraft, now: datetime) -> tuple[list[str], datetime, str]:
    if not (draft.title or "").strip():
        raise ValidationFailed("Title is required")
    if not (draft.description or "").strip():
        raise ValidationFailed("Description is required")
    skills = split_skill_text(draft.skills)
    if not skills:
        raise ValidationFailed("At least one skill is required")
    if draft.deadline is None:
        raise ValidationFailed("Deadline is required")
    deadline = as_utc(draft.deadline)
    if deadline <= now:
        raise ValidationFailed("Deadline must be in the future")
    signature = (draft.tx_signature or "").strip()
    if not signature:
        raise ValidationFailed("Payment transaction signature is required.")
    return skills, deadline, signature


def create_job_with_payment(
    db: Session,
    *,
    poster: User,
    draft: JobDraft,
    verifier: TransferVerifier,
    admin_wallet: str | None,
    fee_sol: float,
    now: datetime | None = None,
) -> JobPostingResult:
    now = as_utc(now) if now is not None else utc_now()
    state = JobPostingState.DRAFTED
    skills, deadline, signature = _validate_draft(draft, now)

    if db.query(Payment.id).filter(Payment.tx_signature == signature).first() is not None:
        raise Conflict("This payment transaction has already been used.", code="duplicate_payment")

    try:
        stored_wallet = (poster.public_wallet_address or "").strip()
        if not stored_wallet:
            raise PaymentRejected(
                PaymentFailure.WALLET_MISSING,
                "Add your public wallet address to your profile before posting a job.",
            )
        connected = (draft.wallet_address or "").strip()
        if connected and connected != stored_wallet:
            raise PaymentRejected(
                PaymentFailure.PROFILE_WALLET_MISMATCH,
                "Connected wallet does not match the wallet address in your profile.",
            )
        state = JobPostingState.WALLET_CONNECTED

        if not admin_wallet:
            logger.error("jobs.create ADMIN_WALLET_ADDRESS is not configured")
            raise ServerMisconfigured("Server configuration error.")

        state = JobPostingState.TRANSACTION_SUBMITTED
        transfer = verifier.verify_transfer(signature, admin_wallet, stored_wallet)
    except PaymentRejected as exc:
        exc.stage = state.value
        logger.info(
            "jobs.create rejected user_id=%s signature=%s code=%s stage=%s",
            poster.id,
            signature,
            exc.code,
            exc.stage,
        )
        raise
    state = JobPostingState.TRANSACTION_CONFIRMED

    job = Job(
        user_id=poster.id,
        title=draft.title.strip(),
        description=draft.description.strip(),
        skills=skills,
        budget=draft.budget,
        salary=draft.salary,
        deadline=deadline,
        date=now,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    state = JobPostingState.JOB_PERSISTED
    logger.info("jobs.create ok user_id=%s job_id=%s signature=%s", poster.id, job.id, signature)

    payment = _record_payment(db, poster=poster, job=job, transfer=transfer, fee_sol=fee_sol, now=now)
    return JobPostingResult(job=job, payment=payment, transfer=transfer, state=state)


def _record_payment(
    db: Session,
    *,
    poster: User,
    job: Job,
    transfer: VerifiedTransfer,
    fee_sol: float,
    now: datetime,
) -> Payment | None:
    amount = transfer.amount_sol(fee_sol)
    user_id, job_id = poster.id, job.id
    payment = Payment(
        user_id=user_id,
        job_id=job_id,
        job_title=job.title,
        amount=amount,
        tx_signature=transfer.signature,
        date=now,
    )
    try:
        db.add(payment)
        db.commit()
        db.refresh(payment)
    except SQLAlchemyError:
        db.rollback()
        # The job stays posted; this line is what reconciliation greps for.
        logger.exception(
            "payment.record_failed user_id=%s job_id=%s signature=%s amount=%s",
            user_id,
            job_id,
            transfer.signature,
            amount,
        )
        return None
    return payment


def list_jobs(db: Session, *, query: str | None = None) -> list[Job]:
    q = db.query(Job)
    term = (query or "").strip()
    if term:
        # Skills live in a JSON column; matching its serialized text keeps this portable.
        like = f"%{term.lower()}%"
        q = q.filter(
            or_(
                Job.title.ilike(like),
                Job.description.ilike(like),
                cast(Job.skills, Text).ilike(like),
            )
        )
    return q.order_by(Job.date.desc(), Job.id.desc()).all()


def list_jobs_for_user(db: Session, user_id: int) -> list[Job]:
    return db.query(Job).filter(Job.user_id == user_id).order_by(Job.date.desc(), Job.id.desc()).all()


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise NotFound("Job not found")
    return job
