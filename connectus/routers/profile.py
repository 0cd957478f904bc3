from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from connectus.database import get_db
from connectus.models.payment import Payment
from connectus.models.user import User
from connectus.routers.dependencies import get_current_user, term_extractor
from connectus.schemas.profile import PaymentRead, ProfileUpdate
from connectus.schemas.user import UserRead
from connectus.services.skill_extractor import CandidateTermExtractor, merge_profile_skills
from connectus.services.skill_normalizer import split_skill_text


router = APIRouter()


@router.get("/me", response_model=UserRead)
def read_my_profile(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.post("", response_model=UserRead)
def update_my_profile(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    extractor: CandidateTermExtractor = Depends(term_extractor),
) -> UserRead:
    update_data = update.model_dump(exclude_unset=True)

    bio = update_data.pop("bio", None)
    skills = update_data.pop("skills", None)
    if bio:
        current_user.bio = bio
        # Allow-listed terms found in the bio join the explicit skills.
        explicit = skills if skills is not None else (current_user.skills or [])
        current_user.skills = merge_profile_skills(bio, explicit, extractor)
    elif skills is not None:
        current_user.skills = split_skill_text(skills)

    for field, value in update_data.items():
        # Empty values do not clear stored fields.
        if value:
            setattr(current_user, field, value)

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return UserRead.model_validate(current_user)


@router.get("/payment-history", response_model=list[PaymentRead])
def read_payment_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[PaymentRead]:
    payments = (
        db.query(Payment)
        .filter(Payment.user_id == current_user.id)
        .order_by(Payment.date.desc(), Payment.id.desc())
        .all()
    )
    return [PaymentRead.model_validate(p) for p in payments]
