from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from connectus.database import get_db
from connectus.models.jobs import Job
from connectus.models.user import User
from connectus.routers.dependencies import term_extractor
from connectus.schemas.skills import ExtractSkillsRequest, ExtractSkillsResponse, MatchJobRequest, MatchJobResponse
from connectus.services.skill_extractor import CandidateTermExtractor, extract_skills
from connectus.services.skill_matcher import compute_match_score


router = APIRouter()


@router.post("/extract-skills", response_model=ExtractSkillsResponse)
def extract_skills_from_text(
    payload: ExtractSkillsRequest,
    extractor: CandidateTermExtractor = Depends(term_extractor),
) -> ExtractSkillsResponse:
    return ExtractSkillsResponse(skills=extract_skills(payload.text, extractor))


@router.post("/match-job", response_model=MatchJobResponse)
def match_job(payload: MatchJobRequest, db: Session = Depends(get_db)) -> MatchJobResponse:
    user = db.query(User).filter(User.id == payload.user_id).first()
    job = db.query(Job).filter(Job.id == payload.job_id).first()
    if not user or not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "not_found", "message": "User or Job not found."},
        )

    result = compute_match_score(user.skills or [], job.skills or [])
    return MatchJobResponse(match_score=result.match_score, matched_skills=result.matched_skills)
