# skills.py
from pydantic import AliasChoices, BaseModel, Field


class ExtractSkillsRequest(BaseModel):
    text: str = Field(min_length=1)


class ExtractSkillsResponse(BaseModel):
    skills: list[str] = Field(default_factory=list)


class MatchJobRequest(BaseModel):
    user_id: int = Field(validation_alias=AliasChoices("user_id", "userId"))
    job_id: int = Field(validation_alias=AliasChoices("job_id", "jobId"))


class MatchJobResponse(BaseModel):
    # Web client reads camelCase keys.
    match_score: int = Field(ge=0, le=100, serialization_alias="matchScore")
    matched_skills: list[str] = Field(default_factory=list, serialization_alias="matchedSkills")
