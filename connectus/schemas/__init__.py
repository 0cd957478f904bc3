# __init__.py
from connectus.schemas.application import (
	ApplicationCreateResponse,
	ApplicationRead,
	ApplicationStatusUpdate,
	MyApplicationRead,
	ReceivedApplicationRead,
)
from connectus.schemas.chat import ChatRequest, ChatResponse
from connectus.schemas.jobs import JobCreate, JobCreateResponse, JobRead, JobSummary
from connectus.schemas.profile import PaymentRead, ProfileUpdate
from connectus.schemas.skills import ExtractSkillsRequest, ExtractSkillsResponse, MatchJobRequest, MatchJobResponse
from connectus.schemas.user import Token, TokenData, UserCreate, UserLogin, UserRead, UserSummary

__all__ = [
	"ApplicationCreateResponse",
	"ApplicationRead",
	"ApplicationStatusUpdate",
	"MyApplicationRead",
	"ReceivedApplicationRead",
	"ChatRequest",
	"ChatResponse",
	"JobCreate",
	"JobCreateResponse",
	"JobRead",
	"JobSummary",
	"PaymentRead",
	"ProfileUpdate",
	"ExtractSkillsRequest",
	"ExtractSkillsResponse",
	"MatchJobRequest",
	"MatchJobResponse",
	"Token",
	"TokenData",
	"UserCreate",
	"UserLogin",
	"UserRead",
	"UserSummary",
]
