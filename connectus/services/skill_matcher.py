# skill_matcher.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from connectus.services.skill_normalizer import normalize_skills


@dataclass(frozen=True)
class MatchScoreResult:
    match_score: int
    matched_skills: list[str]
    job_skill_count: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def coverage_score(user_set: set[str], job_set: set[str]) -> int:
    """Percentage of job skills the user covers, 0..100."""
    if not job_set or not user_set:
        return 0
    raw = 100.0 * len(job_set & user_set) / len(job_set)
    if math.isnan(raw):
        return 0
    return max(0, min(100, _round_half_up(raw)))


def compute_match_score(user_skills: Any, job_skills: Any) -> MatchScoreResult:
    # Explicit skills only: bio text never contributes to the score.
    user_set = normalize_skills(user_skills)
    job_set = normalize_skills(job_skills)
    matched = sorted(user_set & job_set)
    return MatchScoreResult(
        match_score=coverage_score(user_set, job_set),
        matched_skills=matched,
        job_skill_count=len(job_set),
    )
