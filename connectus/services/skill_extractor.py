from __future__ import annotations

import logging
import re
from typing import Iterable, Protocol, Sequence

import nltk

from connectus.services.skill_normalizer import split_skill_text


logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#.\-]*", re.IGNORECASE)
_NOUN_TAGS = ("NN", "NNS", "NNP", "NNPS")

# Terms the extractor is allowed to surface as skills.
ALLOWED_SKILL_TERMS: frozenset[str] = frozenset(
    {
        "react",
        "node",
        "javascript",
        "typescript",
        "mongodb",
        "solana",
        "express",
        "tailwind",
        "css",
        "html",
        "groq",
        "nlp",
        "ai",
        "web3",
        "redux",
        "nextjs",
        "vite",
    }
)


class CandidateTermExtractor(Protocol):
    def extract(self, text: str) -> Sequence[str]:
        ...


def tokenize_text(text: str) -> list[str]:
    if not text:
        return []
    return [m.group(0).strip(".-").lower() for m in _TOKEN_RE.finditer(text) if m.group(0).strip(".-")]


class RegexTermExtractor:
    """Every word-like token is a candidate."""

    def extract(self, text: str) -> Sequence[str]:
        return tokenize_text(text)


class NltkNounExtractor:
    """Nouns from NLTK part-of-speech tagging.

    Needs the ``punkt_tab`` and ``averaged_perceptron_tagger_eng`` data packages.
    Without them every token is treated as a candidate.
    """

    def __init__(self) -> None:
        self._fallback = RegexTermExtractor()
        self._warned = False

    def extract(self, text: str) -> Sequence[str]:
        if not text or not text.strip():
            return []
        try:
            tagged = nltk.pos_tag(nltk.word_tokenize(text))
        except LookupError as exc:
            if not self._warned:
                logger.warning("nltk data missing, using regex tokens: %s", exc)
                self._warned = True
            return self._fallback.extract(text)
        return [word.lower() for word, tag in tagged if tag in _NOUN_TAGS]


_default_extractor: CandidateTermExtractor | None = None


def get_term_extractor() -> CandidateTermExtractor:
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = NltkNounExtractor()
    return _default_extractor


def extract_skills(
    text: str,
    extractor: CandidateTermExtractor,
    *,
    allowed: Iterable[str] = ALLOWED_SKILL_TERMS,
) -> list[str]:
    """Allow-listed candidate terms, lower-cased, first occurrence order."""
    if not text or not text.strip():
        return []
    allow = set(allowed)
    out: list[str] = []
    for term in extractor.extract(text):
        value = str(term).lower().strip()
        if value and value in allow and value not in out:
            out.append(value)
    return out


def merge_profile_skills(bio: str | None, skills: object, extractor: CandidateTermExtractor) -> list[str]:
    """Bio-extracted terms first, then explicit skills, de-duplicated case-insensitively."""
    merged: list[str] = []
    seen: set[str] = set()
    for item in [*extract_skills(bio or "", extractor), *split_skill_text(skills)]:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            merged.append(item)
    return merged
