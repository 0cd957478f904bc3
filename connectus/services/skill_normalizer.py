"""Canonicalize free-text skill tokens.

Surface variants such as ``"React.js"``, ``"reactjs"`` and ``" React "`` collapse to a
single canonical id (``"react"``) so that user and job skills can be compared as sets.
Unknown skills degrade to their cleaned text, which still matches identical spellings.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Iterable, Mapping


_STRIP_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"\s+")
_TRAILING_JS_RE = re.compile(r"[\s-]*js$")


# canonical id -> surface forms (already cleaned: lower-case, no dots, single spaces)
_CANONICAL_SKILLS: dict[str, tuple[str, ...]] = {
    "javascript": ("js", "java script", "ecmascript", "es6", "vanilla js", "vanillajs"),
    "typescript": ("ts", "type script"),
    "react": ("reactjs", "react js", "react-js", "reactjsx"),
    "react native": ("reactnative", "react-native", "rn"),
    "nodejs": ("node", "node js", "node-js"),
    "express": ("expressjs", "express js", "express-js"),
    "nextjs": ("next", "next js", "next-js"),
    "vuejs": ("vue", "vue js", "vue-js"),
    "angular": ("angularjs", "angular js", "angular-js"),
    "svelte": ("sveltejs", "svelte js", "sveltekit"),
    "redux": ("reduxjs", "redux js", "redux toolkit"),
    "vite": ("vitejs", "vite js"),
    "mongodb": ("mongo", "mongo db", "mongoose"),
    "postgresql": ("postgres", "postgre", "psql", "postgre sql"),
    "mysql": ("my sql",),
    "sql": ("structured query language",),
    "tailwind": ("tailwind css", "tailwindcss", "tailwind-css"),
    "css": ("css3", "cascading style sheets"),
    "html": ("html5", "hypertext markup language"),
    "python": ("py", "python3"),
    "django": ("django rest framework", "drf"),
    "fastapi": ("fast api",),
    "golang": ("go", "go lang"),
    "csharp": ("c sharp", "c-sharp"),
    "cpp": ("cplusplus", "c plus plus"),
    "dotnet": (".net", "net", "dot net", "aspnet", "asp net"),
    "solana": ("sol", "solana web3", "solana web3js", "web3js solana"),
    "web3": ("web 3", "web3js", "web3 js"),
    "blockchain": ("block chain",),
    "ethereum": ("eth",),
    "solidity": ("sol lang",),
    "rust": ("rustlang", "rust lang"),
    "graphql": ("graph ql",),
    "rest api": ("rest", "restful", "restful api", "rest apis", "restful apis"),
    "docker": ("docker compose", "docker-compose"),
    "kubernetes": ("k8s", "kube"),
    "aws": ("amazon web services",),
    "gcp": ("google cloud", "google cloud platform"),
    "azure": ("microsoft azure",),
    "git": ("github", "gitlab"),
    "machine learning": ("ml",),
    "artificial intelligence": ("ai",),
    "nlp": ("natural language processing",),
    "ui ux": ("ui/ux", "uiux", "ui-ux", "ux ui", "ux", "ui"),
    "figma": ("figma design",),
    "groq": ("groq api", "groq sdk"),
    "jwt": ("json web token", "json web tokens"),
}


def _build_alias_table(canonical: Mapping[str, Iterable[str]]) -> Mapping[str, str]:
    table: dict[str, str] = {}
    for canonical_id, aliases in canonical.items():
        table[canonical_id] = canonical_id
        for alias in aliases:
            table.setdefault(_clean(alias), canonical_id)
    return MappingProxyType(table)


def _clean(value: str) -> str:
    # "node.js" and "nodejs" clean alike: dots fall outside [\w\s-].
    text = _STRIP_RE.sub("", value.lower().strip())
    return _SPACE_RE.sub(" ", text).strip()


ALIAS_TABLE: Mapping[str, str] = _build_alias_table(_CANONICAL_SKILLS)


def _variants(cleaned: str) -> list[str]:
    """Deterministic fallback spellings, tried in order after the direct lookup."""
    candidates: list[str] = []

    def add(value: str) -> None:
        value = value.strip()
        if value and value != cleaned and value not in candidates:
            candidates.append(value)

    stripped_js = _TRAILING_JS_RE.sub("", cleaned)
    no_space = cleaned.replace(" ", "")
    no_hyphen = cleaned.replace("-", "")
    hyphen_space = _SPACE_RE.sub(" ", cleaned.replace("-", " "))

    add(stripped_js)
    add(no_space)
    add(no_hyphen)
    add(hyphen_space)
    add(no_space.replace("-", ""))
    add(_TRAILING_JS_RE.sub("", no_space.replace("-", "")))
    add(stripped_js.replace(" ", "").replace("-", ""))
    add(_SPACE_RE.sub(" ", stripped_js.replace("-", " ")))
    return candidates


def normalize_skill(value: Any) -> str:
    """Map one free-text skill to its canonical id.

    Returns ``""`` for ``None``, non-strings and input that cleans to nothing;
    callers are expected to drop empties.
    """
    if not isinstance(value, str):
        return ""
    cleaned = _clean(value)
    if not cleaned:
        return ""

    hit = ALIAS_TABLE.get(cleaned)
    if hit is not None:
        return hit

    for candidate in _variants(cleaned):
        hit = ALIAS_TABLE.get(candidate)
        if hit is not None:
            return hit

    return cleaned


def split_skill_text(raw: Any) -> list[str]:
    """Accept a list of tokens or a comma-separated string."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(raw, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in raw if isinstance(item, str) and item.strip()]
    return []


def normalize_skills(values: Any) -> set[str]:
    out: set[str] = set()
    for token in split_skill_text(values):
        canonical = normalize_skill(token)
        if canonical:
            out.add(canonical)
    return out
