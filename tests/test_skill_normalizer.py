from __future__ import annotations

import pytest

from connectus.services.skill_normalizer import ALIAS_TABLE, normalize_skill, normalize_skills, split_skill_text


def test_react_spellings_converge() -> None:
    variants = ["React", "react", "React.js", "reactjs", " REACT ", "react js", "React-JS"]
    assert {normalize_skill(v) for v in variants} == {"react"}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Node", "nodejs"),
        ("Node.js", "nodejs"),
        ("node js", "nodejs"),
        ("NodeJS", "nodejs"),
        ("Express.js", "express"),
        ("Mongo", "mongodb"),
        ("Tailwind CSS", "tailwind"),
        ("Next.js", "nextjs"),
        ("JS", "javascript"),
        ("Postgres", "postgresql"),
    ],
)
def test_aliases(raw: str, expected: str) -> None:
    assert normalize_skill(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "!!!", 42, ["react"], {"a": 1}])
def test_empty_or_non_string_input(raw) -> None:
    assert normalize_skill(raw) == ""


@pytest.mark.parametrize(
    "raw",
    ["React.js", "Some  Weird   Skill!", "three.js", "UI/UX", "c-sharp", "Ember JS", "data-viz", "Vue", "sveltekit"],
)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_skill(raw)
    assert normalize_skill(once) == once


def test_every_canonical_id_is_a_fixed_point() -> None:
    for canonical in set(ALIAS_TABLE.values()):
        assert normalize_skill(canonical) == canonical


def test_unknown_skill_degrades_to_cleaned_text() -> None:
    assert normalize_skill("  Quantum   Basket-Weaving! ") == "quantum basket-weaving"
    assert normalize_skill("quantum basket-weaving") == "quantum basket-weaving"


def test_trailing_js_variant_resolves() -> None:
    # Not listed as an alias, found by stripping the "js" suffix.
    assert normalize_skill("Typescript JS") == "typescript"


def test_batch_drops_empties_and_dedupes() -> None:
    assert normalize_skills(["React", "react.js", "", None, "Node", "nodejs", "css"]) == {"react", "nodejs", "css"}


def test_batch_accepts_comma_separated_string() -> None:
    assert normalize_skills("React, Node.js ,, CSS") == {"react", "nodejs", "css"}
    assert split_skill_text("a, b ,,c") == ["a", "b", "c"]


def test_batch_of_nothing() -> None:
    assert normalize_skills(None) == set()
    assert normalize_skills([]) == set()
    assert normalize_skills(123) == set()
