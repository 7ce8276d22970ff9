from __future__ import annotations

import pytest

from course_catalog.domain.services.name_matching import name_tokens, names_match


def test_name_tokens_split_on_whitespace_and_commas() -> None:
    assert name_tokens("  Smith,  John A. ") == ["smith", "john", "a."]
    assert name_tokens(",,") == []


@pytest.mark.parametrize(
    ("requested", "candidate"),
    [
        ("John Smith", "john smith"),
        ("John Smith", "Smith, John A."),
        ("John Smith", "John Andrew Smith"),
        ("Maria de la Cruz", "Cruz, Maria"),
        # "jon" is a substring of "jonathan", so token containment accepts it
        ("Jon Doe", "Jonathan Doe"),
        ("Jonathan Doe", "Jon Doe"),
    ],
)
def test_names_match_accepts_formatting_variants(requested: str, candidate: str) -> None:
    assert names_match(requested, candidate)


@pytest.mark.parametrize(
    ("requested", "candidate"),
    [
        ("John Smith", "Jane Doe"),
        ("John Smith", "Alice Smith"),
        ("Wei Zhang", "Li Wang"),
        ("John Smith", ""),
    ],
)
def test_names_match_rejects_other_professors(requested: str, candidate: str) -> None:
    assert not names_match(requested, candidate)


def test_token_containment_also_accepts_longer_surnames() -> None:
    """Containment is literal: "smith" inside "smithson" counts as a match."""
    assert names_match("John Smith", "John Smithson")
