"""Decide whether a rating lookup returned the professor that was asked for."""

from __future__ import annotations

import re

_TOKEN_SPLIT = re.compile(r"[\s,]+")


def normalize_name(name: str) -> str:
    return name.strip().lower()


def name_tokens(name: str) -> list[str]:
    """Split a name on whitespace and commas into lowercase tokens."""
    return [token for token in _TOKEN_SPLIT.split(normalize_name(name)) if token]


def _covered(tokens: list[str], others: list[str]) -> bool:
    # Containment works both ways so "jon" pairs with "jonathan" and vice versa
    return all(any(token in other or other in token for other in others) for token in tokens)


def names_match(requested: str, candidate: str) -> bool:
    """
    Return True when candidate plausibly names the requested professor.

    Tolerates a missing middle name, "Last, First" ordering and initials,
    but rejects a different person from the same department.
    """
    if normalize_name(requested) == normalize_name(candidate):
        return True

    requested_tokens = name_tokens(requested)
    candidate_tokens = name_tokens(candidate)
    if not requested_tokens or not candidate_tokens:
        return False

    return _covered(requested_tokens, candidate_tokens) or _covered(
        candidate_tokens, requested_tokens
    )
