"""Sanitising and grading rules for a submitted attempt.

Clients are never trusted: names are trimmed and capped, elapsed time is
clamped, lifeline ids are deduplicated and bounded, and correctness is graded
against the server's own daily question set.
"""

import math
from typing import Any, Iterable, Mapping

from rivalry.domain.scoring import round_half_up
from rivalry.errors import SubmissionValidationError


def player_key(name: str) -> str:
    """Case-insensitive identity of a player for the one-attempt-per-day rule."""
    return name.casefold()


def sanitize_player_name(raw: Any, max_length: int) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise SubmissionValidationError("Player name is required.")
    return raw.strip()[:max_length]


def sanitize_sabotage_target(raw: Any, max_length: int) -> str | None:
    if not isinstance(raw, str):
        return None
    target = raw.strip()[:max_length]
    return target or None


def require_response_list(raw: Any) -> list:
    if not isinstance(raw, list):
        raise SubmissionValidationError("Responses must be provided as an array.")
    return raw


def clamp_elapsed_seconds(raw: Any, budget_seconds: int, grace_seconds: int) -> int:
    """Clamp a client-reported elapsed time into ``[0, budget + grace]``.

    Anything that is not a finite number counts as the full budget, including
    integers too large to represent as a float.
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return budget_seconds
    try:
        value = float(raw)
    except OverflowError:
        return budget_seconds
    if not math.isfinite(value):
        return budget_seconds
    return round_half_up(max(0.0, min(value, budget_seconds + grace_seconds)))


def normalize_lifelines(raw: Any, catalog_size: int) -> list[str]:
    """Deduplicate lifeline ids in first-seen order and cap them to the catalog size."""
    if not isinstance(raw, list):
        return []
    seen: list[str] = []
    for lifeline_id in raw:
        if isinstance(lifeline_id, str) and lifeline_id not in seen:
            seen.append(lifeline_id)
    return seen[:catalog_size]


def grade_responses(responses: Iterable[Any], answer_key: Mapping[str, str]) -> int:
    """Count correct answers.

    ``answer_key`` maps each of today's question ids to its answer. Malformed
    entries and unknown ids are ignored, and each question counts at most once
    (the first response for an id wins).
    """
    graded: set[str] = set()
    correct_count = 0
    for response in responses:
        if not isinstance(response, Mapping):
            continue
        question_id = response.get("questionId")
        if not isinstance(question_id, str) or question_id not in answer_key:
            continue
        if question_id in graded:
            continue
        graded.add(question_id)
        if response.get("selectedOption") == answer_key[question_id]:
            correct_count += 1
    return correct_count
