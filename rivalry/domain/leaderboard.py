"""Sabotage resolution and leaderboard ranking for one day's submissions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol

from rivalry.domain.submission_rules import player_key


class RankableSubmission(Protocol):
    player_name: str
    final_score: int
    correct_count: int
    time_taken_seconds: int
    lifelines_used: list[str]
    sabotage_target: str | None
    submitted_at: datetime


@dataclass(frozen=True)
class LeaderboardEntry:
    player_name: str
    score: int
    sabotage_penalty: int
    adjusted_score: int
    correct_count: int
    time_taken_seconds: int
    lifelines_used: list[str]
    sabotage_target: str | None
    submitted_at: datetime


def sabotage_totals(submissions: Iterable[RankableSubmission], penalty: int) -> dict[str, int]:
    """Accumulate penalties per targeted player (keyed case-insensitively).

    Self-targeting is ignored; several saboteurs against one player add up.
    """
    totals: dict[str, int] = {}
    for submission in submissions:
        target = submission.sabotage_target
        if not target:
            continue
        target_key = player_key(target)
        if target_key == player_key(submission.player_name):
            continue
        totals[target_key] = totals.get(target_key, 0) + penalty
    return totals


def build_leaderboard(submissions: Iterable[RankableSubmission], penalty: int) -> list[LeaderboardEntry]:
    """Rank by adjusted score (desc), breaking ties by elapsed time (asc)."""
    submissions = list(submissions)
    totals = sabotage_totals(submissions, penalty)

    entries = []
    for submission in submissions:
        sabotage_penalty = totals.get(player_key(submission.player_name), 0)
        entries.append(
            LeaderboardEntry(
                player_name=submission.player_name,
                score=submission.final_score,
                sabotage_penalty=sabotage_penalty,
                adjusted_score=max(0, submission.final_score - sabotage_penalty),
                correct_count=submission.correct_count,
                time_taken_seconds=submission.time_taken_seconds,
                lifelines_used=list(submission.lifelines_used),
                sabotage_target=submission.sabotage_target,
                submitted_at=submission.submitted_at,
            )
        )
    return sorted(entries, key=lambda entry: (-entry.adjusted_score, entry.time_taken_seconds))
