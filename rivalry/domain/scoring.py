"""Score formula shared by the server and the player client's preview."""

import math

POINTS_PER_CORRECT = 100
TIME_BONUS_PER_SECOND = 2
LIFELINE_PENALTY = 30


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_score(
    correct_count: int,
    elapsed_seconds: float,
    lifeline_count: int,
    base_budget_seconds: int,
) -> int:
    """Score one attempt.

    ``base_budget_seconds`` is the day's original allotment; time-boost lifelines
    never raise it, so boosting time cannot inflate the bonus.

    >>> compute_score(15, 120, 2, 300)
    1800
    """
    base_score = correct_count * POINTS_PER_CORRECT
    time_bonus = max(0, round_half_up((base_budget_seconds - elapsed_seconds) * TIME_BONUS_PER_SECOND))
    penalty = lifeline_count * LIFELINE_PENALTY
    return max(0, base_score + time_bonus - penalty)
