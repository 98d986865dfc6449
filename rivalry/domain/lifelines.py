"""Lifeline catalog and the rules behind each power-up."""

import random
from dataclasses import dataclass
from typing import Sequence

FIFTY_FIFTY = "fifty-fifty"
HINT = "hint"
TIME_BOOST = "time-boost"

TIME_BOOST_SECONDS = 30
FIFTY_FIFTY_REMOVALS = 2


@dataclass(frozen=True)
class Lifeline:
    id: str
    name: str
    description: str


LIFELINES: tuple[Lifeline, ...] = (
    Lifeline(
        id=FIFTY_FIFTY,
        name="50/50",
        description="Removes two incorrect answers from the current question.",
    ),
    Lifeline(
        id=HINT,
        name="Reveal Hint",
        description="Shows the hint associated with the current question.",
    ),
    Lifeline(
        id=TIME_BOOST,
        name="Time Boost",
        description=f"Adds {TIME_BOOST_SECONDS} bonus seconds to the overall timer (single use).",
    ),
)


def choose_removed_options(
    options: Sequence[str],
    answer: str,
    rng: random.Random,
    count: int = FIFTY_FIFTY_REMOVALS,
) -> list[str]:
    """Pick ``count`` incorrect options uniformly, without replacement."""
    incorrect = [option for option in options if option != answer]
    return rng.sample(incorrect, min(count, len(incorrect)))


def fifty_fifty_rng(date_key: str, question_id: str) -> random.Random:
    """Generator shared by every player asking for the same question on the same day."""
    return random.Random(f"{date_key}:{question_id}")


@dataclass(frozen=True)
class SabotageRule:
    penalty: int
    usage_limit: int = 1

    @property
    def description(self) -> str:
        return (
            f"Pick an opponent to apply a -{self.penalty} point penalty to their final score. "
            "Use it wisely!"
        )
