"""Deterministic daily question selection.

Every process that calls ``select_daily`` with the same pool and date key gets the
same questions in the same order, so the server never stores "today's quiz".
"""

from typing import Callable, Sequence, TypeVar

from rivalry.domain.daily_calendar import seed_from_date_key
from rivalry.errors import PoolConfigurationError

DAILY_QUESTION_COUNT = 20

MASK32 = 0xFFFFFFFF

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) driven by a 32-bit state.

    Matches the widely used mulberry32 generator bit for bit, so a pool shuffled
    here lines up with selections made by other clients of the same algorithm.
    """
    state = seed & MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & MASK32
        t = _imul(state ^ (state >> 15), state | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & MASK32) ^ t
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    return next_float


def shuffled(items: Sequence[T], rng: Callable[[], float]) -> list[T]:
    """Fisher-Yates shuffle of a copy of ``items`` (j drawn from [0, i])."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def select_daily(pool: Sequence[T], date_key: str, count: int = DAILY_QUESTION_COUNT) -> list[T]:
    """Return the ordered question set for ``date_key``.

    Raises:
        PoolConfigurationError: the pool holds fewer than ``count`` questions.
    """
    if len(pool) < count:
        raise PoolConfigurationError(
            f"Question pool must contain at least {count} questions (found {len(pool)})."
        )
    rng = mulberry32(seed_from_date_key(date_key))
    return shuffled(pool, rng)[:count]
