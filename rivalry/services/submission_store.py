"""Submission store contract and the in-process implementation.

- A store keeps one collection of submissions per date key.
- ``append_if_absent`` is the only write a request may perform, and it must be
  atomic with its uniqueness check for the same day.
- ``purge_before`` exists for housekeeping jobs, never for requests.
"""

from typing import Protocol

from rivalry.day_lock_manager import DayLockManager
from rivalry.models.schema_models import SubmissionSchema


class SubmissionStore(Protocol):
    async def list_for_day(self, date_key: str) -> list[SubmissionSchema]: ...

    async def append_if_absent(
        self, date_key: str, record: SubmissionSchema, uniqueness_key: str
    ) -> bool: ...

    async def exists(self, date_key: str, uniqueness_key: str) -> bool: ...

    async def purge_before(self, date_key: str) -> int: ...


class InMemorySubmissionStore:
    """Single-process store: per-day lists guarded by per-day locks."""

    def __init__(self):
        self._days: dict[str, list[SubmissionSchema]] = {}
        self._keys: dict[str, set[str]] = {}
        self._locks = DayLockManager()

    async def list_for_day(self, date_key: str) -> list[SubmissionSchema]:
        return list(self._days.get(date_key, []))

    async def append_if_absent(
        self, date_key: str, record: SubmissionSchema, uniqueness_key: str
    ) -> bool:
        lock = await self._locks.get_lock(date_key)
        async with lock:
            keys = self._keys.setdefault(date_key, set())
            if uniqueness_key in keys:
                return False
            keys.add(uniqueness_key)
            self._days.setdefault(date_key, []).append(record)
            return True

    async def exists(self, date_key: str, uniqueness_key: str) -> bool:
        return uniqueness_key in self._keys.get(date_key, set())

    async def purge_before(self, date_key: str) -> int:
        removed = 0
        for key in [k for k in self._days if k < date_key]:
            removed += len(self._days.pop(key))
            self._keys.pop(key, None)
        await self._locks.cleanup_before(date_key)
        return removed
