"""SQL-backed submission store.

- Routers and the quiz service never touch DB sessions; they call this module.
- This layer owns session/transaction boundaries.
- CRUD helpers used here do NOT commit inside session.begin().
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rivalry.crud import CreateSubmission, DeleteSubmission, ReadSubmission
from rivalry.day_lock_manager import DayLockManager
from rivalry.errors import StoreError
from rivalry.models.schema_models import SubmissionSchema
from rivalry.models.schemas import Base


class SqlSubmissionStore:
    """Conditional appends are serialised per day in-process and guarded by the
    unique (date_key, player_key) constraint across processes."""

    def __init__(self, engine: AsyncEngine, Session: async_sessionmaker[AsyncSession]):
        self.engine = engine
        self.Session = Session
        self._locks = DayLockManager()

    async def create_tables(self) -> None:
        """Create table if not exists"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def list_for_day(self, date_key: str) -> list[SubmissionSchema]:
        try:
            async with self.Session() as session:
                return await ReadSubmission.read_day(date_key, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read submissions for {date_key}: {e}")
            raise StoreError() from e

    async def exists(self, date_key: str, uniqueness_key: str) -> bool:
        try:
            async with self.Session() as session:
                return await ReadSubmission.exists(date_key, uniqueness_key, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to check submission for {date_key}: {e}")
            raise StoreError() from e

    async def append_if_absent(
        self, date_key: str, record: SubmissionSchema, uniqueness_key: str
    ) -> bool:
        """Insert record unless the player already submitted that day.

        Returns:
            bool: True if the record was written, False if it already existed
        """
        lock = await self._locks.get_lock(date_key)
        async with lock:
            try:
                async with self.Session() as session:
                    async with session.begin():
                        if await ReadSubmission.exists(date_key, uniqueness_key, session):
                            return False
                        await CreateSubmission.add_submission(record, session)
                return True
            except IntegrityError:
                # Another process won the race; the unique constraint rejected us.
                logging.info(f"Duplicate submission rejected by constraint: {date_key} {uniqueness_key}")
                return False
            except SQLAlchemyError as e:
                logging.error(f"Failed to write submission for {date_key}: {e}")
                raise StoreError() from e

    async def purge_before(self, date_key: str) -> int:
        try:
            async with self.Session() as session:
                async with session.begin():
                    removed = await DeleteSubmission.delete_before(date_key, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to purge submissions before {date_key}: {e}")
            raise StoreError() from e
        await self._locks.cleanup_before(date_key)
        return removed
