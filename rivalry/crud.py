from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rivalry.models.schema_models import SubmissionSchema
from rivalry.models.schemas import Submission


class ReadSubmission:
    @staticmethod
    async def read_day(date_key: str, session: AsyncSession) -> List[SubmissionSchema]:
        """Read every submission of one day in submission order

        Args:
            date_key (str): Calendar day in YYYY-MM-DD form
            session (AsyncSession): AsyncSession object to interact with database

        Returns:
            List[SubmissionSchema]: That day's submissions
        """
        stmt = (
            select(Submission)
            .where(Submission.date_key == date_key)
            .order_by(Submission.submitted_at, Submission.submission_id)
        )
        result = await session.execute(stmt)
        return [SubmissionSchema.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def exists(date_key: str, player_key: str, session: AsyncSession) -> bool:
        """Check whether the player already has a submission on that day

        Args:
            date_key (str): Calendar day in YYYY-MM-DD form
            player_key (str): Casefolded player name
            session (AsyncSession): AsyncSession object to interact with database
        """
        stmt = (
            select(Submission.submission_id)
            .where(Submission.date_key == date_key, Submission.player_key == player_key)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalars().first() is not None


class CreateSubmission:
    @staticmethod
    async def add_submission(submission: SubmissionSchema, session: AsyncSession) -> None:
        """Add a submission without committing; the caller owns the transaction

        Args:
            submission (SubmissionSchema): Fully graded submission record
        """
        session.add(
            Submission(
                submission_id=submission.submission_id,
                date_key=submission.date_key,
                player_name=submission.player_name,
                player_key=submission.player_key,
                correct_count=submission.correct_count,
                total_questions=submission.total_questions,
                time_taken_seconds=submission.time_taken_seconds,
                lifelines_used=list(submission.lifelines_used),
                sabotage_target=submission.sabotage_target,
                final_score=submission.final_score,
                submitted_at=submission.submitted_at,
            )
        )
        await session.flush()


class DeleteSubmission:
    @staticmethod
    async def delete_before(date_key: str, session: AsyncSession) -> int:
        """Delete submissions of days strictly before date_key without committing

        Returns:
            int: Number of deleted rows
        """
        stmt = delete(Submission).where(Submission.date_key < date_key)
        result = await session.execute(stmt)
        return result.rowcount or 0
