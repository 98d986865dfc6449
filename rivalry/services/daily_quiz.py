"""Daily quiz use cases: serve today's quiz, grade submissions, rank the day.

The server is the only authority on today's questions, correctness and final
score. Nothing about "today" is stored: the question set is re-derived from the
pool and the date key on every call.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from rivalry.domain.daily_calendar import daily_deadline, date_key
from rivalry.domain.leaderboard import build_leaderboard
from rivalry.domain.lifelines import LIFELINES, SabotageRule, choose_removed_options, fifty_fifty_rng
from rivalry.domain.scoring import compute_score
from rivalry.domain.submission_rules import (
    clamp_elapsed_seconds,
    grade_responses,
    normalize_lifelines,
    player_key,
    require_response_list,
    sanitize_player_name,
    sanitize_sabotage_target,
)
from rivalry.errors import DeadlinePassedError, DuplicateSubmissionError, SubmissionValidationError
from rivalry.models.dc_models import (
    FiftyFiftyResultModel,
    LeaderboardEntryModel,
    LeaderboardTodayModel,
    LifelineModel,
    PublicQuestionModel,
    QuizTodayModel,
    SabotageModel,
    SubmitRequestModel,
    SubmitResultModel,
)
from rivalry.models.schema_models import SubmissionSchema
from rivalry.question_pool import QuestionPool
from rivalry.services.submission_store import SubmissionStore
from rivalry.settings import Settings

SUBMISSION_ACCEPTED_MESSAGE = "Submission received! See you on the leaderboard."


def local_now() -> datetime:
    """Current time, aware, in the server's local time zone."""
    return datetime.now().astimezone()


class DailyQuizService:
    def __init__(
        self,
        pool: QuestionPool,
        store: SubmissionStore,
        settings: Settings,
        clock: Callable[[], datetime] = local_now,
    ):
        self.pool = pool
        self.store = store
        self.settings = settings
        self.clock = clock
        self.sabotage = SabotageRule(penalty=settings.sabotage_penalty)

    def _sabotage_model(self) -> SabotageModel:
        return SabotageModel(
            penalty=self.sabotage.penalty,
            description=self.sabotage.description,
            usage_limit=self.sabotage.usage_limit,
        )

    def _leaderboard(self, submissions: list[SubmissionSchema]) -> list[LeaderboardEntryModel]:
        return [
            LeaderboardEntryModel.model_validate(entry)
            for entry in build_leaderboard(submissions, self.sabotage.penalty)
        ]

    def quiz_today(self) -> QuizTodayModel:
        now = self.clock()
        key = date_key(now)
        deadline, is_locked = daily_deadline(now, self.settings.deadline_hour)
        questions = self.pool.daily_questions(key)
        logging.info(f"Serving quiz for {key} (locked={is_locked})")
        return QuizTodayModel(
            date_key=key,
            total_questions=len(questions),
            total_time_seconds=self.settings.total_time_seconds,
            deadline=deadline,
            is_locked=is_locked,
            lifelines=[LifelineModel.model_validate(lifeline) for lifeline in LIFELINES],
            sabotage=self._sabotage_model(),
            questions=[
                PublicQuestionModel(
                    id=question.id,
                    category=question.category,
                    prompt=question.prompt,
                    options=list(question.options),
                    hint=question.hint,
                )
                for question in questions
            ],
        )

    async def leaderboard_today(self) -> LeaderboardTodayModel:
        now = self.clock()
        key = date_key(now)
        deadline, is_locked = daily_deadline(now, self.settings.deadline_hour)
        submissions = await self.store.list_for_day(key)
        return LeaderboardTodayModel(
            date_key=key,
            deadline=deadline,
            is_locked=is_locked,
            sabotage=self._sabotage_model(),
            leaderboard=self._leaderboard(submissions),
        )

    def fifty_fifty(self, question_id) -> FiftyFiftyResultModel:
        """Choose the two incorrect options a 50/50 lifeline removes.

        The answer key stays on the server; every player gets the same removal for
        the same question on the same day.
        """
        now = self.clock()
        key = date_key(now)
        _, is_locked = daily_deadline(now, self.settings.deadline_hour)
        if is_locked:
            raise DeadlinePassedError()
        today_ids = {q.id for q in self.pool.daily_questions(key)}
        if not isinstance(question_id, str) or question_id not in today_ids:
            raise SubmissionValidationError("Question is not part of today's quiz.")
        question = self.pool.by_id(question_id)
        removed = choose_removed_options(
            question.options, question.answer, fifty_fifty_rng(key, question.id)
        )
        return FiftyFiftyResultModel(question_id=question.id, removed_options=removed)

    async def submit(self, request: SubmitRequestModel) -> SubmitResultModel:
        """Validate, grade, score and record one attempt, then rank the day.

        Raises:
            DeadlinePassedError: Today's deadline has passed
            SubmissionValidationError: Missing name or malformed responses
            DuplicateSubmissionError: This name (any casing) already played today
        """
        now = self.clock()
        key = date_key(now)
        _, is_locked = daily_deadline(now, self.settings.deadline_hour)
        if is_locked:
            logging.info(f"Rejected late submission for {key}")
            raise DeadlinePassedError()

        max_length = self.settings.max_name_length
        player_name = sanitize_player_name(request.player_name, max_length)
        responses = require_response_list(request.responses)

        # Fast rejection; append_if_absent below stays the authoritative check
        if await self.store.exists(key, player_key(player_name)):
            logging.info(f"Rejected duplicate submission for {key}: {player_name}")
            raise DuplicateSubmissionError()

        daily_questions = self.pool.daily_questions(key)
        answer_key = {question.id: question.answer for question in daily_questions}
        correct_count = grade_responses(responses, answer_key)

        budget = self.settings.total_time_seconds
        time_taken = clamp_elapsed_seconds(
            request.time_taken_seconds, budget, self.settings.time_grace_seconds
        )
        lifelines_used = normalize_lifelines(request.lifelines_used, len(LIFELINES))

        record = SubmissionSchema(
            date_key=key,
            player_name=player_name,
            player_key=player_key(player_name),
            correct_count=correct_count,
            total_questions=len(daily_questions),
            time_taken_seconds=time_taken,
            lifelines_used=lifelines_used,
            sabotage_target=sanitize_sabotage_target(request.sabotage_target, max_length),
            final_score=compute_score(correct_count, time_taken, len(lifelines_used), budget),
            submitted_at=now,
        )

        appended = await self.store.append_if_absent(key, record, record.player_key)
        if not appended:
            logging.info(f"Rejected duplicate submission for {key}: {player_name}")
            raise DuplicateSubmissionError()
        logging.info(f"Accepted submission for {key}: {player_name} scored {record.final_score}")

        submissions = await self.store.list_for_day(key)
        return SubmitResultModel(
            message=SUBMISSION_ACCEPTED_MESSAGE,
            final_score=record.final_score,
            correct_count=record.correct_count,
            leaderboard=self._leaderboard(submissions),
        )

    async def purge_expired(self) -> int:
        """Delete submissions older than the retention window. Housekeeping only."""
        if self.settings.retention_days <= 0:
            return 0
        cutoff = date_key(self.clock() - timedelta(days=self.settings.retention_days))
        removed = await self.store.purge_before(cutoff)
        logging.info(f"Purged {removed} submissions before {cutoff}")
        return removed
