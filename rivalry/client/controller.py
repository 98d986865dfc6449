import logging
from typing import Any

import httpx

from rivalry.client import session as quiz_session
from rivalry.client.api_client import ApiError, RivalryClient
from rivalry.client.countdown import Countdown
from rivalry.client.session import FinishReason, QuizSession, SessionStatus, SessionSummary
from rivalry.domain.lifelines import FIFTY_FIFTY

LOAD_FAILED_MESSAGE = "We hit a snag loading the quiz."
LEADERBOARD_FAILED_MESSAGE = "Leaderboard is taking a break. Try refreshing soon."
NAME_REQUIRED_MESSAGE = "Please share a player name to lock your score."
NETWORK_ERROR_MESSAGE = "Network error. Try again in a moment."
LIFELINE_FAILED_MESSAGE = "Lifeline unavailable right now."


class QuizController:
    """Owns one quiz session and its countdown.

    Every change of state goes through ``_apply``, which is the single place that
    reacts to the InProgress -> Finished transition, so the countdown is cancelled
    exactly once whichever path (timeout or manual) finished the quiz.
    """

    def __init__(self, client: RivalryClient, tick_interval: float = 1.0):
        self.client = client
        self.tick_interval = tick_interval
        self.session: QuizSession = quiz_session.new_session()
        self.leaderboard: list[dict[str, Any]] = []
        self.leaderboard_error: str | None = None
        self.submit_error: str | None = None
        self.lifeline_error: str | None = None
        self.result: dict[str, Any] | None = None
        self.finish_events = 0
        self._countdown: Countdown | None = None

    def _apply(self, new_session: QuizSession) -> QuizSession:
        was_in_progress = self.session.in_progress
        self.session = new_session
        if was_in_progress and new_session.finished:
            self._on_finished()
        return new_session

    def _on_finished(self) -> None:
        self.finish_events += 1
        if self._countdown is not None:
            self._countdown.cancel()
        logging.info(f"Quiz finished ({self.session.finish_reason.value})")

    async def load(self) -> QuizSession:
        try:
            quiz = await self.client.fetch_quiz()
            loaded = quiz_session.start(self.session, quiz)
        except (ApiError, httpx.HTTPError) as e:
            logging.warning(f"Failed to load quiz: {e!r}")
            return self._apply(quiz_session.fail(self.session, LOAD_FAILED_MESSAGE))
        except (KeyError, TypeError, ValueError) as e:
            logging.warning(f"Malformed quiz payload: {e!r}")
            return self._apply(quiz_session.fail(self.session, LOAD_FAILED_MESSAGE))

        self._apply(loaded)
        if self.session.status is SessionStatus.IN_PROGRESS:
            self._countdown = Countdown(self.tick, self.tick_interval)
            self._countdown.start()
        return self.session

    def tick(self) -> QuizSession:
        return self._apply(quiz_session.tick(self.session))

    def select(self, option: str) -> QuizSession:
        return self._apply(quiz_session.select_option(self.session, option))

    def skip(self) -> QuizSession:
        return self._apply(quiz_session.skip(self.session))

    def finish(self) -> QuizSession:
        return self._apply(quiz_session.finish(self.session, FinishReason.MANUAL))

    async def use_lifeline(self, lifeline_id: str) -> QuizSession:
        self.lifeline_error = None
        if not quiz_session.can_use_lifeline(self.session, lifeline_id):
            return self.session
        if lifeline_id != FIFTY_FIFTY:
            return self._apply(quiz_session.use_lifeline(self.session, lifeline_id))

        question_id = self.session.current_question.id
        try:
            result = await self.client.fifty_fifty(question_id)
        except (ApiError, httpx.HTTPError) as e:
            logging.warning(f"Failed to fetch 50/50 removal: {e!r}")
            self.lifeline_error = LIFELINE_FAILED_MESSAGE
            return self.session
        # the session may have finished while the request was in flight
        return self._apply(
            quiz_session.use_lifeline(
                self.session,
                FIFTY_FIFTY,
                removed_options=result.get("removedOptions", []),
                question_id=question_id,
            )
        )

    def summary(self, correct_count: int | None = None) -> SessionSummary:
        return quiz_session.summarize(self.session, correct_count)

    async def submit(self, player_name: str, sabotage_target: str | None = None) -> bool:
        """Submit a finished session. On failure the session stays Finished/Unsubmitted.

        Returns:
            bool: True if the server recorded the attempt
        """
        if not self.session.finished or self.session.submitted:
            return False
        if not player_name or not player_name.strip():
            self.submit_error = NAME_REQUIRED_MESSAGE
            return False

        payload = quiz_session.submission_payload(self.session, player_name, sabotage_target)
        try:
            data = await self.client.submit(payload)
        except ApiError as e:
            logging.warning(f"Submission rejected: {e}")
            self.submit_error = e.message
            return False
        except httpx.HTTPError as e:
            logging.warning(f"Submission failed: {e!r}")
            self.submit_error = NETWORK_ERROR_MESSAGE
            return False

        self.submit_error = None
        self.result = data
        self._apply(quiz_session.mark_submitted(self.session))
        if "leaderboard" in data:
            self.leaderboard = data["leaderboard"]
            self.leaderboard_error = None
        else:
            await self.refresh_leaderboard()
        return True

    async def refresh_leaderboard(self) -> list[dict[str, Any]]:
        """Fetch the leaderboard; on failure keep the last good one and flag the error."""
        try:
            data = await self.client.fetch_leaderboard()
        except (ApiError, httpx.HTTPError) as e:
            logging.warning(f"Failed to load leaderboard: {e!r}")
            self.leaderboard_error = LEADERBOARD_FAILED_MESSAGE
            return self.leaderboard
        self.leaderboard = data.get("leaderboard", [])
        self.leaderboard_error = None
        return self.leaderboard

    def sabotage_candidates(self, own_name: str | None = None) -> list[str]:
        """Names a player may target: everyone on the leaderboard except themselves."""
        own_key = own_name.strip().casefold() if own_name else None
        return [
            entry["playerName"]
            for entry in self.leaderboard
            if entry["playerName"].casefold() != own_key
        ]

    def close(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
