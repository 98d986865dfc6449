"""Quiz session state machine.

A ``QuizSession`` is an immutable value; every player action is a pure function
taking a session and returning the next one. Actions that are not legal in the
current state return the session unchanged.

States: ``LOADING -> IN_PROGRESS -> FINISHED`` (or ``LOADING -> LOCKED`` when the
day is closed or the quiz could not be loaded). ``FINISHED`` is terminal for
play; ``submitted`` flips once afterwards.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Sequence

from rivalry.domain.lifelines import FIFTY_FIFTY, HINT, TIME_BOOST, TIME_BOOST_SECONDS
from rivalry.domain.scoring import compute_score, round_half_up

DEFAULT_TOTAL_TIME_SECONDS = 300


class SessionStatus(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    LOCKED = "locked"


class FinishReason(str, Enum):
    TIMEOUT = "timeout"
    MANUAL = "manual"


@dataclass(frozen=True)
class PlayableQuestion:
    id: str
    category: str
    prompt: str
    options: tuple[str, ...]
    hint: str | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "PlayableQuestion":
        return cls(
            id=data["id"],
            category=data.get("category", ""),
            prompt=data.get("prompt", ""),
            options=tuple(data.get("options", ())),
            hint=data.get("hint"),
        )


@dataclass(frozen=True)
class QuizSession:
    status: SessionStatus = SessionStatus.LOADING
    date_key: str | None = None
    deadline: str | None = None
    questions: tuple[PlayableQuestion, ...] = ()
    lifeline_catalog: tuple[str, ...] = ()
    current_index: int = 0
    answers: Mapping[str, str] = field(default_factory=dict)
    removed_options: Mapping[str, frozenset[str]] = field(default_factory=dict)
    hints_shown: frozenset[str] = frozenset()
    lifelines_used: tuple[str, ...] = ()
    base_time_seconds: int = 0
    time_budget_seconds: int = 0
    remaining_seconds: int = 0
    finish_reason: FinishReason | None = None
    submitted: bool = False
    error: str | None = None

    @property
    def in_progress(self) -> bool:
        return self.status is SessionStatus.IN_PROGRESS

    @property
    def finished(self) -> bool:
        return self.status is SessionStatus.FINISHED

    @property
    def current_question(self) -> PlayableQuestion | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return sum(1 for question in self.questions if question.id in self.answers)


@dataclass(frozen=True)
class SessionSummary:
    answered: int
    total: int
    elapsed_seconds: int
    lifeline_count: int
    preview_score: int | None


def new_session() -> QuizSession:
    return QuizSession()


def start(session: QuizSession, quiz: Mapping[str, Any]) -> QuizSession:
    """Loading -> InProgress, or Loading -> Locked if the day is closed."""
    if session.status is not SessionStatus.LOADING:
        return session
    budget = int(quiz.get("totalTimeSeconds") or DEFAULT_TOTAL_TIME_SECONDS)
    questions = tuple(PlayableQuestion.from_payload(q) for q in quiz.get("questions") or ())
    loaded = replace(
        session,
        date_key=quiz.get("dateKey"),
        deadline=quiz.get("deadline"),
        questions=questions,
        lifeline_catalog=tuple(lifeline["id"] for lifeline in quiz.get("lifelines") or ()),
        base_time_seconds=budget,
        time_budget_seconds=budget,
        remaining_seconds=budget,
    )
    if quiz.get("isLocked"):
        return replace(loaded, status=SessionStatus.LOCKED)
    if not questions:
        return replace(loaded, status=SessionStatus.LOCKED, error="No questions are available today.")
    return replace(loaded, status=SessionStatus.IN_PROGRESS, current_index=0)


def fail(session: QuizSession, message: str) -> QuizSession:
    """Loading failed: show a locked, labelled error instead of a broken game."""
    if session.status is not SessionStatus.LOADING:
        return session
    return replace(session, status=SessionStatus.LOCKED, error=message)


def next_unanswered_index(
    questions: Sequence[PlayableQuestion], answers: Mapping[str, str], current_index: int
) -> int:
    """Scan forward circularly from one past ``current_index`` for an unanswered question.

    Returns ``current_index`` when every question is answered.
    """
    total = len(questions)
    for step in range(1, total + 1):
        candidate = (current_index + step) % total
        if questions[candidate].id not in answers:
            return candidate
    return current_index


def select_option(session: QuizSession, option: str) -> QuizSession:
    """Record ``option`` for the current question and move to the next unanswered one."""
    question = session.current_question
    if not session.in_progress or question is None:
        return session
    if option not in question.options or option in session.removed_options.get(question.id, ()):
        return session
    answers = {**session.answers, question.id: option}
    return replace(
        session,
        answers=answers,
        current_index=next_unanswered_index(session.questions, answers, session.current_index),
    )


def skip(session: QuizSession) -> QuizSession:
    if not session.in_progress or not session.questions:
        return session
    return replace(
        session,
        current_index=next_unanswered_index(session.questions, session.answers, session.current_index),
    )


def can_use_lifeline(session: QuizSession, lifeline_id: str) -> bool:
    return (
        session.in_progress
        and session.current_question is not None
        and lifeline_id in session.lifeline_catalog
        and lifeline_id not in session.lifelines_used
    )


def use_lifeline(
    session: QuizSession,
    lifeline_id: str,
    removed_options: Sequence[str] | None = None,
    question_id: str | None = None,
) -> QuizSession:
    """Spend a lifeline. Each kind works once per session.

    fifty-fifty needs ``removed_options`` (the server knows which options are
    wrong); ``question_id`` pins the removal to the question it was fetched for.
    """
    if not can_use_lifeline(session, lifeline_id):
        return session
    question = session.current_question
    used = session.lifelines_used + (lifeline_id,)

    if lifeline_id == FIFTY_FIFTY:
        target_id = question_id or question.id
        target = next((q for q in session.questions if q.id == target_id), None)
        if target is None or removed_options is None:
            return session
        removed = frozenset(option for option in removed_options if option in target.options)
        return replace(
            session,
            lifelines_used=used,
            removed_options={**session.removed_options, target.id: removed},
        )
    if lifeline_id == HINT:
        hints = session.hints_shown | {question.id} if question.hint else session.hints_shown
        return replace(session, lifelines_used=used, hints_shown=hints)
    if lifeline_id == TIME_BOOST:
        return replace(
            session,
            lifelines_used=used,
            remaining_seconds=session.remaining_seconds + TIME_BOOST_SECONDS,
            time_budget_seconds=session.time_budget_seconds + TIME_BOOST_SECONDS,
        )
    # unknown kinds in the catalog are spent without effect
    return replace(session, lifelines_used=used)


def finish(session: QuizSession, reason: FinishReason) -> QuizSession:
    """InProgress -> Finished. A manual finish needs at least one answer."""
    if not session.in_progress:
        return session
    if reason is FinishReason.MANUAL and session.answered_count == 0:
        return session
    remaining = 0 if reason is FinishReason.TIMEOUT else session.remaining_seconds
    return replace(
        session,
        status=SessionStatus.FINISHED,
        finish_reason=reason,
        remaining_seconds=remaining,
    )


def tick(session: QuizSession, seconds: int = 1) -> QuizSession:
    if not session.in_progress:
        return session
    remaining = session.remaining_seconds - seconds
    if remaining <= 0:
        return finish(replace(session, remaining_seconds=0), FinishReason.TIMEOUT)
    return replace(session, remaining_seconds=remaining)


def mark_submitted(session: QuizSession) -> QuizSession:
    if not session.finished or session.submitted:
        return session
    return replace(session, submitted=True)


def elapsed_seconds(session: QuizSession) -> int:
    return max(0, round_half_up(session.time_budget_seconds - session.remaining_seconds))


def summarize(session: QuizSession, correct_count: int | None = None) -> SessionSummary:
    """Summary for the finish screen.

    The client never sees the answer key, so the optimistic score is only
    available when a correct count is supplied.
    """
    elapsed = elapsed_seconds(session)
    preview = None
    if correct_count is not None:
        preview = compute_score(
            correct_count, elapsed, len(session.lifelines_used), session.base_time_seconds
        )
    return SessionSummary(
        answered=session.answered_count,
        total=len(session.questions),
        elapsed_seconds=elapsed,
        lifeline_count=len(session.lifelines_used),
        preview_score=preview,
    )


def submission_payload(
    session: QuizSession, player_name: str, sabotage_target: str | None = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "playerName": player_name.strip(),
        "responses": [
            {"questionId": question.id, "selectedOption": session.answers.get(question.id)}
            for question in session.questions
        ],
        "timeTakenSeconds": elapsed_seconds(session),
        "lifelinesUsed": list(session.lifelines_used),
    }
    if sabotage_target:
        payload["sabotageTarget"] = sabotage_target
    return payload
