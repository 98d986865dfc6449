from datetime import datetime, timezone

from rivalry.models.dc_models import QuestionModel
from rivalry.models.schema_models import SubmissionSchema
from rivalry.question_pool import QuestionPool
from rivalry.settings import Settings

DAY = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
AFTER_DEADLINE = datetime(2024, 5, 1, 21, 0, 0, tzinfo=timezone.utc)


def make_question(i: int, hint: bool = True) -> QuestionModel:
    return QuestionModel(
        id=f"q{i:02d}",
        category="General",
        prompt=f"Question {i}?",
        options=[f"A{i}", f"B{i}", f"C{i}", f"D{i}"],
        answer=f"A{i}",
        hint=f"Hint {i}" if hint else None,
    )


def make_pool(size: int = 25) -> QuestionPool:
    return QuestionPool(make_question(i) for i in range(size))


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite+aiosqlite:///:memory:",
        retention_days=0,
        store_backend="memory",
    )
    values.update(overrides)
    return Settings(**values)


class FixedClock:
    def __init__(self, now: datetime = DAY):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_record(
    name: str,
    final_score: int,
    time_taken_seconds: int = 100,
    sabotage_target: str | None = None,
    date_key: str = "2024-05-01",
) -> SubmissionSchema:
    return SubmissionSchema(
        date_key=date_key,
        player_name=name,
        player_key=name.casefold(),
        correct_count=final_score // 100,
        total_questions=20,
        time_taken_seconds=time_taken_seconds,
        lifelines_used=[],
        sabotage_target=sabotage_target,
        final_score=final_score,
        submitted_at=DAY,
    )
