import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from rivalry.domain.selector import DAILY_QUESTION_COUNT, select_daily
from rivalry.errors import PoolConfigurationError
from rivalry.models.dc_models import QuestionModel

_question_list = TypeAdapter(list[QuestionModel])


class QuestionPool:
    """Read-only question pool, loaded once when the process starts."""

    def __init__(self, questions: Iterable[QuestionModel]):
        self._questions: tuple[QuestionModel, ...] = tuple(questions)
        self._by_id: dict[str, QuestionModel] = {}
        for question in self._questions:
            if question.id in self._by_id:
                raise PoolConfigurationError(f"Duplicate question id in pool: {question.id}")
            self._by_id[question.id] = question
        if len(self._questions) < DAILY_QUESTION_COUNT:
            raise PoolConfigurationError(
                f"Question pool must contain at least {DAILY_QUESTION_COUNT} questions "
                f"(found {len(self._questions)})."
            )

    @classmethod
    def from_file(cls, path: Path) -> "QuestionPool":
        """Load and validate a JSON array of questions.

        Args:
            path (Path): JSON file with ``{id, category, prompt, options, answer, hint?}`` items

        Raises:
            PoolConfigurationError: The file is missing, unreadable or fails validation
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            questions = _question_list.validate_python(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise PoolConfigurationError(f"Failed to load question pool from {path}: {e}") from e
        pool = cls(questions)
        logging.info(f"Loaded {len(pool)} questions from {path}")
        return pool

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> tuple[QuestionModel, ...]:
        return self._questions

    def by_id(self, question_id: str) -> QuestionModel | None:
        return self._by_id.get(question_id)

    def daily_questions(self, date_key: str) -> list[QuestionModel]:
        return select_daily(self._questions, date_key)
