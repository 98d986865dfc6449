from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire model: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class QuestionModel(BaseModel):
    """A pool question, answer key included. Never sent to players."""

    id: str
    category: str
    prompt: str
    options: List[str]
    answer: str
    hint: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("id", "category", "prompt", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _check_options(self) -> "QuestionModel":
        if len(self.options) < 2:
            raise ValueError(f"question {self.id} needs at least two options")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"question {self.id} has duplicate options")
        if self.answer not in self.options:
            raise ValueError(f"question {self.id} answer is not one of its options")
        return self


class PublicQuestionModel(CamelModel):
    id: str
    category: str
    prompt: str
    options: List[str]
    hint: Optional[str] = None


class LifelineModel(CamelModel):
    id: str
    name: str
    description: str


class SabotageModel(CamelModel):
    penalty: int
    description: str
    usage_limit: int


class QuizTodayModel(CamelModel):
    date_key: str
    total_questions: int
    total_time_seconds: int
    deadline: datetime
    is_locked: bool
    lifelines: List[LifelineModel]
    sabotage: SabotageModel
    questions: List[PublicQuestionModel]


class LeaderboardEntryModel(CamelModel):
    player_name: str
    score: int
    adjusted_score: int
    sabotage_penalty: int
    correct_count: int
    time_taken_seconds: int
    lifelines_used: List[str]
    sabotage_target: Optional[str] = None
    submitted_at: datetime


class LeaderboardTodayModel(CamelModel):
    date_key: str
    deadline: datetime
    is_locked: bool
    sabotage: SabotageModel
    leaderboard: List[LeaderboardEntryModel]


class SubmitRequestModel(CamelModel):
    """Submission body as sent by the client.

    Fields are loosely typed; the gateway validates and sanitises
    them so malformed input maps to 400 with a readable message.
    """

    player_name: Any = None
    responses: Any = None
    time_taken_seconds: Any = None
    lifelines_used: Any = None
    sabotage_target: Any = None


class SubmitResultModel(CamelModel):
    message: str
    final_score: int
    correct_count: int
    leaderboard: List[LeaderboardEntryModel]


class FiftyFiftyRequestModel(CamelModel):
    question_id: Any = None


class FiftyFiftyResultModel(CamelModel):
    question_id: str
    removed_options: List[str]

