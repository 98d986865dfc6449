from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field
from uuid6 import uuid7


class SubmissionSchema(BaseModel):
    submission_id: UUID = Field(default_factory=uuid7)
    date_key: str
    player_name: str
    player_key: str
    correct_count: int
    total_questions: int
    time_taken_seconds: int
    lifelines_used: list[str]
    sabotage_target: str | None = None
    final_score: int
    submitted_at: datetime

    class Config:
        from_attributes = True
        frozen = True
