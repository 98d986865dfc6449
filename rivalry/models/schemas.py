from datetime import datetime

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column, UniqueConstraint
from sqlalchemy.types import JSON, DateTime, Integer, String, Uuid
from uuid6 import uuid7


class Base(DeclarativeBase):
    pass


class Submission(Base):
    """One player's attempt on one calendar day."""

    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("date_key", "player_key", name="uq_submissions_day_player"),
    )

    submission_id = Column(Uuid, primary_key=True, default=uuid7)
    date_key = Column(String(10), nullable=False, index=True)
    player_name = Column(String, nullable=False)
    player_key = Column(String, nullable=False)  # casefolded player_name
    correct_count = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    time_taken_seconds = Column(Integer, nullable=False)
    lifelines_used = Column(JSON, nullable=False, default=list)
    sabotage_target = Column(String, nullable=True)
    final_score = Column(Integer, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=datetime.now)
