"""ChallengeCompletion model: challenges already rewarded, keyed per course."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from lingo_progress.db.session import Base


class ChallengeCompletion(Base):
    __tablename__ = "challenge_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", "challenge_id", name="uq_challenge_completions_user_course_challenge"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("user_progress.user_id"), nullable=False, index=True)
    course_id = Column(Integer, nullable=False)
    challenge_id = Column(Integer, nullable=False)
    completed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
