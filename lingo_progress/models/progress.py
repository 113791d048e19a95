"""UserProgress model: one row per user. Hearts, points, active course, version token."""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from lingo_progress.db.session import Base


class UserProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (
        CheckConstraint("hearts >= 0", name="ck_user_progress_hearts_non_negative"),
        CheckConstraint("points >= 0", name="ck_user_progress_points_non_negative"),
    )

    user_id = Column(String(255), primary_key=True)
    active_course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)

    hearts = Column(Integer, nullable=False, default=5)
    points = Column(Integer, nullable=False, default=0)
    has_active_subscription = Column(Boolean, nullable=False, default=False)  # last observed fact
    last_heart_regen_at = Column(DateTime(timezone=True), nullable=False)

    # bumped by every save; writes are conditional on it
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
