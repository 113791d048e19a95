"""UserSubscription model: billing writes it, the engine only reads the period end."""
from sqlalchemy import Column, DateTime, String

from lingo_progress.db.session import Base


class UserSubscription(Base):
    __tablename__ = "user_subscriptions"

    user_id = Column(String(255), primary_key=True)
    current_period_end = Column(DateTime(timezone=True), nullable=False)
