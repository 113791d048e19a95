"""Application configuration from environment."""
from datetime import timedelta

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Lingo Progress Service"
    log_level: str = "INFO"

    # Database (async driver; Alembic converts to a sync URL)
    database_url: str = "sqlite+aiosqlite:///./lingo_progress.db"

    # Hearts economy
    max_hearts: int = 5
    heart_regen_interval_seconds: int = 30 * 60  # one heart every 30 minutes
    default_challenge_points: int = 10

    # Optimistic concurrency: retries after the first try before answering Busy
    attempt_max_retries: int = 3

    # Write the regenerated hearts back on GET /progress
    eager_persist_on_read: bool = False

    # Billing: a subscription stays active this long after its period ends
    subscription_grace_seconds: int = 60 * 60 * 24  # 1 day

    # Seed the default course catalog on startup
    seed_catalog: bool = True

    # Admin reset endpoint is disabled while unset
    admin_token: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def heart_regen_interval(self) -> timedelta:
        return timedelta(seconds=self.heart_regen_interval_seconds)

    @property
    def subscription_grace(self) -> timedelta:
        return timedelta(seconds=self.subscription_grace_seconds)


def get_settings() -> Settings:
    return Settings()

