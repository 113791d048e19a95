"""Hearts arithmetic: regeneration, outcome penalty and eligibility. Pure, no I/O."""
from datetime import datetime, timedelta

# Defaults; the service passes the configured values
MAX_HEARTS = 5
REGEN_INTERVAL = timedelta(minutes=30)
MIN_HEARTS = 0


def clamp_hearts(hearts: int, max_hearts: int = MAX_HEARTS) -> int:
    """Clamp to 0..max_hearts."""
    return max(MIN_HEARTS, min(max_hearts, hearts))


def regenerate(
    hearts: int,
    last_regen_at: datetime,
    now: datetime,
    has_subscription: bool,
    *,
    max_hearts: int = MAX_HEARTS,
    interval: timedelta = REGEN_INTERVAL,
) -> tuple[int, datetime]:
    """Fold elapsed time into hearts; return (hearts, last_regen_at).

    One heart per whole interval since `last_regen_at`. The regen timestamp
    moves by whole intervals only, so the partial interval in progress is
    kept for the next call. Subscribers are always topped up.
    """
    if has_subscription:
        return max_hearts, now

    hearts = clamp_hearts(hearts, max_hearts)
    intervals = max(0, (now - last_regen_at) // interval)
    if intervals == 0:
        return hearts, last_regen_at
    return min(max_hearts, hearts + intervals), last_regen_at + intervals * interval


def apply_outcome(hearts: int, correct: bool, has_subscription: bool, *, max_hearts: int = MAX_HEARTS) -> int:
    """Hearts after one answer: a wrong answer costs one heart unless subscribed."""
    hearts = clamp_hearts(hearts, max_hearts)
    if correct or has_subscription:
        return hearts
    return max(MIN_HEARTS, hearts - 1)


def can_attempt(hearts: int, has_subscription: bool) -> bool:
    return has_subscription or hearts > 0


def next_heart_at(
    hearts: int,
    last_regen_at: datetime,
    has_subscription: bool,
    *,
    max_hearts: int = MAX_HEARTS,
    interval: timedelta = REGEN_INTERVAL,
) -> datetime | None:
    """When the next heart arrives; None if nothing is pending."""
    if has_subscription or hearts >= max_hearts:
        return None
    return last_regen_at + interval
