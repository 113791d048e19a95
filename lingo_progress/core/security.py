"""Admin token check for the reset endpoint."""
import hmac

from lingo_progress.core.config import get_settings


def verify_admin_token(token: str | None) -> bool:
    """True iff an admin token is configured and `token` matches it."""
    expected = get_settings().admin_token
    if not expected or not token:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))
