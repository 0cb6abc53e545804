"""Rate limiting configuration for the status page API."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from statuspage.core.config import Settings


def build_limiter(settings: Settings) -> Limiter:
    """Per-client limiter; RATE_LIMIT_API <= 0 turns the default limit off."""
    default_limits = (
        [f"{settings.RATE_LIMIT_API}/minute"] if settings.RATE_LIMIT_API > 0 else []
    )
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        default_limits=default_limits,
        enabled=settings.RATE_LIMIT_API > 0,
    )
