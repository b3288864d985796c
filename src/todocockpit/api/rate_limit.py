"""Shared rate limiter for mutating endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from todocockpit.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def default_rate_limit() -> str:
    """Get the default rate limit from settings."""
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return "1000000/minute"  # Effectively unlimited when disabled
    return settings.rate_limit_default
