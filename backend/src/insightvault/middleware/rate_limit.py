"""Rate limiting middleware using slowapi."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from insightvault.config import get_settings

SESSION_HEADER = "X-Session-Id"


def get_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key from request.

    Uses the session ID header if present, otherwise the client IP address.
    """
    session_id = request.headers.get(SESSION_HEADER)
    if session_id:
        return f"session:{session_id}"
    return get_remote_address(request)


def generation_limit() -> str:
    """Limit applied to endpoints that call the generation model."""
    return get_settings().rate_limit_generation


# Create limiter instance
limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=["300/minute"],
    storage_uri="memory://",  # In-memory storage (suitable for single instance)
)


__all__ = ["limiter", "generation_limit"]
