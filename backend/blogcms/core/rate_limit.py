from slowapi import Limiter
from slowapi.util import get_remote_address
from blogcms.core.config import settings

# Shared by the app middleware and the per-route limits on the auth endpoints
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.DEFAULT_RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
