"""
Rate Limiting Configuration

This module sets up the slowapi Limiter using Redis as the storage backend.
It provides a centralized limiter instance that can be imported and used
to decorate routes throughout the application.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from borohub.config import settings

# Login attempts per client address
ACCESS_LIMIT = "5 per 5 minutes"

# Applied to every route through SlowAPIMiddleware
API_LIMIT = "100 per 15 minutes"

# key_func=get_remote_address: Uses the client's IP address as the unique identifier
# storage_uri: Redis URL, or "memory://" for a single process
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.REDIS_URL,
    strategy="fixed-window",
    default_limits=[API_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
