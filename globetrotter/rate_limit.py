"""Shared rate limiter.

Storage defaults to in-process memory. Point RATE_LIMIT_STORAGE_URI at a
shared backend when running several workers.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled and not settings.testing,
    storage_uri=settings.rate_limit_storage_uri,
)
