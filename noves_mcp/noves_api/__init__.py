"""HTTP client wrappers for the Noves APIs."""

from .client import (
    NotFoundError,
    NovesApiClient,
    NovesApiError,
    ProviderUnreachableError,
    RateLimitedError,
    UnauthorizedError,
    default_client,
)

__all__ = [
    "NovesApiClient",
    "NovesApiError",
    "NotFoundError",
    "RateLimitedError",
    "UnauthorizedError",
    "ProviderUnreachableError",
    "default_client",
]
