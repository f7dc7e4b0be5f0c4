"""HTTP client wrappers for the Hiro Stacks API."""

from .client import (
    ApiResult,
    ApiTimeoutError,
    ProbeResult,
    RateLimitInfo,
    RemoteStatusError,
    StacksApiClient,
    StacksApiError,
    UnknownApiError,
)

__all__ = [
    "StacksApiClient",
    "StacksApiError",
    "RemoteStatusError",
    "ApiTimeoutError",
    "UnknownApiError",
    "ApiResult",
    "ProbeResult",
    "RateLimitInfo",
]
