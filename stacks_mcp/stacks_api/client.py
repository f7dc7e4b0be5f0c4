"""
Thin async HTTP client for the Hiro Stacks API.

Every call resolves the target network through the ``NetworkRegistry``, adds the
client identifier and optional API key headers, and runs under a hard
per-call timeout. Non-success responses are turned into ``RemoteStatusError``
with the server's error text; transport faults propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from stacks_mcp import __version__
from stacks_mcp.config import StacksConfig
from stacks_mcp.metrics import MetricsRecorder
from stacks_mcp.networks import NetworkRegistry, NetworkSelector

logger = logging.getLogger(__name__)

USER_AGENT = f"Stacks-MCP-Server/{__version__}"
API_KEY_HEADER = "X-API-Key"
RATE_LIMIT_GUIDANCE = ". Consider using a Hiro API key for higher rate limits: https://www.hiro.so/"


class StacksApiError(Exception):
    """Base exception for Hiro API call failures."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RemoteStatusError(StacksApiError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message, url=url, status_code=status_code)
        self.payload = payload

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


class ApiTimeoutError(StacksApiError):
    """Raised when no response arrives within the configured bound."""

    def __init__(self, timeout_ms: int, url: str) -> None:
        super().__init__(f"API call timeout after {timeout_ms}ms: {url}", url=url)
        self.timeout_ms = timeout_ms


class UnknownApiError(StacksApiError):
    """Raised for faults that cannot be classified as status, timeout, or transport errors."""


@dataclass(frozen=True, slots=True)
class RateLimitInfo:
    limit: Optional[str] = None
    remaining: Optional[str] = None
    reset: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo":
        return cls(
            limit=headers.get("X-RateLimit-Limit"),
            remaining=headers.get("X-RateLimit-Remaining"),
            reset=headers.get("X-RateLimit-Reset"),
        )

    def as_dict(self, missing: str = "Unknown") -> Dict[str, str]:
        return {
            "limit": self.limit or missing,
            "remaining": self.remaining or missing,
            "reset": self.reset or missing,
        }


@dataclass(frozen=True, slots=True)
class ApiResult:
    data: Any
    rate_limits: RateLimitInfo


@dataclass(frozen=True, slots=True)
class ProbeResult:
    url: str
    status_code: int
    rate_limits: RateLimitInfo

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class StacksApiClient:
    """Async client for the read-only Hiro API surface."""

    def __init__(
        self,
        config: StacksConfig,
        registry: Optional[NetworkRegistry] = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self.config = config
        self.registry = registry or NetworkRegistry.from_config(config)
        self.metrics = metrics
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _record_failure(self, kind: str) -> None:
        if self.metrics is not None:
            self.metrics.record_upstream_failure(kind)

    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.config.api_key:
            headers[API_KEY_HEADER] = self.config.api_key
        return headers

    def build_url(
        self, network: NetworkSelector, path: str, params: Optional[Dict[str, Any]] = None
    ) -> str:
        profile = self.registry.profile_for(network)
        url = httpx.URL(f"{profile.base_url}{path}")
        if params:
            url = url.copy_merge_params(params)
        return str(url)

    async def _send(self, method: str, url: str, *, body: Any = None) -> httpx.Response:
        client = await self._get_client()
        if self.config.debug:
            logger.debug(
                "API call: %s %s (api key: %s)",
                method,
                url,
                "yes" if self.config.api_key else "no, free tier",
            )
        try:
            return await asyncio.wait_for(
                client.request(method, url, headers=self._build_headers(), json=body),
                timeout=self.config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Hiro API call timed out after %dms: %s", self.config.timeout_ms, url)
            self._record_failure("timeout")
            raise ApiTimeoutError(self.config.timeout_ms, url) from exc
        except httpx.HTTPError:
            logger.warning("Hiro API unreachable for %s", url)
            self._record_failure("transport")
            raise
        except Exception as exc:
            raise UnknownApiError(f"Unknown error during API call to {url}", url=url) from exc

    def _status_error(self, response: httpx.Response, url: str) -> RemoteStatusError:
        message = f"API call failed: {response.status_code} {response.reason_phrase}".rstrip()
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            for key in ("error", "message"):
                value = payload.get(key)
                if isinstance(value, (str, int)) and not isinstance(value, bool) and value != "":
                    message += f" - {value}"

        if response.status_code == 429:
            message += RATE_LIMIT_GUIDANCE
            self._record_failure("rate_limited")
        else:
            self._record_failure("status_error")
        return RemoteStatusError(message, url=url, status_code=response.status_code, payload=payload)

    def _log_rate_limits(self, rate_limits: RateLimitInfo) -> None:
        if self.config.debug and rate_limits.limit:
            logger.debug(
                "Rate limit: %s/%s remaining (resets: %s)",
                rate_limits.remaining,
                rate_limits.limit,
                rate_limits.reset,
            )

    async def call_with_rate_limits(
        self,
        network: NetworkSelector,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        """Perform one API call and return the decoded body with its rate-limit headers."""
        url = self.build_url(network, path, params)
        response = await self._send(method, url, body=body)
        if not response.is_success:
            raise self._status_error(response, url)

        try:
            data = response.json()
        except ValueError as exc:
            raise UnknownApiError(f"Unknown error during API call to {url}", url=url) from exc

        rate_limits = RateLimitInfo.from_headers(response.headers)
        self._log_rate_limits(rate_limits)
        return ApiResult(data=data, rate_limits=rate_limits)

    async def call(
        self,
        network: NetworkSelector,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON body."""
        result = await self.call_with_rate_limits(
            network, path, method=method, body=body, params=params
        )
        return result.data

    async def probe(self, network: NetworkSelector, path: str = "/v2/info") -> ProbeResult:
        """
        Issue a single GET to check reachability.

        Non-2xx statuses are reported, not raised; timeouts and transport faults
        still propagate.
        """
        url = self.build_url(network, path)
        response = await self._send("GET", url)
        rate_limits = RateLimitInfo.from_headers(response.headers)
        self._log_rate_limits(rate_limits)
        return ProbeResult(url=url, status_code=response.status_code, rate_limits=rate_limits)
