"""
Configuration helpers for the Stacks MCP server.

This module centralizes network selection, base URL overrides, API key loading,
and the per-call timeout. Configuration is resolved once from the environment
into an immutable ``StacksConfig`` that is passed explicitly to the network
registry, the API client, and every tool group. No secrets are stored in the
repository; the API key is read from environment or a local file if present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


class NetworkType(str, Enum):
    """Supported Stacks networks."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    MOCKNET = "mocknet"

    @classmethod
    def parse(cls, raw: object) -> Optional["NetworkType"]:
        """Case-insensitive lookup; returns None for anything unrecognized."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


# Network used whenever a selector is missing or invalid.
FALLBACK_NETWORK = NetworkType.TESTNET

DEFAULT_BASE_URLS: Mapping[NetworkType, str] = MappingProxyType(
    {
        NetworkType.MAINNET: "https://api.mainnet.hiro.so",
        NetworkType.TESTNET: "https://api.testnet.hiro.so",
        NetworkType.MOCKNET: "http://localhost:3999",
    }
)
BASE_URL_ENV_VARS: Mapping[NetworkType, str] = MappingProxyType(
    {
        NetworkType.MAINNET: "HIRO_MAINNET_API_URL",
        NetworkType.TESTNET: "HIRO_TESTNET_API_URL",
        NetworkType.MOCKNET: "HIRO_MOCKNET_API_URL",
    }
)

NETWORK_ENV_VAR = "STACKS_NETWORK"
TIMEOUT_ENV_VAR = "MCP_SERVER_TIMEOUT"
DEBUG_ENV_VAR = "DEBUG"
LOG_LEVEL_ENV_VAR = "STACKS_MCP_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "STACKS_MCP_LOG_FORMAT"

# API key handling
API_KEY_ENV_VAR = "HIRO_API_KEY"
API_KEY_FILE_ENV_VAR = "HIRO_API_KEY_FILE"
DEFAULT_API_KEY_FILE = "hiro_apikey.txt"

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"  # json or plain


def _load_timeout(environ: Mapping[str, str]) -> int:
    raw_timeout = environ.get(TIMEOUT_ENV_VAR)
    if raw_timeout:
        try:
            parsed = int(raw_timeout.strip())
        except ValueError:
            return DEFAULT_TIMEOUT_MS
        if parsed > 0:
            return parsed
    return DEFAULT_TIMEOUT_MS


def _parse_debug(raw: Optional[str]) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true"}


def _load_network(environ: Mapping[str, str]) -> tuple[NetworkType, Optional[str]]:
    raw = environ.get(NETWORK_ENV_VAR)
    if not raw:
        return FALLBACK_NETWORK, None
    parsed = NetworkType.parse(raw)
    if parsed is None:
        return FALLBACK_NETWORK, raw
    return parsed, None


def _load_base_urls(environ: Mapping[str, str]) -> Mapping[NetworkType, str]:
    urls = {}
    for network in NetworkType:
        override = (environ.get(BASE_URL_ENV_VARS[network]) or "").strip()
        urls[network] = (override or DEFAULT_BASE_URLS[network]).rstrip("/")
    return MappingProxyType(urls)


def load_api_key(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Load the Hiro API key from environment or a local file.

    Returns:
        The API key string if available, otherwise None. The key is never logged
        or returned to callers.
    """
    environ = os.environ if environ is None else environ
    env_key = environ.get(API_KEY_ENV_VAR)
    if env_key and env_key.strip():
        return env_key.strip()

    key_path = environ.get(API_KEY_FILE_ENV_VAR, DEFAULT_API_KEY_FILE)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(frozen=True, slots=True)
class StacksConfig:
    """Runtime configuration for Hiro API access."""

    api_key: Optional[str] = None
    base_urls: Mapping[NetworkType, str] = field(default_factory=lambda: DEFAULT_BASE_URLS)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    debug: bool = False
    default_network: NetworkType = FALLBACK_NETWORK
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    invalid_network: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        missing = [network.value for network in NetworkType if not self.base_urls.get(network)]
        if missing:
            raise ValueError(f"Missing base URL for network(s): {', '.join(missing)}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def base_url_for(self, network: NetworkType) -> str:
        return self.base_urls[network]


def resolve_config(environ: Optional[Mapping[str, str]] = None) -> StacksConfig:
    """
    Build a ``StacksConfig`` from the process environment.

    Pure with respect to ``environ``: the same mapping always yields an equal
    config. An invalid ``STACKS_NETWORK`` does not fail the call; it falls back
    to testnet and emits a warning.
    """
    environ = os.environ if environ is None else environ
    default_network, invalid_network = _load_network(environ)
    debug = _parse_debug(environ.get(DEBUG_ENV_VAR))
    log_level = environ.get(LOG_LEVEL_ENV_VAR) or ("DEBUG" if debug else DEFAULT_LOG_LEVEL)

    config = StacksConfig(
        api_key=load_api_key(environ),
        base_urls=_load_base_urls(environ),
        timeout_ms=_load_timeout(environ),
        debug=debug,
        default_network=default_network,
        log_level=log_level,
        log_format=environ.get(LOG_FORMAT_ENV_VAR) or DEFAULT_LOG_FORMAT,
        invalid_network=invalid_network,
    )

    if invalid_network is not None:
        logger.warning(
            "Invalid %s value: %s. Using '%s' as default. Valid values: %s",
            NETWORK_ENV_VAR,
            invalid_network,
            FALLBACK_NETWORK.value,
            ", ".join(network.value for network in NetworkType),
        )
    if config.debug:
        logger.debug(
            "Environment configuration: api_key=%s default_network=%s%s mainnet=%s testnet=%s mocknet=%s timeout=%dms",
            "configured" if config.api_key else "not set (free tier)",
            config.default_network.value,
            " (corrected from invalid value)" if invalid_network is not None else "",
            config.base_urls[NetworkType.MAINNET],
            config.base_urls[NetworkType.TESTNET],
            config.base_urls[NetworkType.MOCKNET],
            config.timeout_ms,
        )
    return config
