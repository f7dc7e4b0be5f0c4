"""Shared argument parsing helpers for Stacks MCP tools."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional

from stacks_mcp.config import FALLBACK_NETWORK, NetworkType, StacksConfig
from stacks_mcp.tools.base import ValidationError

# ASCII digits only; block hashes are hex and may be 0x-prefixed.
BLOCK_HEIGHT_REGEX = re.compile(r"[0-9]+")


def require_string(arguments: Mapping[str, Any], key: str, message: str) -> str:
    """Return a non-blank string argument or raise ``ValidationError(message)``."""
    value = arguments.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def optional_string(arguments: Mapping[str, Any], key: str, default: str) -> str:
    value = arguments.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def string_list(value: Any, message: str) -> List[str]:
    """Accept None (empty list) or a list of strings."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(message)
    return list(value)


def clamp_limit(value: Any, *, default: int, max_value: int, minimum: int = 0) -> int:
    """Clamp limit/offset-style integers to configured bounds."""
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < minimum:
        return default
    return min(parsed, max_value)


def is_block_height(block_id: Optional[str]) -> bool:
    if not block_id:
        return False
    return bool(BLOCK_HEIGHT_REGEX.fullmatch(block_id))


def select_network(arguments: Mapping[str, Any], config: StacksConfig) -> NetworkType:
    """Requested network, the configured default when absent, the fallback when unrecognized."""
    raw = arguments.get("network")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return config.default_network
    parsed = NetworkType.parse(raw)
    return parsed if parsed is not None else FALLBACK_NETWORK
