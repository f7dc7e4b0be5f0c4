"""Network profiles resolved from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

from stacks_mcp.config import FALLBACK_NETWORK, NetworkType, StacksConfig

DISPLAY_NAMES: Mapping[NetworkType, str] = MappingProxyType(
    {
        NetworkType.MAINNET: "Stacks Mainnet",
        NetworkType.TESTNET: "Stacks Testnet",
        NetworkType.MOCKNET: "Stacks Mocknet",
    }
)

NetworkSelector = Union[NetworkType, str, None]


@dataclass(frozen=True, slots=True)
class NetworkProfile:
    network: NetworkType
    base_url: str
    display_name: str


class NetworkRegistry:
    """Read-only lookup from network selector to its profile."""

    def __init__(self, profiles: Mapping[NetworkType, NetworkProfile]) -> None:
        missing = [network.value for network in NetworkType if network not in profiles]
        if missing:
            raise ValueError(f"Missing network profile(s): {', '.join(missing)}")
        self._profiles = MappingProxyType(dict(profiles))

    @classmethod
    def from_config(cls, config: StacksConfig) -> "NetworkRegistry":
        return cls(
            {
                network: NetworkProfile(
                    network=network,
                    base_url=config.base_url_for(network),
                    display_name=DISPLAY_NAMES[network],
                )
                for network in NetworkType
            }
        )

    def resolve(self, selector: NetworkSelector) -> NetworkType:
        parsed: Optional[NetworkType] = NetworkType.parse(selector)
        return parsed if parsed is not None else FALLBACK_NETWORK

    def profile_for(self, selector: NetworkSelector) -> NetworkProfile:
        """Return the profile for ``selector``; unknown selectors map to the fallback network."""
        return self._profiles[self.resolve(selector)]

    def profiles(self) -> List[NetworkProfile]:
        return [self._profiles[network] for network in NetworkType]
