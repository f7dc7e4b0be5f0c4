import pytest

from stacks_mcp.config import NetworkType, StacksConfig, resolve_config
from stacks_mcp.networks import NetworkProfile, NetworkRegistry


def test_profiles_follow_config_urls():
    config = resolve_config({"HIRO_TESTNET_API_URL": "https://testnet.example.org"})
    registry = NetworkRegistry.from_config(config)
    profile = registry.profile_for(NetworkType.TESTNET)
    assert profile.base_url == "https://testnet.example.org"
    assert profile.display_name == "Stacks Testnet"


def test_profiles_are_listed_in_fixed_order():
    registry = NetworkRegistry.from_config(StacksConfig())
    assert [p.network for p in registry.profiles()] == [
        NetworkType.MAINNET,
        NetworkType.TESTNET,
        NetworkType.MOCKNET,
    ]


@pytest.mark.parametrize("selector", [None, "", "regtest", 42])
def test_unknown_selectors_resolve_to_testnet(selector):
    registry = NetworkRegistry.from_config(StacksConfig())
    assert registry.resolve(selector) == NetworkType.TESTNET


def test_string_selectors_are_case_insensitive():
    registry = NetworkRegistry.from_config(StacksConfig())
    assert registry.profile_for("MAINNET").base_url == "https://api.mainnet.hiro.so"


def test_registry_requires_every_network():
    profile = NetworkProfile(NetworkType.MAINNET, "https://api.mainnet.hiro.so", "Stacks Mainnet")
    with pytest.raises(ValueError):
        NetworkRegistry({NetworkType.MAINNET: profile})
