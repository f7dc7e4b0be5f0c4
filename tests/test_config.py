import logging

import pytest

from stacks_mcp.config import (
    DEFAULT_BASE_URLS,
    DEFAULT_TIMEOUT_MS,
    FALLBACK_NETWORK,
    NetworkType,
    StacksConfig,
    load_api_key,
    resolve_config,
)
from stacks_mcp.networks import NetworkRegistry


def test_defaults_with_empty_environment():
    config = resolve_config({})
    assert config.api_key is None
    assert config.default_network == NetworkType.TESTNET
    assert config.timeout_ms == DEFAULT_TIMEOUT_MS
    assert config.debug is False
    assert config.invalid_network is None
    assert config.base_url_for(NetworkType.MAINNET) == "https://api.mainnet.hiro.so"
    assert config.base_url_for(NetworkType.TESTNET) == "https://api.testnet.hiro.so"
    assert config.base_url_for(NetworkType.MOCKNET) == "http://localhost:3999"


def test_overrides_are_applied():
    config = resolve_config(
        {
            "HIRO_API_KEY": " secret ",
            "STACKS_NETWORK": "Mainnet",
            "MCP_SERVER_TIMEOUT": "5000",
            "DEBUG": "true",
            "HIRO_MOCKNET_API_URL": "http://devnet:3999/",
        }
    )
    assert config.api_key == "secret"
    assert config.default_network == NetworkType.MAINNET
    assert config.timeout_ms == 5000
    assert config.timeout_seconds == 5.0
    assert config.debug is True
    assert config.log_level == "DEBUG"
    assert config.base_url_for(NetworkType.MOCKNET) == "http://devnet:3999"


@pytest.mark.parametrize("raw", ["abc", "0", "-10", ""])
def test_unusable_timeout_falls_back_to_default(raw):
    assert resolve_config({"MCP_SERVER_TIMEOUT": raw}).timeout_ms == DEFAULT_TIMEOUT_MS


@pytest.mark.parametrize("raw", ["1", "true", "TRUE"])
def test_debug_truthy_values(raw):
    assert resolve_config({"DEBUG": raw}).debug is True


@pytest.mark.parametrize("raw", ["0", "false", "yes", "on"])
def test_debug_other_values_are_false(raw):
    assert resolve_config({"DEBUG": raw}).debug is False


def test_invalid_network_warns_and_falls_back(caplog):
    with caplog.at_level(logging.WARNING, logger="stacks_mcp.config"):
        config = resolve_config({"STACKS_NETWORK": "devnet"})
    assert config.default_network == FALLBACK_NETWORK == NetworkType.TESTNET
    assert config.invalid_network == "devnet"
    assert any("Invalid STACKS_NETWORK value: devnet" in rec.getMessage() for rec in caplog.records)


def test_resolver_and_registry_agree_on_fallback():
    config = resolve_config({"STACKS_NETWORK": "devnet"})
    registry = NetworkRegistry.from_config(config)
    assert registry.resolve("devnet") == config.default_network
    assert registry.profile_for("devnet").network == config.default_network


def test_resolve_config_is_pure():
    env = {"STACKS_NETWORK": "mocknet", "MCP_SERVER_TIMEOUT": "1200"}
    assert resolve_config(env) == resolve_config(dict(env))


def test_api_key_loaded_from_file(tmp_path):
    key_file = tmp_path / "key.txt"
    key_file.write_text("file-key\n", encoding="utf-8")
    assert load_api_key({"HIRO_API_KEY_FILE": str(key_file)}) == "file-key"


def test_env_api_key_wins_over_file(tmp_path):
    key_file = tmp_path / "key.txt"
    key_file.write_text("file-key", encoding="utf-8")
    env = {"HIRO_API_KEY": "env-key", "HIRO_API_KEY_FILE": str(key_file)}
    assert load_api_key(env) == "env-key"


def test_missing_key_file_means_no_key(tmp_path):
    assert load_api_key({"HIRO_API_KEY_FILE": str(tmp_path / "absent.txt")}) is None


def test_config_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        StacksConfig(timeout_ms=0)


def test_config_rejects_missing_base_url():
    urls = dict(DEFAULT_BASE_URLS)
    urls.pop(NetworkType.MOCKNET)
    with pytest.raises(ValueError, match="mocknet"):
        StacksConfig(base_urls=urls)


def test_network_parse_is_case_insensitive():
    assert NetworkType.parse(" MockNet ") == NetworkType.MOCKNET
    assert NetworkType.parse(NetworkType.MAINNET) == NetworkType.MAINNET
    assert NetworkType.parse("regtest") is None
    assert NetworkType.parse(3) is None
