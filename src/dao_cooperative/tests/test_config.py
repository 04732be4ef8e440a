"""Tests for configuration, client factory and startup validation."""
import pytest

from src.config import governance_settings
from src.dao_cooperative import factory
from src.dao_cooperative.gateway import HttpGovernanceGateway
from src.dao_cooperative.identity import InMemoryIdentityProvider, JsonRpcIdentityProvider
from src.utils.startup_validation import StartupValidator


class TestGetRequiredEnv:

    def test_missing_value_raises(self, monkeypatch):
        monkeypatch.delenv("GOVERNANCE_GATEWAY_URL", raising=False)
        with pytest.raises(ValueError, match="GOVERNANCE_GATEWAY_URL"):
            governance_settings.get_required_env("GOVERNANCE_GATEWAY_URL")

    def test_present_value_returned(self, monkeypatch):
        monkeypatch.setenv("GOVERNANCE_GATEWAY_URL", "http://relay.test")
        assert governance_settings.get_required_env("GOVERNANCE_GATEWAY_URL") == "http://relay.test"


class TestFactory:

    def test_in_memory_provider_seeded_with_default_account(self, monkeypatch):
        monkeypatch.setattr(governance_settings, "ETH_RPC_URL", None)
        monkeypatch.setattr(governance_settings, "DEFAULT_ACCOUNT", "0xabc")

        client = factory.build_client("http://relay.test")

        assert isinstance(client.gateway, HttpGovernanceGateway)
        assert isinstance(client.identity_provider, InMemoryIdentityProvider)
        assert client.gateway.base_url == "http://relay.test"

    def test_json_rpc_provider_when_rpc_url_set(self, monkeypatch):
        monkeypatch.setattr(governance_settings, "ETH_RPC_URL", "http://node.test:8545")

        provider = factory.build_identity_provider()
        assert isinstance(provider, JsonRpcIdentityProvider)
        assert provider.rpc_url == "http://node.test:8545"

    def test_missing_gateway_url_raises(self, monkeypatch):
        monkeypatch.delenv("GOVERNANCE_GATEWAY_URL", raising=False)
        with pytest.raises(ValueError):
            factory.build_client()


class TestStartupValidator:

    def test_missing_gateway_url_is_critical(self, monkeypatch):
        monkeypatch.delenv("GOVERNANCE_GATEWAY_URL", raising=False)
        validator = StartupValidator()
        assert validator.validate_all() is False
        assert any("GOVERNANCE_GATEWAY_URL" in e for e in validator.errors)

    def test_bad_timeout_is_critical(self, monkeypatch):
        monkeypatch.setenv("GOVERNANCE_GATEWAY_URL", "https://relay.test")
        monkeypatch.setenv("GOVERNANCE_GATEWAY_TIMEOUT", "soon")
        validator = StartupValidator()
        assert validator.validate_all() is False

    def test_valid_config_passes_with_warnings(self, monkeypatch):
        monkeypatch.setenv("GOVERNANCE_GATEWAY_URL", "https://relay.test")
        monkeypatch.delenv("GOVERNANCE_GATEWAY_TIMEOUT", raising=False)
        monkeypatch.delenv("ETH_RPC_URL", raising=False)
        monkeypatch.delenv("DEFAULT_ACCOUNT", raising=False)
        validator = StartupValidator()

        assert validator.validate_all() is True
        assert any("DEFAULT_ACCOUNT" in w for w in validator.warnings)
