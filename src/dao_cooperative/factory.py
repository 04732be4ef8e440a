"""Build a governance client from environment configuration."""
from typing import Optional

from src.config import governance_settings as settings
from src.utils.logger import logger

from .client import GovernanceClient
from .gateway import HttpGovernanceGateway
from .identity import IdentityProvider, InMemoryIdentityProvider, JsonRpcIdentityProvider


def build_identity_provider() -> IdentityProvider:
    if settings.ETH_RPC_URL:
        logger.info(f"[Factory] Using JSON-RPC identity provider at {settings.ETH_RPC_URL}")
        return JsonRpcIdentityProvider(settings.ETH_RPC_URL, poll_interval=settings.ACCOUNTS_POLL_INTERVAL)
    accounts = [settings.DEFAULT_ACCOUNT] if settings.DEFAULT_ACCOUNT else []
    logger.info(f"[Factory] Using in-memory identity provider with {len(accounts)} account(s)")
    return InMemoryIdentityProvider(accounts)


def build_client(gateway_url: Optional[str] = None) -> GovernanceClient:
    """
    Create a client wired to the configured gateway and identity provider.

    Raises:
        ValueError: If no gateway URL is configured
    """
    base_url = gateway_url or settings.get_required_env("GOVERNANCE_GATEWAY_URL")
    gateway = HttpGovernanceGateway(
        base_url,
        timeout=settings.GOVERNANCE_GATEWAY_TIMEOUT,
        auth_token=settings.GOVERNANCE_GATEWAY_TOKEN,
    )
    return GovernanceClient(gateway, build_identity_provider())
