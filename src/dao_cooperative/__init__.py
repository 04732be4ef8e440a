"""
DAO Cooperative governance client.

Keeps a session view of the acting identity, cached proposal listings and
the single active error, driven by calls to the governance gateway:
- client: GovernanceClient, the command and query handlers
- gateway: the contract boundary and its HTTP relay transport
- identity: account sources that notify on account switches
"""
from src.dao_cooperative.client import GovernanceClient
from src.dao_cooperative.gateway import GovernanceGateway, HttpGovernanceGateway
from src.dao_cooperative.identity import (
    IdentityProvider,
    InMemoryIdentityProvider,
    JsonRpcIdentityProvider,
)
from src.dao_cooperative.state import GovernanceSession, OperationOutcome

__all__ = [
    "GovernanceClient",
    "GovernanceGateway",
    "HttpGovernanceGateway",
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "JsonRpcIdentityProvider",
    "GovernanceSession",
    "OperationOutcome",
]
