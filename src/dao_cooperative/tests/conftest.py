"""Shared fixtures for DAO cooperative client tests."""
from datetime import timezone
from unittest.mock import AsyncMock

import pytest

from src.dao_cooperative.client import GovernanceClient
from src.dao_cooperative.gateway import GovernanceGateway
from src.dao_cooperative.identity import InMemoryIdentityProvider
from src.dao_cooperative.schemas import RawProposalDetails, RawProposalResults

ALICE = "0xA11cE00000000000000000000000000000000001"
BOB = "0xB0b0000000000000000000000000000000000002"


def make_raw_details(**overrides) -> RawProposalDetails:
    payload = {
        "id": "1",
        "creator": ALICE,
        "description": "Buy a new espresso machine",
        "votingEndTime": "1700000000",
        "isClosed": False,
        "totalVotes": "4",
        "optionDescriptions": ["Yes", "No", "Abstain"],
    }
    payload.update(overrides)
    return RawProposalDetails.model_validate(payload)


def make_raw_results(**overrides) -> RawProposalResults:
    payload = {
        "votingClosed": True,
        "winningOptionIndex": "0",
        "voteCounts": ["3", "1", "0"],
    }
    payload.update(overrides)
    return RawProposalResults.model_validate(payload)


@pytest.fixture
def gateway():
    """Gateway double whose listings succeed by default."""
    mock = AsyncMock(spec=GovernanceGateway)
    mock.get_active_proposals.return_value = ["1", "2"]
    mock.get_closed_proposals.return_value = ["0"]
    mock.get_total_members.return_value = 3
    mock.get_proposal_details.return_value = make_raw_details()
    mock.get_proposal_results.return_value = make_raw_results()
    return mock


@pytest.fixture
def provider():
    return InMemoryIdentityProvider([ALICE])


@pytest.fixture
def client(gateway, provider):
    return GovernanceClient(gateway, provider, display_tz=timezone.utc)
