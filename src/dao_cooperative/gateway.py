"""
Governance gateway: the boundary to the DAO cooperative contract.

``GovernanceGateway`` is the contract surface the client core depends on.
``HttpGovernanceGateway`` talks to a relay service that submits transactions
and performs contract reads on behalf of the acting account.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.utils.logger import logger

from .exceptions import GatewayError
from .numeric import parse_big_int
from .schemas import ProposalId, RawProposalDetails, RawProposalResults


def _path_id(proposal_id: ProposalId) -> str:
    # Ids are opaque: escape every reserved character, "/" and "?" included
    return quote(str(proposal_id), safe="")


class GovernanceGateway(ABC):
    """Asynchronous contract surface. Every call may fail independently."""

    @abstractmethod
    async def register_member(self, acting_identity: str, candidate_address: str) -> None:
        ...

    @abstractmethod
    async def create_proposal(
        self,
        acting_identity: str,
        description: str,
        voting_duration_minutes: Union[int, str],
        options: Sequence[str],
    ) -> None:
        ...

    @abstractmethod
    async def vote_on_proposal(self, acting_identity: str, proposal_id: ProposalId, option_index: int) -> None:
        ...

    @abstractmethod
    async def close_voting(self, acting_identity: str, proposal_id: ProposalId) -> None:
        ...

    @abstractmethod
    async def get_proposal_details(self, proposal_id: ProposalId) -> RawProposalDetails:
        ...

    @abstractmethod
    async def get_proposal_results(self, proposal_id: ProposalId) -> RawProposalResults:
        ...

    @abstractmethod
    async def get_active_proposals(self) -> List[ProposalId]:
        ...

    @abstractmethod
    async def get_closed_proposals(self) -> List[ProposalId]:
        ...

    @abstractmethod
    async def get_total_members(self) -> int:
        """Total member count as an unbounded integer."""
        ...

    async def close(self) -> None:
        """Release transport resources."""


class HttpGovernanceGateway(GovernanceGateway):
    """
    HTTP client for the contract relay.

    Provides methods to:
    - Submit member registration, proposal creation, votes and closings
    - Read proposal details, results and the proposal/member listings
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway client.

        Args:
            base_url: Base URL of the contract relay
            timeout: Request timeout in seconds (default 30.0)
            auth_token: Optional bearer token sent with every request
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=self._get_headers(),
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _handle_response(self, response: httpx.Response) -> Any:
        """
        Handle relay response and raise errors if needed.

        Args:
            response: HTTP response

        Returns:
            Parsed JSON response

        Raises:
            GatewayError: If the relay reports an error
        """
        if response.status_code == 204:
            return {"success": True}

        try:
            data = response.json()
        except ValueError:
            data = {"error": "Failed to parse response", "raw": response.text}
            if response.status_code < 400:
                raise GatewayError("Failed to parse response", response.status_code, data)

        if response.status_code >= 400:
            error_msg = "Unknown error"
            if isinstance(data, dict):
                error_msg = data.get("message") or data.get("error") or error_msg
            raise GatewayError(error_msg, response.status_code, data if isinstance(data, dict) else None)

        return data

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"[GovernanceGateway] {method} {path} transport error: {e}")
            raise GatewayError(str(e) or type(e).__name__)
        return self._handle_response(response)

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    async def register_member(self, acting_identity: str, candidate_address: str) -> None:
        logger.info(f"[GovernanceGateway] register_member from={acting_identity} address={candidate_address}")
        await self._request("POST", "/members", {"from": acting_identity, "address": candidate_address})

    async def create_proposal(
        self,
        acting_identity: str,
        description: str,
        voting_duration_minutes: Union[int, str],
        options: Sequence[str],
    ) -> None:
        logger.info(f"[GovernanceGateway] create_proposal from={acting_identity} duration={voting_duration_minutes}")
        await self._request(
            "POST",
            "/proposals",
            {
                "from": acting_identity,
                "description": description,
                "votingDurationMinutes": voting_duration_minutes,
                "options": list(options),
            },
        )

    async def vote_on_proposal(self, acting_identity: str, proposal_id: ProposalId, option_index: int) -> None:
        logger.info(f"[GovernanceGateway] vote from={acting_identity} proposal={proposal_id} option={option_index}")
        await self._request(
            "POST",
            f"/proposals/{_path_id(proposal_id)}/votes",
            {"from": acting_identity, "optionIndex": option_index},
        )

    async def close_voting(self, acting_identity: str, proposal_id: ProposalId) -> None:
        logger.info(f"[GovernanceGateway] close_voting from={acting_identity} proposal={proposal_id}")
        await self._request("POST", f"/proposals/{_path_id(proposal_id)}/close", {"from": acting_identity})

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    async def get_proposal_details(self, proposal_id: ProposalId) -> RawProposalDetails:
        data = await self._request("GET", f"/proposals/{_path_id(proposal_id)}")
        try:
            return RawProposalDetails.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Malformed proposal details: {e.errors()[0].get('msg', e)}")

    async def get_proposal_results(self, proposal_id: ProposalId) -> RawProposalResults:
        data = await self._request("GET", f"/proposals/{_path_id(proposal_id)}/results")
        try:
            return RawProposalResults.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Malformed proposal results: {e.errors()[0].get('msg', e)}")

    async def get_active_proposals(self) -> List[ProposalId]:
        return self._proposal_list(await self._request("GET", "/proposals/active"))

    async def get_closed_proposals(self) -> List[ProposalId]:
        return self._proposal_list(await self._request("GET", "/proposals/closed"))

    async def get_total_members(self) -> int:
        data = await self._request("GET", "/members/count")
        if isinstance(data, dict):
            data = data.get("totalMembers")
        return parse_big_int(data)

    @staticmethod
    def _proposal_list(data: Any) -> List[ProposalId]:
        # Normalize response: handle both list and dict with 'proposals' key
        if isinstance(data, dict):
            if "proposals" not in data:
                raise GatewayError("Unexpected proposal list response: missing 'proposals'")
            data = data["proposals"]
        if not isinstance(data, list):
            raise GatewayError(f"Unexpected proposal list response: {type(data).__name__}")
        return list(data)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
