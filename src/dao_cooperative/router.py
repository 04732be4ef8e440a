"""
FastAPI router for the DAO cooperative client.

Exposes the session snapshot and the client actions. Actions never fail at
the HTTP level: the outcome and the session error carry any failure.
"""
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request

from src.utils.logger import logger

from .client import GovernanceClient
from .schemas import CreateProposalRequest, RegisterMemberRequest, VoteRequest
from .state import OperationOutcome

router = APIRouter(prefix="/governance", tags=["governance"])


def get_client(request: Request) -> GovernanceClient:
    client = getattr(request.app.state, "governance_client", None)
    if client is None:
        logger.error("[GovernanceRouter] Governance client is not initialized")
        raise HTTPException(status_code=503, detail="Governance client is not initialized")
    return client


def _respond(client: GovernanceClient, outcome: OperationOutcome) -> Dict[str, Any]:
    return {"outcome": outcome.to_dict(), "state": client.session.snapshot()}


@router.get("/state")
async def get_state(request: Request) -> Dict[str, Any]:
    """Current identity, error and cached query results."""
    return get_client(request).session.snapshot()


@router.post("/reload")
async def reload(request: Request) -> Dict[str, Any]:
    client = get_client(request)
    outcomes = await client.reload()
    return {
        "outcomes": [o.to_dict() for o in outcomes],
        "state": client.session.snapshot(),
    }


@router.post("/members")
async def register_member(body: RegisterMemberRequest, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.register_member(body.address))


@router.get("/members/count")
async def load_total_members(request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.load_total_members())


@router.post("/proposals")
async def create_proposal(body: CreateProposalRequest, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    outcome = await client.create_proposal(body.description, body.voting_duration_minutes, body.options)
    return _respond(client, outcome)


@router.get("/proposals/active")
async def load_active_proposals(request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.load_active_proposals())


@router.get("/proposals/closed")
async def load_closed_proposals(request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.load_closed_proposals())


@router.post("/proposals/{proposal_id}/vote")
async def vote(proposal_id: str, body: VoteRequest, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.vote(proposal_id, body.option_index))


@router.post("/proposals/{proposal_id}/close")
async def close_voting(proposal_id: str, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.close_voting(proposal_id))


@router.get("/proposals/{proposal_id}/details")
async def get_proposal_details(proposal_id: str, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.get_proposal_details(proposal_id))


@router.get("/proposals/{proposal_id}/results")
async def get_proposal_results(proposal_id: str, request: Request) -> Dict[str, Any]:
    client = get_client(request)
    return _respond(client, await client.get_proposal_results(proposal_id))
