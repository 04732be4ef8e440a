"""
Pydantic schemas for gateway payloads and display view models.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .numeric import BigInt

MAX_PROPOSAL_OPTIONS = 5

ProposalId = Union[int, str]


# ==================
# Raw Gateway Schemas
# ==================

class RawProposalDetails(BaseModel):
    """Proposal details as returned by the contract."""
    id: ProposalId
    creator: str
    description: str = ""
    voting_end_time: BigInt = Field(..., alias="votingEndTime")
    is_closed: bool = Field(False, alias="isClosed")
    total_votes: BigInt = Field(0, alias="totalVotes")
    option_descriptions: List[str] = Field(
        default_factory=list,
        alias="optionDescriptions",
        max_length=MAX_PROPOSAL_OPTIONS,
    )

    model_config = {"populate_by_name": True}


class RawProposalResults(BaseModel):
    """Proposal results as returned by the contract.

    ``winning_option_index`` and ``vote_counts`` only carry meaning when
    ``voting_closed`` is true.
    """
    voting_closed: bool = Field(..., alias="votingClosed")
    winning_option_index: BigInt = Field(0, alias="winningOptionIndex")
    vote_counts: List[BigInt] = Field(default_factory=list, alias="voteCounts")

    model_config = {"populate_by_name": True}


# ==================
# View Models
# ==================

class ProposalDetailsView(BaseModel):
    """Display-ready proposal details."""
    id: ProposalId
    creator: str
    description: str
    voting_end_time: str
    is_closed: bool
    total_votes: int
    option_descriptions: List[str]


class ProposalResultsView(BaseModel):
    """Display-ready proposal results.

    While voting is open the tally fields stay ``None``.
    """
    voting_closed: bool
    winning_option_index: Optional[int] = None
    vote_counts: Optional[List[int]] = None


# ==================
# Request Schemas
# ==================

class RegisterMemberRequest(BaseModel):
    address: str = Field(..., description="Address of the member to register")


class CreateProposalRequest(BaseModel):
    description: str = Field("", description="Free-text proposal description")
    voting_duration_minutes: Union[int, str] = Field(
        "", description="Voting duration in minutes, forwarded as entered"
    )
    options: List[str] = Field(default_factory=list, description="Option descriptions (up to 5)")


class VoteRequest(BaseModel):
    option_index: Optional[int] = Field(None, description="0-based option index")
