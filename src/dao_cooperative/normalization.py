"""Turn raw gateway payloads into display-ready view models."""
from datetime import tzinfo
from typing import Optional

from .numeric import format_timestamp, narrow_all, narrow_to_int
from .schemas import (
    ProposalDetailsView,
    ProposalResultsView,
    RawProposalDetails,
    RawProposalResults,
)


def normalize_details(raw: RawProposalDetails, tz: Optional[tzinfo] = None) -> ProposalDetailsView:
    return ProposalDetailsView(
        id=raw.id,
        creator=raw.creator,
        description=raw.description,
        voting_end_time=format_timestamp(raw.voting_end_time, tz=tz),
        is_closed=raw.is_closed,
        total_votes=narrow_to_int(raw.total_votes),
        option_descriptions=list(raw.option_descriptions),
    )


def normalize_results(raw: RawProposalResults) -> ProposalResultsView:
    # The winning index and counts are not authoritative until voting closes,
    # and the winner is never recomputed here.
    if not raw.voting_closed:
        return ProposalResultsView(voting_closed=False)
    return ProposalResultsView(
        voting_closed=True,
        winning_option_index=narrow_to_int(raw.winning_option_index),
        vote_counts=narrow_all(raw.vote_counts),
    )
