"""
Governance client core.

Tracks the acting identity, issues commands and queries against the
governance gateway and folds every result into a ``GovernanceSession``.
No action raises past this class: failures are written into the session's
single error slot and returned in an ``OperationOutcome``.

In-flight operations are never cancelled when the identity changes. Each
outcome records the identity and epoch it was issued under and is marked
``stale`` when it completes after a change; its result is applied anyway.
"""
import asyncio
from datetime import tzinfo
from typing import List, Optional, Sequence, Union

from src.utils.logger import logger

from .exceptions import (
    DaoCooperativeError,
    LocalValidationError,
    MissingMemberAddressError,
    MissingOptionIndexError,
    MissingProposalIdError,
    NoAccountSelectedError,
    TooManyOptionsError,
    error_message,
)
from .gateway import GovernanceGateway
from .identity import IdentityProvider
from .normalization import normalize_details, normalize_results
from .numeric import narrow_to_int
from .schemas import MAX_PROPOSAL_OPTIONS, ProposalId
from .state import GovernanceSession, OperationOutcome


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class GovernanceClient:
    """
    Client core for the DAO cooperative.

    Usage:
        client = GovernanceClient(gateway, identity_provider)
        await client.start()
        outcome = await client.vote("3", 1)
        client.session.error  # None on success
    """

    def __init__(
        self,
        gateway: GovernanceGateway,
        identity_provider: IdentityProvider,
        session: Optional[GovernanceSession] = None,
        display_tz: Optional[tzinfo] = None,
    ):
        self.gateway = gateway
        self.identity_provider = identity_provider
        self.session = session or GovernanceSession()
        self.display_tz = display_tz
        self._started = False

    @property
    def identity(self) -> Optional[str]:
        return self.session.identity

    @property
    def error(self) -> Optional[str]:
        return self.session.error

    # ------------------------------------------------------------------
    # Identity tracking
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the initial identity and subscribe to account changes."""
        if self._started:
            return
        self._started = True

        try:
            accounts = await self.identity_provider.get_accounts()
        except Exception as e:
            logger.error(f"[GovernanceClient] Failed to load accounts: {e}", exc_info=True)
            self.session.update(error=error_message(e))
            accounts = []

        self.identity_provider.on_accounts_changed(self._handle_accounts_changed)
        await self._apply_accounts(accounts)

    async def _handle_accounts_changed(self, accounts: List[str]) -> None:
        await self._apply_accounts(accounts)

    async def _apply_accounts(self, accounts: Sequence[str]) -> None:
        identity = accounts[0] if accounts else None
        self.session.update(identity=identity, identity_epoch=self.session.identity_epoch + 1)
        logger.info(f"[GovernanceClient] identity={identity} epoch={self.session.identity_epoch}")
        # No deduplication: every notification with an identity reloads.
        if identity:
            await self.reload()

    async def close(self) -> None:
        await self.identity_provider.close()
        await self.gateway.close()

    # ------------------------------------------------------------------
    # Outcome bookkeeping
    # ------------------------------------------------------------------

    def _issue(self, operation: str) -> OperationOutcome:
        return OperationOutcome(
            operation=operation,
            ok=False,
            issued_under=self.session.identity,
            issued_epoch=self.session.identity_epoch,
        )

    def _mark_stale(self, outcome: OperationOutcome) -> None:
        if outcome.issued_epoch != self.session.identity_epoch:
            outcome.stale = True
            logger.warning(
                f"[GovernanceClient] {outcome.operation} issued under {outcome.issued_under} "
                f"completed after identity changed to {self.session.identity}"
            )

    def _succeed(self, outcome: OperationOutcome, clear_error: bool = True, **changes) -> OperationOutcome:
        outcome.ok = True
        self._mark_stale(outcome)
        if clear_error:
            changes["error"] = None
        self.session.update(last_outcome=outcome, **changes)
        return outcome

    def _fail(self, outcome: OperationOutcome, error: Exception) -> OperationOutcome:
        outcome.error = error_message(error)
        self._mark_stale(outcome)
        if isinstance(error, LocalValidationError):
            logger.info(f"[GovernanceClient] {outcome.operation} rejected locally: {outcome.error}")
        elif isinstance(error, DaoCooperativeError):
            logger.warning(f"[GovernanceClient] {outcome.operation} failed: {outcome.error}")
        else:
            logger.error(f"[GovernanceClient] {outcome.operation} failed unexpectedly: {outcome.error}", exc_info=error)
        self.session.update(error=outcome.error, last_outcome=outcome)
        return outcome

    def _require_identity(self) -> str:
        if not self.session.identity:
            raise NoAccountSelectedError()
        return self.session.identity

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def register_member(self, candidate_address: str) -> OperationOutcome:
        outcome = self._issue("register_member")
        try:
            identity = self._require_identity()
            if _is_blank(candidate_address):
                raise MissingMemberAddressError()
            await self.gateway.register_member(identity, candidate_address)
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome)

    async def create_proposal(
        self,
        description: str,
        voting_duration_minutes: Union[int, str],
        options: Sequence[str] = (),
    ) -> OperationOutcome:
        """Create a proposal; unfilled option slots are forwarded as empty strings."""
        outcome = self._issue("create_proposal")
        try:
            identity = self._require_identity()
            if len(options) > MAX_PROPOSAL_OPTIONS:
                raise TooManyOptionsError(MAX_PROPOSAL_OPTIONS)
            padded = list(options) + [""] * (MAX_PROPOSAL_OPTIONS - len(options))
            await self.gateway.create_proposal(identity, description, voting_duration_minutes, padded)
        except Exception as e:
            return self._fail(outcome, e)
        self._succeed(outcome)
        await self.load_active_proposals()
        return outcome

    async def vote(self, proposal_id: ProposalId, option_index: Optional[int]) -> OperationOutcome:
        outcome = self._issue("vote")
        try:
            identity = self._require_identity()
            if _is_blank(proposal_id):
                raise MissingProposalIdError()
            if option_index is None:
                raise MissingOptionIndexError()
            await self.gateway.vote_on_proposal(identity, proposal_id, option_index)
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome)

    async def close_voting(self, proposal_id: ProposalId) -> OperationOutcome:
        outcome = self._issue("close_voting")
        try:
            identity = self._require_identity()
            await self.gateway.close_voting(identity, proposal_id)
        except Exception as e:
            return self._fail(outcome, e)
        self._succeed(outcome)
        await self.load_closed_proposals()
        return outcome

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_proposal_details(self, proposal_id: ProposalId) -> OperationOutcome:
        outcome = self._issue("get_proposal_details")
        try:
            if _is_blank(proposal_id):
                raise MissingProposalIdError()
            raw = await self.gateway.get_proposal_details(proposal_id)
            details = normalize_details(raw, tz=self.display_tz)
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome, proposal_details=details)

    async def get_proposal_results(self, proposal_id: ProposalId) -> OperationOutcome:
        outcome = self._issue("get_proposal_results")
        try:
            if _is_blank(proposal_id):
                raise MissingProposalIdError()
            raw = await self.gateway.get_proposal_results(proposal_id)
            results = normalize_results(raw)
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome, proposal_results=results)

    # Listing loaders leave the error slot alone on success so a failure from
    # a sibling loader in the same reload cycle stays visible.

    async def load_active_proposals(self) -> OperationOutcome:
        outcome = self._issue("load_active_proposals")
        try:
            proposals = await self.gateway.get_active_proposals()
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome, clear_error=False, active_proposals=list(proposals))

    async def load_closed_proposals(self) -> OperationOutcome:
        outcome = self._issue("load_closed_proposals")
        try:
            proposals = await self.gateway.get_closed_proposals()
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome, clear_error=False, closed_proposals=list(proposals))

    async def load_total_members(self) -> OperationOutcome:
        outcome = self._issue("load_total_members")
        try:
            total = narrow_to_int(await self.gateway.get_total_members())
        except Exception as e:
            return self._fail(outcome, e)
        return self._succeed(outcome, clear_error=False, total_members=total)

    async def reload(self) -> List[OperationOutcome]:
        """Run the three listing queries concurrently; each reports its own failure."""
        logger.info(f"[GovernanceClient] reload cycle for identity={self.session.identity}")
        outcomes = await asyncio.gather(
            self.load_active_proposals(),
            self.load_closed_proposals(),
            self.load_total_members(),
        )
        return list(outcomes)
