"""Define the session state owned by the governance client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.utils.logger import logger

from .schemas import ProposalDetailsView, ProposalId, ProposalResultsView

SessionListener = Callable[["GovernanceSession"], None]


@dataclass
class OperationOutcome:
    """Result of a single client action, tagged with the identity it was issued under."""

    operation: str
    ok: bool
    error: Optional[str] = None
    issued_under: Optional[str] = None
    """Acting identity when the operation was issued."""

    issued_epoch: int = 0
    stale: bool = False
    """True when the identity changed while the operation was in flight.

    Stale results are still applied (last writer wins).
    """

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "ok": self.ok,
            "error": self.error,
            "issued_under": self.issued_under,
            "issued_epoch": self.issued_epoch,
            "stale": self.stale,
        }


@dataclass
class GovernanceSession:
    """Everything the presentation layer renders.

    Each field is replaced wholesale on write; nothing is merged or appended.
    """

    identity: Optional[str] = field(default=None)
    """
    The acting account, or None when no account is available.

    Replaced on the initial load and on every accounts-changed notification.
    """

    identity_epoch: int = field(default=0)
    """Incremented on every identity notification; used to tag in-flight operations."""

    error: Optional[str] = field(default=None)
    """The single active error message. The latest failure wins."""

    active_proposals: List[ProposalId] = field(default_factory=list)
    closed_proposals: List[ProposalId] = field(default_factory=list)
    total_members: int = field(default=0)

    proposal_details: Optional[ProposalDetailsView] = field(default=None)
    proposal_results: Optional[ProposalResultsView] = field(default=None)

    last_outcome: Optional[OperationOutcome] = field(default=None)

    _listeners: List[SessionListener] = field(default_factory=list, repr=False, compare=False)

    def update(self, **changes: Any) -> None:
        """Replace the given fields and notify subscribers."""
        for name, value in changes.items():
            if name.startswith("_") or not hasattr(self, name):
                raise AttributeError(f"Unknown session field: {name}")
            setattr(self, name, value)
        self._notify()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"[GovernanceSession] listener failed: {e}", exc_info=True)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "identity": self.identity,
            "identity_epoch": self.identity_epoch,
            "error": self.error,
            "active_proposals": list(self.active_proposals),
            "closed_proposals": list(self.closed_proposals),
            "total_members": self.total_members,
            "proposal_details": self.proposal_details.model_dump() if self.proposal_details else None,
            "proposal_results": self.proposal_results.model_dump() if self.proposal_results else None,
            "last_outcome": self.last_outcome.to_dict() if self.last_outcome else None,
        }
