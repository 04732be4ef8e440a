"""
Custom exceptions for the DAO cooperative client.

Local validation errors are raised before any remote call is made; gateway
and identity provider errors wrap rejections and transport failures and keep
the remote message verbatim so it can be shown to the user.
"""
from typing import Any, Dict, Optional


class DaoCooperativeError(Exception):
    """Base exception for all DAO cooperative client errors."""

    def __init__(self, message: str, code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error_code": self.code,
            "error_message": self.message,
        }


# ============================================
# Local validation errors
# ============================================

class LocalValidationError(DaoCooperativeError):
    """400 - Input rejected before reaching the gateway."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code=400)


class NoAccountSelectedError(LocalValidationError):
    """No acting identity is available."""

    def __init__(self):
        super().__init__("No account selected")


class MissingProposalIdError(LocalValidationError):
    """Proposal identifier left empty."""

    def __init__(self):
        super().__init__("Please enter a proposal ID")


class MissingMemberAddressError(LocalValidationError):
    def __init__(self):
        super().__init__("Please enter a member address")


class MissingOptionIndexError(LocalValidationError):
    def __init__(self):
        super().__init__("Please enter an option index")


class TooManyOptionsError(LocalValidationError):
    def __init__(self, max_options: int):
        super().__init__(f"A proposal supports at most {max_options} options")


# ============================================
# Numeric normalization errors
# ============================================

class NumericConversionError(DaoCooperativeError):
    """A remote value could not be turned into a display value."""

    def __init__(self, message: str):
        super().__init__(message, code=422)


class NumericOverflowError(NumericConversionError):
    """Remote integer does not fit the display-safe integer range."""

    def __init__(self, value: int, limit: int):
        self.value = value
        self.limit = limit
        super().__init__(f"Value {value} exceeds the safe integer range (max {limit})")


# ============================================
# Remote collaborator errors
# ============================================

class GatewayError(DaoCooperativeError):
    """Rejection or transport failure reported by the governance gateway."""

    def __init__(self, message: str, status_code: int = 502, response: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=status_code)
        self.status_code = status_code
        self.response = response


class IdentityProviderError(DaoCooperativeError):
    """The identity provider could not list accounts."""

    def __init__(self, message: str, rpc_code: Optional[int] = None):
        super().__init__(message, code=502)
        self.rpc_code = rpc_code


def error_message(error: BaseException) -> str:
    """Human-readable message for an error surfaced in the session error slot."""
    if isinstance(error, DaoCooperativeError):
        return error.message
    text = str(error)
    return text if text else type(error).__name__
