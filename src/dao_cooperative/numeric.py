"""
Integer and timestamp normalization for values returned by the gateway.

The contract speaks in uint256. Values are parsed into Python ints at the
boundary (``BigInt``) and only narrowed for display once they are known to
fit the 53-bit safe range that front ends can represent exactly.
"""
from datetime import datetime, tzinfo
from typing import Any, List, Optional, Sequence

from pydantic import BeforeValidator
from typing_extensions import Annotated

from .exceptions import NumericConversionError, NumericOverflowError

MAX_SAFE_INTEGER = 2**53 - 1


def parse_big_int(value: Any) -> int:
    """Parse a remote integer given as an int, a decimal string or a 0x hex string."""
    if isinstance(value, bool):
        raise NumericConversionError(f"Expected an integer, got boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise NumericConversionError(f"Expected an integer, got {value!r}")
    raise NumericConversionError(f"Expected an integer, got {type(value).__name__}")


BigInt = Annotated[int, BeforeValidator(parse_big_int)]


def narrow_to_int(value: int, limit: int = MAX_SAFE_INTEGER) -> int:
    """Narrow a big integer for display, failing rather than losing precision."""
    value = parse_big_int(value)
    if value > limit or value < -limit:
        raise NumericOverflowError(value, limit)
    return value


def narrow_all(values: Sequence[int]) -> List[int]:
    return [narrow_to_int(v) for v in values]


def format_timestamp(seconds: int, tz: Optional[tzinfo] = None) -> str:
    """Render seconds since epoch in the locale's date and time representation.

    Local time is used unless ``tz`` is given.
    """
    seconds = narrow_to_int(seconds)
    try:
        moment = datetime.fromtimestamp(seconds, tz=tz)
    except (OverflowError, OSError, ValueError) as e:
        raise NumericConversionError(f"Timestamp {seconds} is out of range: {e}")
    return moment.strftime("%c")
