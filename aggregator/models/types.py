"""Wire-level scalar types: token amounts and account/asset addresses.

Amounts cross the HTTP boundary as decimal strings so that values above
2^53 survive JSON clients. Addresses are 20-byte hex strings; the core
compares them lowercased.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from aggregator.safe_int import UINT256_MAX, is_uint256

_DECIMAL = re.compile(r"^\d+$")
_ADDRESS = re.compile(r"^0x[0-9a-f]{40}$")


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string to a canonical uint256 string.

    Raises:
        ValueError: For bools, floats, signed or non-decimal strings, and
            anything outside [0, 2^256-1]
    """
    if isinstance(value, str) and _DECIMAL.match(value):
        value = int(value)
    elif isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"amount must be a decimal string or int, got {value!r}")

    if not is_uint256(value):
        raise ValueError(f"amount out of uint256 range: {value}")
    return str(value)


Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="Token amount in base units, as a decimal string"),
]


def is_valid_address(address: str) -> bool:
    """True for a lowercase-comparable 0x-prefixed 20-byte hex string."""
    return isinstance(address, str) and _ADDRESS.match(address.lower()) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address, adding the 0x prefix when missing.

    Raises:
        ValueError: If validate is set and the result is not an address
    """
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized


__all__ = [
    "Address",
    "UINT256_MAX",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    "validate_uint256",
]
