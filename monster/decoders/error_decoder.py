"""Revert reason decoding for remote RPC errors."""
from typing import Any, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import add_0x_prefix, is_hex

ERROR_STRING_SELECTOR = "0x08c379a0"
PANIC_SELECTOR = "0x4e487b71"

PANIC_CODES = {
    0x01: "assertion failed",
    0x11: "arithmetic overflow/underflow",
    0x12: "division by zero",
    0x21: "invalid enum value",
    0x22: "invalid storage byte array",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "zero-initialized function pointer",
}


def _revert_hex(data: Any) -> Optional[str]:
    # Some nodes nest the revert bytes: {"data": "0x..."}
    if isinstance(data, dict):
        data = data.get("data")

    if not isinstance(data, str) or not is_hex(data):
        return None

    data = add_0x_prefix(data.lower())
    if len(data) < 10:
        return None

    return data


def describe_revert(data: Any) -> Optional[str]:
    """
    Turn the `data` member of a JSON-RPC error into a readable reason.

    Returns None when there is no revert payload to describe.
    """
    revert = _revert_hex(data)
    if revert is None:
        return None

    selector = revert[:10]

    try:
        if selector == ERROR_STRING_SELECTOR:
            (reason,) = decode(["string"], bytes.fromhex(revert[10:]))
            return reason

        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], bytes.fromhex(revert[10:]))
            return f"panic: {PANIC_CODES.get(code, hex(code))}"

    except (DecodingError, ValueError):
        return f"undecodable revert {selector}"

    return f"custom error {selector}"
