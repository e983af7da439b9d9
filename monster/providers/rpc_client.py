"""JSON-RPC client for Ethereum-compatible nodes."""
import asyncio
import logging
from typing import Any, Optional

from eth_utils import add_0x_prefix, is_hex, remove_0x_prefix

from .errors import RemoteRPCError, TIMEOUT_CODE, TransportError, ValidationError
from .transport import HttpTransport, WebSocketTransport, build_transport

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0"


def to_hex_quantity(value: Any) -> str:
    """Encode a block number as a 0x-prefixed hex quantity."""
    if isinstance(value, bool):
        raise ValidationError(f"Block number must be an integer, got {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"Block number must be non-negative, got {value}")
        return hex(value)

    if isinstance(value, str) and value.startswith("0x") and len(value) > 2 and is_hex(value):
        return value.lower()

    raise ValidationError(f"Block number must be an int or 0x-prefixed hex, got {value!r}")


def normalize_address(address: Optional[str]) -> Optional[str]:
    """
    Normalize an address filter to 0x-prefixed form.

    Returns None for a missing or all-zero address, which is not a real
    filter target.
    """
    if address is None:
        return None

    digits = remove_0x_prefix(address.strip())
    if not digits or not is_hex(digits):
        raise ValidationError(f"Address must be hex, got {address!r}")

    if int(digits, 16) == 0:
        return None

    return add_0x_prefix(digits)


def build_log_filter(
    from_block: Any, to_block: Any, address: Optional[str] = None
) -> dict:
    """Build an eth_getLogs filter object."""
    log_filter = {
        "fromBlock": to_hex_quantity(from_block),
        "toBlock": to_hex_quantity(to_block),
    }

    normalized = normalize_address(address)
    if normalized is not None:
        log_filter["address"] = normalized

    return log_filter


class RPCClient:
    """Async JSON-RPC 2.0 client bound to one transport."""

    def __init__(
        self,
        transport: HttpTransport | WebSocketTransport,
        timeout_ms: int = 1000,
    ) -> None:
        self.transport = transport
        self.timeout_ms = timeout_ms
        self._request_id = 0

    @classmethod
    def for_url(cls, url: str, timeout_ms: int = 1000) -> "RPCClient":
        """Create a client with the transport matching the URL scheme."""
        return cls(build_transport(url), timeout_ms=timeout_ms)

    @property
    def url(self) -> str:
        return self.transport.url

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Make JSON-RPC call."""
        self._request_id += 1

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._request_id,
        }

        timeout_s = self.timeout_ms / 1000
        logger.debug(f"-> {self.url} {method} id={self._request_id}")

        try:
            data = await asyncio.wait_for(
                self.transport.send(payload, timeout_s), timeout=timeout_s
            )
        except asyncio.TimeoutError:
            raise TransportError("timeout", code=TIMEOUT_CODE)

        if not isinstance(data, dict):
            raise TransportError("malformed response")

        if data.get("error") is not None:
            error = data["error"] if isinstance(data["error"], dict) else {}
            raise RemoteRPCError(
                code=error.get("code"),
                message=error.get("message", "RPC error"),
                data=error.get("data"),
            )

        if "result" not in data:
            raise TransportError("malformed response")

        return data["result"]

    async def get_logs(
        self, from_block: int, to_block: int, address: Optional[str] = None
    ) -> list[dict]:
        """Get logs in a block range, optionally for one address."""
        log_filter = build_log_filter(from_block, to_block, address)
        result = await self.call("eth_getLogs", [log_filter])
        if result is None:
            return []
        if not isinstance(result, list):
            raise TransportError("malformed response")
        return result
