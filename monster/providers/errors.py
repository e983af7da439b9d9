"""RPC error types."""
from typing import Any, Optional

# Local codes for failures that never reached the node's JSON-RPC handler
TIMEOUT_CODE = -32001
HTTP_ERROR_CODE = -32002
TRANSPORT_ERROR_CODE = -32003
PARSE_ERROR_CODE = -32700


class RPCError(Exception):
    """RPC error exception."""

    def __init__(self, code: Optional[int] = None, message: str = "RPC error") -> None:
        self.code = code
        self.message = message
        super().__init__(f"RPC Error {code}: {message}")


class TransportError(RPCError):
    """Connection, timeout or decode failure."""

    def __init__(self, message: str, code: int = TRANSPORT_ERROR_CODE) -> None:
        super().__init__(code=code, message=message)

    def __str__(self) -> str:
        return self.message


class RemoteRPCError(RPCError):
    """Error object returned by the node."""

    def __init__(
        self,
        code: Optional[int] = None,
        message: str = "RPC error",
        data: Any = None,
    ) -> None:
        self.data = data
        super().__init__(code=code, message=message)


class ValidationError(ValueError):
    """Invalid query input, raised before anything is sent."""
