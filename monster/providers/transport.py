"""HTTP and WebSocket transports for JSON-RPC payloads."""
import json
import logging
from enum import Enum
from typing import Any, Optional

import httpx
import websockets
from websockets.exceptions import WebSocketException

from .errors import HTTP_ERROR_CODE, PARSE_ERROR_CODE, TIMEOUT_CODE, TransportError

logger = logging.getLogger(__name__)

WS_SCHEMES = ("ws://", "wss://")


class TransportKind(str, Enum):
    """Wire transport for a node URL."""
    HTTP = "http"
    WEBSOCKET = "websocket"


def select_transport(url: str) -> TransportKind:
    """Classify a node URL by its scheme prefix."""
    if url.startswith(WS_SCHEMES):
        return TransportKind.WEBSOCKET
    return TransportKind.HTTP


class HttpTransport:
    """JSON-RPC over HTTP POST."""

    def __init__(
        self, url: str, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.url = url
        self._transport = transport

    async def send(self, payload: dict, timeout: float) -> Any:
        """POST one envelope and return the decoded reply."""
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException:
            raise TransportError("timeout", code=TIMEOUT_CODE)
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"HTTP error: {e.response.status_code}", code=HTTP_ERROR_CODE
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", code=HTTP_ERROR_CODE)
        except ValueError as e:
            raise TransportError(f"Invalid JSON reply: {e}", code=PARSE_ERROR_CODE)


class WebSocketTransport:
    """JSON-RPC over a WebSocket connection."""

    def __init__(self, url: str, max_messages: int = 16) -> None:
        self.url = url
        self.max_messages = max_messages

    async def send(self, payload: dict, timeout: float) -> Any:
        """Send one envelope and wait for the frame answering its id."""
        try:
            async with websockets.connect(
                self.url,
                open_timeout=timeout,
                close_timeout=2,
                max_size=2**24,
            ) as ws:
                await ws.send(json.dumps(payload))
                return await self._recv_for_id(ws, payload["id"])

        except TimeoutError:
            raise TransportError("timeout", code=TIMEOUT_CODE)
        except WebSocketException as e:
            raise TransportError(f"WebSocket error: {e}")
        except OSError as e:
            raise TransportError(f"Connection failed: {e}")
        except ValueError as e:
            raise TransportError(f"Invalid JSON reply: {e}", code=PARSE_ERROR_CODE)

    async def _recv_for_id(self, ws, request_id: int) -> Any:
        # Subscription notifications may arrive ahead of the reply
        for _ in range(self.max_messages):
            data = json.loads(await ws.recv())
            if isinstance(data, dict) and data.get("id") == request_id:
                return data
            logger.debug(f"Skipping unrelated frame from {self.url}")

        raise TransportError(f"No reply for request {request_id}")


def build_transport(url: str) -> HttpTransport | WebSocketTransport:
    """Build the transport matching the URL scheme."""
    if select_transport(url) is TransportKind.WEBSOCKET:
        return WebSocketTransport(url)
    return HttpTransport(url)
