import json

import httpx
import pytest

from monster.config import Settings
from monster.providers.rpc_client import RPCClient
from monster.providers.transport import HttpTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MONSTER_NODE", "MONSTER_CONFIG_PATH", "MONSTER_RPC_TIMEOUT_DEFAULT", "MONSTER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, config_path=tmp_path / "config.json")


def rpc_handler(result=None, error=None, calls=None):
    """httpx handler answering every JSON-RPC request with `result` or `error`."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if calls is not None:
            calls.append(body)
        reply = {"jsonrpc": "2.0", "id": body["id"]}
        if error is not None:
            reply["error"] = error
        else:
            reply["result"] = result
        return httpx.Response(200, json=reply)

    return handler


def mock_client(handler, url="http://node.test:8545", timeout_ms=1000) -> RPCClient:
    transport = HttpTransport(url, transport=httpx.MockTransport(handler))
    return RPCClient(transport, timeout_ms=timeout_ms)
