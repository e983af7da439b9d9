import asyncio

import httpx
import pytest

from conftest import mock_client, rpc_handler
from monster.providers.errors import RemoteRPCError, TransportError, ValidationError
from monster.providers.rpc_client import (
    RPCClient,
    build_log_filter,
    normalize_address,
    to_hex_quantity,
)


def test_envelope_and_monotonic_ids():
    calls = []
    client = mock_client(rpc_handler(result="0x1", calls=calls))

    asyncio.run(client.call("eth_blockNumber"))
    asyncio.run(client.call("eth_chainId", []))

    assert calls == [
        {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1},
        {"jsonrpc": "2.0", "method": "eth_chainId", "params": [], "id": 2},
    ]


def test_null_result_is_a_result():
    client = mock_client(rpc_handler(result=None))
    assert asyncio.run(client.call("eth_getTransactionByHash", ["0xab"])) is None


def test_remote_error():
    client = mock_client(
        rpc_handler(error={"code": -32601, "message": "the method foo does not exist"})
    )
    with pytest.raises(RemoteRPCError) as exc:
        asyncio.run(client.call("foo"))
    assert exc.value.code == -32601
    assert exc.value.message == "the method foo does not exist"


def test_reply_without_result_is_malformed():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

    with pytest.raises(TransportError) as exc:
        asyncio.run(mock_client(handler).call("eth_blockNumber"))
    assert exc.value.message == "malformed response"


def test_timeout_aborts_call():
    class SlowTransport:
        url = "http://slow.test"

        async def send(self, payload, timeout):
            await asyncio.sleep(5)

    client = RPCClient(SlowTransport(), timeout_ms=20)
    with pytest.raises(TransportError) as exc:
        asyncio.run(client.call("eth_blockNumber"))
    assert exc.value.message == "timeout"


def test_get_logs_sends_hex_filter():
    calls = []
    client = mock_client(rpc_handler(result=[{"logIndex": "0x0"}], calls=calls))

    logs = asyncio.run(client.get_logs(0, 1000, "abc123"))

    assert logs == [{"logIndex": "0x0"}]
    assert calls[0]["method"] == "eth_getLogs"
    assert calls[0]["params"] == [
        {"fromBlock": "0x0", "toBlock": "0x3e8", "address": "0xabc123"}
    ]


def test_get_logs_decimal_string_fails_before_dispatch():
    calls = []
    client = mock_client(rpc_handler(result=[], calls=calls))

    with pytest.raises(ValidationError):
        asyncio.run(client.get_logs("100", 200))
    assert calls == []


@pytest.mark.parametrize(
    "from_block,to_block",
    [(0, 0), (0, 1000), (17, 4096), (18_000_000, 18_000_500), (2**63, 2**64 - 1)],
)
def test_filter_bounds_round_trip(from_block, to_block):
    log_filter = build_log_filter(from_block, to_block)
    assert log_filter["fromBlock"].startswith("0x")
    assert int(log_filter["fromBlock"], 16) == from_block
    assert int(log_filter["toBlock"], 16) == to_block


def test_zero_address_omitted():
    assert "address" not in build_log_filter(0, 1000, "0x0")
    assert "address" not in build_log_filter(0, 1000, None)


def test_address_prefixed():
    assert build_log_filter(0, 1000, "abc123")["address"] == "0xabc123"
    assert normalize_address("0xABC") == "0xABC"


@pytest.mark.parametrize("bad", ["0xzz", "", "0x", "hello"])
def test_bad_address(bad):
    with pytest.raises(ValidationError):
        normalize_address(bad)


@pytest.mark.parametrize("bad", ["100", -1, True, 1.5, None, "0x"])
def test_bad_block_numbers(bad):
    with pytest.raises(ValidationError):
        to_hex_quantity(bad)


def test_hex_block_string_passes():
    assert to_hex_quantity("0x1F") == "0x1f"


def test_get_logs_rejects_non_list_result():
    client = mock_client(rpc_handler(result=7))

    with pytest.raises(TransportError) as exc:
        asyncio.run(client.get_logs(0, 10))
    assert exc.value.message == "malformed response"


def test_get_logs_null_result_is_empty():
    client = mock_client(rpc_handler(result=None))
    assert asyncio.run(client.get_logs(0, 10)) == []
