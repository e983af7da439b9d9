from eth_abi import encode

from monster.decoders.error_decoder import describe_revert


def test_error_string():
    data = "0x08c379a0" + encode(["string"], ["Insufficient balance"]).hex()
    assert describe_revert(data) == "Insufficient balance"


def test_nested_data():
    data = "0x08c379a0" + encode(["string"], ["nope"]).hex()
    assert describe_revert({"data": data}) == "nope"


def test_panic():
    data = "0x4e487b71" + encode(["uint256"], [0x11]).hex()
    assert describe_revert(data) == "panic: arithmetic overflow/underflow"


def test_unknown_selector():
    assert describe_revert("0xdeadbeef") == "custom error 0xdeadbeef"


def test_truncated_payload():
    assert describe_revert("0x08c379a0ff") == "undecodable revert 0x08c379a0"


def test_nothing_to_describe():
    assert describe_revert(None) is None
    assert describe_revert("execution reverted") is None
    assert describe_revert("0x12") is None
    assert describe_revert(42) is None


def test_unknown_selector_with_odd_length_body():
    assert describe_revert("0xdeadbeefabc") == "custom error 0xdeadbeef"


def test_odd_length_error_string_body():
    assert describe_revert("0x08c379a0abc") == "undecodable revert 0x08c379a0"
