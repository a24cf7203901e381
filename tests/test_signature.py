import re
from pathlib import Path

from eth_utils import keccak

from evbind.abi_events import (
    compute_topic_id,
    extract_event_descriptors,
    format_event_signature,
    format_param_type,
    load_abi,
    read_abi_items,
)
from evbind.core.models import AbiInput

TRANSFER_T0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
APPROVAL_T0 = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"


def test_transfer_signature_and_topic():
    items = load_abi(
        [
            {
                "name": "Transfer",
                "type": "event",
                "inputs": [
                    {"name": "from", "type": "address"},
                    {"name": "to", "type": "address"},
                    {"name": "value", "type": "uint256"},
                ],
            }
        ]
    )
    [descriptor] = extract_event_descriptors(items)
    assert descriptor.full_signature == "Transfer(address,address,uint256)"
    assert descriptor.topic_id == "0x" + keccak(text="Transfer(address,address,uint256)").hex()
    assert descriptor.topic_id == TRANSFER_T0


def test_known_erc20_topics(erc20_abi: Path):
    descriptors = extract_event_descriptors(read_abi_items(erc20_abi))
    assert {d.name: d.topic_id for d in descriptors} == {
        "Transfer": TRANSFER_T0,
        "Approval": APPROVAL_T0,
    }
    assert [(d.struct_result, d.struct_data) for d in descriptors] == [
        ("TransferResult", "TransferData"),
        ("ApprovalResult", "ApprovalData"),
    ]


def test_nested_tuple_signature(orders_abi: Path):
    descriptors = {d.name: d for d in extract_event_descriptors(read_abi_items(orders_abi))}
    assert descriptors["OrderFilled"].signature == (
        "bytes32,(uint256,address,(address,uint16)),uint256[],bytes,bool"
    )


def test_tuple_array_keeps_suffix(orders_abi: Path):
    descriptors = {d.name: d for d in extract_event_descriptors(read_abi_items(orders_abi))}
    assert descriptors["BatchSettled"].full_signature == "BatchSettled(uint64,(address,int256)[],bytes32[])"


def test_fixed_tuple_array_suffix():
    event_input = AbiInput(
        name="pairs",
        type="tuple[2][]",
        components=[AbiInput(name="a", type="uint8"), AbiInput(name="b", type="bool")],
    )
    assert format_param_type(event_input) == "(uint8,bool)[2][]"


def test_event_without_inputs(orders_abi: Path):
    descriptors = {d.name: d for d in extract_event_descriptors(read_abi_items(orders_abi))}
    assert descriptors["Paused"].full_signature == "Paused()"


def test_signature_is_deterministic(orders_abi: Path):
    for item in read_abi_items(orders_abi):
        assert format_event_signature(item) == format_event_signature(item)


def test_topic_id_shape(orders_abi: Path):
    for descriptor in extract_event_descriptors(read_abi_items(orders_abi)):
        assert re.fullmatch(r"0x[0-9a-f]{64}", descriptor.topic_id)


def test_compute_topic_id_matches_keccak():
    assert compute_topic_id("Approval(address,address,uint256)") == APPROVAL_T0
