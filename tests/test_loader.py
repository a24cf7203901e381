from pathlib import Path

import pytest

from evbind.abi_events import extract_event_descriptors, get_abi_items, load_abi, read_abi_items
from evbind.core.config import ContractBindingSpec, ContractDetails, FilterDetails
from evbind.errors import SchemaFormatError, SchemaReadError


def test_read_abi_items_unfiltered(erc20_abi: Path):
    items = read_abi_items(erc20_abi)
    assert [item.type for item in items] == ["constructor", "function", "event", "event"]


def test_allow_list_keeps_non_events(erc20_abi: Path):
    items = read_abi_items(erc20_abi, ["Transfer"])
    assert [(item.type, item.name) for item in items] == [
        ("constructor", ""),
        ("function", "transfer"),
        ("event", "Transfer"),
    ]


def test_allow_list_yields_one_descriptor(erc20_abi: Path):
    descriptors = extract_event_descriptors(read_abi_items(erc20_abi, ["Transfer"]))
    assert [d.name for d in descriptors] == ["Transfer"]


def test_in_memory_abi():
    items = load_abi([{"type": "event", "name": "Ping", "inputs": []}])
    assert items[0].is_event
    assert items[0].inputs == []


def test_missing_file_is_read_error(tmp_path: Path):
    with pytest.raises(SchemaReadError) as exc_info:
        read_abi_items(tmp_path / "missing.json")
    assert isinstance(exc_info.value.__cause__, OSError)


def test_truncated_json_is_format_error(abi_dir: Path):
    with pytest.raises(SchemaFormatError):
        read_abi_items(abi_dir / "truncated.json")


def test_non_utf8_file_is_format_error(tmp_path: Path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'[{"type":"event","name":"X\xff","inputs":[]}]')
    with pytest.raises(SchemaFormatError) as exc_info:
        read_abi_items(path)
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_non_list_document_is_format_error(abi_dir: Path):
    with pytest.raises(SchemaFormatError, match="expected a JSON array"):
        read_abi_items(abi_dir / "not_a_list.json")


def test_input_without_type_is_format_error():
    with pytest.raises(SchemaFormatError):
        load_abi([{"type": "event", "name": "Bad", "inputs": [{"name": "x"}]}])


def test_tuple_without_components_is_format_error():
    with pytest.raises(SchemaFormatError):
        load_abi([{"type": "event", "name": "Bad", "inputs": [{"name": "x", "type": "tuple"}]}])


def test_filter_stage_drops_non_events_and_other_events(erc20_abi: Path):
    contract = ContractBindingSpec(
        name="ERC20",
        abi=str(erc20_abi),
        details=[ContractDetails.new_with_filter("ethereum", FilterDetails(event_name="Approval"))],
    )
    items = get_abi_items(contract, is_filter=True)
    assert [(item.type, item.name) for item in items] == [("event", "Approval")]


def test_filter_stage_skipped_when_not_filter(erc20_contract: ContractBindingSpec):
    items = get_abi_items(erc20_contract, is_filter=False)
    assert len(items) == 4
