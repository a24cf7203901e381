"""Canonical event signatures and topic ids.

The topic id of an event is ``keccak256("<Name>(<types>)")`` where tuple
types are expanded to ``(<component types>)`` with any array suffix kept,
and types are joined by a bare comma. Anything else produces a routing key
that never matches a real log.
"""

from __future__ import annotations

from collections.abc import Iterable

from eth_utils import keccak

from evbind.core.models import AbiInput, AbiItem, EventDescriptor


def format_param_type(event_input: AbiInput) -> str:
    """Render one input's canonical type (``tuple[]`` -> ``(uint256,address)[]``)."""
    if event_input.is_composite:
        assert event_input.components is not None
        inner = ",".join(format_param_type(c) for c in event_input.components)
        array_suffix = event_input.type[len("tuple"):]
        return f"({inner}){array_suffix}"
    return event_input.type


def format_event_signature(item: AbiItem) -> str:
    """Canonical parameter list of an event, without the name or parentheses."""
    return ",".join(format_param_type(event_input) for event_input in item.inputs)


def compute_topic_id(event_signature: str) -> str:
    """Return ``0x`` + lowercase hex keccak256 of the full event signature."""
    return "0x" + keccak(text=event_signature).hex()


def event_descriptor_from_item(item: AbiItem) -> EventDescriptor:
    signature = format_event_signature(item)
    return EventDescriptor(
        name=item.name,
        inputs=tuple(item.inputs),
        signature=signature,
        topic_id=compute_topic_id(f"{item.name}({signature})"),
        struct_result=f"{item.name}Result",
        struct_data=f"{item.name}Data",
    )


def extract_event_descriptors(items: Iterable[AbiItem]) -> list[EventDescriptor]:
    """One EventDescriptor per event item, in ABI order."""
    return [event_descriptor_from_item(item) for item in items if item.is_event]
