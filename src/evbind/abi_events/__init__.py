"""ABI loading, filtering and event signature derivation."""

from evbind.abi_events.loader import (
    filter_abi_items,
    filter_event_names,
    get_abi_items,
    load_abi,
    read_abi_items,
)
from evbind.abi_events.signature import (
    compute_topic_id,
    event_descriptor_from_item,
    extract_event_descriptors,
    format_event_signature,
    format_param_type,
)

__all__ = [
    "compute_topic_id",
    "event_descriptor_from_item",
    "extract_event_descriptors",
    "filter_abi_items",
    "filter_event_names",
    "format_event_signature",
    "format_param_type",
    "get_abi_items",
    "load_abi",
    "read_abi_items",
]
