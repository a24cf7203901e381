from __future__ import annotations

from .abi_events import compute_topic_id, extract_event_descriptors, get_abi_items, read_abi_items
from .core.config import ContractBindingSpec, GenerationConfig, Manifest, StorageConfig, load_manifest
from .core.models import EventDescriptor, ProjectedField, ProjectionKind
from .errors import CsvDirectoryError, SchemaFormatError, SchemaReadError, UnsupportedNetworkError
from .generation import (
    BindingOptions,
    build_event_sinks,
    generate_abi_name_properties,
    generate_event_bindings,
    generate_event_handlers,
)
from .orchestration import generate_all

__all__ = [
    "read_abi_items",
    "get_abi_items",
    "extract_event_descriptors",
    "compute_topic_id",
    "generate_abi_name_properties",
    "build_event_sinks",
    "generate_event_bindings",
    "generate_event_handlers",
    "generate_all",
    "load_manifest",
    "BindingOptions",
    "ContractBindingSpec",
    "EventDescriptor",
    "GenerationConfig",
    "Manifest",
    "ProjectedField",
    "ProjectionKind",
    "StorageConfig",
    "SchemaReadError",
    "SchemaFormatError",
    "CsvDirectoryError",
    "UnsupportedNetworkError",
]
