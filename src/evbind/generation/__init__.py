"""Code generation from ABI events.

This package provides:
- Type mapping (ABI type -> Postgres column type / storage wrapper kind)
- Projection engine flattening event inputs into column, header and path forms
- Sink assembly (parameterized INSERT, CSV header / row, table DDL)
- Bindings and handlers module generators
"""

from evbind.generation.bindings import BindingOptions, generate_event_bindings, generate_event_bindings_code
from evbind.generation.handlers import generate_event_handlers, generate_event_handlers_code
from evbind.generation.networks import network_provider_fn_name_by_name
from evbind.generation.projection import (
    FlatField,
    flatten_inputs,
    generate_abi_name_properties,
    generate_columns_names_only,
    generate_columns_with_data_types,
    generate_csv_header_names,
)
from evbind.generation.sinks import (
    CsvSink,
    EventSinks,
    PostgresSink,
    build_create_tables_sql,
    build_csv_sink,
    build_event_sinks,
    build_postgres_sink,
)
from evbind.generation.type_mapping import (
    generate_injected_param,
    indexer_contract_schema_name,
    solidity_type_to_db_type,
    solidity_type_to_sql_wrapper,
)

__all__ = [
    "BindingOptions",
    "CsvSink",
    "EventSinks",
    "FlatField",
    "PostgresSink",
    "build_create_tables_sql",
    "build_csv_sink",
    "build_event_sinks",
    "build_postgres_sink",
    "flatten_inputs",
    "generate_abi_name_properties",
    "generate_columns_names_only",
    "generate_columns_with_data_types",
    "generate_csv_header_names",
    "generate_event_bindings",
    "generate_event_bindings_code",
    "generate_event_handlers",
    "generate_event_handlers_code",
    "generate_injected_param",
    "indexer_contract_schema_name",
    "network_provider_fn_name_by_name",
    "solidity_type_to_db_type",
    "solidity_type_to_sql_wrapper",
]
