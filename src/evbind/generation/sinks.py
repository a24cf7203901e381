"""Postgres and CSV sink assembly for one event.

Both sinks are built from the event's projections:
- `PostgresSink`: parameterized INSERT over the bare-name projection and the
  matching value expressions (typed through `EthereumSqlTypeWrapper`).
- `CsvSink`: header row and per-result value row (all values rendered to str).

Every sink surrounds the event columns with the same fixed columns:
``contract_address`` first, then ``tx_hash``, ``block_number``, ``block_hash``.
Value expressions are Python source evaluated inside the generated handler,
where ``result`` is the `<Name>Result` being written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from evbind.core.config import ContractBindingSpec, StorageConfig
from evbind.core.models import EventDescriptor, ProjectedField, ProjectionKind
from evbind.generation.projection import (
    generate_abi_name_properties,
    generate_columns_names_only,
    generate_columns_with_data_types,
    generate_csv_header_names,
)
from evbind.generation.type_mapping import (
    generate_injected_param,
    indexer_contract_schema_name,
    split_array_type,
)
from evbind.helpers import camel_to_snake
from evbind.storage.directories import CsvDirectorySetup

logger = logging.getLogger(__name__)

EVENT_DATA = "result.event_data"
TX_INFORMATION = "result.tx_information"

LEADING_COLUMN = "contract_address"
TRAILING_COLUMNS = ("tx_hash", "block_number", "block_hash")


@dataclass(frozen=True)
class PostgresSink:
    insert_sql: str
    params: list[str]

    @property
    def placeholder_count(self) -> int:
        return self.insert_sql.count("$")


@dataclass(frozen=True)
class CsvSink:
    csv_path: str
    headers: list[str]
    row: list[str]


@dataclass(frozen=True)
class EventSinks:
    postgres: PostgresSink | None
    csv: CsvSink | None


def csv_applies(contract: ContractBindingSpec, storage: StorageConfig) -> bool:
    return storage.csv_enabled() and contract.generate_csv


def event_table_name(indexer_name: str, contract_name: str, event_name: str) -> str:
    return f"{indexer_contract_schema_name(indexer_name, contract_name)}.{camel_to_snake(event_name)}"


# ---- Postgres ----


def _event_fields(event: EventDescriptor) -> list[ProjectedField]:
    return generate_abi_name_properties(event.inputs, ProjectionKind.OBJECT, prefix=EVENT_DATA)


def _sql_param(field: ProjectedField) -> str:
    expr = field.value
    if field.is_fixed_bytes:
        # bytesN values are widened to plain bytes before encoding; deeper arrays pass as-is
        depth = split_array_type(field.abi_type)[1].count("[")
        if depth == 0:
            expr = f"bytes({expr})"
        elif depth == 1:
            expr = f"[bytes(v) for v in {expr}]"
    if field.storage_wrapper is None:
        return expr
    return f'EthereumSqlTypeWrapper("{field.storage_wrapper}", {expr})'


def build_postgres_sink(indexer_name: str, contract_name: str, event: EventDescriptor) -> PostgresSink:
    columns = [
        LEADING_COLUMN,
        *generate_columns_names_only(event.inputs),
        *(f'"{c}"' for c in TRAILING_COLUMNS),
    ]
    insert_sql = (
        f"INSERT INTO {event_table_name(indexer_name, contract_name, event.name)} "
        f"({', '.join(columns)}) {generate_injected_param(len(columns))}"
    )

    params = [f'EthereumSqlTypeWrapper("Address", {TX_INFORMATION}.address)']
    params.extend(_sql_param(f) for f in _event_fields(event))
    params.extend(
        [
            f'EthereumSqlTypeWrapper("H256", {TX_INFORMATION}.transaction_hash)',
            f'EthereumSqlTypeWrapper("U64", {TX_INFORMATION}.block_number)',
            f'EthereumSqlTypeWrapper("H256", {TX_INFORMATION}.block_hash)',
        ]
    )
    return PostgresSink(insert_sql=insert_sql, params=params)


def build_create_tables_sql(
    indexer_name: str,
    contract_name: str,
    events: list[EventDescriptor],
) -> str:
    """DDL creating the contract schema and one table per event."""
    schema_name = indexer_contract_schema_name(indexer_name, contract_name)
    statements = [f"CREATE SCHEMA IF NOT EXISTS {schema_name};"]
    for event in events:
        columns = [
            "evbind_id SERIAL PRIMARY KEY",
            f"{LEADING_COLUMN} CHAR(42)",
            *generate_columns_with_data_types(event.inputs),
            '"tx_hash" CHAR(66)',
            '"block_number" NUMERIC',
            '"block_hash" CHAR(66)',
        ]
        body = ",\n    ".join(columns)
        statements.append(
            f"CREATE TABLE IF NOT EXISTS {event_table_name(indexer_name, contract_name, event.name)} (\n"
            f"    {body}\n"
            f");"
        )
    return "\n\n".join(statements) + "\n"


# ---- CSV ----


def _csv_scalar(base_type: str, expr: str) -> str:
    if base_type == "address":
        return f"to_normalized_address({expr})"
    if base_type.startswith("bytes"):
        return f"bytes({expr}).hex()"
    return f"str({expr})"


def _csv_value(field: ProjectedField) -> str:
    expr = field.value
    base_type, suffix = split_array_type(field.abi_type)
    if not suffix:
        return _csv_scalar(base_type, expr)
    if suffix == "[]":
        element = _csv_scalar(base_type, "v")
    else:
        element = "str(v)"
    return f'",".join({element} for v in {expr})'


def build_csv_sink(contract: ContractBindingSpec, event: EventDescriptor, storage: StorageConfig) -> CsvSink:
    assert storage.csv is not None
    csv_path = CsvDirectorySetup(storage.csv.path).get_file_path(contract.name, event.name)

    headers = [
        f'"{LEADING_COLUMN}"',
        *generate_csv_header_names(event.inputs),
        *(f'"{c}"' for c in TRAILING_COLUMNS),
    ]

    row = [f"to_normalized_address({TX_INFORMATION}.address)"]
    row.extend(_csv_value(f) for f in _event_fields(event))
    row.extend(
        [
            f"to_hex({TX_INFORMATION}.transaction_hash)",
            f"str({TX_INFORMATION}.block_number)",
            f"to_hex({TX_INFORMATION}.block_hash)",
        ]
    )
    return CsvSink(csv_path=csv_path.as_posix(), headers=headers, row=row)


def build_event_sinks(
    indexer_name: str,
    contract: ContractBindingSpec,
    event: EventDescriptor,
    storage: StorageConfig,
) -> EventSinks:
    """Assemble whichever sinks the storage configuration enables."""
    postgres = build_postgres_sink(indexer_name, contract.name, event) if storage.postgres_enabled() else None
    csv = build_csv_sink(contract, event, storage) if csv_applies(contract, storage) else None
    logger.debug(
        "sinks for %s.%s: postgres=%s csv=%s",
        contract.name,
        event.name,
        postgres is not None,
        csv is not None,
    )
    return EventSinks(postgres=postgres, csv=csv)
