"""Names imported by generated bindings.

Generated modules depend on this module only. It defines:
- the records handed to an event registry (`EventInformation` and friends),
- the protocols the excluded collaborators implement (`EventCallbackRegistry`,
  `CsvAppender`, `DatabaseClient`),
- sink factory hooks so generated code can create CSV appenders and database
  clients without knowing their implementation.

Decoding log payloads and dispatching them to callbacks are the registry's
job and are not implemented here.
"""

from __future__ import annotations

import secrets
import string
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from evbind.core.config import AddressSetup
from evbind.core.config import ContractBindingSpec as Contract
from evbind.core.config import ContractDetails, FactoryDetails, FilterDetails, IndexingContractSetup
from evbind.errors import EventDecodeError, UnexpectedEventDataError, UnsupportedNetworkError

__all__ = [
    "AddressSetup",
    "AsyncCsvAppenderFactory",
    "Contract",
    "ContractDetails",
    "ContractInformation",
    "CsvAppender",
    "DatabaseClient",
    "DatabaseClientFactory",
    "EthereumSqlTypeWrapper",
    "EventCallbackRegistry",
    "EventDecodeError",
    "EventInformation",
    "EventResult",
    "FactoryDetails",
    "FilterDetails",
    "IndexingContractSetup",
    "NetworkContract",
    "TxInformation",
    "UnexpectedEventDataError",
    "UnsupportedNetworkError",
    "configure_sinks",
    "generate_random_id",
    "new_csv_appender",
    "new_database_client",
]

Decoder = Callable[[Sequence[bytes], bytes], Any]
Callback = Callable[[list["EventResult"]], Awaitable[None]]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TxInformation:
    address: str
    transaction_hash: bytes
    block_number: int
    block_hash: bytes
    log_index: int | None = None


@dataclass(frozen=True, slots=True)
class EventResult:
    decoded_data: Any
    tx_information: TxInformation


@dataclass(slots=True)
class NetworkContract:
    id: str
    network: str
    provider: Any
    decoder: Decoder
    indexing_contract_setup: IndexingContractSetup
    start_block: int | None
    end_block: int | None
    polling_every: int | None


@dataclass(slots=True)
class ContractInformation:
    name: str
    details: list[NetworkContract]
    abi: str
    reorg_safe_distance: bool


@dataclass(slots=True)
class EventInformation:
    indexer_name: str
    event_name: str
    topic_id: str
    contract: ContractInformation
    callback: Callback


@dataclass(frozen=True, slots=True)
class EthereumSqlTypeWrapper:
    """A value tagged with the encoder the database client should apply."""

    kind: str  # e.g. "Address", "U256", "VecBytes"
    value: Any


def generate_random_id(length: int) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@runtime_checkable
class EventCallbackRegistry(Protocol):
    """Receives one registration per (event, contract) from generated code."""

    def register_event(self, event: EventInformation) -> None:
        ...


@runtime_checkable
class CsvAppender(Protocol):
    async def append_header(self, header: list[str]) -> None:
        ...

    async def append(self, row: list[str]) -> None:
        ...


@runtime_checkable
class DatabaseClient(Protocol):
    async def execute(self, query: str, params: list[Any]) -> None:
        ...


AsyncCsvAppenderFactory = Callable[[str], CsvAppender]
DatabaseClientFactory = Callable[[], Awaitable[DatabaseClient]]

_csv_appender_factory: AsyncCsvAppenderFactory | None = None
_database_client_factory: DatabaseClientFactory | None = None


def configure_sinks(
    *,
    csv_appender: AsyncCsvAppenderFactory | None = None,
    database_client: DatabaseClientFactory | None = None,
) -> None:
    """Install the factories generated code uses to reach its sinks."""
    global _csv_appender_factory, _database_client_factory
    if csv_appender is not None:
        _csv_appender_factory = csv_appender
    if database_client is not None:
        _database_client_factory = database_client


def new_csv_appender(path: str) -> CsvAppender:
    if _csv_appender_factory is None:
        raise RuntimeError("no CSV appender configured; call configure_sinks(csv_appender=...)")
    return _csv_appender_factory(path)


async def new_database_client() -> DatabaseClient:
    if _database_client_factory is None:
        raise RuntimeError("no database client configured; call configure_sinks(database_client=...)")
    return await _database_client_factory()
