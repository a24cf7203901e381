"""Generate the Python event bindings module for one contract.

The generated module contains, in order:

1. ``<Name>Data`` aliases onto the ABI-generated filter classes and
   ``<Name>Result`` dataclasses pairing decoded data with tx information.
2. ``EventContext`` (database / csv / extensions) and ``NoExtensions``.
3. ``<Contract>EventType``: the dispatch base class. Its ``topic_id``,
   ``event_name``, ``decoder`` and ``register`` methods each match on every
   event variant; ``get_provider`` and ``contract`` branch on every network;
   ``contract_information`` rebuilds the contract description as literals.
4. One ``<Name>Event`` variant per event with its async constructor and
   ``call`` entry point.

All per-event constructs are produced from the same `EventDescriptor` list,
so adding or removing an event regenerates every match at once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from evbind.abi_events.loader import get_abi_items
from evbind.abi_events.signature import extract_event_descriptors
from evbind.core.config import (
    DEFAULT_POLLING_EVERY,
    AddressSetup,
    ContractBindingSpec,
    ContractDetails,
    FactoryDetails,
    FilterDetails,
    StorageConfig,
)
from evbind.core.models import EventDescriptor
from evbind.generation.networks import network_provider_fn_name_by_name
from evbind.generation.sinks import build_csv_sink, csv_applies
from evbind.helpers import camel_to_snake
from evbind.storage.directories import CsvDirectorySetup

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
INDENT = "    "

GENERATED_BANNER = '''"""THIS IS A GENERATED FILE. DO NOT MODIFY MANUALLY.

This file was generated by evbind.
Any manual changes to this file will be overwritten.
"""'''


@dataclass(frozen=True)
class BindingOptions:
    """Where generated code imports its collaborators from."""

    runtime_module: str = "evbind.runtime"
    networks_module: str = "..networks"
    events_package: str = "..events"  # seen from the handlers package
    default_polling_every: int = DEFAULT_POLLING_EVERY


# ---- naming ----


def abigen_contract_name(contract: ContractBindingSpec) -> str:
    return f"{contract.name}Gen"


def abigen_contract_file_name(contract: ContractBindingSpec) -> str:
    return f"{camel_to_snake(contract.name)}_abi_gen"


def generate_event_type_name(name: str) -> str:
    return f"{name}EventType"


def distinct_networks(contract: ContractBindingSpec) -> list[str]:
    return list(dict.fromkeys(d.network for d in contract.details))


# ---- text helpers ----


def indent(lines: Iterable[str], level: int = 1) -> list[str]:
    pad = INDENT * level
    return [f"{pad}{line}" if line else "" for line in lines]


def _match_self(arms: Sequence[tuple[str, list[str]]], fallback: str) -> list[str]:
    """``match self`` over `arms` (pattern, body) followed by an unreachable fallback."""
    lines: list[str] = []
    if arms:
        lines.append("match self:")
        for pattern, body in arms:
            lines.append(f"{INDENT}case {pattern}:")
            lines.extend(indent(body, 2))
    lines.append(f'raise TypeError(f"unknown {fallback} variant: {{type(self).__name__}}")')
    return lines


def _variant(event: EventDescriptor, bind: str | None = None) -> str:
    pattern = f"{event.name}Event()"
    return f"{pattern} as {bind}" if bind else pattern


# ---- records ----


def generate_structs(contract: ContractBindingSpec, events: Sequence[EventDescriptor]) -> list[str]:
    abigen_module = abigen_contract_file_name(contract)
    lines: list[str] = []
    for event in events:
        lines.extend(
            [
                f"{event.struct_data} = {abigen_module}.{event.name}Filter",
                "",
                "",
                "@dataclass",
                f"class {event.struct_result}:",
                f"    event_data: {event.struct_data}",
                "    tx_information: TxInformation",
                "",
                "",
            ]
        )
    return lines


def generate_event_context(storage: StorageConfig, contract: ContractBindingSpec) -> list[str]:
    lines = [
        "@dataclass",
        "class EventContext(Generic[TExtensions]):",
    ]
    if storage.postgres_enabled():
        lines.append("    database: DatabaseClient")
    if csv_applies(contract, storage):
        lines.append("    csv: CsvAppender")
    lines.extend(
        [
            "    extensions: TExtensions",
            "",
            "",
            "class NoExtensions:",
            '    """Placeholder extensions for handlers that need none."""',
            "",
            "",
            "def no_extensions() -> NoExtensions:",
            "    return NoExtensions()",
            "",
            "",
            "def _event_decoder(contract: Any, event_name: str) -> Decoder:",
            "    def decode(topics: Sequence[bytes], data: bytes) -> Any:",
            "        try:",
            "            return contract.decode_event(event_name, topics, data)",
            "        except EventDecodeError as error:",
            "            return error",
            "",
            "    return decode",
            "",
            "",
        ]
    )
    return lines


# ---- dispatch lookups ----


def generate_topic_ids_match_arms(events: Sequence[EventDescriptor]) -> list[tuple[str, list[str]]]:
    return [(_variant(e), [f"return {e.topic_id!r}"]) for e in events]


def generate_event_names_match_arms(events: Sequence[EventDescriptor]) -> list[tuple[str, list[str]]]:
    return [(_variant(e), [f"return {e.name!r}"]) for e in events]


def generate_decoder_match_arms(events: Sequence[EventDescriptor]) -> list[tuple[str, list[str]]]:
    return [(_variant(e), [f"return _event_decoder(contract, {e.name!r})"]) for e in events]


def generate_register_match_arms(events: Sequence[EventDescriptor]) -> list[tuple[str, list[str]]]:
    return [(_variant(e, "event"), ["callback = event.call"]) for e in events]


# ---- contract information ----


def _block_args(detail: ContractDetails, options: BindingOptions) -> list[str]:
    polling_every = detail.polling_every if detail.polling_every is not None else options.default_polling_every
    return [f"{detail.start_block!r},", f"{detail.end_block!r},", f"{polling_every!r},"]


def generate_contract_details_literal(detail: ContractDetails, options: BindingOptions) -> list[str]:
    setup = detail.indexing_contract_setup()
    match setup:
        case AddressSetup():
            head = "ContractDetails.new_with_address("
            setup_lines = [f"{setup.address!r},"]
        case FilterDetails():
            head = "ContractDetails.new_with_filter("
            setup_lines = [
                "FilterDetails(",
                f"    event_name={setup.event_name!r},",
                f"    indexed_1={setup.indexed_1!r},",
                f"    indexed_2={setup.indexed_2!r},",
                f"    indexed_3={setup.indexed_3!r},",
                "),",
            ]
        case FactoryDetails():
            head = "ContractDetails.new_with_factory("
            setup_lines = [
                "FactoryDetails(",
                f"    address={setup.address!r},",
                f"    event_name={setup.event_name!r},",
                f"    parameter_name={setup.parameter_name!r},",
                f"    abi={setup.abi!r},",
                "),",
            ]
    body = [f"{detail.network!r},", *setup_lines, *_block_args(detail, options)]
    return [head, *indent(body), "),"]


def generate_contract_type_fn(contract: ContractBindingSpec, options: BindingOptions) -> list[str]:
    details: list[str] = []
    for detail in contract.details:
        details.extend(generate_contract_details_literal(detail, options))
    return [
        "def contract_information(self) -> Contract:",
        "    return Contract(",
        f"        name={contract.name!r},",
        "        details=[",
        *indent(details, 3),
        "        ],",
        f"        abi={contract.abi!r},",
        f"        include_events={contract.include_events!r},",
        f"        reorg_safe_distance={contract.reorg_safe_distance!r},",
        f"        generate_csv={contract.generate_csv!r},",
        "    )",
    ]


# ---- network accessors ----


def build_get_provider_fn(networks: Sequence[str]) -> list[str]:
    lines = ["def get_provider(self, network: str) -> Any:"]
    for index, network in enumerate(networks):
        keyword = "if" if index == 0 else "elif"
        lines.append(f"    {keyword} network == {network!r}:")
        lines.append(f"        return {network_provider_fn_name_by_name(network)}()")
    lines.append("    else:")
    lines.append("        raise UnsupportedNetworkError(network)")
    return lines


def build_contract_fn(contract: ContractBindingSpec) -> list[str]:
    abigen_module = abigen_contract_file_name(contract)
    abigen_name = abigen_contract_name(contract)
    lines = [f"def contract(self, network: str) -> {abigen_module}.{abigen_name}:"]

    seen: set[str] = set()
    for detail in contract.details:
        if detail.network in seen:
            continue
        seen.add(detail.network)
        setup = detail.indexing_contract_setup()
        match setup:
            case AddressSetup() | FactoryDetails():
                address = setup.address
            case FilterDetails():
                # a filter indexes every emitter, there is no single address
                address = ZERO_ADDRESS
        keyword = "if" if len(seen) == 1 else "elif"
        lines.append(f"    {keyword} network == {detail.network!r}:")
        lines.append(f"        return {abigen_module}.{abigen_name}({address!r}, self.get_provider(network))")
    lines.append("    else:")
    lines.append("        raise UnsupportedNetworkError(network)")
    return lines


# ---- dispatch base class ----


def generate_event_type_class(
    indexer_name: str,
    contract: ContractBindingSpec,
    events: Sequence[EventDescriptor],
    options: BindingOptions,
) -> list[str]:
    event_type_name = generate_event_type_name(contract.name)
    methods: list[list[str]] = [
        [
            "def topic_id(self) -> str:",
            *indent(_match_self(generate_topic_ids_match_arms(events), event_type_name)),
        ],
        [
            "def event_name(self) -> str:",
            *indent(_match_self(generate_event_names_match_arms(events), event_type_name)),
        ],
        generate_contract_type_fn(contract, options),
        build_get_provider_fn(distinct_networks(contract)),
        build_contract_fn(contract),
        [
            "def decoder(self, network: str) -> Decoder:",
            "    contract = self.contract(network)",
            *indent(_match_self(generate_decoder_match_arms(events), event_type_name)),
        ],
        [
            "def register(self, registry: EventCallbackRegistry) -> None:",
            "    topic_id = self.topic_id()",
            "    event_name = self.event_name()",
            "    contract_information = self.contract_information()",
            "    contract = ContractInformation(",
            "        name=contract_information.name,",
            "        details=[",
            "            NetworkContract(",
            "                id=generate_random_id(10),",
            "                network=c.network,",
            "                provider=self.get_provider(c.network),",
            "                decoder=self.decoder(c.network),",
            "                indexing_contract_setup=c.indexing_contract_setup(),",
            "                start_block=c.start_block,",
            "                end_block=c.end_block,",
            "                polling_every=c.polling_every,",
            "            )",
            "            for c in contract_information.details",
            "        ],",
            "        abi=contract_information.abi,",
            "        reorg_safe_distance=contract_information.reorg_safe_distance,",
            "    )",
            "",
            "    callback: Callback",
            *indent(_register_dispatch(events, event_type_name)),
            "",
            "    registry.register_event(",
            "        EventInformation(",
            f"            indexer_name={indexer_name!r},",
            "            event_name=event_name,",
            "            topic_id=topic_id,",
            "            contract=contract,",
            "            callback=callback,",
            "        )",
            "    )",
        ],
    ]

    lines = [f"class {event_type_name}(Generic[TExtensions]):"]
    for index, method in enumerate(methods):
        if index:
            lines.append("")
        lines.extend(indent(method))
    lines.extend(["", ""])
    return lines


def _register_dispatch(events: Sequence[EventDescriptor], event_type_name: str) -> list[str]:
    arms = generate_register_match_arms(events)
    if not arms:
        return [f'raise TypeError(f"unknown {event_type_name} variant: {{type(self).__name__}}")']
    lines = ["match self:"]
    for pattern, body in arms:
        lines.append(f"{INDENT}case {pattern}:")
        lines.extend(indent(body, 2))
    lines.append(f"{INDENT}case _:")
    lines.append(f'{INDENT * 2}raise TypeError(f"unknown {event_type_name} variant: {{type(self).__name__}}")')
    return lines


# ---- event variants ----


def generate_csv_instance(contract: ContractBindingSpec, event: EventDescriptor, storage: StorageConfig) -> list[str]:
    """Create the CSV appender and write the header once, on file creation."""
    if not csv_applies(contract, storage):
        return []
    sink = build_csv_sink(contract, event, storage)
    return [
        f"csv = new_csv_appender({sink.csv_path!r})",
        f"if not os.path.exists({sink.csv_path!r}):",
        f"    await csv.append_header([{', '.join(sink.headers)}])",
        "",
    ]


def generate_event_callback_structs(
    contract: ContractBindingSpec,
    storage: StorageConfig,
    events: Sequence[EventDescriptor],
) -> list[str]:
    event_type_name = generate_event_type_name(contract.name)
    context_args = []
    if storage.postgres_enabled():
        context_args.append("database=await new_database_client(),")
    if csv_applies(contract, storage):
        context_args.append("csv=csv,")
    context_args.append("extensions=extensions,")

    lines: list[str] = []
    for event in events:
        callback_type = f"{event.name}EventCallbackType"
        lines.extend(
            [
                f"{callback_type} = Callable[[list[{event.struct_result}], EventContext[Any]], Awaitable[None]]",
                "",
                "",
                f"class {event.name}Event({event_type_name}[TExtensions]):",
                f"    def __init__(self, callback: {callback_type}, context: EventContext[TExtensions]) -> None:",
                "        self.callback = callback",
                "        self.context = context",
                "",
                "    @classmethod",
                f"    async def new(cls, callback: {callback_type}, extensions: TExtensions) -> {event.name}Event[TExtensions]:",
                *indent(generate_csv_instance(contract, event, storage), 2),
                "        return cls(",
                "            callback,",
                "            EventContext(",
                *indent(context_args, 4),
                "            ),",
                "        )",
                "",
                "    async def call(self, events: list[EventResult]) -> None:",
                "        result = [",
                f"            {event.struct_result}(event_data=item.decoded_data, tx_information=item.tx_information)",
                "            for item in events",
                f"            if isinstance(item.decoded_data, {event.struct_data})",
                "        ]",
                "",
                "        if len(result) == len(events):",
                "            await self.callback(result, self.context)",
                "        else:",
                "            raise UnexpectedEventDataError(",
                f'                "{event.name}Event: Unexpected data type - expected: {event.struct_data}"',
                "            )",
                "",
                "",
            ]
        )
    return lines


# ---- module ----


def generate_imports(contract: ContractBindingSpec, storage: StorageConfig, options: BindingOptions) -> list[str]:
    runtime_names = [
        "Contract",
        "ContractDetails",
        "ContractInformation",
        "EventCallbackRegistry",
        "EventDecodeError",
        "EventInformation",
        "EventResult",
        "FactoryDetails",
        "FilterDetails",
        "NetworkContract",
        "TxInformation",
        "UnexpectedEventDataError",
        "UnsupportedNetworkError",
        "generate_random_id",
    ]
    if storage.postgres_enabled():
        runtime_names.extend(["DatabaseClient", "new_database_client"])
    if csv_applies(contract, storage):
        runtime_names.extend(["CsvAppender", "new_csv_appender"])
    runtime_names.sort(key=lambda n: (n[0].islower(), n))

    provider_fns = [network_provider_fn_name_by_name(n) for n in distinct_networks(contract)]

    lines = [
        "from __future__ import annotations",
        "",
    ]
    if csv_applies(contract, storage):
        lines.append("import os")
    lines.extend(
        [
            "from collections.abc import Awaitable, Callable, Sequence",
            "from dataclasses import dataclass",
            "from typing import Any, Generic, TypeVar",
            "",
            f"from {options.runtime_module} import (",
            *(f"    {name}," for name in runtime_names),
            ")",
            "",
        ]
    )
    if provider_fns:
        lines.extend([f"from {options.networks_module} import (", *(f"    {fn}," for fn in provider_fns), ")", ""])
    lines.extend(
        [
            f"from . import {abigen_contract_file_name(contract)}",
            "",
            'TExtensions = TypeVar("TExtensions")',
            "",
            "Decoder = Callable[[Sequence[bytes], bytes], Any]",
            "Callback = Callable[[list[EventResult]], Awaitable[None]]",
            "",
            "",
        ]
    )
    return lines


def generate_event_bindings_code(
    indexer_name: str,
    contract: ContractBindingSpec,
    storage: StorageConfig,
    events: Sequence[EventDescriptor],
    options: BindingOptions = BindingOptions(),
) -> str:
    """Render the bindings module for an already-resolved event list."""
    lines = [
        GENERATED_BANNER,
        "",
        *generate_imports(contract, storage, options),
        *generate_structs(contract, events),
        *generate_event_context(storage, contract),
        *generate_event_type_class(indexer_name, contract, events, options),
        *generate_event_callback_structs(contract, storage, events),
    ]
    return "\n".join(lines).rstrip() + "\n"


def generate_event_bindings(
    indexer_name: str,
    contract: ContractBindingSpec,
    is_filter: bool,
    storage: StorageConfig,
    options: BindingOptions = BindingOptions(),
) -> str:
    """Read the contract's ABI and render its bindings module.

    Creates the contract's CSV directory when CSV output applies; failure to
    do so raises `CsvDirectoryError`.
    """
    events = extract_event_descriptors(get_abi_items(contract, is_filter))
    logger.debug("binding %d events for %s", len(events), contract.name)

    if csv_applies(contract, storage):
        assert storage.csv is not None
        CsvDirectorySetup(storage.csv.path).setup(contract.name)

    return generate_event_bindings_code(indexer_name, contract, storage, events, options)
