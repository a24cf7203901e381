"""Generate the default event handlers module for one contract.

Each event gets an ``async def <event>_handler(registry)`` that builds its
``<Name>Event`` with a callback writing every result to the enabled sinks,
and registers it. ``<contract>_handlers(registry)`` registers them all.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from evbind.abi_events.loader import get_abi_items
from evbind.abi_events.signature import extract_event_descriptors
from evbind.core.config import ContractBindingSpec, StorageConfig
from evbind.core.models import EventDescriptor
from evbind.generation.bindings import GENERATED_BANNER, BindingOptions, indent
from evbind.generation.sinks import EventSinks, build_event_sinks, csv_applies
from evbind.helpers import camel_to_snake

logger = logging.getLogger(__name__)


def handler_fn_name(event: EventDescriptor) -> str:
    return f"{camel_to_snake(event.name)}_handler"


def contract_handlers_fn_name(contract: ContractBindingSpec) -> str:
    return f"{camel_to_snake(contract.name)}_handlers"


def generate_sink_writes(sinks: EventSinks) -> list[str]:
    """Statements writing one ``result`` to each enabled sink."""
    lines: list[str] = []
    if sinks.csv is not None:
        lines.extend(
            [
                "await context.csv.append(",
                "    [",
                *(f"        {value}," for value in sinks.csv.row),
                "    ]",
                ")",
            ]
        )
    if sinks.postgres is not None:
        lines.extend(
            [
                "await context.database.execute(",
                f"    {sinks.postgres.insert_sql!r},",
                "    [",
                *(f"        {param}," for param in sinks.postgres.params),
                "    ],",
                ")",
            ]
        )
    return lines


def generate_handler(event: EventDescriptor, sinks: EventSinks) -> list[str]:
    writes = generate_sink_writes(sinks)
    body = ["for result in results:", *indent(writes)] if writes else ["pass"]
    return [
        f"async def {handler_fn_name(event)}(registry: EventCallbackRegistry) -> None:",
        f"    async def handle(results: list[{event.struct_result}], context: EventContext[NoExtensions]) -> None:",
        *indent(body, 2),
        "",
        f"    event = await {event.name}Event.new(handle, no_extensions())",
        "    event.register(registry)",
        "",
        "",
    ]


def generate_handlers_imports(
    contract: ContractBindingSpec,
    storage: StorageConfig,
    events: Sequence[EventDescriptor],
    options: BindingOptions,
) -> list[str]:
    lines = ["from __future__ import annotations", ""]
    if csv_applies(contract, storage) and events:
        lines.extend(["from eth_utils import to_hex, to_normalized_address", ""])

    runtime_names = ["EventCallbackRegistry"]
    if storage.postgres_enabled() and events:
        runtime_names.insert(0, "EthereumSqlTypeWrapper")
    lines.extend([f"from {options.runtime_module} import {', '.join(runtime_names)}", ""])

    bound_names = sorted(
        [f"{e.name}Event" for e in events]
        + [e.struct_result for e in events]
        + ["EventContext", "NoExtensions", "no_extensions"],
        key=lambda n: (n[0].islower(), n),
    )
    lines.extend(
        [
            f"from {options.events_package}.{camel_to_snake(contract.name)} import (",
            *(f"    {name}," for name in bound_names),
            ")",
            "",
            "",
        ]
    )
    return lines


def generate_event_handlers_code(
    indexer_name: str,
    contract: ContractBindingSpec,
    storage: StorageConfig,
    events: Sequence[EventDescriptor],
    options: BindingOptions = BindingOptions(),
) -> str:
    lines = [GENERATED_BANNER, "", *generate_handlers_imports(contract, storage, events, options)]

    for event in events:
        lines.extend(generate_handler(event, build_event_sinks(indexer_name, contract, event, storage)))

    registrations = [f"await {handler_fn_name(e)}(registry)" for e in events] or ["pass"]
    lines.extend(
        [
            f"async def {contract_handlers_fn_name(contract)}(registry: EventCallbackRegistry) -> None:",
            *indent(registrations),
        ]
    )
    return "\n".join(lines).rstrip() + "\n"


def generate_event_handlers(
    indexer_name: str,
    is_filter: bool,
    contract: ContractBindingSpec,
    storage: StorageConfig,
    options: BindingOptions = BindingOptions(),
) -> str:
    """Read the contract's ABI and render its handlers module."""
    events = extract_event_descriptors(get_abi_items(contract, is_filter))
    logger.debug("generating %d handlers for %s", len(events), contract.name)
    return generate_event_handlers_code(indexer_name, contract, storage, events, options)
