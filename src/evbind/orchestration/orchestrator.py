"""Multi-contract generation: manifest → bindings + handlers (+ schema DDL).

Output layout under `GenerationConfig.out_dir`:

    <indexer>/
      events/<contract>.py      bindings (dispatch type, records, registration)
      handlers/<contract>.py    default handlers writing to the enabled sinks
      schema.sql                CREATE SCHEMA / TABLE statements (postgres only)

Missing ``__init__.py`` files are created so the output imports as a package;
existing ones are left alone.

A `SchemaReadError`, `SchemaFormatError` or `UnsupportedTypeError` only skips
the contract it comes from (unless `fail_fast` is set); the failure is
reported in the stats.
`CsvDirectoryError` aborts the whole run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from evbind.abi_events.loader import get_abi_items
from evbind.abi_events.signature import extract_event_descriptors
from evbind.core.config import ContractBindingSpec, GenerationConfig, Manifest
from evbind.core.models import EventDescriptor
from evbind.errors import SchemaFormatError, SchemaReadError, UnsupportedTypeError
from evbind.generation.bindings import BindingOptions, generate_event_bindings_code
from evbind.generation.handlers import generate_event_handlers_code
from evbind.generation.sinks import build_create_tables_sql, csv_applies
from evbind.helpers import camel_to_snake
from evbind.storage.directories import CsvDirectorySetup

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ContractArtifacts:
    contract_name: str
    events: list[EventDescriptor]
    bindings_path: Path
    handlers_path: Path
    schema_sql: str | None = None


@dataclass(kw_only=True)
class GenerationStats:
    generated: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    events: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(kw_only=True)
class GenerationOutput:
    """High-level output of a generation run."""
    stats: GenerationStats
    root_dir: Path
    artifacts: list[ContractArtifacts]
    schema_sql_path: Path | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    logger.info("wrote %s", path)


def indexer_root(manifest: Manifest, config: GenerationConfig) -> Path:
    return config.out_dir / camel_to_snake(manifest.name)


def _ensure_package(directory: Path) -> None:
    init = directory / "__init__.py"
    if not init.exists():
        _write_text(init, "")


# ---------------------------------------------------------------------------
# Use cases
# ---------------------------------------------------------------------------


def generate_contract(
    manifest: Manifest,
    contract: ContractBindingSpec,
    config: GenerationConfig,
    options: BindingOptions = BindingOptions(),
) -> ContractArtifacts:
    """Generate and write the bindings and handlers for one contract."""
    storage = manifest.storage
    events = extract_event_descriptors(get_abi_items(contract, contract.is_filter()))
    logger.debug("%s: %d events", contract.name, len(events))

    # DDL first: an unmappable column type skips the contract before anything is written
    schema_sql = None
    if storage.postgres_enabled():
        schema_sql = build_create_tables_sql(manifest.name, contract.name, events)

    if csv_applies(contract, storage):
        assert storage.csv is not None
        CsvDirectorySetup(storage.csv.path).setup(contract.name)

    root = indexer_root(manifest, config)
    module_name = f"{camel_to_snake(contract.name)}.py"
    bindings_path = root / "events" / module_name
    handlers_path = root / "handlers" / module_name

    _write_text(
        bindings_path,
        generate_event_bindings_code(manifest.name, contract, storage, events, options),
    )
    _write_text(
        handlers_path,
        generate_event_handlers_code(manifest.name, contract, storage, events, options),
    )
    for package_dir in (root, bindings_path.parent, handlers_path.parent):
        _ensure_package(package_dir)

    return ContractArtifacts(
        contract_name=contract.name,
        events=events,
        bindings_path=bindings_path,
        handlers_path=handlers_path,
        schema_sql=schema_sql,
    )


def generate_all(
    manifest: Manifest,
    config: GenerationConfig = GenerationConfig(),
    options: BindingOptions = BindingOptions(),
) -> GenerationOutput:
    """Generate every contract of the manifest.

    Schema errors and unmappable column types are recorded per contract and
    the run continues, unless `config.fail_fast` is set. Any other error
    propagates.
    """
    stats = GenerationStats()
    artifacts: list[ContractArtifacts] = []

    for contract in manifest.contracts:
        try:
            artifact = generate_contract(manifest, contract, config, options)
        except (SchemaReadError, SchemaFormatError, UnsupportedTypeError) as exc:
            if config.fail_fast:
                raise
            logger.error("skipping contract %s: %s", contract.name, exc)
            stats.failed[contract.name] = str(exc)
            continue
        artifacts.append(artifact)
        stats.generated.append(contract.name)
        stats.events += len(artifact.events)

    root = indexer_root(manifest, config)
    schema_sql_path = None
    schema_parts = [a.schema_sql for a in artifacts if a.schema_sql]
    if config.write_schema_sql and schema_parts:
        schema_sql_path = root / "schema.sql"
        _write_text(schema_sql_path, "\n".join(schema_parts))

    return GenerationOutput(
        stats=stats,
        root_dir=root,
        artifacts=artifacts,
        schema_sql_path=schema_sql_path,
    )
