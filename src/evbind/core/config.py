"""Manifest models and generation configuration.

The manifest describes an indexer: its networks, storage backends and the
contracts to bind. It is validated with pydantic and may be written in YAML
or JSON. Generated bindings rebuild the same models as literals (see
`contract_information()` in generated code), so these classes double as the
runtime contract description.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from evbind.errors import ManifestError

DEFAULT_POLLING_EVERY = 1000  # ms between polls when a network does not set one


# === Indexing setups ===


class FilterDetails(BaseModel):
    """Index every emitter of `event_name`, optionally narrowed by indexed values."""

    model_config = ConfigDict(frozen=True)

    event_name: str
    indexed_1: list[str] | None = None
    indexed_2: list[str] | None = None
    indexed_3: list[str] | None = None


class FactoryDetails(BaseModel):
    """Index contracts spawned by a factory, discovered through one of its events."""

    model_config = ConfigDict(frozen=True)

    address: str
    event_name: str
    parameter_name: str
    abi: str


@dataclass(frozen=True)
class AddressSetup:
    address: str


IndexingContractSetup = AddressSetup | FilterDetails | FactoryDetails


class ContractDetails(BaseModel):
    """Where a contract lives on one network and which block range to index."""

    model_config = ConfigDict(frozen=True)

    network: str
    address: str | None = None
    filter: FilterDetails | None = None
    factory: FactoryDetails | None = None
    start_block: int | None = None
    end_block: int | None = None
    polling_every: int | None = None

    @model_validator(mode="after")
    def _exactly_one_setup(self) -> ContractDetails:
        chosen = [s for s in (self.address, self.filter, self.factory) if s is not None]
        if len(chosen) != 1:
            raise ValueError(
                f"network '{self.network}' needs exactly one of address, filter or factory"
            )
        return self

    @classmethod
    def new_with_address(
        cls,
        network: str,
        address: str,
        start_block: int | None = None,
        end_block: int | None = None,
        polling_every: int | None = None,
    ) -> ContractDetails:
        return cls(
            network=network,
            address=address,
            start_block=start_block,
            end_block=end_block,
            polling_every=polling_every,
        )

    @classmethod
    def new_with_filter(
        cls,
        network: str,
        filter: FilterDetails,
        start_block: int | None = None,
        end_block: int | None = None,
        polling_every: int | None = None,
    ) -> ContractDetails:
        return cls(
            network=network,
            filter=filter,
            start_block=start_block,
            end_block=end_block,
            polling_every=polling_every,
        )

    @classmethod
    def new_with_factory(
        cls,
        network: str,
        factory: FactoryDetails,
        start_block: int | None = None,
        end_block: int | None = None,
        polling_every: int | None = None,
    ) -> ContractDetails:
        return cls(
            network=network,
            factory=factory,
            start_block=start_block,
            end_block=end_block,
            polling_every=polling_every,
        )

    def indexing_contract_setup(self) -> IndexingContractSetup:
        if self.address is not None:
            return AddressSetup(self.address)
        if self.filter is not None:
            return self.filter
        assert self.factory is not None
        return self.factory


class ContractBindingSpec(BaseModel):
    """One contract entry of the manifest."""

    model_config = ConfigDict(frozen=True)

    name: str
    details: list[ContractDetails] = Field(min_length=1)
    abi: str
    include_events: list[str] | None = None
    reorg_safe_distance: bool = False
    generate_csv: bool = True

    def is_filter(self) -> bool:
        return any(isinstance(d.indexing_contract_setup(), FilterDetails) for d in self.details)

    def filter_event_names(self) -> list[str]:
        return [
            setup.event_name
            for setup in (d.indexing_contract_setup() for d in self.details)
            if isinstance(setup, FilterDetails)
        ]


# === Storage ===


class PostgresDetails(BaseModel):
    enabled: bool = False


class CsvDetails(BaseModel):
    enabled: bool = False
    path: str = "./generated_csv"


class StorageConfig(BaseModel):
    postgres: PostgresDetails | None = None
    csv: CsvDetails | None = None

    def postgres_enabled(self) -> bool:
        return self.postgres is not None and self.postgres.enabled

    def csv_enabled(self) -> bool:
        return self.csv is not None and self.csv.enabled


# === Manifest ===


class NetworkDetails(BaseModel):
    name: str
    chain_id: int
    url: str


class Manifest(BaseModel):
    name: str
    networks: list[NetworkDetails] = []
    storage: StorageConfig = StorageConfig()
    contracts: list[ContractBindingSpec]


def _resolve_abi_paths(manifest: Manifest, base_dir: Path) -> Manifest:
    contracts = []
    for contract in manifest.contracts:
        abi_path = Path(contract.abi)
        if not abi_path.is_absolute():
            contract = contract.model_copy(update={"abi": str(base_dir / abi_path)})
        contracts.append(contract)
    return manifest.model_copy(update={"contracts": contracts})


def load_manifest(path: Path | str) -> Manifest:
    """Load a YAML or JSON manifest; relative ABI paths resolve against its directory."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise ManifestError(f"cannot read manifest '{path}': {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ManifestError(f"cannot parse manifest '{path}': {exc}") from exc

    try:
        manifest = Manifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"invalid manifest '{path}': {exc}") from exc

    return _resolve_abi_paths(manifest, path.parent)


# === Generation ===


@dataclass(frozen=True)
class GenerationConfig:
    """Configuration for a multi-contract generation run."""

    out_dir: Path = Path("./src")
    fail_fast: bool = False  # re-raise schema errors instead of skipping the contract
    write_schema_sql: bool = True
