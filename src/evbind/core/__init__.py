"""Core data models and configuration.

This package provides:
- ABI models (AbiInput, AbiItem) and derived EventDescriptor / ProjectedField
- Manifest models (ContractBindingSpec, ContractDetails, StorageConfig, ...)
- Generation configuration (GenerationConfig)
"""

from evbind.core.config import (
    AddressSetup,
    ContractBindingSpec,
    ContractDetails,
    CsvDetails,
    FactoryDetails,
    FilterDetails,
    GenerationConfig,
    Manifest,
    PostgresDetails,
    StorageConfig,
    load_manifest,
)
from evbind.core.models import AbiInput, AbiItem, EventDescriptor, ProjectedField, ProjectionKind

__all__ = [
    "AbiInput",
    "AbiItem",
    "AddressSetup",
    "ContractBindingSpec",
    "ContractDetails",
    "CsvDetails",
    "EventDescriptor",
    "FactoryDetails",
    "FilterDetails",
    "GenerationConfig",
    "Manifest",
    "PostgresDetails",
    "ProjectedField",
    "ProjectionKind",
    "StorageConfig",
    "load_manifest",
]
