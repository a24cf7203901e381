"""Core data models for ABI-driven binding generation.

This module defines:
- `AbiInput` / `AbiItem`: pydantic models for raw ABI JSON entries.
- `EventDescriptor`: one event with its canonical signature and topic id.
- `ProjectionKind` / `ProjectedField`: flattened, rendered event fields.

Design notes
------------
- Composite (``tuple``) inputs always carry ``components``; leaves never do.
- `EventDescriptor` and `ProjectedField` are immutable; each generation pass
  derives them again from the ABI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, model_validator

_FIXED_BYTES = re.compile(r"^bytes\d+(\[\d*\])*$")


# === ABI JSON ===


class AbiInput(BaseModel):
    name: str
    type: str
    indexed: bool | None = None
    internalType: str | None = None
    components: list[AbiInput] | None = None

    @property
    def is_composite(self) -> bool:
        return self.type.startswith("tuple")

    @model_validator(mode="after")
    def _check_components(self) -> AbiInput:
        if self.is_composite and not self.components:
            raise ValueError(f"tuple input '{self.name}' has no components")
        if not self.is_composite and self.components:
            raise ValueError(f"input '{self.name}' of type {self.type} cannot have components")
        return self


AbiInput.model_rebuild()


class AbiItem(BaseModel):
    type: str = ""
    name: str = ""
    inputs: list[AbiInput] = []
    anonymous: bool = False

    @property
    def is_event(self) -> bool:
        return self.type == "event"


# === Events ===


@dataclass(frozen=True)
class EventDescriptor:
    """One ABI event ready for code generation."""

    name: str
    inputs: tuple[AbiInput, ...]
    signature: str  # canonical parameter list, e.g. "address,address,uint256"
    topic_id: str  # 0x-prefixed keccak256 of `full_signature`
    struct_result: str
    struct_data: str

    @property
    def full_signature(self) -> str:
        return f"{self.name}({self.signature})"


# === Projections ===


class ProjectionKind(str, Enum):
    POSTGRES_WITH_DATA_TYPES = "postgres_with_data_types"
    POSTGRES_COLUMNS_NAMES_ONLY = "postgres_columns_names_only"
    CSV_HEADER_NAMES = "csv_header_names"
    OBJECT = "object"

    @property
    def separator(self) -> str:
        return "." if self is ProjectionKind.OBJECT else "_"


@dataclass(frozen=True)
class ProjectedField:
    """One flattened leaf field rendered for a projection kind."""

    value: str
    abi_type: str
    storage_wrapper: str | None  # kind name for EthereumSqlTypeWrapper, None if unmapped

    @property
    def is_fixed_bytes(self) -> bool:
        """True for ``bytesN`` (and arrays of it) which need widening to ``bytes``."""
        return bool(_FIXED_BYTES.match(self.abi_type))
