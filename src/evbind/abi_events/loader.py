"""Read an ABI and narrow it to the items a contract binds."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from evbind.core.config import ContractBindingSpec
from evbind.core.models import AbiItem
from evbind.errors import SchemaFormatError, SchemaReadError

logger = logging.getLogger(__name__)

AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Path | str


def load_abi(abi: AbiSpec) -> list[AbiItem]:
    """Parse an ABI from a file path or already-decoded JSON."""
    if isinstance(abi, (Path, str)):
        source = str(abi)
        try:
            raw = json.loads(Path(abi).read_text())
        except OSError as exc:
            raise SchemaReadError(source, str(exc)) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SchemaFormatError(source, str(exc)) from exc
    else:
        source = "<in-memory>"
        raw = list(abi)

    if not isinstance(raw, list):
        raise SchemaFormatError(source, f"expected a JSON array, got {type(raw).__name__}")

    try:
        return [AbiItem.model_validate(entry) for entry in raw]
    except ValidationError as exc:
        raise SchemaFormatError(source, str(exc)) from exc


def filter_abi_items(items: Iterable[AbiItem], include_events: Sequence[str] | None) -> list[AbiItem]:
    """Keep non-event items plus events named in `include_events` (all when None)."""
    if include_events is None:
        return list(items)
    return [item for item in items if not item.is_event or item.name in include_events]


def read_abi_items(abi: AbiSpec, include_events: Sequence[str] | None = None) -> list[AbiItem]:
    items = filter_abi_items(load_abi(abi), include_events)
    logger.debug("read %d ABI items from %s", len(items), abi if isinstance(abi, (Path, str)) else "<in-memory>")
    return items


def filter_event_names(items: Iterable[AbiItem], event_names: Sequence[str]) -> list[AbiItem]:
    """Keep only events named in `event_names`, dropping every non-event item."""
    return [item for item in items if item.is_event and item.name in event_names]


def get_abi_items(contract: ContractBindingSpec, is_filter: bool) -> list[AbiItem]:
    """Read the contract's ABI and apply its include list and filter setups."""
    items = read_abi_items(contract.abi, contract.include_events)
    if is_filter:
        items = filter_event_names(items, contract.filter_event_names())
    return items
