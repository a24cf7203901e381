"""ABI type tag -> Postgres column type / storage wrapper kind.

Wrapper kinds name the encoder the runtime's `EthereumSqlTypeWrapper` uses
for a value (``"U256"``, ``"VecAddress"``, ...). Only a single dynamic
``[]`` suffix has a ``Vec`` wrapper; fixed-size and nested arrays are passed
through unwrapped.
"""

from __future__ import annotations

import re

from evbind.errors import UnsupportedTypeError
from evbind.helpers import camel_to_snake

_ARRAY_SUFFIX = re.compile(r"(\[\d*\])+$")
_INTEGER = re.compile(r"^(u?)int(\d*)$")
_WRAPPER_WIDTHS = (8, 16, 32, 64, 128, 256)


def split_array_type(abi_type: str) -> tuple[str, str]:
    """Split ``uint256[2][]`` into (``uint256``, ``[2][]``)."""
    match = _ARRAY_SUFFIX.search(abi_type)
    if match is None:
        return abi_type, ""
    return abi_type[: match.start()], match.group(0)


def _integer_width(base_type: str) -> tuple[bool, int] | None:
    match = _INTEGER.match(base_type)
    if match is None:
        return None
    unsigned = match.group(1) == "u"
    bits = int(match.group(2)) if match.group(2) else 256
    return unsigned, bits


def _integer_db_type(unsigned: bool, bits: int) -> str:
    # unsigned values need one more bit than the signed Postgres type offers
    effective = bits + 1 if unsigned else bits
    if effective <= 16:
        return "SMALLINT"
    if effective <= 32:
        return "INTEGER"
    if effective <= 64:
        return "BIGINT"
    return "NUMERIC"


def solidity_type_to_db_type(abi_type: str) -> str:
    base_type, suffix = split_array_type(abi_type)

    if base_type == "address":
        db_type = "CHAR(42)"
    elif base_type == "bool":
        db_type = "BOOLEAN"
    elif base_type == "string":
        db_type = "TEXT"
    elif base_type.startswith("bytes"):
        db_type = "BYTEA"
    elif (width := _integer_width(base_type)) is not None:
        db_type = _integer_db_type(*width)
    else:
        raise UnsupportedTypeError(abi_type)

    return f"{db_type}[]" if suffix else db_type


def solidity_type_to_sql_wrapper(abi_type: str) -> str | None:
    base_type, suffix = split_array_type(abi_type)
    if suffix not in ("", "[]"):
        return None

    if base_type == "address":
        kind = "Address"
    elif base_type == "bool":
        kind = "Bool"
    elif base_type == "string":
        kind = "String"
    elif base_type.startswith("bytes"):
        kind = "Bytes"
    elif (width := _integer_width(base_type)) is not None:
        unsigned, bits = width
        rounded = next((w for w in _WRAPPER_WIDTHS if bits <= w), 256)
        kind = f"{'U' if unsigned else 'I'}{rounded}"
    else:
        return None

    return f"Vec{kind}" if suffix else kind


def indexer_contract_schema_name(indexer_name: str, contract_name: str) -> str:
    return f"{camel_to_snake(indexer_name)}_{camel_to_snake(contract_name)}"


def generate_injected_param(count: int) -> str:
    """Positional placeholder list: ``VALUES($1, $2, ..., $count)``."""
    return "VALUES(" + ", ".join(f"${i}" for i in range(1, count + 1)) + ")"
