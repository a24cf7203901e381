"""Flatten event inputs into projections.

Every projection is rendered from the same intermediate form, a list of
`FlatField` leaves produced by `flatten_inputs`. Tuple inputs never appear
themselves, only their leaves, named by the chain of ancestor names:

- column / header names: snake_case segments joined by ``_``
- object paths: attribute names joined by ``.``

Unnamed inputs are named by position (``param_0``, ``param_1``, ...).

A leaf below a composite array (``tuple[]``, ``tuple[2]``) holds one value
per element, so its type gains the composite's array suffix and its object
path becomes a comprehension over the list:

    legs: tuple[] {token: address}  ->  "legs_token" CHAR(42)[]
                                        [item.token for item in legs]

Example
-------
>>> inputs = [AbiInput(name="data", type="tuple", components=[
...     AbiInput(name="amount", type="uint256"),
...     AbiInput(name="sender", type="address"),
... ])]
>>> [p.value for p in generate_abi_name_properties(inputs, ProjectionKind.POSTGRES_WITH_DATA_TYPES)]
['"data_amount" NUMERIC', '"data_sender" CHAR(42)']
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from evbind.core.models import AbiInput, ProjectedField, ProjectionKind
from evbind.generation.type_mapping import solidity_type_to_db_type, solidity_type_to_sql_wrapper
from evbind.helpers import camel_to_snake, python_identifier


@dataclass(frozen=True)
class FlatField:
    """One leaf input with the names of its ancestors.

    `list_segments` holds the indexes in `path` of composite arrays; the
    value at such a segment is a list of records.
    """

    path: tuple[str, ...]
    abi_type: str
    list_segments: tuple[int, ...] = ()


def input_name(event_input: AbiInput, position: int) -> str:
    return event_input.name or f"param_{position}"


def _iter_leaves(
    inputs: Sequence[AbiInput],
    path: tuple[str, ...],
    list_segments: tuple[int, ...],
    suffixes: tuple[str, ...],
) -> Iterator[FlatField]:
    for position, event_input in enumerate(inputs):
        segment_path = (*path, input_name(event_input, position))
        if event_input.components:
            suffix = event_input.type[len("tuple"):]
            if suffix:
                list_segments_below = (*list_segments, len(segment_path) - 1)
                suffixes_below = (suffix, *suffixes)
            else:
                list_segments_below, suffixes_below = list_segments, suffixes
            yield from _iter_leaves(event_input.components, segment_path, list_segments_below, suffixes_below)
        else:
            yield FlatField(
                path=segment_path,
                abi_type=event_input.type + "".join(suffixes),
                list_segments=list_segments,
            )


def flatten_inputs(inputs: Sequence[AbiInput], prefix: str | None = None) -> list[FlatField]:
    return list(_iter_leaves(inputs, (prefix,) if prefix else (), (), ()))


def _object_expression(segments: Sequence[str], list_segments: Sequence[int], depth: int = 0) -> str:
    if not list_segments:
        return ".".join(segments)
    split = list_segments[0]
    item = "item" if depth == 0 else f"item{depth}"
    outer = ".".join(segments[: split + 1])
    inner = _object_expression(
        [item, *segments[split + 1:]],
        [index - split for index in list_segments[1:]],
        depth + 1,
    )
    return f"[{inner} for {item} in {outer}]"


def render_name(flat: FlatField, kind: ProjectionKind) -> str:
    if kind is ProjectionKind.OBJECT:
        segments = [python_identifier(segment) for segment in flat.path]
        return _object_expression(segments, flat.list_segments)
    return kind.separator.join(camel_to_snake(segment) for segment in flat.path)


def render_projected_field(flat: FlatField, kind: ProjectionKind) -> ProjectedField:
    name = render_name(flat, kind)
    match kind:
        case ProjectionKind.POSTGRES_WITH_DATA_TYPES:
            value = f'"{name}" {solidity_type_to_db_type(flat.abi_type)}'
        case ProjectionKind.POSTGRES_COLUMNS_NAMES_ONLY | ProjectionKind.CSV_HEADER_NAMES:
            value = f'"{name}"'
        case ProjectionKind.OBJECT:
            value = name
    return ProjectedField(
        value=value,
        abi_type=flat.abi_type,
        storage_wrapper=solidity_type_to_sql_wrapper(flat.abi_type),
    )


def generate_abi_name_properties(
    inputs: Sequence[AbiInput],
    kind: ProjectionKind,
    prefix: str | None = None,
) -> list[ProjectedField]:
    """Flatten `inputs` and render each leaf for `kind`.

    For `ProjectionKind.OBJECT` a `prefix` such as ``result.event_data``
    roots every path, comprehensions included.
    """
    return [render_projected_field(flat, kind) for flat in flatten_inputs(inputs, prefix)]


def generate_columns_names_only(inputs: Sequence[AbiInput]) -> list[str]:
    return [p.value for p in generate_abi_name_properties(inputs, ProjectionKind.POSTGRES_COLUMNS_NAMES_ONLY)]


def generate_columns_with_data_types(inputs: Sequence[AbiInput]) -> list[str]:
    return [p.value for p in generate_abi_name_properties(inputs, ProjectionKind.POSTGRES_WITH_DATA_TYPES)]


def generate_csv_header_names(inputs: Sequence[AbiInput]) -> list[str]:
    return [p.value for p in generate_abi_name_properties(inputs, ProjectionKind.CSV_HEADER_NAMES)]
