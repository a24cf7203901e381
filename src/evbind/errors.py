"""Error taxonomy for binding generation.

Generation-time errors derive from `EvbindError`:
- `SchemaReadError` / `SchemaFormatError`: one contract's ABI could not be used.
  The orchestrator can skip that contract and continue.
- `CsvDirectoryError`: the flat-file output directory could not be created.
  Always aborts the run.
- `UnsupportedTypeError`: an ABI type tag has no storage mapping.
- `ManifestError`: the manifest itself is unreadable or invalid.

Errors raised by generated code at run time live next to it in
`evbind.runtime` and are re-exported here for convenience.
"""

from __future__ import annotations


class EvbindError(Exception):
    """Base class for every error raised while generating bindings."""


class SchemaReadError(EvbindError):
    """The ABI source could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"cannot read ABI '{source}': {reason}")
        self.source = source
        self.reason = reason


class SchemaFormatError(EvbindError):
    """The ABI source was read but is not a structurally valid ABI."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"malformed ABI '{source}': {reason}")
        self.source = source
        self.reason = reason


class CsvDirectoryError(EvbindError):
    """The CSV output directory for a contract could not be created."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to create directory '{path}': {reason}")
        self.path = path


class UnsupportedTypeError(EvbindError, ValueError):
    """An ABI type tag has no storage column mapping."""

    def __init__(self, abi_type: str) -> None:
        super().__init__(f"unsupported ABI type: {abi_type}")
        self.abi_type = abi_type


class ManifestError(EvbindError):
    """The indexer manifest could not be loaded."""


class UnsupportedNetworkError(RuntimeError):
    """Raised by generated code when asked for a network it was not generated for."""

    def __init__(self, network: str) -> None:
        super().__init__(f"Network not supported: {network}")
        self.network = network


class UnexpectedEventDataError(RuntimeError):
    """Raised by generated code when a decoded payload has the wrong record type."""


class EventDecodeError(ValueError):
    """A log could not be decoded into its event record."""
