"""Orchestration of a full generation run over a manifest.

This package provides:
- generate_all: generate every contract, isolating per-contract schema errors
- generate_contract: generate and write one contract's modules
"""

from evbind.orchestration.orchestrator import (
    ContractArtifacts,
    GenerationOutput,
    GenerationStats,
    generate_all,
    generate_contract,
)

__all__ = [
    "ContractArtifacts",
    "GenerationOutput",
    "GenerationStats",
    "generate_all",
    "generate_contract",
]
