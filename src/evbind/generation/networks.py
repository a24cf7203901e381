from __future__ import annotations

from evbind.helpers import camel_to_snake


def network_provider_fn_name_by_name(network_name: str) -> str:
    """Name of the generated accessor returning the provider for `network_name`."""
    return f"get_{camel_to_snake(network_name)}_provider"
