"""Name conversion helpers shared by every generator."""

from __future__ import annotations

import keyword
import re

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def camel_to_snake(name: str) -> str:
    """Convert camelCase / PascalCase to snake_case.

    Acronyms stay together: ``ERC20Token`` -> ``erc20_token``,
    ``sqrtPriceX96`` -> ``sqrt_price_x96``. Hyphens become underscores so
    network names like ``base-sepolia`` produce valid identifiers.
    """
    return _WORD_BOUNDARY.sub("_", name).replace("-", "_").lower()


def python_identifier(name: str) -> str:
    """Return `name` usable as an attribute (``from`` -> ``from_``)."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name
