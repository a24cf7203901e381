"""Storage layout helpers.

This package provides:
- CsvDirectorySetup: creates per-contract CSV folders and names event files
"""

from evbind.storage.directories import CsvDirectorySetup

__all__ = [
    "CsvDirectorySetup",
]
