from __future__ import annotations

import logging
from pathlib import Path

from evbind.errors import CsvDirectoryError

logger = logging.getLogger(__name__)


class CsvDirectorySetup:
    """
    Per-contract CSV layout.

    Layout: <csv_path>/<contract_name>/
              <contract_name>-<event_name>.csv   (file name lowercased)
    """

    def __init__(self, csv_path: Path | str) -> None:
        self.csv_path = Path(csv_path)

    def contract_dir(self, contract_name: str) -> Path:
        return self.csv_path / contract_name

    def setup(self, contract_name: str) -> Path:
        """Create the contract directory (existing directories are fine)."""
        folder = self.contract_dir(contract_name)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CsvDirectoryError(str(folder), str(exc)) from exc
        logger.debug("csv directory ready: %s", folder)
        return folder

    def get_file_name(self, contract_name: str, event_name: str) -> str:
        return f"{contract_name}-{event_name}.csv".lower()

    def get_file_path(self, contract_name: str, event_name: str) -> Path:
        return self.contract_dir(contract_name) / self.get_file_name(contract_name, event_name)
