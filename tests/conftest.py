from pathlib import Path

import pytest

from evbind.core.config import (
    ContractBindingSpec,
    ContractDetails,
    CsvDetails,
    FactoryDetails,
    FilterDetails,
    PostgresDetails,
    StorageConfig,
)

ABI_DIR = Path(__file__).parent / "abi"

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


@pytest.fixture
def abi_dir() -> Path:
    return ABI_DIR


@pytest.fixture
def erc20_abi() -> Path:
    return ABI_DIR / "erc20_abi.json"


@pytest.fixture
def orders_abi() -> Path:
    return ABI_DIR / "orders_abi.json"


@pytest.fixture
def erc20_contract(erc20_abi: Path) -> ContractBindingSpec:
    return ContractBindingSpec(
        name="ERC20",
        abi=str(erc20_abi),
        details=[
            ContractDetails.new_with_address("ethereum", WETH, start_block=18_000_000),
            ContractDetails.new_with_address("base", WETH, polling_every=500),
        ],
    )


@pytest.fixture
def orders_contract(orders_abi: Path) -> ContractBindingSpec:
    return ContractBindingSpec(
        name="OrderBook",
        abi=str(orders_abi),
        details=[
            ContractDetails.new_with_filter(
                "ethereum",
                FilterDetails(event_name="OrderFilled", indexed_1=["0xabc"]),
            ),
            ContractDetails.new_with_factory(
                "arbitrum",
                FactoryDetails(
                    address="0x1F98431c8aD98523631AE4a59f267346ea31F984",
                    event_name="PoolCreated",
                    parameter_name="pool",
                    abi="./abis/pool.json",
                ),
                start_block=1,
                end_block=2,
            ),
        ],
    )


@pytest.fixture
def no_storage() -> StorageConfig:
    return StorageConfig()


@pytest.fixture
def postgres_storage() -> StorageConfig:
    return StorageConfig(postgres=PostgresDetails(enabled=True))


@pytest.fixture
def csv_storage(tmp_path: Path) -> StorageConfig:
    return StorageConfig(csv=CsvDetails(enabled=True, path=str(tmp_path / "csv")))


@pytest.fixture
def full_storage(tmp_path: Path) -> StorageConfig:
    return StorageConfig(
        postgres=PostgresDetails(enabled=True),
        csv=CsvDetails(enabled=True, path=str(tmp_path / "csv")),
    )
