import ast

import pytest

from evbind.abi_events import extract_event_descriptors, load_abi
from evbind.core.config import ContractBindingSpec, StorageConfig
from evbind.generation.bindings import BindingOptions
from evbind.generation.handlers import (
    contract_handlers_fn_name,
    generate_event_handlers,
    generate_event_handlers_code,
)


def _functions(code: str) -> dict[str, ast.AsyncFunctionDef]:
    tree = ast.parse(code)
    return {n.name: n for n in tree.body if isinstance(n, ast.AsyncFunctionDef)}


@pytest.mark.parametrize("contract_fixture", ["erc20_contract", "orders_contract"])
@pytest.mark.parametrize("storage_fixture", ["no_storage", "postgres_storage", "csv_storage", "full_storage"])
def test_handlers_module_parses(request, contract_fixture: str, storage_fixture: str):
    contract = request.getfixturevalue(contract_fixture)
    storage = request.getfixturevalue(storage_fixture)
    ast.parse(generate_event_handlers("MyIndexer", contract.is_filter(), contract, storage))


def test_one_handler_per_event(erc20_contract: ContractBindingSpec, full_storage: StorageConfig):
    functions = _functions(generate_event_handlers("MyIndexer", False, erc20_contract, full_storage))
    assert set(functions) == {"transfer_handler", "approval_handler", "erc20_handlers"}

    registrations = ast.unparse(functions["erc20_handlers"])
    assert "await transfer_handler(registry)" in registrations
    assert "await approval_handler(registry)" in registrations


def test_handler_writes_to_enabled_sinks(erc20_contract: ContractBindingSpec, full_storage: StorageConfig):
    code = generate_event_handlers("MyIndexer", False, erc20_contract, full_storage)
    assert "await context.csv.append(" in code
    assert "await context.database.execute(" in code
    assert "'INSERT INTO my_indexer_erc20.transfer (" in code
    assert "from eth_utils import to_hex, to_normalized_address" in code
    assert "from evbind.runtime import EthereumSqlTypeWrapper, EventCallbackRegistry" in code


def test_handler_without_storage_does_nothing(erc20_contract: ContractBindingSpec, no_storage: StorageConfig):
    code = generate_event_handlers("MyIndexer", False, erc20_contract, no_storage)
    assert "context.csv" not in code
    assert "context.database" not in code
    assert "eth_utils" not in code
    handle = next(
        n
        for n in ast.walk(_functions(code)["transfer_handler"])
        if isinstance(n, ast.AsyncFunctionDef) and n.name == "handle"
    )
    assert isinstance(handle.body[0], ast.Pass)


def test_handlers_import_bindings(orders_contract: ContractBindingSpec, postgres_storage: StorageConfig):
    code = generate_event_handlers("MyIndexer", True, orders_contract, postgres_storage)
    imports = [n for n in ast.parse(code).body if isinstance(n, ast.ImportFrom)]
    bindings_import = next(n for n in imports if n.module == "events.order_book")
    assert bindings_import.level == 2
    assert {a.name for a in bindings_import.names} == {
        "EventContext",
        "NoExtensions",
        "OrderFilledEvent",
        "OrderFilledResult",
        "no_extensions",
    }


def test_events_package_is_configurable(erc20_contract: ContractBindingSpec, no_storage: StorageConfig):
    options = BindingOptions(events_package="my_app.bindings")
    code = generate_event_handlers("Idx", False, erc20_contract, no_storage, options)
    assert "from my_app.bindings.erc20 import (" in code


def test_no_events_registers_nothing(erc20_contract: ContractBindingSpec, full_storage: StorageConfig):
    code = generate_event_handlers_code("Idx", erc20_contract, full_storage, [])
    functions = _functions(code)
    assert list(functions) == [contract_handlers_fn_name(erc20_contract)]
    assert isinstance(functions["erc20_handlers"].body[0], ast.Pass)


def test_unnamed_inputs_compile(erc20_contract: ContractBindingSpec, full_storage: StorageConfig):
    events = extract_event_descriptors(
        load_abi(
            [
                {
                    "type": "event",
                    "name": "Swap",
                    "inputs": [
                        {"name": "", "type": "address", "indexed": True},
                        {"name": "", "type": "uint256"},
                    ],
                }
            ]
        )
    )
    code = generate_event_handlers_code("Idx", erc20_contract, full_storage, events)
    ast.parse(code)
    assert "result.event_data.param_0" in code
    assert "result.event_data.param_1" in code
    assert '"param_0", "param_1"' in code
    assert "result.event_data.)" not in code


def test_composite_array_handler_compiles(orders_contract: ContractBindingSpec, full_storage: StorageConfig):
    code = generate_event_handlers("MyIndexer", False, orders_contract, full_storage)
    ast.parse(code)
    assert "[item.token for item in result.event_data.legs]" in code
