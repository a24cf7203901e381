import asyncio

import pytest

from evbind import runtime


@pytest.fixture(autouse=True)
def unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runtime, "_csv_appender_factory", None)
    monkeypatch.setattr(runtime, "_database_client_factory", None)


class NullAppender:
    async def append_header(self, header: list[str]) -> None:
        pass

    async def append(self, row: list[str]) -> None:
        pass


class NullDatabase:
    async def execute(self, query: str, params: list) -> None:
        pass


def test_unconfigured_sinks_raise() -> None:
    with pytest.raises(RuntimeError, match="configure_sinks"):
        runtime.new_csv_appender("out.csv")
    with pytest.raises(RuntimeError, match="configure_sinks"):
        asyncio.run(runtime.new_database_client())


def test_configured_factories_are_used() -> None:
    paths: list[str] = []

    def make_appender(path: str) -> NullAppender:
        paths.append(path)
        return NullAppender()

    async def connect() -> NullDatabase:
        return NullDatabase()

    runtime.configure_sinks(csv_appender=make_appender, database_client=connect)

    assert isinstance(runtime.new_csv_appender("a.csv"), runtime.CsvAppender)
    assert paths == ["a.csv"]
    assert isinstance(asyncio.run(runtime.new_database_client()), runtime.DatabaseClient)


def test_configure_sinks_keeps_other_factory() -> None:
    runtime.configure_sinks(csv_appender=lambda path: NullAppender())
    runtime.configure_sinks(database_client=None)
    assert isinstance(runtime.new_csv_appender("a.csv"), NullAppender)


def test_random_id() -> None:
    ids = {runtime.generate_random_id(10) for _ in range(50)}
    assert all(len(i) == 10 and i.isalnum() for i in ids)
    assert len(ids) > 1


def test_contract_alias_is_binding_spec() -> None:
    from evbind.core.config import ContractBindingSpec

    assert runtime.Contract is ContractBindingSpec
