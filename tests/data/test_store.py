import pytest

from listiq.data.store import MemoryStateStore, SqlStateStore, StateStore


@pytest.fixture
def sql_store(tmp_path):
    return SqlStateStore(f"sqlite:///{tmp_path / 'nested' / 'state.db'}")


class TestSqlStateStore:
    def test_missing_key(self, sql_store):
        assert sql_store.get("listiq-favorites") is None

    def test_set_and_get(self, sql_store):
        sql_store.set("listiq-favorites", '["a", "b"]')
        assert sql_store.get("listiq-favorites") == '["a", "b"]'

    def test_overwrite(self, sql_store):
        sql_store.set("listiq-sort-preference", '"price-asc"')
        sql_store.set("listiq-sort-preference", '"taxes-desc"')
        assert sql_store.get("listiq-sort-preference") == '"taxes-desc"'

    def test_persists_across_instances(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'state.db'}"
        SqlStateStore(url).set("k", "v")
        assert SqlStateStore(url).get("k") == "v"

    def test_satisfies_protocol(self, sql_store):
        assert isinstance(sql_store, StateStore)


class TestMemoryStateStore:
    def test_initial_data(self):
        store = MemoryStateStore({"k": "v"})
        assert store.get("k") == "v"
        assert isinstance(store, StateStore)
