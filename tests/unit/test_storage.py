"""
Unit tests for KeyStore adapters.
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from sitekeeper.storage import InMemoryKeyStore, KeyStore, KeyStoreError, SqlOptionStore


class TestInMemoryKeyStore:
    """Test cases for InMemoryKeyStore."""

    def test_get_default(self, memory_store):
        assert memory_store.get("missing") is None
        assert memory_store.get("missing", {}) == {}

    def test_set_replaces_whole_value(self, memory_store):
        memory_store.set("option", {"a": 1, "b": 2})
        memory_store.set("option", {"c": 3})

        assert memory_store.get("option") == {"c": 3}

    def test_values_are_copied(self, memory_store):
        value = {"a": {"nested": 1}}
        memory_store.set("option", value)
        value["a"]["nested"] = 2

        fetched = memory_store.get("option")
        fetched["a"]["nested"] = 3

        assert memory_store.get("option") == {"a": {"nested": 1}}

    def test_initial_values(self):
        store = InMemoryKeyStore({"option": [1, 2]})

        assert "option" in store
        assert store.get("option") == [1, 2]

    def test_satisfies_protocol(self, memory_store):
        assert isinstance(memory_store, KeyStore)


class TestSqlOptionStore:
    """Test cases for SqlOptionStore."""

    def test_get_default(self, sql_store):
        assert sql_store.get("missing", {}) == {}

    def test_round_trip(self, sql_store):
        value = {"abc": {"hashed_key": "$2b$04$digest", "created_at": 1_700_000_000}}

        assert sql_store.set("recovery_keys", value) is True
        assert sql_store.get("recovery_keys") == value

    def test_set_replaces_whole_value(self, sql_store):
        sql_store.set("recovery_keys", {"a": {"created_at": 1}, "b": {"created_at": 2}})
        sql_store.set("recovery_keys", {"b": {"created_at": 2}})

        assert sql_store.get("recovery_keys") == {"b": {"created_at": 2}}

    def test_names_are_independent(self, sql_store):
        sql_store.set("one", {"x": 1})
        sql_store.set("two", {"y": 2})

        assert sql_store.get("one") == {"x": 1}
        assert sql_store.get("two") == {"y": 2}

    def test_returned_value_is_a_copy(self, sql_store):
        sql_store.set("option", {"a": 1})
        fetched = sql_store.get("option")
        fetched["a"] = 2

        assert sql_store.get("option") == {"a": 1}

    def test_persists_across_instances(self, temp_dir):
        url = f"sqlite:///{temp_dir / 'options.db'}"
        first = SqlOptionStore(url)
        first.set("option", {"persisted": True})
        first.dispose()

        second = SqlOptionStore(url)
        try:
            assert second.get("option") == {"persisted": True}
        finally:
            second.dispose()

    def test_write_failure_returns_false(self, sql_store, caplog):
        error = OperationalError("UPDATE options", {}, Exception("disk I/O error"))
        with patch.object(sql_store, "_session_factory") as factory:
            factory.begin.side_effect = error

            assert sql_store.set("option", {"a": 1}) is False
        assert "Failed to write option 'option'" in caplog.text

    def test_read_failure_raises(self, sql_store):
        error = OperationalError("SELECT options", {}, Exception("database is locked"))
        with patch.object(sql_store, "_session_factory", side_effect=error):
            with pytest.raises(KeyStoreError) as exc_info:
                sql_store.get("option")
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_satisfies_protocol(self, sql_store):
        assert isinstance(sql_store, KeyStore)
