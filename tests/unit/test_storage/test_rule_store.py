"""Unit tests for the serialized rule store."""

import asyncio
import json
import logging

import pytest

from merchant_rules.core.exceptions import PersistenceError
from merchant_rules.repositories.rule_store import DEFAULT_STORAGE_KEY, RuleStore
from merchant_rules.storage.memory import InMemoryKeyValueStore

from tests.helpers.storage import FlakyKeyValueStore


class TestUpsert:
    """Insert and replace semantics."""

    @pytest.mark.asyncio
    async def test_upsert_inserts_rule(self, rule_store: RuleStore, kv_store: InMemoryKeyValueStore):
        rule = await rule_store.upsert("swiggy", "food", raw_pattern="Swiggy")

        assert rule.key == "swiggy"
        assert rule.category == "food"
        assert rule.raw_pattern == "Swiggy"
        assert rule.created_at == rule.updated_at

        stored = json.loads(kv_store.snapshot()[DEFAULT_STORAGE_KEY])
        assert [r["key"] for r in stored] == ["swiggy"]

    @pytest.mark.asyncio
    async def test_upsert_same_key_replaces_category(self, rule_store: RuleStore):
        first = await rule_store.upsert("swiggy", "food", raw_pattern="Swiggy")
        second = await rule_store.upsert("swiggy", "entertainment", raw_pattern="SWIGGY")

        rules = await rule_store.all()
        assert len(rules) == 1
        assert rules[0].category == "entertainment"
        assert rules[0].raw_pattern == "SWIGGY"
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at

    @pytest.mark.asyncio
    async def test_upsert_keeps_other_rules_in_order(self, rule_store: RuleStore):
        await rule_store.upsert("swiggy", "food")
        await rule_store.upsert("tea stall", "food")
        await rule_store.upsert("swiggy", "misc")

        assert [r.key for r in await rule_store.all()] == ["swiggy", "tea stall"]

    @pytest.mark.asyncio
    async def test_get_by_key(self, rule_store: RuleStore):
        await rule_store.upsert("tea stall", "food")

        assert (await rule_store.get("tea stall")).category == "food"
        assert await rule_store.get("missing") is None


class TestDeleteAndClear:
    """Management operations."""

    @pytest.mark.asyncio
    async def test_delete_existing_rule(self, rule_store: RuleStore):
        await rule_store.upsert("swiggy", "food")
        await rule_store.upsert("tea stall", "food")

        assert await rule_store.delete("swiggy") is True
        assert [r.key for r in await rule_store.all()] == ["tea stall"]

    @pytest.mark.asyncio
    async def test_delete_missing_rule_does_not_write(self):
        storage = FlakyKeyValueStore()
        store = RuleStore(storage)
        await store.upsert("swiggy", "food")

        assert await store.delete("zomato") is False
        assert storage.writes == 1

    @pytest.mark.asyncio
    async def test_clear(self, rule_store: RuleStore):
        await rule_store.upsert("swiggy", "food")
        await rule_store.clear()

        assert await rule_store.all() == []


class TestCorruptData:
    """Corrupt state reads as "no rules learned yet"."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blob", ["not json", '{"key": "swiggy"}', '[{"key": "swiggy"}]'])
    async def test_corrupt_blob_reads_as_empty(self, blob: str, caplog):
        store = RuleStore(InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: blob}))

        with caplog.at_level(logging.WARNING):
            assert await store.all() == []

        assert "corrupt" in caplog.text

    @pytest.mark.asyncio
    async def test_upsert_replaces_corrupt_blob(self):
        storage = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: "not json"})
        store = RuleStore(storage)

        await store.upsert("swiggy", "food")

        assert [r.key for r in await store.all()] == ["swiggy"]

    @pytest.mark.asyncio
    async def test_missing_blob_is_empty(self, rule_store: RuleStore):
        assert await rule_store.all() == []


class TestPersistenceFailures:
    """Storage failures abort mutations without partial writes."""

    @pytest.mark.asyncio
    async def test_read_failure_reads_as_empty(self):
        store = RuleStore(FlakyKeyValueStore(fail_reads=True))
        assert await store.all() == []

    @pytest.mark.asyncio
    async def test_read_failure_aborts_upsert(self):
        storage = FlakyKeyValueStore(fail_reads=True)
        store = RuleStore(storage)

        with pytest.raises(PersistenceError) as exc_info:
            await store.upsert("swiggy", "food")

        assert exc_info.value.error_code == "RULE_001"
        assert exc_info.value.details["action"] == "read"
        assert storage.writes == 0

    @pytest.mark.asyncio
    async def test_write_failure_keeps_previous_rules(self):
        storage = FlakyKeyValueStore()
        store = RuleStore(storage)
        await store.upsert("swiggy", "food")
        before = storage.snapshot()

        storage.fail_writes = True
        with pytest.raises(PersistenceError) as exc_info:
            await store.upsert("tea stall", "food")

        assert exc_info.value.details["action"] == "write"
        assert storage.snapshot() == before

    @pytest.mark.asyncio
    async def test_write_timeout_is_persistence_error(self):
        storage = FlakyKeyValueStore()
        store = RuleStore(storage, timeout_seconds=0.05)
        await store.upsert("swiggy", "food")
        before = storage.snapshot()

        storage.write_delay = 1.0
        with pytest.raises(PersistenceError) as exc_info:
            await store.upsert("tea stall", "food")

        assert exc_info.value.details["reason"] == "timeout"
        assert storage.snapshot() == before

    @pytest.mark.asyncio
    async def test_store_usable_after_failure(self):
        storage = FlakyKeyValueStore(fail_writes=True)
        store = RuleStore(storage)

        with pytest.raises(PersistenceError):
            await store.upsert("swiggy", "food")

        storage.fail_writes = False
        await store.upsert("swiggy", "food")
        assert len(await store.all()) == 1


class TestConcurrency:
    """Mutations are serialized so no update is lost."""

    @pytest.mark.asyncio
    async def test_concurrent_upserts_are_all_persisted(self):
        store = RuleStore(FlakyKeyValueStore(yield_between=True))
        keys = [f"corner store {i}" for i in range(25)]

        await asyncio.gather(*(store.upsert(key, "groceries") for key in keys))

        assert sorted(r.key for r in await store.all()) == sorted(keys)

    @pytest.mark.asyncio
    async def test_concurrent_upsert_and_delete(self):
        store = RuleStore(FlakyKeyValueStore(yield_between=True))
        await store.upsert("swiggy", "food")

        await asyncio.gather(
            store.delete("swiggy"),
            store.upsert("tea stall", "food"),
            store.upsert("zomato", "food"),
        )

        assert sorted(r.key for r in await store.all()) == ["tea stall", "zomato"]

    @pytest.mark.asyncio
    async def test_reads_do_not_wait_for_writes(self):
        storage = FlakyKeyValueStore(write_delay=0.2)
        store = RuleStore(storage)

        write = asyncio.create_task(store.upsert("swiggy", "food"))
        await asyncio.sleep(0.01)
        rules = await asyncio.wait_for(store.all(), timeout=0.1)

        assert rules == []
        await write
