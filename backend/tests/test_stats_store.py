"""Tests for stats persistence and mastery."""
import asyncio
import json

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from verbdrill.database import init_db
from verbdrill.quiz import (
    InMemoryKeyValueStore,
    OutcomeCounter,
    SqlKeyValueStore,
    StatsStore,
    Verb,
    count_mastered,
    is_mastered,
)
from verbdrill.quiz.stats import DEFAULT_STATS_KEY


class BrokenKeyValueStore:
    """Backend whose reads and writes fail at the OS level."""

    async def get(self, key):
        raise OSError("disk unavailable")

    async def set(self, key, value):
        raise OSError("disk full")


class CrashingKeyValueStore:
    """Backend raising errors that are not OS-level."""

    async def get(self, key):
        raise RuntimeError("driver crashed")

    async def set(self, key, value):
        raise RuntimeError("driver crashed")


class RejectingKeyValueStore(InMemoryKeyValueStore):
    """Backend that reads fine but reports every write as failed."""

    async def set(self, key, value):
        return False


class TestMastery:
    """Tests for the mastery predicate."""

    def test_boundaries(self):
        assert is_mastered(OutcomeCounter(correct=3, wrong=1))
        assert not is_mastered(OutcomeCounter(correct=3, wrong=2))

    def test_needs_three_correct(self):
        assert not is_mastered(OutcomeCounter(correct=2, wrong=0))
        assert is_mastered(OutcomeCounter(correct=3, wrong=0))

    def test_missing_counter_not_mastered(self):
        assert not is_mastered(None)
        assert not is_mastered(OutcomeCounter())

    def test_matches_formula(self):
        for correct in range(0, 12):
            for wrong in range(0, 8):
                expected = correct >= 3 and correct > wrong * 2
                assert is_mastered(OutcomeCounter(correct=correct, wrong=wrong)) == expected

    def test_count_mastered(self):
        pool = [
            Verb(infinitive="go", past_simple="went", past_participle="gone"),
            Verb(infinitive="be", past_simple="was/were", past_participle="been"),
            Verb(infinitive="see", past_simple="saw", past_participle="seen"),
        ]
        stats = {
            "go": OutcomeCounter(correct=5, wrong=1),
            "be": OutcomeCounter(correct=3, wrong=2),
            "unrelated": OutcomeCounter(correct=9),
        }
        assert count_mastered(pool, stats) == 1


class TestStatsStore:
    """Tests for load / save / record_outcome."""

    def test_load_empty(self):
        store = StatsStore(InMemoryKeyValueStore())
        assert asyncio.run(store.load()) == {}

    def test_save_load_round_trip(self):
        store = StatsStore(InMemoryKeyValueStore())
        stats = {
            "go": OutcomeCounter(correct=2, wrong=5),
            "be": OutcomeCounter(correct=0, wrong=1),
        }

        async def run():
            assert await store.save(stats)
            return await store.load()

        assert asyncio.run(run()) == stats

    def test_persisted_as_json_under_fixed_key(self):
        backend = InMemoryKeyValueStore()
        store = StatsStore(backend)
        asyncio.run(store.save({"go": OutcomeCounter(correct=1, wrong=2)}))

        assert json.loads(backend.data[DEFAULT_STATS_KEY]) == {"go": {"correct": 1, "wrong": 2}}

    def test_malformed_payloads_load_empty(self):
        payloads = [
            "not json",
            "[1, 2, 3]",
            '{"go": {"correct": -1, "wrong": 0}}',
            '{"go": {"correct": "many"}}',
            '{"go": 3}',
        ]
        for payload in payloads:
            store = StatsStore(InMemoryKeyValueStore({DEFAULT_STATS_KEY: payload}))
            assert asyncio.run(store.load()) == {}, f"Expected empty map for {payload!r}"

    def test_partial_entry_defaults_to_zero(self):
        store = StatsStore(InMemoryKeyValueStore({DEFAULT_STATS_KEY: '{"go": {"wrong": 2}}'}))
        assert asyncio.run(store.load()) == {"go": OutcomeCounter(correct=0, wrong=2)}

    def test_record_correct_from_no_entry(self):
        store = StatsStore(InMemoryKeyValueStore())
        stats = asyncio.run(store.record_outcome("go", True))
        assert stats["go"] == OutcomeCounter(correct=1, wrong=0)

    def test_record_wrong_from_no_entry(self):
        store = StatsStore(InMemoryKeyValueStore())
        stats = asyncio.run(store.record_outcome("go", False))
        assert stats["go"] == OutcomeCounter(correct=0, wrong=1)

    def test_record_outcome_persists_and_accumulates(self):
        store = StatsStore(InMemoryKeyValueStore())

        async def run():
            await store.record_outcome("go", True)
            await store.record_outcome("go", False)
            await store.record_outcome("go", True)
            await store.record_outcome("be", False)
            return await store.load()

        stats = asyncio.run(run())
        assert stats == {
            "go": OutcomeCounter(correct=2, wrong=1),
            "be": OutcomeCounter(correct=0, wrong=1),
        }

    def test_record_outcome_leaves_other_counter_unchanged(self):
        store = StatsStore(InMemoryKeyValueStore())

        async def run():
            await store.save({"go": OutcomeCounter(correct=4, wrong=3)})
            return await store.record_outcome("go", True)

        stats = asyncio.run(run())
        assert stats["go"] == OutcomeCounter(correct=5, wrong=3)

    def test_read_failure_fails_open(self):
        store = StatsStore(BrokenKeyValueStore())
        assert asyncio.run(store.load()) == {}

    def test_write_failure_is_not_raised(self):
        store = StatsStore(BrokenKeyValueStore())
        assert asyncio.run(store.save({"go": OutcomeCounter(correct=1)})) is False

    def test_any_backend_error_fails_open(self):
        """Non-OS backend errors are absorbed on read and on write."""
        store = StatsStore(CrashingKeyValueStore())

        async def run():
            loaded = await store.load()
            saved = await store.save({"go": OutcomeCounter(correct=1)})
            recorded = await store.record_outcome("go", True)
            return loaded, saved, recorded

        loaded, saved, recorded = asyncio.run(run())
        assert loaded == {}
        assert saved is False
        assert recorded == {"go": OutcomeCounter(correct=1, wrong=0)}

    def test_rejected_write_keeps_in_memory_result(self):
        """The returned map is authoritative even if the durable write fails."""
        store = StatsStore(RejectingKeyValueStore())

        async def run():
            stats = await store.record_outcome("go", False)
            return stats, await store.load()

        stats, persisted = asyncio.run(run())
        assert stats["go"] == OutcomeCounter(correct=0, wrong=1)
        assert persisted == {}

    def test_separate_keys_are_independent(self):
        backend = InMemoryKeyValueStore()
        verbs = StatsStore(backend, key="VERBS_STATS")
        other = StatsStore(backend, key="OTHER_STATS")

        async def run():
            await verbs.record_outcome("go", True)
            return await other.load()

        assert asyncio.run(run()) == {}


class TestSqlKeyValueStore:
    """Tests for the database-backed key-value store."""

    def test_round_trip_and_overwrite(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stats.db'}")
        session_maker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        backend = SqlKeyValueStore(session_maker)

        async def run():
            await init_db(engine)
            missing = await backend.get("VERBS_STATS")
            assert await backend.set("VERBS_STATS", "first")
            assert await backend.set("VERBS_STATS", "second")
            value = await backend.get("VERBS_STATS")
            await engine.dispose()
            return missing, value

        missing, value = asyncio.run(run())
        assert missing is None
        assert value == "second"

    def test_stats_store_on_database(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stats.db'}")
        session_maker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        store = StatsStore(SqlKeyValueStore(session_maker))

        async def run():
            await init_db(engine)
            await store.record_outcome("go", True)
            await store.record_outcome("go", True)
            await store.record_outcome("go", False)
            stats = await store.load()
            await engine.dispose()
            return stats

        assert asyncio.run(run()) == {"go": OutcomeCounter(correct=2, wrong=1)}

    def test_missing_table_reads_as_empty(self, tmp_path):
        """Without init_db the read fails and the store falls back to an empty map."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        session_maker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        store = StatsStore(SqlKeyValueStore(session_maker))

        async def run():
            stats = await store.load()
            saved = await store.save({"go": OutcomeCounter(correct=1)})
            await engine.dispose()
            return stats, saved

        stats, saved = asyncio.run(run())
        assert stats == {}
        assert saved is False
