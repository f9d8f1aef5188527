"""Stats persistence for per-item outcome counters.

Handles loading and saving the StatsMap as JSON under one fixed key of a
key-value backend. Storage problems never reach the caller: unreadable or
malformed payloads load as an empty map, failed writes are logged.
"""

import logging
from typing import Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .storage import KeyValueStore
from .types import DrillItem, OutcomeCounter, StatsMap

logger = logging.getLogger(__name__)

DEFAULT_STATS_KEY = "VERBS_STATS"

# Mastery thresholds
MASTERY_MIN_CORRECT = 3
MASTERY_RATIO = 2

_STATS_ADAPTER = TypeAdapter(dict[str, OutcomeCounter])


def is_mastered(counter: Optional[OutcomeCounter]) -> bool:
    """An item is mastered with 3+ correct answers and more than twice as many correct as wrong."""
    if counter is None:
        return False
    return counter.correct >= MASTERY_MIN_CORRECT and counter.correct > counter.wrong * MASTERY_RATIO


def count_mastered(pool: Sequence[DrillItem], stats: StatsMap) -> int:
    """Number of pool items whose counter is mastered."""
    return sum(1 for item in pool if is_mastered(stats.get(item.id)))


class StatsStore:
    """Sole writer of the persisted StatsMap.

    `record_outcome` is a plain read-modify-write with no
    locking: one quiz session per store is assumed, and concurrent writers
    are last-write-wins on the full map.
    """

    def __init__(self, backend: KeyValueStore, key: str = DEFAULT_STATS_KEY):
        self.backend = backend
        self.key = key

    async def load(self) -> StatsMap:
        """Return the persisted map, or an empty map if missing or unreadable."""
        try:
            raw = await self.backend.get(self.key)
        except Exception:
            # Any backend failure reads as "no data yet"
            logger.exception("Failed to read stats under %s", self.key)
            return {}

        if raw is None:
            return {}

        try:
            return _STATS_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring malformed stats under %s (%d errors)", self.key, exc.error_count()
            )
            return {}

    async def save(self, stats: StatsMap) -> bool:
        """Persist the full map, overwriting prior content.

        Returns True on success. Failures are logged, never raised.
        """
        payload = _STATS_ADAPTER.dump_json(stats).decode("utf-8")
        try:
            saved = await self.backend.set(self.key, payload)
        except Exception:
            logger.exception("Failed to write stats under %s", self.key)
            return False

        if not saved:
            logger.error("Stats under %s were not persisted", self.key)
        return saved

    async def record_outcome(self, item_id: str, was_correct: bool) -> StatsMap:
        """Increment the item's correct or wrong count and persist the map."""
        stats = await self.load()
        counter = stats.get(item_id, OutcomeCounter())

        if was_correct:
            counter = counter.model_copy(update={"correct": counter.correct + 1})
        else:
            counter = counter.model_copy(update={"wrong": counter.wrong + 1})
        stats[item_id] = counter

        await self.save(stats)
        logger.debug(
            "Recorded %s for %s -> correct=%d wrong=%d",
            "correct" if was_correct else "wrong", item_id, counter.correct, counter.wrong,
        )
        return stats
