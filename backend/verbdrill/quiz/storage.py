"""Key-value string backends for the stats store.

The stats store only needs `get(key) -> str | None` and
`set(key, value) -> bool`. Backends report failures instead of raising:
a failed read looks like a missing key, a failed write returns False.
"""

import logging
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from verbdrill.models.kv import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Protocol defining the durable string store interface."""

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or unreadable."""
        ...

    async def set(self, key: str, value: str) -> bool:
        """Store the value, overwriting. Returns False on failure."""
        ...


class InMemoryKeyValueStore:
    """Process-local backend, used by tests and simulations."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True


class SqlKeyValueStore:
    """Backend storing values in the `kv_entries` table.

    Takes an async session factory (see `verbdrill.database`).
    """

    def __init__(self, session_maker):
        self._session_maker = session_maker

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            logger.warning("Failed to read key %s: %s", key, exc)
            return None

    async def set(self, key: str, value: str) -> bool:
        try:
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                    entry.updated_at = datetime.utcnow()
                await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to write key %s", key)
            return False
        return True
