from datetime import datetime

from sqlmodel import SQLModel, Field


class KeyValueEntry(SQLModel, table=True):
    """A durable string value under a fixed key (e.g. the JSON stats map)."""
    __tablename__ = "kv_entries"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)
