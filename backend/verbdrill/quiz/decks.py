"""Deck registry.

Each deck is an immutable item pool loaded from a bundled JSON file. The
deck kind decides which item model parses it and which question type the
generator builds for it.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .generator import PoolConfigurationError, validate_pool
from .types import Verb, Word

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

DeckKind = Literal["verb", "word"]
Pool = Union[tuple[Verb, ...], tuple[Word, ...]]


class DeckNotFoundError(KeyError):
    """No deck is registered under the requested id."""


class DeckConfig(BaseModel):
    """Configuration for a deck."""
    deck_id: str
    kind: DeckKind
    title: str
    data_file: str
    description: str = ""


# Registry of all bundled decks
DECKS: dict[str, DeckConfig] = {
    "irregular_verbs": DeckConfig(
        deck_id="irregular_verbs",
        kind="verb",
        title="Irregular Verbs",
        data_file="verbs.json",
        description="Pick the past simple and past participle",
    ),
    "nouns": DeckConfig(
        deck_id="nouns",
        kind="word",
        title="Nouns",
        data_file="nouns.json",
        description="Select the matching word",
    ),
    "regular_verbs": DeckConfig(
        deck_id="regular_verbs",
        kind="word",
        title="Verbs",
        data_file="regular_verbs.json",
        description="Select the matching verb",
    ),
    "interview_words": DeckConfig(
        deck_id="interview_words",
        kind="word",
        title="Job Interview Words",
        data_file="interview_words.json",
        description="Select the matching word",
    ),
    "interview_phrases": DeckConfig(
        deck_id="interview_phrases",
        kind="word",
        title="Job Interview Phrases",
        data_file="interview_phrases.json",
        description="Select the matching phrase",
    ),
}

_ADAPTERS: dict[str, TypeAdapter] = {
    "verb": TypeAdapter(list[Verb]),
    "word": TypeAdapter(list[Word]),
}


def get_deck(deck_id: str) -> DeckConfig:
    """Get configuration for a deck."""
    if deck_id not in DECKS:
        raise DeckNotFoundError(deck_id)
    return DECKS[deck_id]


def list_decks() -> list[DeckConfig]:
    return list(DECKS.values())


@lru_cache
def load_deck(deck_id: str, data_dir: Optional[Path] = None) -> Pool:
    """Load and validate a deck's item pool. Cached per (deck, directory)."""
    config = get_deck(deck_id)
    path = (data_dir or DATA_DIR) / config.data_file

    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        items = _ADAPTERS[config.kind].validate_python(data)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise PoolConfigurationError(f"Failed to load deck '{deck_id}' from {path}: {exc}") from exc

    validate_pool(items, 2)
    logger.info("Loaded deck %s: %d items", deck_id, len(items))
    return tuple(items)
