"""Adaptive quiz core.

This module provides:
- DrillItem, Verb, Word, VerbForms, OutcomeCounter, Question: Data models
- QuestionGenerator: weighted selection and distractor synthesis
- StatsStore, is_mastered: outcome persistence and mastery
- DeckConfig, DECKS: Deck registry
"""

from .types import (
    DrillItem,
    Verb,
    Word,
    VerbForms,
    OutcomeCounter,
    StatsMap,
    Question,
    WordQuestion,
)
from .generator import (
    QuestionGenerator,
    PoolConfigurationError,
    item_weight,
    fake_regularization,
)
from .stats import (
    StatsStore,
    is_mastered,
    count_mastered,
)
from .storage import (
    KeyValueStore,
    InMemoryKeyValueStore,
    SqlKeyValueStore,
)
from .decks import (
    DeckConfig,
    DECKS,
    DeckNotFoundError,
    get_deck,
    list_decks,
    load_deck,
)

__all__ = [
    # Types
    "DrillItem",
    "Verb",
    "Word",
    "VerbForms",
    "OutcomeCounter",
    "StatsMap",
    "Question",
    "WordQuestion",
    # Generator
    "QuestionGenerator",
    "PoolConfigurationError",
    "item_weight",
    "fake_regularization",
    # Stats
    "StatsStore",
    "is_mastered",
    "count_mastered",
    # Storage backends
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
    # Decks
    "DeckConfig",
    "DECKS",
    "DeckNotFoundError",
    "get_deck",
    "list_decks",
    "load_deck",
]
