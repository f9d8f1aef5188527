"""
Quiz service - judges answers, records outcomes and builds the next question.

The quiz core does the selection and distractor work; this layer owns deck
lookup and the answer -> record -> next question round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from verbdrill.config import get_settings
from verbdrill.quiz import (
    DrillItem,
    OutcomeCounter,
    Question,
    QuestionGenerator,
    StatsMap,
    StatsStore,
    SqlKeyValueStore,
    Verb,
    VerbForms,
    WordQuestion,
    count_mastered,
    get_deck,
    load_deck,
)

logger = logging.getLogger(__name__)


class ItemNotFoundError(KeyError):
    """The answered item is not part of the deck."""


class Answer(BaseModel):
    """User's answer to a question.

    `selected` is the chosen VerbForms for verb decks, or the chosen word id
    for vocabulary decks.
    """
    item_id: str
    selected: Union[VerbForms, str]


class MasterySummary(BaseModel):
    deck_id: str
    mastered: int
    total: int
    items: dict[str, OutcomeCounter]


class QuizService:
    """Orchestrates one drill loop per deck against an explicit stats store."""

    def __init__(
        self,
        stats_store: StatsStore,
        generator: Optional[QuestionGenerator] = None,
        data_dir: Optional[Path] = None,
    ):
        self.stats_store = stats_store
        self.generator = generator or QuestionGenerator()
        self.data_dir = data_dir

    def get_pool(self, deck_id: str) -> tuple[DrillItem, ...]:
        return load_deck(deck_id, self.data_dir)

    def find_item(self, deck_id: str, item_id: str) -> DrillItem:
        for item in self.get_pool(deck_id):
            if item.id == item_id:
                return item
        raise ItemNotFoundError(f"{item_id} is not in deck {deck_id}")

    def is_correct(self, deck_id: str, answer: Answer) -> bool:
        """Check the selection against the item's correct option."""
        item = self.find_item(deck_id, answer.item_id)
        if isinstance(item, Verb):
            return answer.selected == item.correct_forms
        return answer.selected == item.id

    def next_question(self, deck_id: str, stats: StatsMap) -> Union[Question, WordQuestion]:
        config = get_deck(deck_id)
        pool = self.get_pool(deck_id)
        if config.kind == "verb":
            return self.generator.generate_question(pool, stats)
        return self.generator.generate_word_question(pool, stats)

    async def process_answer_and_get_next(
        self,
        deck_id: str,
        answer: Optional[Answer] = None,
    ) -> tuple[Union[Question, WordQuestion], Optional[bool], StatsMap]:
        """Record the previous answer (if any) and build the next question.

        Returns:
            (next_question, previous_was_correct, stats)
        """
        was_correct: Optional[bool] = None
        if answer is not None:
            was_correct = self.is_correct(deck_id, answer)
            stats = await self.stats_store.record_outcome(answer.item_id, was_correct)
        else:
            stats = await self.stats_store.load()

        question = self.next_question(deck_id, stats)
        return question, was_correct, stats

    async def mastery_summary(self, deck_id: str, stats: Optional[StatsMap] = None) -> MasterySummary:
        """Mastered count and per-item counters for a deck."""
        if stats is None:
            stats = await self.stats_store.load()
        pool = self.get_pool(deck_id)
        return MasterySummary(
            deck_id=deck_id,
            mastered=count_mastered(pool, stats),
            total=len(pool),
            items={item.id: stats[item.id] for item in pool if item.id in stats},
        )


# Singleton instance
_quiz_service: Optional[QuizService] = None


def get_quiz_service() -> QuizService:
    """Get the singleton QuizService backed by the configured database."""
    global _quiz_service

    if _quiz_service is None:
        from verbdrill.database import async_session_maker

        settings = get_settings()
        store = StatsStore(SqlKeyValueStore(async_session_maker), key=settings.STATS_KEY)
        _quiz_service = QuizService(store, data_dir=settings.DATA_DIR)
    return _quiz_service
