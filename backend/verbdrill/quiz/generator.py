"""
Question generator - weighted item selection and distractor synthesis.

Stateless apart from the random source: receives the pool and a stats
snapshot, returns a Question. Persistence is handled by the stats store.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, TypeVar

from .types import DrillItem, OutcomeCounter, Question, StatsMap, Verb, VerbForms, Word, WordQuestion

logger = logging.getLogger(__name__)

# Weakness weight: 1 + 3 per wrong answer - 0.5 per correct answer, floored
BASE_WEIGHT = 1.0
WRONG_WEIGHT = 3.0
CORRECT_WEIGHT = 0.5
MIN_WEIGHT = 0.1

N_OPTIONS = 4
N_DISTRACTORS = N_OPTIONS - 1

# Chance of using a neighbor's forms instead of a fake regularization
NEIGHBOR_PROBABILITY = 0.5

# Draw budget before falling back to variants of the target itself
MAX_DISTRACTOR_DRAWS = 50

T = TypeVar("T", bound=DrillItem)


class PoolConfigurationError(ValueError):
    """The item pool cannot produce a valid question (too small, duplicate ids)."""


def item_weight(counter: Optional[OutcomeCounter]) -> float:
    """Draw weight for an item; never below MIN_WEIGHT."""
    if counter is None:
        counter = OutcomeCounter()
    weight = BASE_WEIGHT + WRONG_WEIGHT * counter.wrong - CORRECT_WEIGHT * counter.correct
    return max(MIN_WEIGHT, weight)


def fake_regularization(base: str) -> str:
    """Over-regularize a base form the way learners do: go -> goed, make -> maked."""
    if base.endswith("e"):
        return f"{base}d"
    return f"{base}ed"


def validate_pool(pool: Sequence[DrillItem], min_size: int) -> None:
    """Reject pools that are too small or carry duplicate ids."""
    ids = [item.id for item in pool]
    if len(set(ids)) != len(ids):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        raise PoolConfigurationError(f"Duplicate item ids in pool: {duplicates}")
    if len(ids) < min_size:
        raise PoolConfigurationError(
            f"Pool needs at least {min_size} items, got {len(ids)}"
        )


class QuestionGenerator:
    """Builds multiple-choice questions biased toward weak items.

    The random source is injectable so tests can make draws deterministic:

        generator = QuestionGenerator(rng=random.Random(42))
        question = generator.generate_question(verbs, stats)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def pick_weighted_item(self, pool: Sequence[T], stats: Optional[StatsMap] = None) -> T:
        """Pick an item with probability proportional to its weakness weight.

        Walks the pool in order, so earlier items win ties at the boundary.
        Falls back to the last item if rounding leaves a positive remainder.
        """
        if not pool:
            raise PoolConfigurationError("Cannot pick from an empty pool")
        stats = stats or {}

        weights = [item_weight(stats.get(item.id)) for item in pool]
        return pool[self._weighted_sample(weights)]

    def generate_question(self, pool: Sequence[Verb], stats: Optional[StatsMap] = None) -> Question:
        """Generate a 4-option question for the verb pool."""
        validate_pool(pool, 2)
        target = self.pick_weighted_item(pool, stats)
        correct = target.correct_forms

        options = self._synthesize_distractors(pool, target)
        correct_index = self.rng.randrange(N_OPTIONS)
        options.insert(correct_index, correct)

        logger.debug(
            "Question for %s: options=%s correct_index=%d",
            target.id, [str(o) for o in options], correct_index,
        )
        return Question(target_item=target, options=options, correct_option_index=correct_index)

    def generate_word_question(self, pool: Sequence[Word], stats: Optional[StatsMap] = None) -> WordQuestion:
        """Generate a 4-option vocabulary question (match the definition)."""
        validate_pool(pool, N_OPTIONS)
        target = self.pick_weighted_item(pool, stats)

        others = [w for w in pool if w.id != target.id]
        options = self.rng.sample(others, N_DISTRACTORS)
        correct_index = self.rng.randrange(N_OPTIONS)
        options.insert(correct_index, target)

        logger.debug("Word question for %s: correct_index=%d", target.id, correct_index)
        return WordQuestion(target_item=target, options=options, correct_option_index=correct_index)

    def _synthesize_distractors(self, pool: Sequence[Verb], target: Verb) -> list[VerbForms]:
        """Collect 3 distinct wrong options for the target."""
        correct = target.correct_forms
        distractors: list[VerbForms] = []

        for _ in range(MAX_DISTRACTOR_DRAWS):
            if len(distractors) >= N_DISTRACTORS:
                break
            neighbor = self._draw_other(pool, target)
            # The coin is independent of which neighbor was drawn
            if self.rng.random() < NEIGHBOR_PROBABILITY:
                candidate = neighbor.correct_forms
            else:
                fake = fake_regularization(target.infinitive)
                candidate = VerbForms(past_simple=fake, past_participle=fake)
            if candidate != correct and candidate not in distractors:
                distractors.append(candidate)

        if len(distractors) < N_DISTRACTORS:
            logger.debug(
                "Only %d distractors for %s after %d draws, using target variants",
                len(distractors), target.id, MAX_DISTRACTOR_DRAWS,
            )
            for candidate in self._target_variants(target):
                if len(distractors) >= N_DISTRACTORS:
                    break
                if candidate != correct and candidate not in distractors:
                    distractors.append(candidate)

        if len(distractors) < N_DISTRACTORS:
            raise PoolConfigurationError(
                f"Could not build {N_DISTRACTORS} distinct distractors for '{target.id}'"
            )
        return distractors

    @staticmethod
    def _target_variants(target: Verb) -> list[VerbForms]:
        """Half-regularized and base-form pairs of the target, in fixed order."""
        fake = fake_regularization(target.infinitive)
        base = target.infinitive
        return [
            VerbForms(past_simple=target.past_simple, past_participle=fake),
            VerbForms(past_simple=fake, past_participle=target.past_participle),
            VerbForms(past_simple=base, past_participle=fake),
            VerbForms(past_simple=fake, past_participle=base),
            VerbForms(past_simple=base, past_participle=base),
        ]

    def _draw_other(self, pool: Sequence[T], target: T) -> T:
        """Draw a uniformly random pool item other than the target."""
        while True:
            item = pool[self.rng.randrange(len(pool))]
            if item.id != target.id:
                return item

    def _weighted_sample(self, weights: list[float]) -> int:
        """Sample an index proportional to weights."""
        total = sum(weights)
        r = self.rng.random() * total
        for i, w in enumerate(weights):
            r -= w
            if r <= 0:
                return i
        return len(weights) - 1
