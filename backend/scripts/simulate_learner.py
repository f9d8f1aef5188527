"""Simulate a learner drilling a deck to inspect the selection weighting.

A simulated learner answers "hard" items wrong with --hard-error probability
and everything else with --easy-error. Outcomes go through a StatsStore on an
in-memory backend, so the weights evolve exactly as in a real session.

Usage:
    python scripts/simulate_learner.py [--deck irregular_verbs] [--rounds 500]
        [--hard go,be,take] [--seed 1]
"""

from __future__ import annotations

import argparse
import asyncio
import random
from collections import Counter
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from verbdrill.quiz import (
    InMemoryKeyValueStore,
    OutcomeCounter,
    QuestionGenerator,
    StatsStore,
    Word,
    count_mastered,
    item_weight,
    load_deck,
)
from verbdrill.services.quiz import Answer, QuizService


async def simulate(
    deck_id: str,
    rounds: int,
    hard_ids: set[str],
    hard_error: float,
    easy_error: float,
    seed: int,
) -> tuple[Counter, dict]:
    """Run the drill loop and return (selection counts, final stats)."""
    rng = random.Random(seed)
    service = QuizService(
        StatsStore(InMemoryKeyValueStore()),
        generator=QuestionGenerator(rng=random.Random(seed + 1)),
    )

    selections: Counter = Counter()
    answer = None
    for _ in range(rounds):
        question, _, _ = await service.process_answer_and_get_next(deck_id, answer)
        target = question.target_item
        selections[target.id] += 1

        error_rate = hard_error if target.id in hard_ids else easy_error
        if rng.random() < error_rate:
            wrong = [i for i in range(len(question.options)) if i != question.correct_option_index]
            chosen = question.options[rng.choice(wrong)]
        else:
            chosen = question.correct_option
        selected = chosen.id if isinstance(chosen, Word) else chosen
        answer = Answer(item_id=target.id, selected=selected)

    stats = await service.stats_store.load()
    return selections, stats


def main():
    parser = argparse.ArgumentParser(description="Simulate a learner drilling a deck")
    parser.add_argument("--deck", default="irregular_verbs", help="Deck id")
    parser.add_argument("--rounds", type=int, default=500, help="Number of questions")
    parser.add_argument("--hard", default="go,be,take", help="Comma-separated hard item ids")
    parser.add_argument("--hard-error", type=float, default=0.6)
    parser.add_argument("--easy-error", type=float, default=0.05)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--top", type=int, default=10, help="Rows to print")
    args = parser.parse_args()

    hard_ids = {h.strip() for h in args.hard.split(",") if h.strip()}
    selections, stats = asyncio.run(
        simulate(args.deck, args.rounds, hard_ids, args.hard_error, args.easy_error, args.seed)
    )

    pool = load_deck(args.deck)
    print(f"Deck: {args.deck} ({len(pool)} items), {args.rounds} rounds")
    print(f"Mastered: {count_mastered(pool, stats)} / {len(pool)}")
    print()
    print(f"{'item':<14} {'drawn':>6} {'correct':>8} {'wrong':>6} {'weight':>7}")
    for item_id, drawn in selections.most_common(args.top):
        counter = stats.get(item_id) or OutcomeCounter()
        marker = " *" if item_id in hard_ids else ""
        print(
            f"{item_id:<14} {drawn:>6} {counter.correct:>8} {counter.wrong:>6} "
            f"{item_weight(counter):>7.1f}{marker}"
        )


if __name__ == "__main__":
    main()
