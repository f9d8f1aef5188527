"""
Quiz router - API layer for verb and vocabulary drills.

Delegates all logic to the quiz service.
"""

from __future__ import annotations

from typing import Annotated, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from verbdrill.config import get_settings
from verbdrill.quiz import (
    DeckConfig,
    DeckNotFoundError,
    PoolConfigurationError,
    Question,
    WordQuestion,
    list_decks,
)
from verbdrill.services.quiz import (
    Answer,
    ItemNotFoundError,
    MasterySummary,
    QuizService,
    get_quiz_service,
)

router = APIRouter()


# Request/Response schemas
class NextQuestionRequest(BaseModel):
    """Request for next question, optionally answering the previous one."""
    previous_answer: Optional[Answer] = None
    # Session score so far, kept by the client
    score: int = 0


class NextQuestionResponse(BaseModel):
    deck_id: str
    question: Union[Question, WordQuestion]
    previous_correct: Optional[bool] = None
    score: int
    finished: bool


class DeckSummary(BaseModel):
    deck: DeckConfig
    mastered: int
    total: int


@router.get("/decks", response_model=list[DeckSummary])
async def get_decks(
    service: Annotated[QuizService, Depends(get_quiz_service)],
):
    """List decks with their mastered counts."""
    stats = await service.stats_store.load()
    summaries = []
    for deck in list_decks():
        try:
            summary = await service.mastery_summary(deck.deck_id, stats)
        except PoolConfigurationError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
        summaries.append(DeckSummary(deck=deck, mastered=summary.mastered, total=summary.total))
    return summaries


@router.post("/quiz/{deck_id}/next", response_model=NextQuestionResponse)
async def get_next_question(
    deck_id: str,
    request: NextQuestionRequest,
    service: Annotated[QuizService, Depends(get_quiz_service)],
):
    """
    Get the next question. Optionally submit the previous answer.

    If previous_answer is provided the outcome is recorded before the next
    question is drawn, so the new weights already apply.
    """
    try:
        question, was_correct, _ = await service.process_answer_and_get_next(
            deck_id, request.previous_answer
        )
    except DeckNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deck not found")
    except ItemNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not in deck")
    except PoolConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    score = request.score + (1 if was_correct else 0)
    return NextQuestionResponse(
        deck_id=deck_id,
        question=question,
        previous_correct=was_correct,
        score=score,
        finished=score >= get_settings().SESSION_TARGET,
    )


@router.get("/quiz/{deck_id}/stats", response_model=MasterySummary)
async def get_deck_stats(
    deck_id: str,
    service: Annotated[QuizService, Depends(get_quiz_service)],
):
    """Get mastery stats for a deck."""
    try:
        return await service.mastery_summary(deck_id)
    except DeckNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deck not found")
    except PoolConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
