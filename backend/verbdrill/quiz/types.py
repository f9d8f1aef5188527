"""Pydantic models for the quiz core.

These models define the interface between the quiz core and its callers
(the HTTP layer, scripts and tests).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DrillItem(BaseModel):
    """An immutable quiz item. `id` is the stats key and unique within a pool."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str


class VerbForms(BaseModel):
    """Past simple + past participle shown together as one option."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    past_simple: str = Field(alias="v2")
    past_participle: str = Field(alias="v3")

    def __str__(self) -> str:
        return f"{self.past_simple} / {self.past_participle}"


class Verb(DrillItem):
    """An irregular verb record. `id` defaults to the infinitive."""
    infinitive: str
    past_simple: str = Field(alias="pastSimple")
    past_participle: str = Field(alias="pastParticiple")
    example: Optional[str] = None
    translation: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "id" not in data and "infinitive" in data:
            return {**data, "id": data["infinitive"]}
        return data

    @property
    def correct_forms(self) -> VerbForms:
        return VerbForms(past_simple=self.past_simple, past_participle=self.past_participle)


class Word(DrillItem):
    """A vocabulary entry quizzed by definition. `id` defaults to the word."""
    word: str
    definition: str
    example: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "id" not in data and "word" in data:
            return {**data, "id": data["word"]}
        return data


class OutcomeCounter(BaseModel):
    """Correct/wrong tallies for one item. A missing entry means {0, 0}."""
    correct: int = Field(default=0, ge=0)
    wrong: int = Field(default=0, ge=0)

    @property
    def attempts(self) -> int:
        return self.correct + self.wrong


# item id -> counter
StatsMap = dict[str, OutcomeCounter]


class Question(BaseModel):
    """A 4-option verb question. Ephemeral, never persisted."""
    target_item: Verb
    options: list[VerbForms]
    correct_option_index: int = Field(ge=0, lt=4)

    @property
    def correct_option(self) -> VerbForms:
        return self.options[self.correct_option_index]


class WordQuestion(BaseModel):
    """A 4-option vocabulary question: pick the word matching a definition."""
    target_item: Word
    options: list[Word]
    correct_option_index: int = Field(ge=0, lt=4)

    @property
    def correct_option(self) -> Word:
        return self.options[self.correct_option_index]
