"""
math_battle.types — Question bank and leaderboard models
========================================================

Pydantic models for everything that crosses the package boundary:
question banks coming in from skill files, normalized questions handed
to the presentation layer, and leaderboard rows handed to storage.

Question banks use two field conventions, both accepted:

    {"question": "2+2?", "options": ["3", "4"], "correct": 1}
    {"question": "2+2?", "choices": ["3", "4"], "answer": "4"}

Inspect fields:

    >>> sorted(Question.model_fields)
    ['correct_index', 'id', 'options', 'prompt', 'wave']
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import List, Optional, TypedDict, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ._config import DEFAULT_TIME_PER_QUESTION, DEFAULT_WAVE


# ============================================
# Question bank input
# ============================================

class RawQuestion(BaseModel):
    """A question as stored in a skill file, before normalization.

    Fields
    ------
    id : int, optional
        Question identifier. Assigned from position when missing.
    prompt : str
        Question text. Also read from ``question`` or ``text``.
    options, correct :
        First convention. ``correct`` is the index of the right option,
        or the right option's value when given as a string.
    choices, answer :
        Second convention. ``answer`` is the right option's value.
    wave : int
        Difficulty bucket, 1 (easiest) to 5.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[int] = None
    prompt: str = Field(validation_alias=AliasChoices("prompt", "question", "text"))
    options: Optional[List[str]] = None
    correct: Optional[Union[int, str]] = None
    choices: Optional[List[str]] = None
    answer: Optional[Union[int, str]] = None
    wave: int = DEFAULT_WAVE


class Skill(BaseModel):
    """A question bank for one math skill."""
    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""
    time_per_question: int = Field(
        default=DEFAULT_TIME_PER_QUESTION,
        gt=0,
        validation_alias=AliasChoices("time_per_question", "timePerQuestion"),
    )
    waves: Optional[int] = None
    questions: List[RawQuestion] = Field(default_factory=list)


# ============================================
# Normalized question
# ============================================

class Question(BaseModel):
    """A normalized question with shuffled options and one correct index."""
    model_config = ConfigDict(frozen=True)

    id: int
    prompt: str
    options: List[str] = Field(min_length=2)
    correct_index: int
    wave: int = DEFAULT_WAVE

    @model_validator(mode="after")
    def _check_correct_index(self) -> "Question":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} outside 0..{len(self.options) - 1}"
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]

    def is_correct(self, selected_index: int) -> bool:
        return selected_index == self.correct_index


# ============================================
# Leaderboard
# ============================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardEntry(BaseModel):
    """Historical stats for one player name.

    ``best_time`` is the shortest winning match in seconds; it stays
    infinite until the player wins once.
    """
    model_config = ConfigDict(frozen=True)

    player_name: str
    wins: int = Field(default=0, ge=0)
    games_played: int = Field(default=0, ge=0)
    win_rate: float = 0.0
    best_time: float = math.inf
    last_updated: datetime = Field(default_factory=_utcnow)

    @property
    def losses(self) -> int:
        return self.games_played - self.wins

    @property
    def has_won(self) -> bool:
        return math.isfinite(self.best_time)


# ============================================
# BattlePlayer.choose_answer() Input/Output
# ============================================

class QuestionView(TypedDict):
    """A question as shown to the answering player (no correct index)."""
    id: int
    prompt: str
    options: List[str]
    wave: int


class AnswerContext(TypedDict):
    """Context passed to BattlePlayer.choose_answer().

    Fields
    ------
    player_name : str
        Name of the player who must answer.
    opponent_name : str
        Name of the other player.
    mode : str
        "battle" or "sudden-death".
    question : QuestionView
        The question to answer.
    question_number : int
        1-based position in the match.
    time_limit : int
        Seconds available before the attack is missed.
    lives : int
        Lives of the answering player.
    opponent_lives : int
        Lives of the opponent.
    last_chance : bool
        True if this answer is the player's last chance.
    answer_key : int or None
        Correct option index. Only filled for players whose
        ``reads_answer_key`` flag is set (demo players).
    """
    player_name: str
    opponent_name: str
    mode: str
    question: QuestionView
    question_number: int
    time_limit: int
    lives: int
    opponent_lives: int
    last_chance: bool
    answer_key: Optional[int]


class AnswerChoice(TypedDict):
    """Expected return from BattlePlayer.choose_answer().

    Fields
    ------
    option_index : int
        Index into question["options"].
    time_taken : float
        Seconds the player needed to answer.
    """
    option_index: int
    time_taken: float


__all__ = [
    "RawQuestion",
    "Skill",
    "Question",
    "LeaderboardEntry",
    "QuestionView",
    "AnswerContext",
    "AnswerChoice",
]
