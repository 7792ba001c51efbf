# Area: Battle
"""
math_battle._battle.state — Match state tracker
===============================================

Holds everything about one match between two players: lives, scores,
turn, question cursor, mode and the countdown value. The state machine
mutates a copy of this and swaps it in once a transition completes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .._config import INITIAL_LIVES
from ..types import Question, Skill
from .enums import BattleMode


@dataclass
class Player:
    """One side of the battle."""
    name: str = ""
    lives: int = INITIAL_LIVES
    score: int = 0
    is_active: bool = False
    answer_time: Optional[float] = None      # sudden death only, -1 = wrong


def _initial_players() -> List[Player]:
    return [Player(is_active=True), Player(is_active=False)]


@dataclass
class MatchState:
    """
    Full state of one match.

    ``questions`` holds the main sequence; ``reserve`` holds the
    sudden-death pool, addressed by question indexes past the end of
    the main sequence.
    """
    players: List[Player] = field(default_factory=_initial_players)
    questions: List[Question] = field(default_factory=list)
    reserve: List[Question] = field(default_factory=list)
    current_question_index: int = 0
    current_player_index: int = 0
    mode: BattleMode = BattleMode.SETUP
    time_remaining: int = 0
    last_chance_player: Optional[int] = None
    last_chance_used: Set[int] = field(default_factory=set)
    winner_index: Optional[int] = None
    skill: Optional[Skill] = None

    # ── Derived views ────────────────────────────────────────

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_index is None:
            return None
        return self.players[self.winner_index]

    @property
    def is_tie(self) -> bool:
        return self.mode is BattleMode.VICTORY and self.winner_index is None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def opponent_index(self) -> int:
        return 1 - self.current_player_index

    @property
    def current_question(self) -> Optional[Question]:
        index = self.current_question_index
        if index < len(self.questions):
            return self.questions[index]
        reserve_index = index - len(self.questions)
        if self.mode is BattleMode.SUDDEN_DEATH and reserve_index < len(self.reserve):
            return self.reserve[reserve_index]
        return None

    @property
    def reserve_remaining(self) -> int:
        consumed = max(0, self.current_question_index - len(self.questions))
        return max(0, len(self.reserve) - consumed)

    def revealed_questions(self) -> List[Question]:
        """Main questions plus the reserve questions already reached."""
        consumed = self.current_question_index - len(self.questions)
        if self.mode is BattleMode.SUDDEN_DEATH:
            consumed += 1
        return list(self.questions) + list(self.reserve[:max(0, consumed)])
