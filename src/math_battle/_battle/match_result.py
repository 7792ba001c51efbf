# Area: Battle
"""
math_battle._battle.match_result — Match result dataclass and builder
=====================================================================

Defines the MatchResult handed to the leaderboard once a match reaches
victory, and the builder that reads it off the terminal state.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import InvalidTransitionError
from .enums import BattleMode
from .state import MatchState


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of a finished match.

    Attributes:
        player_names: Both names, in seat order
        winner_name: Name of the winner, or None for a tie
        loser_name: Name of the loser, or None for a tie
        is_tie: True if nobody won
        duration_seconds: Wall-clock match length measured by the host
        final_lives: Lives of both players at the end
        final_scores: Scores of both players at the end
    """

    player_names: Tuple[str, str]
    winner_name: Optional[str]
    loser_name: Optional[str]
    is_tie: bool
    duration_seconds: float
    final_lives: Tuple[int, int] = (0, 0)
    final_scores: Tuple[int, int] = (0, 0)


def build_match_result(state: MatchState, duration_seconds: float) -> MatchResult:
    """
    Build the result of a finished match.

    Raises:
        InvalidTransitionError: If the match has not reached victory
    """
    if state.mode is not BattleMode.VICTORY:
        raise InvalidTransitionError("build_match_result", state.mode.value)

    first, second = state.players
    winner_name = loser_name = None
    if state.winner_index is not None:
        winner_name = state.players[state.winner_index].name
        loser_name = state.players[1 - state.winner_index].name

    return MatchResult(
        player_names=(first.name, second.name),
        winner_name=winner_name,
        loser_name=loser_name,
        is_tie=state.winner_index is None,
        duration_seconds=float(duration_seconds),
        final_lives=(first.lives, second.lives),
        final_scores=(first.score, second.score),
    )
