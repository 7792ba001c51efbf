# Area: Battle
"""
Battle core: question selection and the two-player state machine.

This package handles:
- Injectable random sources
- Question normalization and selection
- Match state and transitions
- Snapshots and match results
"""

from .enums import BattleMode, BattleOperation
from .random_source import RandomSource, SeededRandomSource, SequenceRandomSource
from .selector import normalize_question, select_questions
from .state import MatchState, Player
from .state_machine import BattleStateMachine
from .snapshot import build_snapshot
from .match_result import MatchResult, build_match_result

__all__ = [
    "BattleMode",
    "BattleOperation",
    "RandomSource",
    "SeededRandomSource",
    "SequenceRandomSource",
    "normalize_question",
    "select_questions",
    "MatchState",
    "Player",
    "BattleStateMachine",
    "build_snapshot",
    "MatchResult",
    "build_match_result",
]
