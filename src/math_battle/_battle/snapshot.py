# Area: Battle
"""
math_battle._battle.snapshot — Match state snapshot builder
===========================================================

Builds a serialisable view of a match for the presentation layer.
No question carries its correct index, and reserve questions stay
hidden until sudden death reaches them.
"""

from typing import Any, Dict, Optional

from ..types import Question
from .state import MatchState, Player


def build_snapshot(state: MatchState) -> Dict[str, Any]:
    """Build a JSON-serialisable snapshot of the match."""
    winner = state.winner
    return {
        "mode": state.mode.value,
        "skill_title": state.skill.title if state.skill else None,
        "players": [_player_snapshot(p) for p in state.players],
        "current_player_index": state.current_player_index,
        "current_question_index": state.current_question_index,
        "total_questions": len(state.questions),
        "current_question": _question_snapshot(state.current_question),
        "questions": [_question_snapshot(q) for q in state.revealed_questions()],
        "time_remaining": state.time_remaining,
        "last_chance_player": state.last_chance_player,
        "winner": winner.name if winner else None,
        "winner_index": state.winner_index,
        "is_tie": state.is_tie,
    }


def _player_snapshot(player: Player) -> Dict[str, Any]:
    return {
        "name": player.name,
        "lives": player.lives,
        "score": player.score,
        "is_active": player.is_active,
        "answer_time": player.answer_time,
    }


def _question_snapshot(question: Optional[Question]) -> Optional[Dict[str, Any]]:
    """The question as shown to the answering player, without its answer."""
    if question is None:
        return None
    return {
        "id": question.id,
        "prompt": question.prompt,
        "options": list(question.options),
        "wave": question.wave,
    }
