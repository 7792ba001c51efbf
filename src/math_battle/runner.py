"""
math_battle.runner — Match driver
=================================

The MatchRunner plays the host role around a BattleStateMachine: it asks
the active player for an answer, runs the one-second clock down for the
time the answer took, fires on_time_expired() exactly once when the
clock runs out, and hands back a MatchResult once the match is decided.

The clock is simulated from the time each player reports, so demo
matches finish instantly and are fully reproducible.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional, Sequence

from ._battle.enums import BattleMode
from ._battle.match_result import MatchResult, build_match_result
from ._battle.state import MatchState
from ._battle.state_machine import BattleStateMachine
from .players import BattlePlayer
from .types import AnswerContext, Skill

logger = logging.getLogger("math_battle.runner")

Observer = Callable[[Dict[str, Any]], None]


class MatchRunner:
    """
    Drives one match at a time to completion.

    Usage
    -----
        from math_battle import DemoPlayer, MatchRunner, load_skill

        runner = MatchRunner()
        result = runner.play(
            load_skill("skills/fractions.json"),
            "Ada", DemoPlayer(accuracy=0.9),
            "Alan", DemoPlayer(accuracy=0.6),
        )
        print(result.winner_name)
    """

    def __init__(
        self,
        machine: Optional[BattleStateMachine] = None,
        observer: Optional[Observer] = None,
    ):
        self.machine = machine if machine is not None else BattleStateMachine()
        self.observer = observer
        self.elapsed_seconds = 0.0

    def play(
        self,
        skill: Skill,
        player1_name: str,
        player1: BattlePlayer,
        player2_name: str,
        player2: BattlePlayer,
    ) -> MatchResult:
        """Play a full match and return its result."""
        agents = (player1, player2)
        self.machine.initialize(player1_name, player2_name, skill)
        self.elapsed_seconds = 0.0
        self._notify()

        while self.machine.mode is not BattleMode.VICTORY:
            self._play_turn(agents)
            self._notify()

        result = build_match_result(self.machine.state, self.elapsed_seconds)
        if result.is_tie:
            logger.info(f"Match over: tie after {self.elapsed_seconds:.1f}s")
        else:
            logger.info(
                f"Match over: {result.winner_name} beat {result.loser_name} "
                f"in {self.elapsed_seconds:.1f}s"
            )
        return result

    def _play_turn(self, agents: Sequence[BattlePlayer]) -> None:
        state = self.machine.state
        agent = agents[state.current_player_index]
        limit = state.time_remaining
        choice = agent.choose_answer(build_answer_context(state, agent.reads_answer_key))

        if choice is None or choice["time_taken"] >= limit:
            self._run_clock(state.mode, limit)
            self.elapsed_seconds += limit
            self.machine.on_time_expired()
            return

        self._run_clock(state.mode, int(choice["time_taken"]))
        self.elapsed_seconds += choice["time_taken"]
        self.machine.submit_answer(choice["option_index"], choice["time_taken"])

    def _run_clock(self, mode: BattleMode, seconds: int) -> None:
        # Only the main battle has a machine-side countdown
        if mode is not BattleMode.BATTLE:
            return
        for _ in range(seconds):
            self.machine.decrement_clock()

    def _notify(self) -> None:
        if self.observer is not None:
            self.observer(self.machine.snapshot())


def build_answer_context(state: MatchState, include_answer_key: bool = False) -> AnswerContext:
    """Build the context handed to the active player."""
    question = state.current_question
    player = state.current_player
    opponent = state.players[state.opponent_index]
    return {
        "player_name": player.name,
        "opponent_name": opponent.name,
        "mode": state.mode.value,
        "question": {
            "id": question.id,
            "prompt": question.prompt,
            "options": list(question.options),
            "wave": question.wave,
        },
        "question_number": state.current_question_index + 1,
        "time_limit": state.time_remaining,
        "lives": player.lives,
        "opponent_lives": opponent.lives,
        "last_chance": state.last_chance_player == state.current_player_index,
        "answer_key": question.correct_index if include_answer_key else None,
    }
