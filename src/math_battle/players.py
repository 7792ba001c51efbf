"""
math_battle.players — Player agents
===================================

Subclass BattlePlayer and implement choose_answer(). The match runner
calls it once per turn with an AnswerContext and expects an
AnswerChoice back, or None when the player lets the clock run out.
"""

import sys
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

from .types import AnswerChoice, AnswerContext


class BattlePlayer(ABC):
    """
    Abstract base class for anything that answers battle questions.

    Attributes:
        reads_answer_key: When True the runner fills ctx["answer_key"].
            Only simulated players should set this.
    """

    reads_answer_key: bool = False

    @abstractmethod
    def choose_answer(self, ctx: AnswerContext) -> Optional[AnswerChoice]:
        """
        Pick an option for the current question.

        Parameters
        ----------
        ctx : AnswerContext
            {
                "player_name": str,         # e.g. "Ada"
                "opponent_name": str,       # e.g. "Alan"
                "mode": str,                # "battle" or "sudden-death"
                "question": {
                    "id": int, "prompt": str,
                    "options": [str, ...], "wave": int,
                },
                "question_number": int,     # 1-based
                "time_limit": int,          # seconds
                "lives": int,
                "opponent_lives": int,
                "last_chance": bool,
                "answer_key": int | None,
            }

        Returns
        -------
        AnswerChoice or None
            {"option_index": int, "time_taken": float}, or None when no
            answer was given before the time limit.
        """


class ConsolePlayer(BattlePlayer):
    """Reads answers from a terminal. An empty line skips the turn."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: TextIO = sys.stdout,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._input = input_func
        self._output = output
        self._clock = clock

    def choose_answer(self, ctx: AnswerContext) -> Optional[AnswerChoice]:
        question = ctx["question"]
        banner = "LAST CHANCE! " if ctx["last_chance"] else ""
        print(
            f"\n{banner}{ctx['player_name']} (lives {ctx['lives']}) - "
            f"question {ctx['question_number']}, {ctx['time_limit']}s",
            file=self._output,
        )
        print(f"  {question['prompt']}", file=self._output)
        for number, option in enumerate(question["options"], start=1):
            print(f"    {number}) {option}", file=self._output)

        started = self._clock()
        while True:
            raw = self._input("  Your answer: ").strip()
            elapsed = self._clock() - started
            if not raw:
                return None
            if raw.isdigit() and 1 <= int(raw) <= len(question["options"]):
                return {"option_index": int(raw) - 1, "time_taken": round(elapsed, 2)}
            print(
                f"  Enter a number between 1 and {len(question['options'])}",
                file=self._output,
            )
