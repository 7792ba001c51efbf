"""
math_battle.demo_player — Simulated player
==========================================

A ready-to-use BattlePlayer that needs no human. It reads the answer
key and answers correctly with a fixed probability after a random
delay, which makes it handy for demos and for driving full matches in
tests.

Usage:
    from math_battle import DemoPlayer, MatchRunner

    runner = MatchRunner()
    result = runner.play(skill, "Ada", DemoPlayer(accuracy=0.9),
                         "Alan", DemoPlayer(accuracy=0.6))
"""

from typing import Optional

from ._battle.random_source import RandomSource, SeededRandomSource, rand_below
from .players import BattlePlayer
from .types import AnswerChoice, AnswerContext


class DemoPlayer(BattlePlayer):
    """
    Simulated player.

    Args:
        name: Display name, used only for repr/logging
        accuracy: Probability of answering correctly, 0..1
        min_delay: Fastest answer in seconds
        max_delay: Slowest answer in seconds; beyond the time limit the
            answer is treated as missed
        timeout_rate: Probability of not answering at all
        rng: Random source; a fresh unseeded one when omitted
    """

    reads_answer_key = True

    def __init__(
        self,
        name: str = "Demo",
        accuracy: float = 0.7,
        min_delay: float = 1.0,
        max_delay: float = 12.0,
        timeout_rate: float = 0.0,
        rng: Optional[RandomSource] = None,
    ):
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"accuracy must be in [0, 1], got {accuracy}")
        if not 0.0 <= timeout_rate <= 1.0:
            raise ValueError(f"timeout_rate must be in [0, 1], got {timeout_rate}")
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("delays must satisfy 0 <= min_delay <= max_delay")
        self.name = name
        self.accuracy = accuracy
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.timeout_rate = timeout_rate
        self._rng = rng if rng is not None else SeededRandomSource()

    def __repr__(self) -> str:
        return f"DemoPlayer({self.name!r}, accuracy={self.accuracy})"

    def choose_answer(self, ctx: AnswerContext) -> Optional[AnswerChoice]:
        if self.timeout_rate and self._rng.next() < self.timeout_rate:
            return None

        option_count = len(ctx["question"]["options"])
        answer_key = ctx["answer_key"]
        if answer_key is None:
            option = rand_below(self._rng, option_count)
        elif self._rng.next() < self.accuracy:
            option = answer_key
        else:
            # Any option but the right one
            option = rand_below(self._rng, option_count - 1)
            if option >= answer_key:
                option += 1

        delay = self.min_delay + self._rng.next() * (self.max_delay - self.min_delay)
        return {"option_index": option, "time_taken": round(delay, 2)}
