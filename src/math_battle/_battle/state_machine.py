# Area: Battle
"""
math_battle._battle.state_machine — Battle State Machine
========================================================

Owns one match and enforces every battle rule: attacks, the last-chance
reprieve, the end-of-sequence comparison and sudden-death tie-breaks.

The machine never drives time itself. A host calls decrement_clock()
once per second and on_time_expired() once when the countdown hits 0.
Each transition is computed on a copy of the state and committed only
when it completes, so a raised error leaves the match untouched.
"""

import copy
import logging
from typing import Any, Dict, Optional

from .._config import (
    MAX_MAIN_QUESTIONS,
    SUDDEN_DEATH_QUESTIONS,
    WRONG_ANSWER_TIME,
)
from ..errors import InvalidAnswerError, InvalidTransitionError
from ..types import Question, Skill
from .enums import BattleMode, BattleOperation
from .random_source import RandomSource, SeededRandomSource
from .selector import select_questions
from .snapshot import build_snapshot
from .state import MatchState, Player

logger = logging.getLogger("math_battle.battle")


# Operations accepted in each mode: {mode: {operation, ...}}
ALLOWED_OPERATIONS = {
    BattleMode.SETUP: {
        BattleOperation.INITIALIZE,
        BattleOperation.RESET,
    },
    BattleMode.BATTLE: {
        BattleOperation.INITIALIZE,
        BattleOperation.DECREMENT_CLOCK,
        BattleOperation.TIME_EXPIRED,
        BattleOperation.SUBMIT_ANSWER,
        BattleOperation.RESET,
    },
    BattleMode.SUDDEN_DEATH: {
        BattleOperation.INITIALIZE,
        BattleOperation.TIME_EXPIRED,
        BattleOperation.SUBMIT_ANSWER,
        BattleOperation.RESET,
    },
    BattleMode.VICTORY: {
        BattleOperation.INITIALIZE,
        BattleOperation.REMATCH,
        BattleOperation.RESET,
    },
}

# Two answers per sudden-death round
_ROUND_SIZE = 2


class BattleStateMachine:
    """
    State machine for a single two-player match.

    Usage
    -----
        machine = BattleStateMachine(rng=SeededRandomSource(7))
        machine.initialize("Ada", "Alan", skill)
        machine.submit_answer(2, time_taken_seconds=4.5)
        machine.on_time_expired()

    Every operation returns a copy of the resulting MatchState.

    Attributes:
        rng: Random source used for question selection
        main_count: Length cap of the main question sequence
        sudden_death_count: Size of the reserved sudden-death pool
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        main_count: int = MAX_MAIN_QUESTIONS,
        sudden_death_count: int = SUDDEN_DEATH_QUESTIONS,
    ):
        self.rng = rng if rng is not None else SeededRandomSource()
        self.main_count = main_count
        self.sudden_death_count = sudden_death_count
        self._state = MatchState()

    # ── Read-only views ──────────────────────────────────────

    @property
    def state(self) -> MatchState:
        """A copy of the current state; mutating it has no effect."""
        return copy.deepcopy(self._state)

    @property
    def mode(self) -> BattleMode:
        return self._state.mode

    @property
    def current_question(self) -> Optional[Question]:
        return self._state.current_question

    def snapshot(self) -> Dict[str, Any]:
        """JSON-serialisable view for the presentation layer."""
        return build_snapshot(self._state)

    def can_perform(self, operation: BattleOperation) -> bool:
        """Check if an operation is accepted in the current mode."""
        return operation in ALLOWED_OPERATIONS.get(self._state.mode, set())

    def _require(self, operation: BattleOperation) -> None:
        if not self.can_perform(operation):
            raise InvalidTransitionError(operation.value, self._state.mode.value)

    # ── Lifecycle ────────────────────────────────────────────

    def initialize(self, player1_name: str, player2_name: str, skill: Skill) -> MatchState:
        """
        Start a new match.

        Raises:
            EmptyQuestionBankError: If the skill has no usable questions.
                The previous state is kept.
        """
        self._require(BattleOperation.INITIALIZE)
        main, reserve = select_questions(
            skill,
            main_count=self.main_count,
            sudden_death_count=self.sudden_death_count,
            rng=self.rng,
        )
        state = MatchState(
            players=[
                Player(name=player1_name, is_active=True),
                Player(name=player2_name, is_active=False),
            ],
            questions=main,
            reserve=reserve,
            mode=BattleMode.BATTLE,
            time_remaining=skill.time_per_question,
            skill=skill,
        )
        self._commit(state)
        logger.info(
            f"Match started: {player1_name} vs {player2_name} on '{skill.title}' "
            f"({len(main)} questions, {len(reserve)} in reserve)"
        )
        return self.state

    def rematch(self) -> MatchState:
        """Start a new match with the same players and skill."""
        self._require(BattleOperation.REMATCH)
        players = self._state.players
        return self.initialize(players[0].name, players[1].name, self._state.skill)

    def reset(self) -> MatchState:
        """Return to the setup state. Always succeeds."""
        self._commit(MatchState())
        logger.debug("Match reset")
        return self.state

    # ── Clock ────────────────────────────────────────────────

    def decrement_clock(self) -> MatchState:
        """Count the current question's timer down by one second."""
        self._require(BattleOperation.DECREMENT_CLOCK)
        if self._state.time_remaining <= 0:
            raise InvalidTransitionError(
                BattleOperation.DECREMENT_CLOCK.value, "battle (clock already at 0)"
            )
        self._state.time_remaining -= 1
        return self.state

    def on_time_expired(self) -> MatchState:
        """
        Missed attack: no life or score change, the turn moves on.

        A pending last chance stays armed. In sudden death the missed
        answer is recorded like a wrong one.
        """
        self._require(BattleOperation.TIME_EXPIRED)
        state = copy.deepcopy(self._state)
        logger.info(
            f"Time expired for {state.current_player.name} "
            f"on question {state.current_question_index + 1}"
        )
        if state.mode is BattleMode.SUDDEN_DEATH:
            self._resolve_sudden_death(state, correct=False, time_taken=WRONG_ANSWER_TIME)
        else:
            self._advance_turn(state)
            self._check_main_sequence_end(state)
        self._commit(state)
        return self.state

    # ── Answers ──────────────────────────────────────────────

    def submit_answer(
        self, selected_option_index: int, time_taken_seconds: float = 0.0
    ) -> MatchState:
        """
        Resolve the active player's answer to the current question.

        Raises:
            InvalidTransitionError: Outside battle and sudden death
            InvalidAnswerError: Option index out of range or negative time
        """
        self._require(BattleOperation.SUBMIT_ANSWER)
        question = self._state.current_question
        if question is None:
            raise InvalidTransitionError(
                BattleOperation.SUBMIT_ANSWER.value, f"{self._state.mode.value} (no question left)"
            )
        self._validate_answer(question, selected_option_index, time_taken_seconds)

        correct = question.is_correct(selected_option_index)
        state = copy.deepcopy(self._state)
        logger.debug(
            f"{state.current_player.name} answered question {question.id} "
            f"{'correctly' if correct else 'incorrectly'} in {time_taken_seconds}s"
        )

        if state.mode is BattleMode.SUDDEN_DEATH:
            self._resolve_sudden_death(state, correct, float(time_taken_seconds))
        elif state.last_chance_player == state.current_player_index:
            self._resolve_last_chance(state, correct)
        else:
            self._resolve_attack(state, correct)

        self._commit(state)
        return self.state

    @staticmethod
    def _validate_answer(question: Question, selected: Any, time_taken: Any) -> None:
        if isinstance(selected, bool) or not isinstance(selected, int):
            raise InvalidAnswerError(selected, time_taken, "option index must be an integer")
        if not 0 <= selected < len(question.options):
            raise InvalidAnswerError(
                selected, time_taken,
                f"option index outside 0..{len(question.options) - 1}",
            )
        if not isinstance(time_taken, (int, float)) or not time_taken >= 0:
            raise InvalidAnswerError(selected, time_taken, "time taken must be >= 0")

    def _resolve_last_chance(self, state: MatchState, correct: bool) -> None:
        player = state.current_player
        if not correct:
            logger.info(f"{player.name} missed their last chance")
            self._declare_winner(state, state.opponent_index)
            return
        logger.info(f"{player.name} survived their last chance")
        player.lives = 1
        state.last_chance_player = None
        self._advance_turn(state)
        self._check_main_sequence_end(state)

    def _resolve_attack(self, state: MatchState, correct: bool) -> None:
        if correct:
            attacker = state.current_player
            opponent_index = state.opponent_index
            opponent = state.players[opponent_index]
            attacker.score += 1
            opponent.lives = max(0, opponent.lives - 1)
            logger.debug(f"{attacker.name} hits {opponent.name}: {opponent.lives} lives left")

            if opponent.lives == 0:
                if (state.last_chance_player == opponent_index
                        or opponent_index in state.last_chance_used):
                    self._declare_winner(state, state.current_player_index)
                    return
                state.last_chance_player = opponent_index
                state.last_chance_used.add(opponent_index)
                logger.info(f"{opponent.name} is on their last chance")

        self._advance_turn(state)
        self._check_main_sequence_end(state)

    def _resolve_sudden_death(self, state: MatchState, correct: bool, time_taken: float) -> None:
        state.current_player.answer_time = time_taken if correct else WRONG_ANSWER_TIME
        first, second = (p.answer_time for p in state.players)

        if first is None or second is None:
            self._advance_turn(state)
            return

        first_wrong = first == WRONG_ANSWER_TIME
        second_wrong = second == WRONG_ANSWER_TIME
        if first_wrong and second_wrong:
            self._declare_tie(state)
        elif first_wrong:
            self._declare_winner(state, 1)
        elif second_wrong:
            self._declare_winner(state, 0)
        elif first < second:
            self._declare_winner(state, 0)
        elif second < first:
            self._declare_winner(state, 1)
        else:
            logger.info(f"Sudden-death round void: both answered in {first}s")
            for player in state.players:
                player.answer_time = None
            self._advance_turn(state)
            if state.reserve_remaining < _ROUND_SIZE:
                self._declare_tie(state)

    # ── Shared transition steps ──────────────────────────────

    @staticmethod
    def _advance_turn(state: MatchState) -> None:
        state.current_question_index += 1
        state.current_player_index = 1 - state.current_player_index
        state.time_remaining = state.skill.time_per_question if state.skill else 0
        for index, player in enumerate(state.players):
            player.is_active = index == state.current_player_index

    def _check_main_sequence_end(self, state: MatchState) -> None:
        if state.mode is not BattleMode.BATTLE:
            return
        if state.current_question_index < len(state.questions):
            return

        first, second = state.players
        if first.lives != second.lives:
            self._declare_winner(state, 0 if first.lives > second.lives else 1)
        elif first.score != second.score:
            self._declare_winner(state, 0 if first.score > second.score else 1)
        else:
            self._enter_sudden_death(state)

    def _enter_sudden_death(self, state: MatchState) -> None:
        state.mode = BattleMode.SUDDEN_DEATH
        state.last_chance_player = None
        for player in state.players:
            player.answer_time = None
        logger.info("Main sequence tied: entering sudden death")
        if state.reserve_remaining < _ROUND_SIZE:
            logger.warning("Sudden-death pool too small for a round")
            self._declare_tie(state)

    @staticmethod
    def _declare_winner(state: MatchState, index: int) -> None:
        state.mode = BattleMode.VICTORY
        state.winner_index = index
        state.last_chance_player = None
        for player in state.players:
            player.is_active = False
        logger.info(f"Victory: {state.players[index].name}")

    @staticmethod
    def _declare_tie(state: MatchState) -> None:
        state.mode = BattleMode.VICTORY
        state.winner_index = None
        state.last_chance_player = None
        for player in state.players:
            player.is_active = False
        logger.info("Match ended in a tie")

    def _commit(self, state: MatchState) -> None:
        if state.mode is not self._state.mode:
            logger.debug(f"Mode: {self._state.mode.value} → {state.mode.value}")
        self._state = state
