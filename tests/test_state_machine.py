# Area: Battle Tests
"""Tests for the Battle State Machine."""

import math

import pytest

from math_battle._battle.enums import BattleMode, BattleOperation
from math_battle._battle.random_source import SeededRandomSource
from math_battle._battle.state import MatchState
from math_battle._battle.state_machine import BattleStateMachine
from math_battle.errors import (
    EmptyQuestionBankError,
    InvalidAnswerError,
    InvalidTransitionError,
)
from math_battle.types import Skill


def answer(machine, correct=True, time_taken=1.0):
    """Submit a right or wrong answer to the current question."""
    question = machine.current_question
    index = question.correct_index
    if not correct:
        index = (index + 1) % len(question.options)
    return machine.submit_answer(index, time_taken)


def expire(machine, times=1):
    """Let the clock run out ``times`` turns in a row."""
    state = None
    for _ in range(times):
        state = machine.on_time_expired()
    return state


def arm_last_chance_for_alan(machine):
    """Ada hits three times while Alan misses: Alan ends on their last chance."""
    answer(machine, correct=True)    # q1 Ada hits
    answer(machine, correct=False)   # q2 Alan misses
    answer(machine, correct=True)    # q3 Ada hits
    answer(machine, correct=False)   # q4 Alan misses
    return answer(machine, correct=True)  # q5 Ada hits, Alan at 0


class TestInitialState:
    """Tests for the state before a match starts."""

    def test_starts_in_setup(self):
        """A new machine is in setup with default players."""
        sm = BattleStateMachine()
        state = sm.state
        assert state.mode == BattleMode.SETUP
        assert [p.lives for p in state.players] == [3, 3]
        assert [p.score for p in state.players] == [0, 0]
        assert state.players[0].is_active is True
        assert state.players[1].is_active is False
        assert state.questions == []
        assert sm.current_question is None

    def test_can_perform(self):
        """Only initialize and reset are accepted in setup."""
        sm = BattleStateMachine()
        assert sm.can_perform(BattleOperation.INITIALIZE) is True
        assert sm.can_perform(BattleOperation.RESET) is True
        assert sm.can_perform(BattleOperation.SUBMIT_ANSWER) is False
        assert sm.can_perform(BattleOperation.REMATCH) is False


class TestInitialize:
    """Tests for initialize()."""

    def test_starts_battle(self, machine, skill):
        """initialize() enters battle with fresh players and questions."""
        state = machine.state
        assert state.mode == BattleMode.BATTLE
        assert [p.name for p in state.players] == ["Ada", "Alan"]
        assert [p.lives for p in state.players] == [3, 3]
        assert state.current_question_index == 0
        assert state.current_player_index == 0
        assert state.time_remaining == skill.time_per_question
        assert len(state.questions) == 10
        assert len(state.reserve) == 4
        assert state.winner_index is None
        assert state.last_chance_player is None

    def test_uses_skill_time(self, make_skill):
        """The countdown starts at the skill's time per question."""
        sm = BattleStateMachine(rng=SeededRandomSource(1))
        state = sm.initialize("Ada", "Alan", make_skill(time_per_question=40))
        assert state.time_remaining == 40

    def test_restarts_running_match(self, machine, skill):
        """Initializing mid-match starts over."""
        answer(machine, correct=True)
        state = machine.initialize("Grace", "Linus", skill)
        assert [p.name for p in state.players] == ["Grace", "Linus"]
        assert [p.lives for p in state.players] == [3, 3]
        assert [p.score for p in state.players] == [0, 0]
        assert state.current_question_index == 0

    def test_empty_bank_keeps_previous_state(self, machine):
        """An unusable skill raises and leaves the match untouched."""
        before = machine.state
        with pytest.raises(EmptyQuestionBankError):
            machine.initialize("Grace", "Linus", Skill(title="Empty"))
        assert machine.state == before

    def test_returned_state_is_a_copy(self, machine):
        """Mutating a returned state does not affect the match."""
        state = machine.state
        state.players[0].lives = 0
        state.mode = BattleMode.VICTORY
        assert machine.state.players[0].lives == 3
        assert machine.mode == BattleMode.BATTLE


class TestAttacks:
    """Tests for normal answer resolution."""

    def test_correct_answer_hits_opponent(self, machine):
        """A correct answer scores and takes one life from the opponent."""
        state = answer(machine, correct=True)
        assert state.players[0].score == 1
        assert state.players[1].lives == 2
        assert state.players[0].lives == 3

    def test_wrong_answer_changes_nothing(self, machine):
        """A wrong answer only advances the turn."""
        state = answer(machine, correct=False)
        assert [p.lives for p in state.players] == [3, 3]
        assert [p.score for p in state.players] == [0, 0]
        assert state.current_question_index == 1

    def test_turn_advances(self, machine, skill):
        """After an answer the other player is up with a fresh clock."""
        machine.decrement_clock()
        state = answer(machine, correct=True)
        assert state.current_player_index == 1
        assert state.players[1].is_active is True
        assert state.players[0].is_active is False
        assert state.time_remaining == skill.time_per_question

    def test_exactly_one_active_player(self, machine):
        """Exactly one player is active at every step of a battle."""
        for step in range(9):
            answer(machine, correct=step % 3 == 0)
            state = machine.state
            assert state.mode == BattleMode.BATTLE
            assert sum(p.is_active for p in state.players) == 1
            assert state.players[state.current_player_index].is_active


class TestScenarios:
    """End-to-end rule scenarios."""

    def test_elimination_after_missed_last_chance(self, machine):
        """Ada hits three times; Alan misses their last chance and loses."""
        state = arm_last_chance_for_alan(machine)
        assert state.players[1].lives == 0
        assert state.last_chance_player == 1
        assert state.mode == BattleMode.BATTLE

        state = answer(machine, correct=False)
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"
        assert not any(p.is_active for p in state.players)

    def test_tied_main_sequence_enters_sudden_death(self, machine):
        """Equal lives and scores after ten questions mean sudden death."""
        state = expire(machine, 10)
        assert state.mode == BattleMode.SUDDEN_DEATH
        assert state.current_question_index == 10
        assert all(p.answer_time is None for p in state.players)
        assert machine.current_question == state.reserve[0]

    def test_sudden_death_correct_beats_wrong(self, machine):
        """A correct answer beats a wrong one once both have answered."""
        expire(machine, 10)
        state = answer(machine, correct=True, time_taken=3.2)
        assert state.mode == BattleMode.SUDDEN_DEATH
        assert state.players[0].answer_time == 3.2

        state = answer(machine, correct=False)
        assert state.mode == BattleMode.VICTORY
        assert state.winner_index == 0

    def test_sudden_death_order_does_not_matter(self, skill):
        """The winner is the same when the loser answers first."""
        sm = BattleStateMachine(rng=SeededRandomSource(5), main_count=9)
        sm.initialize("Ada", "Alan", skill)
        state = expire(sm, 9)
        assert state.mode == BattleMode.SUDDEN_DEATH
        assert state.current_player_index == 1

        answer(sm, correct=False)
        state = answer(sm, correct=True, time_taken=3.2)
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"

    def test_sudden_death_both_wrong_is_tie(self, machine):
        """Two wrong answers in sudden death end in a tie."""
        expire(machine, 10)
        answer(machine, correct=False)
        state = answer(machine, correct=False)
        assert state.mode == BattleMode.VICTORY
        assert state.winner is None
        assert state.is_tie is True

    def test_timeout_is_a_missed_attack(self, machine, skill):
        """on_time_expired() changes no lives or scores."""
        machine.decrement_clock()
        state = machine.on_time_expired()
        assert [p.lives for p in state.players] == [3, 3]
        assert [p.score for p in state.players] == [0, 0]
        assert state.current_question_index == 1
        assert state.current_player_index == 1
        assert state.time_remaining == skill.time_per_question


class TestLastChance:
    """Tests for the last-chance reprieve."""

    def test_survive_restores_one_life(self, machine):
        """A correct last-chance answer restores one life without attacking."""
        arm_last_chance_for_alan(machine)
        state = answer(machine, correct=True)
        assert state.players[1].lives == 1
        assert state.players[1].score == 0
        assert state.players[0].lives == 3
        assert state.last_chance_player is None
        assert state.mode == BattleMode.BATTLE

    def test_last_chance_only_once(self, machine):
        """Reaching zero lives a second time ends the match."""
        arm_last_chance_for_alan(machine)
        answer(machine, correct=True)    # Alan survives
        state = answer(machine, correct=True)    # Ada hits again
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"

    def test_timeout_keeps_last_chance_armed(self, machine):
        """A timeout does not resolve a pending last chance."""
        arm_last_chance_for_alan(machine)
        state = machine.on_time_expired()
        assert state.last_chance_player == 1
        assert state.players[1].lives == 0
        assert state.mode == BattleMode.BATTLE

    def test_hit_while_armed_wins(self, machine):
        """Hitting a player still on their last chance wins."""
        arm_last_chance_for_alan(machine)
        machine.on_time_expired()
        state = answer(machine, correct=True)
        assert state.mode == BattleMode.VICTORY
        assert state.winner_index == 0
        assert state.players[1].lives == 0

    def test_symmetric_for_first_player(self, machine):
        """The first player gets a last chance too."""
        answer(machine, correct=False)   # q1 Ada misses
        answer(machine, correct=True)    # q2 Alan hits
        answer(machine, correct=False)   # q3
        answer(machine, correct=True)    # q4
        answer(machine, correct=False)   # q5
        state = answer(machine, correct=True)    # q6 Ada at 0
        assert state.last_chance_player == 0
        assert state.players[0].lives == 0
        assert state.current_player_index == 0


class TestEndOfMainSequence:
    """Tests for the end-of-sequence comparison."""

    def test_more_lives_wins(self, machine):
        """The player with more lives wins after the last question."""
        answer(machine, correct=True)
        state = expire(machine, 9)
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"

    def test_higher_score_breaks_lives_tie(self, machine):
        """Equal lives fall back to the higher score."""
        arm_last_chance_for_alan(machine)    # q1..q5, Ada score 3
        answer(machine, correct=True)        # q6 Alan survives at 1 life
        answer(machine, correct=False)       # q7 Ada
        answer(machine, correct=True)        # q8 Alan hits, Ada 2
        answer(machine, correct=False)       # q9 Ada
        state = answer(machine, correct=True)    # q10 Alan hits, Ada 1
        assert [p.lives for p in state.players] == [1, 1]
        assert [p.score for p in state.players] == [3, 2]
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"

    def test_short_bank_ends_early(self, make_skill):
        """A bank with fewer than ten questions ends after its last one."""
        sm = BattleStateMachine(rng=SeededRandomSource(3))
        sm.initialize("Ada", "Alan", make_skill({1: 1, 2: 1, 3: 1}))
        sm.on_time_expired()
        sm.on_time_expired()
        answer(sm, correct=True)
        state = sm.state
        assert state.mode == BattleMode.VICTORY
        assert state.winner.name == "Ada"

    def test_tie_without_reserve(self, make_skill):
        """Sudden death with no reserve questions is an immediate tie."""
        sm = BattleStateMachine(rng=SeededRandomSource(3))
        sm.initialize("Ada", "Alan", make_skill({1: 2, 2: 2, 3: 2, 4: 2, 5: 2}))
        state = expire(sm, 10)
        assert state.mode == BattleMode.VICTORY
        assert state.is_tie is True


class TestSuddenDeath:
    """Tests for sudden-death details."""

    def test_faster_correct_answer_wins(self, machine):
        """Both correct: the smaller time wins."""
        expire(machine, 10)
        answer(machine, correct=True, time_taken=6.5)
        state = answer(machine, correct=True, time_taken=2.25)
        assert state.winner.name == "Alan"

    def test_equal_times_replay_round(self, machine):
        """Identical times void the round and use the next two questions."""
        expire(machine, 10)
        answer(machine, correct=True, time_taken=2.0)
        state = answer(machine, correct=True, time_taken=2.0)
        assert state.mode == BattleMode.SUDDEN_DEATH
        assert all(p.answer_time is None for p in state.players)
        assert state.reserve_remaining == 2
        assert machine.current_question == state.reserve[2]

    def test_equal_times_without_reserve_tie(self, machine):
        """A void round with no questions left ends in a tie."""
        expire(machine, 10)
        for _ in range(2):
            answer(machine, correct=True, time_taken=2.0)
            answer(machine, correct=True, time_taken=2.0)
        state = machine.state
        assert state.mode == BattleMode.VICTORY
        assert state.is_tie is True

    def test_timeout_counts_as_wrong(self, machine):
        """Running out of time in sudden death is a wrong answer."""
        expire(machine, 10)
        state = machine.on_time_expired()
        assert state.players[0].answer_time == -1
        state = answer(machine, correct=True, time_taken=9.0)
        assert state.winner.name == "Alan"

    def test_clock_not_driven_by_machine(self, machine):
        """decrement_clock() is rejected in sudden death."""
        expire(machine, 10)
        with pytest.raises(InvalidTransitionError):
            machine.decrement_clock()


class TestClock:
    """Tests for decrement_clock()."""

    def test_counts_down(self, machine, skill):
        """Each call removes one second."""
        machine.decrement_clock()
        state = machine.decrement_clock()
        assert state.time_remaining == skill.time_per_question - 2

    def test_rejected_at_zero(self, make_skill):
        """The clock cannot go below zero."""
        sm = BattleStateMachine(rng=SeededRandomSource(1))
        sm.initialize("Ada", "Alan", make_skill(time_per_question=2))
        sm.decrement_clock()
        sm.decrement_clock()
        with pytest.raises(InvalidTransitionError):
            sm.decrement_clock()
        assert sm.state.time_remaining == 0


class TestInvalidOperations:
    """Tests for rejected operations and atomicity."""

    def test_submit_in_setup(self):
        """Answers are rejected before a match starts."""
        sm = BattleStateMachine()
        with pytest.raises(InvalidTransitionError) as exc_info:
            sm.submit_answer(0, 1.0)
        assert exc_info.value.operation == "submit_answer"
        assert exc_info.value.mode == "setup"

    def test_operations_after_victory(self, machine):
        """A finished match only accepts lifecycle operations."""
        arm_last_chance_for_alan(machine)
        answer(machine, correct=False)
        before = machine.state
        with pytest.raises(InvalidTransitionError):
            machine.submit_answer(0, 1.0)
        with pytest.raises(InvalidTransitionError):
            machine.on_time_expired()
        with pytest.raises(InvalidTransitionError):
            machine.decrement_clock()
        assert machine.state == before

    def test_rematch_requires_victory(self, machine):
        """rematch() is only valid once the match is over."""
        with pytest.raises(InvalidTransitionError):
            machine.rematch()

    @pytest.mark.parametrize("index, time_taken", [
        (4, 1.0),
        (-1, 1.0),
        (True, 1.0),
        ("1", 1.0),
        (0, -0.5),
        (0, math.nan),
    ])
    def test_invalid_answer_leaves_state(self, machine, index, time_taken):
        """Malformed answers raise and change nothing."""
        before = machine.state
        with pytest.raises(InvalidAnswerError):
            machine.submit_answer(index, time_taken)
        assert machine.state == before


class TestLifecycle:
    """Tests for reset() and rematch()."""

    def test_reset_returns_to_setup(self, machine):
        """reset() restores the initial state."""
        answer(machine, correct=True)
        state = machine.reset()
        assert state == MatchState()
        assert machine.mode == BattleMode.SETUP

    def test_reset_is_idempotent(self, machine):
        """Resetting twice equals resetting once."""
        first = machine.reset()
        second = machine.reset()
        assert first == second == MatchState()

    def test_rematch_keeps_players(self, machine):
        """rematch() starts over with the same names."""
        arm_last_chance_for_alan(machine)
        answer(machine, correct=False)
        state = machine.rematch()
        assert state.mode == BattleMode.BATTLE
        assert [p.name for p in state.players] == ["Ada", "Alan"]
        assert [p.lives for p in state.players] == [3, 3]
        assert state.winner_index is None
        assert state.last_chance_used == set()
