"""
math_battle — Two-player Math Battle engine
===========================================

Quick Start (two simulated players):
    from math_battle import DemoPlayer, MatchRunner, load_skill
    result = MatchRunner().play(load_skill("fractions.json"),
                                "Ada", DemoPlayer(), "Alan", DemoPlayer())

Driving the state machine yourself:
    from math_battle import BattleStateMachine
    machine = BattleStateMachine()
    machine.initialize("Ada", "Alan", skill)
    machine.decrement_clock()            # once per second
    machine.submit_answer(2, 4.5)        # or machine.on_time_expired()

Recording results:
    from math_battle import apply_match_result, build_match_result
    entries = apply_match_result(entries, build_match_result(machine.state, 93.0))
"""

import logging

from ._battle import (
    BattleMode,
    BattleOperation,
    BattleStateMachine,
    MatchResult,
    MatchState,
    Player,
    RandomSource,
    SeededRandomSource,
    SequenceRandomSource,
    build_match_result,
    build_snapshot,
    normalize_question,
    select_questions,
)
from ._shared import setup_logging
from ._storage import LeaderboardRepository, init_database
from .demo_player import DemoPlayer
from .errors import (
    MathBattleError,
    EmptyQuestionBankError,
    NormalizationError,
    InvalidTransitionError,
    InvalidAnswerError,
    SkillLoadError,
)
from .leaderboard import apply_match_result, rank_entries
from .players import BattlePlayer, ConsolePlayer
from .runner import MatchRunner
from .skill_loader import load_skill, load_skill_dir
from .types import (
    AnswerChoice,
    AnswerContext,
    LeaderboardEntry,
    Question,
    QuestionView,
    RawQuestion,
    Skill,
)

logging.getLogger("math_battle").addHandler(logging.NullHandler())

__all__ = [
    # State machine
    "BattleStateMachine",
    "BattleMode",
    "BattleOperation",
    "MatchState",
    "Player",
    "build_snapshot",
    # Selection
    "select_questions",
    "normalize_question",
    "RandomSource",
    "SeededRandomSource",
    "SequenceRandomSource",
    # Results and leaderboard
    "MatchResult",
    "build_match_result",
    "apply_match_result",
    "rank_entries",
    "LeaderboardRepository",
    "init_database",
    # Host side
    "MatchRunner",
    "BattlePlayer",
    "ConsolePlayer",
    "DemoPlayer",
    "load_skill",
    "load_skill_dir",
    "setup_logging",
    # Errors
    "MathBattleError",
    "EmptyQuestionBankError",
    "NormalizationError",
    "InvalidTransitionError",
    "InvalidAnswerError",
    "SkillLoadError",
    # Types
    "RawQuestion",
    "Skill",
    "Question",
    "QuestionView",
    "LeaderboardEntry",
    "AnswerContext",
    "AnswerChoice",
]
__version__ = "1.0.0"
