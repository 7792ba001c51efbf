# Area: Battle
"""
math_battle._battle.enums — Battle modes and operations
=======================================================

Defines the match modes and the operations that drive the battle
state machine.
"""

from enum import Enum


class BattleMode(Enum):
    """
    Modes of a match.

    Mode transitions:
    SETUP -> BATTLE (on INITIALIZE)
    BATTLE -> BATTLE (on SUBMIT_ANSWER / TIME_EXPIRED, match continues)
    BATTLE -> SUDDEN_DEATH (main sequence ends with lives and scores tied)
    BATTLE -> VICTORY (elimination, or main sequence ends with a lives or score lead)
    SUDDEN_DEATH -> SUDDEN_DEATH (round incomplete or void)
    SUDDEN_DEATH -> VICTORY (round decided, or tie)
    VICTORY -> BATTLE (on INITIALIZE / REMATCH)
    Any mode -> SETUP (on RESET)
    """
    SETUP = "setup"
    BATTLE = "battle"
    SUDDEN_DEATH = "sudden-death"
    VICTORY = "victory"


class BattleOperation(Enum):
    """Operations a host can invoke on the state machine."""
    INITIALIZE = "initialize"
    REMATCH = "rematch"
    DECREMENT_CLOCK = "decrement_clock"
    TIME_EXPIRED = "on_time_expired"
    SUBMIT_ANSWER = "submit_answer"
    RESET = "reset"
