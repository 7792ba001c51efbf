# Area: Test Fixtures
"""Shared fixtures for Math Battle tests."""

import logging

import pytest

from math_battle._battle.random_source import SeededRandomSource
from math_battle._battle.state_machine import BattleStateMachine
from math_battle.types import RawQuestion, Skill

# Default bank: enough of every wave for a full draw plus a full reserve
DEFAULT_WAVES = {1: 4, 2: 4, 3: 4, 4: 8, 5: 4}


def build_skill(per_wave=None, time_per_question=25, title="Arithmetic"):
    """Build a skill with ``per_wave[w]`` questions in wave ``w``.

    Question ``n`` asks for ``n + n``; its correct value is ``str(2 * n)``.
    """
    per_wave = DEFAULT_WAVES if per_wave is None else per_wave
    questions = []
    qid = 1
    for wave, count in per_wave.items():
        for _ in range(count):
            answer = qid * 2
            questions.append(RawQuestion(
                id=qid,
                prompt=f"{qid} + {qid} = ?",
                options=[str(answer), str(answer + 1), str(answer + 2), str(answer - 1)],
                correct=0,
                wave=wave,
            ))
            qid += 1
    return Skill(title=title, time_per_question=time_per_question, questions=questions)


@pytest.fixture
def make_skill():
    """Factory for skills with a chosen wave layout."""
    return build_skill


@pytest.fixture
def skill():
    """Skill with a full main draw and a full sudden-death reserve."""
    return build_skill()


@pytest.fixture
def rng():
    """Seeded random source."""
    return SeededRandomSource(1234)


@pytest.fixture
def machine(rng, skill):
    """State machine with a started match between Ada and Alan."""
    sm = BattleStateMachine(rng=rng)
    sm.initialize("Ada", "Alan", skill)
    return sm


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so tests do not leak handlers."""
    yield
    pkg_logger = logging.getLogger("math_battle")
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.addHandler(logging.NullHandler())
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True
