# Area: Battle
"""
math_battle._battle.selector — Question selection
=================================================

Turns a skill's raw question bank into the ordered question sequence
for one match plus a reserved pool for sudden-death rounds.

Selection steps:
1. Normalize every raw question (shuffle its options, recompute the
   correct index). Questions that cannot be normalized are excluded.
2. Draw up to QUESTIONS_PER_WAVE questions from each of waves 1..5.
3. Reserve the sudden-death pool from what is left of SUDDEN_DEATH_WAVE.
4. Top the main draw up from the remaining questions when the bank is
   concentrated in a few waves, then sort it by wave.
5. Fill a short sudden-death pool from the highest remaining waves.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from .._config import (
    MAX_MAIN_QUESTIONS,
    QUESTIONS_PER_WAVE,
    SUDDEN_DEATH_QUESTIONS,
    SUDDEN_DEATH_WAVE,
    WAVES,
)
from ..errors import EmptyQuestionBankError, NormalizationError
from ..types import Question, RawQuestion, Skill
from .random_source import RandomSource, SeededRandomSource, sample, shuffle

logger = logging.getLogger("math_battle.selector")


def normalize_question(
    raw: RawQuestion, rng: RandomSource, fallback_id: int = 0
) -> Question:
    """
    Normalize one raw question.

    Args:
        raw: Question as read from the skill file
        rng: Random source used to shuffle the options
        fallback_id: Id to use when the raw question has none

    Returns:
        Question with shuffled options and recomputed correct_index

    Raises:
        NormalizationError: If the correct value is not among the
            shuffled options
    """
    question_id = raw.id if raw.id is not None else fallback_id
    options, correct_value = _resolve_options(raw, question_id)

    shuffled = shuffle(options, rng)
    try:
        correct_index = shuffled.index(correct_value)
    except ValueError:
        raise NormalizationError(
            question_id, f"correct value {correct_value!r} is not among the options"
        ) from None

    return Question(
        id=question_id,
        prompt=raw.prompt,
        options=shuffled,
        correct_index=correct_index,
        wave=raw.wave,
    )


def _resolve_options(raw: RawQuestion, question_id: int) -> Tuple[List[str], str]:
    """Return (options, correct value) from whichever convention is used."""
    if raw.options is not None:
        options, marker = raw.options, raw.correct
        index_convention = True
    elif raw.choices is not None:
        options, marker = raw.choices, raw.answer
        index_convention = False
    else:
        raise NormalizationError(question_id, "no options or choices")

    if len(options) < 2:
        raise NormalizationError(question_id, "fewer than two options")
    if marker is None:
        raise NormalizationError(question_id, "no correct answer given")

    if index_convention and isinstance(marker, int):
        if not 0 <= marker < len(options):
            raise NormalizationError(
                question_id, f"correct index {marker} outside 0..{len(options) - 1}"
            )
        return list(options), options[marker]
    return list(options), str(marker)


def normalize_bank(
    skill: Skill, rng: RandomSource
) -> Tuple[List[Question], List[str]]:
    """
    Normalize every question in a skill.

    Returns:
        (normalized questions, descriptions of excluded questions)
    """
    normalized: List[Question] = []
    excluded: List[str] = []
    for position, raw in enumerate(skill.questions, start=1):
        try:
            normalized.append(normalize_question(raw, rng, fallback_id=position))
        except NormalizationError as e:
            logger.warning(f"[{skill.title}] Excluding question: {e}")
            excluded.append(str(e))
    return normalized, excluded


def _group_by_wave(questions: List[Question]) -> Dict[int, List[Question]]:
    groups: Dict[int, List[Question]] = defaultdict(list)
    for question in questions:
        groups[question.wave].append(question)
    return groups


def select_questions(
    skill: Skill,
    main_count: int = MAX_MAIN_QUESTIONS,
    sudden_death_count: int = SUDDEN_DEATH_QUESTIONS,
    rng: Optional[RandomSource] = None,
) -> Tuple[List[Question], List[Question]]:
    """
    Select the questions for one match.

    Args:
        skill: Question bank
        main_count: Maximum length of the main sequence
        sudden_death_count: Size of the reserved sudden-death pool
        rng: Random source; a fresh unseeded one when omitted

    Returns:
        (main questions sorted by wave, sudden-death questions)

    Raises:
        EmptyQuestionBankError: If no question in waves 1..5 survives
            normalization
    """
    rng = rng if rng is not None else SeededRandomSource()

    normalized, excluded = normalize_bank(skill, rng)
    qualifying = [q for q in normalized if q.wave in WAVES]
    if not qualifying:
        raise EmptyQuestionBankError(skill.title, len(skill.questions), excluded)

    by_wave = _group_by_wave(qualifying)
    remaining: Dict[int, List[Question]] = {}
    main: List[Question] = []

    for wave in WAVES:
        pool = shuffle(by_wave.get(wave, []), rng)
        take = max(0, min(QUESTIONS_PER_WAVE, main_count - len(main)))
        main.extend(pool[:take])
        remaining[wave] = pool[take:]

    reserve = remaining[SUDDEN_DEATH_WAVE][:sudden_death_count]
    remaining[SUDDEN_DEATH_WAVE] = remaining[SUDDEN_DEATH_WAVE][sudden_death_count:]

    shortfall = main_count - len(main)
    if shortfall > 0:
        leftovers = [q for wave in WAVES for q in remaining[wave]]
        extra = sample(leftovers, shortfall, rng)
        main.extend(extra)
        taken = {id(q) for q in extra}
        for wave in WAVES:
            remaining[wave] = [q for q in remaining[wave] if id(q) not in taken]

    for wave in sorted(WAVES, reverse=True):
        if len(reserve) >= sudden_death_count:
            break
        need = sudden_death_count - len(reserve)
        reserve.extend(remaining[wave][:need])
        remaining[wave] = remaining[wave][need:]

    main.sort(key=lambda q: q.wave)

    logger.debug(
        f"[{skill.title}] Selected {len(main)} main and {len(reserve)} "
        f"sudden-death questions ({len(excluded)} excluded)"
    )
    return main, reserve
