"""
math_battle.errors — Custom exception classes
=============================================

Defines the exception hierarchy for battle errors.
Each exception stores full context for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class MathBattleError(Exception):
    """Base exception for all Math Battle package errors."""

    error_type = "MATH_BATTLE_ERROR"

    def context(self) -> Dict[str, Any]:
        return {}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
            details=None,
        )


class EmptyQuestionBankError(MathBattleError):
    """Raised when a skill has no usable questions after filtering."""

    error_type = "EMPTY_QUESTION_BANK"

    def __init__(
        self,
        skill_title: str,
        total_questions: int,
        excluded: Optional[List[str]] = None,
    ):
        self.skill_title = skill_title
        self.total_questions = total_questions
        self.excluded = excluded or []
        super().__init__(
            f"Skill '{skill_title}' has no usable questions "
            f"({total_questions} supplied, {len(self.excluded)} excluded)"
        )

    def context(self) -> Dict[str, Any]:
        return {"skill_title": self.skill_title, "total_questions": self.total_questions}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
            details=self.excluded,
        )


class NormalizationError(MathBattleError):
    """Raised when a raw question's correct answer cannot be located."""

    error_type = "NORMALIZATION_FAILURE"

    def __init__(self, question_id: Any, reason: str):
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"Question {question_id!r} cannot be normalized: {reason}")

    def context(self) -> Dict[str, Any]:
        return {"question_id": self.question_id, "reason": self.reason}


class InvalidTransitionError(MathBattleError):
    """Raised when an operation is invoked in a mode that does not support it."""

    error_type = "INVALID_TRANSITION"

    def __init__(self, operation: str, mode: str):
        self.operation = operation
        self.mode = mode
        super().__init__(f"Operation '{operation}' is not allowed in mode '{mode}'")

    def context(self) -> Dict[str, Any]:
        return {"operation": self.operation, "mode": self.mode}


class InvalidAnswerError(MathBattleError):
    """Raised when a submitted answer is malformed."""

    error_type = "INVALID_ANSWER"

    def __init__(self, selected_index: Any, time_taken: Any, reason: str):
        self.selected_index = selected_index
        self.time_taken = time_taken
        self.reason = reason
        super().__init__(f"Invalid answer ({reason})")

    def context(self) -> Dict[str, Any]:
        return {
            "selected_index": self.selected_index,
            "time_taken": self.time_taken,
            "reason": self.reason,
        }


class SkillLoadError(MathBattleError):
    """Raised when a skill file cannot be read or validated."""

    error_type = "SKILL_LOAD_FAILURE"

    def __init__(self, path: str, validation_errors: List[str]):
        self.path = path
        self.validation_errors = validation_errors
        super().__init__(f"Skill file '{path}' is invalid: {validation_errors}")

    def context(self) -> Dict[str, Any]:
        return {"path": self.path}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
            details=self.validation_errors,
        )


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
    details: Optional[List[str]],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " MATH BATTLE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    formatted = json.dumps(data, indent=indent, default=str)
    return "\n".join(" " + line for line in formatted.split("\n"))
