"""
math_battle.skill_loader — Skill file loading
=============================================

Reads skill JSON files into validated Skill models. A skill file looks
like:

    {
        "title": "Fractions",
        "description": "Add, subtract, multiply and divide fractions",
        "timePerQuestion": 25,
        "questions": [
            {"id": 1, "question": "1/2 + 1/4 = ?",
             "options": ["3/4", "2/6", "1/8", "2/4"], "correct": 0, "wave": 1}
        ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, Union

from pydantic import ValidationError

from .errors import SkillLoadError
from .types import Skill

logger = logging.getLogger("math_battle.skills")


def load_skill(path: Union[str, Path]) -> Skill:
    """
    Load one skill file.

    Raises:
        SkillLoadError: If the file is missing, is not UTF-8 JSON, or does
            not match the Skill schema
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SkillLoadError(str(path), [f"cannot read file: {e}"]) from e
    except UnicodeDecodeError as e:
        raise SkillLoadError(str(path), [f"invalid encoding: {e}"]) from e
    except json.JSONDecodeError as e:
        raise SkillLoadError(str(path), [f"invalid JSON: {e}"]) from e

    try:
        skill = Skill.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise SkillLoadError(str(path), errors) from e

    logger.debug(f"Loaded skill '{skill.title}' with {len(skill.questions)} questions")
    return skill


def load_skill_dir(directory: Union[str, Path]) -> Dict[str, Skill]:
    """
    Load every ``*.json`` skill in a directory, keyed by file stem.

    Files that fail to load are logged and skipped.
    """
    skills: Dict[str, Skill] = {}
    for path in sorted(Path(directory).glob("*.json")):
        try:
            skills[path.stem] = load_skill(path)
        except SkillLoadError as e:
            logger.warning(f"Skipping {path.name}: {e.validation_errors}")
    return skills
