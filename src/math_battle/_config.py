# Area: Shared
"""
math_battle._config — Game constants and runtime configuration
==============================================================

Rule constants shared by the selector and the state machine, plus the
environment mappings used by the CLI.
"""

import os
from typing import Any, Dict

from dotenv import load_dotenv

# Battle rules
INITIAL_LIVES = 3
MAX_MAIN_QUESTIONS = 10
QUESTIONS_PER_WAVE = 2
WAVES = range(1, 6)
DEFAULT_WAVE = 1
SUDDEN_DEATH_WAVE = 4
SUDDEN_DEATH_QUESTIONS = 4
DEFAULT_TIME_PER_QUESTION = 25

# Sentinel recorded for a wrong sudden-death answer
WRONG_ANSWER_TIME = -1.0

LEADERBOARD_SIZE = 10

# Environment variable -> config key
ENV_MAPPINGS = {
    "MATH_BATTLE_LEADERBOARD_DB": "leaderboard_db",
    "MATH_BATTLE_LOG_FILE": "log_file",
    "MATH_BATTLE_LOG_LEVEL": "log_level",
    "MATH_BATTLE_SEED": "seed",
    "MATH_BATTLE_SKILL": "skill_path",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "leaderboard_db": "math_battle.db",
    "log_file": "math_battle.log",
    "log_level": "INFO",
    "seed": None,
    "skill_path": None,
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(env_file: str = ".env") -> Dict[str, Any]:
    """
    Build the runtime config from defaults, a .env file and the environment.

    Args:
        env_file: Path to the dotenv file. Missing files are ignored.

    Returns:
        Config dict with every key from DEFAULT_CONFIG
    """
    load_dotenv(env_file)
    config = dict(DEFAULT_CONFIG)
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if config_key == "seed":
                try:
                    value = int(value)
                except ValueError:
                    # Left as text for validate_config to reject
                    pass
            config[config_key] = value
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate config values.

    Raises:
        ValueError: If a key is missing or holds an unusable value
    """
    missing = [k for k in DEFAULT_CONFIG if k not in config]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
    if str(config["log_level"]).upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {config['log_level']}")
    seed = config["seed"]
    if seed is not None and not isinstance(seed, int):
        raise ValueError(f"Seed must be an integer, got {seed!r}")


def is_demo_mode() -> bool:
    """Check if demo mode is enabled via the DEMO_MODE environment variable."""
    return os.environ.get("DEMO_MODE", "").lower() in ("true", "1", "yes")
