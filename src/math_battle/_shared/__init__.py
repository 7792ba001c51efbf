# Area: Shared
"""
Shared utilities used by the battle core and its host-side collaborators.

This package contains:
- Logging configuration
"""

from .logging_config import setup_logging, log_battle_error

__all__ = [
    "setup_logging",
    "log_battle_error",
]
