# Area: Shared
"""
math_battle.cli — Command-line interface
========================================

Plays one match in the terminal and records it on the leaderboard.

Usage:
    python -m math_battle --skill skills/fractions.json --player1 Ada --player2 Alan
    python -m math_battle --skill skills/fractions.json --demo --seed 7
    python -m math_battle --show-leaderboard

Defaults come from the environment (or a .env file):
    MATH_BATTLE_SKILL, MATH_BATTLE_LEADERBOARD_DB, MATH_BATTLE_LOG_FILE,
    MATH_BATTLE_LOG_LEVEL, MATH_BATTLE_SEED, DEMO_MODE=true
"""

import argparse
import sys
from typing import Any, Dict, List, Optional, Tuple

from ._battle.random_source import SeededRandomSource
from ._battle.state_machine import BattleStateMachine
from ._battle.match_result import MatchResult
from ._config import is_demo_mode, load_config, validate_config
from ._shared.logging_config import log_battle_error, setup_logging
from ._storage import LeaderboardRepository, init_database
from .demo_player import DemoPlayer
from .errors import MathBattleError
from .leaderboard import apply_match_result, format_best_time, rank_entries
from .players import BattlePlayer, ConsolePlayer
from .runner import MatchRunner
from .skill_loader import load_skill
from .types import LeaderboardEntry


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Math Battle - two-player math quiz duel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m math_battle --skill fractions.json --player1 Ada --player2 Alan
  python -m math_battle --skill fractions.json --demo --seed 7
  python -m math_battle --show-leaderboard
        """,
    )
    parser.add_argument("--skill", type=str, help="Path to a skill JSON file")
    parser.add_argument("--player1", type=str, default="Player 1", help="First player's name")
    parser.add_argument("--player2", type=str, default="Player 2", help="Second player's name")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Let two simulated players battle instead of reading answers",
    )
    parser.add_argument("--seed", type=int, help="Seed for question and demo randomness")
    parser.add_argument("--leaderboard-db", type=str, help="SQLite leaderboard file")
    parser.add_argument("--log-file", type=str, help="JSON log file")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument(
        "--show-leaderboard",
        action="store_true",
        help="Print the leaderboard and exit",
    )
    parser.add_argument("--env-file", type=str, default=".env", help="dotenv file to load")
    return parser.parse_args(argv)


def merge_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Environment config overridden by explicit CLI flags."""
    config = load_config(args.env_file)
    overrides = {
        "skill_path": args.skill,
        "leaderboard_db": args.leaderboard_db,
        "log_file": args.log_file,
        "log_level": args.log_level,
        "seed": args.seed,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    config["demo_mode"] = args.demo or is_demo_mode()
    return config


def build_players(
    config: Dict[str, Any], seed: Optional[int]
) -> Tuple[BattlePlayer, BattlePlayer]:
    """Two demo players in demo mode, otherwise two console players."""
    if config["demo_mode"]:
        return (
            DemoPlayer("demo-1", accuracy=0.75, rng=SeededRandomSource(_offset(seed, 1))),
            DemoPlayer("demo-2", accuracy=0.75, rng=SeededRandomSource(_offset(seed, 2))),
        )
    return ConsolePlayer(), ConsolePlayer()


def _offset(seed: Optional[int], offset: int) -> Optional[int]:
    return None if seed is None else seed + offset


def print_result(result: MatchResult) -> None:
    print()
    if result.is_tie:
        print(f"It's a tie between {result.player_names[0]} and {result.player_names[1]}!")
    else:
        print(f"{result.winner_name} wins!")
    for name, lives, score in zip(result.player_names, result.final_lives, result.final_scores):
        print(f"  {name}: {lives} lives, {score} points")
    print(f"  Match time: {format_best_time(result.duration_seconds)}")


def print_leaderboard(entries: List[LeaderboardEntry]) -> None:
    ranked = rank_entries(entries)
    print("\nLeaderboard")
    if not ranked:
        print("  No games played yet!")
        return
    for rank, entry in enumerate(ranked, start=1):
        print(
            f"  {rank:>2}. {entry.player_name:<20} "
            f"{entry.win_rate * 100:>3.0f}%  {entry.wins}W/{entry.losses}L  "
            f"best {format_best_time(entry.best_time)}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = merge_config(args)
    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(log_file_path=config["log_file"], level=config["log_level"])
    init_database(config["leaderboard_db"])
    repo = LeaderboardRepository(config["leaderboard_db"])

    if args.show_leaderboard:
        print_leaderboard(repo.get_all_entries())
        return 0

    if not config["skill_path"]:
        print("Error: --skill is required (or set MATH_BATTLE_SKILL)", file=sys.stderr)
        return 1

    seed = config["seed"]
    try:
        skill = load_skill(config["skill_path"])
        player1, player2 = build_players(config, seed)
        runner = MatchRunner(BattleStateMachine(rng=SeededRandomSource(seed)))
        result = runner.play(skill, args.player1, player1, args.player2, player2)
    except MathBattleError as e:
        log_battle_error(e)
        return 1

    entries = apply_match_result(repo.get_all_entries(), result)
    repo.save_entries(entries)

    print_result(result)
    print_leaderboard(entries)
    return 0
