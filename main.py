#!/usr/bin/env python3
"""
Minesweeper field - diagnostic entry point.

Plays games with a uniformly random opener through the Gymnasium
environment.

Usage:
    python main.py demo [--rows R] [--columns C] [--mines M] [--games N]
    python main.py evaluate [--games N] [--seed S]
"""
import argparse
import logging
from typing import Dict, Optional

import numpy as np

from src.minefield import FieldConfig, GameState, MinefieldEnv


def random_action(env: MinefieldEnv, rng: np.random.Generator) -> int:
    """Pick a closed tile uniformly at random."""
    valid = np.flatnonzero(env.get_action_mask())
    return int(rng.choice(valid))


def play_game(
    env: MinefieldEnv,
    rng: np.random.Generator,
    seed: Optional[int] = None,
    show: bool = False,
) -> Dict[str, float]:
    """Play one game to the end and return its statistics."""
    env.reset(seed=seed)
    if show:
        print(env.render())

    done = False
    total_reward = 0.0
    info: Dict = {}
    while not done:
        action = random_action(env, rng)
        _, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        done = terminated or truncated

        if show:
            row, column = divmod(action, env.config.columns)
            print(f"\nOpen ({row}, {column}) -> reward {reward:+.1f}")
            print(env.render())

    return {
        "won": info["game_state"] == GameState.SOLVED.name,
        "steps": info["steps"],
        "open": info["open"],
        "reward": total_reward,
    }


def build_env(args: argparse.Namespace) -> MinefieldEnv:
    config = FieldConfig(rows=args.rows, columns=args.columns, mine_count=args.mines)
    return MinefieldEnv(config=config, render_mode="ansi")


def demo(args: argparse.Namespace) -> None:
    """Show random games move by move."""
    env = build_env(args)
    rng = np.random.default_rng(args.seed)
    print(
        f"Field: {args.rows}x{args.columns} with {args.mines} mines "
        f"({100 * args.mines / (args.rows * args.columns):.1f}% density)"
    )

    wins = 0
    for game in range(args.games):
        print(f"\n=== Game {game + 1}/{args.games} ===")
        seed = None if args.seed is None else args.seed + game
        result = play_game(env, rng, seed=seed, show=True)
        if result["won"]:
            wins += 1
            print("\n*** SOLVED ***")
        else:
            print("\n*** FAILED (opened a mine) ***")

    print(f"\n=== Final: {wins}/{args.games} solved ===")


def evaluate(args: argparse.Namespace) -> None:
    """Play many random games and report aggregate statistics."""
    env = build_env(args)
    rng = np.random.default_rng(args.seed)

    results = []
    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        results.append(play_game(env, rng, seed=seed))

    win_rate = np.mean([r["won"] for r in results])
    print(f"Games played: {args.games}")
    print(f"Win rate:     {win_rate:.1%}")
    print(f"Avg open:     {np.mean([r['open'] for r in results]):.1f}")
    print(f"Avg steps:    {np.mean([r['steps'] for r in results]):.1f}")
    print(f"Avg reward:   {np.mean([r['reward'] for r in results]):.2f}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper field - play random games for diagnostics"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    for name, help_text, default_games in (
        ("demo", "Watch random games move by move", 1),
        ("evaluate", "Report statistics over many random games", 100),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--rows", type=int, default=9, help="Number of rows")
        sub.add_argument("--columns", type=int, default=9, help="Number of columns")
        sub.add_argument("--mines", type=int, default=10, help="Number of mines")
        sub.add_argument(
            "--games", type=int, default=default_games, help="Number of games to play"
        )
        sub.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "demo":
        demo(args)
    elif args.command == "evaluate":
        evaluate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
