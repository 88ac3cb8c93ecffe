#!/usr/bin/env python3
"""Measure how much dealing work seeded deals need.

Plays many deals without waiting for confirmation and reports how many
instructions and card moves they took.  Useful for comparing group layouts
before sitting down with a real deck.
"""
from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from scripts.config import CONFIG_ERROR_MESSAGE, DEFAULT_GAMES, ConfigError, DealConfig
from scripts.deal import count_argument, plan, size_argument
from scripts.deck import SEED_SPACE, generate_permutation, resolve_seed

LOGGER = logging.getLogger("benchmark")

COLUMNS = ["seed", "cards", "instructions", "cards_moved", "splits", "max_pending"]
METRICS = ("instructions", "cards_moved", "splits", "max_pending")


class BenchmarkError(RuntimeError):
    """Raised when benchmark results cannot be written."""


def simulate(config: DealConfig, seed: int) -> dict[str, int]:
    """Deal one game for *seed* and return its statistics."""

    permutation = generate_permutation(config.size, seed)
    driver, _ = plan(config.group_sizes, permutation)
    return {
        "seed": seed,
        "cards": config.size,
        "instructions": len(driver.transfers),
        "cards_moved": driver.cards_moved,
        "splits": driver.splits,
        "max_pending": driver.max_pending,
    }


def run(config: DealConfig, *, games: int = DEFAULT_GAMES) -> pd.DataFrame:
    """Simulate *games* deals; the first uses the configured seed if any."""

    master_seed = resolve_seed(config.seed)
    master_rng = random.Random(master_seed)
    rows = []
    for game_index in range(games):
        if game_index == 0 and config.seed is not None:
            seed = config.seed
        else:
            seed = master_rng.randrange(0, SEED_SPACE)
        rows.append(simulate(config, seed))
        LOGGER.debug("Game %d: %s", game_index + 1, rows[-1])
    return pd.DataFrame(rows, columns=COLUMNS)


def summarise(frame: pd.DataFrame) -> dict[str, object]:
    """Return mean, median and 90th percentile for each metric in *frame*."""

    summary: dict[str, object] = {"games": int(frame.shape[0])}
    if frame.empty:
        return summary
    summary["cards"] = int(frame["cards"].iloc[0])
    for metric in METRICS:
        values = frame[metric].astype(float)
        summary[metric] = {
            "mean": float(values.mean()),
            "median": float(values.median()),
            "p90": float(np.percentile(values, 90)),
            "max": int(values.max()),
        }
    moves_per_card = frame["cards_moved"].astype(float) / frame["cards"].astype(float)
    summary["moves_per_card"] = float(moves_per_card.mean())
    return summary


def format_summary(summary: dict[str, object]) -> str:
    lines = [f"Summary: games={summary['games']}"]
    if "cards" not in summary:
        return lines[0]
    lines[0] += f" cards={summary['cards']}"
    for metric in METRICS:
        stats = summary[metric]
        lines.append(
            f"  {metric}: mean={stats['mean']:.1f} median={stats['median']:.1f} "
            f"p90={stats['p90']:.1f} max={stats['max']}"
        )
    lines.append(f"  moves per card: {summary['moves_per_card']:.2f}")
    return "\n".join(lines)


def write_frame(frame: pd.DataFrame, path: Path) -> None:
    writers = {
        ".csv": lambda: frame.to_csv(path, index=False),
        ".parquet": lambda: frame.to_parquet(path, index=False),
    }
    writer = writers.get(path.suffix.lower())
    if writer is None:
        raise BenchmarkError(f"{path}: Unsupported file extension")
    path.parent.mkdir(parents=True, exist_ok=True)
    writer()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "groups",
        nargs="*",
        type=size_argument,
        help="Sizes of groups of identical or pre-ordered cards.",
    )
    parser.add_argument(
        "--unique",
        type=count_argument,
        default=0,
        help="Number of unique cards (default: 0).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the first deal. Later deals advance the RNG deterministically.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=DEFAULT_GAMES,
        help=f"Number of deals to simulate (default: {DEFAULT_GAMES}).",
    )
    parser.add_argument(
        "--output",
        help="Write per-game rows to this CSV or Parquet file.",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit the summary as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = DealConfig(unique=args.unique, groups=tuple(args.groups), seed=args.seed)
    except ConfigError:
        parser.error(CONFIG_ERROR_MESSAGE)
    if args.games < 1:
        parser.error("--games must be at least 1")

    frame = run(config, games=args.games)

    if args.output:
        try:
            write_frame(frame, Path(args.output))
        except BenchmarkError as exc:
            LOGGER.error("%s", exc)
            return 1
        LOGGER.info("Wrote %d rows to %s", frame.shape[0], args.output)

    summary = summarise(frame)
    if args.as_json:
        print(json.dumps(summary, indent=2))
    else:
        print(format_summary(summary))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
