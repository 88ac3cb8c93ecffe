#!/usr/bin/env python3
"""Interactive two-pile dealing instructions.

Prints one instruction at a time ("5 to A") and waits for a line on stdin
before printing the next.  Closing stdin stops the run.
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections import deque
from typing import Callable, Sequence, TextIO

from piles import (
    Pile,
    check_partition,
    check_pile,
    is_resolved,
    pile_positions,
    pile_size,
)
from scripts.config import CONFIG_ERROR_MESSAGE, ConfigError, DealConfig, coerce_size
from scripts.deck import build_deck, generate_permutation, resolve_seed
from scripts.splitter import PileSplitter, Transfer

LOGGER = logging.getLogger("deal")


def format_pending(sizes: Sequence[int]) -> str:
    return "Pending piles: " + " ".join(str(size) for size in sizes)


def format_resolved(size: int) -> str:
    return f"Pile of {size} cards is shuffled."


class LineConfirmer:
    """Wait for one line of input per instruction; end of input cancels."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def __call__(self) -> bool:
        return self.stream.readline() != ""


class ShuffleDriver:
    """Work through pending piles until every one is in final order."""

    def __init__(
        self,
        deck: Pile,
        *,
        confirm: Callable[[], bool],
        emit: Callable[[str], None] = print,
    ) -> None:
        self.queue: deque[Pile] = deque([deck]) if deck else deque()
        self._sizes: deque[int] = deque(pile_size(pile) for pile in self.queue)
        self.finished: list[Pile] = []
        self.transfers: list[Transfer] = []
        self.splits = 0
        self.max_pending = len(self.queue)
        self.confirm = confirm
        self.emit = emit

    @property
    def cards_moved(self) -> int:
        return sum(transfer.count for transfer in self.transfers)

    def pending_sizes(self) -> list[int]:
        return list(self._sizes)

    def _on_transfer(self, transfer: Transfer) -> bool:
        self.emit(transfer.describe())
        if not self.confirm():
            return False
        self.transfers.append(transfer)
        return True

    def step(self) -> bool:
        """Process the front pile; return ``False`` if the user cancelled."""

        pile = self.queue.popleft()
        size = self._sizes.popleft()
        if is_resolved(pile):
            check_pile(pile)
            self.finished.append(pile)
            self.emit(format_resolved(size))
            return True

        self.emit(format_pending([size, *self._sizes]))
        result = PileSplitter(pile).split(self._on_transfer)
        if result is None:
            self.queue.appendleft(pile)
            self._sizes.appendleft(size)
            return False

        pile_a, pile_b = result
        # Each split only reshuffles its own cards, so checking them locally
        # keeps the whole queue partitioned.
        check_partition([pile_a, pile_b], pile_positions(pile))
        for produced in (pile_b, pile_a):
            if produced:
                check_pile(produced)
                self.queue.appendleft(produced)
                self._sizes.appendleft(pile_size(produced))
        self.splits += 1
        self.max_pending = max(self.max_pending, len(self.queue))
        return True

    def run(self) -> bool:
        """Run until the queue is empty (``True``) or input ends (``False``)."""

        while self.queue:
            if not self.step():
                LOGGER.info(
                    "Input ended; %d piles still pending (%s cards)",
                    len(self.queue),
                    sum(self.pending_sizes()),
                )
                return False
        self.emit("")
        return True


def plan(sizes: Sequence[int], permutation: Sequence[int]) -> tuple[ShuffleDriver, list[str]]:
    """Run a whole deal without waiting for confirmation."""

    lines: list[str] = []
    driver = ShuffleDriver(
        build_deck(sizes, permutation),
        confirm=lambda: True,
        emit=lines.append,
    )
    driver.run()
    return driver, lines


def size_argument(value: str) -> int:
    try:
        return coerce_size(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def count_argument(value: str) -> int:
    try:
        return coerce_size(value, allow_zero=True)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "groups",
        nargs="*",
        type=size_argument,
        help="Sizes of groups of identical or pre-ordered cards, dealt after the unique ones.",
    )
    parser.add_argument(
        "--unique",
        type=count_argument,
        default=0,
        help="Number of unique cards at the top of the stack (default: 0).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the target order. The same seed repeats the same instructions.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None, stdin: TextIO | None = None) -> int:
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

    seed = resolve_seed(config.seed)
    LOGGER.info("Dealing %d cards with seed %d", config.size, seed)

    permutation = generate_permutation(config.size, seed)
    driver = ShuffleDriver(
        build_deck(config.group_sizes, permutation),
        confirm=LineConfirmer(stdin if stdin is not None else sys.stdin),
    )
    if not driver.run():
        return 1

    LOGGER.info(
        "Finished in %d instructions, %d cards moved", len(driver.transfers), driver.cards_moved
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
