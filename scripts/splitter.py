"""Split one pile into two by dealing runs either side of its midpoint."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Iterable, Optional, Sequence

from piles import Pile, Run, RunSet, extend_pile, is_resolved, pile_min, pile_size

SIDE_A = "A"
SIDE_B = "B"

LOGGER = logging.getLogger("splitter")


def other_side(side: str) -> str:
    return SIDE_B if side == SIDE_A else SIDE_A


@dataclass(frozen=True)
class Transfer:
    """One physical hand-off: move ``count`` cards onto pile ``side``."""

    count: int
    side: str

    def describe(self) -> str:
        return f"{self.count} to {self.side}"


class PileSplitter:
    """Deal an unresolved pile into piles A and B.

    Runs whose centre lies above the pile's midpoint go to A, those below go
    to B.  The midpoint is an exact fraction computed once per split.  The one
    run whose centre can sit exactly on the midpoint goes opposite the run
    decided just before it (A when it is the first run looked at), and keeps
    that side for the rest of the split.
    """

    def __init__(self, pile: Pile) -> None:
        if not pile:
            raise ValueError("Cannot split an empty pile")
        if is_resolved(pile):
            raise ValueError("Pile is already resolved")
        self.pile = pile
        self.median = pile_min(pile) + Fraction(pile_size(pile), 2)
        self._last_side: str | None = None
        self._tie_side: str | None = None

    def side_of(self, run: Run) -> str:
        below = self.median - run.start
        above = run.end - self.median
        if below < above:
            side = SIDE_A
        elif below > above:
            side = SIDE_B
        else:
            if self._tie_side is None:
                self._tie_side = SIDE_A if self._last_side is None else other_side(self._last_side)
            side = self._tie_side
        self._last_side = side
        return side

    def target_side(self, remaining: Iterable[Sequence[Run]]) -> str:
        """Return the side the next transfer goes to.

        The first run set whose runs all agree decides.  Mixed run sets in
        front of it flip the fallback used when no run set agrees.
        """

        fallback = SIDE_A
        for run_set in remaining:
            sides = {self.side_of(run) for run in run_set}
            if len(sides) == 1:
                return sides.pop()
            fallback = other_side(fallback)
        return fallback

    def next_transfer(self, remaining: deque[RunSet]) -> tuple[str, Pile]:
        """Take the next hand-off off the front of *remaining*.

        Returns ``(side, moved)``; *remaining* is left holding what is still
        in hand.
        """

        side = self.target_side(remaining)
        moved: Pile = []
        while remaining:
            run_set = remaining[0]
            matching = [run for run in run_set if self.side_of(run) == side]
            if len(matching) == len(run_set):
                moved.append(remaining.popleft())
                continue
            if matching:
                # Run set cards are interchangeable: peel the matching runs off the top.
                remaining[0] = [run for run in run_set if self.side_of(run) != side]
                moved.append(matching)
            break
        return side, moved

    def split(self, on_transfer: Callable[[Transfer], bool]) -> Optional[tuple[Pile, Pile]]:
        """Deal the whole pile, calling *on_transfer* once per hand-off.

        *on_transfer* returns ``False`` to abandon the split, in which case
        ``None`` is returned and nothing built so far is kept.
        """

        LOGGER.debug(
            "Splitting pile of %d cards around median %s", pile_size(self.pile), self.median
        )
        dealt: dict[str, Pile] = {SIDE_A: [], SIDE_B: []}
        remaining = deque(list(run_set) for run_set in self.pile)
        while remaining:
            side, moved = self.next_transfer(remaining)
            transfer = Transfer(count=pile_size(moved), side=side)
            if not on_transfer(transfer):
                LOGGER.debug("Split abandoned after %s", transfer.describe())
                return None
            for run_set in moved:
                extend_pile(dealt[side], run_set)
        return dealt[SIDE_A], dealt[SIDE_B]


__all__ = [
    "PileSplitter",
    "SIDE_A",
    "SIDE_B",
    "Transfer",
    "other_side",
]
