"""Run bookkeeping for piles of cards dealt into final order."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence


class InvariantError(RuntimeError):
    """Raised when pile bookkeeping is internally inconsistent."""


@dataclass(frozen=True)
class Run:
    """A contiguous range of target positions that moves as one chunk."""

    start: int
    length: int = 1

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError(f"Run length must be at least 1, got {self.length}")

    @property
    def end(self) -> int:
        """Return the first position past the run."""
        return self.start + self.length

    def positions(self) -> range:
        return range(self.start, self.end)

    def __str__(self) -> str:
        if self.length == 1:
            return str(self.start)
        return f"{self.start}-{self.end - 1}"


RunSet = List[Run]
Pile = List[RunSet]


def run_set_size(run_set: Sequence[Run]) -> int:
    return sum(run.length for run in run_set)


def run_set_min(run_set: Sequence[Run]) -> int:
    return min(run.start for run in run_set)


def pile_size(pile: Sequence[Sequence[Run]]) -> int:
    return sum(run_set_size(run_set) for run_set in pile)


def pile_min(pile: Sequence[Sequence[Run]]) -> int:
    return min(run_set_min(run_set) for run_set in pile if run_set)


def pile_positions(pile: Sequence[Sequence[Run]]) -> list[int]:
    """Return every position held by *pile* in physical order."""

    return [position for run_set in pile for run in run_set for position in run.positions()]


def push(run_set: Sequence[Run], position: int) -> RunSet:
    """Return *run_set* with *position* added below its lowest run.

    Positions must arrive in descending order: *position* has to be smaller
    than everything already in *run_set*.  A position directly below the first
    run extends that run; anything lower starts a new run at the front, so
    runs built this way are never adjacent.
    """

    if not run_set:
        return [Run(position)]
    first = run_set[0]
    if position >= first.start:
        raise ValueError(
            f"Position {position} must be below the run set minimum {first.start}"
        )
    if position == first.start - 1:
        return [Run(position, first.length + 1), *run_set[1:]]
    return [Run(position), *run_set]


def _find_join(lower_set: Sequence[Run], upper_set: Sequence[Run]) -> tuple[int, int] | None:
    for lower_index, lower in enumerate(lower_set):
        for upper_index, upper in enumerate(upper_set):
            if lower.end == upper.start:
                return lower_index, upper_index
    return None


def combine(first: Pile, second: Pile) -> Pile:
    """Append *second* to *first*, coalescing runs that meet at the seam.

    Only the last run set of *first* and the first run set of *second* are
    examined.  When a run of the former ends where a run of the latter starts,
    both are replaced by a single merged run sitting between what is left of
    the two run sets.
    """

    if not first:
        return second
    if not second:
        return first

    lower_set, upper_set = first[-1], second[0]
    match = _find_join(lower_set, upper_set)
    if match is None:
        return [*first, *second]

    lower_index, upper_index = match
    lower, upper = lower_set[lower_index], upper_set[upper_index]
    merged = Run(lower.start, lower.length + upper.length)
    lower_rest = [run for index, run in enumerate(lower_set) if index != lower_index]
    upper_rest = [run for index, run in enumerate(upper_set) if index != upper_index]

    seam: Pile = []
    if lower_rest:
        seam.append(lower_rest)
    seam.append([merged])
    if upper_rest:
        seam.append(upper_rest)
    return [*first[:-1], *seam, *second[1:]]


def extend_pile(pile: Pile, run_set: RunSet) -> None:
    """Add *run_set* below *pile* in place, merging at the seam like :func:`combine`."""

    if not pile:
        pile.append(run_set)
        return
    pile[-1:] = combine([pile[-1]], [run_set])


def is_resolved(pile: Sequence[Sequence[Run]]) -> bool:
    """A pile with a single run set is already in final order."""
    return len(pile) == 1


def check_run_set(run_set: Sequence[Run]) -> None:
    if not run_set:
        raise InvariantError("Empty run set")
    ordered = sorted(run_set, key=lambda run: run.start)
    for lower, upper in zip(ordered, ordered[1:]):
        if lower.end > upper.start:
            raise InvariantError(f"Overlapping runs {lower} and {upper}")
        if lower.end == upper.start:
            raise InvariantError(f"Adjacent runs {lower} and {upper} were not merged")


def check_pile(pile: Sequence[Sequence[Run]]) -> None:
    if not pile:
        raise InvariantError("Empty pile")
    for run_set in pile:
        check_run_set(run_set)
    positions = pile_positions(pile)
    if len(set(positions)) != len(positions):
        raise InvariantError("Pile holds duplicate positions")
    if is_resolved(pile):
        runs = pile[0]
        if len(runs) != 1 or runs[0].length != len(positions):
            raise InvariantError(
                f"Resolved pile of {len(positions)} cards is not a single run"
            )


def check_partition(piles: Iterable[Sequence[Sequence[Run]]], expected: Sequence[int]) -> None:
    """Ensure *piles* hold exactly the positions in *expected*, each once."""

    held = sorted(position for pile in piles for position in pile_positions(pile))
    if held != sorted(expected):
        missing = sorted(set(expected) - set(held))
        duplicated = len(held) - len(set(held))
        raise InvariantError(
            f"Position partition broken: missing={missing} duplicates={duplicated}"
        )


__all__ = [
    "InvariantError",
    "Pile",
    "Run",
    "RunSet",
    "check_partition",
    "check_pile",
    "check_run_set",
    "combine",
    "extend_pile",
    "is_resolved",
    "pile_min",
    "pile_positions",
    "pile_size",
    "push",
    "run_set_min",
    "run_set_size",
]
