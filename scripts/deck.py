"""Build the initial pile for a deal from a target permutation."""
from __future__ import annotations

import random
from typing import Sequence

from piles import Pile, RunSet, extend_pile, push

SEED_SPACE = 2**32


def group_sizes(unique: int, groups: Sequence[int] = ()) -> list[int]:
    """Return one group per unique card followed by *groups*."""

    return [1] * unique + list(groups)


def resolve_seed(seed: int | None) -> int:
    """Return *seed*, drawing a fresh one when none was given."""

    if seed is None:
        return random.randrange(0, SEED_SPACE)
    return seed


def generate_permutation(size: int, seed: int | None = None) -> list[int]:
    """Return a uniform shuffle of ``0..size-1``; equal seeds give equal orders."""

    if size < 0:
        raise ValueError("size must be non-negative")
    permutation = list(range(size))
    random.Random(seed).shuffle(permutation)
    return permutation


def build_run_sets(sizes: Sequence[int], permutation: Sequence[int]) -> list[Pile]:
    """Split *permutation* into groups and fold each into a single run set.

    Cards within a group are interchangeable, so each group's target
    positions are pushed in descending order regardless of where they sit in
    the permutation.
    """

    if any(not isinstance(size, int) or isinstance(size, bool) or size < 1 for size in sizes):
        raise ValueError("Group sizes must be positive integers")
    if sum(sizes) != len(permutation):
        raise ValueError(
            f"Group sizes sum to {sum(sizes)} but the permutation holds {len(permutation)} cards"
        )

    fragments: list[Pile] = []
    offset = 0
    for size in sizes:
        run_set: RunSet = []
        for position in sorted(permutation[offset:offset + size], reverse=True):
            run_set = push(run_set, position)
        fragments.append([run_set])
        offset += size
    return fragments


def build_deck(sizes: Sequence[int], permutation: Sequence[int]) -> Pile:
    deck: Pile = []
    for fragment in build_run_sets(sizes, permutation):
        extend_pile(deck, fragment[0])
    return deck


__all__ = [
    "SEED_SPACE",
    "build_deck",
    "build_run_sets",
    "generate_permutation",
    "group_sizes",
    "resolve_seed",
]
