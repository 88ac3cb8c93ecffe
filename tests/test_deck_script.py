import pytest

from piles import Run, is_resolved, pile_positions
from scripts.deck import (
    build_deck,
    build_run_sets,
    generate_permutation,
    group_sizes,
    resolve_seed,
)


def test_group_sizes_lists_unique_cards_first():
    assert group_sizes(3, [4, 2]) == [1, 1, 1, 4, 2]
    assert group_sizes(0) == []


def test_generate_permutation_is_deterministic_for_a_seed():
    first = generate_permutation(52, seed=1234)
    second = generate_permutation(52, seed=1234)
    assert first == second
    assert sorted(first) == list(range(52))


def test_generate_permutation_varies_with_seed():
    assert generate_permutation(52, seed=1) != generate_permutation(52, seed=2)


def test_resolve_seed_keeps_explicit_seed():
    assert resolve_seed(42) == 42
    assert 0 <= resolve_seed(None) < 2**32


def test_build_run_sets_folds_each_group_in_descending_order():
    fragments = build_run_sets([1, 3], [2, 4, 0, 3])
    assert fragments == [
        [[Run(2)]],
        [[Run(0), Run(3, 2)]],
    ]


def test_build_deck_merges_runs_across_group_boundaries():
    deck = build_deck([1, 3], [2, 4, 0, 3])
    assert deck == [[Run(2, 3)], [Run(0)]]


def test_build_deck_for_single_card():
    deck = build_deck([1], [0])
    assert deck == [[Run(0)]]
    assert is_resolved(deck)


def test_contiguous_group_is_resolved_immediately():
    deck = build_deck([4], [0, 1, 2, 3])
    assert deck == [[Run(0, 4)]]
    assert is_resolved(deck)


def test_ascending_unique_cards_collapse_into_one_run():
    deck = build_deck([1, 1, 1, 1], [0, 1, 2, 3])
    assert deck == [[Run(0, 4)]]


def test_reversed_unique_cards_stay_separate():
    deck = build_deck([1, 1], [1, 0])
    assert deck == [[Run(1)], [Run(0)]]
    assert not is_resolved(deck)


def test_build_deck_keeps_every_position():
    permutation = generate_permutation(40, seed=9)
    deck = build_deck(group_sizes(30, [6, 4]), permutation)
    assert sorted(pile_positions(deck)) == list(range(40))


@pytest.mark.parametrize(
    "sizes,permutation",
    [
        ([1, 1], [0, 1, 2]),
        ([0, 2], [0, 1]),
        ([3], [0, 1]),
        ([-1, 3], [0, 1]),
    ],
)
def test_build_run_sets_rejects_mismatched_sizes(sizes, permutation):
    with pytest.raises(ValueError):
        build_run_sets(sizes, permutation)
