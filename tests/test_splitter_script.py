from fractions import Fraction

import pytest

from piles import Run, check_pile, pile_positions, pile_size
from scripts.deck import build_deck, generate_permutation, group_sizes
from scripts.splitter import SIDE_A, SIDE_B, PileSplitter, Transfer, other_side


def collect(transfers):
    def on_transfer(transfer):
        transfers.append(transfer)
        return True

    return on_transfer


def test_other_side_alternates():
    assert other_side(SIDE_A) == SIDE_B
    assert other_side(SIDE_B) == SIDE_A


def test_transfer_describe():
    assert Transfer(count=5, side=SIDE_A).describe() == "5 to A"


def test_median_is_exact():
    splitter = PileSplitter([[Run(5)], [Run(4)], [Run(6)]])
    assert splitter.median == Fraction(11, 2)


def test_side_of_uses_run_centre():
    splitter = PileSplitter([[Run(2, 3)], [Run(0)]])
    assert splitter.side_of(Run(2, 3)) == SIDE_A
    assert splitter.side_of(Run(0)) == SIDE_B


def test_first_tie_goes_to_a():
    splitter = PileSplitter([[Run(1)], [Run(0)], [Run(2)]])
    assert splitter.median == Fraction(3, 2)
    assert splitter.side_of(Run(1)) == SIDE_A


def test_tie_goes_opposite_the_run_decided_before_it():
    splitter = PileSplitter([[Run(2)], [Run(1)], [Run(0)]])
    assert splitter.side_of(Run(2)) == SIDE_A
    assert splitter.side_of(Run(1)) == SIDE_B
    assert splitter.side_of(Run(0)) == SIDE_B
    assert splitter.side_of(Run(1)) == SIDE_B


def test_mixed_run_sets_flip_the_fallback_side():
    splitter = PileSplitter([[Run(0), Run(3)], [Run(1, 2)]])
    assert splitter.target_side([[Run(0), Run(3)]]) == SIDE_B
    assert splitter.target_side([[Run(0), Run(3)], [Run(0), Run(3)]]) == SIDE_A
    assert splitter.target_side([[Run(0), Run(3)], [Run(0)]]) == SIDE_B


def test_split_two_reversed_cards():
    transfers = []
    result = PileSplitter([[Run(1)], [Run(0)]]).split(collect(transfers))

    assert [transfer.describe() for transfer in transfers] == ["1 to A", "1 to B"]
    assert result == ([[Run(1)]], [[Run(0)]])


def test_split_pulls_whole_run_sets_together():
    transfers = []
    pile = [[Run(3)], [Run(2)], [Run(0)], [Run(1)]]
    pile_a, pile_b = PileSplitter(pile).split(collect(transfers))

    assert [transfer.describe() for transfer in transfers] == ["2 to A", "2 to B"]
    assert pile_a == [[Run(3)], [Run(2)]]
    assert pile_b == [[Run(0, 2)]]


def test_split_peels_matching_runs_off_a_mixed_run_set():
    transfers = []
    pile = [[Run(0), Run(3)], [Run(1, 2)]]
    pile_a, pile_b = PileSplitter(pile).split(collect(transfers))

    assert transfers == [Transfer(1, SIDE_B), Transfer(1, SIDE_A), Transfer(2, SIDE_B)]
    assert pile_a == [[Run(3)]]
    assert pile_b == [[Run(0, 3)]]


def test_tie_after_a_transfer_goes_opposite_the_last_decided_run():
    transfers = []
    pile = [[Run(0)], [Run(2)], [Run(1)]]
    pile_a, pile_b = PileSplitter(pile).split(collect(transfers))

    assert [transfer.describe() for transfer in transfers] == ["1 to B", "1 to A", "1 to B"]
    assert pile_a == [[Run(2)]]
    assert pile_b == [[Run(0, 2)]]


def test_split_leaves_input_pile_untouched():
    pile = [[Run(0), Run(3)], [Run(1, 2)]]
    PileSplitter(pile).split(collect([]))
    assert pile == [[Run(0), Run(3)], [Run(1, 2)]]


def test_cancelled_split_returns_none():
    seen = []

    def cancel(transfer):
        seen.append(transfer)
        return False

    pile = [[Run(2, 3)], [Run(0)]]
    assert PileSplitter(pile).split(cancel) is None
    assert seen == [Transfer(3, SIDE_A)]
    assert pile == [[Run(2, 3)], [Run(0)]]


def test_resolved_pile_cannot_be_split():
    with pytest.raises(ValueError):
        PileSplitter([[Run(0, 4)]])
    with pytest.raises(ValueError):
        PileSplitter([])


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize("groups", [(), (3,), (5, 2, 4)])
def test_split_conserves_cards_and_separates_halves(seed, groups):
    deck = build_deck(group_sizes(24, groups), generate_permutation(24 + sum(groups), seed))
    size = pile_size(deck)
    if len(deck) == 1:
        pytest.skip("deck already in order")

    moved = []

    def on_transfer(transfer):
        moved.append(transfer.count)
        assert transfer.count > 0
        assert sum(moved) <= size
        return True

    pile_a, pile_b = PileSplitter(deck).split(on_transfer)

    assert sum(moved) == size
    assert pile_size(pile_a) + pile_size(pile_b) == size
    assert pile_a and pile_b
    assert min(pile_positions(pile_a)) > max(pile_positions(pile_b))
    check_pile(pile_a)
    check_pile(pile_b)
