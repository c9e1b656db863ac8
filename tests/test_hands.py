"""Tests for hand classification and comparison.

Test coverage:
- Category detection for every category, including the wheel (A-2-3-4-5)
- Tie-break keys per category
- Total ordering: category first, then tie-break key
- Invariant violations raise ClassificationError, distinct from parse errors
"""

import random

import pytest
from bitpoke.rules import (
    Rank,
    Category,
    TieBreakKey,
    HandValue,
    EncodedHand,
    HandParseError,
    ClassificationError,
    LOW_STRAIGHT_KEY,
    categorize,
    classify,
    classify_encoded,
    compare_hands,
    deal_hands,
    describe_categories,
    encode_hand,
)


def _bits(*ranks):
    mask = 0
    for rank in ranks:
        mask |= 1 << rank
    return mask


# One representative per category, weakest first
LADDER = [
    ("2S 5H 9D JC KH", Category.HIGH_CARD),
    ("4S 4H 7D 9C KH", Category.ONE_PAIR),
    ("4S 4H 9D 9C KH", Category.TWO_PAIR),
    ("QS QH QD 3C 8H", Category.THREE_OF_A_KIND),
    ("4S 5H 6D 7C 8H", Category.STRAIGHT),
    ("2S 4S 6S 8S TS", Category.FLUSH),
    ("3S 3H 3D KC KH", Category.FULL_HOUSE),
    ("7S 7H 7D 7C 2H", Category.FOUR_OF_A_KIND),
    ("9H TH JH QH KH", Category.STRAIGHT_FLUSH),
]


class TestCategoryOrder:
    """Test the category enum is a closed, totally ordered set."""

    def test_strength_order(self):
        expected = [
            Category.HIGH_CARD,
            Category.ONE_PAIR,
            Category.TWO_PAIR,
            Category.THREE_OF_A_KIND,
            Category.STRAIGHT,
            Category.FLUSH,
            Category.FULL_HOUSE,
            Category.FOUR_OF_A_KIND,
            Category.STRAIGHT_FLUSH,
        ]
        assert sorted(Category) == expected
        for i in range(len(expected) - 1):
            assert expected[i] < expected[i + 1]

    def test_nine_categories_no_unknown(self):
        assert len(Category) == 9
        assert "UNKNOWN" not in Category.__members__

    def test_every_category_described(self):
        assert set(describe_categories()) == set(Category)


class TestCategoryDetection:
    """Test classification of one hand per category."""

    @pytest.mark.parametrize("hand,category", LADDER)
    def test_category(self, hand, category):
        assert classify(hand).category == category

    def test_low_straight(self):
        assert classify("4S 5H 2D 3C AH").category == Category.STRAIGHT

    def test_steel_wheel(self):
        assert classify("AS 2S 3S 4S 5S").category == Category.STRAIGHT_FLUSH

    def test_broadway_straight(self):
        assert classify("TS JH QD KC AH").category == Category.STRAIGHT

    def test_no_wrap_around_straight(self):
        assert classify("QS KH AD 2C 3H").category == Category.HIGH_CARD

    def test_flush_broken_by_one_suit(self):
        assert classify("2S 4S 6S 8S TS").category == Category.FLUSH
        for i in range(5):
            cards = ["2S", "4S", "6S", "8S", "TS"]
            cards[i] = cards[i][0] + "H"
            assert classify(" ".join(cards)).category == Category.HIGH_CARD

    def test_pair_beats_possible_straight_shape(self):
        # Four consecutive ranks plus a pair is not a straight
        assert classify("2S 3H 4D 5C 5H").category == Category.ONE_PAIR

    def test_four_flush_cards_and_pair(self):
        assert classify("2S 4S 6S 8S 8H").category == Category.ONE_PAIR


class TestTieBreakKeys:
    """Test the tie-break key built for each category."""

    def test_high_card_key_is_occupancy(self):
        value = classify("2S 5H 9D JC KH")
        assert value.key == TieBreakKey(_bits(Rank.TWO, Rank.FIVE, Rank.NINE, Rank.JACK, Rank.KING))

    def test_straight_key_is_occupancy(self):
        assert classify("5S 6H 4D 3C 2H").key == TieBreakKey(0b11111)

    def test_low_straight_key(self):
        assert classify("4S 5H 2D 3C AH").key == TieBreakKey(LOW_STRAIGHT_KEY)
        assert classify("AS 2S 3S 4S 5S").key == TieBreakKey(LOW_STRAIGHT_KEY)

    def test_one_pair_key(self):
        value = classify("4S 4H 7D 9C KH")
        assert value.key == TieBreakKey(Rank.FOUR, _bits(Rank.SEVEN, Rank.NINE, Rank.KING))

    def test_two_pair_key(self):
        assert classify("4S 4H 9D 9C KH").key == TieBreakKey(Rank.NINE, Rank.FOUR, Rank.KING)
        assert classify("KS 4H 4D 9C 9H").key == TieBreakKey(Rank.NINE, Rank.FOUR, Rank.KING)
        assert classify("2S AH AD 2C 3H").key == TieBreakKey(Rank.ACE, Rank.TWO, Rank.THREE)

    def test_three_of_a_kind_key(self):
        value = classify("QS QH QD 3C 8H")
        assert value.key == TieBreakKey(Rank.QUEEN, _bits(Rank.THREE, Rank.EIGHT))

    def test_full_house_key(self):
        assert classify("3S 3H 3D KC KH").key == TieBreakKey(Rank.THREE, Rank.KING)
        assert classify("KS KH KD 3C 3H").key == TieBreakKey(Rank.KING, Rank.THREE)

    def test_four_of_a_kind_key(self):
        assert classify("7S 7H 7D 7C 2H").key == TieBreakKey(Rank.SEVEN, Rank.TWO)
        assert classify("2S 2H 2D 2C AH").key == TieBreakKey(Rank.TWO, Rank.ACE)


class TestComparison:
    """Test the total order over classified hands."""

    def test_ladder_is_strictly_increasing(self):
        for (low, _), (high, _) in zip(LADDER, LADDER[1:]):
            assert compare_hands(high, low) > 0
            assert compare_hands(low, high) < 0

    def test_low_straight_loses_to_six_high_straight(self):
        wheel = classify("4S 5H 2D 3C AH")
        six_high = classify("5S 6H 4D 3C 2H")
        assert wheel.category == six_high.category == Category.STRAIGHT
        assert wheel.key < six_high.key
        assert compare_hands(wheel, six_high) < 0

    def test_higher_straight_wins(self):
        assert compare_hands("4S 5H 6D 7C 8H", "2S 3H 4D 5C 6H") > 0

    def test_same_ranks_different_suits_tie(self):
        assert compare_hands("4S 5H 6C 8D KH", "4D 5S 6S 8H KC") == 0

    def test_high_card_compares_down_the_ranks(self):
        assert compare_hands("3S 4H 6C 8D KH", "2S 4C 6S 8H KD") > 0
        assert compare_hands("2S 4H 6C 9D KH", "3S 4C 6S 8H KD") > 0

    def test_pair_kickers(self):
        assert compare_hands("4S 4H 7D 9C KH", "4D 4C 7S 9H QH") > 0
        assert compare_hands("5S 5H 2D 3C 4H", "4D 4C AS KH QH") > 0

    def test_two_pair_ordering(self):
        assert compare_hands("KS KH 2D 2C 3H", "QS QH JD JC AH") > 0
        assert compare_hands("KS KH 3D 3C 2H", "KD KC 2S 2H AH") > 0
        assert compare_hands("KS KH 3D 3C 5H", "KD KC 3S 3H 4H") > 0

    def test_three_of_a_kind_kickers(self):
        assert compare_hands("QS QH QD 3C 9H", "QS QH QD 3C 8H") > 0

    def test_full_house_triple_first(self):
        assert compare_hands("4S 4H 4D 2C 2H", "3S 3H 3D AC AH") > 0

    def test_four_of_a_kind_kicker(self):
        assert compare_hands("7S 7H 7D 7C 3H", "7S 7H 7D 7C 2H") > 0

    def test_flush_ordering(self):
        assert compare_hands("2H 7H 8H 9H AH", "3S 5S 6S 7S KS") > 0

    def test_comparison_is_antisymmetric_and_transitive(self):
        rng = random.Random(11)
        values = [classify(h) for h in deal_hands(60, rng)]
        for a in values:
            for b in values:
                assert compare_hands(a, b) == -compare_hands(b, a)
        ordered = sorted(values)
        for a, b in zip(ordered, ordered[1:]):
            assert compare_hands(a, b) <= 0


class TestDeterminism:
    """Test that classification is a pure function of the hand text."""

    def test_reclassification_is_stable(self):
        for hand in deal_hands(100, random.Random(3)):
            assert classify(hand) == classify(hand)

    def test_card_order_does_not_matter(self):
        rng = random.Random(5)
        for hand in deal_hands(50, rng):
            tokens = hand.split()
            rng.shuffle(tokens)
            assert classify(" ".join(tokens)) == classify(hand)

    def test_result_is_hand_value(self):
        value = classify("4S 5H 2D 3C AH")
        assert isinstance(value, HandValue)
        category, key = value
        assert category == Category.STRAIGHT
        assert isinstance(key, TieBreakKey)


class TestInvariantViolations:
    """Test that impossible encodings fail loudly instead of defaulting."""

    @pytest.mark.parametrize("raw_score", [0, 4, 8, 11, 15, 17, 32])
    def test_invalid_raw_score(self, raw_score):
        encoded = EncodedHand(
            rank_occupancy=0b11111,
            suit_occupancy=0b0011,
            tally=0x11111,
            raw_score=raw_score,
        )
        with pytest.raises(ClassificationError):
            categorize(encoded)
        with pytest.raises(ClassificationError):
            classify_encoded(encoded)

    def test_tally_disagreeing_with_raw_score(self):
        # Claims a pair but every tally slot holds one card
        encoded = EncodedHand(
            rank_occupancy=0b1111,
            suit_occupancy=0b0011,
            tally=0x1111,
            raw_score=6,
        )
        with pytest.raises(ClassificationError):
            classify_encoded(encoded)

    def test_error_kinds_are_distinct(self):
        assert not issubclass(ClassificationError, ValueError)
        assert not issubclass(HandParseError, ClassificationError)

    def test_malformed_hand_never_classified(self):
        with pytest.raises(HandParseError):
            classify("4S 5H 2D 3C")

    def test_valid_encoding_round_trip(self):
        encoded = encode_hand("3S 3H 3D KC KH")
        assert classify_encoded(encoded) == classify("3S 3H 3D KC KH")
