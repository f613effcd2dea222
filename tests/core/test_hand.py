"""Tests for Hand evaluation."""

from hypothesis import given

from blackjack_core.cards import Card, Rank, Suit
from blackjack_core.hand import Hand

from conftest import hand_strategy


def make_hand(*ranks, from_split=False):
    return Hand(cards=[Card(rank, Suit.SPADES) for rank in ranks], from_split=from_split)


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self):
        """Test empty hand properties."""
        hand = Hand()
        assert len(hand) == 0
        assert hand.card_total == 0
        assert not hand.is_soft
        assert not hand.blackjack
        assert not hand.busted

    def test_hard_hand_value(self, hard_16_hand):
        """Test hard hand value calculation."""
        assert hard_16_hand.card_total == 16
        assert hard_16_hand.is_hard

    def test_soft_hand_value(self, soft_17_hand):
        """Test soft hand value calculation."""
        assert soft_17_hand.card_total == 17
        assert soft_17_hand.low_total == 7
        assert soft_17_hand.is_soft

    def test_blackjack(self, blackjack_hand):
        """Test blackjack detection."""
        assert blackjack_hand.blackjack
        assert blackjack_hand.card_total == 21
        assert blackjack_hand.finished

    def test_split_21_is_not_blackjack(self):
        """Test a split hand making 21 with two cards is an ordinary 21."""
        hand = make_hand(Rank.ACE, Rank.KING, from_split=True)
        assert hand.card_total == 21
        assert not hand.blackjack

    def test_not_blackjack_three_cards(self):
        """Test that 21 with 3+ cards is not blackjack."""
        hand = make_hand(Rank.SEVEN, Rank.SEVEN, Rank.SEVEN)
        assert hand.card_total == 21
        assert not hand.blackjack
        assert not hand.first_move

    def test_bust(self):
        """Test bust detection."""
        hand = make_hand(Rank.TEN, Rank.SIX, Rank.KING)
        assert hand.busted
        assert hand.card_total == 26

    def test_soft_to_hard_transition(self):
        """Test ace switching from 11 to 1."""
        hand = make_hand(Rank.ACE)
        assert hand.card_total == 11
        assert hand.is_soft

        hand.take_card(Card(Rank.FIVE, Suit.HEARTS))
        assert hand.card_total == 16
        assert hand.is_soft

        hand.take_card(Card(Rank.EIGHT, Suit.CLUBS))
        # Ace now counts as 1
        assert hand.card_total == 14
        assert hand.is_hard

    def test_multiple_aces(self):
        """Test only one ace counts as 11."""
        hand = make_hand(Rank.ACE, Rank.ACE)
        assert hand.card_total == 12
        assert hand.high_total == 12
        assert hand.is_soft
        assert hand.has_aces
        assert hand.has_pairs

    def test_pairs_by_value(self):
        """Test ten-valued cards of different ranks make a pair."""
        assert make_hand(Rank.KING, Rank.TEN).has_pairs
        assert not make_hand(Rank.NINE, Rank.TEN).has_pairs

    def test_hidden_cards_not_counted(self):
        """Test a face-down card is left out of the totals."""
        hand = Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS, visible=False)])
        assert hand.card_total == 11
        assert not hand.blackjack
        assert hand.has_natural
        assert hand.serialize() == "A ?"
        assert hand.serialize(show_hidden=True) == "A K"

    def test_remove_cards_resets_hand(self):
        """Test clearing a hand returns its cards and resets bet and split flag."""
        hand = make_hand(Rank.EIGHT, Rank.EIGHT, from_split=True)
        hand.bet_amount = 1000

        cards = hand.remove_cards()
        assert len(cards) == 2
        assert len(hand) == 0
        assert hand.bet_amount == 0
        assert not hand.from_split

    @given(hand_strategy())
    def test_total_invariant(self, hand):
        """Test the total is the high total unless that busts."""
        if hand.high_total <= 21:
            assert hand.card_total == hand.high_total
        else:
            assert hand.card_total == hand.low_total
        assert hand.low_total <= hand.high_total
