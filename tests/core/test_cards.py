"""Tests for cards, decks and card stacks."""

import pytest
from random import Random

from blackjack_core.cards import Card, CardStack, Deck, DiscardTray, Rank, Suit


class TestCard:
    """Tests for the Card class."""

    def test_card_values(self):
        """Test blackjack values of each rank."""
        assert Card(Rank.TWO, Suit.CLUBS).value == 2
        assert Card(Rank.TEN, Suit.CLUBS).value == 10
        assert Card(Rank.JACK, Suit.CLUBS).value == 10
        assert Card(Rank.KING, Suit.CLUBS).value == 10
        assert Card(Rank.ACE, Suit.CLUBS).value == 11

    def test_hi_lo_count_values(self):
        """Test Hi-Lo tags: low cards +1, neutral 7-9, tens and aces -1."""
        assert Card(Rank.SIX, Suit.HEARTS).count_value == 1
        assert Card(Rank.EIGHT, Suit.HEARTS).count_value == 0
        assert Card(Rank.QUEEN, Suit.HEARTS).count_value == -1
        assert Card(Rank.ACE, Suit.HEARTS).count_value == -1

    def test_flip_changes_only_visibility(self):
        """Test turning a card over keeps it equal to itself."""
        card = Card(Rank.ACE, Suit.SPADES, visible=False)
        twin = Card(Rank.ACE, Suit.SPADES)
        assert card == twin

        card.flip()
        assert card.visible
        assert card.rank == Rank.ACE

    def test_rank_and_suit_are_immutable(self):
        """Test cards reject rank changes."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.TWO

    def test_hidden_card_snapshot(self):
        """Test a face-down card hides its rank in snapshots."""
        card = Card(Rank.KING, Suit.DIAMONDS, visible=False)
        assert card.to_dict() == {"visible": False}

        card.flip()
        assert card.to_dict()["rank"] == "K"
        assert card.to_dict()["value"] == 10

    def test_rank_from_value(self):
        """Test mapping blackjack values back to ranks."""
        assert Rank.from_value(11) == Rank.ACE
        assert Rank.from_value(10) == Rank.TEN
        assert Rank.from_value(4) == Rank.FOUR

        with pytest.raises(ValueError):
            Rank.from_value(12)


class TestDeck:
    """Tests for the Deck class."""

    def test_deck_has_52_unique_cards(self):
        """Test a deck holds every rank and suit once."""
        deck = Deck()
        assert len(deck) == 52
        assert len({(card.rank, card.suit) for card in deck}) == 52

    def test_random_rank_is_reproducible(self):
        """Test random rank picks follow the generator."""
        assert Deck.random_rank(Random(7)) == Deck.random_rank(Random(7))


class TestCardStack:
    """Tests for CardStack and DiscardTray."""

    def test_pop_takes_top_card(self):
        """Test the end of the list is the top of the stack."""
        bottom = Card(Rank.TWO, Suit.CLUBS)
        top = Card(Rank.ACE, Suit.CLUBS)
        stack = CardStack([bottom, top])

        assert stack.pop() == top
        assert len(stack) == 1

    def test_pop_empty_stack(self):
        """Test popping an empty stack raises."""
        with pytest.raises(IndexError):
            CardStack().pop()

    def test_remove_cards_empties_stack(self):
        """Test removing every card."""
        stack = CardStack(Deck())
        cards = stack.remove_cards()
        assert len(cards) == 52
        assert len(stack) == 0

    def test_discard_tray_notifies(self):
        """Test the tray reports its size after every change."""
        changes = []
        tray = DiscardTray(on_change=lambda name, value: changes.append((name, value)))

        tray.add_cards([Card(Rank.TWO, Suit.CLUBS), Card(Rank.TEN, Suit.CLUBS)])
        tray.remove_cards()

        assert changes == [
            ("discard_tray", {"cards": 2}),
            ("discard_tray", {"cards": 0}),
        ]
