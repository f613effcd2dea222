"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator
from uuid import uuid4

from blackjack_core.cards import Card

if TYPE_CHECKING:
    from blackjack_core.player import Player


@dataclass(eq=False)
class Hand:
    """
    A blackjack hand with value calculation.

    Totals only count cards that are face up, so a dealer hand shows the
    upcard total until the hole card is revealed.
    """

    player: "Player | None" = None
    cards: list[Card] = field(default_factory=list)
    bet_amount: int = 0
    from_split: bool = False
    id: str = field(default_factory=lambda: uuid4().hex)

    def take_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def remove_card(self) -> Card:
        """Take the last card out of the hand (used when splitting)."""
        return self.cards.pop()

    def remove_cards(self) -> list[Card]:
        """Empty the hand and reset its bet, returning the cards."""
        cards = self.cards
        self.cards = []
        self.bet_amount = 0
        self.from_split = False
        return cards

    @property
    def visible_cards(self) -> list[Card]:
        return [card for card in self.cards if card.visible]

    @property
    def low_total(self) -> int:
        """Total with every ace counted as 1."""
        return sum(1 if card.is_ace else card.value for card in self.visible_cards)

    @property
    def high_total(self) -> int:
        """Total with one ace counted as 11."""
        if self.aces_count:
            return self.low_total + 10
        return self.low_total

    @property
    def aces_count(self) -> int:
        return sum(1 for card in self.visible_cards if card.is_ace)

    @property
    def card_total(self) -> int:
        """Return the best total: the high total unless it busts."""
        high = self.high_total
        return high if high <= 21 else self.low_total

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft.

        A hand is soft if it has an ace and, counting aces as 1, the total is
        11 or less, so an ace can count as 11 without busting.
        """
        return self.aces_count > 0 and self.low_total <= 11

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def first_move(self) -> bool:
        """True while the hand has not taken a card beyond the first two."""
        return len(self.cards) <= 2

    @property
    def busted(self) -> bool:
        return self.card_total > 21

    @property
    def blackjack(self) -> bool:
        """A natural: two cards totalling 21, not produced by a split."""
        return (
            len(self.cards) == 2
            and self.high_total == 21
            and not self.from_split
        )

    @property
    def has_natural(self) -> bool:
        """Like `blackjack`, but also looks at face-down cards."""
        return (
            len(self.cards) == 2
            and not self.from_split
            and {card.value for card in self.cards} == {10, 11}
        )

    @property
    def finished(self) -> bool:
        return self.busted or self.blackjack

    @property
    def has_pairs(self) -> bool:
        """Two cards of the same blackjack value (K-10 counts)."""
        return len(self.cards) == 2 and self.cards[0].value == self.cards[1].value

    @property
    def has_aces(self) -> bool:
        """A pair of aces."""
        return len(self.cards) == 2 and all(card.is_ace for card in self.cards)

    def serialize(self, show_hidden: bool = False) -> str:
        """Render ranks, e.g. 'A 10' or '? 7' for a hidden card."""
        return " ".join(
            str(card.rank) if card.visible or show_hidden else "?"
            for card in self.cards
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cards": [card.to_dict() for card in self.cards],
            "bet_amount": self.bet_amount,
            "has_pairs": self.has_pairs,
            "card_total": self.card_total,
            "blackjack": self.blackjack,
            "first_move": self.first_move,
        }

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.visible_cards)
        value_str = f"({self.card_total})"
        if self.is_soft:
            value_str = f"(soft {self.card_total})"
        if self.blackjack:
            value_str = "(BLACKJACK)"
        if self.busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, total={self.card_total})"
