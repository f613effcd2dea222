"""Cards, the canonical deck, and the card stacks a table is built from."""

from dataclasses import dataclass, field
from enum import Enum, auto
from random import Random
from typing import Callable, Iterable, Iterator, Mapping

# Receives the name of what changed and its to_dict() snapshot.
ChangeCallback = Callable[[str, dict], None]


class Suit(Enum):
    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(Enum):
    """
    Card ranks.

    Values 2-10 are the pip value; court cards and the ace use 11-14 so every
    rank stays distinct. Use `blackjack_value` for points.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return _COURT_LABELS.get(self, str(self.value))

    @property
    def blackjack_value(self) -> int:
        """Points the rank is worth, the ace counted high."""
        if self == Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == 10

    @classmethod
    def from_value(cls, value: int) -> "Rank":
        """
        Return a rank with the given blackjack value.

        Ten-valued cards map to TEN and 11 maps to ACE.
        """
        if value == 11:
            return cls.ACE
        if 2 <= value <= 10:
            return cls(value)
        raise ValueError(f"No rank has blackjack value {value}")


_COURT_LABELS = {Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"}

def _hi_lo_tag(rank: Rank) -> int:
    if rank.blackjack_value <= 6:
        return 1
    if rank.blackjack_value <= 9:
        return 0
    return -1


HI_LO_VALUES: Mapping[Rank, int] = {rank: _hi_lo_tag(rank) for rank in Rank}


@dataclass(frozen=True, slots=True)
class Card:
    """
    Playing card.

    Rank and suit never change. Visibility is set when the card is dealt and
    flipped when a face-down card is revealed; it takes no part in equality.
    """

    rank: Rank
    suit: Suit
    visible: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}" if self.visible else "??"

    @property
    def value(self) -> int:
        return self.rank.blackjack_value

    @property
    def count_value(self) -> int:
        """Return the Hi-Lo counting value."""
        return HI_LO_VALUES[self.rank]

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    def turn(self, showing_face: bool) -> None:
        """Set which side of the card is up."""
        object.__setattr__(self, "visible", showing_face)

    def flip(self) -> None:
        """Turn a face-down card face up."""
        self.turn(True)

    def to_dict(self) -> dict:
        """Return a snapshot; face-down cards hide rank and suit."""
        if not self.visible:
            return {"visible": False}
        return {
            "rank": str(self.rank),
            "suit": self.suit.name.lower(),
            "value": self.value,
            "visible": True,
        }


class Deck:
    """The 52 canonical cards, used to seed a shoe."""

    def __init__(self) -> None:
        self._cards = [Card(rank, suit) for suit in Suit for rank in Rank]

    @staticmethod
    def random_rank(rng: Random | None = None) -> Rank:
        """Pick a rank uniformly at random."""
        return (rng or Random()).choice(list(Rank))

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)


class CardStack:
    """
    An ordered pile of cards that cards can be added to and taken from.

    The end of the list is the top of the stack.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: list[Card] = list(cards)

    def add_cards(self, cards: Iterable[Card]) -> None:
        """Put cards on top of the stack."""
        self._cards.extend(cards)

    def remove_cards(self) -> list[Card]:
        """Take every card off the stack."""
        cards = self._cards
        self._cards = []
        return cards

    def pop(self) -> Card:
        """Take the top card."""
        if not self._cards:
            raise IndexError("Cannot take a card from an empty stack")
        return self._cards.pop()

    def shuffle(self, rng: Random) -> None:
        """Shuffle in place (Fisher-Yates)."""
        rng.shuffle(self._cards)

    @property
    def cards(self) -> list[Card]:
        """Return the underlying cards, top card last."""
        return self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)


class DiscardTray(CardStack):
    """Holds the cards of finished rounds until the shoe is reset."""

    def __init__(self, on_change: ChangeCallback | None = None) -> None:
        super().__init__()
        self._on_change = on_change

    def add_cards(self, cards: Iterable[Card]) -> None:
        super().add_cards(cards)
        self._notify()

    def remove_cards(self) -> list[Card]:
        cards = super().remove_cards()
        self._notify()
        return cards

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change("discard_tray", self.to_dict())

    def to_dict(self) -> dict:
        return {"cards": len(self)}
