"""The shoe: the live card supply, its running count and scenario shuffles."""

import logging
from random import Random
from typing import Iterable, Iterator, Mapping

from blackjack_core.cards import Card, CardStack, ChangeCallback, Deck, Rank
from blackjack_core.errors import ConfigurationError, ShoeExhaustedError
from blackjack_core.settings import GameMode
from blackjack_core.strategy.charts import ChartType, uncommon_hands
from blackjack_core.strategy.deviations import top_deviations

logger = logging.getLogger(__name__)

# When fewer than 20% of the cards are left in the shoe it needs a reset.
RESET_THRESHOLD = 0.2


def two_ranks_from_total(total: int, chart_type: ChartType) -> tuple[Rank, Rank]:
    """Pick two ranks that make the given total for a chart type."""
    if chart_type == ChartType.SPLITS:
        return Rank.from_value(total), Rank.from_value(total)
    if chart_type == ChartType.SOFT:
        return Rank.ACE, Rank.from_value(total - 11)

    first = 10 if total > 11 else 2
    return Rank.from_value(first), Rank.from_value(total - first)


class Shoe:
    """
    A multi-deck shoe for blackjack.

    Cards are dealt from the end of the list. The running count holds the
    Hi-Lo value of every face-up card dealt since the cards last came back.
    """

    def __init__(
        self,
        deck_count: int,
        mode: GameMode | str,
        rng: Random | None = None,
        hits_soft_17: bool = True,
        player_count: int = 1,
        seat: int = 0,
        deviation_count: int = 18,
        on_change: ChangeCallback | None = None,
    ) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            deck_count: Number of decks in the shoe
            mode: Training mode, selects the shuffle bias
            rng: Random number generator for shuffling
            hits_soft_17: Picks the chart used for uncommon-hand scenarios
            player_count: Seats dealt before the dealer in each pass
            seat: Zero-based seat that scenario cards are placed for
            deviation_count: How many index plays deviation training draws from
            on_change: Called with (name, snapshot) after every change
        """
        if not deck_count or deck_count < 1:
            raise ConfigurationError("Need to initialize Shoe with a positive deck_count")
        if mode is None:
            raise ConfigurationError("Need to initialize Shoe with a mode")
        try:
            self.mode = GameMode(mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown game mode: {mode!r}") from exc

        self.deck_count = deck_count
        self.hits_soft_17 = hits_soft_17
        self.player_count = player_count
        self.seat = seat
        self.deviation_count = deviation_count
        self.running_count = 0

        self._rng = rng or Random()
        self._on_change = on_change
        self._stack = CardStack(
            card for _ in range(deck_count) for card in Deck()
        )
        for card in self._stack:
            card.turn(False)
        self.shuffle()

    def shuffle(self) -> None:
        """Shuffle the cards in the shoe, then apply the mode's scenario."""
        self._stack.shuffle(self._rng)

        if self.mode == GameMode.PAIRS:
            rank = Deck.random_rank(self._rng)
            self._place_scenario(rank, rank, None)
        elif self.mode == GameMode.UNCOMMON:
            self._place_uncommon_hand()
        elif self.mode == GameMode.DEVIATION_TRAINING:
            self._place_deviation_hand()

        logger.debug("Shuffled %d cards (%s mode)", len(self), self.mode.value)
        self._notify()

    def draw_card(self, showing_face: bool = True) -> Card:
        """Deal the next card, counting it if it is dealt face up."""
        if not self._stack.cards:
            raise ShoeExhaustedError("Cannot draw from an empty shoe")

        card = self._stack.pop()
        card.turn(showing_face)
        if showing_face:
            self.running_count += card.count_value

        self._notify()
        return card

    def reveal(self, card: Card) -> None:
        """Turn a face-down card dealt from this shoe face up and count it."""
        if card.visible:
            return
        card.flip()
        self.running_count += card.count_value
        self._notify()

    def add_cards(self, cards: Iterable[Card]) -> None:
        """Return cards to the shoe; face-up cards leave the running count."""
        cards = list(cards)
        self.running_count -= sum(card.count_value for card in cards if card.visible)
        for card in cards:
            card.turn(False)
        self._stack.add_cards(cards)
        self._notify()

    def remove_cards(self) -> list[Card]:
        """Take every card out of the shoe."""
        cards = self._stack.remove_cards()
        self._notify()
        return cards

    def arrange(self, ranks_by_offset: Mapping[int, Rank]) -> None:
        """
        Put cards of the given ranks at exact offsets from the dealing end.

        Offset 0 is the next card dealt. Cards are swapped, never created or
        removed, so the shoe keeps the same cards.
        """
        cards = self._stack.cards
        fixed: set[int] = set()

        for offset, rank in sorted(ranks_by_offset.items()):
            target = len(cards) - 1 - offset
            if target < 0:
                raise ValueError(f"Offset {offset} is beyond the shoe")

            source = next(
                (
                    index
                    for index, card in enumerate(cards)
                    if card.rank == rank and index not in fixed
                ),
                None,
            )
            if source is None:
                raise ValueError(f"No {rank.name} left in the shoe to place")

            cards[target], cards[source] = cards[source], cards[target]
            fixed.add(target)

    def setup_deviation_scenario(self, player_total: int, dealer_upcard: int, is_pair: bool = False) -> None:
        """Deal the next round's seat a hand for a given deviation situation."""
        if is_pair:
            chart_type = ChartType.SPLITS
            player_total //= 2
        else:
            chart_type = ChartType.HARD
        rank1, rank2 = two_ranks_from_total(player_total, chart_type)
        self._place_scenario(rank1, rank2, Rank.from_value(dealer_upcard))

    @property
    def max_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self.deck_count * 52

    @property
    def needs_reset(self) -> bool:
        """Check whether the cards must be collected and reshuffled."""
        if self.mode.single_scenario:
            return True
        return self.remaining_fraction < RESET_THRESHOLD

    @property
    def cards_remaining(self) -> int:
        return len(self._stack)

    @property
    def remaining_fraction(self) -> float:
        return len(self._stack) / self.max_cards

    @property
    def penetration(self) -> float:
        """Return the percentage of the shoe already dealt."""
        return (1 - self.remaining_fraction) * 100

    @property
    def decks_remaining(self) -> float:
        return self.remaining_fraction * self.deck_count

    @property
    def true_count(self) -> float:
        """Return the running count per remaining deck."""
        if self.decks_remaining <= 0:
            return 0.0
        return self.running_count / self.decks_remaining

    @property
    def cards(self) -> list[Card]:
        """Return the cards in dealing order reversed (next card last)."""
        return self._stack.cards

    def to_dict(self) -> dict:
        return {
            "cards": len(self),
            "penetration": round(self.penetration, 2),
            "running_count": self.running_count,
            "true_count": round(self.true_count, 2),
        }

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._stack)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change("shoe", self.to_dict())

    def _place_scenario(self, player_rank1: Rank, player_rank2: Rank, dealer_upcard_rank: Rank | None) -> None:
        # Deal order: every seat's first card, the dealer upcard, every
        # seat's second card, then the hole card.
        placement = {
            self.seat: player_rank1,
            self.player_count + 1 + self.seat: player_rank2,
        }
        if dealer_upcard_rank is not None:
            placement[self.player_count] = dealer_upcard_rank
        self.arrange(placement)

    def _place_uncommon_hand(self) -> None:
        cells = uncommon_hands(self.deck_count, self.hits_soft_17)
        chart_type, chart = self._rng.choice(sorted(cells.items(), key=lambda item: item[0].value))
        player_total, upcards = self._rng.choice(sorted(chart.items()))
        dealer_upcard = self._rng.choice(upcards)

        rank1, rank2 = two_ranks_from_total(player_total, chart_type)
        self._place_scenario(rank1, rank2, Rank.from_value(dealer_upcard))

    def _place_deviation_hand(self) -> None:
        plays = [play for play in top_deviations(self.deviation_count) if play.player_total]
        play = self._rng.choice(plays)
        self.setup_deviation_scenario(play.player_total, play.dealer_upcard, play.is_pair)
