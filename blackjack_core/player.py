"""Players, the dealer, and how non-human seats decide."""

import logging
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Callable, Mapping
from uuid import uuid4

from blackjack_core.cards import Card, ChangeCallback
from blackjack_core.errors import InsufficientBalanceError
from blackjack_core.hand import Hand
from blackjack_core.strategy.moves import Move
from blackjack_core.strategy.rules import RuleSet

if TYPE_CHECKING:
    from blackjack_core.game.engine import Game

logger = logging.getLogger(__name__)


class PlayerStrategy(Enum):
    """How a seat makes its decisions."""

    USER_INPUT = "USER_INPUT"
    BASIC_STRATEGY = "BASIC_STRATEGY"
    BASIC_STRATEGY_DEVIATIONS = "BASIC_STRATEGY_DEVIATIONS"
    DEALER = "DEALER"


class HandWinner(Enum):
    """Who won a hand."""

    PLAYER = "player"
    DEALER = "dealer"
    PUSH = "push"


def basic_strategy_move(game: "Game", hand: Hand) -> Move:
    return game.basic_strategy.suggest(game, hand).move


def deviation_move(game: "Game", hand: Hand) -> Move:
    correct_move = game.deviation_checker.suggest(game, hand)
    if correct_move is None:
        correct_move = game.basic_strategy.suggest(game, hand)
    return correct_move.move


def dealer_move(game: "Game", hand: Hand) -> Move:
    """Draw to 17, hitting soft 17 when the table says so."""
    if hand.blackjack:
        return Move.STAND
    total = hand.card_total
    if total < 17:
        return Move.HIT
    if total == 17 and hand.is_soft and game.rules.hits_soft_17:
        return Move.HIT
    return Move.STAND


Decider = Callable[["Game", Hand], Move]

NPC_DECIDERS: Mapping[PlayerStrategy, Decider] = {
    PlayerStrategy.BASIC_STRATEGY: basic_strategy_move,
    PlayerStrategy.BASIC_STRATEGY_DEVIATIONS: deviation_move,
    PlayerStrategy.DEALER: dealer_move,
}

HandWinnerCallback = Callable[["Player", Hand, HandWinner], None]


class Player:
    """
    A seat at the table.

    Hands are allocated up front, one slot per hand the table allows; the
    first `hands_count` slots are in play.
    """

    entity_name = "player"

    def __init__(
        self,
        rules: RuleSet,
        strategy: PlayerStrategy,
        balance: int | Decimal = 10000 * 100,
        hands_max: int | None = None,
        on_change: ChangeCallback | None = None,
        on_hand_winner: HandWinnerCallback | None = None,
    ) -> None:
        self.id = uuid4().hex
        self.rules = rules
        self.strategy = strategy
        self.balance = Decimal(balance)
        self.hands_max = hands_max or rules.max_hands_allowed
        self.hands_count = 0
        self.hand_winner: dict[str, HandWinner] = {}

        self._on_change = on_change
        self._on_hand_winner = on_hand_winner
        self._hands = [Hand(player=self) for _ in range(self.hands_max)]

    @property
    def hands(self) -> list[Hand]:
        """Return the hands in play."""
        return self._hands[: self.hands_count]

    @property
    def first_hand(self) -> Hand:
        return self._hands[0]

    @property
    def is_user(self) -> bool:
        return self.strategy == PlayerStrategy.USER_INPUT

    @property
    def is_npc(self) -> bool:
        return not self.is_user

    def get_npc_input(self, game: "Game", hand: Hand) -> Move:
        """Decide a move for a seat that is not human-controlled."""
        move = NPC_DECIDERS[self.strategy](game, hand)
        logger.debug(
            "%s %s: %s (%d) -> %s",
            self.strategy.value,
            self.id[:8],
            hand.serialize(),
            hand.card_total,
            move,
        )
        return move

    def add_hand(self, bet_amount: int = 0, cards: list[Card] | None = None) -> Hand:
        """Bring the next hand slot into play, staking `bet_amount` on it."""
        if self.hands_count >= self.hands_max:
            raise IndexError(f"Player {self.id} cannot hold more than {self.hands_max} hands")

        hand = self._hands[self.hands_count]
        self.hands_count += 1
        for card in cards or []:
            hand.take_card(card)

        if bet_amount:
            self.use_chips(bet_amount, hand=hand)

        self._notify()
        return hand

    def take_card(self, card: Card, hand: Hand | None = None) -> None:
        """Give a card to a hand (the first hand by default)."""
        target = hand or self.first_hand
        target.take_card(card)

        logger.debug(
            "%s %s draws card: %s (%d)",
            self.entity_name.title(),
            self.id[:8],
            target.serialize(show_hidden=True),
            target.card_total,
        )
        self._notify()

    def remove_cards(self) -> list[Card]:
        """Take the cards from every hand in play and free the hand slots."""
        cards = [card for hand in self.hands for card in hand.remove_cards()]
        self.hands_count = 0
        self._notify()
        return cards

    def can_split(self, hand: Hand) -> bool:
        """Check whether a hand may be split right now."""
        if not hand.has_pairs or not hand.first_move:
            return False
        if self.hands_count >= self.hands_max:
            return False
        if hand.has_aces and hand.from_split:
            return self.rules.allow_resplit_aces
        return True

    def use_chips(self, amount: int, hand: Hand | None = None) -> None:
        """Move chips from the balance onto a hand's bet."""
        target = hand or self.first_hand
        if self.balance < amount:
            raise InsufficientBalanceError(self.balance, amount)

        target.bet_amount += amount
        self.balance -= amount
        logger.debug("Subtracted %s from player %s, balance %s", amount, self.id[:8], self.balance)
        self._notify()

    def add_chips(self, amount: int | Decimal) -> None:
        self.balance += Decimal(amount)
        logger.debug("Added %s to player %s, balance %s", amount, self.id[:8], self.balance)
        self._notify()

    def set_hand_winner(self, winner: HandWinner, hand: Hand | None = None, surrender: bool = False) -> None:
        """
        Settle a hand and pay it out.

        Settling is final: a hand that already has a winner is left alone.
        A win pays the blackjack ratio for a natural and even money otherwise;
        a push returns the bet; a surrender returns half of it.
        """
        hand = hand or self.first_hand
        if hand.id in self.hand_winner:
            return

        self.hand_winner[hand.id] = winner
        logger.debug(
            "Hand result %s winner: %s%s",
            self.id[:8],
            winner.value,
            " (blackjack)" if hand.blackjack else "",
        )

        bet = Decimal(hand.bet_amount)
        if winner == HandWinner.PLAYER:
            if hand.blackjack:
                ratio = self.rules.blackjack_payout_ratio
                self.add_chips(bet + bet * ratio.numerator / ratio.denominator)
            else:
                self.add_chips(bet * 2)
        elif winner == HandWinner.PUSH:
            self.add_chips(bet)
        elif surrender:
            self.add_chips(bet / 2)

        if self._on_hand_winner is not None:
            self._on_hand_winner(self, hand, winner)

    def start_round(self) -> None:
        """Forget the previous round's results."""
        self.hand_winner = {}

    def is_settled(self, hand: Hand) -> bool:
        return hand.id in self.hand_winner

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "balance": str(self.balance),
            "hands": [hand.to_dict() for hand in self.hands],
            "hand_winner": {hand_id: winner.value for hand_id, winner in self.hand_winner.items()},
        }

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.entity_name, self.to_dict())


class Dealer(Player):
    """The house: one hand, fixed drawing rule, hole card dealt face down."""

    entity_name = "dealer"

    def __init__(self, rules: RuleSet, on_change: ChangeCallback | None = None) -> None:
        super().__init__(
            rules=rules,
            strategy=PlayerStrategy.DEALER,
            balance=0,
            hands_max=1,
            on_change=on_change,
        )

    @property
    def hand(self) -> Hand:
        return self.first_hand

    @property
    def upcard(self) -> Card | None:
        cards = self.hand.cards
        return cards[0] if cards else None

    @property
    def hole_card(self) -> Card | None:
        cards = self.hand.cards
        return cards[1] if len(cards) > 1 else None

    @property
    def has_blackjack(self) -> bool:
        """Peek: does the dealer hold a natural, hole card included?"""
        return self.hand.has_natural

    def can_split(self, hand: Hand) -> bool:
        return False
