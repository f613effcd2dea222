"""Pytest fixtures for blackjack trainer tests."""

from random import Random
from types import SimpleNamespace

import pytest
from hypothesis import strategies as st

from blackjack_core.cards import Card, Rank, Suit
from blackjack_core.game import DecisionRequest, Game, GameStep
from blackjack_core.hand import Hand
from blackjack_core.player import Dealer, Player, PlayerStrategy
from blackjack_core.settings import GameSettings
from blackjack_core.strategy import BasicStrategyChecker, Move, RuleSet


class ScriptedInputReader:
    """Answers decision requests with a fixed list of moves, in order."""

    def __init__(self, moves=()):
        self.moves = list(moves)
        self.requests: list[DecisionRequest] = []

    def read_input(self, request: DecisionRequest):
        self.requests.append(request)
        if not self.moves:
            raise AssertionError(f"Unexpected decision request: {request.step} for {request.hand.serialize()}")
        return self.moves.pop(0)


class AsyncScriptedInputReader(ScriptedInputReader):
    """Async flavour of the scripted reader, for `Game.run_async`."""

    async def read_input(self, request: DecisionRequest):
        return super().read_input(request)


def default_move(request: DecisionRequest) -> Move:
    """A move every step accepts: stand, decline insurance, next game."""
    if request.step == GameStep.ASK_INSURANCE:
        return Move.NO_INSURANCE
    if request.step == GameStep.GAME_RESULT:
        return Move.NEXT_GAME
    return Move.STAND


def stack_shoe(game: Game, player: list[Rank] = (), dealer: list[Rank] = (), draws: list[Rank] = ()) -> None:
    """
    Fix the next cards of a single-seat game.

    Deal order is player, dealer upcard, player, dealer hole card; `draws`
    and any extra player cards follow in order.
    """
    player = list(player)
    dealer = list(dealer)
    offsets = {}
    for offset, rank in zip((0, 2), player[:2]):
        offsets[offset] = rank
    for offset, rank in zip((1, 3), dealer[:2]):
        offsets[offset] = rank
    for offset, rank in enumerate(player[2:] + list(draws), start=4):
        offsets[offset] = rank
    game.shoe.arrange(offsets)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def make_game(rng):
    """
    Build a game from keyword options.

    `rules` is a dict of RuleSet fields, `moves` feeds a scripted reader, and
    the remaining options go to GameSettings. New games auto-confirm.
    """

    def _make(moves=(), rules=None, reader=None, **options):
        options.setdefault("auto_confirm_new_game", True)
        settings = GameSettings(rules=RuleSet(**(rules or {})), **options)
        return Game(settings, input_reader=reader or ScriptedInputReader(moves), rng=rng)

    return _make


@pytest.fixture
def game(make_game):
    """A new single-seat game."""
    return make_game()


@pytest.fixture
def situation(rules):
    """
    Build a table view and a hand for strategy checks without a round.

    Returns (game, hand) where game exposes what the advisors read.
    """

    def _make(player_ranks, upcard, step=GameStep.WAITING_FOR_MOVE, true_count=0.0, table_rules=None):
        table_rules = table_rules or rules
        player = Player(table_rules, PlayerStrategy.USER_INPUT)
        hand = player.add_hand(cards=[Card(rank, Suit.SPADES) for rank in player_ranks])
        dealer = Dealer(table_rules)
        dealer.add_hand(cards=[Card(upcard, Suit.HEARTS)])
        game = SimpleNamespace(
            is_asking_insurance=step == GameStep.ASK_INSURANCE,
            is_waiting_for_move=step == GameStep.WAITING_FOR_MOVE,
            dealer=dealer,
            rules=table_rules,
            shoe=SimpleNamespace(true_count=true_count),
            basic_strategy=BasicStrategyChecker(table_rules),
        )
        return game, hand

    return _make


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)])


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)])


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=[Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)])


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    return Hand(cards=draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards)))
