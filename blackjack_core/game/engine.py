"""Blackjack game engine with state machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from random import Random
from typing import Any, Awaitable, Callable, Generator, Protocol
from uuid import uuid4

from transitions import Machine

from blackjack_core.cards import Card, DiscardTray
from blackjack_core.errors import ConfigurationError, InvalidBetError
from blackjack_core.game.events import EventEmitter, EventType, GameEvent
from blackjack_core.game.records import HandResultRecord, MoveRecord
from blackjack_core.game.state import GameState, GameStep
from blackjack_core.hand import Hand
from blackjack_core.player import Dealer, HandWinner, Player
from blackjack_core.settings import GameSettings
from blackjack_core.shoe import Shoe
from blackjack_core.strategy.basic import BasicStrategyChecker
from blackjack_core.strategy.deviations import DeviationAdvisor, HiLoDeviationChecker
from blackjack_core.strategy.moves import INSURANCE_MOVES, PLAY_MOVES, HintResult, Move
from blackjack_core.strategy.rules import RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionRequest:
    """The game is waiting for the human player to decide for `hand`."""

    step: GameStep
    hand: Hand
    accepted: frozenset[Move]


# Round generators yield decision requests and are sent the player's moves.
RoundGenerator = Generator[DecisionRequest, "Move | str | None", None]


class InputReader(Protocol):
    """Supplies the human player's decisions; None means "not decided yet"."""

    def read_input(self, request: DecisionRequest) -> Move | str | None:
        ...


class AsyncInputReader(Protocol):
    def read_input(self, request: DecisionRequest) -> Awaitable[Move | str | None]:
        ...


def _as_move(value: Move | str | None) -> Move | None:
    if value is None or isinstance(value, Move):
        return value
    try:
        return Move(value)
    except ValueError:
        logger.debug("Ignoring unknown move %r", value)
        return None


class Game:
    """
    Blackjack game engine using a state machine.

    A round is a generator (`play_round`) that suspends whenever the human
    player has to decide and resumes with the move sent in. `run` and
    `run_async` drive one round with an input reader. Observers follow the
    game through `events`.
    """

    # State machine states
    STATES = [step.machine_state for step in GameStep]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": "*", "dest": "waiting_for_move"},
        {"trigger": "offer_insurance", "source": ["waiting_for_move", "ask_insurance"], "dest": "ask_insurance"},
        {"trigger": "await_move", "source": ["waiting_for_move", "ask_insurance"], "dest": "waiting_for_move"},
        {"trigger": "finish_round", "source": ["waiting_for_move", "ask_insurance"], "dest": "game_result"},
    ]

    def __init__(
        self,
        settings: GameSettings | None = None,
        input_reader: InputReader | AsyncInputReader | None = None,
        deviation_checker: DeviationAdvisor | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new blackjack game.

        Args:
            settings: Table rules and session options (defaults if not provided)
            input_reader: Asked for the human player's moves by `run`/`run_async`
            deviation_checker: Count-based advisor consulted before basic strategy
            rng: Random number generator for reproducible shuffles
        """
        self.settings = settings or GameSettings()
        self.input_reader = input_reader
        self.events = EventEmitter(enabled=not self.settings.disable_events)

        self._rng = rng or Random()
        self._deviation_checker = deviation_checker

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=GameStep.WAITING_FOR_MOVE.machine_state,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_publish_step",
        )

        self.events.subscribe(self._record_hand_result, EventType.HAND_WINNER)
        self._setup_state()

    @property
    def step(self) -> GameStep:
        """Get the current round step."""
        return GameStep.from_machine_state(self._machine_state)  # type: ignore[attr-defined]

    @property
    def is_asking_insurance(self) -> bool:
        return self.step == GameStep.ASK_INSURANCE

    @property
    def is_waiting_for_move(self) -> bool:
        return self.step == GameStep.WAITING_FOR_MOVE

    @property
    def rules(self) -> RuleSet:
        return self.settings.rules

    @property
    def state(self) -> GameState:
        return self._state

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def update_settings(self, settings: GameSettings) -> None:
        """Use new settings; table objects pick them up on `reset_state`."""
        self.settings = settings

    def reset_state(self) -> None:
        """Rebuild the shoe, tray, seats and session counters from the settings."""
        self._setup_state()
        self.machine.set_state(GameStep.WAITING_FOR_MOVE.machine_state)
        self.events.emit_new(EventType.RESET_STATE)

    def run(self, bet_amount: int | None = None) -> None:
        """Play one round, asking the input reader for every human decision."""
        round_ = self.play_round(bet_amount)
        try:
            request = next(round_)
            while True:
                reader = self._require_input_reader()
                request = round_.send(reader.read_input(request))
        except StopIteration:
            pass

    async def run_async(self, bet_amount: int | None = None) -> None:
        """Play one round, awaiting the input reader for every human decision."""
        round_ = self.play_round(bet_amount)
        try:
            request = next(round_)
            while True:
                reader = self._require_input_reader()
                request = round_.send(await reader.read_input(request))
        except StopIteration:
            pass

    def play_round(self, bet_amount: int | None = None) -> RoundGenerator:
        """
        Play one round of blackjack.

        Yields a `DecisionRequest` whenever the human player must act and
        expects the move to be sent back. Sending None, or a move the step
        does not accept, repeats the request. The generator finishes once the
        round's cards are in the discard tray.

        Raises:
            InvalidBetError: If the bet is outside the table limits
            InsufficientBalanceError: If a player cannot cover a stake
        """
        rules = self.rules
        if bet_amount is None:
            bet_amount = rules.min_bet
        if not rules.min_bet <= bet_amount <= rules.max_bet:
            raise InvalidBetError(f"Bet must be between {rules.min_bet} and {rules.max_bet}")

        logger.debug("Starting new hand (player %s), shoe %s", self.player.id[:8], self.shoe.to_dict())

        self.deal()
        self._deal_initial_cards(bet_amount)

        upcard = self.dealer.upcard
        if upcard.is_ten_value and self.dealer.has_blackjack:
            # Dealer peeks under a ten and takes every hand, naturals included.
            for player in self.players:
                for hand in player.hands:
                    player.set_hand_winner(HandWinner.DEALER, hand)

        if upcard.is_ace:
            for player in self.players:
                yield from self._handle_insurance(player)

        for player in self.players:
            yield from self._play_hands(player)

        self.shoe.reveal(self.dealer.hole_card)
        logger.debug("Dealer reveals: %s (%d)", self.dealer.hand.serialize(), self.dealer.hand.card_total)

        # Skipped when every hand busted or holds a natural.
        if not self._all_hands_finished():
            self._play_dealer()

        for player in self.players:
            self._set_hand_results(player)

        self.finish_round()

        if not self.settings.auto_confirm_new_game:
            yield from self._ask(GameStep.GAME_RESULT, self._state.focused_hand, frozenset({Move.NEXT_GAME}))

        self._set_state(play_correction="")
        self._collect_cards()

    def _require_input_reader(self) -> InputReader | AsyncInputReader:
        if self.input_reader is None:
            raise ConfigurationError("The game needs an input reader to ask the player for a move")
        return self.input_reader

    def _setup_state(self) -> None:
        settings = self.settings
        rules = settings.rules

        # Links move records with the hand results of the same game.
        self.game_id = uuid4().hex
        self.events.enabled = not settings.disable_events

        self.basic_strategy = BasicStrategyChecker(rules)
        self.deviation_checker: DeviationAdvisor = self._deviation_checker or HiLoDeviationChecker(
            settings.check_top_n_deviations
        )

        self.shoe = Shoe(
            rules.deck_count,
            settings.mode,
            rng=self._rng,
            hits_soft_17=rules.hits_soft_17,
            player_count=settings.player_count,
            seat=settings.player_table_position - 1,
            deviation_count=settings.check_top_n_deviations,
            on_change=self._publish,
        )
        self.discard_tray = DiscardTray(on_change=self._publish)
        self.dealer = Dealer(rules, on_change=self._publish)
        self.players = [
            Player(
                rules,
                settings.strategy_for_seat(seat),
                balance=settings.player_bankroll,
                on_change=self._publish,
                on_hand_winner=self._on_hand_winner,
            )
            for seat in range(1, settings.player_count + 1)
        ]
        self.player = self.players[settings.player_table_position - 1]

        self._state = GameState(focused_hand=self.player.first_hand)

    def _set_state(self, **changes: Any) -> None:
        """Update game state fields and publish each change."""
        for name, value in changes.items():
            setattr(self._state, name, value)
            self._publish(name, value.to_dict() if isinstance(value, Hand) else value)

    def _publish(self, name: str, value: Any) -> None:
        self.events.emit_new(EventType.CHANGE, name=name, value=value)

    def _publish_step(self) -> None:
        self._publish("step", self.step.value)

    def _deal_initial_cards(self, bet_amount: int) -> None:
        for player in self.players:
            player.start_round()
            # NPCs always play the table minimum.
            player.add_hand(bet_amount if player is self.player else self.rules.min_bet)

        self._set_state(focused_hand=self.player.first_hand)

        # Every seat's upcard, the dealer's upcard, every seat's second card,
        # then the dealer's hole card face down.
        for player in self.players:
            player.take_card(self._draw_card())

        self.dealer.start_round()
        self.dealer.add_hand()
        self.dealer.take_card(self._draw_card())

        for player in self.players:
            player.take_card(self._draw_card())

        self.dealer.take_card(self._draw_card(showing_face=False))

    def _ask(self, step: GameStep, hand: Hand, accepted: frozenset[Move]) -> Generator[DecisionRequest, Any, Move]:
        request = DecisionRequest(step=step, hand=hand, accepted=accepted)
        while True:
            move = _as_move((yield request))
            if move in accepted:
                return move

    def _handle_insurance(self, player: Player) -> RoundGenerator:
        self.offer_insurance()
        dealer_blackjack = self.dealer.has_blackjack

        for hand in player.hands:
            if player.is_npc:
                move = player.get_npc_input(self, hand)
            elif self.settings.auto_decline_insurance:
                move = Move.NO_INSURANCE
            else:
                if player is self.player:
                    self._set_state(focused_hand=hand)
                move = yield from self._ask(GameStep.ASK_INSURANCE, hand, INSURANCE_MOVES)
                self._validate_input(move, hand)

            if move == Move.TAKE_INSURANCE and dealer_blackjack:
                # Insurance is half the bet and pays at the insurance ratio.
                ratio = self.rules.insurance_payout_ratio
                stake = Decimal(hand.bet_amount) / 2
                player.add_chips(stake * ratio.numerator / ratio.denominator)
                player.set_hand_winner(HandWinner.DEALER, hand)

    def _play_hands(self, player: Player) -> RoundGenerator:
        # Splits append hands while we play, so walk by index.
        index = 0
        while index < player.hands_count:
            hand = player.hands[index]
            if not player.is_settled(hand):
                yield from self._play_hand(player, hand)
            index += 1

    def _play_hand(self, player: Player, hand: Hand) -> RoundGenerator:
        if player is self.player:
            self._set_state(focused_hand=hand)

        if self._settle_natural(player, hand):
            return

        bet_amount = hand.bet_amount

        while hand.card_total < 21:
            self.await_move()

            if player.is_npc:
                move = player.get_npc_input(self, hand)
                if not self._is_allowed(player, hand, move):
                    logger.warning("Refusing %s for %s, standing instead", move, hand.serialize())
                    move = Move.STAND
            else:
                move = yield from self._ask(GameStep.WAITING_FOR_MOVE, hand, PLAY_MOVES)
                if not self._is_allowed(player, hand, move):
                    continue
                self._validate_input(move, hand)

            if move == Move.STAND:
                break

            if move == Move.HIT:
                player.take_card(self._draw_card(), hand=hand)
            elif move == Move.DOUBLE:
                player.use_chips(bet_amount, hand=hand)
                player.take_card(self._draw_card(), hand=hand)
                break
            elif move == Move.SPLIT:
                self._split(player, hand, bet_amount)
            elif move == Move.SURRENDER:
                player.set_hand_winner(HandWinner.DEALER, hand, surrender=True)
                return

        if hand.busted:
            logger.debug("Busted %s %d", player.id[:8], hand.card_total)
            player.set_hand_winner(HandWinner.DEALER, hand)

    def _split(self, player: Player, hand: Hand, bet_amount: int) -> None:
        new_hand = player.add_hand(bet_amount, [hand.remove_card()])

        # Split hands can make 21 but never a blackjack.
        new_hand.from_split = True
        hand.from_split = True

        player.take_card(self._draw_card(), hand=hand)
        player.take_card(self._draw_card(), hand=new_hand)

    def _is_allowed(self, player: Player, hand: Hand, move: Move) -> bool:
        if move == Move.SURRENDER:
            return hand.first_move and self.rules.allow_late_surrender
        if move == Move.SPLIT:
            return player.can_split(hand)
        if move == Move.DOUBLE:
            return hand.first_move
        return move in PLAY_MOVES

    def _settle_natural(self, player: Player, hand: Hand) -> bool:
        """Settle a hand if either side holds a natural. Push beats both."""
        dealer_blackjack = self.dealer.has_blackjack
        if dealer_blackjack and hand.blackjack:
            player.set_hand_winner(HandWinner.PUSH, hand)
        elif dealer_blackjack:
            player.set_hand_winner(HandWinner.DEALER, hand)
        elif hand.blackjack:
            player.set_hand_winner(HandWinner.PLAYER, hand)
        else:
            return False
        return True

    def _play_dealer(self) -> None:
        hand = self.dealer.hand
        while self.dealer.get_npc_input(self, hand) == Move.HIT:
            self.dealer.take_card(self._draw_card(), hand=hand)

    def _all_hands_finished(self) -> bool:
        return all(hand.finished for player in self.players for hand in player.hands)

    def _set_hand_results(self, player: Player) -> None:
        dealer_hand = self.dealer.hand
        for hand in player.hands:
            if player.is_settled(hand):
                continue

            if dealer_hand.busted or hand.card_total > dealer_hand.card_total:
                player.set_hand_winner(HandWinner.PLAYER, hand)
            elif dealer_hand.card_total > hand.card_total:
                player.set_hand_winner(HandWinner.DEALER, hand)
            else:
                player.set_hand_winner(HandWinner.PUSH, hand)

    def _collect_cards(self) -> None:
        for player in self.players:
            self.discard_tray.add_cards(player.remove_cards())
        self.discard_tray.add_cards(self.dealer.remove_cards())

        if self.shoe.needs_reset:
            logger.debug("Cut card reached, reshuffling %d cards", len(self.discard_tray) + len(self.shoe))
            self._reshuffle()

    def _reshuffle(self) -> None:
        self.shoe.add_cards(self.discard_tray.remove_cards())
        self.shoe.shuffle()
        self.events.emit_new(EventType.SHUFFLE)

    def _draw_card(self, showing_face: bool = True) -> Card:
        # A crowded table can run the shoe dry before the round ends; the
        # discarded cards go back in and the round carries on.
        if not len(self.shoe) and len(self.discard_tray):
            logger.debug("Shoe empty mid-round, reshuffling %d discards", len(self.discard_tray))
            self._reshuffle()
        return self.shoe.draw_card(showing_face)

    def _validate_input(self, move: Move, hand: Hand) -> None:
        """Score a human move and emit a move record."""
        result = None
        if self.settings.deviations_enabled:
            result = self.deviation_checker.check(self, hand, move)
        if result is None:
            result = self.basic_strategy.check(self, hand, move)

        if isinstance(result, HintResult):
            self._set_state(play_correction=result.hint)
            correction = result.code
        else:
            self._set_state(session_moves_correct=self._state.session_moves_correct + 1)
            correction = None

        self._set_state(session_moves_total=self._state.session_moves_total + 1)

        record = MoveRecord(
            game_id=self.game_id,
            dealer_hand=self.dealer.hand.serialize(show_hidden=True),
            player_hand=hand.serialize(),
            move=move,
            correction=correction,
        )
        self.events.emit_new(EventType.CREATE_RECORD, record_type=record.record_type, record=record.model_dump(mode="json"))

    def _on_hand_winner(self, player: Player, hand: Hand, winner: HandWinner) -> None:
        self.events.emit_new(
            EventType.HAND_WINNER,
            player_id=player.id,
            hand=hand.to_dict(),
            cards=hand.serialize(),
            winner=winner.value,
        )

    def _record_hand_result(self, event: GameEvent) -> None:
        if event.data["player_id"] != self.player.id:
            return

        record = HandResultRecord(
            game_id=self.game_id,
            dealer_hand=self.dealer.hand.serialize(show_hidden=True),
            player_hand=event.data["cards"],
            winner=HandWinner(event.data["winner"]),
        )
        self.events.emit_new(EventType.CREATE_RECORD, record_type=record.record_type, record=record.model_dump(mode="json"))
