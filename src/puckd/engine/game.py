from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from typing import Literal

from .actions import Action, EndTurnAction, PlayCardAction, PlayResult, StepResult
from .cards import CardInstance
from .deck import Deck
from .events import EventBus, GameOver, PlayerEliminated, TurnEnded, TurnStarted
from .player import Player
from .resolver import EffectResolver
from .tracking import ActionTracker, NoopActionTracker
from .types import ELIMINATION_TYPE, SAVE_TYPE, CardEntry, GameSettings, expand_card_pool

logger = logging.getLogger(__name__)

GamePhase = Literal["not_started", "awaiting_turn", "game_over"]


class GameManager:
    """Turn controller for one game.

    Owns the roster and the deck, runs the draw phase at the end of every
    turn, tracks extra-turn obligations and detects game over. Every call
    runs to completion; embedders serialise access to one instance.

    Usage:
        game = GameManager(entries, GameSettings(), seed=7)
        game.start_game(["Ana", "Ben"])
        game.play_card(card, game.current_player)
        game.end_turn()
    """

    def __init__(
        self,
        entries: Iterable[CardEntry],
        settings: GameSettings | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        bus: EventBus | None = None,
        tracker: ActionTracker | None = None,
    ) -> None:
        self.entries = tuple(entries)
        self.settings = settings or GameSettings()
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.bus = bus if bus is not None else EventBus()
        self.tracker: ActionTracker = tracker if tracker is not None else NoopActionTracker()
        self.deck = Deck(self.rng)
        self.resolver = EffectResolver(self)

        self.players: list[Player] = []
        self.current_player_index = 0
        self.pending_extra_turns = 0
        self.is_game_over = False
        self.winner: Player | None = None
        self.total_cards = 0
        self.action_log: list[Action] = []

        self._started = False
        self._extra_turns_holder: int | None = None
        self._resolving = False
        self._skip_requested = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        if not self._started:
            return "not_started"
        if self.is_game_over:
            return "game_over"
        return "awaiting_turn"

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    @property
    def extra_turns_holder(self) -> Player | None:
        if self._extra_turns_holder is None:
            return None
        return self.players[self._extra_turns_holder]

    def active_players(self) -> list[Player]:
        return [p for p in self.players if not p.is_eliminated]

    def cards_in_play(self) -> int:
        """Cards still accounted for by the piles and the surviving hands."""
        return self.deck.cards_remaining + self.deck.cards_discarded + sum(p.hand_size for p in self.players)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start_game(self, player_names: Sequence[str]) -> bool:
        if player_names is None or len(player_names) < 2:
            logger.error("Need at least 2 players to start")
            return False

        pool = expand_card_pool(self.entries)
        if not pool:
            logger.error("Card pool is empty; add card entries before starting")
            return False

        save_config = next((c for c in pool if c.type == SAVE_TYPE), None)
        if self.settings.shuffle_before_each_game:
            self.rng.shuffle(pool)
        if not self.deck.initialize(pool):
            return False

        self.players = [Player(name, index) for index, name in enumerate(player_names)]
        if save_config is None and self.settings.starting_save_cards > 0:
            logger.warning("No save card in the pool; starting saves are not dealt")

        bonus = 0
        for player in self.players:
            for _ in range(self.settings.starting_hand_size):
                player.draw_card(self.deck)
            if save_config is None:
                continue
            # Bonus saves come from outside the deck.
            for _ in range(self.settings.starting_save_cards):
                player.add_card_to_hand(self.deck.new_card(save_config))
                bonus += 1

        self.total_cards = len(pool) + bonus
        self.current_player_index = 0
        self.pending_extra_turns = 0
        self._extra_turns_holder = None
        self.is_game_over = False
        self.winner = None
        self.action_log = []
        self._skip_requested = False
        self._started = True

        logger.info(
            "Game started with %d players and %d cards in the deck",
            len(self.players),
            self.deck.cards_remaining,
        )
        self.start_turn()
        return True

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def start_turn(self) -> None:
        if not self._started or self.is_game_over:
            return

        player = self.players[self.current_player_index]
        if player.is_eliminated:
            self._advance_turn()
            return

        logger.info("=== %s's turn ===", player.name)
        logger.debug("Hand: %s", ", ".join(c.name for c in player.hand))
        self.bus.publish(TurnStarted(player=player))

    def end_turn(self) -> bool:
        """Runs the draw phase for the current player and passes the floor on."""
        if not self._started or self.is_game_over:
            logger.warning("end_turn called with no game in progress")
            return False

        player = self.players[self.current_player_index]
        if player.is_eliminated:
            logger.warning("%s is eliminated; passing the turn on", player.name)
            self._advance_turn()
            return True

        self._draw_phase(player)
        self._finish_turn(player)
        return True

    def skip_turn(self) -> bool:
        """Ends the current turn without drawing.

        While a card is being resolved the turn change waits until the card
        has reached the discard pile.
        """
        if not self._started or self.is_game_over:
            return False
        if self._resolving:
            self._skip_requested = True
            return True
        self._finish_turn(self.players[self.current_player_index])
        return True

    def add_extra_turns(self, amount: int, player: Player | None = None) -> None:
        """Makes `player` (default: the current player) repeat their turn `amount` more times.

        Pending turns stack; a new holder inherits whatever was still owed.
        """
        if not self._started or self.is_game_over:
            logger.warning("Cannot add extra turns with no game in progress")
            return
        if amount <= 0:
            logger.warning("Ignoring non-positive extra turns: %d", amount)
            return

        holder = player.player_index if player is not None else self.current_player_index
        if self._extra_turns_holder is not None and self._extra_turns_holder != holder:
            logger.info(
                "%d pending extra turns pass to %s", self.pending_extra_turns, self.players[holder].name
            )
        self._extra_turns_holder = holder
        self.pending_extra_turns += amount
        logger.info("%s owes %d extra turns", self.players[holder].name, self.pending_extra_turns)

    def check_game_over(self) -> bool:
        if self.is_game_over:
            return True
        if not self._started:
            return False

        active = self.active_players()
        if len(active) > 1:
            return False

        self.is_game_over = True
        self.winner = active[0] if active else None
        self.pending_extra_turns = 0
        self._extra_turns_holder = None
        logger.info("Game over! %s wins", self.winner.name if self.winner else "No one")
        self.bus.publish(GameOver(winner=self.winner))
        return True

    def _draw_phase(self, player: Player) -> None:
        card = self.deck.draw()
        if card is None:
            logger.info("Deck empty! Shuffling discard pile")
            self.deck.shuffle()
            card = self.deck.draw()

        if card is None:
            logger.warning("Deck is still empty after shuffle; ending turn without a draw")
            return

        if card.type != ELIMINATION_TYPE:
            player.add_card_to_hand(card)
            logger.info("%s drew %s", player.name, card.name)
            return

        logger.info("%s drew a %s!", player.name, card.name)
        save = player.try_use_save_card()
        if save is not None:
            self.deck.discard(save)
            self.deck.reinsert_at(card, self.deck.random_depth())
            logger.info("%s saved themselves; Puck'd goes back into the deck", player.name)
            return

        player.eliminate(cause=card)
        if self._extra_turns_holder == player.player_index:
            self.pending_extra_turns = 0
            self._extra_turns_holder = None
        self.bus.publish(PlayerEliminated(player=player))

    def _finish_turn(self, player: Player) -> None:
        self.bus.publish(TurnEnded(player=player))
        if self.check_game_over():
            return

        if (
            self.pending_extra_turns > 0
            and self._extra_turns_holder == self.current_player_index
            and not player.is_eliminated
        ):
            self.pending_extra_turns -= 1
            if self.pending_extra_turns == 0:
                self._extra_turns_holder = None
            logger.info("%s takes an extra turn (%d more owed)", player.name, self.pending_extra_turns)
            self.start_turn()
            return

        self._advance_turn()

    def _advance_turn(self) -> None:
        count = len(self.players)
        start = self.current_player_index
        for offset in range(1, count + 1):
            index = (start + offset) % count
            if not self.players[index].is_eliminated:
                self.current_player_index = index
                self.start_turn()
                return

        logger.error("Turn advancement found no active player; forcing a game-over check")
        self.check_game_over()

    # ------------------------------------------------------------------
    # Player input
    # ------------------------------------------------------------------

    def play_card(
        self, card: CardInstance | None, player: Player | None, target: Player | None = None
    ) -> PlayResult:
        if not self._started:
            logger.warning("Cannot play %s before the game starts", card)
            return PlayResult.fail("Game has not started.")
        if self.is_game_over:
            logger.warning("Cannot play %s after the game is over", card)
            return PlayResult.fail("Game is over.")

        self._resolving = True
        self._skip_requested = False
        try:
            result = self.resolver.play(card, player, target)
        finally:
            self._resolving = False

        if not result:
            self._skip_requested = False
            return result
        assert card is not None and player is not None

        hand_index = next(i for i, held in enumerate(player.hand) if held is card)
        if result.consumed:
            player.remove_card_from_hand(card)
            card.mark_as_played()
            self.deck.discard(card)
        self.tracker.record(
            PlayCardAction(
                player=player.player_index,
                hand_index=hand_index,
                target=target.player_index if target is not None else None,
            )
        )

        if self._skip_requested:
            self._skip_requested = False
            self._finish_turn(player)
        return result

    def step(self, action: Action) -> StepResult:
        """Applies an index-addressed action; the form used for logging and replay."""
        if self.is_game_over:
            return StepResult(ok=False, error="Game already ended.")
        if not self._started:
            return StepResult(ok=False, error="Game has not started.")

        # Log first so a replay sees every attempted action.
        self.action_log.append(action)

        if isinstance(action, PlayCardAction):
            return self._step_play(action)
        if isinstance(action, EndTurnAction):
            if action.player != self.current_player_index:
                return StepResult(ok=False, error="Not your turn.")
            return StepResult(ok=self.end_turn())
        return StepResult(ok=False, error="Unknown action.")

    def _step_play(self, action: PlayCardAction) -> StepResult:
        if not 0 <= action.player < len(self.players):
            return StepResult(ok=False, error="Invalid player index.")
        player = self.players[action.player]
        if not 0 <= action.hand_index < player.hand_size:
            return StepResult(ok=False, error="Invalid hand index.")

        target: Player | None = None
        if action.target is not None:
            if not 0 <= action.target < len(self.players):
                return StepResult(ok=False, error="Invalid target index.")
            target = self.players[action.target]

        result = self.play_card(player.hand[action.hand_index], player, target)
        return StepResult(ok=result.ok, error=result.error)


def new_game(
    entries: Iterable[CardEntry],
    player_names: Sequence[str],
    seed: int,
    settings: GameSettings | None = None,
    *,
    bus: EventBus | None = None,
) -> GameManager:
    game = GameManager(entries, settings, seed=seed, bus=bus)
    game.start_game(player_names)
    return game


def replay(
    entries: Iterable[CardEntry],
    player_names: Sequence[str],
    seed: int,
    actions: Iterable[Action],
    settings: GameSettings | None = None,
) -> GameManager:
    game = new_game(entries, player_names, seed, settings)
    for action in actions:
        game.step(action)
        if game.is_game_over:
            break
    return game
