"""Card legality and card effects.

The resolver answers two questions for a played card: is this play legal,
and what does the effect do. Moving the card out of the hand and onto the
discard pile is the game manager's job.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, assert_never

from .actions import PlayResult
from .cards import CardInstance
from .events import CardsPeeked

if TYPE_CHECKING:
    from .game import GameManager
    from .player import Player

logger = logging.getLogger(__name__)


class EffectResolver:
    def __init__(self, game: GameManager) -> None:
        self._game = game

    def play(self, card: CardInstance | None, player: Player | None, target: Player | None = None) -> PlayResult:
        if card is None:
            logger.warning("No card selected")
            return PlayResult.fail("No card.")

        check = card.can_play(player, target)
        if not check:
            return check
        assert player is not None

        if not player.holds(card):
            logger.warning("Player %s doesn't have card %s in hand", player.name, card.name)
            return PlayResult.fail("Card not in hand.")

        try:
            result = self._apply(card, player, target)
        except Exception:
            logger.exception("Error processing effect of %s", card.name)
            return PlayResult.fail("Effect failed.")

        if result:
            logger.info("%s successfully played %s", player.name, card.name)
        return result

    def _apply(self, card: CardInstance, player: Player, target: Player | None) -> PlayResult:
        card_type = card.type
        match card_type:
            case "puckd":
                return self._puckd(card, player)
            case "save":
                return self._save(card, player)
            case "cancel":
                return self._cancel(card, player)
            case "attack":
                return self._attack(card, player, target)
            case "skip":
                return self._skip(card, player)
            case "peek":
                return self._peek(card, player)
            case "shuffle":
                return self._shuffle(card, player)
            case _:
                assert_never(card_type)

    def _puckd(self, card: CardInstance, player: Player) -> PlayResult:
        # Only ever resolved during the draw phase.
        logger.warning("Puck'd cards cannot be played directly")
        return PlayResult.fail("Puck'd cannot be played.")

    def _save(self, card: CardInstance, player: Player) -> PlayResult:
        logger.info("%s readied %s to block the next Puck'd", player.name, card.name)
        return PlayResult(ok=True, consumed=False)

    def _cancel(self, card: CardInstance, player: Player) -> PlayResult:
        if not self._game.tracker.cancel_last(player):
            return PlayResult.fail("Nothing to cancel.")
        logger.info("%s played %s - cancelling last action", player.name, card.name)
        return PlayResult(ok=True)

    def _attack(self, card: CardInstance, player: Player, target: Player | None) -> PlayResult:
        if target is None or target.is_eliminated:
            logger.warning("Invalid target for attack card %s", card.name)
            return PlayResult.fail("Invalid target.")

        extra = card.config.extra_turns
        logger.info("%s played %s - %s must take %d extra turns", player.name, card.name, target.name, extra)
        self._game.add_extra_turns(extra, target)
        return PlayResult(ok=True)

    def _skip(self, card: CardInstance, player: Player) -> PlayResult:
        if self._game.current_player is not player:
            logger.warning("%s cannot skip outside their own turn", player.name)
            return PlayResult.fail("Not your turn.")

        logger.info("%s played %s - skipping turn", player.name, card.name)
        self._game.skip_turn()
        return PlayResult(ok=True)

    def _peek(self, card: CardInstance, player: Player) -> PlayResult:
        top = self._game.deck.peek_top(card.config.peek_amount)
        if not top:
            logger.warning("No cards to peek at")
            return PlayResult.fail("Draw pile is empty.")

        logger.info("%s played %s - peeking at top %d cards", player.name, card.name, len(top))
        self._game.bus.publish(CardsPeeked(player=player, cards=tuple(top)))
        return PlayResult(ok=True)

    def _shuffle(self, card: CardInstance, player: Player) -> PlayResult:
        logger.info("%s played %s - shuffling the deck", player.name, card.name)
        if not self._game.deck.shuffle():
            return PlayResult.fail("Nothing to shuffle.")
        return PlayResult(ok=True)
