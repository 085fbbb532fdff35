from __future__ import annotations

import logging
from collections.abc import Sequence

from .cards import CardInstance
from .deck import Deck
from .types import SAVE_TYPE, CardType

logger = logging.getLogger(__name__)


class Player:
    """A seat at the table: a hand of cards and an elimination flag.

    The turn-order slot never changes. Eliminated players stay on the
    roster with an empty hand.
    """

    def __init__(self, name: str, index: int) -> None:
        self._name = name
        self._index = index
        self._hand: list[CardInstance] = []
        self.is_eliminated = False
        self.forfeited_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def player_index(self) -> int:
        return self._index

    @property
    def hand(self) -> Sequence[CardInstance]:
        return tuple(self._hand)

    @property
    def hand_size(self) -> int:
        return len(self._hand)

    def draw_card(self, deck: Deck) -> bool:
        if self.is_eliminated:
            logger.warning("Eliminated player %s cannot draw cards", self.name)
            return False

        card = deck.draw()
        if card is None:
            return False

        self.add_card_to_hand(card)
        logger.debug("%s drew %s", self.name, card.name)
        return True

    def add_card_to_hand(self, card: CardInstance | None) -> None:
        if card is None:
            logger.error("Attempting to add a missing card to %s's hand", self.name)
            return
        self._hand.append(card)
        card.owner = self

    def remove_card_from_hand(self, card: CardInstance) -> bool:
        # Identity, not equality: copies of one config are distinct cards.
        for i, held in enumerate(self._hand):
            if held is card:
                del self._hand[i]
                return True
        logger.warning("Card %s not found in %s's hand", card.name, self.name)
        return False

    def holds(self, card: CardInstance) -> bool:
        return any(held is card for held in self._hand)

    def try_use_save_card(self) -> CardInstance | None:
        """Spends the first save card in hand.

        Returns the spent card so the caller can discard it, or None if the
        player holds no save.
        """
        if self.is_eliminated:
            logger.warning("Eliminated player %s cannot use save cards", self.name)
            return None

        save = next((c for c in self._hand if c.type == SAVE_TYPE), None)
        if save is None:
            logger.info("%s has no save cards", self.name)
            return None

        self.remove_card_from_hand(save)
        logger.info("%s used %s to block a Puck'd", self.name, save.name)
        return save

    def eliminate(self, cause: CardInstance | None = None) -> None:
        """Knocks the player out. `cause` is the Puck'd that did it, if any.

        Held cards (and the cause) leave play entirely; they are not returned
        to the deck.
        """
        if self.is_eliminated:
            return

        self.is_eliminated = True
        self.forfeited_count += len(self._hand)
        self._hand.clear()
        if cause is not None:
            cause.owner = self
            self.forfeited_count += 1
        logger.info("%s has been Puck'd and eliminated", self.name)

    def has_card_of_type(self, card_type: CardType) -> bool:
        return any(c.type == card_type for c in self._hand)

    def __str__(self) -> str:
        status = "Eliminated" if self.is_eliminated else "Active"
        return f"{self.name} (Cards: {self.hand_size}, {status})"
