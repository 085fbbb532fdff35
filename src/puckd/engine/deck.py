from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Sequence

from .cards import CardInstance
from .types import ELIMINATION_TYPE, CardConfig

logger = logging.getLogger(__name__)


class Deck:
    """Draw pile and discard pile shared by every player.

    `draw_pile[0]` is the top of the deck (the next card drawn). All
    randomness comes from the injected `rng` so a seeded game is reproducible.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.draw_pile: list[CardInstance] = []
        self.discard_pile: list[CardInstance] = []
        self._uids = itertools.count()

    @property
    def cards_remaining(self) -> int:
        return len(self.draw_pile)

    @property
    def cards_discarded(self) -> int:
        return len(self.discard_pile)

    def new_card(self, config: CardConfig) -> CardInstance:
        """Creates a card instance with a uid unique to this deck's game."""
        return CardInstance(config=config, uid=next(self._uids))

    def initialize(self, card_pool: Sequence[CardConfig]) -> bool:
        """Builds fresh card instances for `card_pool` and shuffles them into the draw pile."""
        if not card_pool:
            logger.error("Cannot initialize deck with an empty card pool")
            return False

        self._uids = itertools.count()
        cards = [self.new_card(config) for config in card_pool]
        self.rng.shuffle(cards)
        self.draw_pile = cards
        self.discard_pile = []
        logger.info("Deck initialized with %d cards", len(self.draw_pile))
        return True

    def draw(self) -> CardInstance | None:
        """Pops the top card, or returns None when the draw pile is empty."""
        if not self.draw_pile:
            logger.warning("Attempting to draw from an empty deck")
            return None
        return self.draw_pile.pop(0)

    def discard(self, card: CardInstance | None) -> None:
        if card is None:
            logger.warning("Attempting to discard a missing card")
            return
        self.discard_pile.append(card)
        card.mark_as_played()

    def shuffle(self) -> bool:
        """Merges the discard pile into the draw pile and reshuffles everything."""
        if not self.draw_pile and not self.discard_pile:
            logger.error("Cannot shuffle an empty deck")
            return False

        combined = self.draw_pile + self.discard_pile
        self.rng.shuffle(combined)
        self.draw_pile = combined
        self.discard_pile = []
        logger.info("Deck shuffled. Draw pile: %d cards", len(self.draw_pile))
        return True

    def reinsert_at(self, card: CardInstance | None, index: int) -> bool:
        """Puts a just-drawn Puck'd back `index` cards from the top.

        0 makes it the next draw; `cards_remaining` puts it at the bottom.
        """
        if card is None or card.type != ELIMINATION_TYPE:
            logger.error("Can only reinsert Puck'd cards")
            return False

        index = max(0, min(index, len(self.draw_pile)))
        self.draw_pile.insert(index, card)
        logger.info("Reinserted Puck'd card at position %d", index)
        return True

    def random_depth(self) -> int:
        """A uniformly random insertion slot, top and bottom included."""
        return self.rng.randint(0, len(self.draw_pile))

    def peek_top(self, count: int) -> list[CardInstance]:
        count = max(0, min(count, len(self.draw_pile)))
        return list(self.draw_pile[:count])
