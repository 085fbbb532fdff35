from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .actions import PlayResult
from .types import CardConfig, CardType

if TYPE_CHECKING:
    from .player import Player

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class CardInstance:
    """Runtime token for one physical card.

    Identity-compared: two copies of the same config are different cards.
    The owner link is informational only; the holding hand (or pile) owns
    the card.
    """

    config: CardConfig
    uid: int
    has_been_played: bool = False
    _owner_ref: weakref.ReferenceType[Player] | None = field(default=None, repr=False)

    @property
    def type(self) -> CardType:
        return self.config.type

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def owner(self) -> Player | None:
        if self._owner_ref is None:
            return None
        return self._owner_ref()

    @owner.setter
    def owner(self, player: Player | None) -> None:
        self._owner_ref = weakref.ref(player) if player is not None else None

    def mark_as_played(self) -> None:
        self.has_been_played = True

    def can_play(self, player: Player | None, target: Player | None = None) -> PlayResult:
        """Checks whether `player` may play this card at `target` right now."""
        if self.has_been_played:
            logger.warning("Card %s has already been played", self.name)
            return PlayResult.fail("Card already played.")

        if player is None:
            logger.warning("Card %s played without a player", self.name)
            return PlayResult.fail("No player.")
        if player.is_eliminated:
            logger.warning("Eliminated player %s cannot play cards", player.name)
            return PlayResult.fail("Player is eliminated.")

        if self.config.requires_target:
            if target is None:
                logger.warning("Card %s requires a target player", self.name)
                return PlayResult.fail("Select a target.")
            if target.is_eliminated:
                logger.warning("Cannot target eliminated player %s", target.name)
                return PlayResult.fail("Target is eliminated.")

        return PlayResult(ok=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"
