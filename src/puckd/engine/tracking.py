from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .actions import Action

if TYPE_CHECKING:
    from .player import Player

logger = logging.getLogger(__name__)


class ActionTracker(Protocol):
    """Remembers played actions so a cancel card has something to negate."""

    def record(self, action: Action) -> None: ...

    def cancel_last(self, player: Player) -> bool: ...


class NoopActionTracker:
    """Default tracker: keeps no history and lets every cancel succeed.

    An embedding application with an undo model can replace this.
    """

    def record(self, action: Action) -> None:
        return None

    def cancel_last(self, player: Player) -> bool:
        logger.info("%s cancels the last action (no history kept)", player.name)
        return True
