"""Outbound notifications and the bus that delivers them.

Handlers run synchronously, in subscription order, inside the engine call
that produced the event. A handler must not call back into the engine in a
way that changes turn state (for example `end_turn` from a `TurnStarted`
handler); the bus does not guard against that.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, TypeVar

if TYPE_CHECKING:
    from .cards import CardInstance
    from .player import Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnStarted:
    player: Player
    type: Literal["turn_started"] = "turn_started"


@dataclass(frozen=True)
class TurnEnded:
    player: Player
    type: Literal["turn_ended"] = "turn_ended"


@dataclass(frozen=True)
class PlayerEliminated:
    player: Player
    type: Literal["player_eliminated"] = "player_eliminated"


@dataclass(frozen=True)
class GameOver:
    winner: Player | None
    type: Literal["game_over"] = "game_over"


@dataclass(frozen=True)
class CardsPeeked:
    player: Player
    cards: tuple[CardInstance, ...]
    type: Literal["cards_peeked"] = "cards_peeked"


GameEvent = TurnStarted | TurnEnded | PlayerEliminated | GameOver | CardsPeeked
EVENT_KINDS: tuple[type[Any], ...] = (TurnStarted, TurnEnded, PlayerEliminated, GameOver, CardsPeeked)

E = TypeVar("E")


@dataclass(frozen=True)
class Subscription:
    kind: type[Any]
    handler: Callable[[Any], None]
    token: int


@dataclass
class EventBus:
    _subscribers: dict[type[Any], list[Subscription]] = field(default_factory=dict)
    _next_token: int = 0

    def subscribe(self, kind: type[E], handler: Callable[[E], None]) -> Subscription:
        sub = Subscription(kind=kind, handler=handler, token=self._next_token)
        self._next_token += 1
        self._subscribers.setdefault(kind, []).append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        subs = self._subscribers.get(subscription.kind, [])
        self._subscribers[subscription.kind] = [s for s in subs if s.token != subscription.token]

    def subscribers(self, kind: type[Any]) -> Sequence[Subscription]:
        return tuple(self._subscribers.get(kind, ()))

    def publish(self, event: GameEvent) -> None:
        # Snapshot so a handler that (un)subscribes does not disturb this delivery.
        for sub in self.subscribers(type(event)):
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Subscriber %r failed handling %s", sub.handler, event.type)
