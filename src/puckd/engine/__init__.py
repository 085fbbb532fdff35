"""Headless rules engine for Puck'd.

IMPORTANT: This package must not do any I/O beyond logging.
"""

from .actions import EndTurnAction, PlayCardAction, PlayResult, StepResult
from .cards import CardInstance
from .deck import Deck
from .events import CardsPeeked, EventBus, GameOver, PlayerEliminated, TurnEnded, TurnStarted
from .game import GameManager, new_game, replay
from .player import Player
from .resolver import EffectResolver
from .tracking import ActionTracker, NoopActionTracker
from .types import CardConfig, CardDatabase, CardEntry, CardType, GameSettings

__all__ = [
    "ActionTracker",
    "CardConfig",
    "CardDatabase",
    "CardEntry",
    "CardInstance",
    "CardType",
    "CardsPeeked",
    "Deck",
    "EffectResolver",
    "EndTurnAction",
    "EventBus",
    "GameManager",
    "GameOver",
    "GameSettings",
    "NoopActionTracker",
    "PlayCardAction",
    "PlayResult",
    "Player",
    "PlayerEliminated",
    "StepResult",
    "TurnEnded",
    "TurnStarted",
    "new_game",
    "replay",
]
