from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal, get_args

logger = logging.getLogger(__name__)

# "puckd" is the eliminating card; everything else is held in hand and played.
CardType = Literal["puckd", "save", "cancel", "attack", "skip", "peek", "shuffle"]
CARD_TYPES: tuple[CardType, ...] = get_args(CardType)

ELIMINATION_TYPE: CardType = "puckd"
SAVE_TYPE: CardType = "save"

PEEK_RANGE = (1, 5)
EXTRA_TURNS_RANGE = (1, 3)
COPIES_RANGE = (1, 20)
STARTING_SAVES_RANGE = (0, 2)


def _clamp(value: int, bounds: tuple[int, int], what: str) -> int:
    lo, hi = bounds
    clamped = max(lo, min(hi, value))
    if clamped != value:
        logger.warning("%s=%d out of range [%d, %d]; clamped to %d", what, value, lo, hi, clamped)
    return clamped


@dataclass(frozen=True)
class CardConfig:
    """Static description of one card archetype.

    Many card instances share one config. The engine only reads it.
    """

    id: str
    name: str
    type: CardType
    description: str = ""
    requires_target: bool | None = None
    peek_amount: int = 3
    extra_turns: int = 2
    can_be_countered: bool = True

    def __post_init__(self) -> None:
        if self.type not in CARD_TYPES:
            raise ValueError(f"Unknown card type: {self.type!r}")
        # Frozen: normalise through object.__setattr__ once, at construction.
        if self.requires_target is None:
            object.__setattr__(self, "requires_target", self.type == "attack")
        object.__setattr__(
            self, "peek_amount", _clamp(self.peek_amount, PEEK_RANGE, f"{self.id}.peek_amount")
        )
        object.__setattr__(
            self, "extra_turns", _clamp(self.extra_turns, EXTRA_TURNS_RANGE, f"{self.id}.extra_turns")
        )


@dataclass(frozen=True)
class CardEntry:
    """A card config and how many copies of it go into the pool."""

    config: CardConfig
    count: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "count", _clamp(self.count, COPIES_RANGE, f"{self.config.id}.count"))


@dataclass(frozen=True)
class GameSettings:
    starting_hand_size: int = 7
    starting_save_cards: int = 1
    shuffle_before_each_game: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "starting_hand_size", max(1, self.starting_hand_size))
        object.__setattr__(
            self,
            "starting_save_cards",
            _clamp(self.starting_save_cards, STARTING_SAVES_RANGE, "starting_save_cards"),
        )


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card database used by the engine."""

    cards: dict[str, CardConfig] = field(default_factory=dict)

    def get(self, card_id: str) -> CardConfig:
        return self.cards[card_id]


def expand_card_pool(entries: Iterable[CardEntry]) -> list[CardConfig]:
    """One config per requested copy, in entry order."""
    pool: list[CardConfig] = []
    for entry in entries:
        pool.extend(entry.config for _ in range(entry.count))
    return pool
