from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayCardAction:
    player: int
    hand_index: int
    target: int | None = None


@dataclass(frozen=True)
class EndTurnAction:
    player: int


Action = PlayCardAction | EndTurnAction


@dataclass(frozen=True)
class PlayResult:
    """Outcome of playing a card.

    Truthy exactly when the play was legal and its effect applied. `consumed`
    is False for cards that stay in hand after a successful play (saves).
    """

    ok: bool
    error: str | None = None
    consumed: bool = True

    def __bool__(self) -> bool:
        return self.ok

    @staticmethod
    def fail(error: str) -> "PlayResult":
        return PlayResult(ok=False, error=error, consumed=False)


@dataclass(frozen=True)
class StepResult:
    ok: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok
