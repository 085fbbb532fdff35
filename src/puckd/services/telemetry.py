from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from puckd.engine.events import EVENT_KINDS, CardsPeeked, EventBus, GameEvent, GameOver, Subscription
from puckd.paths import Paths, get_paths


def event_payload(event: GameEvent) -> dict[str, object]:
    if isinstance(event, GameOver):
        return {"winner": event.winner.name if event.winner is not None else None}
    if isinstance(event, CardsPeeked):
        return {"player": event.player.name, "cards": [c.config.id for c in event.cards]}
    return {"player": event.player.name}


@dataclass
class TelemetryService:
    path: Path
    _subscriptions: list[Subscription] = field(default_factory=list, repr=False)

    @classmethod
    def for_user(cls, paths: Paths | None = None) -> TelemetryService:
        """Telemetry written to `telemetry.jsonl` in the user-data directory."""
        paths = paths or get_paths()
        return cls(paths.userdata_dir / "telemetry.jsonl")

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def record(self, event: GameEvent) -> None:
        self.log(event.type, event_payload(event))

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every engine event kind on `bus`."""
        for kind in EVENT_KINDS:
            self._subscriptions.append(bus.subscribe(kind, self.record))

    def detach(self, bus: EventBus) -> None:
        for sub in self._subscriptions:
            bus.unsubscribe(sub)
        self._subscriptions.clear()
