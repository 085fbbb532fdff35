from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from puckd.engine.types import CardConfig, CardDatabase, CardEntry, GameSettings


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_bool(obj: Mapping[str, object], key: str) -> bool | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, bool):
        raise ContentError(f"Expected bool for {key}")
    return v


def _parse_card(raw: Mapping[str, object]) -> CardConfig:
    kwargs: dict[str, object] = {}
    for key in ("peek_amount", "extra_turns"):
        if key in raw:
            kwargs[key] = _require_int(raw, key)
    countered = _optional_bool(raw, "can_be_countered")
    if countered is not None:
        kwargs["can_be_countered"] = countered
    return CardConfig(
        id=_require_str(raw, "id"),
        name=_require_str(raw, "name"),
        type=_require_str(raw, "type"),  # type: ignore[arg-type]  # schema restricts values
        description=str(raw.get("description", "")),
        requires_target=_optional_bool(raw, "requires_target"),
        **kwargs,  # type: ignore[arg-type]
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        schema = _load_schema(self._schema_dir / f"{name}.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def _parse_cards(self, raw: Mapping[str, object]) -> CardDatabase:
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[str, CardConfig] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = _parse_card(item)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card
        return CardDatabase(cards=cards)

    def _parse_pool(self, raw: Mapping[str, object], db: CardDatabase) -> tuple[CardEntry, ...]:
        raw_pool = raw.get("pool")
        if not isinstance(raw_pool, list):
            raise ContentError("cards.json.pool must be a list")

        entries: list[CardEntry] = []
        for item in raw_pool:
            if not isinstance(item, dict):
                continue
            card_id = _require_str(item, "card_id")
            if card_id not in db.cards:
                raise ContentError(f"Pool references unknown card: {card_id}")
            entries.append(CardEntry(config=db.get(card_id), count=_require_int(item, "count")))
        return tuple(entries)

    def load_cards_db(self) -> CardDatabase:
        return self._parse_cards(self._load_validated("cards"))

    def load_card_pool(self, db: CardDatabase | None = None) -> tuple[CardEntry, ...]:
        """The `(card, count)` entries that make up a fresh deck."""
        raw = self._load_validated("cards")
        if db is None:
            db = self._parse_cards(raw)
        return self._parse_pool(raw, db)

    def load_cards(self) -> tuple[CardDatabase, tuple[CardEntry, ...]]:
        """Card database and deck pool from a single read of cards.json."""
        raw = self._load_validated("cards")
        db = self._parse_cards(raw)
        return db, self._parse_pool(raw, db)

    def load_settings(self) -> GameSettings:
        raw = self._load_validated("settings")
        defaults = GameSettings()
        hand = raw.get("starting_hand_size", defaults.starting_hand_size)
        saves = raw.get("starting_save_cards", defaults.starting_save_cards)
        shuffle = raw.get("shuffle_before_each_game", defaults.shuffle_before_each_game)
        if not isinstance(hand, int) or not isinstance(saves, int) or not isinstance(shuffle, bool):
            raise ContentError("Invalid settings values")
        return GameSettings(
            starting_hand_size=hand,
            starting_save_cards=saves,
            shuffle_before_each_game=shuffle,
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_cards()
        _ = self.load_settings()
