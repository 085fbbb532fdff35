from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from puckd.paths import get_paths
from puckd.services.content import ContentError, ContentService


def _copy_content(tmp_path: Path) -> ContentService:
    paths = get_paths()
    data_dir = tmp_path / "data"
    shutil.copytree(paths.data_dir, data_dir)
    return ContentService(data_dir, data_dir / "schemas")


def _rewrite(path: Path, mutate) -> None:
    raw = json.loads(path.read_text(encoding="utf-8"))
    mutate(raw)
    path.write_text(json.dumps(raw), encoding="utf-8")


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_default_pool_has_every_card_kind() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    db = content.load_cards_db()
    entries = content.load_card_pool(db)

    assert {e.config.type for e in entries} == {"puckd", "save", "cancel", "attack", "skip", "peek", "shuffle"}
    assert db.get("body_check").requires_target
    assert not db.get("line_change").requires_target
    assert db.get("power_play").extra_turns == 3
    assert db.get("instant_replay").peek_amount == 1


def test_cards_file_is_read_once_for_database_and_pool(monkeypatch: pytest.MonkeyPatch) -> None:
    import puckd.services.content as content_mod

    reads: list[str] = []
    real_load = content_mod._load_json

    def counting_load(path: Path) -> object:
        reads.append(path.name)
        return real_load(path)

    monkeypatch.setattr(content_mod, "_load_json", counting_load)
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)

    db, entries = content.load_cards()
    assert reads.count("cards.json") == 1
    assert {e.config.id for e in entries} <= set(db.cards)

    reads.clear()
    assert content.load_card_pool(db) == entries
    assert reads.count("cards.json") == 1


def test_settings_load() -> None:
    paths = get_paths()
    settings = ContentService(paths.data_dir, paths.schema_dir).load_settings()
    assert settings.starting_hand_size == 7
    assert settings.starting_save_cards == 1
    assert settings.shuffle_before_each_game


def test_out_of_range_peek_amount_is_rejected(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    cards_path = tmp_path / "data" / "cards.json"
    _rewrite(cards_path, lambda raw: raw["cards"][8].update(peek_amount=9))

    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_cards_db()


def test_unknown_card_type_is_rejected(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    cards_path = tmp_path / "data" / "cards.json"
    _rewrite(cards_path, lambda raw: raw["cards"][0].update(type="exploding_kitten"))

    with pytest.raises(ContentError):
        content.load_cards_db()


def test_pool_must_reference_known_cards(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    cards_path = tmp_path / "data" / "cards.json"
    _rewrite(cards_path, lambda raw: raw["pool"].append({"card_id": "hat_trick", "count": 1}))

    with pytest.raises(ContentError, match="unknown card: hat_trick"):
        content.load_card_pool()


def test_settings_schema_limits_starting_saves(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    _rewrite(tmp_path / "data" / "settings.json", lambda raw: raw.update(starting_save_cards=5))

    with pytest.raises(ContentError):
        content.load_settings()


def test_missing_content_file(tmp_path: Path) -> None:
    content = ContentService(tmp_path, tmp_path)
    with pytest.raises(ContentError, match="Missing content file"):
        content.load_settings()
