from __future__ import annotations

import json

from puckd.engine.actions import Action, EndTurnAction, PlayCardAction
from puckd.engine.game import GameManager, new_game, replay
from puckd.engine.serialize import snapshot
from puckd.engine.types import CardEntry, GameSettings
from puckd.paths import get_paths
from puckd.services.content import ContentService


def _load_content() -> tuple[tuple[CardEntry, ...], GameSettings]:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_card_pool(), content.load_settings()


def _choose_action(game: GameManager, turn: int) -> Action:
    player = game.current_player
    assert player is not None
    p = player.player_index

    # Every third turn, play the first card that does something.
    if turn % 3 == 0:
        for i, card in enumerate(player.hand):
            if card.type in ("puckd", "save"):
                continue
            target = None
            if card.config.requires_target:
                others = [o for o in game.active_players() if o is not player]
                target = others[0].player_index
            return PlayCardAction(player=p, hand_index=i, target=target)

    return EndTurnAction(player=p)


def test_engine_determinism_replay() -> None:
    entries, settings = _load_content()
    names = ["Ana", "Ben", "Cat"]
    seed = 424242
    game1 = new_game(entries, names, seed=seed, settings=settings)

    actions: list[Action] = []
    for turn in range(60):
        if game1.is_game_over:
            break
        a = _choose_action(game1, turn)
        actions.append(a)
        game1.step(a)

    snap1 = snapshot(game1)

    game2 = replay(entries, names, seed=seed, actions=actions, settings=settings)
    snap2 = snapshot(game2)

    assert snap1 == snap2
    json.dumps(snap1)


def test_different_seeds_deal_different_games() -> None:
    entries, settings = _load_content()
    a = snapshot(new_game(entries, ["Ana", "Ben"], seed=1, settings=settings))
    b = snapshot(new_game(entries, ["Ana", "Ben"], seed=2, settings=settings))
    assert a["draw_pile"] != b["draw_pile"]
