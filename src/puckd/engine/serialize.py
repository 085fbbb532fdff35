from __future__ import annotations

from .actions import Action, EndTurnAction, PlayCardAction
from .cards import CardInstance
from .game import GameManager
from .player import Player


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {
            "type": "play",
            "player": a.player,
            "hand_index": a.hand_index,
            "target": a.target,
        }
    if isinstance(a, EndTurnAction):
        return {"type": "end_turn", "player": a.player}
    # should be unreachable
    return {"type": "unknown"}


def _card_to_dict(c: CardInstance) -> dict[str, object]:
    return {"uid": c.uid, "card_id": c.config.id, "played": c.has_been_played}


def _player_to_dict(p: Player) -> dict[str, object]:
    return {
        "name": p.name,
        "index": p.player_index,
        "eliminated": p.is_eliminated,
        "hand": [_card_to_dict(c) for c in p.hand],
        "forfeited": p.forfeited_count,
    }


def snapshot(game: GameManager) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    winner = game.winner
    return {
        "seed": game.seed,
        "phase": game.phase,
        "current_player": game.current_player_index,
        "pending_extra_turns": game.pending_extra_turns,
        "winner": winner.player_index if winner is not None else None,
        "total_cards": game.total_cards,
        "draw_pile": [_card_to_dict(c) for c in game.deck.draw_pile],
        "discard_pile": [_card_to_dict(c) for c in game.deck.discard_pile],
        "players": [_player_to_dict(p) for p in game.players],
        "action_log": [action_to_dict(a) for a in game.action_log],
    }
