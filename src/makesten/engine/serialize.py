from __future__ import annotations


from .actions import Action, RevealCardAction, SettleAction
from .match import PendingResolution, RoundState
from .types import Card


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, RevealCardAction):
        return {"type": "reveal", "card_id": a.card_id}
    if isinstance(a, SettleAction):
        return {"type": "settle", "generation": a.generation}
    # should be unreachable
    return {"type": "unknown"}


def _card_to_dict(c: Card) -> dict[str, object]:
    return {
        "id": c.id,
        "kind": c.kind,
        "text": c.text,
        "value": c.value,
        "matched": c.matched,
    }


def _pending_to_dict(p: PendingResolution | None) -> dict[str, object] | None:
    if p is None:
        return None
    return {
        "generation": p.generation,
        "outcome": p.outcome,
        "card_ids": list(p.card_ids),
        "delay": p.delay,
    }


def snapshot(state: RoundState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current round."""
    return {
        "seed": state.seed,
        "generation": state.generation,
        "card_set": state.config.card_set.id,
        "deck": [_card_to_dict(c) for c in state.deck],
        "revealed": list(state.revealed),
        "locked": state.locked,
        "matches_found": state.matches_found,
        "streak": state.streak,
        "best_streak": state.best_streak,
        "moves": state.moves,
        "pending": _pending_to_dict(state.pending),
        "complete": state.complete,
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
