from __future__ import annotations

from makesten.engine.actions import RevealCardAction, SettleAction
from makesten.engine.match import RoundState, new_round, replay, step
from makesten.engine.serialize import snapshot


def _choose_action(state: RoundState, cursor: int) -> object:
    if state.locked:
        return SettleAction(generation=state.generation)
    # walk the deck in order; clumsy on purpose so mismatches happen
    card = state.deck[cursor % len(state.deck)]
    return RevealCardAction(card_id=card.id)


def test_engine_determinism_replay() -> None:
    seed = 424242
    state1 = new_round(seed=seed)

    actions = []
    for i in range(60):
        if state1.complete:
            break
        a = _choose_action(state1, i)
        actions.append(a)
        step(state1, a)

    snap1 = snapshot(state1)

    state2 = replay(seed=seed, actions=actions)
    snap2 = snapshot(state2)

    assert snap1 == snap2
    assert snap1["moves"] > 0


def test_snapshot_is_json_ready() -> None:
    import json

    state = new_round(seed=1, generation=2)
    step(state, RevealCardAction(card_id=state.deck[0].id))
    snap = snapshot(state)
    assert json.loads(json.dumps(snap)) == snap
    assert snap["generation"] == 2
    assert snap["action_log"] == [{"type": "reveal", "card_id": state.deck[0].id}]


def test_rejected_actions_are_not_logged() -> None:
    state = new_round(seed=31, generation=1)
    first = next(c for c in state.deck if c.kind == "expression")
    second = next(c for c in state.deck if c.kind == "expression" and c.id != first.id)
    third = next(c for c in state.deck if c.kind == "ten")

    step(state, RevealCardAction(card_id=first.id))
    step(state, RevealCardAction(card_id=second.id))
    before = snapshot(state)

    assert not step(state, RevealCardAction(card_id=third.id)).ok
    assert not step(state, SettleAction(generation=0)).ok
    assert snapshot(state) == before
    assert len(state.action_log) == 2

    actions = [
        RevealCardAction(card_id=first.id),
        RevealCardAction(card_id=second.id),
        RevealCardAction(card_id=third.id),
        SettleAction(generation=0),
    ]
    assert snapshot(replay(seed=31, actions=actions, generation=1)) == before
