from __future__ import annotations

import pytest

from makesten.engine.match import (
    MatchConfig,
    RoundState,
    UnknownCardError,
    find_card,
    is_match,
    new_round,
    reveal_card,
    settle,
)
from makesten.engine.serialize import snapshot
from makesten.engine.types import Card, CardSet, ExpressionDefinition


def _expr(state: RoundState, text: str) -> Card:
    for c in state.deck:
        if c.kind == "expression" and c.text == text and not c.matched:
            return c
    raise AssertionError(f"no unmatched expression card {text!r}")


def _ten(state: RoundState, skip: tuple[str, ...] = ()) -> Card:
    for c in state.deck:
        if c.kind == "ten" and not c.matched and c.id not in skip:
            return c
    raise AssertionError("no unmatched ten card")


def _match_pair(state: RoundState, text: str) -> None:
    reveal_card(state, _expr(state, text).id)
    res = reveal_card(state, _ten(state).id)
    assert res.pending is not None and res.pending.outcome == "match"
    settle(state, state.generation)


def test_deck_has_six_expressions_and_six_tens() -> None:
    for seed in range(25):
        state = new_round(seed=seed)
        kinds = [c.kind for c in state.deck]
        assert kinds.count("expression") == 6
        assert kinds.count("ten") == 6
        assert len({c.id for c in state.deck}) == 12
        assert all(not c.matched for c in state.deck)
        assert state.moves == state.streak == state.best_streak == state.matches_found == 0
        assert state.pair_phase == "idle"
        assert state.round_phase == "in_progress"


def test_duplicate_expressions_are_kept() -> None:
    state = new_round(seed=7)
    texts = sorted(c.text for c in state.deck if c.kind == "expression")
    assert texts == ["1 + 9", "2 + 8", "3 + 7", "4 + 6", "5 + 5", "8 + 2"]
    assert all(c.text == "10" and c.value == 10 for c in state.deck if c.kind == "ten")


def test_same_seed_same_deck() -> None:
    a = new_round(seed=99)
    b = new_round(seed=99)
    assert [c.id for c in a.deck] == [c.id for c in b.deck]


def test_empty_card_set_rejected() -> None:
    cfg = MatchConfig(card_set=CardSet(id="empty", target=10, expressions=()))
    with pytest.raises(ValueError):
        new_round(cfg, seed=1)


def test_find_card_returns_none_for_unknown_id() -> None:
    state = new_round(seed=1)
    assert find_card(state, "nope") is None
    first = state.deck[0]
    assert find_card(state, first.id) is first


def test_unknown_card_id_is_a_contract_violation() -> None:
    state = new_round(seed=1)
    with pytest.raises(UnknownCardError):
        reveal_card(state, "expr-99-deadbeef")


def test_is_match_rules() -> None:
    four_six = Card(id="a", kind="expression", text="4 + 6", value=10)
    three_seven = Card(id="b", kind="expression", text="3 + 7", value=10)
    ten = Card(id="c", kind="ten", text="10", value=10)
    other_ten = Card(id="d", kind="ten", text="10", value=10)
    six_five = Card(id="e", kind="expression", text="6 + 5", value=11)

    assert is_match(four_six, ten)
    assert is_match(ten, four_six)
    assert not is_match(four_six, three_seven)
    assert not is_match(ten, other_ten)
    assert not is_match(six_five, ten)


def test_second_reveal_of_same_card_is_noop() -> None:
    state = new_round(seed=3)
    card = _expr(state, "4 + 6")
    first = reveal_card(state, card.id)
    assert first.ok
    assert state.pair_phase == "one_revealed"

    again = reveal_card(state, card.id)
    assert not again.ok
    assert again.reason == "already_revealed"
    assert again.events == []
    assert state.revealed == [card.id]
    assert state.moves == 0


def test_reveal_while_locked_is_noop() -> None:
    state = new_round(seed=4)
    reveal_card(state, _expr(state, "3 + 7").id)
    reveal_card(state, _expr(state, "5 + 5").id)
    assert state.locked
    assert state.pair_phase == "evaluating"

    third = _ten(state)
    before = snapshot(state)
    res = reveal_card(state, third.id)
    assert not res.ok
    assert res.reason == "locked"
    assert snapshot(state) == before
    assert len(state.action_log) == 2


def test_match_increments_streak_and_retires_cards() -> None:
    state = new_round(seed=5)
    expr = _expr(state, "1 + 9")
    ten = _ten(state)

    reveal_card(state, expr.id)
    res = reveal_card(state, ten.id)
    assert res.ok
    assert [e["type"] for e in res.events] == ["CARD_REVEALED", "PAIR_SUCCESS"]
    assert state.matches_found == 1
    assert state.streak == 1
    assert state.best_streak == 1
    assert state.moves == 1
    assert expr.matched and ten.matched
    assert state.locked

    done = settle(state, state.generation)
    assert done.ok
    assert [e["type"] for e in done.events] == ["CARDS_RETIRED"]
    assert state.revealed == []
    assert not state.locked
    assert state.pair_phase == "idle"

    # retired cards ignore further clicks
    res2 = reveal_card(state, expr.id)
    assert not res2.ok
    assert res2.reason == "matched"


def test_mismatch_resets_streak_and_hides_cards() -> None:
    state = new_round(seed=6)
    _match_pair(state, "2 + 8")
    _match_pair(state, "8 + 2")
    assert state.streak == 2

    a = _expr(state, "3 + 7")
    b = _expr(state, "5 + 5")
    reveal_card(state, a.id)
    res = reveal_card(state, b.id)
    assert res.pending is not None
    assert res.pending.outcome == "mismatch"
    assert res.pending.delay == pytest.approx(0.70)
    assert [e["type"] for e in res.events] == ["CARD_REVEALED", "PAIR_FAILURE"]
    assert state.streak == 0
    assert state.best_streak == 2

    done = settle(state, state.generation)
    assert [e["type"] for e in done.events] == ["CARDS_HIDDEN"]
    assert not a.matched and not b.matched
    assert state.revealed == []
    assert not state.locked


def test_two_tens_never_match() -> None:
    state = new_round(seed=8)
    t1 = _ten(state)
    t2 = _ten(state, skip=(t1.id,))
    reveal_card(state, t1.id)
    res = reveal_card(state, t2.id)
    assert res.pending is not None and res.pending.outcome == "mismatch"
    assert state.matches_found == 0


def test_decoy_expression_never_matches() -> None:
    card_set = CardSet(
        id="decoy",
        target=10,
        expressions=(ExpressionDefinition("6 + 5", 11), ExpressionDefinition("4 + 6", 10)),
    )
    state = new_round(MatchConfig(card_set=card_set), seed=2)
    reveal_card(state, _expr(state, "6 + 5").id)
    res = reveal_card(state, _ten(state).id)
    assert res.pending is not None and res.pending.outcome == "mismatch"


def test_round_completes_only_on_last_pair() -> None:
    state = new_round(seed=9)
    texts = ["1 + 9", "2 + 8", "3 + 7", "4 + 6", "5 + 5", "8 + 2"]
    for i, text in enumerate(texts):
        assert not state.complete
        reveal_card(state, _expr(state, text).id)
        reveal_card(state, _ten(state).id)
        assert not state.complete  # still settling
        res = settle(state, state.generation)
        types = [e["type"] for e in res.events]
        if i < len(texts) - 1:
            assert "ROUND_COMPLETE" not in types
        else:
            assert types == ["CARDS_RETIRED", "ROUND_COMPLETE"]
            assert res.events[-1]["moves"] == 6
            assert res.events[-1]["best_streak"] == 6

    assert state.complete
    assert state.round_phase == "complete"
    assert state.matches_found == 6
    res = reveal_card(state, state.deck[0].id)
    assert not res.ok
    assert res.reason == "round_complete"


def test_moves_count_pairs_not_clicks() -> None:
    state = new_round(seed=10)
    a = _expr(state, "3 + 7")
    b = _expr(state, "5 + 5")
    reveal_card(state, a.id)
    reveal_card(state, a.id)
    reveal_card(state, b.id)
    reveal_card(state, b.id)
    assert state.moves == 1
    settle(state, state.generation)
    reveal_card(state, a.id)
    assert state.moves == 1
    reveal_card(state, b.id)
    assert state.moves == 2


def test_settle_ignores_other_generation() -> None:
    state = new_round(seed=11, generation=3)
    reveal_card(state, _expr(state, "1 + 9").id)
    reveal_card(state, _ten(state).id)

    stale = settle(state, 2)
    assert not stale.ok
    assert stale.reason == "stale"
    assert state.locked
    assert len(state.revealed) == 2

    assert settle(state, 3).ok
    assert not state.locked


def test_settle_without_pending_is_noop() -> None:
    state = new_round(seed=12)
    res = settle(state, state.generation)
    assert not res.ok
    assert res.reason == "stale"
