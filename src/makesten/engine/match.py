from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Literal

from .actions import Action, RevealCardAction, SettleAction
from .types import DEFAULT_CARD_SET, Card, CardSet, PairPhase, RoundPhase

Event = dict[str, object]
Outcome = Literal["match", "mismatch"]


class UnknownCardError(LookupError):
    """A card id that is not part of the current deck reached the engine."""


@dataclass(frozen=True)
class MatchConfig:
    card_set: CardSet = DEFAULT_CARD_SET
    match_settle_delay: float = 0.42
    mismatch_settle_delay: float = 0.70


@dataclass(frozen=True)
class PendingResolution:
    generation: int
    outcome: Outcome
    card_ids: tuple[str, str]
    delay: float


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    reason: str | None = None
    pending: PendingResolution | None = None


@dataclass
class RoundState:
    config: MatchConfig
    seed: int
    deck: list[Card]
    generation: int = 0
    revealed: list[str] = field(default_factory=list)
    locked: bool = False
    matches_found: int = 0
    streak: int = 0
    best_streak: int = 0
    moves: int = 0
    pending: PendingResolution | None = None
    complete: bool = False
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    @property
    def total_pairs(self) -> int:
        return self.config.card_set.total_pairs

    @property
    def pair_phase(self) -> PairPhase:
        if self.locked:
            return "evaluating"
        if self.revealed:
            return "one_revealed"
        return "idle"

    @property
    def round_phase(self) -> RoundPhase:
        return "complete" if self.complete else "in_progress"

    def is_revealed(self, card_id: str) -> bool:
        return card_id in self.revealed


def _emit(state: RoundState, event: Event) -> None:
    state.event_log.append(event)


def _card_suffix(rng: random.Random) -> str:
    return f"{rng.getrandbits(32):08x}"


def _build_deck(rng: random.Random, card_set: CardSet) -> list[Card]:
    cards: list[Card] = []
    for idx, ex in enumerate(card_set.expressions):
        cards.append(
            Card(id=f"expr-{idx}-{_card_suffix(rng)}", kind="expression", text=ex.text, value=ex.value)
        )
        cards.append(
            Card(id=f"ten-{idx}-{_card_suffix(rng)}", kind="ten", text=str(card_set.target), value=card_set.target)
        )
    rng.shuffle(cards)
    return cards


def find_card(state: RoundState, card_id: str) -> Card | None:
    for card in state.deck:
        if card.id == card_id:
            return card
    return None


def _require_card(state: RoundState, card_id: str) -> Card:
    card = find_card(state, card_id)
    if card is None:
        raise UnknownCardError(f"Card not in current deck: {card_id}")
    return card


def is_match(a: Card, b: Card, target: int = 10) -> bool:
    """Expression/ten pairs only; the expression must evaluate to `target`."""
    if a.kind == "expression" and b.kind == "ten":
        return a.value == target
    if b.kind == "expression" and a.kind == "ten":
        return b.value == target
    return False


def evaluate_pair(state: RoundState, id_a: str, id_b: str) -> PendingResolution:
    a = _require_card(state, id_a)
    b = _require_card(state, id_b)
    state.locked = True
    card_ids = (id_a, id_b)

    if is_match(a, b, state.config.card_set.target):
        a.matched = True
        b.matched = True
        state.matches_found += 1
        state.streak += 1
        state.best_streak = max(state.best_streak, state.streak)
        _emit(state, {"type": "PAIR_SUCCESS", "card_ids": list(card_ids)})
        pending = PendingResolution(
            generation=state.generation,
            outcome="match",
            card_ids=card_ids,
            delay=state.config.match_settle_delay,
        )
    else:
        state.streak = 0
        _emit(state, {"type": "PAIR_FAILURE", "card_ids": list(card_ids)})
        pending = PendingResolution(
            generation=state.generation,
            outcome="mismatch",
            card_ids=card_ids,
            delay=state.config.mismatch_settle_delay,
        )

    state.pending = pending
    return pending


def reveal_card(state: RoundState, card_id: str) -> StepResult:
    """Reveal one card; the second reveal of a pair evaluates it immediately.

    Rejected reveals (locked board, matched card, card already face up,
    finished round) leave the state untouched and return ok=False.
    """
    card = _require_card(state, card_id)
    if state.complete:
        return StepResult(ok=False, events=[], reason="round_complete")
    if state.locked:
        return StepResult(ok=False, events=[], reason="locked")
    if card.matched:
        return StepResult(ok=False, events=[], reason="matched")
    if state.is_revealed(card_id):
        return StepResult(ok=False, events=[], reason="already_revealed")

    before = len(state.event_log)
    state.revealed.append(card_id)
    _emit(state, {"type": "CARD_REVEALED", "card_id": card_id})

    pending = None
    if len(state.revealed) == 2:
        state.moves += 1
        pending = evaluate_pair(state, state.revealed[0], state.revealed[1])
    return StepResult(ok=True, events=state.event_log[before:], pending=pending)


def settle(state: RoundState, generation: int) -> StepResult:
    """Apply the pending resolution, unless it belongs to another round."""
    pending = state.pending
    if generation != state.generation or pending is None or pending.generation != generation:
        return StepResult(ok=False, events=[], reason="stale")

    before = len(state.event_log)
    card_ids = list(pending.card_ids)
    if pending.outcome == "match":
        _emit(state, {"type": "CARDS_RETIRED", "card_ids": card_ids})
    else:
        _emit(state, {"type": "CARDS_HIDDEN", "card_ids": card_ids})

    state.revealed = []
    state.locked = False
    state.pending = None

    if state.matches_found == state.total_pairs:
        state.complete = True
        _emit(state, {"type": "ROUND_COMPLETE", "moves": state.moves, "best_streak": state.best_streak})
    return StepResult(ok=True, events=state.event_log[before:])


def step(state: RoundState, action: Action) -> StepResult:
    """Apply a single action to the round state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, generation, action sequence). Only accepted actions are logged,
    so a rejected action leaves the state exactly as it was.
    """
    if isinstance(action, RevealCardAction):
        res = reveal_card(state, action.card_id)
    elif isinstance(action, SettleAction):
        res = settle(state, action.generation)
    else:
        return StepResult(ok=False, events=[], reason="unknown_action")

    if res.ok:
        state.action_log.append(action)
    return res


def new_round(
    config: MatchConfig | None = None,
    seed: int | None = None,
    generation: int = 0,
) -> RoundState:
    cfg = config or MatchConfig()
    if cfg.card_set.total_pairs == 0:
        raise ValueError(f"Card set {cfg.card_set.id!r} has no expressions.")
    if seed is None:
        seed = random.randrange(1, 2**31 - 1)

    rng = random.Random(seed)
    deck = _build_deck(rng, cfg.card_set)
    state = RoundState(config=cfg, seed=seed, deck=deck, generation=generation)
    _emit(
        state,
        {"type": "ROUND_STARTED", "generation": generation, "seed": seed, "total_pairs": state.total_pairs},
    )
    return state


def replay(
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
    generation: int = 0,
) -> RoundState:
    state = new_round(config=config, seed=seed, generation=generation)
    for a in actions:
        step(state, a)
    return state
