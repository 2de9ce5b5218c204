from __future__ import annotations

from typing import Callable, Mapping, Protocol, Sequence

from .actions import RevealCardAction, SettleAction
from .match import Event, MatchConfig, PendingResolution, RoundState, StepResult, new_round, step
from .scheduler import FrameScheduler, Scheduler

Listener = Callable[[Event], None]


class EventLogger(Protocol):
    def log(self, event_type: str, payload: Mapping[str, object]) -> None: ...


class MatchSession:
    """Owns the current round and wires deferred pair resolution to it.

    Every scheduled resolution carries the generation of the round that
    produced it; after `restart` the old generation no longer settles anything.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        scheduler: Scheduler | None = None,
        telemetry: EventLogger | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.scheduler: Scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.telemetry = telemetry
        self._listeners: list[Listener] = []
        self.state: RoundState = new_round(self.config, seed=seed, generation=0)
        self._log_round_started()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def reveal(self, card_id: str) -> StepResult:
        res = step(self.state, RevealCardAction(card_id=card_id))
        self._publish(res.events)
        if res.pending is not None:
            self._schedule(res.pending)
        return res

    def restart(self, seed: int | None = None) -> RoundState:
        self.state = new_round(self.config, seed=seed, generation=self.state.generation + 1)
        self._publish(self.state.event_log)
        self._log_round_started()
        return self.state

    def _schedule(self, pending: PendingResolution) -> None:
        self._log(
            "pair_evaluated",
            {
                "generation": pending.generation,
                "outcome": pending.outcome,
                "moves": self.state.moves,
                "streak": self.state.streak,
            },
        )
        generation = pending.generation
        self.scheduler.call_later(pending.delay, lambda: self._settle(generation))

    def _settle(self, generation: int) -> None:
        if generation != self.state.generation:
            return
        res = step(self.state, SettleAction(generation=generation))
        if not res.ok:
            return
        self._publish(res.events)
        for ev in res.events:
            if ev.get("type") == "ROUND_COMPLETE":
                self._log(
                    "round_complete",
                    {"generation": generation, "moves": ev["moves"], "best_streak": ev["best_streak"]},
                )

    def _publish(self, events: Sequence[Event]) -> None:
        for ev in events:
            for listener in list(self._listeners):
                listener(ev)

    def _log_round_started(self) -> None:
        self._log(
            "round_started",
            {"generation": self.state.generation, "seed": self.state.seed, "card_set": self.config.card_set.id},
        )

    def _log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)
