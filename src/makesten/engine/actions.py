from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RevealCardAction:
    card_id: str


@dataclass(frozen=True)
class SettleAction:
    """Resolve the pending pair evaluation of the round tagged `generation`."""

    generation: int


Action = RevealCardAction | SettleAction
