from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CardKind = Literal["expression", "ten"]
PairPhase = Literal["idle", "one_revealed", "evaluating"]
RoundPhase = Literal["in_progress", "complete"]


@dataclass(frozen=True)
class ExpressionDefinition:
    text: str
    value: int


@dataclass(frozen=True)
class CardSet:
    """Immutable card content for a round.

    Each expression yields one expression card and one ten card. Repeated
    expressions (e.g. "2 + 8" and "8 + 2") are valid content.
    """

    id: str
    target: int
    expressions: tuple[ExpressionDefinition, ...]

    @property
    def total_pairs(self) -> int:
        return len(self.expressions)


@dataclass
class Card:
    id: str
    kind: CardKind
    text: str
    value: int
    matched: bool = False


DEFAULT_CARD_SET = CardSet(
    id="make_ten",
    target=10,
    expressions=(
        ExpressionDefinition(text="1 + 9", value=10),
        ExpressionDefinition(text="2 + 8", value=10),
        ExpressionDefinition(text="3 + 7", value=10),
        ExpressionDefinition(text="4 + 6", value=10),
        ExpressionDefinition(text="5 + 5", value=10),
        ExpressionDefinition(text="8 + 2", value=10),
    ),
)
