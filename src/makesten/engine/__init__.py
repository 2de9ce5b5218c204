"""Deterministic, headless match engine for Makes Ten.

IMPORTANT: This package must never import pygame.
"""

from .actions import RevealCardAction, SettleAction
from .match import (
    MatchConfig,
    PendingResolution,
    RoundState,
    StepResult,
    UnknownCardError,
    evaluate_pair,
    find_card,
    is_match,
    new_round,
    replay,
    reveal_card,
    settle,
    step,
)
from .scheduler import FrameScheduler, Scheduler
from .session import MatchSession
from .types import DEFAULT_CARD_SET, Card, CardKind, CardSet, ExpressionDefinition

__all__ = [
    "DEFAULT_CARD_SET",
    "Card",
    "CardKind",
    "CardSet",
    "ExpressionDefinition",
    "FrameScheduler",
    "MatchConfig",
    "MatchSession",
    "PendingResolution",
    "RevealCardAction",
    "RoundState",
    "Scheduler",
    "SettleAction",
    "StepResult",
    "UnknownCardError",
    "evaluate_pair",
    "find_card",
    "is_match",
    "new_round",
    "replay",
    "reveal_card",
    "settle",
    "step",
]
