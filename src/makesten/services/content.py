from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from makesten.engine.match import MatchConfig
from makesten.engine.types import CardSet, ExpressionDefinition


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_number(obj: Mapping[str, object], key: str) -> float:
    v = obj.get(key)
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        raise ContentError(f"Expected number for {key}")
    return float(v)


def _parse_card_set(set_id: str, raw: Mapping[str, object]) -> CardSet:
    raw_exprs = raw.get("expressions")
    if not isinstance(raw_exprs, list):
        raise ContentError(f"card_sets.{set_id}.expressions must be a list")
    expressions: list[ExpressionDefinition] = []
    for item in raw_exprs:
        if not isinstance(item, dict):
            raise ContentError(f"card_sets.{set_id}: expression must be an object")
        # duplicates are allowed content
        expressions.append(ExpressionDefinition(text=_require_str(item, "text"), value=_require_int(item, "value")))
    return CardSet(id=set_id, target=_require_int(raw, "target"), expressions=tuple(expressions))


@dataclass(frozen=True)
class GameContent:
    card_sets: dict[str, CardSet]
    default_card_set: str
    match_settle_delay: float
    mismatch_settle_delay: float

    def config_for(self, card_set_id: str | None = None) -> MatchConfig:
        set_id = card_set_id or self.default_card_set
        card_set = self.card_sets.get(set_id)
        if card_set is None:
            known = ", ".join(sorted(self.card_sets))
            raise ContentError(f"Unknown card set {set_id!r} (known: {known})")
        return MatchConfig(
            card_set=card_set,
            match_settle_delay=self.match_settle_delay,
            mismatch_settle_delay=self.mismatch_settle_delay,
        )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_game(self) -> GameContent:
        path = self._data_dir / "game.json"
        schema = _load_json(self._schema_dir / "game.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("game.json must be an object")

        raw_sets = raw.get("card_sets")
        if not isinstance(raw_sets, dict):
            raise ContentError("game.json.card_sets must be an object")
        card_sets: dict[str, CardSet] = {}
        for set_id, set_raw in raw_sets.items():
            if not isinstance(set_id, str) or not isinstance(set_raw, dict):
                continue
            card_sets[set_id] = _parse_card_set(set_id, set_raw)

        default_id = _require_str(raw, "default_card_set")
        if default_id not in card_sets:
            raise ContentError(f"default_card_set {default_id!r} is not defined in card_sets")

        return GameContent(
            card_sets=card_sets,
            default_card_set=default_id,
            match_settle_delay=_require_number(raw, "match_settle_delay"),
            mismatch_settle_delay=_require_number(raw, "mismatch_settle_delay"),
        )

    def load_config(self, card_set_id: str | None = None) -> MatchConfig:
        return self.load_game().config_for(card_set_id)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_game()
