from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from makesten.engine.scheduler import FrameScheduler
from makesten.paths import get_paths
from makesten.services.content import ContentService
from makesten.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="makesten")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--seed", type=int, default=None, help="fixed shuffle seed for the first round")
    parser.add_argument("--card-set", default=None, help="card set id from data/game.json")
    parser.add_argument("--no-telemetry", action="store_true")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Makes Ten")

    paths = get_paths()
    ctx = GameContext(
        screen=screen,
        clock=pygame.time.Clock(),
        paths=paths,
        assets=AssetManager(),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.userdata_dir / "telemetry.jsonl", enabled=not args.no_telemetry),
        scheduler=FrameScheduler(),
        card_set_id=args.card_set,
        seed=args.seed,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()
