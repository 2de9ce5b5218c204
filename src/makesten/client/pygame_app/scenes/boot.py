from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from makesten.engine.session import MatchSession
from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text
from .board import BoardScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            game = self.ctx.content.load_game()
            config = game.config_for(self.ctx.card_set_id)
            self.ctx.session = MatchSession(
                config=config,
                scheduler=self.ctx.scheduler,
                telemetry=self.ctx.telemetry,
                seed=self.ctx.seed,
            )
            self.ctx.telemetry.log("boot", {"ok": True, "card_set": config.card_set.id})
            return SceneTransition(BoardScene(self.ctx, self.ctx.session))
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            h = self.ctx.screen.get_height()
            self._quit_button = Button(
                rect=pygame.Rect(20, h - 68, 140, 48),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((246, 243, 255))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "Makes Ten", (20, 20))

        if self._error is None:
            draw_text(screen, fonts.ui, "Loading cards...", (20, 80))
            return
        draw_text(screen, fonts.ui, "BOOT ERROR", (20, 80), color=(200, 50, 50))
        y = 120
        for line in self._error.splitlines()[:22]:
            draw_text(screen, fonts.small, line[:120], (20, y))
            y += 18
        if self._quit_button is not None:
            self._quit_button.draw(screen, fonts.ui)
