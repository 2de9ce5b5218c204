from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from makesten.engine.match import Event
from makesten.engine.session import MatchSession
from makesten.engine.types import Card

from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text, draw_text_centered

COLUMNS = 4
CARD_W, CARD_H = 150, 170
GAP = 18

FLASH_COLORS = {
    "success": (120, 220, 140),
    "wrong": (240, 120, 120),
}


class BoardScene:
    def __init__(self, ctx: GameContext, session: MatchSession) -> None:
        self.ctx = ctx
        self.session = session

        # card_id -> (flash kind, seconds left)
        self._flash: dict[str, tuple[str, float]] = {}
        self._final: tuple[int, int] | None = None  # (moves, best streak)
        self._modal_open = False

        w, h = self.ctx.screen.get_size()
        self.btn_restart = Button(rect=pygame.Rect(w - 180, 20, 160, 48), text="Restart", on_click=self._on_restart)
        self._modal_rect = pygame.Rect(0, 0, 520, 280)
        self._modal_rect.center = (w // 2, h // 2)
        self.btn_play_again = Button(
            rect=pygame.Rect(self._modal_rect.centerx - 110, self._modal_rect.bottom - 80, 220, 52),
            text="Play again",
            on_click=self._on_restart,
        )

        self.session.subscribe(self._on_event)

    def _on_restart(self) -> None:
        self.session.restart()

    def _on_event(self, ev: Event) -> None:
        t = ev.get("type")
        if t == "ROUND_STARTED":
            self._flash.clear()
            self._final = None
            self._modal_open = False
        elif t in ("PAIR_SUCCESS", "PAIR_FAILURE"):
            cfg = self.session.config
            if t == "PAIR_SUCCESS":
                kind, duration = "success", cfg.match_settle_delay
            else:
                kind, duration = "wrong", cfg.mismatch_settle_delay
            card_ids = ev.get("card_ids", [])
            if isinstance(card_ids, list):
                for cid in card_ids:
                    self._flash[str(cid)] = (kind, duration)
        elif t in ("CARDS_RETIRED", "CARDS_HIDDEN"):
            card_ids = ev.get("card_ids", [])
            if isinstance(card_ids, list):
                for cid in card_ids:
                    self._flash.pop(str(cid), None)
        elif t == "ROUND_COMPLETE":
            moves = ev.get("moves", 0)
            best = ev.get("best_streak", 0)
            self._final = (int(moves) if isinstance(moves, int) else 0, int(best) if isinstance(best, int) else 0)
            self._modal_open = True

    def _card_rect(self, index: int) -> pygame.Rect:
        w, h = self.ctx.screen.get_size()
        rows = (len(self.session.state.deck) + COLUMNS - 1) // COLUMNS
        grid_w = COLUMNS * CARD_W + (COLUMNS - 1) * GAP
        grid_h = rows * CARD_H + (rows - 1) * GAP
        x0 = (w - grid_w) // 2
        y0 = max(100, (h - grid_h) // 2 + 30)
        col, row = index % COLUMNS, index // COLUMNS
        return pygame.Rect(x0 + col * (CARD_W + GAP), y0 + row * (CARD_H + GAP), CARD_W, CARD_H)

    def _hit_test_card(self, pos: tuple[int, int]) -> Card | None:
        for i, card in enumerate(self.session.state.deck):
            if self._card_rect(i).collidepoint(pos):
                return card
        return None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._modal_open:
            if self.btn_play_again.handle_event(event):
                return
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                # clicking outside the panel dismisses it
                if not self._modal_rect.collidepoint(event.pos):
                    self._modal_open = False
            return

        if self.btn_restart.handle_event(event):
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            card = self._hit_test_card(event.pos)
            if card is not None:
                self.session.reveal(card.id)

        if event.type == pygame.KEYDOWN and event.key == pygame.K_r:
            self._on_restart()

    def update(self, dt: float) -> SceneTransition | None:
        self.ctx.scheduler.advance(dt)
        for cid, (kind, left) in list(self._flash.items()):
            left -= dt
            if left <= 0:
                del self._flash[cid]
            else:
                self._flash[cid] = (kind, left)
        return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((246, 243, 255))
        fonts = self.ctx.assets.fonts
        state = self.session.state

        draw_text(screen, fonts.big, "Makes Ten", (24, 20))
        draw_text(
            screen,
            fonts.ui,
            f"Matches: {state.matches_found} / {state.total_pairs}    Streak: {state.streak}    Moves: {state.moves}",
            (24, 70),
        )
        self.btn_restart.draw(screen, fonts.ui)

        for i, card in enumerate(state.deck):
            self._draw_card(screen, self._card_rect(i), card)

        if self._modal_open and self._final is not None:
            self._draw_modal(screen)

    def _draw_card(self, screen: pygame.Surface, rect: pygame.Rect, card: Card) -> None:
        assets = self.ctx.assets
        state = self.session.state
        size = (rect.width, rect.height)

        if state.is_revealed(card.id):
            target = state.config.card_set.target
            hint = f"Makes {target}?" if card.kind == "expression" else "Ten"
            screen.blit(assets.card_face(card.text, hint, size, (255, 255, 255)), rect.topleft)
        elif card.matched:
            face = assets.card_face(card.text, "", size, (220, 240, 225)).copy()
            face.set_alpha(120)
            screen.blit(face, rect.topleft)
        else:
            screen.blit(assets.card_back(size), rect.topleft)

        flash = self._flash.get(card.id)
        if flash is not None:
            pygame.draw.rect(screen, FLASH_COLORS[flash[0]], rect, width=6, border_radius=14)
        else:
            pygame.draw.rect(screen, (200, 190, 230), rect, width=2, border_radius=14)

    def _draw_modal(self, screen: pygame.Surface) -> None:
        assert self._final is not None
        fonts = self.ctx.assets.fonts
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        screen.blit(overlay, (0, 0))

        r = self._modal_rect
        pygame.draw.rect(screen, (255, 255, 255), r, border_radius=18)
        moves, best = self._final
        draw_text_centered(screen, fonts.big, "You made all the tens!", (r.centerx, r.y + 50))
        draw_text_centered(screen, fonts.ui, f"Moves: {moves}", (r.centerx, r.y + 110))
        draw_text_centered(screen, fonts.ui, f"Best streak: {best}", (r.centerx, r.y + 145))
        self.btn_play_again.draw(screen, fonts.ui)
