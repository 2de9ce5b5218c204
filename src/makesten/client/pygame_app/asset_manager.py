from __future__ import annotations

import math
from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from .ui import Color, draw_text_centered


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font
    card: pygame.font.Font


class AssetManager:
    """Fonts plus procedurally drawn card faces; no image files are needed."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, str, int, int, Color], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 28),
            small=pygame.font.SysFont(None, 20),
            big=pygame.font.SysFont(None, 48),
            card=pygame.font.SysFont(None, 52),
        )

    def card_face(self, text: str, hint: str, size: tuple[int, int], bg: Color) -> pygame.Surface:
        w, h = size
        key = (text, hint, w, h, bg)
        if key in self._cache:
            return self._cache[key]

        face = pygame.Surface(size, pygame.SRCALPHA)
        pygame.draw.rect(face, bg, face.get_rect(), border_radius=14)
        draw_text_centered(face, self.fonts.card, text, (w // 2, h // 2 - 10))
        if hint:
            draw_text_centered(face, self.fonts.small, hint, (w // 2, h - 24), color=(110, 110, 140))
        self._cache[key] = face
        return face

    def card_back(self, size: tuple[int, int]) -> pygame.Surface:
        w, h = size
        key = ("<back>", "", w, h, (255, 214, 102))
        if key in self._cache:
            return self._cache[key]

        back = pygame.Surface(size, pygame.SRCALPHA)
        pygame.draw.rect(back, (255, 214, 102), back.get_rect(), border_radius=14)
        cx, cy = w / 2, h / 2
        outer = min(w, h) * 0.28
        points: list[tuple[float, float]] = []
        for i in range(10):
            r = outer if i % 2 == 0 else outer * 0.45
            angle = math.pi / 2 + i * math.pi / 5
            points.append((cx + r * math.cos(angle), cy - r * math.sin(angle)))
        pygame.draw.polygon(back, (255, 255, 255), points)
        self._cache[key] = back
        return back
