from __future__ import annotations

import pygame

from linkscroll.anim import Animator
from linkscroll.position import ScrollDirection
from linkscroll.sync.member import SyncController
from linkscroll.viewport import Viewport

ROW_RGB = (220, 222, 228)
ROW_ALT_BG = (255, 255, 255, 10)
PANE_BG = (24, 26, 31)
PANE_BORDER = (70, 74, 84)
TRACK_RGBA = (255, 255, 255, 24)
THUMB_RGBA = (255, 255, 255, 140)
SCROLLBAR_LINGER_S = 0.6


class Scrollbar:
    """
    Stateless drawer for a simple vertical scrollbar.
    """
    width = 6
    margin = 4
    min_thumb = 24

    @classmethod
    def draw(cls, layer: pygame.Surface, rect: pygame.Rect, content_h: int,
             scroll_y: float, max_scroll: float) -> None:
        if content_h <= rect.h:
            return
        track = pygame.Rect(rect.right - cls.margin - cls.width, rect.y + cls.margin,
                            cls.width, rect.h - 2 * cls.margin)
        if track.h <= 0:
            return
        pygame.draw.rect(layer, TRACK_RGBA, track, border_radius=cls.width // 2)

        ratio = max(0.0, min(1.0, rect.h / max(1, content_h)))
        thumb_h = max(cls.min_thumb, int(track.h * ratio))
        pos_ratio = scroll_y / max(1e-6, max_scroll)
        free = max(0, track.h - thumb_h)
        thumb = pygame.Rect(track.x, track.y + int(free * pos_ratio), cls.width, thumb_h)
        pygame.draw.rect(layer, THUMB_RGBA, thumb, border_radius=cls.width // 2)


class Pane:
    """
    One synced column of numbered rows.
    The scrollbar shows only while the pane's user scroll direction is not idle.
    """
    def __init__(self, title: str, controller: SyncController, rect: pygame.Rect,
                 rows: int, row_h: int, animator: Animator) -> None:
        self.title = title
        self.rect = rect.copy()
        self.rows = rows
        self.row_h = row_h
        self._still_t = 0.0
        self.viewport = Viewport(controller, content_h=rows * row_h, viewport_h=rect.h, animator=animator)
        self.viewport.mount()

    @property
    def controller(self) -> SyncController:
        return self.viewport.controller  # type: ignore[return-value]

    def on_resize(self, rect: pygame.Rect) -> None:
        self.rect = rect.copy()
        self.viewport.resize(viewport_h=rect.h)

    def hit_test(self, pos) -> bool:
        return self.rect.collidepoint(pos)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        pos = self.viewport.position
        scroll_y = pos.pixels if pos else 0.0
        layer = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        layer.fill(PANE_BG)

        first = max(0, int(scroll_y // self.row_h))
        last = min(self.rows, first + self.rect.h // self.row_h + 2)
        for i in range(first, last):
            y = i * self.row_h - int(round(scroll_y))
            if i % 2:
                pygame.draw.rect(layer, ROW_ALT_BG, pygame.Rect(0, y, self.rect.w, self.row_h))
            label = font.render(f"{self.title} - row {i + 1}", True, ROW_RGB)
            layer.blit(label, (10, y + (self.row_h - label.get_height()) // 2))

        if pos is not None and pos.user_scroll_direction is not ScrollDirection.IDLE:
            Scrollbar.draw(layer, layer.get_rect(), self.viewport.extent.content_h,
                           scroll_y, pos.max_scroll_extent)

        surface.blit(layer, self.rect.topleft)
        pygame.draw.rect(surface, PANE_BORDER, self.rect, width=1)

    def update(self, dt: float) -> None:
        """Hide the scrollbar once nothing has moved the pane for a moment."""
        pos = self.viewport.position
        if pos is None:
            return
        if pos.activity is not None and pos.activity.is_scrolling:
            self._still_t = 0.0
            return
        self._still_t += dt
        if self._still_t >= SCROLLBAR_LINGER_S:
            pos.update_user_scroll_direction(ScrollDirection.IDLE)
