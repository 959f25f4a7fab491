from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set

import pygame

from linkscroll.anim import Animator
from linkscroll.demo.pane import Pane
from linkscroll.settings import AppCfg
from linkscroll.sync.group import SyncGroup

logger = logging.getLogger(__name__)


class DemoApp:
    """
    Side-by-side panes sharing one SyncGroup.

      wheel          scroll the pane under the cursor
      press + drag   hold every pane, then drag the one under the cursor
      Home           group.reset_scroll()
      End            animate every pane to the bottom
      R              rebuild the pane under the cursor (same controller)
      N / D          add a pane / drop the last one
    """

    def __init__(self, cfg: AppCfg):
        self.cfg = cfg
        pygame.init()
        pygame.display.set_caption(cfg.window.title)

        self._flags = pygame.RESIZABLE | pygame.DOUBLEBUF
        self.screen = pygame.display.set_mode(
            (int(cfg.window.width), int(cfg.window.height)),
            flags=self._flags,
        )
        self.font = pygame.font.Font(None, 22)

        self.clock = pygame.time.Clock()
        self.running = True

        self.animator = Animator()
        self.group = SyncGroup.from_settings(cfg.sync)
        self.group.add_offset_changed_listener(self._on_offset_changed)
        self.panes: List[Pane] = []
        self._active: Optional[Pane] = None
        self._tasks: Set[asyncio.Task] = set()
        for _ in range(cfg.panes.count):
            self.add_pane()

    # ------------------------------------------------------------------ #
    # Panes
    # ------------------------------------------------------------------ #
    def add_pane(self) -> None:
        pc = self.cfg.panes
        pane = Pane(f"P{len(self.panes) + 1}", self.group.add_and_get(), pygame.Rect(0, 0, 1, 1),
                    pc.rows, pc.row_h, self.animator)
        self.panes.append(pane)
        self._layout()
        logger.info("pane %s joined at offset %.1f", pane.title, pane.controller.offset)

    def drop_pane(self) -> None:
        if len(self.panes) <= 1:
            return
        pane = self.panes.pop()
        if pane is self._active:
            self._active = None
        pane.viewport.unmount()
        pane.controller.release()
        self._layout()
        logger.info("pane %s released", pane.title)

    def _layout(self) -> None:
        if not self.panes:
            return
        w, h = self.screen.get_size()
        gap = self.cfg.panes.gap_px
        n = len(self.panes)
        col_w = max(1, (w - gap * (n + 1)) // n)
        for i, pane in enumerate(self.panes):
            pane.on_resize(pygame.Rect(gap + i * (col_w + gap), gap, col_w, max(1, h - 2 * gap)))

    def _pane_at(self, pos) -> Optional[Pane]:
        for pane in self.panes:
            if pane.hit_test(pos):
                return pane
        return None

    def _on_offset_changed(self) -> None:
        logger.debug("group offset -> %.1f", self.group.offset)

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ------------------------------------------------------------------ #
    # Main loop
    # ------------------------------------------------------------------ #
    async def run(self) -> None:
        while self.running:
            dt = self.clock.tick(self.cfg.fps) / 1000.0

            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    self.running = False
                    break
                if e.type == pygame.VIDEORESIZE:
                    self.screen = pygame.display.set_mode((max(1, e.w), max(1, e.h)), flags=self._flags)
                    self._layout()
                    continue
                self.handle_event(e)

            self.animator.update(dt)
            for pane in self.panes:
                pane.update(dt)
            # let animation awaiters resume
            await asyncio.sleep(0)

            self.screen.fill(self.cfg.window.bg_rgb)
            for pane in self.panes:
                pane.draw(self.screen, self.font)
            pygame.display.flip()

        for task in list(self._tasks):
            task.cancel()
        pygame.quit()

    def handle_event(self, e: pygame.event.Event) -> None:
        if e.type == pygame.MOUSEWHEEL:
            pane = self._pane_at(pygame.mouse.get_pos())
            if pane:
                pane.viewport.scroll_by(-e.y * self.cfg.panes.scroll_wheel_pixels)
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self._active = self._pane_at(e.pos)
            if self._active:
                self._active.viewport.touch_down()
        elif e.type == pygame.MOUSEMOTION and self._active and e.buttons[0]:
            # dragging down reveals earlier rows
            self._active.viewport.drag_by(-e.rel[1])
        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1 and self._active:
            self._active.viewport.lift()
            self._active = None
        elif e.type == pygame.KEYDOWN:
            self._on_key(e.key)

    def _on_key(self, key: int) -> None:
        if key == pygame.K_HOME:
            self.group.reset_scroll()
        elif key == pygame.K_END:
            bottom = min(p.viewport.extent.max() for p in self.panes)
            anim = self.cfg.animation
            self._spawn(self.group.animate_to(bottom, curve=anim.curve_fn(), duration=anim.duration))
        elif key == pygame.K_r:
            pane = self._pane_at(pygame.mouse.get_pos())
            if pane:
                pane.viewport.rebuild()
        elif key == pygame.K_n:
            self.add_pane()
        elif key == pygame.K_d:
            self.drop_pane()
        elif key == pygame.K_ESCAPE:
            self.running = False
