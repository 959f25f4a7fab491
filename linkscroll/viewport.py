from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from linkscroll.anim import Animator
from linkscroll.controller import ScrollController
from linkscroll.errors import PreconditionError
from linkscroll.position import DragActivity, HoldActivity, ScrollPosition

@dataclass
class ScrollExtent:
    content_h: int = 0
    viewport_h: int = 0

    def max(self) -> float: return max(0.0, float(self.content_h - self.viewport_h))


class Viewport:
    """
    Host side of a scrollable: owns the extent and the animator, creates the
    controller's position when mounted, and turns raw input into motion.

      - mount() / unmount() / rebuild()    lifecycle
      - scroll_by(dy)                      wheel
      - touch_down() / drag_by(dy) / lift() pointer gesture
    """
    def __init__(self, controller: ScrollController, *, content_h: int = 0, viewport_h: int = 0,
                 animator: Optional[Animator] = None) -> None:
        self.controller = controller
        self.extent = ScrollExtent(content_h=content_h, viewport_h=viewport_h)
        self.animator = animator or Animator()
        self.position: Optional[ScrollPosition] = None
        self._hold: Optional[HoldActivity] = None
        self._drag: Optional[DragActivity] = None

    # ScrollContext
    def max_scroll_extent(self) -> float:
        return self.extent.max()

    @property
    def mounted(self) -> bool:
        return self.position is not None

    # ---------- lifecycle ----------
    def mount(self) -> None:
        if self.position is not None:
            return
        self.position = self.controller.create_scroll_position(self)
        self.controller.attach(self.position)

    def unmount(self) -> None:
        pos = self.position
        if pos is None:
            return
        self._hold = self._drag = None
        self.controller.detach(pos)
        pos.dispose()
        self.position = None

    def rebuild(self, controller: Optional[ScrollController] = None) -> None:
        """
        Recreate the position. Same controller: the new position keeps the old
        offset. New controller: the old one is dropped and the new one starts
        from its initial_scroll_offset.
        """
        if controller is not None and controller is not self.controller:
            self.unmount()
            self.controller = controller
            self.mount()
            return
        old = self._require()
        self._hold = self._drag = None
        new = self.controller.create_scroll_position(self, old_position=old)
        self.controller.detach(old)
        self.controller.attach(new)
        old.dispose()
        self.position = new

    def resize(self, *, content_h: Optional[int] = None, viewport_h: Optional[int] = None) -> None:
        if content_h is not None:
            self.extent.content_h = content_h
        if viewport_h is not None:
            self.extent.viewport_h = viewport_h

    # ---------- input ----------
    def scroll_by(self, dy: float) -> None:
        self._require().pointer_scroll(dy)

    def touch_down(self) -> HoldActivity:
        self._drag = None
        self._hold = self._require().hold(self._on_hold_ended)
        return self._hold

    def drag_by(self, dy: float) -> None:
        if self._drag is None or self._drag.disposed:
            self._drag = self._require().drag()
        self._drag.update(dy)

    def lift(self) -> None:
        if self._drag is not None:
            self._drag.end()
            self._drag = None
        elif self._hold is not None:
            self._hold.cancel()

    def _on_hold_ended(self) -> None:
        self._hold = None

    def _require(self) -> ScrollPosition:
        if self.position is None:
            raise PreconditionError("Viewport is not mounted")
        return self.position
