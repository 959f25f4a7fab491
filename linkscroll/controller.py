from __future__ import annotations

import asyncio
from typing import Optional

from linkscroll.anim import Curve, ease_out_cubic
from linkscroll.errors import PreconditionError
from linkscroll.notifier import ChangeNotifier
from linkscroll.position import ScrollContext, ScrollPosition


class ScrollController(ChangeNotifier):
    """
    Offset handle for one viewport.

    The host calls create_scroll_position() when the viewport goes live, then
    attach()/detach() around its lifetime. Everything else (offset, jump_to,
    animate_to) is for application code.
    """
    def __init__(self, *, initial_scroll_offset: float = 0.0) -> None:
        super().__init__()
        self._initial_scroll_offset = float(initial_scroll_offset)
        self._position: Optional[ScrollPosition] = None
        self._last_offset = self._initial_scroll_offset
        self.released = False

    # ----- queries --------------------------------------------------------------
    @property
    def initial_scroll_offset(self) -> float:
        return self._initial_scroll_offset

    @property
    def has_clients(self) -> bool:
        return self._position is not None

    @property
    def position(self) -> ScrollPosition:
        if self._position is None:
            raise PreconditionError(f"{type(self).__name__} is not attached to any viewport")
        return self._position

    @property
    def offset(self) -> float:
        """Live offset while attached; otherwise the last one known."""
        if self._position is not None:
            return self._position.pixels
        return self._last_offset

    # ----- motion ---------------------------------------------------------------
    def jump_to(self, value: float) -> None:
        self.position.jump_to(float(value))

    def animate_to(self, offset: float, *, duration: float, curve: Curve = ease_out_cubic) -> asyncio.Future:
        return self.position.animate_to(float(offset), duration=duration, curve=curve)

    # ----- host side --------------------------------------------------------------
    def create_scroll_position(self, context: ScrollContext,
                               old_position: Optional[ScrollPosition] = None) -> ScrollPosition:
        return ScrollPosition(context, initial_pixels=self.initial_scroll_offset, old_position=old_position)

    def attach(self, position: ScrollPosition) -> None:
        if self._position is not None:
            raise PreconditionError(f"{type(self).__name__} is already attached to a viewport")
        self._position = position
        position.add_listener(self._on_position_changed)

    def detach(self, position: ScrollPosition) -> None:
        if position is not self._position:
            raise PreconditionError("Cannot detach a position this controller is not attached to")
        position.remove_listener(self._on_position_changed)
        self._last_offset = position.pixels
        self._position = None

    def _on_position_changed(self) -> None:
        self.notify_listeners()

    # ----- lifecycle --------------------------------------------------------------
    def release(self) -> None:
        if self.released:
            raise PreconditionError(f"{type(self).__name__} was already released")
        self.released = True
        if self._position is not None:
            self._position.remove_listener(self._on_position_changed)
        self.clear_listeners()
