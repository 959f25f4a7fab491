from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, List, Optional, Protocol

from linkscroll.anim import Animator, Curve, Tween, ease_out_cubic
from linkscroll.notifier import ChangeNotifier


class ScrollDirection(Enum):
    IDLE = "idle"
    FORWARD = "forward"     # offset increasing
    REVERSE = "reverse"     # offset decreasing


class ScrollContext(Protocol):
    """What a position needs from the viewport hosting it."""
    animator: Animator

    def max_scroll_extent(self) -> float: ...


# --------------------------------------------------------------------------- #
# Activities (motion states)
# --------------------------------------------------------------------------- #
class ScrollActivity:
    """
    The authority currently controlling a position's motion.
    A position has exactly one; beginning another disposes the old one.
    """
    def __init__(self, delegate: ScrollPosition) -> None:
        self.delegate = delegate
        self.disposed = False

    @property
    def is_scrolling(self) -> bool: return False
    @property
    def should_ignore_pointer(self) -> bool: return False
    @property
    def velocity(self) -> float: return 0.0

    def dispose(self) -> None:
        self.disposed = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(disposed={self.disposed})"


class IdleActivity(ScrollActivity):
    pass


class HoldActivity(ScrollActivity):
    """
    Pointer down, nothing moving. Also serves as the hold handle:
      - cancel() releases the hold (back to idle) if it is still current
      - on_cancel fires exactly once, whenever the hold ends for any reason
    """
    def __init__(self, delegate: ScrollPosition, on_cancel: Optional[Callable[[], None]] = None) -> None:
        super().__init__(delegate)
        self._on_cancel = on_cancel

    @property
    def active(self) -> bool:
        return self.delegate.activity is self

    def cancel(self) -> None:
        if self.active:
            self.delegate.go_idle()

    def dispose(self) -> None:
        cb, self._on_cancel = self._on_cancel, None
        super().dispose()
        if cb:
            cb()


class DragActivity(ScrollActivity):
    """User gesture in progress. update(delta) moves the offset by delta pixels."""
    @property
    def is_scrolling(self) -> bool: return True

    def update(self, delta: float) -> None:
        if self.disposed or delta == 0:
            return
        pos = self.delegate
        pos.update_user_scroll_direction(ScrollDirection.FORWARD if delta > 0 else ScrollDirection.REVERSE)
        pos.set_pixels(pos.pixels + delta)

    def end(self) -> None:
        if self.delegate.activity is self:
            self.delegate.go_idle()


class DrivenActivity(ScrollActivity):
    """
    Animates the position to a target with a Tween on the context's Animator.
    Every frame goes through the public set_pixels. `done` resolves when the
    tween finishes or when the activity is replaced, whichever comes first.
    """
    def __init__(self, delegate: ScrollPosition, *, to: float, duration: float,
                 curve: Curve, animator: Animator) -> None:
        super().__init__(delegate)
        self.done: asyncio.Future = asyncio.get_running_loop().create_future()
        self._tween = Tween(obj=self, attr="value", start=delegate.pixels, end=to,
                            duration=duration, ease=curve, on_done=self._finish)
        animator.add(self._tween)

    @property
    def is_scrolling(self) -> bool: return True

    @property
    def value(self) -> float:
        return self.delegate.pixels

    @value.setter
    def value(self, v: float) -> None:
        self.delegate.set_pixels(v)

    def _finish(self) -> None:
        if self.delegate.activity is self:
            self.delegate.go_idle()

    def dispose(self) -> None:
        self._tween.cancel()
        if not self.done.done():
            self.done.set_result(None)
        super().dispose()


# --------------------------------------------------------------------------- #
# Position
# --------------------------------------------------------------------------- #
class ScrollPosition(ChangeNotifier):
    """
    Offset of one viewport plus its current activity and user scroll direction.
    No physics: set_pixels clamps to [0, max_scroll_extent], nothing more.
    Listeners fire on every pixel change (the host repaints from these).
    """
    def __init__(self, context: ScrollContext, *, initial_pixels: float = 0.0,
                 old_position: Optional[ScrollPosition] = None) -> None:
        super().__init__()
        self.context = context
        self._pixels = float(initial_pixels)
        if old_position is not None:
            self._pixels = old_position.pixels
        self.user_scroll_direction = ScrollDirection.IDLE
        self._activity: Optional[ScrollActivity] = None
        self.disposed = False
        self.go_idle()

    # ----- metrics ------------------------------------------------------------
    @property
    def pixels(self) -> float:
        return self._pixels

    @property
    def min_scroll_extent(self) -> float:
        return 0.0

    @property
    def max_scroll_extent(self) -> float:
        return max(self.min_scroll_extent, float(self.context.max_scroll_extent()))

    def clamp(self, value: float) -> float:
        return max(self.min_scroll_extent, min(self.max_scroll_extent, value))

    # ----- writes -------------------------------------------------------------
    def set_pixels(self, new_pixels: float) -> float:
        """Write a clamped offset. Returns the part of the move that was refused."""
        if new_pixels == self._pixels:
            return 0.0
        clamped = self.clamp(new_pixels)
        if clamped != self._pixels:
            self._pixels = clamped
            self.notify_listeners()
        return new_pixels - clamped

    def force_pixels(self, value: float) -> None:
        if value == self._pixels:
            return
        self._pixels = float(value)
        self.notify_listeners()

    def update_user_scroll_direction(self, value: ScrollDirection) -> None:
        self.user_scroll_direction = value

    # ----- activities -----------------------------------------------------------
    @property
    def activity(self) -> Optional[ScrollActivity]:
        return self._activity

    def begin_activity(self, activity: Optional[ScrollActivity]) -> None:
        if activity is None:
            return
        old, self._activity = self._activity, activity
        if old is not None:
            old.dispose()

    def go_idle(self) -> None:
        self.begin_activity(IdleActivity(self))

    def hold(self, on_cancel: Optional[Callable[[], None]] = None) -> HoldActivity:
        h = HoldActivity(self, on_cancel)
        self.begin_activity(h)
        return h

    def drag(self) -> DragActivity:
        d = DragActivity(self)
        self.begin_activity(d)
        return d

    def pointer_scroll(self, delta: float) -> None:
        """Mouse wheel: interrupt whatever is running and jump by delta (clamped)."""
        target = self.clamp(self._pixels + delta)
        if target == self._pixels:
            return
        self.go_idle()
        self.update_user_scroll_direction(ScrollDirection.FORWARD if delta > 0 else ScrollDirection.REVERSE)
        self.force_pixels(target)

    def jump_to(self, value: float) -> None:
        self.go_idle()
        if self._pixels != value:
            self.force_pixels(value)

    def animate_to(self, to: float, *, duration: float, curve: Curve = ease_out_cubic) -> asyncio.Future:
        """
        Start animating toward `to` and return a future for its completion.
        Must be called with a running event loop; the host ticks the Animator.
        """
        loop = asyncio.get_running_loop()
        if to == self._pixels or duration <= 0:
            self.jump_to(to)
            fut = loop.create_future()
            fut.set_result(None)
            return fut
        activity = DrivenActivity(self, to=float(to), duration=duration, curve=curve,
                                  animator=self.context.animator)
        self.begin_activity(activity)
        return activity.done

    # ----- lifecycle ------------------------------------------------------------
    def dispose(self) -> None:
        if self._activity is not None:
            self._activity.dispose()
            self._activity = None
        self.clear_listeners()
        self.disposed = True

    def describe(self) -> List[str]:
        return [
            f"offset: {self._pixels:.1f}",
            f"range: {self.min_scroll_extent:.1f}..{self.max_scroll_extent:.1f}",
            f"activity: {type(self._activity).__name__}",
            f"direction: {self.user_scroll_direction.value}",
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self.describe())})"
