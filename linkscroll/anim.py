from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Any, Dict

Curve = Callable[[float], float]

def ease_linear(t: float) -> float: return t
def ease_out_cubic(t: float) -> float: t = max(0.0, min(1.0, t)); return 1 - (1 - t) ** 3

def ease_in_out_cubic(t: float) -> float:
    t = max(0.0, min(1.0, t))
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2

_CURVES: Dict[str, Curve] = {
    "linear": ease_linear,
    "ease_out_cubic": ease_out_cubic,
    "ease_in_out_cubic": ease_in_out_cubic,
}

def curve_named(name: str) -> Curve:
    try:
        return _CURVES[name]
    except KeyError:
        raise ValueError(f"Unknown curve '{name}' (expected one of {sorted(_CURVES)})") from None

@dataclass(eq=False)
class Tween:
    obj: Any
    attr: str
    start: float
    end: float
    duration: float
    ease: Curve = ease_out_cubic
    t: float = 0.0
    on_done: Callable[[], None] | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def update(self, dt: float) -> bool:
        if self.cancelled:
            return True
        self.t += dt
        u = 1.0 if self.duration <= 0 else max(0.0, min(1.0, self.t / self.duration))
        # Land exactly on `end`; curves are not guaranteed to hit 1.0 exactly.
        v = self.end if u >= 1.0 else self.start + (self.end - self.start) * self.ease(u)
        setattr(self.obj, self.attr, v)
        if self.cancelled:
            # The write itself may have replaced whatever owns this tween
            return True
        finished = (u >= 1.0)
        if finished and self.on_done:
            self.on_done()
        return finished

class Animator:
    def __init__(self):
        self._tweens: list[Tween] = []

    def add(self, tween: Tween) -> None:
        self._tweens.append(tween)

    @property
    def active(self) -> bool:
        return any(not tw.cancelled for tw in self._tweens)

    def update(self, dt: float) -> None:
        running = list(self._tweens)
        finished = [tw for tw in running if tw.update(dt)]
        self._tweens[:] = [tw for tw in self._tweens if tw not in finished and not tw.cancelled]
