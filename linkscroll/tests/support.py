from __future__ import annotations
from typing import List, Optional, Tuple

from linkscroll.anim import Animator
from linkscroll.sync.group import SyncGroup
from linkscroll.viewport import Viewport


def make_group(n: int, *, initial_offset: float = 0.0, content_h: int = 10_000, viewport_h: int = 500,
               animator: Optional[Animator] = None) -> Tuple[SyncGroup, List[Viewport]]:
    """A group with `n` members, each mounted in its own viewport."""
    group = SyncGroup(initial_offset)
    animator = animator or Animator()
    views = []
    for _ in range(n):
        v = Viewport(group.add_and_get(), content_h=content_h, viewport_h=viewport_h, animator=animator)
        v.mount()
        views.append(v)
    return group, views


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
