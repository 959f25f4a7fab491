from __future__ import annotations

import asyncio
import itertools
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from linkscroll.anim import Curve
from linkscroll.errors import PreconditionError
from linkscroll.notifier import ChangeNotifier
from linkscroll.sync.member import SyncController, SyncPosition

if TYPE_CHECKING:
    from linkscroll.settings import SyncCfg

logger = logging.getLogger(__name__)


class OffsetNotifier(ChangeNotifier):
    """
    Change events for SyncGroup.offset, de-duplicated: listeners only run
    when the group offset differs from the last value they were told about.
    """
    def __init__(self, group: SyncGroup) -> None:
        super().__init__()
        self.group = group
        self._cached_offset: Optional[float] = None

    def notify_listeners(self) -> None:
        if not self.group.has_attached:
            return
        current = self.group.offset
        if current != self._cached_offset:
            self._cached_offset = current
            super().notify_listeners()


class SyncGroup:
    """
    A set of scroll controllers that mirror their movements to each other.

    Controllers come from add_and_get() and start at the group's current
    offset. Release them when their viewport goes away for good.
    Only attached controllers (those with a live viewport) take part.
    """
    def __init__(self, initial_offset: float = 0.0) -> None:
        self._initial_offset = float(initial_offset)
        # member_id -> controller, in creation order
        self._members: Dict[int, SyncController] = {}
        self._ids = itertools.count(1)
        self._offset_notifier = OffsetNotifier(self)

    @classmethod
    def from_settings(cls, cfg: SyncCfg) -> SyncGroup:
        return cls(initial_offset=cfg.initial_offset)

    # ----- membership -------------------------------------------------------------
    @property
    def initial_offset(self) -> float:
        return self._initial_offset

    @property
    def members(self) -> List[SyncController]:
        return list(self._members.values())

    def attached_members(self) -> List[SyncController]:
        return [m for m in self._members.values() if m.has_clients]

    @property
    def has_attached(self) -> bool:
        return any(m.has_clients for m in self._members.values())

    def position_of(self, member_id: int) -> Optional[SyncPosition]:
        member = self._members.get(member_id)
        if member is None or not member.has_clients:
            return None
        return member.position

    def add_and_get(self) -> SyncController:
        """Create a controller linked to the existing ones."""
        attached = self.attached_members()
        seed = attached[0].position.pixels if attached else self._initial_offset
        member = SyncController(self, next(self._ids), initial_scroll_offset=seed)
        self._members[member.member_id] = member
        member.add_listener(self._offset_notifier.notify_listeners)
        logger.debug("added member %d at offset %.1f (%d members)", member.member_id, seed, len(self._members))
        return member

    def _unregister(self, member: SyncController) -> None:
        self._members.pop(member.member_id, None)

    # ----- offset -------------------------------------------------------------------
    @property
    def offset(self) -> float:
        """Offset of the first attached controller."""
        attached = self.attached_members()
        if not attached:
            raise PreconditionError("SyncGroup does not have any scroll controllers attached")
        return attached[0].offset

    def add_offset_changed_listener(self, on_changed: Callable[[], None]) -> None:
        self._offset_notifier.add_listener(on_changed)

    def remove_offset_changed_listener(self, listener: Callable[[], None]) -> None:
        self._offset_notifier.remove_listener(listener)

    # ----- motion -------------------------------------------------------------------
    async def animate_to(self, offset: float, *, curve: Curve, duration: float) -> None:
        """Animate every attached controller to `offset`; returns when all are done."""
        animations = [m.animate_to(offset, duration=duration, curve=curve) for m in self.attached_members()]
        await asyncio.gather(*animations)

    def jump_to(self, value: float) -> None:
        for member in self.attached_members():
            member.jump_to(value)

    def reset_scroll(self) -> None:
        self.jump_to(0.0)
