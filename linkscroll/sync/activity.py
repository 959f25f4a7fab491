from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Set

from linkscroll.position import ScrollActivity, ScrollDirection

if TYPE_CHECKING:
    from linkscroll.sync.member import SyncPosition

logger = logging.getLogger(__name__)


class SyncActivity(ScrollActivity):
    """
    Follower-side motion state: "this position is being moved by its peers".

    One instance per follower, shared by every driver currently moving it.
    Drivers are kept as member ids and looked up through the group on use,
    so a driver that has been released or unmounted simply drops out.

    Not self-driven: it only moves when a driver calls move_to()/jump_to().
    """
    def __init__(self, delegate: SyncPosition) -> None:
        super().__init__(delegate)
        self.delegate: SyncPosition = delegate
        self.drivers: Set[int] = set()

    @property
    def is_scrolling(self) -> bool: return True
    @property
    def should_ignore_pointer(self) -> bool: return True
    @property
    def velocity(self) -> float: return 0.0

    # ----- driver set -----------------------------------------------------------
    def link(self, driver: SyncPosition) -> None:
        self.drivers.add(driver.member_id)

    def unlink(self, driver: SyncPosition) -> None:
        self.drivers.discard(driver.member_id)
        if not self.drivers and self.delegate.activity is self:
            logger.debug("member %d: last driver gone, going idle", self.delegate.member_id)
            self.delegate.go_idle()

    def driver_positions(self) -> List[SyncPosition]:
        group = self.delegate.owner.group
        found = []
        for member_id in self.drivers:
            pos = group.position_of(member_id)
            if pos is not None:
                found.append(pos)
        return found

    # ----- motion ---------------------------------------------------------------
    def move_to(self, new_pixels: float) -> None:
        self._update_user_scroll_direction()
        self.delegate.set_pixels_internal(new_pixels)

    def jump_to(self, new_pixels: float) -> None:
        self._update_user_scroll_direction()
        self.delegate.force_pixels_internal(new_pixels)

    def _update_user_scroll_direction(self) -> None:
        # Recomputed every move: drivers and their directions both change
        directions = {p.user_scroll_direction for p in self.driver_positions()}
        common = directions.pop() if len(directions) == 1 else ScrollDirection.IDLE
        self.delegate.update_user_scroll_direction(common)

    def dispose(self) -> None:
        for driver in self.driver_positions():
            driver.drop_peer_activity(self)
        self.drivers.clear()
        super().dispose()
