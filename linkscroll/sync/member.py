from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from linkscroll.controller import ScrollController
from linkscroll.errors import PreconditionError
from linkscroll.position import HoldActivity, ScrollActivity, ScrollContext, ScrollDirection, ScrollPosition
from linkscroll.sync.activity import SyncActivity

if TYPE_CHECKING:
    from linkscroll.sync.group import SyncGroup

logger = logging.getLogger(__name__)


class SyncController(ScrollController):
    """
    One member of a SyncGroup. Only works with the SyncPosition it creates.

    Member listeners fire once per externally visible change of this member
    (after its position has finished fanning the change out), never for
    mirrored writes coming from a peer.
    """
    def __init__(self, group: SyncGroup, member_id: int, *, initial_scroll_offset: float) -> None:
        super().__init__(initial_scroll_offset=initial_scroll_offset)
        self._group = group
        self.member_id = member_id

    @property
    def group(self) -> SyncGroup:
        return self._group

    @property
    def initial_scroll_offset(self) -> float:
        # Lets a rebuilt viewport come back already in sync
        if self._group.has_attached:
            return self._group.offset
        return self._group.initial_offset

    @property
    def position(self) -> SyncPosition:
        return super().position  # type: ignore[return-value]

    def create_scroll_position(self, context: ScrollContext,
                               old_position: Optional[ScrollPosition] = None) -> SyncPosition:
        return SyncPosition(self, context, initial_pixels=self.initial_scroll_offset,
                            old_position=old_position)

    # Member listeners are driven by SyncPosition._did_mutate, so unlike the
    # base controller these never subscribe to the position itself.
    def attach(self, position: SyncPosition) -> None:
        if position.owner is not self:
            raise PreconditionError("SyncPosition cannot change controllers once created")
        if self._position is not None:
            raise PreconditionError("SyncController is already attached to a viewport")
        self._position = position

    def detach(self, position: SyncPosition) -> None:
        if position is not self._position:
            raise PreconditionError("Cannot detach a position this controller is not attached to")
        self._last_offset = position.pixels
        self._position = None

    def _did_mutate(self) -> None:
        if not self.released:
            self.notify_listeners()

    # ----- peers ----------------------------------------------------------------
    def peers_with_clients(self) -> List[SyncController]:
        if self.released:
            return []
        return [m for m in self._group.attached_members() if m is not self]

    @property
    def can_link_with_peers(self) -> bool:
        return bool(self.peers_with_clients())

    def link_with_peers(self, driver: SyncPosition) -> List[SyncActivity]:
        """Make every attached peer follow `driver`. Returns the (shared) activities touched."""
        peers = self.peers_with_clients()
        if not peers:
            raise PreconditionError("link_with_peers() called without any attached peers")
        return [peer.link(driver) for peer in peers]

    def link(self, driver: SyncPosition) -> SyncActivity:
        return self.position.link(driver)

    # ----- lifecycle --------------------------------------------------------------
    def release(self) -> None:
        super().release()
        self._group._unregister(self)
        if self._position is not None:
            self.position.sever_links()
        logger.debug("member %d released", self.member_id)

    def __repr__(self) -> str:
        state = "attached" if self.has_clients else "detached"
        return f"SyncController(id={self.member_id}, {state}, offset={self.offset:.1f})"


# Whenever set_pixels/force_pixels runs on a SyncPosition (user input or
# programmatic), every attached peer gets a SyncActivity that mirrors the move.
# Beginning any other activity on a position drops the links it drives.
class SyncPosition(ScrollPosition):
    def __init__(self, owner: SyncController, context: ScrollContext, *,
                 initial_pixels: float = 0.0, old_position: Optional[ScrollPosition] = None) -> None:
        self.owner = owner
        # activities this position is currently driving; dict keeps link order
        self._peer_activities: Dict[SyncActivity, None] = {}
        super().__init__(context, initial_pixels=initial_pixels, old_position=old_position)

    @property
    def member_id(self) -> int:
        return self.owner.member_id

    @property
    def peer_activities(self) -> List[SyncActivity]:
        return list(self._peer_activities)

    # ----- hold -----------------------------------------------------------------
    def hold(self, on_cancel: Optional[Callable[[], None]] = None) -> HoldActivity:
        """
        Hold this position and every attached peer (one level only).
        When this hold ends, peers still sitting in the hold it gave them are
        released to idle.
        """
        peer_holds = [peer.position.hold_internal() for peer in self.owner.peers_with_clients()]

        def _ended() -> None:
            for h in peer_holds:
                h.cancel()
            if on_cancel:
                on_cancel()

        return super().hold(_ended)

    def hold_internal(self) -> HoldActivity:
        return super().hold()

    # ----- activities -----------------------------------------------------------
    def begin_activity(self, activity: Optional[ScrollActivity]) -> None:
        if activity is None:
            return
        self._unlink_followers()
        super().begin_activity(activity)

    def link(self, driver: SyncPosition) -> SyncActivity:
        if not isinstance(self.activity, SyncActivity):
            logger.debug("member %d now follows member %d", self.member_id, driver.member_id)
            self.begin_activity(SyncActivity(self))
        activity = self.activity
        activity.link(driver)
        return activity

    def drop_peer_activity(self, activity: SyncActivity) -> None:
        self._peer_activities.pop(activity, None)

    def _unlink_followers(self) -> None:
        for activity in list(self._peer_activities):
            activity.unlink(self)
        self._peer_activities.clear()

    def _link_peers(self) -> List[SyncActivity]:
        for activity in self.owner.link_with_peers(self):
            self._peer_activities[activity] = None
        return list(self._peer_activities)

    def sever_links(self) -> None:
        """Stop driving anyone and stop being driven."""
        self._unlink_followers()
        if isinstance(self.activity, SyncActivity):
            self.go_idle()

    # ----- writes -----------------------------------------------------------------
    def _direction_to(self, value: float) -> ScrollDirection:
        return ScrollDirection.FORWARD if value - self.pixels > 0.0 else ScrollDirection.REVERSE

    def set_pixels(self, new_pixels: float) -> float:
        if new_pixels == self.pixels:
            return 0.0
        self.update_user_scroll_direction(self._direction_to(new_pixels))
        if self.owner.can_link_with_peers:
            for activity in self._link_peers():
                if not activity.disposed:
                    activity.move_to(new_pixels)
        overscroll = self.set_pixels_internal(new_pixels)
        self.owner._did_mutate()
        return overscroll

    def set_pixels_internal(self, new_pixels: float) -> float:
        return super().set_pixels(new_pixels)

    def force_pixels(self, value: float) -> None:
        if value == self.pixels:
            return
        self.update_user_scroll_direction(self._direction_to(value))
        if self.owner.can_link_with_peers:
            for activity in self._link_peers():
                if not activity.disposed:
                    activity.jump_to(value)
        self.force_pixels_internal(value)
        self.owner._did_mutate()

    def force_pixels_internal(self, value: float) -> None:
        super().force_pixels(value)

    # ----- lifecycle --------------------------------------------------------------
    def dispose(self) -> None:
        self._unlink_followers()
        super().dispose()

    def describe(self) -> List[str]:
        return super().describe() + [f"owner: {self.owner!r}"]
