import unittest
from unittest import mock

from linkscroll.anim import ease_linear
from linkscroll.controller import ScrollController
from linkscroll.errors import PreconditionError
from linkscroll.position import IdleActivity
from linkscroll.sync.group import OffsetNotifier, SyncGroup
from linkscroll.viewport import Viewport
from linkscroll.tests.support import make_group, Counter


class TestGroupScenario(unittest.TestCase):
    def test_initial_offset_jump_and_reset(self):
        group = SyncGroup(initial_offset=100)
        a = group.add_and_get()
        self.assertEqual(a.offset, 100)
        b = group.add_and_get()
        self.assertEqual(b.offset, 100)

        va = Viewport(a, content_h=5000, viewport_h=400); va.mount()
        vb = Viewport(b, content_h=5000, viewport_h=400); vb.mount()
        self.assertEqual(va.position.pixels, 100)
        self.assertEqual(vb.position.pixels, 100)

        a.jump_to(250)
        self.assertEqual(b.offset, 250)
        self.assertEqual(group.offset, 250)

        group.reset_scroll()
        self.assertEqual(a.offset, 0)
        self.assertEqual(b.offset, 0)


class TestFanOut(unittest.TestCase):
    def test_jump_on_any_member_moves_all(self):
        group, views = make_group(5)
        for i, driver in enumerate(views):
            value = 100.0 * (i + 1)
            driver.controller.jump_to(value)
            for v in views:
                self.assertEqual(v.position.pixels, value)

    def test_drag_on_any_member_moves_all(self):
        group, views = make_group(4)
        views[2].drag_by(30)
        views[2].drag_by(12)
        views[2].lift()
        for v in views:
            self.assertEqual(v.position.pixels, 42)

    def test_group_jump_to(self):
        group, views = make_group(3)
        group.jump_to(333)
        self.assertEqual([v.position.pixels for v in views], [333, 333, 333])
        for v in views:
            self.assertIsInstance(v.position.activity, IdleActivity)


class TestMembership(unittest.TestCase):
    def test_new_member_is_seeded_from_current_offset(self):
        group, (va, vb) = make_group(2, initial_offset=10)
        va.controller.jump_to(75)
        c = group.add_and_get()
        self.assertEqual(c.offset, 75)
        vc = Viewport(c, content_h=10_000, viewport_h=500)
        vc.mount()
        self.assertEqual(vc.position.pixels, 75)

    def test_offset_needs_an_attached_member(self):
        group = SyncGroup()
        with self.assertRaises(PreconditionError):
            group.offset
        group.add_and_get()   # created but never mounted
        with self.assertRaises(PreconditionError):
            group.offset

    def test_offset_is_first_attached_member(self):
        group = SyncGroup()
        a = group.add_and_get()
        b = group.add_and_get()
        vb = Viewport(b, content_h=1000, viewport_h=100); vb.mount()
        b.jump_to(40)
        self.assertEqual(group.offset, 40)
        self.assertEqual(group.attached_members(), [b])
        self.assertEqual(a.offset, 0)

    def test_can_link_with_peers(self):
        group = SyncGroup()
        a = group.add_and_get()
        va = Viewport(a, content_h=1000, viewport_h=100); va.mount()
        self.assertFalse(a.can_link_with_peers)
        with self.assertRaises(PreconditionError):
            a.link_with_peers(va.position)
        b = group.add_and_get()
        self.assertFalse(a.can_link_with_peers)
        Viewport(b, content_h=1000, viewport_h=100).mount()
        self.assertTrue(a.can_link_with_peers)
        self.assertTrue(b.can_link_with_peers)

    def test_unmounted_member_is_left_out(self):
        group, (va, vb, vc) = make_group(3)
        vc.unmount()
        va.controller.jump_to(90)
        self.assertEqual(vb.position.pixels, 90)
        self.assertEqual(vc.controller.offset, 0)

    def test_release_removes_member(self):
        group, (va, vb, vc) = make_group(3)
        c = vc.controller
        c.release()
        self.assertNotIn(c, group.members)
        va.controller.jump_to(60)
        self.assertEqual(vb.position.pixels, 60)
        self.assertEqual(vc.position.pixels, 0)

        # a released member still mounted no longer drives anyone
        vc.drag_by(25)
        self.assertEqual(vc.position.pixels, 25)
        self.assertEqual(va.position.pixels, 60)

    def test_double_release_is_an_error(self):
        group, (va,) = make_group(1)
        va.controller.release()
        with self.assertRaises(PreconditionError):
            va.controller.release()

    def test_detached_member_cannot_jump(self):
        group = SyncGroup()
        a = group.add_and_get()
        with self.assertRaises(PreconditionError):
            a.jump_to(10)

    def test_detached_member_cannot_animate(self):
        group = SyncGroup()
        a = group.add_and_get()
        with self.assertRaises(PreconditionError):
            a.animate_to(10, duration=0.5, curve=ease_linear)

    def test_position_is_bound_to_its_controller(self):
        group = SyncGroup()
        a = group.add_and_get()
        b = group.add_and_get()
        va = Viewport(a, content_h=1000, viewport_h=100)
        foreign = a.create_scroll_position(va)
        with self.assertRaises(PreconditionError):
            b.attach(foreign)


class TestOffsetNotifications(unittest.TestCase):
    def test_dedup(self):
        group, (va, vb) = make_group(2)
        counter = Counter()
        group.add_offset_changed_listener(counter)

        group.jump_to(0)
        self.assertEqual(counter.calls, 0)

        group.jump_to(120)
        self.assertEqual(counter.calls, 1)

        vb.controller.jump_to(120)
        self.assertEqual(counter.calls, 1)

        # driven from the second member: still a single event
        vb.controller.jump_to(130)
        self.assertEqual(counter.calls, 2)

    def test_one_event_per_drag_step(self):
        group, (va, vb, vc) = make_group(3)
        counter = Counter()
        group.add_offset_changed_listener(counter)
        vc.drag_by(5)
        vc.drag_by(5)
        vc.drag_by(0)
        vc.lift()
        self.assertEqual(counter.calls, 2)

    def test_notifier_is_quiet_without_attached_members(self):
        group = SyncGroup()
        group.add_and_get()
        notifier = OffsetNotifier(group)
        counter = Counter()
        notifier.add_listener(counter)
        notifier.notify_listeners()
        self.assertEqual(counter.calls, 0)

    def test_member_listeners_skip_mirrored_writes(self):
        with mock.patch.object(ScrollController, "_on_position_changed") as forwarded:
            group, (va, vb) = make_group(2)
            follower = Counter()
            vb.controller.add_listener(follower)
            va.drag_by(10)
            self.assertEqual(vb.position.pixels, 10)
            self.assertEqual(follower.calls, 0)
            vb.drag_by(5)
            self.assertEqual(follower.calls, 1)
        forwarded.assert_not_called()

    def test_remove_listener(self):
        group, (va, vb) = make_group(2)
        counter = Counter()
        group.add_offset_changed_listener(counter)
        group.jump_to(10)
        group.remove_offset_changed_listener(counter)
        group.jump_to(20)
        self.assertEqual(counter.calls, 1)


class TestRebuild(unittest.TestCase):
    def test_rebuilt_position_keeps_offset_and_stays_linked(self):
        group, (va, vb) = make_group(2)
        va.controller.jump_to(250)
        old = vb.position
        vb.rebuild()
        self.assertIsNot(vb.position, old)
        self.assertTrue(old.disposed)
        self.assertEqual(vb.position.pixels, 250)

        va.controller.jump_to(300)
        self.assertEqual(vb.position.pixels, 300)
        vb.drag_by(-20)
        self.assertEqual(va.position.pixels, 280)

    def test_rebuild_with_new_member_rejoins_in_sync(self):
        group, (va, vb) = make_group(2)
        va.controller.jump_to(300)
        old_b = vb.controller
        new_b = group.add_and_get()
        vb.rebuild(new_b)
        old_b.release()
        self.assertEqual(vb.position.pixels, 300)
        self.assertEqual(group.attached_members(), [va.controller, new_b])
        new_b.jump_to(10)
        self.assertEqual(va.position.pixels, 10)

    def test_first_member_mounts_at_initial_offset(self):
        group = SyncGroup(initial_offset=100)
        a = group.add_and_get()
        self.assertEqual(a.initial_scroll_offset, 100)
        va = Viewport(a, content_h=5000, viewport_h=400); va.mount()
        va.controller.jump_to(400)
        b = group.add_and_get()
        self.assertEqual(b.initial_scroll_offset, 400)


if __name__ == "__main__":
    unittest.main()
