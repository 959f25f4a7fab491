import os
import tempfile
import unittest

from linkscroll.anim import ease_linear
from linkscroll.settings import AppCfg, load_settings
from linkscroll.sync.group import SyncGroup


class TestSettings(unittest.TestCase):
    def _write(self, text: str) -> str:
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_missing_file_gives_defaults(self):
        cfg = load_settings("does/not/exist.yaml")
        self.assertEqual(cfg, AppCfg())

    def test_values_are_read_from_yaml(self):
        path = self._write(
            "fps: 30\n"
            "log_level: debug\n"
            "panes:\n"
            "  count: 4\n"
            "  row_h: 20\n"
            "animation:\n"
            "  duration: 0.5\n"
            "  curve: linear\n"
            "sync:\n"
            "  initial_offset: 120\n"
        )
        cfg = load_settings(path)
        self.assertEqual(cfg.fps, 30)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertEqual(cfg.panes.count, 4)
        self.assertEqual(cfg.panes.row_h, 20)
        self.assertEqual(cfg.panes.rows, 200)
        self.assertEqual(cfg.animation.duration, 0.5)
        self.assertIs(cfg.animation.curve_fn(), ease_linear)
        self.assertEqual(cfg.sync.initial_offset, 120.0)

        group = SyncGroup.from_settings(cfg.sync)
        self.assertEqual(group.initial_offset, 120.0)
        self.assertEqual(group.add_and_get().offset, 120.0)

    def test_unknown_curve_is_rejected(self):
        path = self._write("animation:\n  curve: wobble\n")
        with self.assertRaises(ValueError):
            load_settings(path)


if __name__ == "__main__":
    unittest.main()
