from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from linkscroll.anim import Curve, curve_named

@dataclass
class WindowCfg:
    width: int = 1280
    height: int = 720
    title: str = "linkscroll"
    bg_rgb: tuple[int, int, int] = (14, 15, 18)

@dataclass
class PaneCfg:
    count: int = 3
    rows: int = 200
    row_h: int = 28
    gap_px: int = 12
    scroll_wheel_pixels: int = 40

@dataclass
class AnimationCfg:
    duration: float = 0.35          # seconds
    curve: str = "ease_out_cubic"   # see linkscroll.anim.curve_named

    def curve_fn(self) -> Curve:
        return curve_named(self.curve)

@dataclass
class SyncCfg:
    initial_offset: float = 0.0

@dataclass
class AppCfg:
    fps: int = 60
    log_level: str = "INFO"
    window: WindowCfg = field(default_factory=WindowCfg)
    panes: PaneCfg = field(default_factory=PaneCfg)
    animation: AnimationCfg = field(default_factory=AnimationCfg)
    sync: SyncCfg = field(default_factory=SyncCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur

def load_settings(path: str = "config/defaults.yaml") -> AppCfg:
    data = {}
    p = Path(path)
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    cfg = AppCfg(
        fps=int(_get(data, "fps", 60)),
        log_level=str(_get(data, "log_level", "INFO")).upper(),
        window=WindowCfg(
            width=int(_get(data, "window.width", 1280)),
            height=int(_get(data, "window.height", 720)),
            title=str(_get(data, "window.title", "linkscroll")),
            bg_rgb=tuple(_get(data, "window.bg_rgb", (14, 15, 18))),
        ),
        panes=PaneCfg(
            count=int(_get(data, "panes.count", 3)),
            rows=int(_get(data, "panes.rows", 200)),
            row_h=int(_get(data, "panes.row_h", 28)),
            gap_px=int(_get(data, "panes.gap_px", 12)),
            scroll_wheel_pixels=int(_get(data, "panes.scroll_wheel_pixels", 40)),
        ),
        animation=AnimationCfg(
            duration=float(_get(data, "animation.duration", 0.35)),
            curve=str(_get(data, "animation.curve", "ease_out_cubic")),
        ),
        sync=SyncCfg(
            initial_offset=float(_get(data, "sync.initial_offset", 0.0)),
        ),
    )
    # Fail at load time rather than on the first animated scroll
    cfg.animation.curve_fn()
    return cfg
