from __future__ import annotations
from typing import Callable, List

Listener = Callable[[], None]


class ChangeNotifier:
    """
    Minimal listener list.
      - add_listener / remove_listener
      - notify_listeners() calls every listener registered at call time,
        so listeners may add/remove listeners while being notified
    """
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        # Removes a single registration, like add_listener adds one
        for i, fn in enumerate(self._listeners):
            if fn == listener:
                del self._listeners[i]
                return

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def notify_listeners(self) -> None:
        for fn in list(self._listeners):
            fn()
