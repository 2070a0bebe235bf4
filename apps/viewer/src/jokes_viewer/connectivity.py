from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

Listener = Callable[[], None]


class ConnectivityMonitor(Protocol):
    def is_online(self) -> bool: ...

    def subscribe(self, *, on_online: Listener, on_offline: Listener) -> Callable[[], None]:
        """Register transition listeners and return a callable that removes them."""
        ...


class ManualConnectivity:
    """Connectivity flag flipped explicitly by the caller.

    Listeners fire synchronously, only on an actual transition.
    """

    def __init__(self, *, online: bool = True) -> None:
        self._online = online
        self._listeners: list[tuple[Listener, Listener]] = []

    def is_online(self) -> bool:
        return self._online

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, *, on_online: Listener, on_offline: Listener) -> Callable[[], None]:
        entry = (on_online, on_offline)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        for on_online, on_offline in list(self._listeners):
            if online:
                on_online()
            else:
                on_offline()
