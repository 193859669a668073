"""Frame scheduling — the host animation loop, abstracted.

The layout engine advances one tick per frame callback and never blocks.
Hosts provide a :class:`FrameScheduler`; tests and headless runs use
:class:`ManualFrameClock`, which only fires frames when told to.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

type FrameCallback = Callable[[float], None]


class FrameSubscription(Protocol):
    """Handle returned by :meth:`FrameScheduler.on_frame`."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class FrameScheduler(Protocol):
    """Calls a callback once per rendered frame with a timestamp (ms)."""

    def on_frame(self, callback: FrameCallback) -> FrameSubscription: ...


class _ManualSubscription:
    def __init__(self, clock: ManualFrameClock, callback: FrameCallback) -> None:
        self._clock = clock
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._clock._subscriptions.remove(self)


class ManualFrameClock:
    """Deterministic frame clock driven by explicit :meth:`advance` calls.

    Parameters:
        frame_ms: Simulated time between frames.
    """

    def __init__(self, frame_ms: float = 1000.0 / 60.0) -> None:
        self.frame_ms = frame_ms
        self.now = 0.0
        self.frames = 0
        self._subscriptions: list[_ManualSubscription] = []

    @property
    def pending(self) -> int:
        """Number of active frame subscriptions."""
        return len(self._subscriptions)

    def on_frame(self, callback: FrameCallback) -> _ManualSubscription:
        sub = _ManualSubscription(self, callback)
        self._subscriptions.append(sub)
        return sub

    def advance(self, frames: int = 1) -> int:
        """Fire *frames* frames. Returns how many frames had a subscriber.

        Subscriptions cancelled from inside a callback stop receiving
        frames immediately.
        """
        fired = 0
        for _ in range(frames):
            if not self._subscriptions:
                break
            self.now += self.frame_ms
            self.frames += 1
            fired += 1
            for sub in list(self._subscriptions):
                if sub.active:
                    sub.callback(self.now)
        return fired
