"""Reconnect delay policy for the notification receiver."""

from __future__ import annotations


class ExponentialBackoff:
    """Capped exponential delays: ``initial * factor**n`` up to ``maximum``.

    Successive delays never decrease until :meth:`reset` is called.
    """

    def __init__(self, initial: float = 1.0, maximum: float = 30.0, factor: float = 2.0) -> None:
        if initial <= 0:
            raise ValueError("initial delay must be positive")
        if maximum < initial:
            raise ValueError("maximum delay must not be lower than the initial delay")
        if factor < 1:
            raise ValueError("factor must be at least 1")
        self.initial = initial
        self.maximum = maximum
        self.factor = factor
        self.attempts = 0

    def next_delay(self) -> float:
        delay = min(self.initial * (self.factor ** self.attempts), self.maximum)
        if delay < self.maximum:
            self.attempts += 1
        return delay

    def reset(self) -> None:
        self.attempts = 0


__all__ = ["ExponentialBackoff"]
