"""Incremental parser for ``text/event-stream`` bodies."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ServerEvent:
    """A dispatched event; ``data`` joins multi-line payloads with newlines."""

    data: str
    event: str = "message"
    id: str | None = None


class SSEParser:
    """Turn decoded lines into :class:`ServerEvent` objects.

    Comment lines (those starting with ``:``) are the server's liveness pulses
    and never produce events.
    """

    def __init__(self) -> None:
        self._data: list[str] = []
        self._event: str | None = None
        self._id: str | None = None

    def feed_line(self, line: str) -> ServerEvent | None:
        line = line.rstrip("\r\n")
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data.append(value)
        elif field == "event":
            self._event = value
        elif field == "id":
            self._id = value
        return None

    def _dispatch(self) -> ServerEvent | None:
        if not self._data:
            self._event = None
            return None
        event = ServerEvent(
            data="\n".join(self._data),
            event=self._event or "message",
            id=self._id,
        )
        self._data = []
        self._event = None
        return event


__all__ = ["SSEParser", "ServerEvent"]
