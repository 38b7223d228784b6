"""
Peer Channel - Transport abstraction for the two-player relay.

A channel connects exactly two participants and delivers structured
payloads reliably and in order. Listeners subscribe to four events:
- open: the connection is usable
- data: a payload arrived
- error: the transport failed
- close: the connection ended

LocalChannel is an in-memory pair used by tests, the CLI and the
server-side relay room.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from enum import Enum
import json
from typing import Any, Callable

from loguru import logger


class ChannelEvent(str, Enum):
    OPEN = "open"
    DATA = "data"
    ERROR = "error"
    CLOSE = "close"


class PeerChannel(ABC):
    """Base class for transports."""

    def __init__(self, channel_id: str = ""):
        self.channel_id = channel_id
        self._listeners: dict[ChannelEvent, list[Callable[..., None]]] = defaultdict(list)
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def on(self, event: ChannelEvent, listener: Callable[..., None]) -> None:
        """Register a listener for an event."""
        self._listeners[ChannelEvent(event)].append(listener)

    def emit(self, event: ChannelEvent, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    @abstractmethod
    def send(self, data: dict[str, Any]) -> None:
        """Send one payload to the other participant."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection for both participants."""


class LocalChannel(PeerChannel):
    """
    One end of an in-memory channel.

    With `autodeliver` payloads reach the other end's listeners as soon
    as they are sent; otherwise they wait in its inbox until flush().
    Payloads pass through JSON so nothing is shared by reference.
    """

    def __init__(self, channel_id: str = "", autodeliver: bool = True):
        super().__init__(channel_id)
        self.autodeliver = autodeliver
        self.remote: LocalChannel | None = None
        self._inbox: deque[dict[str, Any]] = deque()
        self._draining = False

    @classmethod
    def pair(cls, autodeliver: bool = True) -> tuple[LocalChannel, LocalChannel]:
        """Two connected, not yet opened, endpoints."""
        a = cls("a", autodeliver=autodeliver)
        b = cls("b", autodeliver=autodeliver)
        a.remote = b
        b.remote = a
        return a, b

    @property
    def pending(self) -> int:
        return len(self._inbox)

    def open(self) -> None:
        """Open both ends and notify their listeners."""
        ends = [self] if self.remote is None else [self, self.remote]
        for end in ends:
            end._open = True
        for end in ends:
            end.emit(ChannelEvent.OPEN)

    def send(self, data: dict[str, Any]) -> None:
        if not self._open or self.remote is None:
            logger.warning(f"Channel {self.channel_id}: send on closed channel")
            self.emit(ChannelEvent.ERROR, ConnectionError("Channel is not open"))
            return
        self.remote._receive(json.loads(json.dumps(data)))

    def _receive(self, data: dict[str, Any]) -> None:
        self._inbox.append(data)
        if self.autodeliver:
            self.flush()

    def flush(self) -> int:
        """Deliver queued payloads in order. Returns how many were delivered."""
        if self._draining:
            return 0
        delivered = 0
        self._draining = True
        try:
            while self._inbox:
                self.emit(ChannelEvent.DATA, self._inbox.popleft())
                delivered += 1
        finally:
            self._draining = False
        return delivered

    def fail(self, error: Exception) -> None:
        """Report a transport error on this end."""
        self.emit(ChannelEvent.ERROR, error)

    def close(self) -> None:
        ends = [self] if self.remote is None else [self, self.remote]
        for end in ends:
            if end._open:
                end._open = False
                end.emit(ChannelEvent.CLOSE)
