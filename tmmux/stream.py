"""Buffered elementary streams scheduled against the 27 MHz system clock."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

SYSTEM_CLOCK_FREQUENCY = 27_000_000


@dataclass
class Buffer:
    """A block of stream data together with how much of it has been sent."""

    data: bytes
    pos: int = 0

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos


@dataclass(frozen=True)
class Chunk:
    """The part of the head buffer that may be sent in the current slot."""

    data: bytes
    start_indicator: bool


class Stream:
    """A queue of data blocks handed out in rate-limited chunks.

    ``next_send`` and ``period`` are expressed in 27 MHz clock ticks.
    """

    def __init__(self, max_bitrate: int = 0xFFFFFFFF, stream_type: int = 0) -> None:
        self.buffers: deque[Buffer] = deque()
        self.max_buffer_length = 10
        self.next_send = SYSTEM_CLOCK_FREQUENCY
        self.period = SYSTEM_CLOCK_FREQUENCY
        self.prepone_ticks = 0
        self.project_id = -1
        self.curr_stc = 0
        self.stream_type = stream_type
        self.max_bitrate = max_bitrate
        self.max_bytes_rate = max_bitrate // 8

    def fill_buffer(self) -> None:
        """Top up the queue of buffers; a plain stream has no source of its own."""

    def get_buffer(self) -> Chunk | None:
        """Return the next chunk to send, or None when nothing is queued."""
        if not self.buffers:
            return None
        head = self.buffers[0]
        size = min(head.remaining, self.max_bytes_rate)
        return Chunk(head.data[head.pos:head.pos + size], head.pos == 0)

    def dispose_buffer(self) -> bool:
        """Mark the current chunk as sent; True when a whole buffer was finished."""
        if not self.buffers:
            return False
        head = self.buffers[0]
        head.pos += min(head.remaining, self.max_bytes_rate)
        if head.pos == head.size:
            self.buffers.popleft()
            return True
        return False

    def release_buffers(self) -> None:
        self.buffers.clear()

    def initiate_next_send(self, stc: int) -> None:
        self.next_send = stc
        self.max_bytes_rate = self.max_bitrate // 8

    def update_next_send(self, stc: int) -> None:
        self.next_send += self.period

    def buffer_size(self) -> int:
        return len(self.buffers)