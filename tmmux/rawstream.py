"""A section stream that cycles over a set of raw blocks."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from os import PathLike
from typing import Union

from tmmux.stream import Buffer, Chunk, Stream

Provider = Callable[[int], Iterable[bytes]]
SectionLike = Union[bytes, bytearray, memoryview, object]


class RawStream(Stream):
    """Repeats its blocks, or asks providers for fresh ones whenever it runs dry."""

    def __init__(self) -> None:
        super().__init__(max_bitrate=30000, stream_type=1)
        self.blocks: list[bytes] = []
        self.providers: list[Provider] = []
        self.curr_pos = 0

    def add_provider(self, provider: Provider) -> None:
        """Register a callable that returns the blocks to send for a given clock value."""
        self.providers.append(provider)

    def add_block(self, data: bytes) -> bool:
        """Queue a copy of ``data``; empty data is ignored and yields False."""
        if not data:
            return False
        self.blocks.append(bytes(data))
        return True

    def add_section(self, section: SectionLike) -> None:
        """Queue an encoded section, given as bytes or as an object with ``to_bytes()``."""
        if isinstance(section, (bytes, bytearray, memoryview)):
            self.blocks.append(bytes(section))
        else:
            self.blocks.append(bytes(section.to_bytes()))

    def add_sections_from_file(self, filename: str | PathLike) -> int:
        """Split a file of concatenated sections into blocks; return how many were added."""
        with open(filename, "rb") as handle:
            data = handle.read()
        count = 0
        pos = 0
        while pos < len(data):
            if pos + 3 > len(data):
                raise ValueError(f"truncated section header at offset {pos}")
            length = (((data[pos + 1] & 0x0F) << 8) | data[pos + 2]) + 3
            if pos + length > len(data):
                raise ValueError(f"truncated section at offset {pos}")
            self.add_block(data[pos:pos + length])
            pos += length
            count += 1
        return count

    def release_blocks(self) -> None:
        self.blocks.clear()
        self.curr_pos = 0

    def fill_buffer(self) -> None:
        """Fill the queue up to its length, cycling through the blocks."""
        if not self.blocks:
            return
        while len(self.buffers) < self.max_buffer_length:
            if self.curr_pos < len(self.blocks):
                self.buffers.append(Buffer(self.blocks[self.curr_pos]))
                self.curr_pos += 1
            else:
                self.curr_pos = 0

    def get_buffer(self) -> Chunk | None:
        if not self.buffers and self.providers:
            for provider in self.providers:
                self.blocks.extend(bytes(block) for block in provider(self.curr_stc))
            self.max_buffer_length = len(self.blocks)
            self.fill_buffer()
            self.release_blocks()
        return super().get_buffer()