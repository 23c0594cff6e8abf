"""A shared memory mailbox that two processes take turns to write and read.

The block starts with a control byte that says whose turn it is, then the
payload size as a native 4-byte unsigned integer, then the payload.
"""

from __future__ import annotations

import os
import struct
from multiprocessing import shared_memory

DEFAULT_MEMORY_NAME = "tmm.unnamedmemory.ts"
MEMORY_BUFFER_SIZE = 128 * 1024 + 5
HEADER_SIZE = 5
MAX_PAYLOAD = MEMORY_BUFFER_SIZE - HEADER_SIZE

_WINDOWS_PREFIX = "Local\\"
_SIZE = struct.Struct("=I")

CREATOR_CONTROL = 1
OPENER_CONTROL = 0


class NotOwnerError(RuntimeError):
    """Raised when the other side currently holds the shared memory."""


class SharedMemory:
    """One side of a shared memory mailbox.

    The side that calls ``create`` owns the block first; the side that calls
    ``open`` waits until the owner calls ``grant_access_to_foreign``.
    """

    def __init__(self, name: str = DEFAULT_MEMORY_NAME) -> None:
        if os.name == "nt" and _WINDOWS_PREFIX not in name:
            name = _WINDOWS_PREFIX + name
        self.name = name
        self._memory: shared_memory.SharedMemory | None = None
        self._created = False
        self.control: int | None = None
        self.foreign_control: int | None = None

    @property
    def is_open(self) -> bool:
        return self._memory is not None

    def create(self) -> None:
        """Create the block (or attach to an existing one) and take ownership of it."""
        self.close()
        try:
            memory = shared_memory.SharedMemory(
                name=self.name, create=True, size=MEMORY_BUFFER_SIZE
            )
        except FileExistsError:
            memory = shared_memory.SharedMemory(name=self.name, create=False)
        if memory.size < MEMORY_BUFFER_SIZE:
            memory.close()
            raise OSError(f"shared memory {self.name!r} is too small")
        self._memory = memory
        self._created = True
        self.control = CREATOR_CONTROL
        self.foreign_control = OPENER_CONTROL
        memory.buf[0] = self.control
        _SIZE.pack_into(memory.buf, 1, 0)

    def open(self) -> None:
        """Attach to a block made by another side's ``create``."""
        self.close()
        memory = shared_memory.SharedMemory(name=self.name, create=False)
        if memory.size < MEMORY_BUFFER_SIZE:
            memory.close()
            raise OSError(f"shared memory {self.name!r} is too small")
        self._memory = memory
        self._created = False
        self.control = OPENER_CONTROL
        self.foreign_control = CREATOR_CONTROL

    def close(self) -> None:
        """Detach from the block; the creating side also removes it."""
        memory, self._memory = self._memory, None
        if memory is None:
            return
        memory.close()
        if self._created:
            try:
                memory.unlink()
            except FileNotFoundError:
                pass
        self._created = False
        self.control = None
        self.foreign_control = None

    def _require_open(self) -> memoryview:
        if self._memory is None:
            raise ValueError(f"shared memory {self.name!r} is not open")
        return self._memory.buf

    def _require_turn(self) -> memoryview:
        buf = self._require_open()
        if buf[0] != self.control:
            raise NotOwnerError(f"shared memory {self.name!r} is held by the other side")
        return buf

    def read(self) -> bytes:
        """Return the payload last written; only allowed while this side holds the block."""
        buf = self._require_turn()
        (size,) = _SIZE.unpack_from(buf, 1)
        size = min(size, MAX_PAYLOAD)
        return bytes(buf[HEADER_SIZE:HEADER_SIZE + size])

    def write(self, data: bytes) -> int:
        """Store ``data`` as the payload and return its length."""
        buf = self._require_open()
        if len(data) > MAX_PAYLOAD:
            raise ValueError(f"message too long: {len(data)} bytes, at most {MAX_PAYLOAD}")
        buf = self._require_turn()
        _SIZE.pack_into(buf, 1, len(data))
        buf[HEADER_SIZE:HEADER_SIZE + len(data)] = data
        return len(data)

    def grant_access_to_foreign(self) -> None:
        """Hand the block over to the other side."""
        buf = self._require_open()
        buf[0] = self.foreign_control

    def __enter__(self) -> SharedMemory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()