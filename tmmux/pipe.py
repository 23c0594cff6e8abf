"""Named pipes used to hand the transport stream to another process."""

from __future__ import annotations

import errno
import os

DEFAULT_PIPE_NAME = "tmm.unnamedpipe.ts"
_WINDOWS_PIPE_PREFIX = "\\\\.\\pipe\\"


class Pipe:
    """One end of a named pipe: ``create`` opens it for writing, ``open`` for reading."""

    def __init__(self, name: str = DEFAULT_PIPE_NAME) -> None:
        if os.name == "nt" and _WINDOWS_PIPE_PREFIX not in name:
            name = _WINDOWS_PIPE_PREFIX + name
        self.name = name
        self._fd: int | None = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def create(self) -> None:
        """Make the pipe if needed and open it for writing; blocks until a reader connects."""
        mkfifo = getattr(os, "mkfifo", None)
        if mkfifo is None:
            raise OSError(errno.ENOSYS, "named pipes cannot be created on this platform", self.name)
        self.close()
        try:
            mkfifo(self.name, 0o666)
        except FileExistsError:
            pass
        self._fd = os.open(self.name, os.O_WRONLY)

    def open(self) -> None:
        """Open an existing pipe for reading."""
        self.close()
        self._fd = os.open(self.name, os.O_RDONLY | getattr(os, "O_BINARY", 0))

    def close(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        os.close(fd)

    def _require_open(self) -> int:
        if self._fd is None:
            raise ValueError(f"pipe {self.name!r} is not open")
        return self._fd

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means the writer has gone."""
        return os.read(self._require_open(), size)

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""
        return os.write(self._require_open(), data)

    def __enter__(self) -> Pipe:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()