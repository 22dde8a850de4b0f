"""Byte sources feeding the health check.

A source hands out the stream in order, one chunk at a time, and returns an
empty chunk at end of stream. Anything that produces bytes (a file, a pipe,
a socket, a generator) can be wrapped in one.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, Iterator

import numpy as np

from inm_health.errors import SourceIOError

DEFAULT_CHUNK_SIZE = 1 << 16


def as_byte_array(data: bytes | bytearray | memoryview | np.ndarray) -> np.ndarray:
    """Return *data* as a flat uint8 array.

    Integer arrays of another dtype are accepted only when every value fits
    in a byte; they are never wrapped.
    """
    if not isinstance(data, np.ndarray):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    if data.dtype == np.uint8:
        return data.ravel()
    if not np.issubdtype(data.dtype, np.integer):
        raise ValueError(f"expected an integer array of byte values, got dtype {data.dtype}")
    if data.size and (data.min() < 0 or data.max() > 255):
        raise ValueError("array values must be in 0..255")
    return data.astype(np.uint8).ravel()


class ByteSource(ABC):
    """Base class for an ordered, finite sequence of bytes."""

    name: str = "unnamed"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @abstractmethod
    def read(self, size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        """Return up to *size* of the next bytes, or ``b""`` at end of stream."""
        ...

    def close(self) -> None:
        """Release any underlying handle. Safe to call more than once."""

    def chunks(self, size: int | None = None) -> Iterator[bytes]:
        """Yield chunks of *size* bytes, defaulting to the source's ``chunk_size``."""
        size = size or self.chunk_size
        while True:
            chunk = self.read(size)
            if not chunk:
                return
            yield chunk

    def __iter__(self) -> Iterator[int]:
        for chunk in self.chunks():
            yield from chunk

    def __enter__(self) -> ByteSource:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class BytesSource(ByteSource):
    """In-memory bytes, bytearray or uint8 array."""

    name = "memory"

    def __init__(self, data: bytes | bytearray | memoryview | np.ndarray) -> None:
        self._data = as_byte_array(data).tobytes()
        self._pos = 0

    def read(self, size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        chunk = self._data[self._pos:self._pos + size]
        self._pos += len(chunk)
        return chunk


class StreamByteSource(ByteSource):
    """Any binary file-like object: stdin, a pipe, ``socket.makefile("rb")``."""

    def __init__(
        self,
        stream: BinaryIO | None,
        name: str = "stream",
        owns: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._stream = stream
        self.chunk_size = chunk_size
        self._owns = owns
        self.name = name

    def read(self, size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        try:
            return self._stream.read(size) or b""
        except OSError as e:
            raise SourceIOError(f"error reading {self.name}: {e}", path=self.name) from e

    def close(self) -> None:
        if self._owns and self._stream is not None:
            self._stream.close()
            self._stream = None


class FileByteSource(StreamByteSource):
    """A binary file opened on first read."""

    def __init__(self, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        super().__init__(None, name=str(path), owns=True, chunk_size=chunk_size)
        self.path = str(path)

    def open(self) -> FileByteSource:
        if self._stream is None:
            try:
                self._stream = open(self.path, "rb")
            except OSError as e:
                raise SourceIOError(
                    f"unable to open file {self.path} for reading: {e.strerror or e}",
                    path=self.path,
                ) from e
        return self

    def read(self, size: int | None = None) -> bytes:
        self.open()
        return super().read(size or self.chunk_size)

    def __enter__(self) -> FileByteSource:
        return self.open()


class IterByteSource(ByteSource):
    """Wraps an iterable of byte values (0..255) or of ``bytes`` chunks."""

    name = "iterable"

    def __init__(self, items: Iterable[int | bytes]) -> None:
        self._it = iter(items)
        self._pending = bytearray()
        self._done = False

    def read(self, size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        while not self._done and len(self._pending) < size:
            try:
                item = next(self._it)
            except StopIteration:
                self._done = True
                break
            if isinstance(item, (bytes, bytearray, memoryview)):
                self._pending.extend(item)
            else:
                self._pending.append(item)
        chunk = bytes(self._pending[:size])
        del self._pending[:size]
        return chunk


def open_source(path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ByteSource:
    """Return a source for *path*; ``"-"`` means standard input."""
    if path == "-":
        return StreamByteSource(sys.stdin.buffer, name="<stdin>", chunk_size=chunk_size)
    return FileByteSource(path, chunk_size=chunk_size)
