"""Tests for byte sources."""

import io

import numpy as np
import pytest

from inm_health.errors import SourceIOError
from inm_health.sources import (
    BytesSource,
    FileByteSource,
    IterByteSource,
    StreamByteSource,
    open_source,
)


class TestBytesSource:
    def test_reads_in_order(self):
        src = BytesSource(b"abcdef")
        assert src.read(4) == b"abcd"
        assert src.read(4) == b"ef"
        assert src.read(4) == b""

    def test_from_array(self):
        src = BytesSource(np.arange(4, dtype=np.uint8))
        assert list(src) == [0, 1, 2, 3]

    def test_chunks(self):
        assert list(BytesSource(b"abcde").chunks(2)) == [b"ab", b"cd", b"e"]

    def test_integer_array_in_range(self):
        assert list(BytesSource(np.array([1, 255], dtype=np.int32))) == [1, 255]

    @pytest.mark.parametrize("data", [np.array([300]), np.array([-2]), np.array([1.5])])
    def test_rejects_values_outside_a_byte(self, data):
        with pytest.raises(ValueError):
            BytesSource(data)


class TestIterByteSource:
    def test_ints(self):
        src = IterByteSource(x for x in (1, 2, 255))
        assert src.read(10) == b"\x01\x02\xff"
        assert src.read(10) == b""

    def test_chunks_of_bytes(self):
        src = IterByteSource([b"ab", b"cde"])
        assert src.read(3) == b"abc"
        assert src.read(3) == b"de"


class TestStreamByteSource:
    def test_file_like(self):
        src = StreamByteSource(io.BytesIO(b"\x00\xff"))
        assert list(src) == [0, 255]

    def test_does_not_close_borrowed_stream(self):
        stream = io.BytesIO(b"x")
        with StreamByteSource(stream):
            pass
        assert not stream.closed


class TestFileByteSource:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(range(10)))
        with FileByteSource(str(path), chunk_size=3) as src:
            assert list(src.chunks(3))[0] == b"\x00\x01\x02"

    def test_chunks_use_chunk_size(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(range(10)))
        with FileByteSource(str(path), chunk_size=3) as src:
            assert [len(c) for c in src.chunks()] == [3, 3, 3, 1]

    def test_open_source_chunk_size(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(5))
        with open_source(str(path), chunk_size=2) as src:
            assert [len(c) for c in src.chunks()] == [2, 2, 1]

    def test_missing_file(self, tmp_path):
        path = tmp_path / "missing.bin"
        with pytest.raises(SourceIOError) as exc:
            FileByteSource(str(path)).read()
        assert exc.value.path == str(path)
        assert str(path) in str(exc.value)

    def test_open_source_dash_is_stdin(self):
        assert open_source("-").name == "<stdin>"

    def test_open_source_path(self, tmp_path):
        assert isinstance(open_source(str(tmp_path / "x")), FileByteSource)
