import pytest

from tmmux.rawstream import RawStream
from tmmux.stream import Chunk


def drain(stream):
    out = []
    while (chunk := stream.get_buffer()) is not None:
        out.append(chunk.data)
        while not stream.dispose_buffer():
            pass
        if not stream.buffers:
            break
    return out


def test_defaults():
    stream = RawStream()
    assert stream.stream_type == 1
    assert stream.max_bitrate == 30000


def test_add_block_rejects_empty():
    stream = RawStream()
    assert stream.add_block(b"") is False
    assert stream.blocks == []


def test_add_block_copies():
    stream = RawStream()
    data = bytearray(b"abc")
    assert stream.add_block(data) is True
    data[0] = ord("z")
    assert stream.blocks == [b"abc"]


def test_fill_buffer_cycles_through_blocks():
    stream = RawStream()
    stream.add_block(b"a")
    stream.add_block(b"b")
    stream.max_buffer_length = 5
    stream.fill_buffer()
    assert [buf.data for buf in stream.buffers] == [b"a", b"b", b"a", b"b", b"a"]


def test_fill_buffer_without_blocks():
    stream = RawStream()
    stream.fill_buffer()
    assert stream.buffer_size() == 0


def test_release_blocks_resets_position():
    stream = RawStream()
    stream.add_block(b"a")
    stream.add_block(b"b")
    stream.max_buffer_length = 1
    stream.fill_buffer()
    assert stream.curr_pos == 1
    stream.release_blocks()
    assert stream.blocks == []
    assert stream.curr_pos == 0


def test_add_section_bytes_and_object():
    class Section:
        def to_bytes(self):
            return b"\x42\xf0\x01\xcc"

    stream = RawStream()
    stream.add_section(b"\x00\xb0\x00")
    stream.add_section(Section())
    assert stream.blocks == [b"\x00\xb0\x00", b"\x42\xf0\x01\xcc"]


def test_get_buffer_asks_providers():
    calls = []

    def provider(stc):
        calls.append(stc)
        return [b"x", b"yy"]

    stream = RawStream()
    stream.curr_stc = 777
    stream.add_provider(provider)
    assert stream.get_buffer() == Chunk(b"x", True)
    assert calls == [777]
    assert stream.max_buffer_length == 2
    assert stream.blocks == []
    assert stream.dispose_buffer() is True
    assert stream.get_buffer() == Chunk(b"yy", True)
    assert stream.dispose_buffer() is True
    stream.get_buffer()
    assert calls == [777, 777]


def test_get_buffer_without_providers_or_data():
    assert RawStream().get_buffer() is None


def test_sections_from_file(tmp_path):
    first = b"\x00\xb0\x02\xaa\xbb"
    second = b"\x42\xf0\x01\xcc"
    path = tmp_path / "sections.bin"
    path.write_bytes(first + second)
    stream = RawStream()
    assert stream.add_sections_from_file(path) == 2
    assert stream.blocks == [first, second]


def test_sections_from_file_truncated(tmp_path):
    path = tmp_path / "broken.bin"
    path.write_bytes(b"\x00\xb0\x09\xaa")
    with pytest.raises(ValueError):
        RawStream().add_sections_from_file(path)


def test_sections_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RawStream().add_sections_from_file(tmp_path / "absent.bin")


def test_blocks_round_trip_through_buffers():
    stream = RawStream()
    stream.add_block(b"one")
    stream.add_block(b"two")
    stream.max_buffer_length = 2
    stream.fill_buffer()
    assert drain(stream) == [b"one", b"two"]