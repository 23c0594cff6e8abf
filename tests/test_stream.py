from tmmux.stream import SYSTEM_CLOCK_FREQUENCY, Buffer, Chunk, Stream


def test_defaults():
    stream = Stream()
    assert stream.next_send == SYSTEM_CLOCK_FREQUENCY
    assert stream.period == SYSTEM_CLOCK_FREQUENCY
    assert stream.max_buffer_length == 10
    assert stream.prepone_ticks == 0
    assert stream.project_id == -1
    assert stream.buffer_size() == 0


def test_empty_stream_has_nothing_to_send():
    stream = Stream()
    assert stream.get_buffer() is None
    assert stream.dispose_buffer() is False


def test_base_fill_buffer_adds_nothing():
    stream = Stream()
    stream.fill_buffer()
    assert stream.buffer_size() == 0


def test_chunks_are_limited_by_byte_rate():
    stream = Stream(max_bitrate=32)
    stream.buffers.append(Buffer(b"abcdefghij"))
    assert stream.get_buffer() == Chunk(b"abcd", True)
    assert stream.dispose_buffer() is False
    assert stream.get_buffer() == Chunk(b"efgh", False)
    assert stream.dispose_buffer() is False
    assert stream.get_buffer() == Chunk(b"ij", False)
    assert stream.dispose_buffer() is True
    assert stream.buffer_size() == 0
    assert stream.get_buffer() is None


def test_get_buffer_does_not_consume():
    stream = Stream()
    stream.buffers.append(Buffer(b"xyz"))
    assert stream.get_buffer() == stream.get_buffer()
    assert stream.buffer_size() == 1


def test_chunks_reassemble_the_data():
    stream = Stream(max_bitrate=24)
    payload = bytes(range(50))
    stream.buffers.append(Buffer(payload))
    collected = b""
    while (chunk := stream.get_buffer()) is not None:
        collected += chunk.data
        stream.dispose_buffer()
    assert collected == payload


def test_initiate_next_send_resets_rate():
    stream = Stream()
    stream.max_bitrate = 64
    stream.initiate_next_send(1234)
    assert stream.next_send == 1234
    assert stream.max_bytes_rate == 8


def test_update_next_send_adds_period():
    stream = Stream()
    stream.initiate_next_send(100)
    stream.period = 50
    stream.update_next_send(0)
    stream.update_next_send(0)
    assert stream.next_send == 200


def test_release_buffers():
    stream = Stream()
    stream.buffers.extend([Buffer(b"a"), Buffer(b"b")])
    assert stream.buffer_size() == 2
    stream.release_buffers()
    assert stream.buffer_size() == 0


def test_buffer_remaining():
    buf = Buffer(b"hello", pos=2)
    assert buf.size == 5
    assert buf.remaining == 3