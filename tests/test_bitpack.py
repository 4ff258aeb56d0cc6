import io
import random

import pytest

from bitpack import BitReader, BitWriter, EOF, BUFFER_SIZE


class _Pipe:
    """Readable source without seek support."""
    def __init__(self, data):
        self._buf = io.BytesIO(data)

    def read(self, n=-1):
        return self._buf.read(n)


class _Trickle(_Pipe):
    """Unseekable source that hands out at most 3 bytes per read."""
    def read(self, n=-1):
        return self._buf.read(3 if n < 0 else min(n, 3))


def _written(pairs):
    out = io.BytesIO()
    bw = BitWriter(out)
    for n, v in pairs:
        bw.write_bits(n, v)
    bw.close()
    return out.getvalue()


def test_random_widths_read_back():
    rng = random.Random(1234)
    pairs = [(n, rng.getrandbits(40)) for n in (rng.randint(1, 32) for _ in range(5000))]
    data = _written(pairs)

    br = BitReader(io.BytesIO(data))
    for n, v in pairs:
        assert br.read_bits(n) == v & ((1 << n) - 1)


def test_writes_span_block_buffer():
    values = list(range(3 * BUFFER_SIZE))
    data = _written([(32, v) for v in values])
    assert len(data) == 4 * len(values)

    br = BitReader(io.BytesIO(data))
    assert [br.read_bits(32) for _ in values] == values
    assert br.read_bits(1) == EOF


@pytest.mark.parametrize("n", [0, -1, 33])
def test_write_width_out_of_range(n):
    bw = BitWriter(io.BytesIO())
    with pytest.raises(ValueError):
        bw.write_bits(n, 1)


@pytest.mark.parametrize("n", [0, 33])
def test_read_width_out_of_range(n):
    br = BitReader(io.BytesIO(b"\xff"))
    with pytest.raises(ValueError):
        br.read_bits(n)


def test_flush_pads_last_byte_with_zeros():
    assert _written([(3, 0b101)]) == b"\xa0"
    assert _written([(9, 0x1ff)]) == b"\xff\x80"
    assert _written([(8, 0x12), (8, 0x34)]) == b"\x12\x34"


def test_flush_emits_no_unwritten_bytes():
    assert _written([]) == b""
    # exactly one full accumulator
    assert _written([(32, 0xdeadbeef), (32, 0x01020304)]) == bytes.fromhex("deadbeef01020304")
    assert _written([(32, 0xdeadbeef), (32, 0x01020304), (1, 1)]) == bytes.fromhex("deadbeef0102030480")


def test_write_keeps_low_bits_only():
    assert _written([(4, 0xfa), (4, 0x3)]) == b"\xa3"


def test_bits_written_counter():
    bw = BitWriter(io.BytesIO())
    bw.write_bits(3, 1)
    bw.write_bits(32, 7)
    assert bw.bits_written == 35


def test_explicit_flush_then_more_bits():
    out = io.BytesIO()
    bw = BitWriter(out)
    bw.write_bits(4, 0xf)
    bw.flush()
    assert out.getvalue() == b"\xf0"
    bw.write_bits(8, 0x11)
    bw.close()
    assert out.getvalue() == b"\xf0\x11"


def test_reader_eof_when_too_few_bits():
    br = BitReader(io.BytesIO(b"\xff"))
    assert br.read_bits(8) == 0xff
    assert br.read_bits(1) == EOF

    br = BitReader(io.BytesIO(b"\xff"))
    assert br.read_bits(12) == EOF

    assert BitReader(io.BytesIO(b"")).read_bits(1) == EOF


def test_reader_msb_first_across_accumulator():
    data = bytes(range(1, 11))  # 10 bytes, crosses the 8-byte refill
    br = BitReader(io.BytesIO(data))
    assert br.read_bits(4) == 0x0
    assert br.read_bits(32) == 0x10203040
    assert br.read_bits(28) == 0x5060708
    assert br.read_bits(16) == 0x090a
    assert br.read_bits(1) == EOF


def test_bits_read_counter_and_reset():
    data = bytes(range(256)) * 40
    br = BitReader(io.BytesIO(data))
    first = [br.read_bits(8) for _ in range(100)]
    assert br.bits_read == 800

    br.reset()
    assert br.bits_read == 0
    assert [br.read_bits(8) for _ in range(100)] == first


def test_reset_returns_to_construction_offset():
    src = io.BytesIO(b"skip" + b"\x01\x02")
    src.seek(4)
    br = BitReader(src)
    assert br.read_bits(16) == 0x0102
    assert br.read_bits(1) == EOF
    br.reset()
    assert br.read_bits(16) == 0x0102


def test_reset_replays_unseekable_source():
    rng = random.Random(7)
    data = bytes(rng.getrandbits(8) for _ in range(3 * BUFFER_SIZE + 5))
    br = BitReader(_Pipe(data))

    first = bytearray()
    while True:
        b = br.read_bits(8)
        if b == EOF:
            break
        first.append(b)
    assert bytes(first) == data

    br.reset()
    assert [br.read_bits(8) for _ in range(10)] == list(data[:10])
    br.reset()
    again = bytearray()
    while True:
        b = br.read_bits(8)
        if b == EOF:
            break
        again.append(b)
    assert bytes(again) == data


def test_handed_in_streams_stay_open():
    src, sink = io.BytesIO(b"\x00"), io.BytesIO()
    with BitReader(src) as br, BitWriter(sink) as bw:
        bw.write_bits(8, br.read_bits(8))
    assert not src.closed
    assert not sink.closed
    assert sink.getvalue() == b"\x00"


def test_closed_streams_reject_io():
    bw = BitWriter(io.BytesIO())
    bw.close()
    bw.close()
    with pytest.raises(ValueError):
        bw.write_bits(1, 1)

    br = BitReader(io.BytesIO(b"\x00"))
    br.close()
    with pytest.raises(ValueError):
        br.read_bits(1)


def test_open_owns_file(tmp_path):
    path = tmp_path / "bits.bin"
    with BitWriter.open(path) as bw:
        bw.write_bits(12, 0xabc)
    assert path.read_bytes() == b"\xab\xc0"

    with BitReader.open(path) as br:
        assert br.read_bits(12) == 0xabc
        f = br._source
    assert f.closed


def test_short_reads_are_not_end_of_stream():
    br = BitReader(_Trickle(b"\x01\x02\x03\x04\x05\x06"))
    assert br.read_bits(32) == 0x01020304
    assert br.read_bits(16) == 0x0506
    assert br.read_bits(1) == EOF


def test_short_reads_across_blocks_and_reset():
    rng = random.Random(21)
    data = bytes(rng.getrandbits(8) for _ in range(2 * BUFFER_SIZE + 11))
    br = BitReader(_Trickle(data))
    for _ in range(2):
        got = bytearray()
        while True:
            b = br.read_bits(8)
            if b == EOF:
                break
            got.append(b)
        assert bytes(got) == data
        br.reset()
