from __future__ import annotations
from typing import BinaryIO, Optional

BYTE_SIZE = 8
INT_SIZE = 32
BIT_BUFFER_SIZE = 8      # bytes held by the 64-bit accumulator
BUFFER_SIZE = 8192       # block buffer size in bytes

EOF = -1


def _check_width(n: int):
    if n < 1 or n > INT_SIZE:
        raise ValueError(f"Illegal argument: numBits must be on [1, {INT_SIZE}], got {n}")


class BitWriter:
    """
    Buffered MSB-first bit writer over a binary sink.

    Bits collect in a 64-bit accumulator; full accumulators are moved
    8 bytes at a time into a block buffer which is written to the sink
    every BUFFER_SIZE bytes.
    """

    def __init__(self, sink: BinaryIO, *, owns_sink: bool = False):
        self._sink = sink
        self._owns_sink = owns_sink
        self._buf = bytearray()
        self._cur = 0
        self._avail = BYTE_SIZE * BIT_BUFFER_SIZE   # free bits in _cur
        self._bits_written = 0
        self.closed = False

    @classmethod
    def open(cls, path) -> "BitWriter":
        return cls(open(path, "wb"), owns_sink=True)

    @property
    def bits_written(self) -> int:
        return self._bits_written

    def write_bits(self, n: int, value: int):
        """Write the low 'n' bits of value (MSB-first)."""
        _check_width(n)
        if self.closed:
            raise ValueError("I/O operation on closed BitWriter")
        self._bits_written += n
        value &= (1 << n) - 1

        if n > self._avail:
            spill = n - self._avail
            self._cur |= value >> spill
            value &= (1 << spill) - 1
            n = spill
            self._empty_bit_buffer()

        self._cur |= value << (self._avail - n)
        self._avail -= n

    def _empty_bit_buffer(self):
        self._buf += self._cur.to_bytes(BIT_BUFFER_SIZE, "big")
        self._cur = 0
        self._avail = BYTE_SIZE * BIT_BUFFER_SIZE
        if len(self._buf) >= BUFFER_SIZE:
            self._empty_buffer()

    def _empty_bit_buffer_exact(self):
        used = BYTE_SIZE * BIT_BUFFER_SIZE - self._avail
        if used == 0:
            return
        nbytes = (used + BYTE_SIZE - 1) // BYTE_SIZE
        # bits below the last populated byte are still zero
        self._buf += (self._cur >> (BYTE_SIZE * (BIT_BUFFER_SIZE - nbytes))).to_bytes(nbytes, "big")
        self._cur = 0
        self._avail = BYTE_SIZE * BIT_BUFFER_SIZE

    def _empty_buffer(self):
        if self._buf:
            self._sink.write(bytes(self._buf))
            self._buf.clear()

    def flush(self):
        """Pad the last partial byte with zeros and push everything to the sink."""
        if self.closed:
            return
        self._empty_bit_buffer_exact()
        self._empty_buffer()
        if hasattr(self._sink, "flush"):
            self._sink.flush()

    def close(self):
        if self.closed:
            return
        try:
            self.flush()
        finally:
            self.closed = True
            if self._owns_sink:
                self._sink.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class BitReader:
    """
    Buffered MSB-first bit reader over a binary source.

    read_bits() returns EOF (-1) once fewer than the requested number of
    bits are left. reset() rewinds to where the source stood when the
    reader was built; sources that cannot seek are replayed from a copy
    of every block read so far.
    """

    def __init__(self, source: BinaryIO, *, owns_source: bool = False):
        self._source = source
        self._owns_source = owns_source
        self._start: Optional[int] = None
        self._replay: Optional[bytearray] = None
        seekable = getattr(source, "seekable", None)
        if seekable is not None and seekable():
            self._start = source.tell()
        else:
            self._replay = bytearray()
        self._replay_pos = 0
        self.closed = False
        self._init_state()

    def _init_state(self):
        self._block = b""
        self._pos = 0
        self._cur = 0
        self._avail = 0        # unread bits in _cur
        self._bits_read = 0

    @classmethod
    def open(cls, path) -> "BitReader":
        return cls(open(path, "rb"), owns_source=True)

    @property
    def bits_read(self) -> int:
        return self._bits_read

    def read_bits(self, n: int) -> int:
        """Read the next 'n' bits as an unsigned int, or EOF."""
        _check_width(n)
        if self.closed:
            raise ValueError("I/O operation on closed BitReader")
        requested = n
        value = 0

        if n > self._avail:
            value = self._cur
            n -= self._avail
            value <<= n
            if not self._fill_bit_buffer():
                return EOF

        if n > self._avail:
            return EOF

        shift = self._avail - n
        value |= self._cur >> shift
        self._cur &= (1 << shift) - 1
        self._avail = shift
        self._bits_read += requested
        return value

    def _fill_bit_buffer(self) -> bool:
        self._cur = 0
        self._avail = 0
        if self._pos >= len(self._block):
            if not self._fill_buffer():
                return False
        chunk = self._block[self._pos:self._pos + BIT_BUFFER_SIZE]
        self._pos += len(chunk)
        self._cur = int.from_bytes(chunk, "big")
        self._avail = BYTE_SIZE * len(chunk)
        return True

    def _fill_buffer(self) -> bool:
        self._block = self._read_block()
        self._pos = 0
        return len(self._block) > 0

    def _read_block(self) -> bytes:
        if self._replay is not None and self._replay_pos < len(self._replay):
            block = bytes(self._replay[self._replay_pos:self._replay_pos + BUFFER_SIZE])
            self._replay_pos += len(block)
            return block
        # short reads (pipes, raw files) are not end of stream
        buf = bytearray()
        while len(buf) < BUFFER_SIZE:
            part = self._source.read(BUFFER_SIZE - len(buf))
            if not part:
                break
            buf += part
        block = bytes(buf)
        if self._replay is not None:
            self._replay += block
            self._replay_pos += len(block)
        return block

    def reset(self):
        if self.closed:
            raise ValueError("I/O operation on closed BitReader")
        if self._replay is None:
            self._source.seek(self._start)
        else:
            self._replay_pos = 0
        self._init_state()

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._replay = None
        if self._owns_source:
            self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
