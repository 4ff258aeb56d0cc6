import io
import os

from bitpack import BitReader, BitWriter, EOF, INT_SIZE
from huffman import count_frequencies, build_tree, build_codebook, BITS_PER_WORD, PSEUDO_EOF
from bitstream import (write_magic, read_magic, write_tree, read_tree,
                       HuffError, MalformedStreamError, EncodingError)


def _code_table(codes):
    """bit-string codebook -> {sym: (code_int, length)}"""
    return {sym: (int(bits, 2), len(bits)) for sym, bits in codes.items()}


def _write_code(bw, code: int, length: int):
    # codes can run past 32 bits on skewed inputs
    while length > INT_SIZE:
        length -= INT_SIZE
        bw.write_bits(INT_SIZE, code >> length)
        code &= (1 << length) - 1
    bw.write_bits(length, code)


def compress(br: BitReader, bw: BitWriter):
    """
    Two passes over br: count, then encode.
    Returns:
      meta: dict (counts, codes, symbols)
    """
    # 1) Frequencies + tree
    counts = count_frequencies(br)
    root = build_tree(counts)
    br.reset()

    # 2) Header: magic + pre-order tree
    write_magic(bw)
    write_tree(root, bw)

    # 3) Payload
    codes = build_codebook(root)
    table = _code_table(codes)
    nsym = 0
    while True:
        val = br.read_bits(BITS_PER_WORD)
        if val == EOF:
            break
        entry = table.get(val)
        if entry is None:
            raise EncodingError(f"no code for byte {val} (input changed between passes?)")
        _write_code(bw, *entry)
        nsym += 1

    code, length = table[PSEUDO_EOF]
    _write_code(bw, code, length)
    bw.close()

    return {"counts": counts, "codes": codes, "symbols": nsym}


def decompress(br: BitReader, bw: BitWriter) -> int:
    """Returns the number of bytes decoded."""
    read_magic(br)
    root = read_tree(br)

    cur = root
    ndecoded = 0
    while True:
        bit = br.read_bits(1)
        if bit == EOF:
            raise MalformedStreamError("Malformed stream: no PSEUDO_EOF before end of input")
        cur = cur.left if bit == 0 else cur.right
        if cur.is_leaf:
            if cur.sym == PSEUDO_EOF:
                break
            bw.write_bits(BITS_PER_WORD, cur.sym)
            ndecoded += 1
            cur = root

    bw.close()
    return ndecoded


def compress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    compress(BitReader(io.BytesIO(data)), BitWriter(out))
    return out.getvalue()


def decompress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    decompress(BitReader(io.BytesIO(data)), BitWriter(out))
    return out.getvalue()


def compress_file(src, dst):
    """Returns (meta, bits_read, bits_written)."""
    with BitReader.open(src) as br, BitWriter.open(dst) as bw:
        meta = compress(br, bw)
    return meta, br.bits_read, bw.bits_written


def decompress_file(src, dst):
    """
    Returns (bytes_decoded, bits_read, bits_written).
    On a codec failure dst is removed before the error propagates.
    """
    try:
        with BitReader.open(src) as br, BitWriter.open(dst) as bw:
            n = decompress(br, bw)
    except HuffError:
        if os.path.exists(dst):
            os.remove(dst)
        raise
    return n, br.bits_read, bw.bits_written
