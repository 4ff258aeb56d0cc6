import numpy as np

from huffman import ALPH_SIZE


def entropy_bits(counts) -> float:
    """
    Shannon entropy of the byte distribution, bits per byte.
    The terminator is not part of the data and is left out.
    """
    c = np.asarray(counts[:ALPH_SIZE], dtype=np.float64)
    total = c.sum()
    if total == 0:
        return 0.0
    p = c[c > 0] / total
    return float(-(p * np.log2(p)).sum())


def mean_code_length(counts, codes) -> float:
    """Average code length over the input bytes, bits per byte."""
    c = np.asarray(counts[:ALPH_SIZE], dtype=np.float64)
    total = c.sum()
    if total == 0:
        return 0.0
    lengths = np.array([len(codes.get(s, "")) for s in range(ALPH_SIZE)], dtype=np.float64)
    return float((c * lengths).sum() / total)


def compression_ratio(original_bits: int, compressed_bits: int) -> float:
    return original_bits / compressed_bits if compressed_bits > 0 else 1.0


def bits_saved(original_bits: int, compressed_bits: int) -> int:
    return original_bits - compressed_bits
