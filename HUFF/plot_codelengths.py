import argparse
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from bitpack import BitReader
from huffman import count_frequencies, build_tree, build_codebook, ALPH_SIZE


def code_lengths(counts):
    codes = build_codebook(build_tree(counts))
    lengths = np.zeros(ALPH_SIZE, dtype=np.int32)
    for sym in range(ALPH_SIZE):
        if counts[sym] > 0:
            lengths[sym] = len(codes[sym])
    return lengths


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("input", help="file to analyse")
    ap.add_argument("-o", "--output", default="codelengths.png", help="output figure")
    args = ap.parse_args(argv)

    with BitReader.open(args.input) as br:
        counts = count_frequencies(br)
    freqs = np.asarray(counts[:ALPH_SIZE], dtype=np.int64)
    lengths = code_lengths(counts)
    syms = np.arange(ALPH_SIZE)

    plt.figure(figsize=(10, 5))
    plt.subplot(2, 1, 1)
    plt.bar(syms, freqs, width=1.0)
    plt.title("Byte frequency", fontsize=9)
    plt.xlim(-1, ALPH_SIZE)

    plt.subplot(2, 1, 2)
    plt.bar(syms, lengths, width=1.0, color="tab:orange")
    plt.title("Huffman code length (bits)", fontsize=9)
    plt.xlim(-1, ALPH_SIZE)
    plt.xlabel("byte value")

    plt.tight_layout()
    plt.savefig(args.output, dpi=150)
    plt.close()
    print(f"[plot] wrote {args.output}")

if __name__ == "__main__":
    main()
