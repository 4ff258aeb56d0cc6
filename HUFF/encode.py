import argparse, os, time
from codec import compress_file
from metrics import entropy_bits, mean_code_length, bits_saved, compression_ratio
from huffman import PSEUDO_EOF

HUFF_EXTENSION = ".hf"

def default_output(name: str) -> str:
    if name.endswith(".uhf"):
        return name[:-4] + HUFF_EXTENSION
    return name + HUFF_EXTENSION

def _sym_label(sym: int) -> str:
    if sym == PSEUDO_EOF:
        return "EOF"
    if 32 < sym < 127:
        return repr(chr(sym))
    return f"0x{sym:02x}"

def main(argv=None):
    ap = argparse.ArgumentParser(description="Huffman-compress a file (tree-header format)")
    ap.add_argument("input", help="file to compress")
    ap.add_argument("-o", "--output", help="compressed file (default: INPUT.hf)")
    ap.add_argument("--verbose", action="store_true", help="print the code table")
    args = ap.parse_args(argv)

    output = args.output or default_output(args.input)

    t0 = time.perf_counter()
    meta, nread, nwritten = compress_file(args.input, output)
    ms = (time.perf_counter() - t0) * 1000

    in_bits = os.path.getsize(args.input) * 8
    out_bits = os.path.getsize(output) * 8

    print(f"[encode] compress from {args.input} to {output}")
    print(f"[encode] file: {in_bits} bits to {out_bits} bits, ratio {compression_ratio(in_bits, out_bits):.2f}:1")
    print(f"[encode] read {nread} bits, wrote {nwritten} bits")
    print(f"[encode] bits saved = {bits_saved(nread, nwritten)}")
    print(f"[encode] entropy={entropy_bits(meta['counts']):.3f} b/B, "
          f"mean code={mean_code_length(meta['counts'], meta['codes']):.3f} b/B")
    if args.verbose:
        for sym in sorted(meta["codes"], key=lambda s: (len(meta["codes"][s]), s)):
            n = meta["counts"][sym]
            if n == 0:
                continue
            print(f"[encode]   {_sym_label(sym):>6} x{n:<8} {meta['codes'][sym]}")
    print(f"[encode] compress took {ms:.0f} ms")

if __name__ == "__main__":
    main()
