import argparse, os, sys, time
from codec import decompress_file
from bitstream import HuffError

UNHUFF_EXTENSION = ".uhf"

def default_output(name: str) -> str:
    if name.endswith(".hf"):
        return name[:-3] + UNHUFF_EXTENSION
    return name + UNHUFF_EXTENSION

def main(argv=None):
    ap = argparse.ArgumentParser(description="Decompress a Huffman tree-header file")
    ap.add_argument("input", help="compressed file")
    ap.add_argument("-o", "--output", help="decompressed file (default: INPUT.uhf)")
    args = ap.parse_args(argv)

    output = args.output or default_output(args.input)

    t0 = time.perf_counter()
    try:
        nbytes, nread, nwritten = decompress_file(args.input, output)
    except HuffError as e:
        # decompress_file already removed the partial output
        print(f"[decode] {e}", file=sys.stderr)
        print(f"[decode] deleted file {output}", file=sys.stderr)
        sys.exit(1)
    ms = (time.perf_counter() - t0) * 1000

    in_bits = os.path.getsize(args.input) * 8
    out_bits = os.path.getsize(output) * 8

    print(f"[decode] uncompress from {args.input} to {output}")
    print(f"[decode] file: {in_bits} bits to {out_bits} bits ({nbytes} bytes)")
    print(f"[decode] read {nread} bits, wrote {nwritten} bits")
    print(f"[decode] {out_bits - in_bits} compared to {nwritten - nread}")
    print(f"[decode] decompress took {ms:.0f} ms")

if __name__ == "__main__":
    main()
