from bitpack import EOF
from huffman import Node, BITS_PER_WORD, PSEUDO_EOF

BITS_PER_INT = 32
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1      # "Huffman, tree header" format

# Stream layout (bit-granular, MSB-first):
# magic(32) tree(pre-order) codes(...) terminator-code zero-pad
# tree: internal -> 0 left right ; leaf -> 1 symbol(9)
SYMBOL_BITS = BITS_PER_WORD + 1
MAX_DEPTH = PSEUDO_EOF           # 257 leaves never need a deeper tree


class HuffError(Exception):
    """Base class for codec failures."""


class FormatError(HuffError, ValueError):
    """Input is not a recognized compressed file."""


class MalformedStreamError(HuffError, ValueError):
    """Compressed stream ends early or describes an impossible tree."""


class EncodingError(HuffError, RuntimeError):
    """Tree or code table is inconsistent with the data being encoded."""


def write_magic(bw):
    bw.write_bits(BITS_PER_INT, HUFF_TREE)


def read_magic(br):
    magic = br.read_bits(BITS_PER_INT)
    if magic == EOF:
        raise FormatError("Bad magic number: stream shorter than 32 bits")
    if magic != HUFF_TREE:
        raise FormatError(f"Bad magic number 0x{magic:08x} (not a Huffman tree-header file)")


def write_tree(node: Node, bw):
    if node is None:
        raise EncodingError("internal node is missing a child")
    if node.is_leaf:
        if node.sym is None or not (0 <= node.sym <= PSEUDO_EOF):
            raise EncodingError(f"leaf carries an unset or invalid symbol: {node.sym!r}")
        bw.write_bits(1, 1)
        bw.write_bits(SYMBOL_BITS, node.sym)
        return
    if node.left is None or node.right is None:
        raise EncodingError("internal node is missing a child")
    bw.write_bits(1, 0)
    write_tree(node.left, bw)
    write_tree(node.right, bw)


def read_tree(br) -> Node:
    """
    Rebuild the tree written by write_tree. The root must be internal:
    a bare leaf has no codes to walk.
    """
    root = _read_node(br, 0)
    if root.is_leaf:
        raise MalformedStreamError("Malformed stream: tree has no branches")
    return root


def _read_node(br, depth: int) -> Node:
    if depth > MAX_DEPTH:
        raise MalformedStreamError("Malformed stream: tree deeper than the alphabet allows")
    bit = br.read_bits(1)
    if bit == EOF:
        raise MalformedStreamError("Malformed stream: tree truncated")
    if bit == 0:
        left = _read_node(br, depth + 1)
        right = _read_node(br, depth + 1)
        return Node(left=left, right=right)
    sym = br.read_bits(SYMBOL_BITS)
    if sym == EOF:
        raise MalformedStreamError("Malformed stream: tree truncated")
    if sym > PSEUDO_EOF:
        raise MalformedStreamError(f"Malformed stream: symbol {sym} out of range")
    return Node(sym=sym)
