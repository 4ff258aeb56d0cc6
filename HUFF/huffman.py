from __future__ import annotations
import heapq
from dataclasses import dataclass
from itertools import count
from typing import Dict, List, Optional

from bitpack import EOF

BITS_PER_WORD = 8
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE          # terminator symbol, never a real byte
FILLER = 0                      # sibling for a lone terminator leaf


@dataclass(eq=False)
class Node:
    weight: int = 0
    sym: Optional[int] = None
    left: Optional["Node"] = None
    right: Optional["Node"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def count_frequencies(reader) -> List[int]:
    """
    One full pass over the reader at byte granularity.
    counts[PSEUDO_EOF] is always 1.
    """
    counts = [0] * (ALPH_SIZE + 1)
    while True:
        b = reader.read_bits(BITS_PER_WORD)
        if b == EOF:
            break
        counts[b] += 1
    counts[PSEUDO_EOF] = 1
    return counts


def build_tree(counts: List[int]) -> Node:
    """
    Classic Huffman merge over a min-heap keyed on (weight, arrival).
    Leaves arrive in symbol order, merged nodes after them, so equal
    weights always resolve the same way.
    """
    arrival = count()
    pq = [(w, next(arrival), Node(weight=w, sym=s)) for s, w in enumerate(counts) if w > 0]
    heapq.heapify(pq)
    if not pq:
        raise ValueError("cannot build a tree from an all-zero frequency table")
    if len(pq) == 1:
        # Edge case: only the terminator -> give it a 1-bit code
        only = pq[0][2]
        return Node(weight=only.weight, left=only, right=Node(weight=0, sym=FILLER))
    while len(pq) > 1:
        wa, _, a = heapq.heappop(pq)
        wb, _, b = heapq.heappop(pq)
        heapq.heappush(pq, (wa + wb, next(arrival), Node(weight=wa + wb, left=a, right=b)))
    return pq[0][2]


def build_codebook(node: Node, prefix: str = "", code: Optional[Dict[int, str]] = None) -> Dict[int, str]:
    if code is None:
        code = {}
    if node.is_leaf:
        code[node.sym] = prefix
    else:
        build_codebook(node.left, prefix + "0", code)
        build_codebook(node.right, prefix + "1", code)
    return code


def leaves(node: Node) -> List[Node]:
    if node.is_leaf:
        return [node]
    return leaves(node.left) + leaves(node.right)
