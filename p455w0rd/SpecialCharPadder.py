import itertools
import math
import sys
from typing import Dict, List, Optional, Tuple, Union

from p455w0rd.Models import SPECIAL_CHARS


# None = any length, int = exact target, (min, max) = inclusive window
LengthSpec = Union[None, int, Tuple[int, int]]


# Range mode keeps the bare base plus every ordered block of 1..n characters as a
# prefix and as a suffix. Fixed mode keeps suffix blocks that close the gap exactly
# and a single-character prefix only.
class SpecialCharPadder:
    def __init__(self, alphabet: str = SPECIAL_CHARS, verbose: bool = False):
        self.alphabet = alphabet
        self.verbose = verbose
        self._blocks: Dict[int, List[str]] = {}

    def blocks(self, size: int) -> List[str]:
        if size not in self._blocks:
            self._blocks[size] = ["".join(p) for p in itertools.permutations(self.alphabet, size)]
        return self._blocks[size]

    def pad(self, base: str, length: LengthSpec = None) -> List[str]:
        if isinstance(length, int):
            results = self._pad_to_target(base, length)
        else:
            results = self._pad_in_window(base, length)

        if self.verbose:
            print(f"[pad] {base!r} -> {len(results)} variants", file=sys.stderr)
        return sorted(results)

    def length_profile(self, base_len: int, length: LengthSpec = None) -> Dict[int, int]:
        n = len(self.alphabet)

        if isinstance(length, int):
            gap = length - base_len
            if gap < 0:
                return {}
            if gap == 0:
                return {length: 1}
            count = math.perm(n, gap) if gap <= n else 0
            if gap == 1:
                count += n
            return {length: count} if count else {}

        lo, hi = _window(length)
        profile = {}
        if lo <= base_len <= hi:
            profile[base_len] = 1
        for size in range(1, n + 1):
            if lo <= base_len + size <= hi:
                profile[base_len + size] = 2 * math.perm(n, size)
        return profile

    def variant_count(self, base_len: int, length: LengthSpec = None) -> int:
        return sum(self.length_profile(base_len, length).values())

    def total_variants(self) -> int:
        return self.variant_count(0, None)

    def _pad_in_window(self, base: str, length: LengthSpec) -> set:
        lo, hi = _window(length)
        results = set()

        if lo <= len(base) <= hi:
            results.add(base)

        for size in range(1, len(self.alphabet) + 1):
            if not lo <= len(base) + size <= hi:
                continue
            for block in self.blocks(size):
                results.add(block + base)
                results.add(base + block)
        return results

    def _pad_to_target(self, base: str, target: int) -> set:
        gap = target - len(base)
        if gap < 0:
            return set()
        if gap == 0:
            return {base}

        results = set()
        if gap <= len(self.alphabet):
            for block in self.blocks(gap):
                results.add(base + block)

        for ch in self.alphabet:
            padded = ch + base
            if len(padded) == target:
                results.add(padded)
        return results


def _window(length: Optional[Tuple[int, int]]) -> Tuple[int, float]:
    if length is None:
        return 0, math.inf
    lo, hi = length
    return lo, hi
