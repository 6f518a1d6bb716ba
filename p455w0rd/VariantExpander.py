import os
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from p455w0rd.Models import LEET_MAP, LeetMode


# Full subset enumeration beyond this many positions falls back to quick mode
MAX_LEET_POSITIONS = 16

# Positions at which 2^k no longer fits the 64-bit counters
UNCOUNTABLE_LEET_POSITIONS = 64


class VariantExpander:
    def __init__(
        self,
        mode: LeetMode = LeetMode.DEFAULT,
        max_leet_positions: int = MAX_LEET_POSITIONS,
        verbose: bool = False,
        workers: int = 0,
    ):
        self.mode = mode
        self.max_leet_positions = max_leet_positions
        self.verbose = verbose
        self.workers = workers if workers > 0 else os.cpu_count() or 1

    def expand(self, word: str) -> List[str]:
        lower = word.lower()

        variants = set()
        for leet_word in self._leet_variants(lower):
            variants.update(self._case_variants(leet_word))
        return sorted(variants)

    def expand_all(self, words: Iterable[str]) -> List[List[str]]:
        words = list(words)
        if len(words) <= 1:
            return [self.expand(word) for word in words]

        if self.verbose:
            print(f"[expand] Expanding {len(words)} words using {self.workers} workers", file=sys.stderr)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            expanded = list(pool.map(self.expand, words))

        if self.verbose:
            for word, variants in zip(words, expanded):
                print(f"[expand] {word!r}: {len(variants)} variants", file=sys.stderr)
        return expanded

    @staticmethod
    def leet_positions(word: str) -> List[int]:
        return [i for i, ch in enumerate(word.lower()) if ch in LEET_MAP]

    def is_quick(self, word: str) -> bool:
        if self.mode is LeetMode.QUICK:
            return True
        return len(self.leet_positions(word)) > self.max_leet_positions

    def _leet_variants(self, lower: str) -> List[str]:
        positions = self.leet_positions(lower)
        if not positions:
            return [lower]

        if self.is_quick(lower):
            if self.verbose and self.mode is not LeetMode.QUICK:
                print(
                    f"[expand] {lower!r} has {len(positions)} leetable positions, using single substitutions",
                    file=sys.stderr,
                )
            variants = [lower]
            for pos in positions:
                variants.append(lower[:pos] + LEET_MAP[lower[pos]] + lower[pos + 1:])
            return variants

        variants: List[str] = []
        for mask in range(1 << len(positions)):
            chars = list(lower)
            for bit, pos in enumerate(positions):
                if (mask >> bit) & 1:
                    chars[pos] = LEET_MAP[chars[pos]]
            variants.append("".join(chars))
        return variants

    @staticmethod
    def _case_variants(word: str) -> List[str]:
        variants = [word, word.upper()]

        # Capitalize the first letter, skipping leading digits and symbols
        for i, ch in enumerate(word):
            if ch.isalpha():
                variants.append(word[:i] + ch.upper() + word[i + 1:])
                break
        else:
            variants.append(word)
        return variants
