import itertools
import math
import sys
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from p455w0rd.CombinationAssembler import max_fitting_size
from p455w0rd.Errors import InvalidInputError
from p455w0rd.Models import (
    COUNT_CAP,
    LEET_MAP,
    U64_MAX,
    CombinationBreakdown,
    CombinationConfig,
    CombinatorialAnalysis,
    LeetMode,
    WordCountBreakdown,
    WordSet,
)
from p455w0rd.SpecialCharPadder import SpecialCharPadder
from p455w0rd.VariantExpander import UNCOUNTABLE_LEET_POSITIONS, VariantExpander


CASE_VARIANTS = 3

# Progress estimate tuning
ESTIMATE_VARIANTS_PER_WORD = 50
ESTIMATE_SIZE_CAP = 10_000_000
ESTIMATE_RANGE = (1_000_000, 1_000_000_000)

_COUNT_UNITS = ["", "thousand", "million", "billion", "trillion"]
_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def saturating_add(a: int, b: int, limit: int = U64_MAX) -> int:
    return min(a + b, limit)


def saturating_mul(a: int, b: int, limit: int = U64_MAX) -> int:
    return min(a * b, limit)


def permutation_count(n: int, k: int) -> int:
    if k > n:
        return 0
    result = 1
    for i in range(k):
        result = saturating_mul(result, n - i)
    return result


def word_permutations(n: int, max_words: int) -> int:
    total = 0
    for k in range(1, min(max_words, n) + 1):
        total = saturating_add(total, permutation_count(n, k))
    return total


def leet_variant_count(word: str) -> int:
    # 2^k for k leetable characters
    replaceable = sum(1 for ch in word.lower() if ch in LEET_MAP)
    if replaceable >= UNCOUNTABLE_LEET_POSITIONS:
        return U64_MAX
    return 1 << replaceable


def special_char_variant_count(n: int) -> int:
    total = 1 + n + n
    for k in range(2, n + 1):
        total = saturating_add(total, saturating_mul(permutation_count(n, k), 2))
        if total == U64_MAX:
            break
    return total


def format_combination_count(count: int) -> str:
    if count >= U64_MAX:
        return "too many to count"

    i = 0
    while i < len(_COUNT_UNITS) - 1 and count >= 1000 ** (i + 1):
        i += 1
    if i == 0:
        return str(count)
    return f"{count / 1000 ** i:.1f} {_COUNT_UNITS[i]}"


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 B"

    i = 0
    while i < len(_SIZE_UNITS) - 1 and size >= 1024 ** (i + 1):
        i += 1
    if i == 0:
        return f"{size} B"
    return f"{size / 1024 ** i:.1f} {_SIZE_UNITS[i]}"


def format_total(analysis: CombinatorialAnalysis) -> str:
    if analysis.saturated:
        return "too many to count"
    return format_combination_count(analysis.total_combinations)


class CombinatorialCounter:
    def __init__(
        self,
        expander: Optional[VariantExpander] = None,
        cap: int = COUNT_CAP,
        verbose: bool = False,
    ):
        self.expander = expander
        self.cap = cap
        self.verbose = verbose

    def count(self, words, config: CombinationConfig) -> CombinatorialAnalysis:
        words = self._prepare(words, config)
        expander = self._expander(config)
        padder = SpecialCharPadder(alphabet=config.special_chars) if config.include_special_chars else None

        n = len(words)
        max_words = config.effective_max_words(n)
        histograms = [self.length_histogram(word, expander) for word in words]
        shortest = [min(h) if h is not None else len(word) for word, h in zip(words, histograms)]
        fitting = max_fitting_size(shortest, config.max_len, max_words)

        by_word_count: List[WordCountBreakdown] = []
        running = 0
        length_total = 0
        for k in range(1, max_words + 1):
            if running >= self.cap:
                if self.verbose:
                    print(f"[count] Cap of {self.cap} reached, skipping {k}+ word combinations", file=sys.stderr)
                break
            if k > fitting:
                by_word_count.append(WordCountBreakdown(k, 0, 0.0))
                continue

            combinations, length_sum = self._count_size(histograms, k, config, padder, self.cap - running)
            average_length = length_sum / combinations if combinations else 0.0
            by_word_count.append(WordCountBreakdown(k, combinations, average_length))
            running += combinations
            length_total += length_sum

            if self.verbose:
                print(f"[count] {k} word(s): {combinations} combinations, avg length {average_length:.1f}", file=sys.stderr)

        total_combinations = sum(b.combinations for b in by_word_count)
        avg_password_length = round(length_total / total_combinations) if total_combinations else 0
        estimated_file_size_bytes = saturating_mul(total_combinations, avg_password_length + 1)

        leet_variants = 1
        for word in words:
            leet_variants = saturating_mul(leet_variants, leet_variant_count(word))

        return CombinatorialAnalysis(
            total_combinations=total_combinations,
            estimated_file_size_bytes=estimated_file_size_bytes,
            breakdown=CombinationBreakdown(
                word_permutations=word_permutations(n, max_words),
                leet_variants=leet_variants,
                case_variants=CASE_VARIANTS,
                special_char_variants=special_char_variant_count(len(padder.alphabet)) if padder else 1,
                by_word_count=by_word_count,
            ),
            cap=self.cap,
        )

    def estimate(self, words, config: CombinationConfig) -> int:
        words = self._prepare(words, config)
        expander = self._expander(config)

        n = len(words)
        capped = [min(len(variants), ESTIMATE_VARIANTS_PER_WORD) for variants in expander.expand_all(words)]
        avg_variants = max(sum(capped) // n, 1)

        floor, ceiling = ESTIMATE_RANGE
        total = 0
        for k in range(1, config.effective_max_words(n) + 1):
            size_total = math.perm(n, k)
            for _ in range(k):
                if size_total > ESTIMATE_SIZE_CAP // avg_variants:
                    size_total = ESTIMATE_SIZE_CAP
                    break
                size_total *= avg_variants
            total += size_total

            if k <= 2:
                max_for_size = 10_000_000
            elif k <= 4:
                max_for_size = 100_000_000
            else:
                max_for_size = ceiling
            if total > max_for_size:
                total = max_for_size
                break

        return max(floor, min(total, ceiling))

    def length_histogram(self, word: str, expander: Optional[VariantExpander] = None) -> Optional[Dict[int, int]]:
        # None when the word has too many leet positions to enumerate
        expander = expander or self.expander or VariantExpander()
        if expander.mode is not LeetMode.QUICK and len(expander.leet_positions(word)) >= UNCOUNTABLE_LEET_POSITIONS:
            return None
        return dict(Counter(len(variant) for variant in expander.expand(word)))

    def _prepare(self, words, config: CombinationConfig) -> WordSet:
        words = WordSet.coerce(words)
        if not words:
            raise InvalidInputError("No words provided for combinatorial analysis")
        config.validate()
        return words

    def _expander(self, config: CombinationConfig) -> VariantExpander:
        if self.expander is not None:
            return self.expander
        return VariantExpander(mode=config.leet_mode, verbose=self.verbose)

    def _count_size(
        self,
        histograms: Sequence[Optional[Dict[int, int]]],
        k: int,
        config: CombinationConfig,
        padder: Optional[SpecialCharPadder],
        budget: int,
    ) -> Tuple[int, int]:
        # Cartesian sizes do not depend on word order: count each subset once, times k!
        orderings = math.factorial(k)
        total = 0
        length_sum = 0

        for subset in itertools.combinations(range(len(histograms)), k):
            chosen = [histograms[i] for i in subset]
            if any(h is None for h in chosen):
                return budget, _clipped_length_sum(length_sum, total, budget, config.max_len)

            for base_len, bases in _convolve(chosen, config.max_len).items():
                for length, per_base in self._finished_lengths(base_len, config, padder).items():
                    count = bases * per_base * orderings
                    total += count
                    length_sum += count * length

            if total >= budget:
                return budget, _clipped_length_sum(length_sum, total, budget, config.max_len)
        return total, length_sum

    @staticmethod
    def _finished_lengths(base_len: int, config: CombinationConfig, padder: Optional[SpecialCharPadder]) -> Dict[int, int]:
        if not config.min_len <= base_len <= config.max_len:
            return {}
        if padder is None:
            return {base_len: 1}
        return padder.length_profile(base_len, config.length_window)


def _clipped_length_sum(length_sum: int, total: int, budget: int, max_len: int) -> int:
    # Keep the mean length of what was counted so far; assume max_len when nothing was
    if not total:
        return budget * max_len
    return length_sum * budget // total


def _convolve(histograms: Sequence[Dict[int, int]], max_len: int) -> Dict[int, int]:
    lengths = {0: 1}
    for histogram in histograms:
        combined: Dict[int, int] = defaultdict(int)
        for prefix_len, prefixes in lengths.items():
            for variant_len, variants in histogram.items():
                if prefix_len + variant_len <= max_len:
                    combined[prefix_len + variant_len] += prefixes * variants
        lengths = combined
    return dict(lengths)
