import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from p455w0rd.Errors import InvalidInputError


# Leetable characters and their single replacement
LEET_MAP = {
    "a": "4",
    "e": "3",
    "i": "1",
    "l": "1",
    "o": "0",
    "s": "5",
}

SPECIAL_CHARS = "!@#$%"

# Saturation ceiling for exact counts
COUNT_CAP = 1_000_000_000

# Numeric maximum used for size estimates and overflow sentinels
U64_MAX = 2 ** 64 - 1

# WPA2 passphrase bounds
WPA2_LENGTHS = (8, 63)


class LeetMode(Enum):
    DEFAULT = "full"
    FULL = "full"
    QUICK = "quick"


# Unique, order-stable sequence of non-empty seed words
class WordSet:
    def __init__(self, words: Iterable[str] = ()):
        seen = set()
        unique: List[str] = []
        for word in words:
            if not word or word in seen:
                continue
            seen.add(word)
            unique.append(word)
        self._words: Tuple[str, ...] = tuple(unique)

    @classmethod
    def coerce(cls, words) -> "WordSet":
        if isinstance(words, WordSet):
            return words
        return cls(words)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __getitem__(self, index):
        return self._words[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, WordSet):
            return self._words == other._words
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._words)

    def __repr__(self) -> str:
        return f"WordSet({list(self._words)!r})"


@dataclass
class CombinationConfig:
    max_words: int = 0
    min_len: int = 4
    max_len: int = 20
    include_special_chars: bool = True
    chunk_size: int = 100_000
    limit: int = 0
    special_chars: str = SPECIAL_CHARS
    dedup_capacity: int = 1_000_000
    leet_mode: LeetMode = LeetMode.DEFAULT

    def validate(self) -> None:
        if self.min_len < 0 or self.max_len < 0:
            raise InvalidInputError(f"Lengths must be non-negative (got {self.min_len}..{self.max_len})")
        if self.min_len > self.max_len:
            raise InvalidInputError(f"Minimum length {self.min_len} exceeds maximum length {self.max_len}")
        if self.max_words < 0:
            raise InvalidInputError(f"max_words must be >= 0 (got {self.max_words})")
        if self.chunk_size < 1:
            raise InvalidInputError(f"chunk_size must be >= 1 (got {self.chunk_size})")
        if self.limit < 0:
            raise InvalidInputError(f"limit must be >= 0 (got {self.limit})")
        if self.dedup_capacity < 1:
            raise InvalidInputError(f"dedup_capacity must be >= 1 (got {self.dedup_capacity})")
        if len(set(self.special_chars)) != len(self.special_chars):
            raise InvalidInputError(f"Special characters must be distinct: {self.special_chars!r}")

    def effective_max_words(self, word_count: int) -> int:
        if self.max_words == 0:
            return word_count
        return min(self.max_words, word_count)

    @property
    def length_window(self) -> Tuple[int, int]:
        return self.min_len, self.max_len


@dataclass
class WordCountBreakdown:
    word_count: int
    combinations: int
    average_length: float


@dataclass
class CombinationBreakdown:
    word_permutations: int
    leet_variants: int
    case_variants: int
    special_char_variants: int
    by_word_count: List[WordCountBreakdown] = field(default_factory=list)


@dataclass
class CombinatorialAnalysis:
    total_combinations: int
    estimated_file_size_bytes: int
    breakdown: CombinationBreakdown
    cap: int = COUNT_CAP

    @property
    def saturated(self) -> bool:
        return self.total_combinations >= self.cap


@dataclass
class ProgressContext:
    estimated_total: int = 0
    emitted: int = 0
    duplicates: int = 0
    combo_size: int = 0
    start_time: float = field(default_factory=time.monotonic)
    finished: bool = False

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def rate(self) -> float:
        elapsed = self.elapsed
        if elapsed <= 0:
            return 0.0
        return self.emitted / elapsed

    @property
    def percent(self) -> Optional[float]:
        # None once the estimate is clearly wrong
        if self.estimated_total <= 0:
            return None
        if self.emitted <= self.estimated_total:
            return min(self.emitted / self.estimated_total * 100.0, 100.0)
        if self.emitted / self.estimated_total > 3.0:
            return None
        return 95.0

    @property
    def eta(self) -> Optional[float]:
        if self.emitted > self.estimated_total:
            return None
        rate = self.rate
        if rate > 0 and self.estimated_total > self.emitted:
            return min((self.estimated_total - self.emitted) / rate, 86400.0)
        return 0.0
