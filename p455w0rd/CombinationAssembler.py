import itertools
import sys
from typing import Callable, Iterator, List, Optional, Sequence

from p455w0rd.Deduper import BoundedDeduper
from p455w0rd.Errors import InvalidInputError, ResourceExhaustionError, SinkError
from p455w0rd.Models import CombinationConfig, ProgressContext, WordSet
from p455w0rd.SpecialCharPadder import SpecialCharPadder
from p455w0rd.VariantExpander import VariantExpander


# Soft limits: generation proceeds but the caller is warned
WARN_WORD_COUNT = 12
WARN_COMBO_SIZE = 4

# Hard limits: generation is refused
MAX_COMBO_SIZE = 10
MAX_LENGTH = 1024

Sink = Callable[[List[str]], object]
ProgressCallback = Callable[[int, int, int], object]


def check_resources(words, config: CombinationConfig) -> List[str]:
    # Raises above the hard limits, returns warnings for the soft ones
    words = WordSet.coerce(words)
    combo_size = config.effective_max_words(len(words))

    if combo_size > MAX_COMBO_SIZE:
        raise ResourceExhaustionError(
            f"Combining up to {combo_size} words is above the limit of {MAX_COMBO_SIZE}; lower --max-words"
        )
    if config.max_len > MAX_LENGTH:
        raise ResourceExhaustionError(f"Maximum length {config.max_len} is above the limit of {MAX_LENGTH}")

    warnings = []
    if len(words) > WARN_WORD_COUNT:
        warnings.append(f"{len(words)} words supplied; generation time grows factorially with the word count")
    if combo_size > WARN_COMBO_SIZE:
        warnings.append(f"Combining up to {combo_size} words per candidate; consider --max-words {WARN_COMBO_SIZE}")
    return warnings


class CombinationAssembler:
    def __init__(
        self,
        config: CombinationConfig,
        expander: Optional[VariantExpander] = None,
        padder: Optional[SpecialCharPadder] = None,
        verbose: bool = False,
        workers: int = 0,
    ):
        self.config = config
        self.verbose = verbose
        self.expander = expander or VariantExpander(mode=config.leet_mode, verbose=verbose, workers=workers)
        self.padder = padder or SpecialCharPadder(alphabet=config.special_chars)

    def candidates(self, words, progress: Optional[ProgressContext] = None, cancel=None) -> Iterator[str]:
        words = self._prepare(words)
        return self._generate(words, progress, cancel)

    def assemble(
        self,
        words,
        sink: Sink,
        progress: Optional[ProgressContext] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel=None,
    ) -> int:
        words = self._prepare(words)
        if progress is None:
            progress = ProgressContext()

        buffer: List[str] = []
        for candidate in self._generate(words, progress, cancel):
            buffer.append(candidate)
            if len(buffer) >= self.config.chunk_size:
                self._flush(sink, buffer, progress, on_progress)

        if buffer:
            self._flush(sink, buffer, progress, on_progress)

        progress.finished = True
        if self.verbose:
            print(
                f"[assemble] Done: {progress.emitted} candidates, {progress.duplicates} duplicates skipped",
                file=sys.stderr,
            )
        return progress.emitted

    def _prepare(self, words) -> WordSet:
        words = WordSet.coerce(words)
        if not words:
            raise InvalidInputError("No words provided")
        self.config.validate()

        for warning in check_resources(words, self.config):
            if self.verbose:
                print(f"[assemble] Warning: {warning}", file=sys.stderr)
        return words

    def _generate(self, words: WordSet, progress: Optional[ProgressContext], cancel) -> Iterator[str]:
        config = self.config
        deduper = BoundedDeduper(capacity=config.dedup_capacity)
        variants = self.expander.expand_all(words)
        produced = 0

        max_words = config.effective_max_words(len(words))
        fitting = max_fitting_size([min(len(v) for v in group) for group in variants], config.max_len, max_words)
        if fitting < max_words and self.verbose:
            print(f"[assemble] Nothing of {fitting + 1}+ words fits in {config.max_len} characters", file=sys.stderr)

        for size in range(1, fitting + 1):
            if progress is not None:
                progress.combo_size = size
            if self.verbose:
                print(f"[assemble] Combining {size} word(s)", file=sys.stderr)

            for arrangement in itertools.permutations(range(len(words)), size):
                if cancel is not None and cancel.is_set():
                    if self.verbose:
                        print(f"[assemble] Cancelled after {produced} candidates", file=sys.stderr)
                    return

                groups = [variants[i] for i in arrangement]
                for base in _cartesian(groups, config.max_len):
                    for candidate in self._finish(base):
                        if deduper.check_or_add(candidate):
                            if progress is not None:
                                progress.duplicates += 1
                            continue

                        yield candidate
                        produced += 1
                        if config.limit and produced >= config.limit:
                            return

    def _finish(self, base: str) -> List[str]:
        if len(base) < self.config.min_len:
            return []
        if self.config.include_special_chars:
            return self.padder.pad(base, self.config.length_window)
        return [base]

    @staticmethod
    def _flush(
        sink: Sink,
        buffer: List[str],
        progress: ProgressContext,
        on_progress: Optional[ProgressCallback],
    ) -> None:
        try:
            sink(list(buffer))
        except Exception as exc:
            raise SinkError(f"Output sink rejected a batch of {len(buffer)}: {exc}", written=progress.emitted) from exc

        progress.emitted += len(buffer)
        buffer.clear()
        if on_progress is not None:
            on_progress(progress.emitted, progress.estimated_total, progress.combo_size)


def max_fitting_size(shortest: Sequence[int], max_len: int, max_words: int) -> int:
    # Largest word count whose shortest possible concatenation still fits
    size = 0
    length = 0
    for word_len in sorted(shortest)[:max_words]:
        length += word_len
        if length > max_len:
            break
        size += 1
    return size


def _cartesian(groups: Sequence[Sequence[str]], max_len: int) -> Iterator[str]:
    # Depth-first, one variant per group, pruned past max_len
    depth = len(groups)
    indices = [0] * depth
    prefixes = [""] * depth
    level = 0

    while level >= 0:
        if indices[level] >= len(groups[level]):
            indices[level] = 0
            level -= 1
            if level >= 0:
                indices[level] += 1
            continue

        current = (prefixes[level - 1] if level else "") + groups[level][indices[level]]
        if len(current) > max_len:
            indices[level] += 1
            continue

        if level == depth - 1:
            yield current
            indices[level] += 1
        else:
            prefixes[level] = current
            level += 1
