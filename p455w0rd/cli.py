#!/usr/bin/env python3
import argparse
import os
import signal
import sys
import threading
from typing import Iterable, Optional

from p455w0rd.CombinationAssembler import CombinationAssembler, check_resources
from p455w0rd.CombinatorialCounter import (
    CombinatorialCounter,
    format_combination_count,
    format_file_size,
    format_total,
)
from p455w0rd.Errors import P455w0rdError
from p455w0rd.Models import WPA2_LENGTHS, CombinationConfig, CombinatorialAnalysis, LeetMode, ProgressContext, WordSet
from p455w0rd.OutputWriter import FileSink
from p455w0rd.StatusDisplay import StatusDisplay
from p455w0rd.VariantExpander import VariantExpander


def load_words(words: Iterable[str], input_file: Optional[str] = None) -> WordSet:
    collected = [w.strip() for w in words]

    if input_file:
        if not os.path.isfile(input_file):
            raise FileNotFoundError(f"Input file not found: {input_file}")
        with open(input_file, "r", encoding="utf-8", errors="ignore") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                # Lines may hold several comma-separated words
                collected.extend(part.strip() for part in line.split(","))

    return WordSet(w for w in collected if w)


def prompt_yes_no(question: str, default: bool = False) -> bool:
    hint = "[y/N]" if not default else "[Y/n]"
    raw = input(f"{question} {hint}: ").strip().lower()
    if raw in ("y", "yes"):
        return True
    if raw in ("n", "no"):
        return False
    return default


def build_config(args) -> CombinationConfig:
    min_len, max_len = WPA2_LENGTHS if args.wpa2 else (args.min_length, args.max_length)
    return CombinationConfig(
        max_words=args.max_words,
        min_len=min_len,
        max_len=max_len,
        include_special_chars=not args.no_special_chars,
        chunk_size=args.chunk_size,
        limit=args.limit,
        dedup_capacity=args.dedup_capacity,
        leet_mode=LeetMode.QUICK if args.quick_leet else LeetMode.FULL,
    )


def print_analysis(analysis: CombinatorialAnalysis, words: WordSet) -> None:
    breakdown = analysis.breakdown
    print("Combinatorial analysis:")
    print(f"  Words............: {len(words)}")
    print(f"  Permutations.....: {format_combination_count(breakdown.word_permutations)}")
    print(f"  Leet variants....: {format_combination_count(breakdown.leet_variants)}")
    print(f"  Case variants....: {breakdown.case_variants}")
    print(f"  Padding variants.: {breakdown.special_char_variants}")
    for entry in breakdown.by_word_count:
        print(
            f"  {entry.word_count} word(s)........: {format_combination_count(entry.combinations)}"
            f" (avg length {entry.average_length:.1f})"
        )
    print(f"  Total............: {format_total(analysis)}")
    print(f"  Estimated size...: {format_file_size(analysis.estimated_file_size_bytes)}")


def main():
    parser = argparse.ArgumentParser(
        description="Generate password candidates from seed words using leet, case and special-character mutations",
        epilog=(
            "Examples:\n"
            "  %(prog)s admin pass\n"
            "  %(prog)s --max-words 2 --limit 1000 -o out.txt admin pass\n"
            "  %(prog)s --wpa2 -i seeds.txt\n"
            "  cat seeds.txt | %(prog)s --force --quiet\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("words", help="Seed words (reads stdin if omitted and no --input)", nargs="*")

    parser.add_argument("-i", "--input", help="File with one word per line or comma-separated words")
    parser.add_argument("-o", "--output", help="Output file path", default="passwords.txt")
    parser.add_argument("-v", "--verbose", help="Enable verbose output", action="store_true")
    parser.add_argument("-w", "--workers", help="Number of parallel workers (default: all CPU cores)", type=int, default=0)
    parser.add_argument("--wpa2", help="Generate passwords for WPA2 (8-63 characters)", action="store_true")
    parser.add_argument("--min-length", help="Minimum password length", type=int, default=4)
    parser.add_argument("--max-length", help="Maximum password length", type=int, default=20)
    parser.add_argument("--limit", help="Maximum number of passwords to generate (0 = unlimited)", type=int, default=0)
    parser.add_argument("--chunk-size", help="Number of passwords to buffer before writing", type=int, default=100_000)
    parser.add_argument("--quiet", help="Disable the status display and analysis report", action="store_true")
    parser.add_argument("--append", help="Append to the output file instead of replacing it", action="store_true")
    parser.add_argument("--max-words", help="Maximum number of words to combine (0 = all)", type=int, default=0)
    parser.add_argument("--no-special-chars", help="Skip special character padding", action="store_true")
    parser.add_argument("--force", help="Skip the confirmation prompt for large jobs", action="store_true")
    parser.add_argument("--quick-leet", help="Only substitute one leetable character at a time", action="store_true")
    parser.add_argument("--dedup-capacity", help="Entries kept in the deduplication window", type=int, default=1_000_000)
    parser.add_argument("--confirm-threshold", help="Ask for confirmation above this many passwords", type=int, default=10_000_000)

    args = parser.parse_args()

    # Read from stdin if piped and no positional args given
    piped = not args.words and not args.input and not sys.stdin.isatty()
    if piped:
        args.words = [line.strip() for line in sys.stdin if line.strip()]

    try:
        words = load_words(args.words, args.input)
    except OSError as e:
        print(f"Error reading words: {e}", file=sys.stderr)
        sys.exit(1)

    if not words:
        print("No words provided. Use --input file or provide words as arguments.", file=sys.stderr)
        sys.exit(1)

    config = build_config(args)
    expander = VariantExpander(mode=config.leet_mode, verbose=args.verbose, workers=args.workers)

    if args.verbose:
        print(f"[main] Words           : {list(words)}", file=sys.stderr)
        print(f"[main] Length window   : {config.min_len}..{config.max_len}", file=sys.stderr)
        print(f"[main] Max words       : {config.effective_max_words(len(words))}", file=sys.stderr)
        print(f"[main] Special chars   : {config.include_special_chars}", file=sys.stderr)
        print(f"[main] Leet mode       : {config.leet_mode.value}", file=sys.stderr)
        print(f"[main] Workers         : {expander.workers}", file=sys.stderr)

    try:
        config.validate()
        for warning in check_resources(words, config):
            print(f"Warning: {warning}", file=sys.stderr)

        counter = CombinatorialCounter(expander=expander, verbose=args.verbose)
        analysis = counter.count(words, config)
    except P455w0rdError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.quiet:
        print(f"Processing {len(words)} words...")
        print_analysis(analysis, words)

    if analysis.total_combinations > args.confirm_threshold and not args.force:
        if piped or not sys.stdin.isatty():
            print("Large job and no terminal to confirm on; rerun with --force.", file=sys.stderr)
            sys.exit(1)
        if not prompt_yes_no(f"Generate {format_total(analysis)} passwords?"):
            print("Aborted.")
            sys.exit(0)

    estimated_total = analysis.total_combinations
    if analysis.saturated:
        estimated_total = counter.estimate(words, config)
    if config.limit:
        estimated_total = min(estimated_total, config.limit)

    progress = ProgressContext(estimated_total=estimated_total)
    display = None if args.quiet else StatusDisplay(progress, args.output, len(words))
    assembler = CombinationAssembler(config, expander=expander, verbose=args.verbose)

    # First Ctrl-C stops at the next arrangement and keeps the output
    cancel = threading.Event()

    def _on_interrupt(signum, frame):
        cancel.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    previous_handler = signal.signal(signal.SIGINT, _on_interrupt)

    try:
        with FileSink(args.output, append=args.append, verbose=args.verbose) as sink:
            count = assembler.assemble(words, sink, progress=progress, on_progress=display, cancel=cancel)
    except P455w0rdError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if display is not None:
        display.draw()
    if cancel.is_set():
        print("Stopped early on request.")
    print(f"Generated {count} passwords to {args.output}")


if __name__ == "__main__":
    main()
