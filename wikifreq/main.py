# wikifreq/main.py
"""
English Wikipedia word frequency list generator.

Counts how often every word of the English Wiktionary appears in the
article bodies of an English Wikipedia multistream dump, and writes

    <word> <count>

lines, most frequent first.

How to use:
    python -m wikifreq.main                      # find files in the current dir
    python -m wikifreq.main -d enwiki-...-multistream.xml.bz2 \
        -w enwiktionary-...-multistream-index.txt.bz2 --workers 8 --processes
    python -m wikifreq.main --limit 100          # first 100 blocks only

Set PROFKIT=1 to print per-stage counters at the end.
"""

from __future__ import annotations

import argparse
import itertools
import sys
import time

from wikifreq import profkit
from wikifreq.aggregate import count_words_parallel
from wikifreq.blockio import ArticleBlockReader
from wikifreq.errors import WikiFreqError
from wikifreq.locate import resolve_inputs
from wikifreq.output import write_frequency_list
from wikifreq.paths import DEFAULT_WORKERS, OUTPUT_PATH, PROGRESS_EVERY
from wikifreq.vocabulary import load_vocabulary, sample_words


def run(dump_path: str, index_path: str, windex_path: str, output_path: str = OUTPUT_PATH, *,
        workers: int = DEFAULT_WORKERS, use_processes: bool = False, max_pending: int | None = None,
        limit: int | None = None, progress_every: int = PROGRESS_EVERY, verbose: bool = True) -> int:
    """Whole pipeline. Returns the number of lines written."""
    print(f"Files being used:\n\t{dump_path}\n\t{index_path}\n\t{windex_path}")

    start = time.perf_counter()
    vocabulary = load_vocabulary(windex_path)
    print(f"Read wiktionary index in {time.perf_counter() - start:.2f}s, found {len(vocabulary):,} items")
    print(f"A few words from the wordlist: {sample_words(vocabulary)}")

    start = time.perf_counter()
    with ArticleBlockReader(dump_path, index_path) as reader:
        blocks = reader if limit is None else itertools.islice(reader, limit)
        counts = count_words_parallel(
            blocks, vocabulary,
            workers=workers,
            use_processes=use_processes,
            max_pending=max_pending,
            progress_every=progress_every,
            verbose=verbose,
        )
    print(f"Counting words took {time.perf_counter() - start:.2f}s")

    start = time.perf_counter()
    n_lines = write_frequency_list(counts, output_path)
    print(f"Sorting and saving took {time.perf_counter() - start:.2f}s")

    profkit.report()
    print("All done")
    return n_lines


def non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Generates a frequency list from an English Wikipedia dump.")
    ap.add_argument("-d", "--dump", default=None, help="Multistream xml.bz2 dump file")
    ap.add_argument("-i", "--index", default=None,
                    help="Multistream dump index (default: derived from the dump, xxx-multistream-index.txt.bz2)")
    ap.add_argument("-w", "--windex", default=None, help="Wiktionary multistream index file")
    ap.add_argument("-o", "--output", default=OUTPUT_PATH, help="Output frequency list")
    ap.add_argument("--search-dir", default=".", help="Where to look for default input files")
    ap.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Pool size; default: os.cpu_count()")
    ap.add_argument("--processes", action="store_true", help="Use worker processes instead of threads")
    ap.add_argument("--max-pending", type=int, default=None, help="Max blocks in flight (default 4x workers)")
    ap.add_argument("--limit", type=non_negative_int, default=None, help="Only process the first N blocks")
    ap.add_argument("--progress-every", type=int, default=PROGRESS_EVERY, help="Progress line every N blocks")
    ap.add_argument("--quiet", action="store_true", help="Less logging.")
    args = ap.parse_args(argv)

    try:
        dump_path, index_path, windex_path = resolve_inputs(args.dump, args.index, args.windex, args.search_dir)
        run(
            dump_path, index_path, windex_path, args.output,
            workers=args.workers,
            use_processes=args.processes,
            max_pending=args.max_pending,
            limit=args.limit,
            progress_every=args.progress_every,
            verbose=not args.quiet,
        )
    except WikiFreqError as e:
        print(f"[FATAL] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    # keep the guard: process pools re-import this module on spawn platforms
    sys.exit(main())
