# wikifreq/aggregate.py
"""
Count vocabulary words over a whole dump in parallel.

Design:
- The calling thread is the producer: it pulls DumpBlocks from the
  (single-threaded) ArticleBlockReader and submits each one to a pool.
- Each worker runs extractor.count_block_words(block, vocabulary) and
  returns its own Counter. Workers never touch shared mutable state.
- The calling thread folds finished Counters into one total with
  merge_counts(). Summing is commutative and associative, so the result does
  not depend on worker count or completion order (the insertion order of the
  total does, so don't rely on it).
- At most `max_pending` blocks are in flight; when the window is full the
  producer waits for one to finish before reading the next block.

Threads or processes?
- Threads (default) share the vocabulary for free.
- Tokenization is regex-heavy and holds the GIL, so on many cores
  use_processes=True scales better. Each process gets the vocabulary once
  through the pool initializer; blocks are pickled over.

Any worker error cancels what is still queued and is re-raised here.
"""

from __future__ import annotations

import sys
import time
from collections import Counter
from concurrent.futures import (FIRST_COMPLETED, Future, ProcessPoolExecutor,
                                ThreadPoolExecutor, as_completed, wait)
from typing import Dict, Iterable, Optional, Set

from wikifreq.blockio import DumpBlock
from wikifreq.extractor import count_block_words
from wikifreq.paths import DEFAULT_WORKERS, PENDING_PER_WORKER, PROGRESS_EVERY


def merge_counts(acc: Counter, other: Dict[str, int]) -> Counter:
    """Add `other` into `acc` in place (union of keys, counts summed). Returns acc."""
    for word, n in other.items():
        acc[word] += n
    return acc


def reduce_counts(tables: Iterable[Dict[str, int]]) -> Counter:
    total: Counter = Counter()
    for t in tables:
        merge_counts(total, t)
    return total


# --------------------------
# process-pool worker side
# --------------------------

_WORKER_VOCAB: Optional[frozenset] = None


def _init_worker(vocabulary: frozenset):
    global _WORKER_VOCAB
    _WORKER_VOCAB = vocabulary


def _count_with_worker_vocab(block: DumpBlock) -> Counter:
    return count_block_words(block, _WORKER_VOCAB)


# --------------------------
# driver
# --------------------------

class _Progress:
    __slots__ = ("every", "verbose", "blocks", "articles", "t0")

    def __init__(self, every: int, verbose: bool):
        self.every = every
        self.verbose = verbose
        self.blocks = 0
        self.articles = 0
        self.t0 = time.perf_counter()

    def done(self, n_articles: int):
        self.blocks += 1
        self.articles += n_articles
        if self.verbose and self.every and self.blocks % self.every == 0:
            print(f"[Aggregate] blocks={self.blocks:,} articles={self.articles:,} "
                  f"elapsed={time.perf_counter() - self.t0:.1f}s", file=sys.stderr)


def count_words_parallel(
    blocks: Iterable[DumpBlock],
    vocabulary: frozenset[str],
    *,
    workers: int = DEFAULT_WORKERS,
    use_processes: bool = False,
    max_pending: int | None = None,
    progress_every: int = PROGRESS_EVERY,
    verbose: bool = True,
) -> Counter:
    """
    Fan blocks out over a pool, fold the per-block Counters into one.

    Args:
        blocks: iterable of DumpBlock (consumed on the calling thread only)
        vocabulary: words to count; read-only
        workers: pool size
        use_processes: ProcessPoolExecutor instead of ThreadPoolExecutor
        max_pending: max blocks in flight (default PENDING_PER_WORKER * workers)
        progress_every: print a progress line every N finished blocks
    Returns:
        Counter word -> total occurrences
    """
    workers = max(1, workers)
    if max_pending is None:
        max_pending = PENDING_PER_WORKER * workers
    max_pending = max(1, max_pending)

    if use_processes:
        executor = ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                                       initargs=(vocabulary,))
    else:
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wikifreq")

    total: Counter = Counter()
    progress = _Progress(progress_every, verbose)
    pending: Dict[Future, int] = {}  # future -> article count

    def collect(done: Set[Future]):
        for fut in done:
            n_articles = pending.pop(fut)
            merge_counts(total, fut.result())  # re-raises worker errors
            progress.done(n_articles)

    try:
        for block in blocks:
            if use_processes:
                fut = executor.submit(_count_with_worker_vocab, block)
            else:
                fut = executor.submit(count_block_words, block, vocabulary)
            pending[fut] = len(block.descriptors)
            if len(pending) >= max_pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                collect(done)

        for fut in as_completed(list(pending)):
            collect({fut})
    except BaseException:
        for fut in pending:
            fut.cancel()
        executor.shutdown(wait=True)
        raise
    executor.shutdown(wait=True)

    if verbose:
        print(f"[Aggregate] done | blocks={progress.blocks:,} articles={progress.articles:,} "
              f"distinct words={len(total):,}", file=sys.stderr)
    return total
