# wikifreq/profkit.py: ultra-light profiling helpers for the counting pipeline
# Toggle via env var: set PROFKIT=1 to enable; otherwise it's no-op with near-zero overhead.
# Safe to call from worker threads.

import os
import sys
import threading
import time
from collections import defaultdict
from contextlib import contextmanager

ENABLED = os.getenv("PROFKIT", "0") == "1"
COUNTERS = defaultdict(float)  # str -> float (counts / milliseconds)
_lock = threading.Lock()


def tick(name: str, n: float = 1.0):
    if ENABLED:
        with _lock:
            COUNTERS[name] += n


@contextmanager
def timeit(name: str):
    if not ENABLED:
        yield
        return
    t0 = time.perf_counter()
    try:
        yield
    finally:
        elapsed = (time.perf_counter() - t0) * 1000.0  # ms
        with _lock:
            COUNTERS[name] += elapsed


def report(file=sys.stderr):
    """Print collected counters, one per line. No-op when disabled."""
    if not ENABLED:
        return
    with _lock:
        items = sorted(COUNTERS.items())
    for name, value in items:
        print(f"[profkit] {name:<24} {value:,.1f}", file=file)
