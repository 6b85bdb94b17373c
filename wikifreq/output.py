# wikifreq/output.py

from __future__ import annotations

from typing import Dict, List, Tuple

from wikifreq.errors import StreamError


def sort_counts(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    """Most frequent first. Ties go alphabetically so reruns write identical files."""
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def write_frequency_list(counts: Dict[str, int], path: str) -> int:
    """
    Write '<word> <count>' lines, highest count first.
    Args:
        counts: dict[str, int]
        path: str, output file path
    Returns:
        number of lines written
    """
    try:
        f = open(path, "w", encoding="utf-8")
    except OSError as e:
        raise StreamError("output", f"failed to open output file {path}: {e}") from e
    i = 0
    with f:
        for i, (word, n) in enumerate(sort_counts(counts), start=1):
            try:
                f.write(f"{word} {n}\n")
            except OSError as e:
                raise StreamError("output", f"failed to write line {i} of {path}: {e}") from e
    print(f"[Output] Frequency list saved to {path}  lines={i:,}")
    return i


def load_frequency_list(path: str) -> List[Tuple[str, int]]:
    """
    Read a file written by write_frequency_list().
    Returns:
        list of (word, count) in file order
    """
    out = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word, n = line.rstrip("\n").split(" ")
            out.append((word, int(n)))
    return out
