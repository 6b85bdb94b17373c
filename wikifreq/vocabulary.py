"""
wikifreq/vocabulary.py

Loads the reference vocabulary from a bz2-compressed wiktionary
multistream index. Each line looks like

    <offset>:<page id>:<page title>

and only titles made purely of ASCII letters become vocabulary words
(lowercased). Namespaced titles ("Wiktionary:Foo"), phrases, digits and
accented forms are dropped.

The loaded vocabulary is a frozenset: built once, shared read-only by all
workers.
"""

from __future__ import annotations

import bz2
from typing import Iterable, Optional

from wikifreq.errors import FormatError, StreamError


def vocabulary_word(line: str, lineno: int) -> Optional[str]:
    """
    Extract the vocabulary word from one index line.
    Returns None if the title is not purely ASCII alphabetic.
    Raises FormatError if the line has fewer than two ':'.
    """
    parts = line.split(":", 2)
    if len(parts) != 3:
        raise FormatError("vocabulary", f"can't find 2nd ':' in wiktionary index line {lineno}")
    title = parts[2]
    if title and title.isascii() and title.isalpha():
        return title.lower()
    return None


def iter_vocabulary(lines: Iterable[str]):
    """Yield vocabulary words from raw index lines, skipping empty lines."""
    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        word = vocabulary_word(line, lineno)
        if word is not None:
            yield word


def load_vocabulary(path: str) -> frozenset[str]:
    try:
        with bz2.open(path, "rt", encoding="utf-8") as f:
            words = frozenset(iter_vocabulary(f))
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise StreamError("vocabulary", f"failed to read wiktionary index {path}: {e}") from e
    return words


def sample_words(words: Iterable[str], max_len: int = 5, n: int = 10) -> list[str]:
    """A few short words for the startup summary."""
    out = []
    for w in words:
        if len(w) <= max_len:
            out.append(w)
            if len(out) >= n:
                break
    return out
