# wikifreq/locate.py
"""
Resolve the three input files, either from explicit paths or by searching a
directory for the usual dump file names:

    enwiki-20240601-pages-articles-multistream.xml.bz2          (dump)
    enwiki-20240601-pages-articles-multistream-index.txt.bz2    (derived from dump)
    enwiktionary-20240601-pages-articles-multistream-index.txt.bz2
"""

from __future__ import annotations

import os
import re
from typing import Optional, Tuple

from wikifreq.errors import ConfigError
from wikifreq.paths import DUMP_PATTERN, DUMP_SUFFIX, INDEX_SUFFIX, WIKTIONARY_INDEX_PATTERN


def find_file(directory: str, pattern: str) -> Optional[str]:
    """First file (by name) in `directory` whose name matches `pattern`, or None."""
    regex = re.compile(pattern)
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        raise ConfigError(f"can't list search directory {directory}: {e}") from e
    for name in names:
        if regex.fullmatch(name) and os.path.isfile(os.path.join(directory, name)):
            return os.path.join(directory, name)
    return None


def derive_index_path(dump_path: str) -> str:
    """xxx-multistream.xml.bz2 -> xxx-multistream-index.txt.bz2"""
    if not dump_path.endswith(DUMP_SUFFIX):
        raise ConfigError(f"can't determine index file path automatically from {dump_path}")
    return dump_path[: -len(DUMP_SUFFIX)] + INDEX_SUFFIX


def _require(path: str, what: str) -> str:
    if not os.path.isfile(path):
        raise ConfigError(f"{what} not found: {path}")
    return path


def resolve_inputs(dump: Optional[str] = None, index: Optional[str] = None,
                   windex: Optional[str] = None, search_dir: str = ".") -> Tuple[str, str, str]:
    """
    Returns (dump_path, index_path, wiktionary_index_path).
    Raises ConfigError if anything is missing.
    """
    if dump is None:
        dump = find_file(search_dir, DUMP_PATTERN)
        if dump is None:
            raise ConfigError(f"no dump file specified and no file found in {search_dir}")
    _require(dump, "dump file")

    if index is None:
        index = derive_index_path(dump)
    _require(index, "dump index file")

    if windex is None:
        windex = find_file(search_dir, WIKTIONARY_INDEX_PATTERN)
        if windex is None:
            raise ConfigError(f"no wiktionary index file specified and no file found in {search_dir}")
    _require(windex, "wiktionary index file")

    return dump, index, windex
