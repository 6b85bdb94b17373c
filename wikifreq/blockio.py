# wikifreq/blockio.py
"""
Random-access reading of a Wikipedia *multistream* dump.

The dump (xxx-pages-articles-multistream.xml.bz2) is a concatenation of
independent bz2 streams, each holding ~100 <page> records. The companion
index (xxx-multistream-index.txt.bz2) has one line per article:

    <byte offset of the stream>:<article id>:<article title>

Consecutive lines with the same offset live in the same stream, so we group
them, seek the dump to that offset and decompress exactly one stream.

The decompressed bytes are a run of sibling <page> elements, not a document,
so the text is wrapped in a synthetic root element before it is handed out:

    <dummyroot><page>...</page><page>...</page></dummyroot>

ArticleBlockReader is a single-pass, stateful iterator. It owns the dump
file handle and the index stream; drive it from one thread only.
"""

from __future__ import annotations

import bz2
from typing import Iterator, List, Optional

from wikifreq import profkit
from wikifreq.errors import DesyncError, FormatError, StreamError
from wikifreq.paths import MAX_DESCRIPTORS_PER_BLOCK, READ_CHUNK_SIZE, WRAPPER_TAG


class ArticleDescriptor:
    """One index line: where an article's stream starts, its id and title."""
    __slots__ = ("offset", "id", "title")

    def __init__(self, offset: int, article_id: int, title: str):
        self.offset = offset
        self.id = article_id
        self.title = title

    @classmethod
    def from_index_line(cls, line: str, lineno: int = 0) -> "ArticleDescriptor":
        """
        Parse '<offset>:<id>:<title>'. The title may itself contain ':'.
        Raises FormatError naming the line number on anything else.
        """
        parts = line.strip().split(":", 2)
        if len(parts) != 3:
            raise FormatError("index", f"index line {lineno} is not <offset>:<id>:<title>: {line!r}")
        offset_str, id_str, title = parts
        try:
            offset = int(offset_str)
        except ValueError as e:
            raise FormatError("index", f"offset parse failed on index line {lineno}: {offset_str!r}") from e
        try:
            article_id = int(id_str)
        except ValueError as e:
            raise FormatError("index", f"id parse failed on index line {lineno}: {id_str!r}") from e
        if offset < 0 or article_id < 0:
            raise FormatError("index", f"negative offset or id on index line {lineno}: {line.strip()!r}")
        return cls(offset, article_id, title)

    def __eq__(self, other):
        if not isinstance(other, ArticleDescriptor):
            return NotImplemented
        return (self.offset, self.id, self.title) == (other.offset, other.id, other.title)

    def __repr__(self):
        return f"ArticleDescriptor(offset={self.offset}, id={self.id}, title={self.title!r})"


class DumpBlock:
    """
    One decompressed stream plus the descriptors of the articles inside it.
    raw_xml is already wrapped in the synthetic root element.
    """
    __slots__ = ("descriptors", "raw_xml")

    def __init__(self, descriptors: List[ArticleDescriptor], raw_xml: str):
        self.descriptors = descriptors
        self.raw_xml = raw_xml

    @property
    def offset(self) -> int:
        return self.descriptors[0].offset

    def __repr__(self):
        first, last = self.descriptors[0], self.descriptors[-1]
        return (f"DumpBlock({first.title}-{last.title} ({first.id}-{last.id}), "
                f"{len(self.descriptors)} descriptors, {len(self.raw_xml)} bytes in xml)")


def wrap_fragment(text: str) -> str:
    return f"<{WRAPPER_TAG}>{text}</{WRAPPER_TAG}>"


class ArticleBlockReader:
    """
    Iterate DumpBlocks from a (dump, index) pair.

    Each __next__:
      - takes the look-ahead descriptor left over from the previous call (if any)
      - keeps reading index lines while the offset stays the same
      - stops at the first line with a different offset and buffers it
      - seeks the dump, decompresses one bz2 stream, wraps it

    Ends cleanly when the index is exhausted. Every error is fatal.
    """
    __slots__ = ("dump_path", "index_path", "max_descriptors", "dump", "index",
                 "_pending", "_lineno")

    def __init__(self, dump_path: str, index_path: str,
                 max_descriptors: int = MAX_DESCRIPTORS_PER_BLOCK):
        self.dump_path = dump_path
        self.index_path = index_path
        self.max_descriptors = max_descriptors
        try:
            self.dump = open(dump_path, "rb")
        except OSError as e:
            raise StreamError("decompress", f"unable to open dump file {dump_path}: {e}") from e
        try:
            self.index = bz2.open(index_path, "rt", encoding="utf-8")
        except OSError as e:
            self.dump.close()
            raise StreamError("index", f"unable to open index file {index_path}: {e}") from e
        self._pending: Optional[ArticleDescriptor] = None
        self._lineno = 0

    def __iter__(self) -> Iterator[DumpBlock]:
        return self

    def __next__(self) -> DumpBlock:
        descriptors = self._next_group()
        if not descriptors:
            raise StopIteration
        raw = self._read_stream(descriptors[0].offset)
        return DumpBlock(descriptors, wrap_fragment(raw))

    # --- index side ---

    def _readline(self) -> str:
        try:
            line = self.index.readline()
        except (OSError, EOFError, UnicodeDecodeError) as e:
            raise StreamError("index", f"error reading index line {self._lineno + 1}: {e}") from e
        if line:
            self._lineno += 1
        return line

    def _next_group(self) -> List[ArticleDescriptor]:
        descriptors: List[ArticleDescriptor] = []
        if self._pending is not None:
            descriptors.append(self._pending)
            self._pending = None

        while True:
            line = self._readline()
            if not line:
                break  # EOF
            desc = ArticleDescriptor.from_index_line(line, self._lineno)
            if descriptors and desc.offset != descriptors[-1].offset:
                self._pending = desc
                break
            descriptors.append(desc)
            if len(descriptors) > self.max_descriptors:
                raise DesyncError(
                    f"more than {self.max_descriptors} descriptors at offset {desc.offset} "
                    f"(index line {self._lineno}); index and dump are out of sync"
                )
        return descriptors

    # --- dump side ---

    def _read_stream(self, offset: int) -> str:
        """Decompress exactly one bz2 stream starting at `offset`."""
        with profkit.timeit("read.decompress"):
            try:
                self.dump.seek(offset)
                dec = bz2.BZ2Decompressor()
                chunks = []
                while not dec.eof:
                    data = self.dump.read(READ_CHUNK_SIZE)
                    if not data:
                        raise StreamError("decompress", f"dump ended inside the bz2 stream at offset {offset}")
                    chunks.append(dec.decompress(data))
            except (OSError, EOFError, ValueError) as e:
                raise StreamError("decompress", f"dump file bzip decode failed at offset {offset}: {e}") from e
        try:
            return b"".join(chunks).decode("utf-8")
        except UnicodeDecodeError as e:
            raise StreamError("decompress", f"stream at offset {offset} is not valid utf-8: {e}") from e

    def close(self):
        try:
            self.index.close()
        finally:
            self.dump.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
