"""
wikifreq/extractor.py

Per-block word counting.

Parses a DumpBlock's wrapped XML, visits every <text> element (article
body), tokenizes it with parser.tokenize() and counts the words that are in
the vocabulary. The result is a fresh Counter owned by the caller.

An unparsable block aborts the run: it means the index and the dump
disagree about where streams start.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterator
from xml.etree import ElementTree as ET

from wikifreq import profkit
from wikifreq.blockio import DumpBlock
from wikifreq.errors import FormatError
from wikifreq.parser import tokenize

SNIPPET_CHARS = 200


def _is_text_tag(tag) -> bool:
    # pages inside a multistream block carry no namespace, but a full export does
    return isinstance(tag, str) and (tag == "text" or tag.endswith("}text"))


def parse_block(block: DumpBlock) -> ET.Element:
    with profkit.timeit("extract.parse_xml"):
        try:
            return ET.fromstring(block.raw_xml)
        except ET.ParseError as e:
            snippet = block.raw_xml[:SNIPPET_CHARS]
            raise FormatError("extract", f"failed to parse xml in {block!r}: {e}\n{snippet!r}") from e


def iter_body_texts(root: ET.Element) -> Iterator[str]:
    """Yield the text of every <text> element that has any."""
    for elem in root.iter():
        if _is_text_tag(elem.tag) and elem.text:
            yield elem.text


def count_block_words(block: DumpBlock, vocabulary: frozenset[str]) -> Counter:
    """
    Count vocabulary words over all article bodies in one block.
    Pure with respect to its inputs; safe to run on many threads at once.
    """
    root = parse_block(block)
    counts: Counter = Counter()
    for text in iter_body_texts(root):
        for word in tokenize(text):
            if word in vocabulary:
                counts[word] += 1
    profkit.tick("blocks")
    profkit.tick("articles", len(block.descriptors))
    return counts
