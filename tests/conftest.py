# tests/conftest.py
"""
Helpers that build real bz2 multistream dumps + indexes on disk.

A dump is a concatenation of independent bz2 streams. Each stream holds a
few <page> elements; the index lists every page with its stream's byte offset.
"""

import bz2
from xml.sax.saxutils import escape

import pytest


def page_xml(page_id, title, body):
    return (
        "  <page>\n"
        f"    <title>{escape(title)}</title>\n"
        "    <ns>0</ns>\n"
        f"    <id>{page_id}</id>\n"
        "    <revision>\n"
        f"      <id>{page_id * 10}</id>\n"
        f"      <text bytes=\"{len(body)}\" xml:space=\"preserve\">{escape(body)}</text>\n"
        "    </revision>\n"
        "  </page>\n"
    )


def write_multistream(dump_path, index_path, groups, header="<mediawiki>\n  <siteinfo/>\n"):
    """
    groups: list of streams, each a list of (page_id, title, body).
    Writes a header stream, one stream per group, and a footer stream
    (like the real dumps). Returns the byte offset of each group's stream.
    """
    offsets = []
    index_lines = []
    with open(dump_path, "wb") as f:
        f.write(bz2.compress(header.encode("utf-8")))
        for group in groups:
            offset = f.tell()
            offsets.append(offset)
            xml = "".join(page_xml(pid, title, body) for pid, title, body in group)
            f.write(bz2.compress(xml.encode("utf-8")))
            for pid, title, _ in group:
                index_lines.append(f"{offset}:{pid}:{title}\n")
        f.write(bz2.compress(b"</mediawiki>\n"))
    write_bz2_lines(index_path, index_lines)
    return offsets


def write_bz2_lines(path, lines):
    with bz2.open(path, "wt", encoding="utf-8") as f:
        for line in lines:
            f.write(line if line.endswith("\n") else line + "\n")


@pytest.fixture
def make_dump(tmp_path):
    """make_dump(groups) -> (dump_path, index_path, offsets)"""
    def _make(groups, name="enwiki-20240101-pages-articles-multistream"):
        dump_path = tmp_path / f"{name}.xml.bz2"
        index_path = tmp_path / f"{name}-index.txt.bz2"
        offsets = write_multistream(dump_path, index_path, groups)
        return str(dump_path), str(index_path), offsets
    return _make


@pytest.fixture
def make_windex(tmp_path):
    """make_windex(titles) -> path of a bz2 wiktionary index listing those titles"""
    def _make(titles, name="enwiktionary-20240101-pages-articles-multistream-index.txt.bz2"):
        path = tmp_path / name
        write_bz2_lines(path, [f"{600 + i}:{i + 1}:{t}" for i, t in enumerate(titles)])
        return str(path)
    return _make
