"""
wikifreq/parser.py

Markup-aware tokenizer for raw wikitext (the body of a <text> element).

What it does:
- Repairs mojibake (ftfy) and nothing else: curly quotes, full-width
  letters and ligatures are left alone, so "don’t" -> don, t
- Strips HTML-style tags (<ref>, <br/>, <span ...>), keeping only the text
- Scans left to right with a cursor; at each position, in order:
    1. skip a template {{...}}, a link [...], a table opener {|,
       a #REDIRECT marker or a URL, emitting nothing
    2. take a word: word chars joined by single '.', '-' or "'"
       (U.S.A, e-mail, dog's), keep its ASCII letters, lowercase
    3. stop at a "See also" / "External links" heading
    4. otherwise step over one character
- dog-dog's -> dogdogs    COVID-19 -> covid    1999 -> (nothing)

Templates and links use shortest matches, so nested templates leak their
tail: "{{a|{{b}} c}}" skips "{{a|{{b}}" and then reads " c}}".

All patterns are compiled once at import and shared by every worker thread;
matching has no side effects.
"""

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from ftfy import fix_text

from wikifreq import profkit

# Wikitext with no tags at all (or a lone URL) makes bs4 think we passed a filename/URL.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

URL_PATTERN = (
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)

SKIP_PATTERNS = [
    r"\{\{.+?\}\}",    # template
    r"\[.+?\]",        # link (internal [[...]] keeps its trailing ']')
    r"\{\|",           # table opener
    r"#REDIRECT",
    URL_PATTERN,
]

SKIP_RE = re.compile("|".join(f"(?:{p})" for p in SKIP_PATTERNS), re.DOTALL | re.IGNORECASE)
WORD_RE = re.compile(r"\w+(?:[.'-]\w+)*")
END_SECTION_RE = re.compile(r"=+\W*(?:See Also|External Links)\W*=+", re.IGNORECASE)
NON_ALPHA_RE = re.compile(r"[^A-Za-z]+")

# mojibake repair only; quote, width and ligature rewrites would change which words match
FTFY_OPTIONS = dict(
    uncurl_quotes=False,
    fix_character_width=False,
    fix_latin_ligatures=False,
    unescape_html=False,
)


def normalize_word(raw: str) -> str:
    """Keep ASCII letters only, lowercased. May return ''."""
    return NON_ALPHA_RE.sub("", raw).lower()


def strip_html(text: str) -> str:
    """
    Drop HTML-style tags, keep text nodes.
    Each text node is trimmed, empty ones dropped, the rest joined by one space.
    """
    soup = BeautifulSoup(text, "html.parser")
    return " ".join(soup.stripped_strings)


def scan_words(text: str) -> list[str]:
    """
    Cursor scan over tag-free wikitext. See the module docstring for the rule order.
    Always terminates: every branch moves the cursor forward or stops.
    """
    words = []
    pos, end = 0, len(text)
    while pos < end:
        m = SKIP_RE.match(text, pos)
        if m:
            pos = m.end()
            continue

        m = WORD_RE.match(text, pos)
        if m:
            word = normalize_word(m.group())
            if word:
                words.append(word)
            pos = m.end()
            continue

        if END_SECTION_RE.match(text, pos):
            break

        pos += 1
    return words


def tokenize(text: str) -> list[str]:
    """Raw wikitext -> normalized words. Pure; same input, same output."""
    if not text:
        return []
    with profkit.timeit("tokenize.clean"):
        clean = strip_html(fix_text(text, **FTFY_OPTIONS))
    with profkit.timeit("tokenize.scan"):
        return scan_words(clean)
