from typing import Optional, List, Any
from dataclasses import dataclass
import re
from pericope.books import find_by_name, bookaliases
from pericope.reference import RefRange, Environment, defaultenv
from pericope.versification import DEFAULT_VERSIFICATION
from pericope.errors import PericopeError, ParseError, InvalidBookError, InvalidChapterError, InvalidVerseError
import logging

logger = logging.getLogger(__name__)

_scanre = re.compile(r"\b([A-Z]{3}|[1-3][A-Z]{2})\s+([0-9:,-]+)", flags=re.I)
_rangetok = re.compile(r"^[\d:,\-]+$")
_cvre = re.compile(r"^(\d+)(?::(\d+))?$")


@dataclass(frozen=True)
class Result:
    """ The outcome of trying to build a reference: a value or the error """
    value: Any = None
    error: Optional[PericopeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _splitref(s):
    """ The ranges are the trailing words made of digits and punctuation that
        follow a word with a letter in it; the book is everything before """
    words = s.split()
    if " ".join(words).lower() in bookaliases:
        return (" ".join(words), "1:1")
    k = len(words)
    while k > 0 and _rangetok.match(words[k-1]):
        k -= 1
    named = next((i for i, w in enumerate(words) if any(c.isalpha() for c in w)), len(words))
    for i in range(max(k, named + 1), len(words)):
        if words[i][0].isdigit():
            return (" ".join(words[:i]), " ".join(words[i:]))
    return (words[0], " ".join(words[1:]) if len(words) > 1 else "1:1")

def parse_reference(text, versification: str = DEFAULT_VERSIFICATION) -> dict:
    """ Parses "Book ranges" into {"book": Book, "ranges": [RefRange, ...]}.
        A missing range part means 1:1. Raises ParseError, InvalidBookError,
        InvalidChapterError or InvalidVerseError. """
    if not isinstance(text, str) or not text.strip():
        raise ParseError(text, "empty reference")
    bookpart, rangepart = _splitref(text.strip())
    book = find_by_name(bookpart)
    if book is None:
        raise InvalidBookError(bookpart)
    ranges = []
    for sc, sv, ec, ev in parse_ranges(rangepart, text):
        if not book.valid_chapter(sc, versification):
            raise InvalidChapterError(book.code, sc)
        if not book.valid_chapter(ec, versification):
            raise InvalidChapterError(book.code, ec)
        if not book.valid_verse(sc, sv, versification):
            raise InvalidVerseError(book.code, sc, sv)
        if not book.valid_verse(ec, ev, versification):
            raise InvalidVerseError(book.code, ec, ev)
        if (ec, ev) < (sc, sv):
            raise ParseError(text, f"{ec}:{ev} is before {sc}:{sv}")
        ranges.append(RefRange.fromChapters(book, sc, sv, ec, ev, versification=versification))
    return {"book": book, "ranges": ranges}

def _parsecv(s, chapter, text):
    """ C:V, or a bare number: a verse in chapter if there is one else chapter N verse 1 """
    if not (m := _cvre.match(s)):
        raise ParseError(text, f"bad verse reference '{s}'")
    if m.group(2) is not None:
        return (int(m.group(1)), int(m.group(2)))
    elif chapter is not None:
        return (chapter, int(m.group(1)))
    return (int(m.group(1)), 1)

def parse_ranges(s: str, text: Optional[str] = None) -> List[tuple]:
    """ Parses comma separated ranges into (startchap, startverse, endchap, endverse)
        tuples. A bare number after the first range is a verse in the chapter the
        previous range started in. """
    if text is None:
        text = s
    parts = [p.strip() for p in s.split(",")]
    while len(parts) > 1 and not parts[-1]:
        parts.pop()
    res = []
    chapter = None
    for p in parts:
        if not p:
            raise ParseError(text, "empty range")
        if "-" in p:
            start, end = [x.strip() for x in p.split("-", 1)]
            sc, sv = _parsecv(start, chapter, text)
            if ":" in end:
                ec, ev = _parsecv(end, sc, text)
            elif end.isdigit():
                ec, ev = sc, int(end)
            else:
                raise ParseError(text, f"bad range end '{end}'")
        else:
            sc, sv = _parsecv(p, chapter, text)
            ec, ev = sc, sv
        res.append((sc, sv, ec, ev))
        chapter = sc
    return res

def format_pericope(pericope, fmt: Optional[str] = None, env: Optional[Environment] = None) -> str:
    """ Renders CODE ranges, or Name ranges for the full_name format """
    if not len(pericope.ranges):
        return ""
    if env is None:
        env = defaultenv
    ranges = env.versesep.join(r.str(env=env, nobook=True) for r in pericope.ranges)
    if env.nobook:
        return ranges
    return env.localbook(pericope.book, fmt) + env.bookspace + ranges

def try_reference(text, versification: str = DEFAULT_VERSIFICATION) -> Result:
    from pericope.pericope import Pericope
    try:
        return Result(value=Pericope(text, versification=versification))
    except PericopeError as e:
        return Result(error=e)

def scan(text: str, versification: str = DEFAULT_VERSIFICATION) -> list:
    """ Finds every reference like GEN 1:1-3 in running text. References that
        do not resolve are skipped. """
    res = []
    if not text:
        return res
    for m in _scanre.finditer(text):
        rtext = m.group(2).rstrip(",-:")
        if not rtext:
            continue
        r = try_reference(f"{m.group(1)} {rtext}", versification)
        if r.ok:
            res.append(r.value)
        else:
            logger.debug(f"scan skipping {m.group(0)!r}: {r.error}")
    return res

def split(text: str, versification: str = DEFAULT_VERSIFICATION) -> List[str]:
    """ Prose is never split around references, so this is always [text] """
    return [text]
