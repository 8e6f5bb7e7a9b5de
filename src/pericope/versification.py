import re, os
from dataclasses import dataclass
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)

DEFAULT_VERSIFICATION = "english"

_recode = re.compile(r"^[0-9A-Z][A-Z0-9]{2}$")
_rescheme = re.compile(r"^\w+$")

versifications = {}

def cached_versification(fname):
    """ Returns the Versification for a scheme name, looked up as a .vrs file
        next to this module. Anything else, paths included, gives None; load
        other files with Versification(path). """
    if not isinstance(fname, str) or not _rescheme.match(fname):
        return None
    if fname not in versifications:
        fpath = os.path.join(os.path.dirname(__file__), fname + ".vrs")
        if os.path.exists(fpath):
            versifications[fname] = Versification(fpath)
    return versifications.get(fname, None)


@dataclass(frozen=True)
class ChapterInfo:
    book_code: str
    chapter: int
    verse_count: int


class Versification:

    def __init__(self, fname=None):
        self.vcounts = {}       # list of verse counts per chapter keyed by book
        self.name = None
        if fname is not None:
            self.readFile(fname)

    def __getitem__(self, bk):
        return self.vcounts.get(bk, None)

    def __contains__(self, bk):
        return bk in self.vcounts

    def __iter__(self):
        return iter(self.vcounts)

    def __len__(self):
        return len(self.vcounts)

    def readFile(self, fname):
        logger.debug(f"versification readFile({fname})")
        with open(fname, encoding="utf-8") as inf:
            srcdat = inf.read()
        for li in srcdat.splitlines():
            l = li.strip()
            if self.name is None and (m := re.match(r'^#\s+versification\s*"(.*?)"', l, flags=re.I)):
                self.name = m.group(1)
                continue
            l = re.sub(r"#!\s*", "", l)     # remove the magic #!
            l = re.sub(r"\s*#.*$", "", l)   # strip comments
            if not l:
                continue
            if "=" in l or l[0] in "-*&":   # mappings, exclusions and segments don't affect the counts
                continue
            b = l.split()
            if not _recode.match(b[0]):
                continue
            try:
                verses = [int(x.split(':')[1]) for x in b[1:]]
            except (IndexError, ValueError):
                raise SyntaxError(f"Badly formed verse counts for {b[0]} in {fname}")
            self.vcounts[b[0]] = verses
        logger.debug(f"versification {self.name} has {len(self.vcounts)} books")

    def verse_count(self, bk, chap) -> Optional[int]:
        vbk = self[bk]
        if vbk is None or isinstance(chap, bool) or not isinstance(chap, int):
            return None
        if chap < 1 or chap > len(vbk):
            return None
        return vbk[chap-1]

    def total_verses(self, bk) -> Optional[int]:
        vbk = self[bk]
        return sum(vbk) if vbk is not None else None


def _lookup(book_code, scheme):
    if not isinstance(book_code, str):
        return (None, None)
    return (cached_versification(scheme), book_code.upper())

def verse_count(book_code, chapter, scheme=DEFAULT_VERSIFICATION) -> Optional[int]:
    vrs, bk = _lookup(book_code, scheme)
    if vrs is None:
        return None
    return vrs.verse_count(bk, chapter)

def total_verses(book_code, scheme=DEFAULT_VERSIFICATION) -> Optional[int]:
    vrs, bk = _lookup(book_code, scheme)
    if vrs is None:
        return None
    return vrs.total_verses(bk)

def chapter_count(book_code, scheme=DEFAULT_VERSIFICATION) -> Optional[int]:
    vrs, bk = _lookup(book_code, scheme)
    if vrs is None or vrs[bk] is None:
        return None
    return len(vrs[bk])

def valid_chapter(book_code, chapter, scheme=DEFAULT_VERSIFICATION) -> bool:
    return verse_count(book_code, chapter, scheme) is not None

def valid_verse(book_code, chapter, verse, scheme=DEFAULT_VERSIFICATION) -> bool:
    maxvrs = verse_count(book_code, chapter, scheme)
    if maxvrs is None or isinstance(verse, bool) or not isinstance(verse, int):
        return False
    return 0 < verse <= maxvrs

def chapter_info(book_code, chapter, scheme=DEFAULT_VERSIFICATION) -> Optional[ChapterInfo]:
    count = verse_count(book_code, chapter, scheme)
    if count is None:
        return None
    return ChapterInfo(book_code.upper(), chapter, count)

def book_chapters(book_code, scheme=DEFAULT_VERSIFICATION) -> List[ChapterInfo]:
    vrs, bk = _lookup(book_code, scheme)
    if vrs is None or vrs[bk] is None:
        return []
    return [ChapterInfo(bk, i+1, v) for i, v in enumerate(vrs[bk])]

def all_chapters(scheme=DEFAULT_VERSIFICATION) -> List[ChapterInfo]:
    vrs = cached_versification(scheme)
    if vrs is None:
        return []
    return [c for bk in vrs for c in book_chapters(bk, scheme)]

def book_codes(scheme=DEFAULT_VERSIFICATION) -> List[str]:
    vrs = cached_versification(scheme)
    return list(vrs) if vrs is not None else []
