from typing import Optional, List, Union, Iterator
import re
from pericope.books import Book, resolve_book, find_by_name, find_by_number
from pericope.versification import DEFAULT_VERSIFICATION
from pericope.errors import PericopeError, ParseError, InvalidBookError, InvalidChapterError, InvalidVerseError
import pericope.versification as vrs

BookRef = Union[Book, str]

_reverse = re.compile(r"^\s*(.+?)\s+(\d+)[:.](\d+)\s*$")


class Environment:
    """ Rendering configuration for references """
    versesep: str = ","
    cvsep: str = ":"            # after chap before verse
    bookspace: str = " "        # after the book
    rangemk: str = "-"
    nobook: bool = False
    format: str = "canonical"   # canonical, abbreviated or full_name
    __allfields__ = "versesep cvsep bookspace rangemk nobook format".split()

    def __init__(self, **kw):
        for k, v in kw.items():
            if k not in self.__allfields__:
                raise AttributeError(f"Unknown environment setting {k}")
            setattr(self, k, v)

    def localbook(self, book: Book, fmt: Optional[str] = None) -> str:
        if (fmt or self.format) == "full_name":
            return book.name
        return book.code

    def localchapter(self, c: int) -> str:
        return str(c)

    def localverse(self, v: int) -> str:
        return str(v)

    def copy(self, **kw):
        res = self.__class__()
        for a in self.__allfields__:
            setattr(res, a, kw[a] if a in kw else getattr(self, a))
        return res

defaultenv = Environment()


def _asint(v, what):
    if isinstance(v, bool):
        raise ParseError(str(v), f"{what} is not a number")
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ParseError(str(v), f"{what} is not a number")


class VerseRef:
    """ A single verse, ordered by book, chapter then verse. Construction
        validates the chapter and verse against the versification. """

    def __init__(self, book: BookRef, chapter, verse, versification: str = DEFAULT_VERSIFICATION):
        self.book = resolve_book(book)
        self.chapter = _asint(chapter, "chapter")
        self.verse = _asint(verse, "verse")
        self.versification = versification
        if self.chapter <= 0:
            raise InvalidChapterError(self.book.code, self.chapter)
        if self.verse <= 0:
            raise InvalidVerseError(self.book.code, self.chapter, self.verse)
        maxvrs = self.book.verse_count(self.chapter, versification)
        if maxvrs is None:
            raise InvalidChapterError(self.book.code, self.chapter)
        if self.verse > maxvrs:
            raise InvalidVerseError(self.book.code, self.chapter, self.verse)

    @classmethod
    def fromBCV(cls, bcv: int, versification: str = DEFAULT_VERSIFICATION) -> Optional["VerseRef"]:
        """ Parses an int BBCCCVVV into a reference """
        b = bcv // 1000000
        c = (bcv // 1000) % 1000
        v = bcv % 1000
        book = find_by_number(b)
        if book is None:
            return None
        try:
            return cls(book, c, v, versification=versification)
        except PericopeError:
            return None

    @classmethod
    def fromString(cls, s: str, versification: str = DEFAULT_VERSIFICATION) -> "VerseRef":
        """ Parses a single verse like GEN 1:1 or Genesis 1.1 """
        if s is None or not (m := _reverse.match(s)):
            raise ParseError(s, "expected book chapter:verse")
        book = find_by_name(m.group(1))
        if book is None:
            raise InvalidBookError(m.group(1))
        return cls(book, int(m.group(2)), int(m.group(3)), versification=versification)

    def __str__(self):
        return self.str()

    def __repr__(self):
        return "VerseRef('"+self.str()+"')"

    def str(self, env: Optional[Environment] = None, fmt: Optional[str] = None, nobook: Optional[bool] = None) -> str:
        if env is None:
            env = defaultenv
        res = []
        if not (env.nobook if nobook is None else nobook):
            res.append(env.localbook(self.book, fmt))
            res.append(env.bookspace)
        res.append(env.localchapter(self.chapter))
        res.append(env.cvsep)
        res.append(env.localverse(self.verse))
        return "".join(res)

    def _key(self):
        return (self.book.number, self.chapter, self.verse)

    def __eq__(self, o):
        if not isinstance(o, VerseRef):
            return False
        return self._key() == o._key()

    def __lt__(self, o):
        if not isinstance(o, VerseRef):
            return NotImplemented
        return self._key() < o._key()

    def __le__(self, o):
        if not isinstance(o, VerseRef):
            return NotImplemented
        return self._key() <= o._key()

    def __gt__(self, o):
        if not isinstance(o, VerseRef):
            return NotImplemented
        return self._key() > o._key()

    def __ge__(self, o):
        if not isinstance(o, VerseRef):
            return NotImplemented
        return self._key() >= o._key()

    def __hash__(self):
        return hash((self.book.code, self.chapter, self.verse))

    def __int__(self):
        return self.bcv()

    def isbefore(self, o):
        return self < o

    def isafter(self, o):
        return self > o

    def bcv(self) -> int:
        """ Returns an integer BBCCCVVV """
        return self.book.number * 1000000 + self.chapter * 1000 + self.verse

    @property
    def first(self):
        return self

    @property
    def last(self):
        return self

    def copy(self, **kws):
        kw = {'book': self.book, 'chapter': self.chapter, 'verse': self.verse,
              'versification': self.versification}
        kw.update(kws)
        return self.__class__(**kw)

    def maxverse(self, chapter: Optional[int] = None) -> Optional[int]:
        """ Returns the number of verses in the chapter (default ours) """
        return self.book.verse_count(self.chapter if chapter is None else chapter, self.versification)

    def maxchapter(self) -> int:
        return vrs.chapter_count(self.book.code, self.versification) or 0

    def isvalid(self) -> bool:
        """ Returns whether the reference is still valid in its versification """
        if not isinstance(self.book, Book) or not self.book.isvalid():
            return False
        if not isinstance(self.chapter, int) or not isinstance(self.verse, int):
            return False
        return vrs.valid_verse(self.book.code, self.chapter, self.verse, self.versification)

    def successor(self) -> Optional["VerseRef"]:
        """ The following verse, or None at the end of the book """
        if self.verse < self.maxverse():
            return self.copy(verse=self.verse + 1)
        elif self.chapter < self.maxchapter():
            return self.copy(chapter=self.chapter + 1, verse=1)
        return None

    def predecessor(self) -> Optional["VerseRef"]:
        """ The preceding verse, or None at the start of the book """
        if self.verse > 1:
            return self.copy(verse=self.verse - 1)
        elif self.chapter > 1:
            return self.copy(chapter=self.chapter - 1, verse=self.maxverse(self.chapter - 1))
        return None

    def advance(self, n: int) -> Optional["VerseRef"]:
        """ Moves n verses forward (back if negative), crossing chapters.
            Returns None if that would leave the book. """
        r = self
        step = VerseRef.successor if n >= 0 else VerseRef.predecessor
        for i in range(abs(n)):
            r = step(r)
            if r is None:
                return None
        return r


class RefRange:
    """ A contiguous run of verses within one book """

    @classmethod
    def fromRef(cls, r: VerseRef) -> "RefRange":
        return cls(r, r)

    @classmethod
    def fromChapters(cls, book: BookRef, startchap, startverse, endchap, endverse,
                     versification: str = DEFAULT_VERSIFICATION) -> "RefRange":
        book = resolve_book(book)
        return cls(VerseRef(book, startchap, startverse, versification),
                   VerseRef(book, endchap, endverse, versification))

    def __init__(self, first: VerseRef, last: VerseRef):
        if first.book != last.book:
            raise ValueError(f"RefRange may not cross books: {first} - {last}")
        if last < first:
            raise ValueError(f"{first=} is after {last=}")
        self.first = first.first
        self.last = last.last

    @property
    def book(self) -> Book:
        return self.first.book

    @property
    def versification(self) -> str:
        return self.first.versification

    @property
    def start_chapter(self) -> int:
        return self.first.chapter

    @property
    def start_verse(self) -> int:
        return self.first.verse

    @property
    def end_chapter(self) -> int:
        return self.last.chapter

    @property
    def end_verse(self) -> int:
        return self.last.verse

    def str(self, env: Optional[Environment] = None, fmt: Optional[str] = None, nobook: Optional[bool] = None) -> str:
        """ Renders C:V, C:V1-V2 or C1:V1-C2:V2 after the book """
        if env is None:
            env = defaultenv
        res = [self.first.str(env=env, fmt=fmt, nobook=nobook)]
        if self.first == self.last:
            return res[0]
        res.append(env.rangemk)
        if self.first.chapter != self.last.chapter:
            res.append(env.localchapter(self.last.chapter))
            res.append(env.cvsep)
        res.append(env.localverse(self.last.verse))
        return "".join(res)

    def __str__(self):
        return self.str()

    def __repr__(self):
        return "RefRange({!r}-{!r})".format(self.first, self.last)

    def astuple(self):
        return (self.first.chapter, self.first.verse, self.last.chapter, self.last.verse)

    def __eq__(self, other):
        """ The ranges are identical """
        if not isinstance(other, RefRange):
            return False
        return self.first == other.first and self.last == other.last

    def __lt__(self, o):
        """ We are entirely before the start of the other """
        return self.last < o.first

    def __gt__(self, o):
        """ We are entirely after the last of the other """
        return self.first > o.last

    def __hash__(self):
        return hash((self.first, self.last))

    def __contains__(self, r):
        """ Tests for entire containment of r (VerseRef or RefRange) inside self """
        if not isinstance(r, (VerseRef, RefRange)) or r.first.book != self.book:
            return False
        return r.first >= self.first and r.last <= self.last

    def __iter__(self) -> Iterator[VerseRef]:
        return RefRangeIter(self)

    def overlaps(self, o: "RefRange") -> bool:
        if self.book != o.book:
            return False
        return self.first <= o.last and o.first <= self.last

    def intersection(self, o: "RefRange") -> Optional["RefRange"]:
        if not self.overlaps(o):
            return None
        return RefRange(max(self.first, o.first), min(self.last, o.last))

    def isadjacent(self, o: "RefRange") -> bool:
        """ Touches the other with no verse between and no overlap """
        if self.overlaps(o):
            return False
        return self.last.successor() == o.first or o.last.successor() == self.first

    def chapters(self) -> List[int]:
        return list(range(self.first.chapter, self.last.chapter + 1))

    def verses_in_chapter(self, chapter: int) -> int:
        if not isinstance(chapter, int) or chapter < self.first.chapter or chapter > self.last.chapter:
            return 0
        start = self.first.verse if chapter == self.first.chapter else 1
        end = self.last.verse if chapter == self.last.chapter else (self.first.maxverse(chapter) or 0)
        return max(0, end - start + 1)

    def verse_count(self) -> int:
        """ Counts the verses from the versification without walking them """
        return sum(self.verses_in_chapter(c) for c in self.chapters())

    def isvalid(self) -> bool:
        return self.first.isvalid() and self.last.isvalid()

    def allchaps(self):
        """ Yields a RefRange for the part of this range in each chapter """
        for c in self.chapters():
            start = self.first.verse if c == self.first.chapter else 1
            end = self.last.verse if c == self.last.chapter else self.first.maxverse(c)
            yield RefRange(self.first.copy(chapter=c, verse=start), self.first.copy(chapter=c, verse=end))

    def copy(self):
        return self.__class__(self.first, self.last)


class RefRangeIter:

    def __init__(self, base):
        self.r = base.first
        self.last = base.last

    def __iter__(self):
        return self

    def __next__(self):
        if self.r is None:
            raise StopIteration
        res = self.r
        if self.r >= self.last:
            self.r = None
        else:
            self.r = self.r.successor()
        return res
