from typing import Optional, List, Dict, Tuple, Union, Iterator
import json
from pericope.books import resolve_book
from pericope.reference import VerseRef, RefRange, Environment, BookRef
from pericope.versification import DEFAULT_VERSIFICATION
from pericope.textproc import parse_reference, format_pericope

RangeSpec = Union[RefRange, Tuple[int, int, int, int]]


def simplify(ranges) -> List[RefRange]:
    """ Sorts the ranges and merges any that overlap or touch, giving disjoint
        strictly increasing ranges """
    res = []
    for r in sorted(ranges, key=lambda x: (x.first, x.last)):
        if len(res):
            lastr = res[-1]
            if r.first <= lastr.last or r.first == lastr.last.successor():
                if r.last > lastr.last:
                    res[-1] = RefRange(lastr.first, r.last)
                continue
        res.append(r)
    return res


class Pericope:
    """ A possibly discontinuous set of verse ranges within one book.

        Ranges keep the order they were given in and may overlap. Operations
        that need a canonical form work on a simplified copy, and every
        operation returns a new Pericope. """

    def __init__(self, content: Optional[Union[str, List[RangeSpec]]] = None,
                 book: Optional[BookRef] = None, versification: str = DEFAULT_VERSIFICATION):
        self.versification = versification
        if isinstance(content, str) or book is None:
            res = parse_reference(content, versification)
            self.book = res['book']
            self.ranges = tuple(res['ranges'])
            return
        self.book = resolve_book(book)
        ranges = []
        for r in (content or []):
            if not isinstance(r, RefRange):
                r = RefRange.fromChapters(self.book, *r, versification=versification)
            elif r.book != self.book:
                raise ValueError(f"{r} is not in {self.book.code}")
            ranges.append(r)
        self.ranges = tuple(ranges)

    @classmethod
    def fromRanges(cls, book: BookRef, ranges: List[RangeSpec],
                   versification: str = DEFAULT_VERSIFICATION) -> "Pericope":
        return cls(list(ranges), book=book, versification=versification)

    def _new(self, ranges) -> "Pericope":
        return self.__class__(list(ranges), book=self.book, versification=self.versification)

    def _samebook(self, o) -> bool:
        return isinstance(o, Pericope) and self.book == o.book

    def cleared(self) -> "Pericope":
        """ An empty Pericope in the same book """
        return self._new([])

    def __str__(self):
        return self.str()

    def __repr__(self):
        return "Pericope('"+self.str()+"')"

    def str(self, fmt: Optional[str] = None, env: Optional[Environment] = None) -> str:
        return format_pericope(self, fmt, env=env)

    def __eq__(self, o):
        if not isinstance(o, Pericope):
            return False
        return self.book == o.book and self.ranges == o.ranges

    def __hash__(self):
        return hash((self.book.code, self.ranges))

    def __len__(self):
        return len(self.ranges)

    def __iter__(self) -> Iterator[VerseRef]:
        return iter(self.allverses())

    def __contains__(self, o):
        return self.contains(o)

    def __or__(self, o):
        return self.union(o)

    def __and__(self, o):
        return self.intersection(o)

    def __sub__(self, o):
        return self.subtract(o)

    @property
    def first(self) -> Optional[RefRange]:
        return self.ranges[0] if len(self.ranges) else None

    @property
    def last(self) -> Optional[RefRange]:
        return self.ranges[-1] if len(self.ranges) else None

    def first_verse(self) -> Optional[VerseRef]:
        return self.ranges[0].first if len(self.ranges) else None

    def last_verse(self) -> Optional[VerseRef]:
        return self.ranges[-1].last if len(self.ranges) else None

    def allverses(self) -> List[VerseRef]:
        """ Every verse of every range, in range order """
        return [v for r in self.ranges for v in r]

    ## queries

    def isempty(self) -> bool:
        return not len(self.ranges)

    def isvalid(self) -> bool:
        return len(self.ranges) > 0 and all(r.isvalid() for r in self.ranges)

    def issingle_verse(self) -> bool:
        return self.verse_count() == 1

    def issingle_chapter(self) -> bool:
        return self.chapter_count() == 1

    def spans_chapters(self) -> bool:
        return self.chapter_count() > 1

    def spans_books(self) -> bool:
        return False

    def verse_count(self) -> int:
        """ Number of distinct verses """
        return sum(r.verse_count() for r in simplify(self.ranges))

    def chapter_list(self) -> List[int]:
        return sorted(set(c for r in self.ranges for c in r.chapters()))

    def chapter_count(self) -> int:
        return len(self.chapter_list())

    def range_count(self) -> int:
        return len(self.ranges)

    def verses_in_chapter(self, chapter: int) -> int:
        """ Sums what each range contributes to the chapter. Overlapping ranges
            count twice; normalize first if that matters. """
        return sum(r.verses_in_chapter(chapter) for r in self.ranges)

    def chapters_in_range(self) -> Dict[int, List[int]]:
        res = {}
        for v in self.allverses():
            res.setdefault(v.chapter, set()).add(v.verse)
        return {c: sorted(res[c]) for c in sorted(res)}

    def density(self) -> float:
        """ Verses present over verses in the chapters touched """
        if not len(self.ranges):
            return 0.0
        chaps = self.chapters_in_range()
        present = sum(len(v) for v in chaps.values())
        possible = sum(self.book.verse_count(c, self.versification) or 0 for c in chaps)
        return present / possible if possible else 0.0

    def continuous_ranges(self) -> List[RefRange]:
        """ The maximal runs of verses with no gap, in ascending order """
        return simplify(self.ranges)

    def gaps(self) -> List[VerseRef]:
        """ Verses between the first and last verse not covered by any range """
        res = []
        runs = simplify(self.ranges)
        for a, b in zip(runs, runs[1:]):
            res.extend(RefRange(a.last.successor(), b.first.predecessor()))
        return res

    ## comparisons

    def intersects(self, o: "Pericope") -> bool:
        if not self._samebook(o):
            return False
        return any(a.overlaps(b) for a in self.ranges for b in o.ranges)

    overlaps = intersects

    def contains(self, o: Union["Pericope", VerseRef, RefRange]) -> bool:
        """ Every verse of o is in us """
        runs = simplify(self.ranges)
        if isinstance(o, (VerseRef, RefRange)):
            return any(o in r for r in runs)
        if not self._samebook(o):
            return False
        return all(any(b in a for a in runs) for b in o.ranges)

    def adjacent_to(self, o: "Pericope") -> bool:
        if not self._samebook(o) or self.isempty() or o.isempty() or self.intersects(o):
            return False
        a = simplify(self.ranges)
        b = simplify(o.ranges)
        return a[-1].last.successor() == b[0].first or b[-1].last.successor() == a[0].first

    def precedes(self, o: "Pericope") -> bool:
        """ Our last verse is before the other's first """
        if not self._samebook(o) or self.isempty() or o.isempty():
            return False
        return simplify(self.ranges)[-1].last < simplify(o.ranges)[0].first

    def follows(self, o: "Pericope") -> bool:
        if not self._samebook(o):
            return False
        return o.precedes(self)

    ## set operations

    def normalize(self) -> "Pericope":
        return self._new(simplify(self.ranges))

    def union(self, o: "Pericope") -> "Pericope":
        if not self._samebook(o):
            return self
        return self._new(simplify(self.ranges + o.ranges))

    def intersection(self, o: "Pericope") -> "Pericope":
        if not self._samebook(o):
            return self.cleared()
        res = [x for a in self.ranges for b in o.ranges if (x := a.intersection(b)) is not None]
        return self._new(simplify(res))

    def subtract(self, o: "Pericope") -> "Pericope":
        if not self._samebook(o):
            return self
        pieces = simplify(self.ranges)
        for b in simplify(o.ranges):
            res = []
            for p in pieces:
                if not p.overlaps(b):
                    res.append(p)
                    continue
                if p.first < b.first:
                    res.append(RefRange(p.first, b.first.predecessor()))
                if p.last > b.last:
                    res.append(RefRange(b.last.successor(), p.last))
            pieces = res
        return self._new(pieces)

    def expand(self, before: int = 0, after: int = 0) -> "Pericope":
        """ Grows the first range back and the last range forward, staying
            inside their chapters """
        if before < 0 or after < 0:
            raise ValueError(f"Cannot expand by {before}, {after}")
        if self.isempty():
            return self
        ranges = list(self.ranges)
        r = ranges[0]
        ranges[0] = RefRange(r.first.copy(verse=max(1, r.first.verse - before)), r.last)
        r = ranges[-1]
        ranges[-1] = RefRange(r.first, r.last.copy(verse=min(r.last.maxverse(), r.last.verse + after)))
        return self._new(ranges)

    def contract(self, from_start: int = 0, from_end: int = 0) -> "Pericope":
        """ Shrinks the first range from its start and the last from its end.
            Gives an empty Pericope if a range would be turned inside out. """
        if from_start < 0 or from_end < 0:
            raise ValueError(f"Cannot contract by {from_start}, {from_end}")
        if self.isempty():
            return self
        ranges = list(self.ranges)
        r = ranges[0]
        first = r.first.advance(from_start)
        if first is None or first > r.last:
            return self.cleared()
        ranges[0] = RefRange(first, r.last)
        r = ranges[-1]
        last = r.last.advance(-from_end)
        if last is None or last < r.first:
            return self.cleared()
        ranges[-1] = RefRange(r.first, last)
        return self._new(ranges)


class RefJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, (VerseRef, RefRange, Pericope)):
            return str(obj)
        elif isinstance(obj, set):
            return sorted(obj)
        return super().default(obj)
