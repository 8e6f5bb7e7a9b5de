import pytest
from pytest import fail
import json
from pericope import Pericope, RefJSONEncoder, VerseRef, RefRange
from pericope.errors import ParseError, InvalidBookError, InvalidChapterError, InvalidVerseError

# To see the print() output of passing tests, run pytest -s

def _p(s):
    return Pericope(s)

def _s(p, s):
    if str(p) != s:
        fail(f"{p!r} renders as '{p}' instead of '{s}'")
    print(f"{s} = {p}")

def _vs(verses, strs):
    res = [str(v) for v in verses]
    if res != strs:
        fail(f"{res} != {strs}")

def _op(a, b, op, s):
    res = getattr(_p(a), op)(_p(b))
    if str(res) != s:
        fail(f"{a} {op} {b} gave '{res}' instead of '{s}'")
    print(f"{a} {op} {b} = {res}")

def _rel(a, b, op, expected):
    res = getattr(_p(a), op)(_p(b))
    if res != expected:
        fail(f"{a} {op} {b} is {res} instead of {expected}")

#### Construction

def test_simple():
    p = _p("GEN 1:1")
    if p.book.code != "GEN":
        fail(f"{p} is in {p.book}")
    _s(p, "GEN 1:1")

def test_forms():
    _s(_p("GEN 1:1-3"), "GEN 1:1-3")
    _s(_p("GEN 1:1-2:3"), "GEN 1:1-2:3")
    _s(_p("Genesis 1:1"), "GEN 1:1")
    _s(_p("GEN"), "GEN 1:1")
    _s(_p("GEN 1:1,3,5"), "GEN 1:1,1:3,1:5")
    if _p("GEN 1:1,3,5").range_count() != 3:
        fail("GEN 1:1,3,5 does not have 3 ranges")

def test_errors():
    for s in ("", "   ", None):
        with pytest.raises(ParseError):
            _p(s)
    with pytest.raises(InvalidBookError):
        _p("INVALID 1:1")
    with pytest.raises(InvalidChapterError):
        _p("GEN 999:1")
    with pytest.raises(InvalidVerseError):
        _p("GEN 1:999")

def test_fromranges():
    p = Pericope.fromRanges("GEN", [(1, 1, 1, 3), RefRange.fromChapters("GEN", 2, 1, 2, 2)])
    _s(p, "GEN 1:1-3,2:1-2")
    if p != _p("GEN 1:1-3,2:1-2"):
        fail(f"{p} does not equal the parsed form")
    with pytest.raises(InvalidVerseError):
        Pericope.fromRanges("GEN", [(1, 1, 1, 40)])
    with pytest.raises(ValueError):
        Pericope.fromRanges("GEN", [RefRange.fromChapters("EXO", 1, 1, 1, 2)])
    with pytest.raises(InvalidBookError):
        Pericope.fromRanges("XYZ", [(1, 1, 1, 1)])

def test_formats():
    p = _p("GEN 1:1-3")
    _s(p, "GEN 1:1-3")
    for fmt, res in (("canonical", "GEN 1:1-3"), ("abbreviated", "GEN 1:1-3"), ("full_name", "Genesis 1:1-3")):
        if p.str(fmt) != res:
            fail(f"{fmt} rendered '{p.str(fmt)}' instead of '{res}'")
    if p.cleared().str() != "" or str(p.cleared()) != "":
        fail("empty pericope does not render as ''")
    if repr(p) != "Pericope('GEN 1:1-3')":
        fail(repr(p))

def test_equality():
    if _p("GEN 1:1-3") != _p("GEN 1:1-3") or hash(_p("GEN 1:1-3")) != hash(_p("Genesis 1:1-3")):
        fail("identical pericopes differ")
    if _p("GEN 1:1-3") == _p("GEN 1:4-6") or _p("GEN 1:1") == _p("MAT 1:1"):
        fail("different pericopes are equal")
    if _p("GEN 1:1") == "GEN 1:1":
        fail("pericope equals a string")

def test_json():
    res = json.dumps({"p": _p("GEN 1:1-3"), "v": VerseRef("GEN", 1, 1)}, cls=RefJSONEncoder)
    if res != '{"p": "GEN 1:1-3", "v": "GEN 1:1"}':
        fail(res)

#### Verse access

def test_allverses():
    _vs(_p("GEN 1:1").allverses(), ["GEN 1:1"])
    _vs(_p("GEN 1:1-3"), ["GEN 1:1", "GEN 1:2", "GEN 1:3"])
    verses = _p("GEN 1:30-2:2").allverses()
    if len(verses) != 4 or not isinstance(verses[0], VerseRef):
        fail(f"GEN 1:30-2:2 has verses {verses}")
    _vs([verses[0], verses[-1]], ["GEN 1:30", "GEN 2:2"])

def test_first_last():
    p = _p("GEN 2:5-10")
    _vs([p.first_verse(), p.last_verse()], ["GEN 2:5", "GEN 2:10"])
    e = p.cleared()
    if e.first_verse() is not None or e.last_verse() is not None:
        fail("empty pericope has a first or last verse")

#### Queries

def test_predicates():
    p = _p("GEN 1:1")
    e = p.cleared()
    if not p.isvalid() or e.isvalid():
        fail("isvalid wrong")
    if p.isempty() or not e.isempty() or e or not p:
        fail("isempty wrong")
    if not p.issingle_verse() or _p("GEN 1:1-3").issingle_verse():
        fail("issingle_verse wrong")
    if not _p("GEN 1:1-3").issingle_chapter() or _p("GEN 1:1-2:3").issingle_chapter():
        fail("issingle_chapter wrong")
    if _p("GEN 1:1-3").spans_chapters() or not _p("GEN 1:1-2:3").spans_chapters():
        fail("spans_chapters wrong")
    if p.spans_books():
        fail("spans_books is true")

def test_counts():
    if _p("GEN 1:1").verse_count() != 1 or _p("GEN 1:1-3").verse_count() != 3:
        fail("verse_count wrong")
    if _p("GEN 1:1-5,3-7").verse_count() != 7:
        fail("overlapping verses counted twice")
    if _p("GEN 1:1-3").chapter_count() != 1 or _p("GEN 1:1-3:1").chapter_count() != 3:
        fail("chapter_count wrong")
    if _p("GEN 1:1-3:1").chapter_list() != [1, 2, 3]:
        fail(f"chapter_list is {_p('GEN 1:1-3:1').chapter_list()}")

def test_verses_in_chapter():
    p = _p("GEN 1:1-5")
    if p.verses_in_chapter(1) != 5 or p.verses_in_chapter(2) != 0:
        fail("GEN 1:1-5 verses_in_chapter wrong")
    if p.verses_in_chapter(0) != 0 or p.verses_in_chapter(100) != 0:
        fail("out of range chapters counted")
    p = _p("GEN 1:30-2:5")
    if (p.verses_in_chapter(1), p.verses_in_chapter(2), p.verses_in_chapter(3)) != (2, 5, 0):
        fail("GEN 1:30-2:5 verses_in_chapter wrong")
    if _p("GEN 1:1-3,5-7").verses_in_chapter(1) != 6:
        fail("multiple ranges not summed")
    if _p("GEN 1:1-3,2-4").verses_in_chapter(1) != 6:
        fail("overlapping ranges not summed naively")

def test_chapters_in_range():
    res = _p("GEN 1:1,3,5-7").chapters_in_range()
    if res != {1: [1, 3, 5, 6, 7]}:
        fail(f"{res}")
    res = _p("GEN 1:30-2:3").chapters_in_range()
    if res != {1: [30, 31], 2: [1, 2, 3]}:
        fail(f"{res}")
    res = _p("GEN 1:1-2,2:5-6").chapters_in_range()
    if res != {1: [1, 2], 2: [5, 6]} or list(res) != [1, 2]:
        fail(f"{res}")

def test_density():
    if _p("GEN 1:1-31").density() != 1.0:
        fail("full chapter density is not 1")
    if abs(_p("GEN 1:1-10").density() - 10.0 / 31.0) > 0.01:
        fail(f"GEN 1:1-10 density is {_p('GEN 1:1-10').density()}")
    if _p("GEN 1:1").cleared().density() != 0.0:
        fail("empty density is not 0")
    res = _p("GEN 1:31-2:1").density()
    if abs(res - 2.0 / (31 + 25)) > 1e-9:
        fail(f"GEN 1:31-2:1 density is {res}")

def test_gaps():
    if _p("GEN 1:1-5").gaps() != [] or _p("GEN 1:1").gaps() != []:
        fail("continuous pericope has gaps")
    _vs(_p("GEN 1:1,3,5").gaps(), ["GEN 1:2", "GEN 1:4"])
    _vs(_p("GEN 1:30,2:2").gaps(), ["GEN 1:31", "GEN 2:1"])
    _vs(_p("GEN 1:5,1-3").gaps(), ["GEN 1:4"])

def test_continuous_ranges():
    res = _p("GEN 1:1-5").continuous_ranges()
    if len(res) != 1 or str(res[0]) != "GEN 1:1-5":
        fail(f"{res}")
    res = _p("GEN 1:10,5-7,1-3").continuous_ranges()
    _vs(res, ["GEN 1:1-3", "GEN 1:5-7", "GEN 1:10"])
    res = _p("GEN 1:30-31,2:1-2").continuous_ranges()
    _vs(res, ["GEN 1:30-2:2"])

def test_gaps_vs_runs():
    for s in ("GEN 1:1-5", "GEN 1:1,3,5", "GEN 1:30,2:2", "GEN 1:30-31,2:1-2", "GEN 1:5-10,1-7", "GEN 50:26"):
        p = _p(s)
        if (p.gaps() == []) != (len(p.continuous_ranges()) == 1):
            fail(f"{s} gaps and continuous ranges disagree")

#### Comparisons

def test_intersects():
    _rel("GEN 1:1-10", "GEN 1:5-15", "intersects", True)
    _rel("GEN 1:5-15", "GEN 1:1-10", "intersects", True)
    _rel("GEN 1:1-5", "GEN 1:10-15", "intersects", False)
    _rel("GEN 1:1-5", "MAT 1:1-5", "intersects", False)
    _rel("GEN 1:1-5", "GEN 1:1-5", "intersects", True)
    _rel("GEN 1:1-10", "GEN 1:5-15", "overlaps", True)

def test_contains():
    _rel("GEN 1:1-10", "GEN 1:3-7", "contains", True)
    _rel("GEN 1:3-7", "GEN 1:1-10", "contains", False)
    _rel("GEN 1:1-5", "GEN 1:1-5", "contains", True)
    _rel("GEN 1:1-10", "GEN 1:5-15", "contains", False)
    _rel("GEN 1:1-10", "MAT 1:1-5", "contains", False)
    _rel("GEN 1:1-3,4-6", "GEN 1:2-5", "contains", True)
    if VerseRef("GEN", 1, 4) not in _p("GEN 1:1-5") or VerseRef("GEN", 1, 6) in _p("GEN 1:1-5"):
        fail("verse containment wrong")

def test_adjacent():
    _rel("GEN 1:1-5", "GEN 1:6-10", "adjacent_to", True)
    _rel("GEN 1:6-10", "GEN 1:1-5", "adjacent_to", True)
    _rel("GEN 1:1-5", "GEN 1:5-10", "adjacent_to", False)
    _rel("GEN 1:1-5", "GEN 1:8-10", "adjacent_to", False)
    _rel("GEN 1:1-5", "MAT 1:1-5", "adjacent_to", False)
    _rel("GEN 1:29-31", "GEN 2:1-3", "adjacent_to", True)

def test_precedes():
    _rel("GEN 1:1-5", "GEN 1:10-15", "precedes", True)
    _rel("GEN 1:10-15", "GEN 1:1-5", "precedes", False)
    _rel("GEN 1:1-10", "GEN 1:5-15", "precedes", False)
    _rel("GEN 1:1-5", "MAT 1:1-5", "precedes", False)

def test_follows():
    _rel("GEN 1:10-15", "GEN 1:1-5", "follows", True)
    _rel("GEN 1:1-5", "GEN 1:10-15", "follows", False)
    _rel("GEN 1:5-15", "GEN 1:1-10", "follows", False)
    _rel("MAT 1:1-5", "GEN 1:1-5", "follows", False)

#### Set operations

def test_union():
    _op("GEN 1:1-10", "GEN 1:5-15", "union", "GEN 1:1-15")
    _op("GEN 1:1-5", "GEN 1:1-5", "union", "GEN 1:1-5")
    _op("GEN 1:1-5", "GEN 1:10-15", "union", "GEN 1:1-5,1:10-15")
    if (_p("GEN 1:1-5") | _p("GEN 1:10-15")).verse_count() != 11:
        fail("union verse count is not 11")
    a = _p("GEN 1:1-5")
    if a.union(_p("MAT 1:1-5")) != a:
        fail("cross book union changed the pericope")

def test_intersection():
    _op("GEN 1:1-10", "GEN 1:5-15", "intersection", "GEN 1:5-10")
    _op("GEN 1:1-5", "GEN 1:1-5", "intersection", "GEN 1:1-5")
    if not (_p("GEN 1:1-5") & _p("GEN 1:10-15")).isempty():
        fail("disjoint intersection is not empty")
    if not _p("GEN 1:1-5").intersection(_p("MAT 1:1-5")).isempty():
        fail("cross book intersection is not empty")
    _op("GEN 1:1-10,20-25", "GEN 1:8-22", "intersection", "GEN 1:8-10,1:20-22")

def test_subtract():
    _op("GEN 1:1-10", "GEN 1:5-15", "subtract", "GEN 1:1-4")
    _op("GEN 1:1-5", "GEN 1:10-15", "subtract", "GEN 1:1-5")
    _op("GEN 1:1-10", "GEN 1:4-6", "subtract", "GEN 1:1-3,1:7-10")
    _op("GEN 1:30-2:2", "GEN 1:31-2:1", "subtract", "GEN 1:30,2:2")
    if not (_p("GEN 1:1-5") - _p("GEN 1:1-5")).isempty():
        fail("subtracting itself is not empty")
    a = _p("GEN 1:1-5")
    if a.subtract(_p("MAT 1:1-5")) != a:
        fail("cross book subtract changed the pericope")

def test_normalize():
    _s(_p("GEN 1:1-3,4-6").normalize(), "GEN 1:1-6")
    _s(_p("GEN 1:5-10,1-7").normalize(), "GEN 1:1-10")
    _s(_p("GEN 1:1-5").normalize(), "GEN 1:1-5")
    _s(_p("GEN 2:1-3,1:29-31").normalize(), "GEN 1:29-2:3")
    _s(_p("GEN 1:10,1-3").normalize(), "GEN 1:1-3,1:10")

def test_algebra_laws():
    pairs = (("GEN 1:1-10", "GEN 1:5-15"), ("GEN 1:1-3,7-9", "GEN 1:2-8"),
             ("GEN 1:30-2:5", "GEN 2:3-3:1"), ("GEN 1:1-5", "GEN 1:10-15"))
    for a, b in pairs:
        x, y = _p(a), _p(b)
        if x.normalize().normalize() != x.normalize():
            fail(f"normalize of {a} is not idempotent")
        if x.union(y).normalize() != y.union(x).normalize():
            fail(f"union of {a} and {b} is not commutative")
        if (x - y) | (x & y) != x.normalize():
            fail(f"({a} - {b}) | ({a} & {b}) != {x.normalize()}")
        if not x.contains(x):
            fail(f"{a} does not contain itself")
        if x.intersects(y) != y.intersects(x):
            fail(f"intersects of {a} and {b} is not symmetric")

#### Resizing

def test_expand():
    p = _p("GEN 1:5-10")
    res = p.expand(2, 3)
    if res.verse_count() <= p.verse_count():
        fail(f"{res} did not grow")
    if res.first_verse().verse != 3 or res.last_verse().verse != 13:
        fail(f"GEN 1:5-10 expanded to {res}")
    if _p("GEN 1:1-2").expand(5, 0).first_verse().verse != 1:
        fail("expand went before verse 1")
    _s(p.expand(0, 0), "GEN 1:5-10")
    _s(_p("GEN 1:28-30").expand(0, 5), "GEN 1:28-31")
    _s(_p("GEN 1:2,5").expand(1, 1), "GEN 1:1-2,1:5-6")
    with pytest.raises(ValueError):
        p.expand(-1, 0)

def test_contract():
    _s(_p("GEN 1:1-10").contract(2, 3), "GEN 1:3-7")
    if not _p("GEN 1:1-5").contract(3, 3).isempty():
        fail("over-contracted pericope is not empty")
    _s(_p("GEN 1:1-10").contract(0, 0), "GEN 1:1-10")
    _s(_p("GEN 1:30-2:2").contract(1, 1), "GEN 1:31-2:1")
    _s(_p("GEN 1:1-3,8-10").contract(1, 1), "GEN 1:2-3,1:8-9")
    if not _p("GEN 1:1").contract(1, 0).isempty():
        fail("contracting a single verse is not empty")
    with pytest.raises(ValueError):
        _p("GEN 1:1-10").contract(0, -2)

def test_chapter_span_scenario():
    p = _p("GEN 1:30-2:2")
    if p.verses_in_chapter(1) != 2 or p.verses_in_chapter(2) != 2:
        fail(f"{p} verses_in_chapter wrong")
    if str(p.first_verse()) != "GEN 1:30" or len(p.allverses()) != 4:
        fail(f"{p} first verse is {p.first_verse()}")

def test_cleared():
    p = _p("GEN 1:1-3")
    e = p.cleared()
    if e.book != p.book or e.verse_count() != 0 or e.chapter_list() != [] or e.gaps() != []:
        fail(f"{e!r} is not an empty GEN")
    if e.union(p) != p.normalize() or not e.intersection(p).isempty() or not e.subtract(p).isempty():
        fail("empty pericope algebra wrong")
    if e.expand(1, 1) != e or e.contract(1, 1) != e or e.continuous_ranges() != []:
        fail("empty pericope resizing wrong")
    if p.isempty():
        fail("cleared changed the original")
