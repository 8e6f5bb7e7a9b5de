from typing import Optional, List, Tuple
from dataclasses import dataclass
from rapidfuzz.distance import Levenshtein
from pericope.versification import DEFAULT_VERSIFICATION
from pericope.errors import InvalidBookError
import pericope.versification as vrs
import logging

logger = logging.getLogger(__name__)

FUZZY_MAX_DISTANCE = 2
FUZZY_MIN_LENGTH = 3

# CODE|chapters|display name|aliases. Aliases of numbered books are given without
# the number and are expanded to 1Sam, 1 Sam, I Sam, First Sam, etc.
_booktable = """GEN|50|Genesis|Gen;Ge;Gn
    EXO|40|Exodus|Exod;Exo;Ex
    LEV|27|Leviticus|Lev;Le;Lv
    NUM|36|Numbers|Num;Nu;Nm;Nb
    DEU|34|Deuteronomy|Deut;Deu;De;Dt
    JOS|24|Joshua|Josh;Jos;Jsh
    JDG|21|Judges|Judg;Jdg;Jg;Jdgs
    RUT|4|Ruth|Rth;Ru
    1SA|31|1 Samuel|Samuel;Sam;Sa;Sm
    2SA|24|2 Samuel|Samuel;Sam;Sa;Sm
    1KI|22|1 Kings|Kings;Kgs;Ki;Kin
    2KI|25|2 Kings|Kings;Kgs;Ki;Kin
    1CH|29|1 Chronicles|Chronicles;Chron;Chr;Ch
    2CH|36|2 Chronicles|Chronicles;Chron;Chr;Ch
    EZR|10|Ezra|Ezr
    NEH|13|Nehemiah|Neh;Ne
    EST|10|Esther|Esth;Est;Es
    JOB|42|Job|Jb
    PSA|150|Psalms|Psalm;Ps;Psa;Pss;Psm
    PRO|31|Proverbs|Prov;Pro;Prv;Pr
    ECC|12|Ecclesiastes|Eccl;Ecc;Eccles;Ec;Qoh;Qoheleth
    SNG|8|Song of Solomon|Song of Songs;Song;Sng;SS;Canticles;Cant
    ISA|66|Isaiah|Isa;Is
    JER|52|Jeremiah|Jer;Je;Jr
    LAM|5|Lamentations|Lam;La
    EZK|48|Ezekiel|Ezek;Ezk;Eze
    DAN|12|Daniel|Dan;Da;Dn
    HOS|14|Hosea|Hos;Ho
    JOL|3|Joel|Jol;Jl
    AMO|9|Amos|Amo;Am
    OBA|1|Obadiah|Obad;Oba;Ob
    JON|4|Jonah|Jon;Jnh
    MIC|7|Micah|Mic;Mc
    NAM|3|Nahum|Nah;Nam;Na
    HAB|3|Habakkuk|Hab;Hb
    ZEP|3|Zephaniah|Zeph;Zep;Zp
    HAG|2|Haggai|Hag;Hg
    ZEC|14|Zechariah|Zech;Zec;Zc
    MAL|4|Malachi|Mal;Ml
    MAT|28|Matthew|Matt;Mat;Mt
    MRK|16|Mark|Mrk;Mk;Mr
    LUK|24|Luke|Luk;Lk
    JHN|21|John|Jhn;Jn;Joh
    ACT|28|Acts|Act;Ac
    ROM|16|Romans|Rom;Ro;Rm
    1CO|16|1 Corinthians|Corinthians;Cor;Co
    2CO|13|2 Corinthians|Corinthians;Cor;Co
    GAL|6|Galatians|Gal;Ga
    EPH|6|Ephesians|Eph;Ephes
    PHP|4|Philippians|Phil;Php;Pp
    COL|4|Colossians|Col
    1TH|5|1 Thessalonians|Thessalonians;Thess;Thes;Th
    2TH|3|2 Thessalonians|Thessalonians;Thess;Thes;Th
    1TI|6|1 Timothy|Timothy;Tim;Ti
    2TI|4|2 Timothy|Timothy;Tim;Ti
    TIT|3|Titus|Tit
    PHM|1|Philemon|Philem;Phm;Pm
    HEB|13|Hebrews|Heb
    JAS|5|James|Jas;Jm
    1PE|5|1 Peter|Peter;Pet;Pe;Pt
    2PE|3|2 Peter|Peter;Pet;Pe;Pt
    1JN|5|1 John|John;Jn;Jhn;Jo
    2JN|1|2 John|John;Jn;Jhn;Jo
    3JN|1|3 John|John;Jn;Jhn;Jo
    JUD|1|Jude|Jud;Jde
    REV|22|Revelation|Rev;Re;Rv;Revelations;Apocalypse"""

_numbered = {"1": ("I", "First"), "2": ("II", "Second"), "3": ("III", "Third")}

_oldtestament = 39


@dataclass(frozen=True, eq=False)
class Book:
    code: str
    number: int
    name: str
    testament: str
    chapter_count: int
    aliases: Tuple[str, ...]

    def __eq__(self, o):
        if not isinstance(o, Book):
            return False
        return self.code == o.code

    def __lt__(self, o):
        return self.code < o.code

    def __hash__(self):
        return hash(self.code)

    def __str__(self):
        return self.code

    def __repr__(self):
        return f"Book('{self.code}')"

    def isvalid(self):
        return self.code is not None and self.name is not None

    def iscanonical(self):
        return self.testament in ("old", "new")

    def isdeuterocanonical(self):
        return self.testament == "deuterocanonical"

    def isold_testament(self):
        return self.testament == "old"

    def isnew_testament(self):
        return self.testament == "new"

    def verse_count(self, chapter, scheme=DEFAULT_VERSIFICATION) -> Optional[int]:
        return vrs.verse_count(self.code, chapter, scheme)

    def total_verses(self, scheme=DEFAULT_VERSIFICATION) -> Optional[int]:
        return vrs.total_verses(self.code, scheme)

    def valid_chapter(self, chapter, scheme=DEFAULT_VERSIFICATION) -> bool:
        return vrs.valid_chapter(self.code, chapter, scheme)

    def valid_verse(self, chapter, verse, scheme=DEFAULT_VERSIFICATION) -> bool:
        return vrs.valid_verse(self.code, chapter, verse, scheme)

    def matches(self, s: Optional[str]) -> bool:
        """ Tests s against the aliases of this book, ignoring case """
        if not s:
            return False
        s = s.lower()
        return any(a.lower() == s for a in self.aliases)


def _makealiases(code, number, name, basenames):
    res = [code, str(number), name]
    if code[0] in _numbered:
        n = code[0]
        roman, ordinal = _numbered[n]
        for b in basenames:
            res.extend([n + b, n + " " + b, roman + " " + b, ordinal + " " + b])
    else:
        res.extend(basenames)
    return tuple(dict.fromkeys(res))

def _readtable(table):
    res = []
    for i, l in enumerate(table.splitlines()):
        code, chaps, name, aliases = l.strip().split("|")
        number = i + 1
        res.append(Book(code, number, name, "old" if number <= _oldtestament else "new",
                        int(chaps), _makealiases(code, number, name, aliases.split(";"))))
    return res

allbooks = _readtable(_booktable)
bookcodes = {b.code: b for b in allbooks}
booknumbers = {b.number: b for b in allbooks}
bookaliases = {}        # lower case alias to Book, in registry order
for _b in allbooks:
    for _a in _b.aliases:
        bookaliases.setdefault(_a.lower(), _b)


def find_by_code(code) -> Optional[Book]:
    """ Finds a book by its exact canonical code, ignoring case """
    if not isinstance(code, str) or not len(code):
        return None
    return bookcodes.get(code.upper(), None)

def find_by_number(number) -> Optional[Book]:
    if isinstance(number, bool) or not isinstance(number, int):
        return None
    return booknumbers.get(number, None)

def find_by_name(name) -> Optional[Book]:
    """ Finds a book by any of its names or abbreviations. Falls back to the
        closest alias within FUZZY_MAX_DISTANCE edits for inputs of at least
        FUZZY_MIN_LENGTH characters. """
    if not isinstance(name, str) or not len(name):
        return None
    res = bookaliases.get(name.lower(), None)
    if res is not None:
        return res
    return _fuzzymatch(name)

find_by_alias = find_by_name

def _fuzzymatch(name, maxdist=FUZZY_MAX_DISTANCE) -> Optional[Book]:
    if len(name) < FUZZY_MIN_LENGTH:
        return None
    s = name.lower()
    best = None
    bestdist = maxdist + 1
    for a, b in bookaliases.items():     # first seen wins a tie
        d = Levenshtein.distance(s, a, score_cutoff=maxdist)
        if d < bestdist:
            best, bestdist, bestalias = b, d, a
    if best is not None:
        logger.debug(f"fuzzy matched {name!r} to {best.code} via {bestalias!r} ({bestdist} edits)")
    return best

def normalize_name(name) -> Optional[str]:
    """ Returns the canonical code for any recognised book name """
    res = find_by_name(name)
    return res.code if res is not None else None

def all_books() -> List[Book]:
    return list(allbooks)

def testament_books(testament) -> List[Book]:
    if testament not in ("old", "new"):
        return []
    return [b for b in allbooks if b.testament == testament]

def resolve_book(book) -> Book:
    """ Resolves a Book or a book code to a Book at the construction boundary """
    if isinstance(book, Book):
        return book
    res = find_by_code(book) if isinstance(book, str) else None
    if res is None:
        raise InvalidBookError(book)
    return res
