from pericope.errors import PericopeError, ParseError, InvalidBookError, InvalidChapterError, InvalidVerseError
from pericope.versification import DEFAULT_VERSIFICATION, ChapterInfo, Versification, cached_versification
from pericope.books import Book, find_by_code, find_by_number, find_by_name, find_by_alias, \
        normalize_name, all_books, testament_books
from pericope.reference import VerseRef, RefRange, Environment
from pericope.pericope import Pericope, RefJSONEncoder
from pericope.textproc import parse_reference, format_pericope, scan, split, try_reference, Result

def parse(text, versification=DEFAULT_VERSIFICATION):
    """ Returns every Pericope found in text """
    return scan(text, versification)
