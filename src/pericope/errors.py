class PericopeError(Exception):
    """ Root of every error raised while building a reference """
    pass


class ParseError(PericopeError, ValueError):

    def __init__(self, text, reason="cannot parse"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse reference '{text}': {reason}")


class InvalidBookError(PericopeError):

    def __init__(self, book):
        self.book = book
        super().__init__(f"Unknown book: {book!r}")


class InvalidChapterError(PericopeError):

    def __init__(self, book_code, chapter):
        self.book_code = book_code
        self.chapter = chapter
        super().__init__(f"Invalid chapter {chapter} in {book_code}")


class InvalidVerseError(PericopeError):

    def __init__(self, book_code, chapter, verse):
        self.book_code = book_code
        self.chapter = chapter
        self.verse = verse
        super().__init__(f"Invalid verse {verse} in {book_code} {chapter}")
