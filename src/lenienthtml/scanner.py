import re

from .constants import RAW_TEXT_ELEMENTS, WHITESPACE
from .context import ScanCursor
from .errors import UNTERMINATED_ATTRIBUTE_VALUE, UNTERMINATED_COMMENT, UNTERMINATED_TAG, NullSink
from .tokens import Token, TokenType

# Tag names start with an ASCII letter; "<é" and "</ " are text
_TAG_START_PATTERN = re.compile(r"</?[A-Za-z]")
_MARKUP_START_PATTERN = re.compile(r"<[!?]|</?[A-Za-z]")
_NAME_TERMINATOR_PATTERN = re.compile(r"[ \t\n\r\f=<>/\"']")
_UNQUOTED_VALUE_TERMINATOR_PATTERN = re.compile(r"[ \t\n\r\f>]|/>")


class ScannerOpts:
    __slots__ = ("raw_text_elements",)

    def __init__(self, raw_text_elements=None):
        if raw_text_elements is None:
            raw_text_elements = RAW_TEXT_ELEMENTS
        self.raw_text_elements = frozenset(name.lower() for name in raw_text_elements)


class Scanner:
    """Turns markup text into a flat stream of tokens.

    The scanner only holds configuration and the diagnostics sink. All
    per-scan state lives in a ScanCursor created by scan(), so one Scanner
    can serve any number of documents.
    """

    __slots__ = ("opts", "sink")

    def __init__(self, sink=None, opts=None):
        self.sink = sink or NullSink()
        self.opts = opts or ScannerOpts()

    def scan(self, text):
        """Yield the tokens of text, ending with a single EOF token."""
        cursor = ScanCursor()
        length = len(text)
        while cursor.pos < length:
            mode = cursor.mode
            if mode == ScanCursor.DATA:
                tokens = self._scan_data(text, cursor)
            elif mode == ScanCursor.TAG:
                tokens = self._scan_tag(text, cursor)
            else:
                tokens = self._scan_raw_text(text, cursor)
            yield from tokens

        if cursor.mode == ScanCursor.TAG:
            self.sink.report(UNTERMINATED_TAG, cursor.tag_start)
        yield Token(TokenType.EOF, "", length)

    # ---------------------
    # Mode handlers
    # ---------------------

    def _scan_data(self, text, cursor):
        pos = cursor.pos
        if text.startswith("<!--", pos):
            return [self._scan_comment(text, cursor)]
        if text.startswith("<!", pos):
            return [self._scan_opaque(text, cursor, TokenType.DECLARATION, ">")]
        if text.startswith("<?", pos):
            return [self._scan_opaque(text, cursor, TokenType.DIRECTIVE, "?>")]
        if _TAG_START_PATTERN.match(text, pos):
            if text.startswith("</", pos):
                cursor.enter_tag(pos, closing=True)
                cursor.pos = pos + 2
                return [Token(TokenType.LT_SLASH, "</", pos)]
            cursor.enter_tag(pos, closing=False)
            cursor.pos = pos + 1
            return [Token(TokenType.LT, "<", pos)]

        # A "<" that starts nothing is plain text
        match = _MARKUP_START_PATTERN.search(text, pos + 1)
        end = match.start() if match else len(text)
        cursor.pos = end
        return [Token(TokenType.TEXT, text[pos:end], pos)]

    def _scan_tag(self, text, cursor):
        length = len(text)
        pos = cursor.pos
        while pos < length and text[pos] in WHITESPACE:
            pos += 1
        cursor.pos = pos
        if pos >= length:
            return []

        c = text[pos]
        if text.startswith("<!--", pos):
            # Comments are skippable even inside an unfinished tag
            return [self._scan_comment(text, cursor)]
        if c == "<":
            # The unfinished start tag still opens its element, raw text included
            self.sink.report(UNTERMINATED_TAG, cursor.tag_start)
            cursor.mode = self._mode_after_tag(cursor)
            return []
        if c == ">":
            cursor.pos = pos + 1
            cursor.mode = self._mode_after_tag(cursor)
            return [Token(TokenType.GT, ">", pos)]
        if text.startswith("/>", pos):
            cursor.pos = pos + 2
            cursor.mode = ScanCursor.DATA
            return [Token(TokenType.SLASH_GT, "/>", pos)]
        if c in "\"'":
            cursor.after_equals = False
            return [self._scan_quoted_value(text, cursor)]
        if cursor.after_equals:
            cursor.after_equals = False
            match = _UNQUOTED_VALUE_TERMINATOR_PATTERN.search(text, pos)
            end = match.start() if match else length
            cursor.pos = end
            return [Token(TokenType.ATTRIBUTE_VALUE, text[pos:end], pos)]
        if c == "=":
            cursor.pos = pos + 1
            cursor.after_equals = True
            return [Token(TokenType.EQ, "=", pos)]
        if c == "/":
            cursor.pos = pos + 1
            return []

        match = _NAME_TERMINATOR_PATTERN.search(text, pos)
        end = match.start() if match else length
        cursor.pos = end
        if cursor.tag_name is None:
            cursor.tag_name = text[pos:end]
            return [Token(TokenType.TAG_NAME, cursor.tag_name, pos)]
        return [Token(TokenType.ATTRIBUTE_NAME, text[pos:end], pos)]

    def _scan_raw_text(self, text, cursor):
        pos = cursor.pos
        end_pattern = re.compile(r"</" + re.escape(cursor.tag_name) + r"(?=[ \t\n\r\f/>]|$)", re.IGNORECASE)
        match = end_pattern.search(text, pos)
        end = match.start() if match else len(text)
        cursor.pos = end
        cursor.mode = ScanCursor.DATA
        if end > pos:
            return [Token(TokenType.TEXT, text[pos:end], pos)]
        return []

    # ---------------------
    # Helper methods
    # ---------------------

    def _mode_after_tag(self, cursor):
        name = cursor.tag_name
        if not cursor.closing and name is not None and name.lower() in self.opts.raw_text_elements:
            return ScanCursor.RAW_TEXT
        return ScanCursor.DATA

    def _scan_comment(self, text, cursor):
        pos = cursor.pos
        end = text.find("-->", pos + 4)
        if end == -1:
            self.sink.report(UNTERMINATED_COMMENT, pos)
            end = len(text)
        else:
            end += 3
        cursor.pos = end
        return Token(TokenType.COMMENT, text[pos:end], pos)

    def _scan_opaque(self, text, cursor, kind, terminator):
        pos = cursor.pos
        end = text.find(terminator, pos + 2)
        if end == -1:
            self.sink.report(UNTERMINATED_TAG, pos)
            end = len(text)
        else:
            end += len(terminator)
        cursor.pos = end
        return Token(kind, text[pos:end], pos)

    def _scan_quoted_value(self, text, cursor):
        pos = cursor.pos
        quote = text[pos]
        end = text.find(quote, pos + 1)
        if end == -1:
            # The value is everything up to end of input; the tag ends with it
            self.sink.report(UNTERMINATED_ATTRIBUTE_VALUE, pos)
            cursor.pos = len(text)
            cursor.mode = ScanCursor.DATA
            return Token(TokenType.ATTRIBUTE_VALUE, text[pos:], pos)
        end += 1
        token = Token(TokenType.ATTRIBUTE_VALUE, text[pos:end], pos)
        if text.startswith(quote, end):
            # Stray duplicate closing quote: foo="bar""
            end += 1
        cursor.pos = end
        return token


def scan(text, sink=None, opts=None):
    """Return the token list for text."""
    return list(Scanner(sink, opts).scan(text))
