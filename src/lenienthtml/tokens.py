class TokenType:
    __slots__ = ()

    EOF = 0
    LT = 1
    LT_SLASH = 2
    TAG_NAME = 3
    ATTRIBUTE_NAME = 4
    EQ = 5
    ATTRIBUTE_VALUE = 6
    GT = 7
    SLASH_GT = 8
    COMMENT = 9
    DECLARATION = 10
    DIRECTIVE = 11
    TEXT = 12

    NAMES = {
        EOF: "EOF",
        LT: "LT",
        LT_SLASH: "LT_SLASH",
        TAG_NAME: "TAG_NAME",
        ATTRIBUTE_NAME: "ATTRIBUTE_NAME",
        EQ: "EQ",
        ATTRIBUTE_VALUE: "ATTRIBUTE_VALUE",
        GT: "GT",
        SLASH_GT: "SLASH_GT",
        COMMENT: "COMMENT",
        DECLARATION: "DECLARATION",
        DIRECTIVE: "DIRECTIVE",
        TEXT: "TEXT",
    }


class Token:
    __slots__ = ("kind", "lexeme", "offset")

    def __init__(self, kind, lexeme, offset):
        self.kind = kind
        self.lexeme = lexeme
        self.offset = offset

    @property
    def end(self):
        return self.offset + len(self.lexeme)

    def __repr__(self):
        kind_str = TokenType.NAMES.get(self.kind, str(self.kind))
        return f"<{kind_str}@{self.offset} {self.lexeme!r}>"


class ParseError:
    """Represents a parse error with location information."""

    __slots__ = ("code", "column", "line", "message", "offset", "source_name", "_source_html")

    def __init__(self, code, line=None, column=None, message=None, offset=None, source_name=None, source_html=None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code
        self.offset = offset
        self.source_name = source_name
        self._source_html = source_html

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        if self.offset is not None:
            return f"ParseError({self.code!r}, offset={self.offset})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        prefix = f"{self.source_name}:" if self.source_name else ""
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"{prefix}({self.line},{self.column}): {self.code} - {self.message}"
            return f"{prefix}({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{prefix}{self.code} - {self.message}"
        return f"{prefix}{self.code}"

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            self.code == other.code
            and self.line == other.line
            and self.column == other.column
            and self.offset == other.offset
        )

    __hash__ = None  # Unhashable since we define __eq__

    def as_exception(self):
        """Convert to a SyntaxError pointing at the error location in the source."""
        exc = SyntaxError(self.message)
        exc.msg = self.message
        if self.line is None or self.column is None or not self._source_html:
            return exc

        lines = self._source_html.split("\n")
        if self.line < 1 or self.line > len(lines):
            return exc

        exc.filename = self.source_name or "<html>"
        exc.lineno = self.line
        exc.offset = self.column
        exc.text = lines[self.line - 1]
        return exc
