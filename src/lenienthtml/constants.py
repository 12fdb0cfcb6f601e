"""Element Constants

Element sets that change how the scanner and tree builder treat a tag.
Kept as lists for stable iteration order; the scanner and tree builder build
lowercase frozensets from them.

Usage:
    from lenienthtml.constants import VOID_ELEMENTS, RAW_TEXT_ELEMENTS
"""

# Elements that never have content or children, with or without "/>"
VOID_ELEMENTS = [
    "area",
    "base",
    "basefont",
    "bgsound",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

# Elements whose body is a single run of text, never re-tokenized as markup
RAW_TEXT_ELEMENTS = [
    "script",
    "style",
]

# Embedded expression delimiters
EXPRESSION_OPEN = "{{"
EXPRESSION_CLOSE = "}}"

WHITESPACE = " \t\n\r\f"
