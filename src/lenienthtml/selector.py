"""Tag name matching with regular expressions."""

import re

from .traverse import iter_tag_nodes


class SelectorError(ValueError):
    """Raised when a name pattern is not a valid regular expression."""


def _compile(pattern, case_sensitive):
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        msg = f"Invalid name pattern {pattern!r}: {e}"
        raise SelectorError(msg) from e


def matches(pattern, text, case_sensitive=True):
    """Return True if the whole of text matches the regular expression pattern."""
    if text is None:
        return False
    return _compile(pattern, case_sensitive).fullmatch(text) is not None


def query(root, pattern, case_sensitive=True):
    """Return the TagNodes under root whose name matches pattern, in document order."""
    compiled = _compile(pattern, case_sensitive)
    return [node for node in iter_tag_nodes(root) if compiled.fullmatch(node.name) is not None]
