"""Error messages and the default diagnostics sink.

Every structural and embedded-expression problem is reported through a sink
with a ``report(code, offset, message=None)`` method. Reporting never raises;
the parser keeps going and the caller inspects the collected errors.
"""

from bisect import bisect_right

from .tokens import ParseError

UNTERMINATED_ATTRIBUTE_VALUE = "unterminated-attribute-value"
UNTERMINATED_COMMENT = "unterminated-comment"
UNTERMINATED_TAG = "unterminated-tag"
MISMATCHED_CLOSE_TAG = "mismatched-close-tag"
UNTERMINATED_EMBEDDED_EXPRESSION = "unterminated-embedded-expression"
EXPRESSION_SYNTAX_ERROR = "expression-syntax-error"


def generate_error_message(code, tag_name=None):
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        tag_name: Optional tag name to include in the message for context

    Returns:
        Human-readable error message string
    """
    messages = {
        # Scanner errors
        UNTERMINATED_ATTRIBUTE_VALUE: "Unexpected end of file in quoted attribute value",
        UNTERMINATED_COMMENT: "Unexpected end of file in comment",
        UNTERMINATED_TAG: f"Unexpected end of tag <{tag_name}> before >" if tag_name else "Unexpected end of tag before >",
        # Tree builder errors
        MISMATCHED_CLOSE_TAG: f"Unexpected </{tag_name}> end tag with no open <{tag_name}>",
        # Embedded expression errors
        UNTERMINATED_EMBEDDED_EXPRESSION: "Embedded expression opened with {{ is never closed with }}",
        EXPRESSION_SYNTAX_ERROR: "Invalid embedded expression",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)


class ErrorCollector:
    """Default sink: stores reports as ParseErrors with line and column."""

    __slots__ = ("_newline_positions", "errors", "source", "source_name")

    def __init__(self, source="", source_name=None):
        self.source = source
        self.source_name = source_name
        self.errors = []

        # Pre-compute newline positions for O(log n) line lookups
        self._newline_positions = []
        pos = -1
        while True:
            pos = source.find("\n", pos + 1)
            if pos == -1:
                break
            self._newline_positions.append(pos)

    def line_and_column(self, offset):
        """Return the 1-indexed (line, column) of an offset into the source."""
        line_index = bisect_right(self._newline_positions, offset - 1)
        line_start = self._newline_positions[line_index - 1] + 1 if line_index else 0
        return line_index + 1, offset - line_start + 1

    def report(self, code, offset, message=None):
        line, column = self.line_and_column(offset)
        self.errors.append(
            ParseError(
                code,
                line=line,
                column=column,
                message=message or generate_error_message(code),
                offset=offset,
                source_name=self.source_name,
                source_html=self.source,
            ),
        )


class NullSink:
    """Sink that drops every report, used when errors are not collected."""

    __slots__ = ()

    errors = ()

    def report(self, code, offset, message=None):
        return None
