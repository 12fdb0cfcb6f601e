"""Embedded {{ }} expression extraction.

The extractor finds every ``{{ ... }}`` span in attribute values and in the
text directly inside each tag, hands the inner text and its absolute offset
to an expression parser, and attaches the results to the owning node.

An expression parser is any callable ``(text, base_offset)`` returning either
an expression object or a ParseError. The default parses Python expressions
with the ast module.
"""

import ast

from .constants import EXPRESSION_CLOSE, EXPRESSION_OPEN
from .errors import EXPRESSION_SYNTAX_ERROR, UNTERMINATED_EMBEDDED_EXPRESSION, NullSink, generate_error_message
from .node import EmbeddedExpression
from .tokens import ParseError
from .traverse import iter_tag_nodes


def parse_python_expression(text, base_offset):
    """Parse text as a single Python expression.

    Returns the ast expression node (``{{bar}}`` gives ``ast.Name(id="bar")``)
    or a ParseError whose offset points into the whole document.
    """
    stripped = text.strip()
    lead = len(text) - len(text.lstrip())
    try:
        tree = ast.parse(stripped, mode="eval")
    except (RecursionError, MemoryError):
        message = f"{generate_error_message(EXPRESSION_SYNTAX_ERROR)}: expression is nested too deeply"
        return ParseError(EXPRESSION_SYNTAX_ERROR, message=message, offset=base_offset + lead)
    except (SyntaxError, ValueError) as exc:
        offset = base_offset + lead
        detail = getattr(exc, "msg", None) or str(exc)
        if getattr(exc, "lineno", None) == 1 and getattr(exc, "offset", None):
            offset += min(exc.offset - 1, len(stripped))
        message = f"{generate_error_message(EXPRESSION_SYNTAX_ERROR)}: {detail}"
        return ParseError(EXPRESSION_SYNTAX_ERROR, message=message, offset=offset)
    return tree.body


def find_expression_spans(text):
    """Yield (start, end) for each {{ }} span in text.

    end is None for a trailing "{{" that is never closed. Spans do not nest:
    the first "}}" after an opening "{{" ends it.
    """
    pos = 0
    open_length = len(EXPRESSION_OPEN)
    close_length = len(EXPRESSION_CLOSE)
    while True:
        start = text.find(EXPRESSION_OPEN, pos)
        if start == -1:
            return
        close = text.find(EXPRESSION_CLOSE, start + open_length)
        if close == -1:
            yield start, None
            return
        yield start, close + close_length
        pos = close + close_length


class ExpressionExtractor:
    __slots__ = ("parse_expression", "sink")

    def __init__(self, parse_expression=None, sink=None):
        self.parse_expression = parse_expression or parse_python_expression
        self.sink = sink or NullSink()

    def extract(self, text, offset):
        """Return the EmbeddedExpressions of text, which starts at offset in the document."""
        expressions = []
        open_length = len(EXPRESSION_OPEN)
        close_length = len(EXPRESSION_CLOSE)
        for start, end in find_expression_spans(text):
            if end is None:
                self.sink.report(UNTERMINATED_EMBEDDED_EXPRESSION, offset + start)
                continue
            source = text[start + open_length : end - close_length]
            result = self.parse_expression(source, offset + start + open_length)
            if isinstance(result, ParseError):
                error_offset = result.offset if result.offset is not None else offset + start
                self.sink.report(result.code, error_offset, result.message)
                expressions.append(EmbeddedExpression(offset + start, offset + end, source, error=result))
            else:
                expressions.append(EmbeddedExpression(offset + start, offset + end, source, expression=result))
        return expressions

    def annotate(self, root):
        """Attach expressions to every attribute and tag under root, in source order."""
        for node in iter_tag_nodes(root):
            for attribute in node.attributes:
                if attribute.value_offset is None:
                    continue
                attribute.expressions.extend(self.extract(attribute.text, attribute.text_offset))
            for content in node.texts:
                if content.raw:
                    continue
                node.expressions.extend(self.extract(content.text, content.offset))
        return root
