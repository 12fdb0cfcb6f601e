"""Minimal LenientHTML parser entry point."""

from .errors import ErrorCollector, NullSink
from .expressions import ExpressionExtractor
from .scanner import Scanner, ScannerOpts
from .selector import query
from .serialize import to_html, to_test_format
from .treebuilder import TreeBuilder, TreeBuilderOpts


class StrictModeError(SyntaxError):
    """Raised when strict mode encounters a parse error.

    Inherits from SyntaxError so the error location is displayed like a
    Python syntax error.
    """

    def __init__(self, error):
        self.error = error
        exc = error.as_exception()
        super().__init__(exc.msg)
        self.filename = exc.filename
        self.lineno = exc.lineno
        self.offset = exc.offset
        self.text = exc.text


class LenientHTML:
    __slots__ = ("debug", "errors", "root", "scanner", "source_name", "tokens", "tree_builder")

    def __init__(
        self,
        html,
        *,
        collect_errors=False,
        debug=False,
        error_sink=None,
        expression_parser=None,
        scanner_opts=None,
        source_name=None,
        strict=False,
        tree_builder_opts=None,
    ):
        self.debug = bool(debug)
        self.source_name = source_name

        if isinstance(html, (bytes, bytearray, memoryview)):
            html_str = bytes(html).decode("utf-8", errors="replace")
        elif html is not None:
            html_str = str(html)
        else:
            html_str = ""

        # Enable error collection if strict mode is on
        collector = None
        if error_sink is not None:
            sink = error_sink
        elif collect_errors or strict:
            sink = collector = ErrorCollector(html_str, source_name)
        else:
            sink = NullSink()

        scanner_opts = scanner_opts or ScannerOpts()
        if tree_builder_opts is None:
            tree_builder_opts = TreeBuilderOpts(raw_text_elements=scanner_opts.raw_text_elements)

        self.scanner = Scanner(sink, scanner_opts)
        self.tree_builder = TreeBuilder(sink, tree_builder_opts, debug=self.debug)

        self.tokens = list(self.scanner.scan(html_str))
        self._debug(f"scanned {len(self.tokens)} tokens from {source_name or '<string>'}")
        self.root = self.tree_builder.build(self.tokens, source_name)
        ExpressionExtractor(expression_parser, sink).annotate(self.root)
        self.root.freeze()

        self.errors = list(collector.errors) if collector is not None else list(getattr(sink, "errors", ()))
        self._debug(f"parse finished with {len(self.errors)} errors")

        # In strict mode, raise on first error
        if strict and self.errors:
            raise StrictModeError(self.errors[0])

    def _debug(self, message, indent=0):
        if self.debug:
            print(f"{' ' * indent}LenientHTML: {message}")

    @property
    def tag_nodes(self):
        return self.root.tag_nodes

    def query(self, pattern, case_sensitive=True):
        """Return the tags whose name matches the regular expression pattern."""
        return query(self.root, pattern, case_sensitive=case_sensitive)

    def to_html(self):
        return to_html(self.root)

    def to_test_format(self):
        return to_test_format(self.root)


def parse(html, **kwargs):
    """Parse html and return the Document. Keyword arguments go to LenientHTML."""
    return LenientHTML(html, **kwargs).root
