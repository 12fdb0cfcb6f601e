from .errors import ErrorCollector, generate_error_message
from .expressions import ExpressionExtractor, parse_python_expression
from .node import AttributeNode, ContentText, Document, EmbeddedExpression, TagNode
from .parser import LenientHTML, StrictModeError, parse
from .scanner import Scanner, ScannerOpts, scan
from .selector import SelectorError, matches, query
from .serialize import to_html, to_test_format
from .tokens import ParseError, Token, TokenType
from .traverse import NodeKind, fold, walk
from .treebuilder import TreeBuilder, TreeBuilderOpts

__all__ = [
    "AttributeNode",
    "ContentText",
    "Document",
    "EmbeddedExpression",
    "ErrorCollector",
    "ExpressionExtractor",
    "LenientHTML",
    "NodeKind",
    "ParseError",
    "Scanner",
    "ScannerOpts",
    "SelectorError",
    "StrictModeError",
    "TagNode",
    "Token",
    "TokenType",
    "TreeBuilder",
    "TreeBuilderOpts",
    "fold",
    "generate_error_message",
    "matches",
    "parse",
    "parse_python_expression",
    "query",
    "scan",
    "to_html",
    "to_test_format",
    "walk",
]
