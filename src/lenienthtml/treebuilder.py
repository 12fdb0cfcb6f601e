from .constants import RAW_TEXT_ELEMENTS, VOID_ELEMENTS
from .errors import MISMATCHED_CLOSE_TAG, NullSink, generate_error_message
from .node import AttributeNode, ContentText, Document, TagNode
from .tokens import TokenType

# Tokens that end a start or end tag that never saw its ">"
_TAG_INTERRUPTING_TOKENS = frozenset((TokenType.LT, TokenType.LT_SLASH, TokenType.TEXT, TokenType.EOF))


class TreeBuilderOpts:
    __slots__ = ("raw_text_elements", "void_elements")

    def __init__(self, void_elements=None, raw_text_elements=None):
        if void_elements is None:
            void_elements = VOID_ELEMENTS
        if raw_text_elements is None:
            raw_text_elements = RAW_TEXT_ELEMENTS
        self.void_elements = frozenset(name.lower() for name in void_elements)
        self.raw_text_elements = frozenset(name.lower() for name in raw_text_elements)


class TokenText:
    """The concatenated lexemes of a token list, sliceable by token index."""

    __slots__ = ("_positions", "_text")

    def __init__(self, tokens):
        positions = [0]
        total = 0
        for token in tokens:
            total += len(token.lexeme)
            positions.append(total)
        self._positions = positions
        self._text = "".join(token.lexeme for token in tokens)

    def between(self, start, end):
        return self._text[self._positions[start] : self._positions[end]]


class OpenElement:
    """Stack entry: a node still waiting for its end tag."""

    __slots__ = ("content_start", "node")

    def __init__(self, node, content_start):
        self.node = node
        self.content_start = content_start


class TreeBuilder:
    """Builds a Document from the scanner's tokens in a single left-to-right pass.

    Recovery rules:
    - a start tag without ">" still opens its element
    - void elements close immediately, with or without "/>"
    - an end tag closes the nearest open element of the same name (ignoring
      case), implicitly closing everything opened after it
    - an end tag with no open element of that name is reported and ignored
    - elements still open at end of input are closed there
    """

    __slots__ = ("env_debug", "opts", "sink")

    def __init__(self, sink=None, opts=None, debug=False):
        self.sink = sink or NullSink()
        self.opts = opts or TreeBuilderOpts()
        self.env_debug = bool(debug)

    def debug(self, message, indent=4):
        if self.env_debug:
            print(f"{' ' * indent}TreeBuilder: {message}")

    def build(self, tokens, source_name=None):
        tokens = tokens if isinstance(tokens, list) else list(tokens)
        token_text = TokenText(tokens)
        document = Document(source_name)
        open_elements = []
        count = len(tokens)
        index = 0
        while index < count:
            token = tokens[index]
            kind = token.kind
            if kind == TokenType.LT:
                index = self._process_start_tag(tokens, index, document, open_elements)
            elif kind == TokenType.LT_SLASH:
                index = self._process_end_tag(tokens, token_text, index, open_elements)
            elif kind == TokenType.TEXT:
                if open_elements:
                    node = open_elements[-1].node
                    raw = node.name.lower() in self.opts.raw_text_elements
                    node.texts.append(ContentText(token.lexeme, token.offset, raw=raw))
                index += 1
            elif kind == TokenType.EOF:
                self._close_all(token_text, index, token.offset, open_elements)
                index += 1
            else:
                # Comments, declarations, directives and stray tag pieces
                index += 1

        if open_elements:
            end = tokens[-1].end if tokens else 0
            self._close_all(token_text, count, end, open_elements)
        return document

    # ---------------------
    # Token handlers
    # ---------------------

    def _process_start_tag(self, tokens, index, document, open_elements):
        count = len(tokens)
        start = tokens[index].offset
        index += 1
        if index >= count or tokens[index].kind != TokenType.TAG_NAME:
            return index

        node = TagNode(tokens[index].lexeme, start=start)
        parent = open_elements[-1].node if open_elements else document
        parent.append_child(node)
        index += 1

        name_token = None
        value_token = None
        awaiting_value = False
        terminated = False
        while index < count:
            token = tokens[index]
            kind = token.kind
            if kind == TokenType.ATTRIBUTE_NAME:
                if name_token is not None:
                    node.attributes.append(self._make_attribute(name_token, value_token))
                name_token = token
                value_token = None
                awaiting_value = False
            elif kind == TokenType.EQ:
                awaiting_value = name_token is not None and value_token is None
            elif kind == TokenType.ATTRIBUTE_VALUE:
                if name_token is not None and value_token is None and awaiting_value:
                    value_token = token
                awaiting_value = False
            elif kind == TokenType.GT or kind == TokenType.SLASH_GT:
                node.self_closing = kind == TokenType.SLASH_GT
                node.end = token.end
                terminated = True
                index += 1
                break
            elif kind in _TAG_INTERRUPTING_TOKENS:
                break
            index += 1
        if name_token is not None:
            node.attributes.append(self._make_attribute(name_token, value_token))

        if not terminated:
            self.debug(f"<{node.name}> has no '>', treating it as opened")
            node.end = tokens[index - 1].end

        if node.name.lower() in self.opts.void_elements:
            node.self_closing = True
        if node.self_closing:
            self.debug(f"<{node.name}> is self-closing")
            return index

        self.debug(f"opened <{node.name}> at {start}")
        open_elements.append(OpenElement(node, index))
        return index

    def _process_end_tag(self, tokens, token_text, index, open_elements):
        count = len(tokens)
        content_end = index
        end_start = tokens[index].offset
        end = tokens[index].end
        index += 1
        name = None
        while index < count:
            token = tokens[index]
            kind = token.kind
            if kind in _TAG_INTERRUPTING_TOKENS:
                break
            end = token.end
            index += 1
            if kind == TokenType.TAG_NAME and name is None:
                name = token.lexeme
            elif kind == TokenType.GT or kind == TokenType.SLASH_GT:
                break

        target = name.lower() if name is not None else None
        for position in range(len(open_elements) - 1, -1, -1):
            if open_elements[position].node.name.lower() == target:
                break
        else:
            self.debug(f"ignoring </{name}> with no matching open element")
            self.sink.report(
                MISMATCHED_CLOSE_TAG,
                end_start,
                generate_error_message(MISMATCHED_CLOSE_TAG, name or ""),
            )
            return index

        while len(open_elements) > position + 1:
            entry = open_elements.pop()
            self.debug(f"</{name}> implicitly closes <{entry.node.name}>")
            self._close(token_text, entry, content_end, end_start)
        self._close(token_text, open_elements.pop(), content_end, end)
        return index

    # ---------------------
    # Helper methods
    # ---------------------

    def _make_attribute(self, name_token, value_token):
        if value_token is None:
            return AttributeNode(name_token.lexeme, offset=name_token.offset)
        return AttributeNode(
            name_token.lexeme,
            value_token.lexeme,
            offset=name_token.offset,
            value_offset=value_token.offset,
        )

    def _close(self, token_text, entry, content_end, end):
        node = entry.node
        node.content = token_text.between(entry.content_start, content_end)
        node.end = end

    def _close_all(self, token_text, content_end, end, open_elements):
        while open_elements:
            entry = open_elements.pop()
            self.debug(f"end of input closes <{entry.node.name}>")
            self._close(token_text, entry, content_end, end)
