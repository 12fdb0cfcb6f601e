class AttributeNode:
    """A name/value pair of a start tag.

    - name: attribute name as written
    - value: raw value text including its quotes, exactly as scanned
    - quote: '"', "'" or None for unquoted and valueless attributes
    - expressions: embedded {{ }} expressions found in the value
    """

    __slots__ = ("expressions", "name", "offset", "quote", "value", "value_offset")

    def __init__(self, name, value="", offset=None, value_offset=None):
        self.name = name
        self.value = value
        self.offset = offset
        self.value_offset = value_offset
        self.quote = value[0] if value and value[0] in "\"'" else None
        self.expressions = []

    @property
    def text(self):
        """The value with its delimiting quotes removed."""
        value = self.value
        quote = self.quote
        if quote is None:
            return value
        if len(value) > 1 and value.endswith(quote):
            return value[1:-1]
        return value[1:]

    @property
    def text_offset(self):
        if self.value_offset is None:
            return None
        return self.value_offset + (1 if self.quote else 0)

    def freeze(self):
        self.expressions = tuple(self.expressions)

    def __repr__(self):
        return f"<AttributeNode {self.name}={self.value!r}>"


class ContentText:
    """A run of text directly inside a tag (not inside any of its children)."""

    __slots__ = ("offset", "raw", "text")

    def __init__(self, text, offset, raw=False):
        self.text = text
        self.offset = offset
        self.raw = raw

    @property
    def end(self):
        return self.offset + len(self.text)

    def __repr__(self):
        return f"<ContentText@{self.offset} {self.text!r}>"


class EmbeddedExpression:
    """A {{ }} span and what the expression parser made of it.

    start/end cover the delimiters. Exactly one of expression and error is set.
    """

    __slots__ = ("end", "error", "expression", "source", "start")

    def __init__(self, start, end, source, expression=None, error=None):
        self.start = start
        self.end = end
        self.source = source
        self.expression = expression
        self.error = error

    @property
    def is_valid(self):
        return self.error is None

    def __repr__(self):
        return f"<EmbeddedExpression@{self.start} {{{{{self.source}}}}}>"


class TagNode:
    """A parsed element.

    - name: tag name, case as written
    - attributes: AttributeNodes in source order, duplicates kept
    - tag_nodes: child TagNodes in source order
    - content: literal token text between the start tag's ">" and the
      matching "</", whitespace inside nested tag delimiters excluded
    - texts: ContentText runs directly inside this node
    - expressions: embedded expressions found in texts
    """

    __slots__ = (
        "attributes",
        "content",
        "end",
        "expressions",
        "name",
        "parent",
        "self_closing",
        "start",
        "tag_nodes",
        "texts",
    )

    def __init__(self, name, start=None):
        self.name = name
        self.start = start
        self.end = None
        self.attributes = []
        self.tag_nodes = []
        self.texts = []
        self.expressions = []
        self.content = ""
        self.self_closing = False
        self.parent = None

    @property
    def children(self):
        return self.tag_nodes

    def append_child(self, child):
        if child.parent is not None:
            msg = f"<{child.name}> already belongs to <{child.parent.name}>"
            raise ValueError(msg)
        child.parent = self
        self.tag_nodes.append(child)

    def get_attribute(self, name):
        """Return the first attribute called name, or None."""
        if name is None:
            return None
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get_attribute_text(self, name):
        """Return the quote-stripped value of the first attribute called name, or None."""
        attribute = self.get_attribute(name)
        if attribute is None:
            return None
        return attribute.text

    def freeze(self):
        """Turn this node's lists into tuples; children are frozen by Document.freeze()."""
        for attribute in self.attributes:
            attribute.freeze()
        self.attributes = tuple(self.attributes)
        self.tag_nodes = tuple(self.tag_nodes)
        self.texts = tuple(self.texts)
        self.expressions = tuple(self.expressions)

    def __repr__(self):
        closing = " /" if self.self_closing else ""
        return f"<TagNode {self.name}{closing}>"


class Document:
    """Root container of a parse: the top-level tags, usually just one."""

    __slots__ = ("source_name", "tag_nodes")

    name = "#document"

    def __init__(self, source_name=None):
        self.source_name = source_name
        self.tag_nodes = []

    @property
    def children(self):
        return self.tag_nodes

    def append_child(self, child):
        if child.parent is not None:
            msg = f"<{child.name}> already belongs to <{child.parent.name}>"
            raise ValueError(msg)
        self.tag_nodes.append(child)

    def freeze(self):
        pending = list(self.tag_nodes)
        while pending:
            node = pending.pop()
            pending.extend(node.tag_nodes)
            node.freeze()
        self.tag_nodes = tuple(self.tag_nodes)

    def __repr__(self):
        return f"<Document {len(self.tag_nodes)} tags>"
