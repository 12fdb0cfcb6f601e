"""Generic traversal over the parsed tree.

The tree is made of a closed set of node kinds. walk() visits all of them in
document order without recursion, so arbitrarily deep documents are fine;
fold() reduces over the same sequence.
"""

import enum

from .node import AttributeNode, ContentText, Document, EmbeddedExpression, TagNode


class NodeKind(enum.IntEnum):
    DOCUMENT = 0
    TAG = 1
    ATTRIBUTE = 2
    CONTENT_TEXT = 3
    EMBEDDED_EXPRESSION = 4


_KINDS = {
    Document: NodeKind.DOCUMENT,
    TagNode: NodeKind.TAG,
    AttributeNode: NodeKind.ATTRIBUTE,
    ContentText: NodeKind.CONTENT_TEXT,
    EmbeddedExpression: NodeKind.EMBEDDED_EXPRESSION,
}


def node_kind(node):
    kind = _KINDS.get(type(node))
    if kind is None:
        msg = f"Not a tree node: {node!r}"
        raise TypeError(msg)
    return kind


def _start_of(node):
    if isinstance(node, ContentText):
        return node.offset
    return node.start or 0


def _owned(node, kind):
    if kind == NodeKind.DOCUMENT:
        return list(node.tag_nodes)
    if kind == NodeKind.ATTRIBUTE:
        return list(node.expressions)
    if kind != NodeKind.TAG:
        return []

    items = list(node.attributes)
    content = sorted([*node.texts, *node.tag_nodes], key=_start_of)
    for item in content:
        items.append(item)
        if isinstance(item, ContentText):
            items.extend(e for e in node.expressions if item.offset <= e.start < item.end)
    return items


def walk(node):
    """Yield (kind, node) for node and everything it owns, in document order.

    A tag is followed by its attributes (each followed by its expressions),
    then by its content texts and child tags ordered by position, each text
    followed by the expressions found in it.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        kind = node_kind(current)
        yield kind, current
        stack.extend(reversed(_owned(current, kind)))


def fold(node, fn, initial):
    """Reduce fn(accumulator, kind, node) over walk(node)."""
    accumulator = initial
    for kind, current in walk(node):
        accumulator = fn(accumulator, kind, current)
    return accumulator


def iter_tag_nodes(root):
    """Yield every TagNode under root (root included if it is one), in document order."""
    if isinstance(root, TagNode):
        stack = [root]
    else:
        stack = list(reversed(root.tag_nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.tag_nodes))
