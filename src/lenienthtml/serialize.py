"""Serialization of parsed trees.

to_test_format() renders a tree as '| ' prefixed, indented lines for asserting
tree shape in tests. to_html() turns a tree back into markup.
"""

from .constants import VOID_ELEMENTS

_VOID_ELEMENTS = frozenset(VOID_ELEMENTS)


def to_test_format(node, indent=0):
    """Convert a Document or TagNode to test format string."""
    if node.name == "#document":
        parts = []
        for child in node.tag_nodes:
            parts.append(to_test_format(child, 0))
        return "\n".join(parts)

    padding = " " * (indent + 2)
    closing = "/" if node.self_closing else ""
    sections = [f"| {' ' * indent}<{node.name}{closing}>"]
    for attribute in node.attributes:
        sections.append(f"| {padding}{_format_attribute(attribute)}")
        for expression in attribute.expressions:
            sections.append(f"| {padding}  {_format_expression(expression)}")
    if node.content:
        sections.append(f'| {padding}"{node.content}"')
    for expression in node.expressions:
        sections.append(f"| {padding}{_format_expression(expression)}")
    for child in node.tag_nodes:
        sections.append(to_test_format(child, indent + 2))
    return "\n".join(sections)


def _format_attribute(attribute):
    if attribute.value_offset is None:
        return attribute.name
    return f"{attribute.name}={attribute.value}"


def _format_expression(expression):
    marker = "" if expression.is_valid else " !"
    return f"{{{{{expression.source}}}}}{marker}"


def to_html(node):
    """Convert a Document or TagNode back to markup.

    Content is written as parsed, so comments and nested markup survive;
    whitespace that sat inside nested tag delimiters does not.
    """
    if node.name == "#document":
        return "".join(to_html(child) for child in node.tag_nodes)

    start = f"<{node.name}{_format_attributes(node)}"
    if node.self_closing:
        if node.name.lower() in _VOID_ELEMENTS:
            return f"{start}>"
        return f"{start}/>"
    return f"{start}>{node.content}</{node.name}>"


def _format_attributes(node):
    parts = []
    for attribute in node.attributes:
        if attribute.value_offset is None:
            parts.append(attribute.name)
        elif attribute.quote:
            # Re-close values that ran into end of input
            quote = attribute.quote
            parts.append(f"{attribute.name}={quote}{attribute.text}{quote}")
        else:
            parts.append(f"{attribute.name}={attribute.value}")
    if not parts:
        return ""
    return " " + " ".join(parts)
