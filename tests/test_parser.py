"""End-to-end parsing tests: attributes, comments, content and recovery."""

import ast
import io
import unittest
from contextlib import redirect_stdout

from lenienthtml import LenientHTML, parse, to_test_format


def _first_child(html):
    doc = parse(html)
    return doc.tag_nodes[0].tag_nodes[0]


class TestAttributes(unittest.TestCase):
    def test_attribute_value_keeps_quotes(self):
        body = _first_child('<html><body foo="sdfsdf"></body></html>')
        attribute = body.attributes[0]
        assert attribute.name == "foo"
        assert attribute.value == '"sdfsdf"'
        assert attribute.quote == '"'
        assert attribute.text == "sdfsdf"
        assert body.content == ""

    def test_attribute_eof_after_value(self):
        """A start tag cut off after a complete value still yields the node."""
        body = _first_child('<html><body foo="sdfsdf"')
        assert body.name == "body"
        assert body.attributes[0].value == '"sdfsdf"'
        assert body.content == ""

    def test_attribute_eof_missing_quote(self):
        body = _first_child('<html><body foo="sdfsd')
        assert body.attributes[0].value == '"sdfsd'
        assert body.attributes[0].text == "sdfsd"
        assert body.get_attribute_text("foo") == "sdfsd"

    def test_attribute_extra_quote_is_discarded(self):
        doc = LenientHTML('<html><body foo="sdfsdf""></body></html>', collect_errors=True)
        body = doc.root.tag_nodes[0].tag_nodes[0]
        assert body.attributes[0].value == '"sdfsdf"'
        assert body.get_attribute_text("foo") == "sdfsdf"
        assert len(body.attributes) == 1
        assert body.content == ""
        assert doc.errors == []

    def test_attribute_single_quote(self):
        body = _first_child("<html><body foo='sdfsdf'></body></html>")
        assert body.attributes[0].value == "'sdfsdf'"
        assert body.attributes[0].quote == "'"
        assert body.attributes[0].text == "sdfsdf"

    def test_attribute_unquoted_and_valueless(self):
        node = parse("<input type=text disabled>").tag_nodes[0]
        assert [a.name for a in node.attributes] == ["type", "disabled"]
        assert node.get_attribute("type").value == "text"
        assert node.get_attribute("type").quote is None
        assert node.get_attribute_text("disabled") == ""

    def test_duplicate_attributes_are_preserved(self):
        node = parse('<p id="a" id="b"></p>').tag_nodes[0]
        assert [a.value for a in node.attributes] == ['"a"', '"b"']
        assert node.get_attribute_text("id") == "a"

    def test_get_attribute(self):
        body = _first_child('<html><body foo="sdfsdf"></body></html>')
        assert body.get_attribute("foo").text == "sdfsdf"
        assert body.get_attribute("bar") is None
        assert body.get_attribute(None) is None

    def test_get_attribute_text(self):
        body = _first_child('<html><body foo="sdfsdf"></body></html>')
        assert body.get_attribute_text("foo") == "sdfsdf"
        assert body.get_attribute_text("bar") is None
        assert body.get_attribute_text(None) is None

    def test_attribute_with_embedded_expression(self):
        body = _first_child("<html><body foo='{{bar}}'></body></html>")
        expressions = body.attributes[0].expressions
        assert len(expressions) == 1
        expression = expressions[0].expression
        assert isinstance(expression, ast.Name)
        assert expression.id == "bar"


class TestComments(unittest.TestCase):
    def test_comment_inside_start_tag(self):
        html = parse("<html <!-- comment -->></html>").tag_nodes[0]
        assert html.name == "html"
        assert html.content == ""
        assert html.attributes == ()

    def test_comment_first(self):
        doc = parse("<!-- comment --><html></html>")
        assert len(doc.tag_nodes) == 1
        assert doc.tag_nodes[0].name == "html"
        assert doc.tag_nodes[0].content == ""

    def test_comment_in_content(self):
        html = parse("<html><!-- comment --></html>").tag_nodes[0]
        assert html.content == "<!-- comment -->"
        assert html.tag_nodes == ()


class TestContent(unittest.TestCase):
    def test_content_excludes_whitespace_inside_nested_tags(self):
        html = parse('<html>\n<p a="b">blat \n </p>\n</html>').tag_nodes[0]
        assert html.content == '\n<pa="b">blat \n </p>\n'
        p = html.tag_nodes[0]
        assert p.get_attribute("a").value == '"b"'
        assert p.content == "blat \n "

    def test_content_none(self):
        html = parse("<html><p/>blat<p/></html>").tag_nodes[0]
        assert html.content == "<p/>blat<p/>"
        assert [p.name for p in html.tag_nodes] == ["p", "p"]
        assert all(p.self_closing and p.content == "" for p in html.tag_nodes)

    def test_content_with_embedded_expression(self):
        html = parse("<html><body><p>abc {{elipsis}} xyz</p></body></html>").tag_nodes[0]
        body = html.tag_nodes[0]
        p = body.tag_nodes[0]
        assert len(p.expressions) == 1
        assert isinstance(p.expressions[0].expression, ast.Name)
        assert p.expressions[0].expression.id == "elipsis"
        # Only the tag whose text holds the expression owns it
        assert body.expressions == ()
        assert html.expressions == ()

    def test_declaration(self):
        doc = parse("<!DOCTYPE html>\n\n<html><p></p></html>")
        assert to_test_format(doc) == '| <html>\n|   "<p></p>"\n|   <p>'

    def test_directive(self):
        doc = parse('<?xml version="1.0" ?>\n\n<html><p></p></html>')
        assert [node.name for node in doc.tag_nodes] == ["html"]
        assert doc.tag_nodes[0].tag_nodes[0].name == "p"

    def test_self_closing_declaration(self):
        doc = parse("<!DOCTYPE html><html>foo</html>")
        assert len(doc.tag_nodes) == 1
        assert doc.tag_nodes[0].content == "foo"

    def test_script_body_is_raw_text(self):
        html = parse("<html><script >here is <p> some</script></html>").tag_nodes[0]
        assert len(html.tag_nodes) == 1
        script = html.tag_nodes[0]
        assert script.name == "script"
        assert script.content == "here is <p> some"
        assert script.tag_nodes == ()

    def test_void_element(self):
        html = parse("<html>foo<br>bar</html>").tag_nodes[0]
        assert html.content == "foo<br>bar"
        br = html.tag_nodes[0]
        assert br.name == "br"
        assert br.self_closing
        assert br.content == ""
        assert br.tag_nodes == ()

    def test_leaf_content_is_stable_under_reparse(self):
        p = parse("<div><p>plain text, {{ value }} and more</p></div>").tag_nodes[0].tag_nodes[0]
        again = parse(f"<p>{p.content}</p>").tag_nodes[0]
        assert again.content == p.content
        assert [e.source for e in again.expressions] == [e.source for e in p.expressions]


class TestRecovery(unittest.TestCase):
    def test_missing_end_tags_close_at_eof(self):
        html = parse("<html><body>text").tag_nodes[0]
        body = html.tag_nodes[0]
        assert body.content == "text"
        assert html.content == "<body>text"

    def test_end_tag_closes_nearest_matching_element(self):
        div = parse("<div><p><b>text</p></div>").tag_nodes[0]
        p = div.tag_nodes[0]
        b = p.tag_nodes[0]
        assert b.content == "text"
        assert p.content == "<b>text"
        assert div.content == "<p><b>text</p>"

    def test_end_tag_matching_ignores_case(self):
        node = parse("<DIV>x</div>").tag_nodes[0]
        assert node.name == "DIV"
        assert node.content == "x"

    def test_unmatched_end_tag_is_ignored(self):
        doc = LenientHTML("<html><p>x</div></html>", collect_errors=True)
        html = doc.root.tag_nodes[0]
        p = html.tag_nodes[0]
        assert p.content == "x</div>"
        assert [e.code for e in doc.errors] == ["mismatched-close-tag"]
        assert doc.errors[0].offset == 10

    def test_start_tag_interrupted_by_another_tag(self):
        doc = LenientHTML("<html <p>x</p></html>", collect_errors=True)
        html = doc.root.tag_nodes[0]
        assert html.content == "<p>x</p>"
        assert html.tag_nodes[0].content == "x"
        assert [e.code for e in doc.errors] == ["unterminated-tag"]

    def test_raw_text_start_tag_interrupted_by_another_tag(self):
        doc = LenientHTML("<div><script <p>x</p></script></div>", collect_errors=True)
        script = doc.root.tag_nodes[0].tag_nodes[0]
        assert script.content == "<p>x</p>"
        assert script.tag_nodes == ()
        assert script.texts[0].raw
        assert [e.code for e in doc.errors] == ["unterminated-tag"]

    def test_non_ascii_tag_names_are_text(self):
        doc = LenientHTML("<a>y<é>x</é></a>", collect_errors=True)
        a = doc.root.tag_nodes[0]
        assert a.tag_nodes == ()
        assert a.content == "y<é>x</é>"
        assert doc.errors == []
        assert parse("<é>x</é>").tag_nodes == ()

    def test_top_level_text_is_dropped(self):
        doc = parse("before<p>in</p>after")
        assert [node.name for node in doc.tag_nodes] == ["p"]

    def test_multiple_top_level_tags(self):
        doc = parse("<a></a><b></b>")
        assert [node.name for node in doc.tag_nodes] == ["a", "b"]

    def test_empty_and_garbage_input(self):
        assert parse("").tag_nodes == ()
        assert parse(None).tag_nodes == ()
        doc = LenientHTML("<<<>>> < / >", collect_errors=True)
        assert doc.root.tag_nodes == ()
        assert doc.errors == []

    def test_bytes_input(self):
        doc = parse('<p title="café">x</p>'.encode())
        assert doc.tag_nodes[0].get_attribute_text("title") == "café"

    def test_tree_is_frozen(self):
        html = parse('<html a="1"><p>{{x}}</p></html>').tag_nodes[0]
        assert isinstance(html.tag_nodes, tuple)
        assert isinstance(html.attributes, tuple)
        assert isinstance(html.tag_nodes[0].expressions, tuple)
        assert isinstance(html.attributes[0].expressions, tuple)

    def test_offsets(self):
        p = parse("<div><p>x</p></div>").tag_nodes[0].tag_nodes[0]
        assert p.start == 5
        assert p.end == 13
        assert p.parent.name == "div"

    def test_deep_nesting(self):
        depth = 1500
        doc = parse("<div>" * depth + "x")
        node = doc.tag_nodes[0]
        levels = 1
        while node.tag_nodes:
            node = node.tag_nodes[0]
            levels += 1
        assert levels == depth
        assert node.content == "x"


class TestDebug(unittest.TestCase):
    def test_debug_trace(self):
        out = io.StringIO()
        with redirect_stdout(out):
            LenientHTML("<div><p>x</div></span>", debug=True)
        lines = out.getvalue().splitlines()
        assert lines[0] == "LenientHTML: scanned 14 tokens from <string>"
        assert "    TreeBuilder: opened <div> at 0" in lines
        assert "    TreeBuilder: </div> implicitly closes <p>" in lines
        assert "    TreeBuilder: ignoring </span> with no matching open element" in lines
        assert lines[-1] == "LenientHTML: parse finished with 0 errors"

    def test_silent_by_default(self):
        out = io.StringIO()
        with redirect_stdout(out):
            LenientHTML("<div><p>x</div></span>")
        assert out.getvalue() == ""


if __name__ == "__main__":
    unittest.main()
