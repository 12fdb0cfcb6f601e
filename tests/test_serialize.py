import unittest

from lenienthtml import LenientHTML, parse, to_html, to_test_format


class TestTestFormat(unittest.TestCase):
    def test_tree(self):
        doc = parse('<html a="{{x}}" b><p>hi {{ y }}</p><br></html>')
        assert to_test_format(doc) == "\n".join(
            [
                "| <html>",
                '|   a="{{x}}"',
                "|     {{x}}",
                "|   b",
                '|   "<p>hi {{ y }}</p><br>"',
                "|   <p>",
                '|     "hi {{ y }}"',
                "|     {{ y }}",
                "|   <br/>",
            ],
        )

    def test_invalid_expression_is_marked(self):
        doc = parse("<p>{{ 1 + }}</p>")
        assert to_test_format(doc) == '| <p>\n|   "{{ 1 + }}"\n|   {{ 1 + }} !'

    def test_top_level_tags(self):
        assert to_test_format(parse("<a></a><b/>")) == "| <a>\n| <b/>"

    def test_empty_document(self):
        assert to_test_format(parse("")) == ""

    def test_method(self):
        doc = LenientHTML("<p>x</p>")
        assert doc.to_test_format() == '| <p>\n|   "x"'


class TestToHtml(unittest.TestCase):
    def test_round_trip_of_clean_markup(self):
        html = '<html a="1" b><p>x</p><br></html>'
        assert to_html(parse(html)) == html

    def test_self_closing(self):
        assert to_html(parse("<p/><br/><img src=a>")) == "<p/><br><img src=a>"

    def test_unterminated_value_is_closed(self):
        assert to_html(parse('<p title="abc')) == '<p title="abc"></p>'

    def test_single_quotes_are_kept(self):
        assert to_html(parse("<p title='a\"b'>x</p>")) == "<p title='a\"b'>x</p>"

    def test_content_is_written_as_parsed(self):
        assert to_html(parse("<div><p>text")) == "<div><p>text</div>"
        assert to_html(parse("<div><!-- c --><p>x</p></div>")) == "<div><!-- c --><p>x</p></div>"

    def test_whitespace_inside_nested_tags_is_dropped(self):
        div = parse('<div><p  class="a" >x</p></div>').tag_nodes[0]
        assert to_html(div.tag_nodes[0]) == '<p class="a">x</p>'
        assert div.content == '<pclass="a">x</p>'

    def test_method(self):
        assert LenientHTML("<b>x</b>").to_html() == "<b>x</b>"


if __name__ == "__main__":
    unittest.main()
