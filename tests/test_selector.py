import unittest

from lenienthtml import LenientHTML, SelectorError, matches, parse, query


class TestMatches(unittest.TestCase):
    def test_whole_name_must_match(self):
        assert matches("h[1-6]", "h2")
        assert not matches("h[1-6]", "h10")
        assert not matches("div", "divider")
        assert matches(".*", "")

    def test_case_sensitivity(self):
        assert not matches("DIV", "div")
        assert matches("DIV", "div", case_sensitive=False)
        assert matches("div", "DiV", False)

    def test_missing_text_never_matches(self):
        assert not matches(".*", None)

    def test_invalid_pattern(self):
        with self.assertRaises(SelectorError):
            matches("h[1-", "h1")
        with self.assertRaises(ValueError):
            matches("(", "x")


class TestQuery(unittest.TestCase):
    HTML = "<body><h1>a</h1><div><h2>b</h2></div><H3>c</H3></body>"

    def test_query_in_document_order(self):
        doc = parse(self.HTML)
        assert [node.name for node in query(doc, "h[1-6]")] == ["h1", "h2"]

    def test_query_ignoring_case(self):
        doc = parse(self.HTML)
        assert [node.name for node in query(doc, "h[1-6]", case_sensitive=False)] == ["h1", "h2", "H3"]

    def test_query_includes_tag_root(self):
        div = parse(self.HTML).tag_nodes[0].tag_nodes[1]
        assert [node.name for node in query(div, "div|h2")] == ["div", "h2"]

    def test_query_no_match(self):
        assert query(parse(self.HTML), "table") == []

    def test_query_method(self):
        doc = LenientHTML(self.HTML)
        assert [node.content for node in doc.query("h.")] == ["a", "b"]

    def test_query_invalid_pattern(self):
        with self.assertRaises(SelectorError):
            query(parse(self.HTML), "*")


if __name__ == "__main__":
    unittest.main()
