"""Tests for HTML escaping, stripping and page templates."""

import pytest

from fileconverter.converters.markup import (
    document_page,
    escape_html,
    strip_html,
    table_html,
    table_page,
    text_page,
    unescape_html,
)


class TestEscape:
    def test_escapes_special_characters(self):
        assert escape_html("""<a href="x">Tom & Jerry's</a>""") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#039;s&lt;/a&gt;"
        )

    @pytest.mark.parametrize(
        "text",
        ["& < > \" '", "a && b", "&amp; &lt; &gt; &quot; &#039;", "if (a < b && c > d) { say('hi') }", ""],
    )
    def test_round_trip(self, text):
        assert unescape_html(escape_html(text)) == text

    def test_unescape_known_entities(self):
        assert unescape_html("&lt;b&gt; &amp; &quot;q&quot; &#39;s&#039;") == "<b> & \"q\" 's'"

    def test_unescape_nbsp_is_space(self):
        assert unescape_html("a&nbsp;b") == "a b"

    def test_unescape_leaves_unknown_entities(self):
        assert unescape_html("&copy; &eacute;") == "&copy; &eacute;"


class TestStripHtml:
    def test_simple_paragraph(self):
        assert strip_html("<p>Hi &amp; Bye</p>") == "Hi & Bye"

    def test_removes_script_and_style_blocks(self):
        html = (
            "<html><head><style>p { color: red; }</style>"
            "<SCRIPT type='text/javascript'>var x = '<b>';</SCRIPT></head>"
            "<body><h1>Title</h1><p>Body</p><script>alert(1)</script></body></html>"
        )
        assert strip_html(html) == "TitleBody"

    def test_collapses_whitespace(self):
        assert strip_html("<div>\n  one\n\n\t<span>two</span>  </div>") == "one two"

    def test_script_removal_is_non_greedy(self):
        html = "<script>a()</script>keep<script>b()</script>"
        assert strip_html(html) == "keep"


class TestPages:
    def test_text_page_uses_pre_block(self):
        page = text_page("hello\n<world>")
        assert page.startswith("<!DOCTYPE html>")
        assert "<pre>hello\n&lt;world&gt;</pre>" in page

    def test_document_page_inserts_fragment_as_markup(self):
        page = document_page("<p><strong>Bold</strong></p>")
        assert "<p><strong>Bold</strong></p>" in page
        assert "<pre>" not in page

    def test_table_html_header_row(self):
        html = table_html([["a", "b"], ["1", "<2>"]])
        assert "<tr><th>a</th><th>b</th></tr>" in html
        assert "<tr><td>1</td><td>&lt;2&gt;</td></tr>" in html

    def test_table_page_styling(self):
        page = table_page([["h"]], "Converted CSV Data")
        assert "<h1>Converted CSV Data</h1>" in page
        assert "tr:nth-child(even)" in page
        assert "font-weight: bold" in page
