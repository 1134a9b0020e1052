"""
Inline markup tests

Tests styled spans, nesting, links, and the TextExtra fallback for
markup that is never closed.
"""

from todofile.lib.tokenizer import spans_lex
from todofile.models.document import spans_walkLinks
from todofile.models.tokens import (
    Normal,
    Verbatim,
    Underline,
    Crossed,
    Bold,
    Italic,
    Link,
    Handler,
    TextExtra,
)


class TestStyledSpans:
    """Test the five styled delimiters"""

    def test_plain(self):
        assert spans_lex("plain words") == [Normal("plain words")]

    def test_bold(self):
        assert spans_lex("*bold*") == [Bold([Normal("bold")])]

    def test_verbatim(self):
        assert spans_lex("`code`") == [Verbatim([Normal("code")])]

    def test_all_styles(self):
        assert spans_lex("_u_ -c- /i/") == [
            Underline([Normal("u")]),
            Normal(" "),
            Crossed([Normal("c")]),
            Normal(" "),
            Italic([Normal("i")]),
        ]

    def test_nesting(self):
        assert spans_lex("*a _b_ c*") == [
            Bold([Normal("a "), Underline([Normal("b")]), Normal(" c")])
        ]

    def test_verbatim_content_is_lexed(self):
        """Verbatim is a style like the others; its content is still markup"""
        assert spans_lex("`a*b*`") == [Verbatim([Normal("a"), Bold([Normal("b")])])]

    def test_stops_at_newline(self):
        assert spans_lex("one\ntwo") == [Normal("one")]


class TestUnterminated:
    """Unclosed delimiters degrade to TextExtra instead of failing"""

    def test_unterminated_verbatim(self):
        assert spans_lex("`abc") == [TextExtra("`", [Normal("abc")])]

    def test_unterminated_before_newline(self):
        assert spans_lex("`abc\nmore`") == [TextExtra("`", [Normal("abc")])]

    def test_lone_delimiter_gets_empty_child(self):
        assert spans_lex("*") == [TextExtra("*", [Normal("")])]

    def test_doubled_delimiter(self):
        """The second '*' cannot close an empty span, so it opens another"""
        assert spans_lex("**") == [TextExtra("*", [TextExtra("*", [Normal("")])])]

    def test_hyphenated_word(self):
        assert spans_lex("well-known fact") == [
            Normal("well"),
            TextExtra("-", [Normal("known fact")]),
        ]

    def test_closed_inside_unclosed(self):
        assert spans_lex("*a /b/") == [
            TextExtra("*", [Normal("a "), Italic([Normal("b")])])
        ]

    def test_deep_nesting(self):
        """Thousands of open spans do not exhaust the stack"""
        spans = spans_lex("*" * 5000)
        assert len(spans) == 1
        assert isinstance(spans[0], TextExtra)


class TestLinks:
    """Test |name[handler:path]| links"""

    def test_link(self):
        assert spans_lex("|Site[open:https://x]|") == [
            Link(name="Site", handler=Handler("open"), path="https://x")
        ]

    def test_link_handler_unclassified(self):
        """The tokenizer does not know the config"""
        link = spans_lex("|Site[open:x]|")[0]
        assert link.handler.known is None

    def test_link_in_text(self):
        assert spans_lex("see |Site[open:x]| now") == [
            Normal("see "),
            Link(name="Site", handler=Handler("open"), path="x"),
            Normal(" now"),
        ]

    def test_link_inside_bold(self):
        assert spans_lex("*|n[h:p]|*") == [
            Bold([Link(name="n", handler=Handler("h"), path="p")])
        ]

    def test_path_keeps_markup_characters(self):
        link = spans_lex("|Doc[view:/tmp/a_b*c]|")[0]
        assert link.path == "/tmp/a_b*c"

    def test_unterminated_link(self):
        spans = spans_lex("|Site[open:https://x")
        assert spans[0] == TextExtra("|", [Normal("Site[open:https:")])
        assert list(spans_walkLinks(spans)) == []

    def test_missing_closing_pipe(self):
        assert spans_lex("|a[b:c]x") == [TextExtra("|", [Normal("a[b:c]x")])]

    def test_newline_inside_link(self):
        spans = spans_lex("|a[b:c\n]|")
        assert list(spans_walkLinks(spans)) == []

    def test_pipe_pairs_without_brackets(self):
        """A failed '|' takes exactly one child"""
        assert spans_lex("|a|b") == [
            TextExtra("|", [Normal("a")]),
            TextExtra("|", [Normal("b")]),
        ]
