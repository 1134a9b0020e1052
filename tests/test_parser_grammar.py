"""
Parser grammar tests

Tests document structure, todo state resolution against the alias table,
link handler classification and the rule predicates.
"""

from collections import deque

import pytest

from todofile.config import TodoConfig
from todofile.lib.parser import (
    Parser,
    document_parse,
    heading_check,
    todo_check,
    todoState_check,
    bullet_check,
    text_check,
)
from todofile.lib.tokenizer import tokens_lex
from todofile.models.tokens import Token, TokenKind, Normal, Bold, Link, Handler
from todofile.models.document import File, Heading, Todo, Bullet, Text, Defined, Other


@pytest.fixture
def config():
    return TodoConfig(
        todo_state={"x": "DONE", "~": "WAITING"},
        handlers={"open": "xdg-open {path}"},
    )


class TestStructure:
    """Test headings and their bodies"""

    def test_empty_document(self):
        assert document_parse("") == File(headings=[])

    def test_heading_only(self):
        assert document_parse("# Work\n") == File(headings=[Heading(name="Work", body=[])])

    def test_heading_at_end_of_input(self):
        assert document_parse("# Work") == File(headings=[Heading(name="Work", body=[])])

    def test_mixed_body(self):
        document = document_parse("# Work\n[y] ship\n- call Bob\nnotes here\n")
        assert document.headings[0].body == [
            Todo(state=Other("y"), description=Text([Normal("ship")])),
            Bullet(text=Text([Normal("call Bob")])),
            Text([Normal("notes here")]),
        ]

    def test_last_line_without_newline(self):
        document = document_parse("# Work\n- call Bob")
        assert document.headings[0].body == [Bullet(text=Text([Normal("call Bob")]))]

    def test_several_headings(self):
        document = document_parse("# A\n- a\n\n# B\n- b\n")
        assert [heading.name for heading in document.headings] == ["A", "B"]
        assert document.headings[1].body == [Bullet(text=Text([Normal("b")]))]

    def test_extra_blank_lines(self):
        """Blank lines before and between headings are skipped"""
        document = document_parse("\n\n# A\n- a\n\n\n\n# B\n")
        assert [heading.name for heading in document.headings] == ["A", "B"]

    def test_inline_markup_kept(self):
        document = document_parse("# A\n[x] *ship* it\n")
        todo = document.headings[0].body[0]
        assert todo.description == Text([Bold([Normal("ship")]), Normal(" it")])

    def test_todo_without_description(self):
        document = document_parse("# A\n[y]\n")
        assert document.headings[0].body[0] == Todo(state=Other("y"), description=Text([]))

    def test_todos_collected(self):
        document = document_parse("# A\n[y] one\n- b\n\n# B\n[] two\n")
        assert len(document.todos()) == 2


class TestTodoStates:
    """Test state resolution against the alias table"""

    def test_alias_hit(self, config):
        document = document_parse("# Day\n[x] buy milk\n", config)
        todo = document.headings[0].body[0]
        assert todo == Todo(state=Defined("DONE"), description=Text([Normal("buy milk")]))

    def test_alias_miss(self, config):
        document = document_parse("# Day\n[y] buy milk\n", config)
        assert document.headings[0].body[0].state == Other("y")

    def test_empty_brackets(self, config):
        document = document_parse("# Day\n[] buy milk\n", config)
        assert document.headings[0].body[0].state is None

    def test_space_in_brackets(self, config):
        """Leading spaces are skipped, so '[ ]' is empty"""
        document = document_parse("# Day\n[ ] buy milk\n", config)
        assert document.headings[0].body[0].state is None

    def test_symbol_alias(self, config):
        document = document_parse("# Day\n[~] call back\n", config)
        assert document.headings[0].body[0].state == Defined("WAITING")

    def test_no_config(self):
        document = document_parse("# Day\n[x] buy milk\n")
        assert document.headings[0].body[0].state == Other("x")


class TestLinkClassification:
    """Test link handlers checked against configured names"""

    def test_known_and_unknown(self, config):
        document = document_parse("# L\n- |Site[open:https://x]| and |Doc[view:/tmp/a]|\n", config)
        links = document.links()
        assert links == [
            Link(name="Site", handler=Handler("open", known=True), path="https://x"),
            Link(name="Doc", handler=Handler("view", known=False), path="/tmp/a"),
        ]

    def test_nested_link(self, config):
        document = document_parse("# L\nsee *|S[open:x]|*\n", config)
        links = document.links()
        assert len(links) == 1
        assert links[0].handler.known is True

    def test_link_in_todo(self, config):
        document = document_parse("# L\n[x] read |Doc[view:/a]|\n", config)
        assert document.links()[0].handler == Handler("view", known=False)

    def test_parser_reusable(self, config):
        parser = Parser(config)
        source = "# L\n- |Site[open:x]|\n"
        assert parser.parse(tokens_lex(source)) == parser.parse(tokens_lex(source))


class TestPredicates:
    """Test rule choice predicates"""

    def test_empty(self):
        tokens = deque()
        assert not heading_check(tokens)
        assert not todo_check(tokens)
        assert not todoState_check(tokens)
        assert not bullet_check(tokens)
        assert not text_check(tokens)

    def test_single_token(self):
        assert heading_check(deque([Token(TokenKind.HEADING, text="A")]))
        assert todo_check(deque([Token(TokenKind.BRACKET_OPEN)]))
        assert bullet_check(deque([Token(TokenKind.BULLET)]))
        assert text_check(deque([Token(TokenKind.TEXT)]))

    def test_state_needs_closing_bracket(self):
        assert todoState_check(deque([Token(TokenKind.INSIDE, text="x"), Token(TokenKind.BRACKET_CLOSE)]))
        assert not todoState_check(deque([Token(TokenKind.INSIDE, text="x")]))
        assert not todoState_check(deque([Token(TokenKind.INSIDE, text="x"), Token(TokenKind.TEXT)]))

    def test_predicates_do_not_consume(self):
        tokens = deque([Token(TokenKind.BRACKET_OPEN)])
        todo_check(tokens)
        assert len(tokens) == 1
